"""Policy Service: clearance and field rules shared by both API surfaces.

The REST and GraphQL surfaces never compare clearance levels themselves;
every check goes through ``authorize`` with the single threshold table in
``config``.
"""

from .config import ClearanceThresholds, FieldRules, Operation, DEFAULT_THRESHOLDS
from .authorization import (
    AuthorizationDecision,
    authorize,
    raise_for_decision,
    required_level,
)
from .validation import (
    ValidationResult,
    check_consistency,
    parse_category,
    parse_risk_level,
    validate_hazard_fields,
    validate_limit,
    validate_status,
)

__all__ = [
    "ClearanceThresholds",
    "FieldRules",
    "Operation",
    "DEFAULT_THRESHOLDS",
    "AuthorizationDecision",
    "authorize",
    "raise_for_decision",
    "required_level",
    "ValidationResult",
    "check_consistency",
    "parse_category",
    "parse_risk_level",
    "validate_hazard_fields",
    "validate_limit",
    "validate_status",
]
