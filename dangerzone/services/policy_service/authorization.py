"""Authorization policy - clearance thresholds per operation.

A pure mapping from (operation, presented clearance, risk level) to an
allow/deny decision. Callers decide what to do with a denial; nothing here
mutates state or logs to the audit trail.
"""
from dataclasses import dataclass
from typing import Optional

from dangerzone.shared.errors import (
    InsufficientClearanceError,
    MissingCredentialError,
)
from dangerzone.shared.models import RiskLevel
from .config import (
    ClearanceThresholds,
    DEFAULT_THRESHOLDS,
    OPERATION_DESCRIPTIONS,
    Operation,
)

REASON_GRANTED = "granted"
REASON_MISSING_CREDENTIAL = "missing_credential"
REASON_INSUFFICIENT_CLEARANCE = "insufficient_clearance"


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of an authorization check.

    Attributes:
        operation: Operation that was checked
        allowed: True if the caller may proceed
        required_level: Minimum clearance for this operation and risk level
        provided_level: Clearance presented (0 when missing)
        reason: granted, missing_credential or insufficient_clearance
    """
    operation: Operation
    allowed: bool
    required_level: int
    provided_level: int
    reason: str

    @property
    def missing_credential(self) -> bool:
        return self.reason == REASON_MISSING_CREDENTIAL


def _coerce_risk_level(risk_level) -> Optional[RiskLevel]:
    if risk_level is None or isinstance(risk_level, RiskLevel):
        return risk_level
    try:
        return RiskLevel(risk_level)
    except (TypeError, ValueError):
        # Unknown values are rejected later by validation
        return None


def required_level(
    operation: Operation,
    risk_level=None,
    thresholds: ClearanceThresholds = DEFAULT_THRESHOLDS,
) -> int:
    """Minimum clearance for ``operation`` on a record of ``risk_level``.

    Args:
        operation: Operation being attempted
        risk_level: RiskLevel (or its string value) of the record or filter
        thresholds: Threshold table

    Returns:
        Required clearance level
    """
    level = thresholds.base_table()[operation]
    if _coerce_risk_level(risk_level) is RiskLevel.EXTREME:
        level = max(level, thresholds.extreme_table().get(operation, level))
    return level


def authorize(
    operation: Operation,
    presented_level: Optional[int],
    risk_level=None,
    thresholds: ClearanceThresholds = DEFAULT_THRESHOLDS,
) -> AuthorizationDecision:
    """Decide whether a caller may perform an operation.

    Args:
        operation: Operation being attempted
        presented_level: Caller clearance, None when no credential was sent
        risk_level: Risk level of the record or filter involved, if any
        thresholds: Threshold table

    Returns:
        AuthorizationDecision; ``allowed`` iff presented >= required
    """
    required = required_level(operation, risk_level, thresholds)

    if presented_level is None:
        return AuthorizationDecision(
            operation=operation,
            allowed=False,
            required_level=required,
            provided_level=0,
            reason=REASON_MISSING_CREDENTIAL,
        )

    allowed = presented_level >= required
    return AuthorizationDecision(
        operation=operation,
        allowed=allowed,
        required_level=required,
        provided_level=presented_level,
        reason=REASON_GRANTED if allowed else REASON_INSUFFICIENT_CLEARANCE,
    )


def raise_for_decision(decision: AuthorizationDecision) -> None:
    """Raise the matching error for a denied decision.

    Raises:
        MissingCredentialError: No clearance presented
        InsufficientClearanceError: Clearance below the required level
    """
    if decision.allowed:
        return
    if decision.missing_credential:
        raise MissingCredentialError()
    raise InsufficientClearanceError(
        required_level=decision.required_level,
        provided_level=decision.provided_level,
        operation=OPERATION_DESCRIPTIONS[decision.operation],
    )
