"""Validation policy for proposed hazard fields.

Rules are checked in a fixed order and the first failure wins:

1. title present, trimmed length >= 3
2. riskLevel present and known
3. category present and known
4. extreme hazards need a location of trimmed length >= 5
5. consequenceRating, when given, is an integer 1-10
6. protectiveEquipment / containmentProcedures, when given, are string lists
7. description and location, when given, are text

The extreme-rating rule is a separate consistency check
(``check_consistency``) because it is reported as a data inconsistency
rather than a field error.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from dangerzone.shared.errors import DataInconsistencyError, ValidationFailedError
from dangerzone.shared.models import (
    HazardCategory,
    HazardStatus,
    RiskLevel,
)
from .config import DEFAULT_FIELD_RULES, FieldRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Accept/reject outcome with field-level detail."""
    valid: bool
    field: Optional[str] = None
    reason: Optional[str] = None
    valid_values: Optional[List[str]] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def reject(
        cls,
        field: str,
        reason: str,
        valid_values: Optional[List[str]] = None,
    ) -> "ValidationResult":
        return cls(valid=False, field=field, reason=reason, valid_values=valid_values)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationFailedError(
                field=self.field,
                reason=self.reason,
                valid_values=self.valid_values,
            )


def _trimmed_length(value: Any) -> int:
    if not isinstance(value, str):
        return 0
    return len(value.strip())


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def validate_hazard_fields(
    fields: Mapping[str, Any],
    rules: FieldRules = DEFAULT_FIELD_RULES,
) -> ValidationResult:
    """Validate proposed fields of a new hazard.

    Args:
        fields: camelCase field mapping as received from either API
        rules: Field constraints

    Returns:
        ValidationResult for the first failing rule, or ok
    """
    if _trimmed_length(fields.get("title")) < rules.MIN_TITLE_LENGTH:
        return ValidationResult.reject(
            "title",
            f"hazard title must contain at least {rules.MIN_TITLE_LENGTH} characters",
        )

    risk_level = fields.get("riskLevel")
    if risk_level not in RiskLevel.values():
        return ValidationResult.reject(
            "riskLevel", "invalid risk level", RiskLevel.values()
        )

    if fields.get("category") not in HazardCategory.values():
        return ValidationResult.reject(
            "category", "invalid hazard category", HazardCategory.values()
        )

    if (
        risk_level == RiskLevel.EXTREME.value
        and _trimmed_length(fields.get("location")) < rules.MIN_EXTREME_LOCATION_LENGTH
    ):
        return ValidationResult.reject(
            "location", "extreme hazards require a detailed location"
        )

    rating = fields.get("consequenceRating")
    if rating is not None and not (
        _is_int(rating)
        and rules.MIN_CONSEQUENCE_RATING <= rating <= rules.MAX_CONSEQUENCE_RATING
    ):
        return ValidationResult.reject(
            "consequenceRating",
            f"consequence rating must be an integer between "
            f"{rules.MIN_CONSEQUENCE_RATING} and {rules.MAX_CONSEQUENCE_RATING}",
        )

    for list_field in ("protectiveEquipment", "containmentProcedures"):
        value = fields.get(list_field)
        if value is not None and not _is_string_list(value):
            return ValidationResult.reject(list_field, f"{list_field} must be a list of strings")

    for text_field in ("description", "location"):
        value = fields.get(text_field)
        if value is not None and not isinstance(value, str):
            return ValidationResult.reject(text_field, f"{text_field} must be text")

    return ValidationResult.ok()


def check_consistency(
    risk_level: RiskLevel,
    consequence_rating: int,
    rules: FieldRules = DEFAULT_FIELD_RULES,
) -> None:
    """Enforce extreme risk => consequence rating >= 7.

    Raises:
        DataInconsistencyError: If an extreme hazard has a lower rating
    """
    if (
        risk_level is RiskLevel.EXTREME
        and consequence_rating < rules.MIN_EXTREME_CONSEQUENCE_RATING
    ):
        logger.warning(
            "HAZARD_DATA_INCONSISTENT",
            extra={
                "risk_level": risk_level.value,
                "consequence_rating": consequence_rating,
            }
        )
        raise DataInconsistencyError(
            f"extreme hazards must have a consequence rating of "
            f"{rules.MIN_EXTREME_CONSEQUENCE_RATING}-{rules.MAX_CONSEQUENCE_RATING}",
            field="consequenceRating",
        )


def validate_status(value: Any) -> HazardStatus:
    """Parse a status update value.

    Raises:
        ValidationFailedError: If the value is not a known status
    """
    try:
        return HazardStatus(value)
    except (TypeError, ValueError):
        raise ValidationFailedError(
            field="status",
            reason="invalid hazard status",
            valid_values=HazardStatus.values(),
        ) from None


def validate_limit(value: Any) -> Optional[int]:
    """Parse an optional audit-log read limit.

    Raises:
        ValidationFailedError: If the value is not a non-negative integer
    """
    if value is None:
        return None
    if not _is_int(value) or value < 0:
        raise ValidationFailedError(field="limit", reason="limit must be a non-negative integer")
    return value


def parse_risk_level(value: Optional[str], field: str = "riskLevel") -> Optional[RiskLevel]:
    """Parse an optional risk level filter value."""
    if value is None or value == "":
        return None
    try:
        return RiskLevel(value)
    except ValueError:
        raise ValidationFailedError(
            field=field, reason="invalid risk level", valid_values=RiskLevel.values()
        ) from None


def parse_category(value: Optional[str], field: str = "category") -> Optional[HazardCategory]:
    """Parse an optional category filter value."""
    if value is None or value == "":
        return None
    try:
        return HazardCategory(value)
    except ValueError:
        raise ValidationFailedError(
            field=field, reason="invalid hazard category", valid_values=HazardCategory.values()
        ) from None
