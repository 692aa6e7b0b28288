"""Error taxonomy shared by the registry and both API surfaces.

Every failure a caller can see maps to one ``ErrorCode``. All of them are
terminal for the current request; none are retried.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from dangerzone.shared.models import format_timestamp, utc_now


class ErrorCode(Enum):
    """Client-facing error codes. Values are part of the wire contract."""
    MISSING_CREDENTIAL = "DANGER_AUTH_001"
    INSUFFICIENT_CLEARANCE = "DANGER_AUTH_002"
    VALIDATION_FAILED = "DANGER_VAL_001"
    DATA_INCONSISTENCY = "DANGER_VAL_002"
    NOT_FOUND = "DANGER_404"
    SYSTEM_FAILURE = "DANGER_SYS_001"


class HazardError(Exception):
    """Base exception for registry errors."""
    code: ErrorCode = ErrorCode.SYSTEM_FAILURE
    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        """Extra payload fields for this error type."""
        return {}

    def to_payload(self, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
        payload = {
            "code": self.code.value,
            "message": self.message,
            "timestamp": format_timestamp(timestamp or utc_now()),
        }
        payload.update(self.details())
        return payload


class MissingCredentialError(HazardError):
    """No clearance was presented with the request."""
    code = ErrorCode.MISSING_CREDENTIAL
    http_status = 401

    def __init__(self, message: str = "ACCESS DENIED: security clearance not provided"):
        super().__init__(message)


class InsufficientClearanceError(HazardError):
    """Presented clearance is below the level the operation requires."""
    code = ErrorCode.INSUFFICIENT_CLEARANCE
    http_status = 403

    def __init__(self, required_level: int, provided_level: int, operation: str = "this operation"):
        super().__init__(
            f"ACCESS DENIED: level {required_level} required to {operation}, "
            f"provided: {provided_level}"
        )
        self.required_level = required_level
        self.provided_level = provided_level

    def details(self) -> Dict[str, Any]:
        return {
            "requiredLevel": self.required_level,
            "providedLevel": self.provided_level,
        }


class ValidationFailedError(HazardError):
    """A proposed field value was rejected."""
    code = ErrorCode.VALIDATION_FAILED
    http_status = 400

    def __init__(self, field: str, reason: str, valid_values: Optional[List[str]] = None):
        super().__init__(f"INVALID DATA: {reason}")
        self.field = field
        self.reason = reason
        self.valid_values = valid_values

    def details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {"field": self.field}
        if self.valid_values is not None:
            details["validValues"] = list(self.valid_values)
        return details


class DataInconsistencyError(HazardError):
    """Fields are individually valid but contradict each other."""
    code = ErrorCode.DATA_INCONSISTENCY
    http_status = 400

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(f"DATA INCONSISTENCY: {reason}")
        self.reason = reason
        self.field = field

    def details(self) -> Dict[str, Any]:
        return {"field": self.field} if self.field else {}


class NotFoundError(HazardError):
    """Hazard record or route does not exist."""
    code = ErrorCode.NOT_FOUND
    http_status = 404

    def __init__(self, hazard_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message or "RECORD NOT FOUND: hazard id is invalid or was removed"
        )
        self.hazard_id = hazard_id


class SystemFailureError(HazardError):
    """Catch-all for unexpected failures. Carries no internal detail."""
    code = ErrorCode.SYSTEM_FAILURE
    http_status = 500

    def __init__(self, message: str = "CRITICAL FAILURE in the hazard control system"):
        super().__init__(message)
