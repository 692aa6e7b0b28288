"""Clearance thresholds and field rules for the hazard registry.

Both API surfaces read these values through the policy functions; no
threshold is repeated in transport code.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping


class Operation(Enum):
    """Registry operations gated by clearance."""
    LIST = "list"
    GET = "get"
    FILTER = "filter"
    READ_STATS = "read_stats"
    READ_AUDIT_LOG = "read_audit_log"
    CREATE = "create"
    UPDATE_STATUS = "update_status"
    RECORD_INSPECTION = "record_inspection"
    DELETE = "delete"


@dataclass(frozen=True)
class ClearanceThresholds:
    """Minimum clearance per operation.

    ``EXTREME_*`` values apply when the record (or filter) involved has
    risk level ``extreme``.
    """
    READ: int = 1
    EXTREME_FILTER: int = 2
    READ_STATS: int = 2
    READ_AUDIT_LOG: int = 5
    CREATE: int = 2
    EXTREME_CREATE: int = 3
    UPDATE_STATUS: int = 3
    RECORD_INSPECTION: int = 2
    DELETE: int = 4
    EXTREME_DELETE: int = 5

    def base_table(self) -> Mapping[Operation, int]:
        return {
            Operation.LIST: self.READ,
            Operation.GET: self.READ,
            Operation.FILTER: self.READ,
            Operation.READ_STATS: self.READ_STATS,
            Operation.READ_AUDIT_LOG: self.READ_AUDIT_LOG,
            Operation.CREATE: self.CREATE,
            Operation.UPDATE_STATUS: self.UPDATE_STATUS,
            Operation.RECORD_INSPECTION: self.RECORD_INSPECTION,
            Operation.DELETE: self.DELETE,
        }

    def extreme_table(self) -> Mapping[Operation, int]:
        return {
            Operation.FILTER: self.EXTREME_FILTER,
            Operation.CREATE: self.EXTREME_CREATE,
            Operation.DELETE: self.EXTREME_DELETE,
        }


DEFAULT_THRESHOLDS = ClearanceThresholds()

# Phrases used in denial messages
OPERATION_DESCRIPTIONS: Dict[Operation, str] = {
    Operation.LIST: "list hazards",
    Operation.GET: "read a hazard",
    Operation.FILTER: "filter hazards",
    Operation.READ_STATS: "read hazard statistics",
    Operation.READ_AUDIT_LOG: "read security logs",
    Operation.CREATE: "register a hazard",
    Operation.UPDATE_STATUS: "update hazard status",
    Operation.RECORD_INSPECTION: "record an inspection",
    Operation.DELETE: "remove a hazard",
}


@dataclass(frozen=True)
class FieldRules:
    """Field constraints for new hazard records."""
    MIN_TITLE_LENGTH: int = 3
    MIN_EXTREME_LOCATION_LENGTH: int = 5
    MIN_CONSEQUENCE_RATING: int = 1
    MAX_CONSEQUENCE_RATING: int = 10
    MIN_EXTREME_CONSEQUENCE_RATING: int = 7


DEFAULT_FIELD_RULES = FieldRules()
