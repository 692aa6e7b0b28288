"""Hazard registry domain models.

This file defines the core enums and data structures of the registry.
Records are held in process memory only; nothing here touches storage.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


DEFAULT_DESCRIPTION = "No details provided - standard protocol in effect"
DEFAULT_LOCATION = "Unknown location - exercise extra caution"
DEFAULT_CONSEQUENCE_RATING = 5


class RiskLevel(Enum):
    """Risk classification of a hazard, most severe first."""
    EXTREME = "extreme"     # Evacuation recommended
    HIGH = "high"           # Restricted access
    MODERATE = "moderate"   # Protective equipment mandatory
    LOW = "low"             # Standard protocol

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


class HazardCategory(Enum):
    """Hazard categories - determine protective equipment."""
    CHEMICAL = "chemical"
    ELECTRICAL = "electrical"
    MECHANICAL = "mechanical"
    BIOLOGICAL = "biological"
    RADIATION = "radiation"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


class HazardStatus(Enum):
    """Lifecycle status of a tracked hazard."""
    ACTIVE = "active"
    CONTAINED = "contained"
    MITIGATED = "mitigated"
    ELIMINATED = "eliminated"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


CRITICAL_RISK_LEVELS = frozenset({RiskLevel.EXTREME, RiskLevel.HIGH})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with milliseconds and a Z suffix.

    Example:
        >>> format_timestamp(datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2026-01-02T03:04:05.000Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def reporter_label(clearance_level: int) -> str:
    """Label stored in ``reported_by`` for a record created at a clearance."""
    return f"Security Operator #{clearance_level}"


@dataclass
class HazardRecord:
    """Mutable record describing one tracked hazard.

    Only ``status`` and ``last_inspection`` change after creation, and only
    through the registry's status-update and inspection actions.
    """
    id: str
    title: str
    description: str
    risk_level: RiskLevel
    category: HazardCategory
    location: str
    consequence_rating: int
    date_reported: datetime
    last_inspection: datetime
    reporter_clearance: int
    status: HazardStatus = HazardStatus.ACTIVE
    protective_equipment: List[str] = field(default_factory=list)
    containment_procedures: List[str] = field(default_factory=list)

    @property
    def reported_by(self) -> str:
        return reporter_label(self.reporter_clearance)

    @property
    def is_critical(self) -> bool:
        return self.risk_level in CRITICAL_RISK_LEVELS

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire shape shared by both APIs."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "riskLevel": self.risk_level.value,
            "category": self.category.value,
            "location": self.location,
            "consequenceRating": self.consequence_rating,
            "dateReported": format_timestamp(self.date_reported),
            "lastInspection": format_timestamp(self.last_inspection),
            "reportedBy": self.reported_by,
            "status": self.status.value,
            "protectiveEquipment": list(self.protective_equipment),
            "containmentProcedures": list(self.containment_procedures),
        }


class AuditOperation(Enum):
    """Operation tags written to the security audit log.

    Values are the tags exposed through ``SecurityLog.operation``.
    """
    QUERY = "CONSULTA"
    REGISTER = "REGISTRO"
    REMOVAL = "REMOÇÃO"
    STATUS_UPDATE = "ATUALIZAÇÃO"
    INSPECTION = "INSPEÇÃO"
    ADMIN = "ADMIN"
    ACCESS_DENIED = "ACESSO_NEGADO"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable entry of the security audit log.

    ``sequence`` is the append position; it orders entries that share a
    timestamp.
    """
    timestamp: datetime
    operation: AuditOperation
    details: str
    operator_level: int
    danger_id: Optional[str] = None
    sequence: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": format_timestamp(self.timestamp),
            "operation": self.operation.value,
            "dangerId": self.danger_id,
            "details": self.details,
            "operatorLevel": self.operator_level,
        }
