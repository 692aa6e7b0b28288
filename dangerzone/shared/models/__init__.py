"""Shared domain models for the DANGER ZONE registry."""
from .hazard import (
    RiskLevel,
    HazardCategory,
    HazardStatus,
    HazardRecord,
    AuditOperation,
    AuditLogEntry,
    CRITICAL_RISK_LEVELS,
    DEFAULT_CONSEQUENCE_RATING,
    DEFAULT_DESCRIPTION,
    DEFAULT_LOCATION,
    format_timestamp,
    reporter_label,
    utc_now,
)

__all__ = [
    "RiskLevel",
    "HazardCategory",
    "HazardStatus",
    "HazardRecord",
    "AuditOperation",
    "AuditLogEntry",
    "CRITICAL_RISK_LEVELS",
    "DEFAULT_CONSEQUENCE_RATING",
    "DEFAULT_DESCRIPTION",
    "DEFAULT_LOCATION",
    "format_timestamp",
    "reporter_label",
    "utc_now",
]
