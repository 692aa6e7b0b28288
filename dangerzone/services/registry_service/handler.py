"""Hazard registry - orchestrates every registry operation.

Both API surfaces call into ``HazardRegistry``; each operation runs the same
sequence: authorize -> validate (writes) -> store -> audit. A denied or
invalid request never reaches the store.
"""
import logging
import threading
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from dangerzone.shared.database import (
    HazardQuery,
    HazardRepository,
    HazardStatistics,
    InMemoryHazardRepository,
)
from dangerzone.shared.errors import NotFoundError, ValidationFailedError
from dangerzone.shared.models import (
    AuditLogEntry,
    AuditOperation,
    DEFAULT_CONSEQUENCE_RATING,
    DEFAULT_DESCRIPTION,
    DEFAULT_LOCATION,
    HazardCategory,
    HazardRecord,
    HazardStatus,
    RiskLevel,
    utc_now,
)
from dangerzone.services.audit_service import SecurityAuditLog
from dangerzone.services.policy_service import (
    AuthorizationDecision,
    ClearanceThresholds,
    DEFAULT_THRESHOLDS,
    Operation,
    authorize,
    check_consistency,
    raise_for_decision,
    validate_hazard_fields,
    validate_limit,
    validate_status,
)

logger = logging.getLogger(__name__)


ALERT_MESSAGES: Dict[RiskLevel, str] = {
    RiskLevel.EXTREME: "CRITICAL HAZARD REGISTERED - EVACUATION RECOMMENDED",
    RiskLevel.HIGH: "SEVERE HAZARD REGISTERED - RESTRICTED ACCESS",
    RiskLevel.MODERATE: "MODERATE HAZARD REGISTERED - PROTECTIVE EQUIPMENT MANDATORY",
    RiskLevel.LOW: "LOW-LEVEL HAZARD REGISTERED - STANDARD PROTOCOL",
}

ALERT_LABELS: Dict[RiskLevel, str] = {
    RiskLevel.EXTREME: "CRITICAL",
    RiskLevel.HIGH: "SEVERE",
    RiskLevel.MODERATE: "MODERATE",
    RiskLevel.LOW: "LOW",
}


def alert_message(risk_level: RiskLevel) -> str:
    return ALERT_MESSAGES[risk_level]


class HazardRegistry:
    """Registry of hazard records gated by caller clearance.

    Holds one record store and one audit log. Each public method is
    serialized by a re-entrant lock, so find-then-mutate-then-log sequences
    are atomic even under a threaded server.
    """

    def __init__(
        self,
        repository: Optional[HazardRepository] = None,
        audit_log: Optional[SecurityAuditLog] = None,
        thresholds: ClearanceThresholds = DEFAULT_THRESHOLDS,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize registry with dependencies.

        Args:
            repository: Record store (in-memory by default)
            audit_log: Security audit log (new one by default)
            thresholds: Clearance threshold table
            clock: Timestamp source (injected for testing)
            id_factory: Record id generator (injected for testing)
        """
        self._clock = clock or utc_now
        self.repository = repository if repository is not None else InMemoryHazardRepository()
        self.audit_log = audit_log if audit_log is not None else SecurityAuditLog(clock=self._clock)
        self.thresholds = thresholds
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._lock = threading.RLock()

        logger.info(
            "HAZARD_REGISTRY_INITIALIZED",
            extra={"repository": type(self.repository).__name__}
        )

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def _authorize(
        self,
        operation: Operation,
        clearance: Optional[int],
        risk_level=None,
        danger_id: Optional[str] = None,
    ) -> AuthorizationDecision:
        """Check clearance, auditing and raising on denial."""
        decision = authorize(operation, clearance, risk_level, self.thresholds)
        if decision.allowed:
            return decision

        logger.warning(
            "AUTHORIZATION_DENIED",
            extra={
                "operation": operation.value,
                "reason": decision.reason,
                "required_level": decision.required_level,
                "provided_level": decision.provided_level,
                "danger_id": danger_id,
            }
        )
        self.audit_log.append(
            AuditOperation.ACCESS_DENIED,
            details=(
                f"{operation.value} denied ({decision.reason}): "
                f"required level {decision.required_level}, "
                f"provided {decision.provided_level}"
            ),
            operator_level=decision.provided_level,
            danger_id=danger_id,
        )
        raise_for_decision(decision)
        return decision

    def check_clearance(
        self,
        operation: Operation,
        clearance: Optional[int],
        danger_id: Optional[str] = None,
    ) -> AuthorizationDecision:
        """Check the base clearance for an operation before its input is parsed.

        Risk-dependent levels are checked again by the operation itself.

        Raises:
            MissingCredentialError, InsufficientClearanceError: Denied (audited)
        """
        with self._lock:
            return self._authorize(operation, clearance, danger_id=danger_id)

    def _require(self, hazard_id: str) -> HazardRecord:
        record = self.repository.find_by_id(hazard_id)
        if record is None:
            logger.info("HAZARD_NOT_FOUND", extra={"hazard_id": hazard_id})
            raise NotFoundError(hazard_id)
        return record

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_hazards(
        self,
        clearance: Optional[int],
        query: Optional[HazardQuery] = None,
    ) -> List[HazardRecord]:
        """List hazards, optionally filtered.

        Filtering on risk level ``extreme`` requires the elevated filter
        clearance.

        Args:
            clearance: Caller clearance
            query: Filter predicates (AND-combined)

        Returns:
            Matching records in insertion order
        """
        query = query or HazardQuery()
        operation = Operation.LIST if query.is_empty else Operation.FILTER

        with self._lock:
            decision = self._authorize(operation, clearance, query.risk_level)
            records = self.repository.filter(query.matches)
            self.audit_log.append(
                AuditOperation.QUERY,
                details=f"{len(records)} hazards retrieved ({query.describe()})",
                operator_level=decision.provided_level,
            )
        return records

    def get_hazard(self, hazard_id: str, clearance: Optional[int]) -> HazardRecord:
        """Fetch one hazard.

        Raises:
            NotFoundError: If no hazard has this id
        """
        with self._lock:
            decision = self._authorize(Operation.GET, clearance, danger_id=hazard_id)
            record = self._require(hazard_id)

            if record.risk_level is RiskLevel.EXTREME:
                logger.warning(
                    "HAZARD_EXTREME_ACCESSED",
                    extra={"hazard_id": hazard_id, "clearance": clearance}
                )

            self.audit_log.append(
                AuditOperation.QUERY,
                details=f"Hazard ID: {hazard_id} accessed",
                operator_level=decision.provided_level,
                danger_id=hazard_id,
            )
        return record

    def statistics(self, clearance: Optional[int]) -> HazardStatistics:
        with self._lock:
            decision = self._authorize(Operation.READ_STATS, clearance)
            stats = HazardStatistics.from_records(self.repository.all())
            self.audit_log.append(
                AuditOperation.QUERY,
                details="Hazard statistics accessed",
                operator_level=decision.provided_level,
            )
        return stats

    def security_logs(
        self,
        clearance: Optional[int],
        limit: Optional[int] = None,
    ) -> List[AuditLogEntry]:
        """Read the audit trail, newest first.

        The read itself is audited before the entries are collected, so it
        appears at the head of the result.
        """
        with self._lock:
            decision = self._authorize(Operation.READ_AUDIT_LOG, clearance)
            limit = validate_limit(limit)
            self.audit_log.append(
                AuditOperation.ADMIN,
                details="Security logs accessed",
                operator_level=decision.provided_level,
            )
            return self.audit_log.read(limit)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_hazard(
        self,
        fields: Mapping[str, Any],
        clearance: Optional[int],
    ) -> HazardRecord:
        """Register a new hazard.

        Args:
            fields: camelCase fields (title, description, riskLevel, category,
                location, consequenceRating, protectiveEquipment,
                containmentProcedures)
            clearance: Caller clearance

        Returns:
            The stored record

        Raises:
            MissingCredentialError, InsufficientClearanceError: Denied
            ValidationFailedError: A field rule failed
            DataInconsistencyError: Extreme hazard with rating below 7

        Logs:
            - HAZARD_CREATED: After the record is stored
        """
        if not isinstance(fields, Mapping):
            raise ValidationFailedError(field="body", reason="request body must be a JSON object")

        with self._lock:
            decision = self._authorize(Operation.CREATE, clearance, fields.get("riskLevel"))
            validate_hazard_fields(fields).raise_if_invalid()

            risk_level = RiskLevel(fields["riskLevel"])
            category = HazardCategory(fields["category"])
            rating = fields.get("consequenceRating")
            if rating is None:
                rating = DEFAULT_CONSEQUENCE_RATING
            check_consistency(risk_level, rating)

            now = self._clock()
            record = HazardRecord(
                id=self._id_factory(),
                title=fields["title"].strip(),
                description=fields.get("description") or DEFAULT_DESCRIPTION,
                risk_level=risk_level,
                category=category,
                location=fields.get("location") or DEFAULT_LOCATION,
                consequence_rating=rating,
                date_reported=now,
                last_inspection=now,
                reporter_clearance=decision.provided_level,
                status=HazardStatus.ACTIVE,
                protective_equipment=list(fields.get("protectiveEquipment") or []),
                containment_procedures=list(fields.get("containmentProcedures") or []),
            )
            self.repository.insert(record)

            self.audit_log.append(
                AuditOperation.REGISTER,
                details=(
                    f"{ALERT_LABELS[risk_level]} - {record.title} - "
                    f"Category: {category.value}"
                ),
                operator_level=decision.provided_level,
                danger_id=record.id,
            )

        logger.info(
            "HAZARD_CREATED",
            extra={
                "hazard_id": record.id,
                "risk_level": risk_level.value,
                "category": category.value,
                "clearance": decision.provided_level,
                "alert": ALERT_MESSAGES[risk_level],
            }
        )
        return record

    def delete_hazard(self, hazard_id: str, clearance: Optional[int]) -> HazardRecord:
        """Remove a hazard permanently.

        The base delete clearance is checked before the lookup; removing an
        extreme hazard then needs the elevated level.

        Returns:
            The removed record

        Raises:
            NotFoundError: If no hazard has this id
        """
        with self._lock:
            self._authorize(Operation.DELETE, clearance, danger_id=hazard_id)
            record = self._require(hazard_id)
            decision = self._authorize(
                Operation.DELETE, clearance, record.risk_level, danger_id=hazard_id
            )

            self.repository.remove(hazard_id)
            self.audit_log.append(
                AuditOperation.REMOVAL,
                details=(
                    f"Hazard removed: {record.title} - "
                    f"Level: {record.risk_level.value}"
                ),
                operator_level=decision.provided_level,
                danger_id=hazard_id,
            )

        logger.info(
            "HAZARD_REMOVED",
            extra={
                "hazard_id": hazard_id,
                "risk_level": record.risk_level.value,
                "clearance": decision.provided_level,
            }
        )
        return record

    def update_status(
        self,
        hazard_id: str,
        status,
        clearance: Optional[int],
    ) -> HazardRecord:
        """Move a hazard to a new status.

        Args:
            hazard_id: Hazard identifier
            status: HazardStatus or its string value
            clearance: Caller clearance
        """
        with self._lock:
            decision = self._authorize(Operation.UPDATE_STATUS, clearance, danger_id=hazard_id)
            new_status = validate_status(status)
            record = self._require(hazard_id)

            previous = record.status
            record.status = new_status
            self.audit_log.append(
                AuditOperation.STATUS_UPDATE,
                details=f"Status updated to: {new_status.value}",
                operator_level=decision.provided_level,
                danger_id=hazard_id,
            )

        logger.info(
            "HAZARD_STATUS_UPDATED",
            extra={
                "hazard_id": hazard_id,
                "from_status": previous.value,
                "to_status": new_status.value,
            }
        )
        return record

    def record_inspection(self, hazard_id: str, clearance: Optional[int]) -> HazardRecord:
        """Stamp ``last_inspection`` with the current time."""
        with self._lock:
            decision = self._authorize(
                Operation.RECORD_INSPECTION, clearance, danger_id=hazard_id
            )
            record = self._require(hazard_id)
            record.last_inspection = self._clock()
            self.audit_log.append(
                AuditOperation.INSPECTION,
                details=f"Inspection recorded for hazard: {record.title}",
                operator_level=decision.provided_level,
                danger_id=hazard_id,
            )
        return record


_default_registry: Optional[HazardRegistry] = None
_default_registry_lock = threading.Lock()


def get_registry() -> HazardRegistry:
    """Process-wide registry shared by API surfaces running in one process."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = HazardRegistry()
        return _default_registry
