"""Security audit log - append-only trail of registry actions.

Entries are kept in process memory for the lifetime of the registry and are
read back newest first. There is no rotation and no persistence.
"""
import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from dangerzone.shared.models import AuditLogEntry, AuditOperation, utc_now

logger = logging.getLogger(__name__)


class SecurityAuditLog:
    """Append-only security audit log.

    ``append`` never raises: the audit trail is for traceability only, so a
    failure to record an entry is logged server-side and the request goes on.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """Initialize audit log.

        Args:
            clock: Timestamp source (injected for testing)
        """
        self._clock = clock or utc_now
        self._entries: List[AuditLogEntry] = []
        self._lock = threading.Lock()

        logger.info("SECURITY_AUDIT_LOG_INITIALIZED")

    def append(
        self,
        operation: AuditOperation,
        details: str,
        operator_level: int,
        danger_id: Optional[str] = None,
    ) -> Optional[AuditLogEntry]:
        """Record an action.

        Args:
            operation: Operation tag
            details: Free-text description
            operator_level: Clearance presented by the caller
            danger_id: Hazard involved, if any

        Returns:
            The stored entry, or None if it could not be recorded

        Logs:
            - SECURITY_LOG: After the entry is stored
            - SECURITY_LOG_APPEND_FAILED: If storing failed
        """
        tag = getattr(operation, "value", operation)
        try:
            operation = AuditOperation(operation)
            with self._lock:
                entry = AuditLogEntry(
                    timestamp=self._clock(),
                    operation=operation,
                    details=details,
                    operator_level=operator_level,
                    danger_id=danger_id,
                    sequence=len(self._entries),
                )
                self._entries.append(entry)
        except Exception as e:
            logger.error(
                "SECURITY_LOG_APPEND_FAILED",
                extra={"operation": tag, "error": str(e)}
            )
            return None

        logger.info(
            "SECURITY_LOG",
            extra={
                "operation": operation.value,
                "danger_id": danger_id,
                "details": details,
                "operator_level": operator_level,
            }
        )
        return entry

    def read(self, limit: Optional[int] = None) -> List[AuditLogEntry]:
        """Return entries newest first.

        Entries sharing a timestamp are ordered by append position, newest
        first.

        Args:
            limit: Maximum number of entries to return

        Returns:
            At most ``limit`` entries (all when None)
        """
        with self._lock:
            entries = sorted(
                self._entries,
                key=lambda e: (e.timestamp, e.sequence),
                reverse=True,
            )

        if limit is not None:
            entries = entries[:limit]
        return entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
