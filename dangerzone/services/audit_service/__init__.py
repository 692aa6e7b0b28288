"""Audit Service: security audit trail of registry actions.

Every read, write and denied request against the registry appends an entry.
The trail is for traceability only and is not a security control.

Exposed through:
- GraphQL securityLogs(limit)
- GET /security-logs?limit=
"""

from .audit_logger import SecurityAuditLog

__all__ = [
    "SecurityAuditLog",
]
