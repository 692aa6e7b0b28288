"""Clearance header parsing.

Clearance is a caller-supplied integer with no authentication behind it.
``None`` means no credential was presented; a malformed value counts as
level 0 so that it is rejected by every threshold instead of being treated
as missing.
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)

REST_CLEARANCE_HEADER = "Security-Clearance"
GRAPHQL_AUTH_HEADER = "Authorization"
GRAPHQL_AUTH_SCHEME = "SecurityLevel"


def _to_level(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(
            "CLEARANCE_NOT_NUMERIC",
            extra={"raw_length": len(raw)}
        )
        return 0


def parse_clearance_header(value: Optional[str]) -> Optional[int]:
    """Parse the REST ``Security-Clearance`` header.

    Args:
        value: Raw header value, or None when the header is absent

    Returns:
        Clearance level, 0 if non-numeric, None if absent or blank
    """
    if value is None or not value.strip():
        return None
    return _to_level(value)


def parse_security_level_authorization(value: Optional[str]) -> Optional[int]:
    """Parse a GraphQL ``Authorization: SecurityLevel <n>`` header.

    Args:
        value: Raw Authorization header value

    Returns:
        Clearance level, 0 if ``<n>`` is non-numeric, None when the header
        is absent or uses another scheme

    Example:
        >>> parse_security_level_authorization("SecurityLevel 3")
        3
    """
    if not value:
        return None

    scheme, _, credential = value.strip().partition(" ")
    if scheme != GRAPHQL_AUTH_SCHEME:
        return None
    if not credential.strip():
        return 0
    return _to_level(credential)
