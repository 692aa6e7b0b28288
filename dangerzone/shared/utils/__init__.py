"""Shared utilities for the DANGER ZONE registry."""
from .clearance import (
    parse_clearance_header,
    parse_security_level_authorization,
    REST_CLEARANCE_HEADER,
    GRAPHQL_AUTH_HEADER,
    GRAPHQL_AUTH_SCHEME,
)

__all__ = [
    "parse_clearance_header",
    "parse_security_level_authorization",
    "REST_CLEARANCE_HEADER",
    "GRAPHQL_AUTH_HEADER",
    "GRAPHQL_AUTH_SCHEME",
]
