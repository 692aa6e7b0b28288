"""Python client for the DANGER ZONE REST and GraphQL APIs."""

from .hazard_client import HazardClient, HazardClientError, count_by_risk_level

__all__ = [
    "HazardClient",
    "HazardClientError",
    "count_by_risk_level",
]
