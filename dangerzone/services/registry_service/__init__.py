"""Registry Service: the hazard registry behind both API surfaces.

Owns the record store and the security audit log, and runs every operation
through the shared authorization and validation policies.
"""

from .config import RegistryConfig
from .handler import HazardRegistry, alert_message, get_registry

__all__ = [
    "RegistryConfig",
    "HazardRegistry",
    "alert_message",
    "get_registry",
]
