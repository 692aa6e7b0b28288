"""In-memory storage and query helpers for hazard records."""

from .repository import (
    HazardRepository,
    InMemoryHazardRepository,
    RepositoryError,
    DuplicateError,
)
from .query import (
    HazardQuery,
    HazardStatistics,
    filter_hazards,
)

__all__ = [
    "HazardRepository",
    "InMemoryHazardRepository",
    "RepositoryError",
    "DuplicateError",
    "HazardQuery",
    "HazardStatistics",
    "filter_hazards",
]
