"""Repository pattern for hazard records.

The registry depends on the abstract ``HazardRepository`` so that both API
surfaces can be handed the same store. The only implementation keeps records
in process memory; nothing survives a restart.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from dangerzone.shared.models import HazardRecord

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateError(RepositoryError):
    """A record with the same id already exists."""
    pass


class HazardRepository(ABC):
    """Abstract hazard store.

    Implementations keep insertion order for ``all`` and ``filter``.
    """

    @abstractmethod
    def insert(self, record: HazardRecord) -> HazardRecord:
        """Store a new record.

        Raises:
            DuplicateError: If the id is already present
        """
        pass

    @abstractmethod
    def find_by_id(self, hazard_id: str) -> Optional[HazardRecord]:
        pass

    @abstractmethod
    def remove(self, hazard_id: str) -> Optional[HazardRecord]:
        """Remove a record permanently.

        Returns:
            The removed record, or None if it did not exist
        """
        pass

    @abstractmethod
    def all(self) -> List[HazardRecord]:
        pass

    def filter(self, predicate: Callable[[HazardRecord], bool]) -> List[HazardRecord]:
        """Linear scan returning records matching ``predicate``."""
        return [record for record in self.all() if predicate(record)]

    def count(self) -> int:
        return len(self.all())


class InMemoryHazardRepository(HazardRepository):
    """Ordered in-process hazard store."""

    def __init__(self):
        # dict preserves insertion order
        self._records: Dict[str, HazardRecord] = {}

        logger.info("HAZARD_REPOSITORY_INITIALIZED", extra={"backend": "memory"})

    def insert(self, record: HazardRecord) -> HazardRecord:
        if record.id in self._records:
            logger.error(
                "HAZARD_INSERT_DUPLICATE",
                extra={"hazard_id": record.id}
            )
            raise DuplicateError(f"Hazard {record.id} already exists")

        self._records[record.id] = record
        return record

    def find_by_id(self, hazard_id: str) -> Optional[HazardRecord]:
        return self._records.get(hazard_id)

    def remove(self, hazard_id: str) -> Optional[HazardRecord]:
        return self._records.pop(hazard_id, None)

    def all(self) -> List[HazardRecord]:
        return list(self._records.values())

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()
