"""Hazard filtering and aggregate statistics.

Filters are independent predicates combined with AND, so the order in which
they are supplied never changes the result.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from dangerzone.shared.models import (
    HazardCategory,
    HazardRecord,
    RiskLevel,
)


@dataclass(frozen=True)
class HazardQuery:
    """Conjunction of optional hazard predicates.

    Attributes:
        risk_level: Exact risk level match
        category: Exact category match
        min_rating: Minimum consequence rating (inclusive)
    """
    risk_level: Optional[RiskLevel] = None
    category: Optional[HazardCategory] = None
    min_rating: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.risk_level is None and self.category is None and self.min_rating is None

    def matches(self, record: HazardRecord) -> bool:
        if self.risk_level is not None and record.risk_level != self.risk_level:
            return False
        if self.category is not None and record.category != self.category:
            return False
        if self.min_rating is not None and record.consequence_rating < self.min_rating:
            return False
        return True

    def describe(self) -> str:
        """Short human-readable form for audit details."""
        parts = []
        if self.risk_level is not None:
            parts.append(f"riskLevel={self.risk_level.value}")
        if self.category is not None:
            parts.append(f"category={self.category.value}")
        if self.min_rating is not None:
            parts.append(f"minRating={self.min_rating}")
        return ", ".join(parts) if parts else "no filters"


def filter_hazards(records: Iterable[HazardRecord], query: HazardQuery) -> List[HazardRecord]:
    return [record for record in records if query.matches(record)]


@dataclass(frozen=True)
class HazardStatistics:
    """Aggregate counts over the registry.

    Every risk level and category is present, including zero counts, in
    enum declaration order.
    """
    total_count: int
    by_risk_level: Dict[RiskLevel, int] = field(default_factory=dict)
    by_category: Dict[HazardCategory, int] = field(default_factory=dict)
    critical_count: int = 0

    @classmethod
    def from_records(cls, records: Iterable[HazardRecord]) -> "HazardStatistics":
        by_risk_level = {level: 0 for level in RiskLevel}
        by_category = {category: 0 for category in HazardCategory}
        total = 0
        critical = 0

        for record in records:
            total += 1
            by_risk_level[record.risk_level] += 1
            by_category[record.category] += 1
            if record.is_critical:
                critical += 1

        return cls(
            total_count=total,
            by_risk_level=by_risk_level,
            by_category=by_category,
            critical_count=critical,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCount": self.total_count,
            "byRiskLevel": [
                {"riskLevel": level.value, "count": count}
                for level, count in self.by_risk_level.items()
            ],
            "byCategory": [
                {"category": category.value, "count": count}
                for category, count in self.by_category.items()
            ],
            "criticalLevels": self.critical_count,
        }
