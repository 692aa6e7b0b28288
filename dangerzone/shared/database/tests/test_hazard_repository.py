"""Tests for the hazard repository, filters and statistics."""
from datetime import datetime, timezone

import pytest

from dangerzone.shared.database import (
    DuplicateError,
    HazardQuery,
    HazardStatistics,
    InMemoryHazardRepository,
    filter_hazards,
)
from dangerzone.shared.models import HazardCategory, HazardRecord, RiskLevel

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_record(hazard_id, risk_level=RiskLevel.LOW, category=HazardCategory.CHEMICAL, rating=3):
    return HazardRecord(
        id=hazard_id,
        title=f"Hazard {hazard_id}",
        description="desc",
        risk_level=risk_level,
        category=category,
        location="Lab 1",
        consequence_rating=rating,
        date_reported=NOW,
        last_inspection=NOW,
        reporter_clearance=2,
    )


@pytest.fixture
def repository():
    repo = InMemoryHazardRepository()
    repo.insert(make_record("a", RiskLevel.EXTREME, HazardCategory.CHEMICAL, 9))
    repo.insert(make_record("b", RiskLevel.HIGH, HazardCategory.ELECTRICAL, 7))
    repo.insert(make_record("c", RiskLevel.LOW, HazardCategory.CHEMICAL, 2))
    repo.insert(make_record("d", RiskLevel.EXTREME, HazardCategory.RADIATION, 10))
    return repo


class TestInMemoryHazardRepository:
    def test_insert_and_find(self, repository):
        assert repository.find_by_id("b").risk_level == RiskLevel.HIGH
        assert repository.find_by_id("missing") is None

    def test_duplicate_insert_rejected(self, repository):
        with pytest.raises(DuplicateError):
            repository.insert(make_record("a"))

    def test_all_keeps_insertion_order(self, repository):
        assert [r.id for r in repository.all()] == ["a", "b", "c", "d"]

    def test_remove(self, repository):
        removed = repository.remove("c")

        assert removed.id == "c"
        assert repository.find_by_id("c") is None
        assert repository.count() == 3
        assert repository.remove("c") is None

    def test_clear(self, repository):
        repository.clear()
        assert repository.count() == 0


class TestHazardQuery:
    def test_empty_query_matches_everything(self, repository):
        query = HazardQuery()

        assert query.is_empty
        assert len(repository.filter(query.matches)) == 4
        assert query.describe() == "no filters"

    def test_filters_are_conjunctive(self, repository):
        query = HazardQuery(risk_level=RiskLevel.EXTREME, category=HazardCategory.CHEMICAL)
        assert [r.id for r in filter_hazards(repository.all(), query)] == ["a"]

    def test_min_rating_inclusive(self, repository):
        query = HazardQuery(min_rating=7)
        assert [r.id for r in filter_hazards(repository.all(), query)] == ["a", "b", "d"]

    def test_filter_order_does_not_matter(self, repository):
        records = repository.all()
        by_level = filter_hazards(records, HazardQuery(risk_level=RiskLevel.EXTREME))
        then_rating = filter_hazards(by_level, HazardQuery(min_rating=10))
        by_rating = filter_hazards(records, HazardQuery(min_rating=10))
        then_level = filter_hazards(by_rating, HazardQuery(risk_level=RiskLevel.EXTREME))

        assert then_rating == then_level == [repository.find_by_id("d")]

    def test_describe(self):
        query = HazardQuery(risk_level=RiskLevel.HIGH, min_rating=4)
        assert query.describe() == "riskLevel=high, minRating=4"


class TestHazardStatistics:
    def test_counts(self, repository):
        stats = HazardStatistics.from_records(repository.all())

        assert stats.total_count == 4
        assert stats.by_risk_level[RiskLevel.EXTREME] == 2
        assert stats.by_risk_level[RiskLevel.MODERATE] == 0
        assert stats.by_category[HazardCategory.CHEMICAL] == 2
        assert stats.critical_count == 3

    def test_counts_sum_to_total(self, repository):
        stats = HazardStatistics.from_records(repository.all())

        assert sum(stats.by_risk_level.values()) == stats.total_count
        assert sum(stats.by_category.values()) == stats.total_count

    def test_empty_registry(self):
        data = HazardStatistics.from_records([]).to_dict()

        assert data["totalCount"] == 0
        assert data["criticalLevels"] == 0
        assert [entry["riskLevel"] for entry in data["byRiskLevel"]] == [
            "extreme", "high", "moderate", "low"
        ]
        assert all(entry["count"] == 0 for entry in data["byCategory"])
        assert len(data["byCategory"]) == 5
