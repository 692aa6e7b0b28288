"""Tests for SecurityAuditLog - append-only, read newest first."""
from datetime import datetime, timedelta, timezone

import pytest

from dangerzone.shared.models import AuditOperation
from dangerzone.services.audit_service import SecurityAuditLog

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class SteppingClock:
    def __init__(self, start=T0, step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def audit_log():
    return SecurityAuditLog(clock=SteppingClock())


class TestAppend:
    def test_append_returns_entry(self, audit_log):
        entry = audit_log.append(
            AuditOperation.REGISTER,
            details="CRITICAL - Chlorine leak - Category: chemical",
            operator_level=3,
            danger_id="hz-1",
        )

        assert entry.operation == AuditOperation.REGISTER
        assert entry.operator_level == 3
        assert entry.danger_id == "hz-1"
        assert entry.timestamp == T0
        assert len(audit_log) == 1

    def test_entry_is_immutable(self, audit_log):
        entry = audit_log.append(AuditOperation.QUERY, "1 hazards retrieved", 1)

        with pytest.raises(Exception):  # FrozenInstanceError
            entry.details = "tampered"

    def test_append_failure_is_swallowed(self):
        def broken_clock():
            raise RuntimeError("clock offline")

        audit_log = SecurityAuditLog(clock=broken_clock)

        assert audit_log.append(AuditOperation.QUERY, "x", 1) is None
        assert len(audit_log) == 0

    def test_to_dict_wire_shape(self, audit_log):
        entry = audit_log.append(AuditOperation.REMOVAL, "Hazard removed", 5, "hz-9")

        assert entry.to_dict() == {
            "timestamp": "2026-03-01T12:00:00.000Z",
            "operation": "REMOÇÃO",
            "dangerId": "hz-9",
            "details": "Hazard removed",
            "operatorLevel": 5,
        }


class TestRead:
    def test_newest_first(self, audit_log):
        audit_log.append(AuditOperation.QUERY, "first", 1)
        audit_log.append(AuditOperation.REGISTER, "second", 2)
        audit_log.append(AuditOperation.ADMIN, "third", 5)

        details = [entry.details for entry in audit_log.read()]
        assert details == ["third", "second", "first"]

    def test_same_timestamp_ordered_by_append(self):
        audit_log = SecurityAuditLog(clock=lambda: T0)
        audit_log.append(AuditOperation.QUERY, "a", 1)
        audit_log.append(AuditOperation.QUERY, "b", 1)

        assert [entry.details for entry in audit_log.read()] == ["b", "a"]

    def test_limit(self, audit_log):
        for i in range(5):
            audit_log.append(AuditOperation.QUERY, f"q{i}", 1)

        entries = audit_log.read(limit=2)
        assert [entry.details for entry in entries] == ["q4", "q3"]

    def test_limit_zero_returns_nothing(self, audit_log):
        audit_log.append(AuditOperation.QUERY, "q", 1)
        assert audit_log.read(limit=0) == []

    def test_limit_larger_than_log(self, audit_log):
        audit_log.append(AuditOperation.QUERY, "q", 1)
        assert len(audit_log.read(limit=50)) == 1


class TestAppendContract:
    def test_unknown_operation_is_not_recorded(self, audit_log):
        assert audit_log.append("DESTRUCTION", "unknown tag", 3) is None
        assert audit_log.append(None, "no tag", 3) is None
        assert len(audit_log) == 0

    def test_operation_tag_value_accepted(self, audit_log):
        entry = audit_log.append("CONSULTA", "1 hazards retrieved", 1)

        assert entry.operation is AuditOperation.QUERY
        assert len(audit_log) == 1
