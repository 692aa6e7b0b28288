"""Tests for the clearance threshold policy."""
import pytest

from dangerzone.shared.errors import (
    ErrorCode,
    InsufficientClearanceError,
    MissingCredentialError,
)
from dangerzone.shared.models import RiskLevel
from dangerzone.services.policy_service import (
    ClearanceThresholds,
    Operation,
    authorize,
    raise_for_decision,
    required_level,
)


class TestRequiredLevel:
    @pytest.mark.parametrize("operation,expected", [
        (Operation.LIST, 1),
        (Operation.GET, 1),
        (Operation.FILTER, 1),
        (Operation.READ_STATS, 2),
        (Operation.READ_AUDIT_LOG, 5),
        (Operation.CREATE, 2),
        (Operation.UPDATE_STATUS, 3),
        (Operation.RECORD_INSPECTION, 2),
        (Operation.DELETE, 4),
    ])
    def test_base_thresholds(self, operation, expected):
        assert required_level(operation) == expected

    @pytest.mark.parametrize("operation,expected", [
        (Operation.FILTER, 2),
        (Operation.CREATE, 3),
        (Operation.DELETE, 5),
        (Operation.GET, 1),
    ])
    def test_extreme_thresholds(self, operation, expected):
        assert required_level(operation, RiskLevel.EXTREME) == expected

    def test_accepts_string_risk_level(self):
        assert required_level(Operation.CREATE, "extreme") == 3

    def test_unknown_risk_level_uses_base(self):
        assert required_level(Operation.CREATE, "apocalyptic") == 2
        assert required_level(Operation.CREATE, 42) == 2

    @pytest.mark.parametrize("level", [RiskLevel.HIGH, RiskLevel.MODERATE, RiskLevel.LOW])
    def test_non_extreme_levels_use_base(self, level):
        assert required_level(Operation.DELETE, level) == 4

    def test_custom_thresholds(self):
        thresholds = ClearanceThresholds(CREATE=4)
        assert required_level(Operation.CREATE, thresholds=thresholds) == 4


class TestAuthorize:
    def test_missing_credential_denied(self):
        decision = authorize(Operation.LIST, None)

        assert not decision.allowed
        assert decision.missing_credential
        assert decision.provided_level == 0
        assert decision.required_level == 1

    def test_level_zero_is_insufficient_not_missing(self):
        decision = authorize(Operation.LIST, 0)

        assert not decision.allowed
        assert not decision.missing_credential
        assert decision.reason == "insufficient_clearance"

    def test_allowed_at_exact_threshold(self):
        decision = authorize(Operation.UPDATE_STATUS, 3)
        assert decision.allowed
        assert decision.reason == "granted"

    def test_allowed_iff_presented_meets_required(self):
        for operation in Operation:
            for risk_level in (None, RiskLevel.EXTREME):
                required = required_level(operation, risk_level)
                for level in range(0, 7):
                    decision = authorize(operation, level, risk_level)
                    assert decision.allowed == (level >= required)

    def test_extreme_delete_at_four_denied(self):
        decision = authorize(Operation.DELETE, 4, RiskLevel.EXTREME)

        assert not decision.allowed
        assert decision.required_level == 5
        assert decision.provided_level == 4


class TestRaiseForDecision:
    def test_allowed_does_not_raise(self):
        raise_for_decision(authorize(Operation.LIST, 1))

    def test_missing_credential_raises(self):
        with pytest.raises(MissingCredentialError) as exc_info:
            raise_for_decision(authorize(Operation.LIST, None))

        assert exc_info.value.code == ErrorCode.MISSING_CREDENTIAL
        assert exc_info.value.http_status == 401

    def test_insufficient_clearance_carries_levels(self):
        with pytest.raises(InsufficientClearanceError) as exc_info:
            raise_for_decision(authorize(Operation.CREATE, 2, "extreme"))

        error = exc_info.value
        assert error.http_status == 403
        assert error.required_level == 3
        assert error.provided_level == 2
        payload = error.to_payload()
        assert payload["code"] == "DANGER_AUTH_002"
        assert payload["requiredLevel"] == 3
        assert payload["providedLevel"] == 2


class TestClearanceThresholds:
    def test_extreme_table_uses_extreme_fields(self):
        thresholds = ClearanceThresholds(EXTREME_FILTER=3, EXTREME_CREATE=4, EXTREME_DELETE=6)

        assert thresholds.extreme_table() == {
            Operation.FILTER: 3,
            Operation.CREATE: 4,
            Operation.DELETE: 6,
        }
        assert "EXTREME_*" in ClearanceThresholds.__doc__
