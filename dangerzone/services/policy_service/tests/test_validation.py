"""Tests for hazard field validation."""
import pytest

from dangerzone.shared.errors import DataInconsistencyError, ValidationFailedError
from dangerzone.shared.models import HazardCategory, HazardStatus, RiskLevel
from dangerzone.services.policy_service import (
    check_consistency,
    parse_category,
    parse_risk_level,
    validate_hazard_fields,
    validate_limit,
    validate_status,
)


def make_fields(**overrides):
    fields = {
        "title": "Chlorine leak",
        "description": "Valve seal failure",
        "riskLevel": "high",
        "category": "chemical",
        "location": "Lab 3, bay 2",
        "consequenceRating": 6,
    }
    fields.update(overrides)
    return fields


class TestValidateHazardFields:
    def test_valid_fields_pass(self):
        assert validate_hazard_fields(make_fields()).valid

    def test_minimal_fields_pass(self):
        result = validate_hazard_fields({
            "title": "Loose wire",
            "riskLevel": "low",
            "category": "electrical",
        })
        assert result.valid

    @pytest.mark.parametrize("title", [None, "", "AB", "  AB  ", 123])
    def test_short_or_missing_title_rejected(self, title):
        result = validate_hazard_fields(make_fields(title=title))

        assert not result.valid
        assert result.field == "title"

    def test_title_of_three_characters_passes(self):
        assert validate_hazard_fields(make_fields(title=" ABC ")).valid

    def test_invalid_risk_level_lists_valid_values(self):
        result = validate_hazard_fields(make_fields(riskLevel="apocalyptic"))

        assert result.field == "riskLevel"
        assert result.valid_values == ["extreme", "high", "moderate", "low"]

    def test_invalid_category_lists_valid_values(self):
        result = validate_hazard_fields(make_fields(category="emotional"))

        assert result.field == "category"
        assert result.valid_values == HazardCategory.values()

    def test_extreme_requires_detailed_location(self):
        result = validate_hazard_fields(
            make_fields(riskLevel="extreme", location=" Lab ", consequenceRating=9)
        )
        assert result.field == "location"

    def test_short_location_allowed_below_extreme(self):
        assert validate_hazard_fields(make_fields(location="Lab")).valid

    @pytest.mark.parametrize("rating", [0, 11, -1, 5.5, "7", True])
    def test_out_of_range_rating_rejected(self, rating):
        result = validate_hazard_fields(make_fields(consequenceRating=rating))
        assert result.field == "consequenceRating"

    @pytest.mark.parametrize("rating", [1, 10])
    def test_rating_bounds_accepted(self, rating):
        assert validate_hazard_fields(make_fields(consequenceRating=rating)).valid

    def test_list_fields_must_be_string_lists(self):
        result = validate_hazard_fields(make_fields(protectiveEquipment=["gloves", 3]))
        assert result.field == "protectiveEquipment"

        result = validate_hazard_fields(make_fields(containmentProcedures="seal room"))
        assert result.field == "containmentProcedures"

    def test_description_must_be_text(self):
        result = validate_hazard_fields(make_fields(description=["nope"]))
        assert result.field == "description"

    def test_first_failure_wins(self):
        result = validate_hazard_fields({
            "title": "AB",
            "riskLevel": "bogus",
            "category": "bogus",
        })
        assert result.field == "title"

        result = validate_hazard_fields({
            "title": "Valid title",
            "riskLevel": "bogus",
            "category": "bogus",
        })
        assert result.field == "riskLevel"

    def test_raise_if_invalid(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate_hazard_fields(make_fields(title="AB")).raise_if_invalid()

        payload = exc_info.value.to_payload()
        assert payload["code"] == "DANGER_VAL_001"
        assert payload["field"] == "title"
        assert payload["message"].startswith("INVALID DATA:")


class TestCheckConsistency:
    def test_extreme_low_rating_inconsistent(self):
        with pytest.raises(DataInconsistencyError) as exc_info:
            check_consistency(RiskLevel.EXTREME, 5)

        assert exc_info.value.to_payload()["code"] == "DANGER_VAL_002"
        assert exc_info.value.http_status == 400

    def test_extreme_rating_seven_passes(self):
        check_consistency(RiskLevel.EXTREME, 7)

    def test_other_levels_unrestricted(self):
        check_consistency(RiskLevel.HIGH, 1)
        check_consistency(RiskLevel.LOW, 10)


class TestStatusAndLimit:
    def test_validate_status(self):
        assert validate_status("contained") is HazardStatus.CONTAINED
        assert validate_status(HazardStatus.MITIGATED) is HazardStatus.MITIGATED

    @pytest.mark.parametrize("value", [None, "", "destroyed", 3])
    def test_invalid_status_rejected(self, value):
        with pytest.raises(ValidationFailedError) as exc_info:
            validate_status(value)
        assert exc_info.value.field == "status"

    def test_validate_limit(self):
        assert validate_limit(None) is None
        assert validate_limit(0) == 0
        assert validate_limit(20) == 20

    @pytest.mark.parametrize("value", [-1, "5", 2.0, True])
    def test_invalid_limit_rejected(self, value):
        with pytest.raises(ValidationFailedError):
            validate_limit(value)


class TestFilterParsing:
    def test_empty_means_no_filter(self):
        assert parse_risk_level(None) is None
        assert parse_risk_level("") is None
        assert parse_category(None) is None

    def test_known_values(self):
        assert parse_risk_level("extreme") is RiskLevel.EXTREME
        assert parse_category("radiation") is HazardCategory.RADIATION

    def test_unknown_value_raises_with_field(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            parse_risk_level("apocalyptic", field="level")

        assert exc_info.value.field == "level"
        assert exc_info.value.valid_values == RiskLevel.values()
