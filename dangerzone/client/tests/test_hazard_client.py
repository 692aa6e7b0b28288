"""Tests for HazardClient against in-process apps."""
import httpx
import pytest

from dangerzone.client import HazardClient, HazardClientError, count_by_risk_level
from dangerzone.services.graphql_api import create_app as create_graphql_app
from dangerzone.services.registry_service import HazardRegistry, RegistryConfig
from dangerzone.services.rest_api import create_app as create_rest_app

REST_URL = "http://rest.test"
GRAPHQL_URL = "http://graphql.test/graphql"


@pytest.fixture
def registry():
    return HazardRegistry()


@pytest.fixture(params=["rest", "graphql"])
def client(request, registry):
    config = RegistryConfig()
    if request.param == "rest":
        app = create_rest_app(registry=registry, config=config)
    else:
        app = create_graphql_app(registry=registry, config=config)

    hazard_client = HazardClient(
        api_type=request.param,
        clearance=3,
        rest_url=REST_URL,
        graphql_url=GRAPHQL_URL,
        transport=httpx.WSGITransport(app=app),
    )
    yield hazard_client
    hazard_client.close()


def chlorine_leak(**overrides):
    fields = {
        "title": "Chlorine leak",
        "description": "Valve seal failure",
        "riskLevel": "extreme",
        "category": "chemical",
        "location": "Lab 3, bay 2",
        "consequenceRating": 8,
        "protectiveEquipment": ["respirator"],
    }
    fields.update(overrides)
    return fields


class TestHazardClient:
    def test_create_and_fetch(self, client):
        created = client.create_hazard(chlorine_leak())

        assert created["status"] == "active"
        assert created["protectiveEquipment"] == ["respirator"]

        hazards = client.fetch_hazards()
        assert [h["id"] for h in hazards] == [created["id"]]
        assert client.get_hazard(created["id"])["title"] == "Chlorine leak"

    def test_filters(self, client):
        client.create_hazard(chlorine_leak())
        client.create_hazard(chlorine_leak(
            title="Frayed cable", riskLevel="low", category="electrical",
            consequenceRating=2, location="Office",
        ))

        assert len(client.fetch_hazards(risk_level="extreme")) == 1
        assert len(client.fetch_hazards(category="electrical", min_rating=3)) == 0

    def test_error_carries_server_code(self, client):
        client.set_clearance(2)

        with pytest.raises(HazardClientError) as exc_info:
            client.create_hazard(chlorine_leak())

        assert exc_info.value.code == "DANGER_AUTH_002"
        assert exc_info.value.payload["requiredLevel"] == 3

    def test_delete(self, client):
        created = client.create_hazard(chlorine_leak())

        client.set_clearance(5)
        assert client.delete_hazard(created["id"]) == created["id"]

        with pytest.raises(HazardClientError) as exc_info:
            client.get_hazard(created["id"])
        assert exc_info.value.code == "DANGER_404"

    def test_status_inspection_stats_logs(self, client):
        created = client.create_hazard(chlorine_leak())

        assert client.update_status(created["id"], "contained")["status"] == "contained"
        assert client.record_inspection(created["id"])["id"] == created["id"]

        stats = client.hazard_stats()
        assert stats["totalCount"] == 1

        client.set_clearance(5)
        logs = client.security_logs(limit=3)
        assert [entry["operation"] for entry in logs] == ["ADMIN", "CONSULTA", "INSPEÇÃO"]


class TestClientConfiguration:
    def test_switch_api(self):
        client = HazardClient()
        client.switch_api("graphql")
        assert client.api_type == "graphql"
        client.close()

    def test_unknown_api_type(self):
        with pytest.raises(ValueError):
            HazardClient(api_type="soap")

    def test_count_by_risk_level(self):
        counts = count_by_risk_level([
            {"riskLevel": "extreme"},
            {"riskLevel": "extreme"},
            {"riskLevel": "low"},
        ])
        assert counts == {"extreme": 2, "high": 0, "moderate": 0, "low": 1}
