"""HTTP client for both registry API surfaces.

One client speaks either REST or GraphQL, switchable at runtime, and sends
the caller's clearance the way each surface expects it.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from dangerzone.shared.models import RiskLevel
from dangerzone.shared.utils import (
    GRAPHQL_AUTH_HEADER,
    GRAPHQL_AUTH_SCHEME,
    REST_CLEARANCE_HEADER,
)

logger = logging.getLogger(__name__)

DEFAULT_REST_URL = "http://localhost:3000"
DEFAULT_GRAPHQL_URL = "http://localhost:4000/graphql"
DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)

API_TYPES = ("rest", "graphql")

DANGER_FIELDS = """
    id
    title
    description
    riskLevel
    category
    location
    consequenceRating
    dateReported
    lastInspection
    reportedBy
    status
    protectiveEquipment
    containmentProcedures
"""

LIST_DANGERS = """
query ListDangers($riskLevel: RiskLevel, $category: DangerCategory, $minRating: Int) {
    dangers(riskLevel: $riskLevel, category: $category, minRating: $minRating) {%s}
}
""" % DANGER_FIELDS

GET_DANGER = """
query GetDanger($id: ID!) {
    danger(id: $id) {%s}
}
""" % DANGER_FIELDS

DANGER_STATS = """
query DangerStats {
    dangerStats {
        totalCount
        byRiskLevel { riskLevel count }
        byCategory { category count }
        criticalLevels
    }
}
"""

SECURITY_LOGS = """
query SecurityLogs($limit: Int) {
    securityLogs(limit: $limit) {
        timestamp
        operation
        dangerId
        details
        operatorLevel
    }
}
"""

CREATE_DANGER = """
mutation CreateDanger(
    $title: String!
    $description: String
    $riskLevel: RiskLevel!
    $category: DangerCategory!
    $location: String!
    $consequenceRating: Int!
    $protectiveEquipment: [String!]
    $containmentProcedures: [String!]
) {
    createDanger(
        title: $title
        description: $description
        riskLevel: $riskLevel
        category: $category
        location: $location
        consequenceRating: $consequenceRating
        protectiveEquipment: $protectiveEquipment
        containmentProcedures: $containmentProcedures
    ) {%s}
}
""" % DANGER_FIELDS

DELETE_DANGER = """
mutation DeleteDanger($id: ID!) {
    deleteDanger(id: $id)
}
"""

UPDATE_STATUS = """
mutation UpdateDangerStatus($id: ID!, $status: DangerStatus!) {
    updateDangerStatus(id: $id, status: $status) {%s}
}
""" % DANGER_FIELDS

RECORD_INSPECTION = """
mutation RecordInspection($id: ID!) {
    recordInspection(id: $id) {%s}
}
""" % DANGER_FIELDS


class HazardClientError(Exception):
    """Request rejected by the registry or transport failure."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.payload = payload or {}


def count_by_risk_level(hazards: List[Mapping[str, Any]]) -> Dict[str, int]:
    """Count fetched hazards per risk level, every level present."""
    counts = {level: 0 for level in RiskLevel.values()}
    for hazard in hazards:
        level = hazard.get("riskLevel")
        if level in counts:
            counts[level] += 1
    return counts


class HazardClient:
    """Client for the hazard registry.

    Example:
        client = HazardClient(api_type="graphql", clearance=3)
        client.create_hazard({"title": "Chlorine leak", ...})
        client.fetch_hazards(risk_level="extreme")
    """

    def __init__(
        self,
        api_type: str = "rest",
        clearance: int = 1,
        rest_url: str = DEFAULT_REST_URL,
        graphql_url: str = DEFAULT_GRAPHQL_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize client.

        Args:
            api_type: "rest" or "graphql"
            clearance: Clearance level sent with every request
            rest_url: REST API base URL
            graphql_url: GraphQL endpoint URL
            transport: Custom httpx transport (e.g. WSGITransport in tests)
        """
        self.api_type = self._check_api_type(api_type)
        self.clearance = clearance
        self.rest_url = rest_url.rstrip("/")
        self.graphql_url = graphql_url
        self._client = httpx.Client(timeout=DEFAULT_TIMEOUT, transport=transport)

    @staticmethod
    def _check_api_type(api_type: str) -> str:
        if api_type not in API_TYPES:
            raise ValueError(f"api_type must be one of {API_TYPES}, got {api_type!r}")
        return api_type

    def switch_api(self, api_type: str) -> None:
        self.api_type = self._check_api_type(api_type)
        logger.info("CLIENT_API_SWITCHED", extra={"api_type": api_type})

    def set_clearance(self, clearance: int) -> None:
        self.clearance = clearance

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HazardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _rest(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = self._client.request(
                method,
                f"{self.rest_url}{path}",
                params=params,
                json=json,
                headers={REST_CLEARANCE_HEADER: str(self.clearance)},
            )
        except httpx.RequestError as err:
            raise HazardClientError(f"REST request failed: {err}") from err

        body = self._decode(response)
        if response.is_error:
            raise HazardClientError(
                body.get("message", f"HTTP {response.status_code}"),
                code=body.get("code"),
                status_code=response.status_code,
                payload=body,
            )
        return body

    def _graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = self._client.post(
                self.graphql_url,
                json={"query": query, "variables": variables or {}},
                headers={GRAPHQL_AUTH_HEADER: f"{GRAPHQL_AUTH_SCHEME} {self.clearance}"},
            )
        except httpx.RequestError as err:
            raise HazardClientError(f"GraphQL request failed: {err}") from err

        body = self._decode(response)
        errors = body.get("errors")
        if errors:
            first = errors[0]
            raise HazardClientError(
                first.get("message", "GraphQL error"),
                code=first.get("code"),
                status_code=response.status_code,
                payload=first,
            )
        return body.get("data") or {}

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            raise HazardClientError(
                f"Non-JSON response (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from None
        return body if isinstance(body, dict) else {}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def fetch_hazards(
        self,
        risk_level: Optional[str] = None,
        category: Optional[str] = None,
        min_rating: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """List hazards, filters combined with AND."""
        filters = {
            "riskLevel": risk_level,
            "category": category,
            "minRating": min_rating,
        }
        filters = {k: v for k, v in filters.items() if v is not None}

        if self.api_type == "rest":
            return self._rest("GET", "/dangers", params=filters).get("data", [])
        return self._graphql(LIST_DANGERS, filters)["dangers"]

    def get_hazard(self, hazard_id: str) -> Dict[str, Any]:
        if self.api_type == "rest":
            return self._rest("GET", f"/dangers/{hazard_id}")["data"]
        return self._graphql(GET_DANGER, {"id": hazard_id})["danger"]

    def create_hazard(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Register a hazard.

        Args:
            fields: camelCase hazard fields

        Returns:
            The stored hazard
        """
        if self.api_type == "rest":
            body = self._rest("POST", "/dangers", json=dict(fields))
            logger.info("CLIENT_HAZARD_CREATED", extra={"alert": body.get("message")})
            return body["data"]
        return self._graphql(CREATE_DANGER, dict(fields))["createDanger"]

    def delete_hazard(self, hazard_id: str) -> str:
        """Remove a hazard and return its id."""
        if self.api_type == "rest":
            return self._rest("DELETE", f"/dangers/{hazard_id}")["removedDangerID"]
        self._graphql(DELETE_DANGER, {"id": hazard_id})
        return hazard_id

    def hazard_stats(self) -> Dict[str, Any]:
        if self.api_type == "rest":
            return self._rest("GET", "/dangers/stats")["data"]
        return self._graphql(DANGER_STATS)["dangerStats"]

    def security_logs(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else {}
        if self.api_type == "rest":
            return self._rest("GET", "/security-logs", params=params)["data"]
        return self._graphql(SECURITY_LOGS, params)["securityLogs"]

    def update_status(self, hazard_id: str, status: str) -> Dict[str, Any]:
        if self.api_type == "rest":
            return self._rest(
                "PATCH", f"/dangers/{hazard_id}/status", json={"status": status}
            )["data"]
        return self._graphql(
            UPDATE_STATUS, {"id": hazard_id, "status": status}
        )["updateDangerStatus"]

    def record_inspection(self, hazard_id: str) -> Dict[str, Any]:
        if self.api_type == "rest":
            return self._rest("POST", f"/dangers/{hazard_id}/inspections")["data"]
        return self._graphql(RECORD_INSPECTION, {"id": hazard_id})["recordInspection"]
