"""GraphQL resolvers - thin adapters from GraphQL fields to the registry.

The request context carries the parsed clearance and the registry:

    {"request": <flask request>, "clearance": 3, "registry": <HazardRegistry>}
"""
import logging
from typing import Any, Dict, List, Optional

from ariadne import MutationType, QueryType
from graphql import GraphQLResolveInfo

from dangerzone.shared.database import HazardQuery
from dangerzone.services.policy_service import parse_category, parse_risk_level
from dangerzone.services.registry_service import HazardRegistry

logger = logging.getLogger(__name__)

query = QueryType()
mutation = MutationType()


def _registry(info: GraphQLResolveInfo) -> HazardRegistry:
    return info.context["registry"]


def _clearance(info: GraphQLResolveInfo) -> Optional[int]:
    return info.context.get("clearance")


def _list(info: GraphQLResolveInfo, hazard_query: HazardQuery) -> List[Dict[str, Any]]:
    records = _registry(info).list_hazards(_clearance(info), hazard_query)
    return [record.to_dict() for record in records]


@query.field("dangers")
def resolve_dangers(_, info: GraphQLResolveInfo, **filters) -> List[Dict[str, Any]]:
    hazard_query = HazardQuery(
        risk_level=parse_risk_level(filters.get("riskLevel")),
        category=parse_category(filters.get("category")),
        min_rating=filters.get("minRating"),
    )
    return _list(info, hazard_query)


@query.field("danger")
def resolve_danger(_, info: GraphQLResolveInfo, id: str) -> Dict[str, Any]:  # noqa: A002
    return _registry(info).get_hazard(id, _clearance(info)).to_dict()


@query.field("dangersByRiskLevel")
def resolve_dangers_by_risk_level(_, info: GraphQLResolveInfo, level: str) -> List[Dict[str, Any]]:
    return _list(info, HazardQuery(risk_level=parse_risk_level(level, field="level")))


@query.field("dangersByCategory")
def resolve_dangers_by_category(_, info: GraphQLResolveInfo, category: str) -> List[Dict[str, Any]]:
    return _list(info, HazardQuery(category=parse_category(category)))


@query.field("dangerStats")
def resolve_danger_stats(_, info: GraphQLResolveInfo) -> Dict[str, Any]:
    return _registry(info).statistics(_clearance(info)).to_dict()


@query.field("securityLogs")
def resolve_security_logs(_, info: GraphQLResolveInfo, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    entries = _registry(info).security_logs(_clearance(info), limit)
    return [entry.to_dict() for entry in entries]


@mutation.field("createDanger")
def resolve_create_danger(_, info: GraphQLResolveInfo, **fields) -> Dict[str, Any]:
    record = _registry(info).create_hazard(fields, _clearance(info))
    logger.info(
        "GRAPHQL_DANGER_CREATED",
        extra={"hazard_id": record.id, "risk_level": record.risk_level.value}
    )
    return record.to_dict()


@mutation.field("deleteDanger")
def resolve_delete_danger(_, info: GraphQLResolveInfo, id: str) -> bool:  # noqa: A002
    _registry(info).delete_hazard(id, _clearance(info))
    return True


@mutation.field("updateDangerStatus")
def resolve_update_danger_status(_, info: GraphQLResolveInfo, id: str, status: str) -> Dict[str, Any]:  # noqa: A002
    return _registry(info).update_status(id, status, _clearance(info)).to_dict()


@mutation.field("recordInspection")
def resolve_record_inspection(_, info: GraphQLResolveInfo, id: str) -> Dict[str, Any]:  # noqa: A002
    return _registry(info).record_inspection(id, _clearance(info)).to_dict()
