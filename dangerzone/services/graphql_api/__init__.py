"""GraphQL API: schema-first GraphQL surface of the hazard registry.

Endpoints:
- POST /graphql - Execute queries and mutations
- GET /graphql - Interactive explorer

Queries: dangers, danger, dangersByRiskLevel, dangersByCategory,
dangerStats, securityLogs.
Mutations: createDanger, deleteDanger, updateDangerStatus, recordInspection.
"""

from .http_handler import create_app, format_graphql_error
from .schema import schema, type_defs

__all__ = [
    "create_app",
    "format_graphql_error",
    "schema",
    "type_defs",
]
