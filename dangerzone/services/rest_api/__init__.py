"""REST API: HTTP/JSON surface of the hazard registry.

Endpoints:
- GET /dangers - List hazards (riskLevel, category, minRating filters)
- GET /dangers/<id> - Fetch one hazard
- POST /dangers - Register a hazard
- DELETE /dangers/<id> - Remove a hazard
- PATCH /dangers/<id>/status - Update hazard status
- POST /dangers/<id>/inspections - Record an inspection
- GET /dangers/stats - Aggregate counts
- GET /security-logs - Security audit log
"""

from .http_handler import create_app

__all__ = [
    "create_app",
]
