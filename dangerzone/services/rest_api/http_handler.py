"""REST API HTTP handler - hazard registry endpoints.

Clearance is read from the ``Security-Clearance`` header on every request.
All clearance thresholds and field rules live in the policy service; this
module only translates HTTP to registry calls and back.
"""
import logging
import os
import re
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from dangerzone.shared.database import HazardQuery
from dangerzone.shared.errors import (
    ErrorCode,
    HazardError,
    SystemFailureError,
    ValidationFailedError,
)
from dangerzone.shared.models import format_timestamp, utc_now
from dangerzone.shared.utils import REST_CLEARANCE_HEADER, parse_clearance_header
from dangerzone.services.policy_service import (
    Operation,
    parse_category,
    parse_risk_level,
)
from dangerzone.services.registry_service import (
    HazardRegistry,
    RegistryConfig,
    alert_message,
    get_registry,
)

logger = logging.getLogger(__name__)

REGISTRY_EXTENSION = "hazard_registry"

bp = Blueprint("dangers", __name__)

LEADING_INT = re.compile(r"\s*([+-]?\d+)")
FILTER_PARAMS = ("riskLevel", "category", "minRating")


def _registry() -> HazardRegistry:
    return current_app.extensions[REGISTRY_EXTENSION]


def _clearance() -> Optional[int]:
    return parse_clearance_header(request.headers.get(REST_CLEARANCE_HEADER))


def _envelope(status_code: int, clearance: Optional[int], **payload: Any) -> Dict[str, Any]:
    body = {
        "statusCode": status_code,
        "timestamp": format_timestamp(utc_now()),
        "securityLevel": clearance,
    }
    body.update(payload)
    return body


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailedError(field="body", reason="request body must be a JSON object")
    return data


def _leading_int(value: Optional[str]) -> Optional[int]:
    """Integer prefix of a query value ("5abc" -> 5), None if there is none."""
    if value is None:
        return None
    match = LEADING_INT.match(value)
    return int(match.group(1)) if match else None


@bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "dangerzone-rest",
        "hazard_count": _registry().repository.count(),
    }), 200


@bp.route("/dangers", methods=["GET"])
def list_dangers():
    """List hazards with optional filters.

    Query Params:
        riskLevel: extreme | high | moderate | low
        category: chemical | electrical | mechanical | biological | radiation
        minRating: Minimum consequence rating; leading integer is used
            ("5.5" -> 5), ignored when there is none
    """
    clearance = _clearance()
    registry = _registry()
    filtered = any(request.args.get(name) for name in FILTER_PARAMS)
    registry.check_clearance(Operation.FILTER if filtered else Operation.LIST, clearance)

    query = HazardQuery(
        risk_level=parse_risk_level(request.args.get("riskLevel")),
        category=parse_category(request.args.get("category")),
        min_rating=_leading_int(request.args.get("minRating")),
    )

    records = registry.list_hazards(clearance, query)

    logger.info(
        "REST_DANGERS_LISTED",
        extra={"count": len(records), "clearance": clearance}
    )

    return jsonify(_envelope(
        200,
        clearance,
        totalCount=len(records),
        data=[record.to_dict() for record in records],
    )), 200


@bp.route("/dangers/stats", methods=["GET"])
def danger_stats():
    """Aggregate counts by risk level and category."""
    clearance = _clearance()
    stats = _registry().statistics(clearance)
    return jsonify(_envelope(200, clearance, data=stats.to_dict())), 200


@bp.route("/dangers/<danger_id>", methods=["GET"])
def get_danger(danger_id: str):
    """Fetch a single hazard."""
    clearance = _clearance()
    record = _registry().get_hazard(danger_id, clearance)
    return jsonify(_envelope(200, clearance, data=record.to_dict())), 200


@bp.route("/dangers", methods=["POST"])
def create_danger():
    """Register a new hazard.

    Request Body:
        {
            "title": "Chlorine leak",
            "description": "Valve seal failure",
            "riskLevel": "extreme",
            "category": "chemical",
            "location": "Lab 3, bay 2",
            "consequenceRating": 8
        }

    Response (201):
        {
            "statusCode": 201,
            "message": "CRITICAL HAZARD REGISTERED - EVACUATION RECOMMENDED",
            "securityLevel": 3,
            "data": {...}
        }
    """
    clearance = _clearance()
    registry = _registry()
    registry.check_clearance(Operation.CREATE, clearance)
    record = registry.create_hazard(_json_body(), clearance)

    return jsonify(_envelope(
        201,
        clearance,
        message=alert_message(record.risk_level),
        data=record.to_dict(),
    )), 201


@bp.route("/dangers/<danger_id>", methods=["DELETE"])
def delete_danger(danger_id: str):
    """Remove a hazard permanently."""
    clearance = _clearance()
    removed = _registry().delete_hazard(danger_id, clearance)

    return jsonify(_envelope(
        200,
        clearance,
        message="HAZARD RECORD REMOVED - UPDATE SAFETY PROTOCOLS",
        removedDangerID=removed.id,
    )), 200


@bp.route("/dangers/<danger_id>/status", methods=["PATCH"])
def update_danger_status(danger_id: str):
    """Update hazard status.

    Request Body:
        {"status": "contained"}
    """
    clearance = _clearance()
    registry = _registry()
    registry.check_clearance(Operation.UPDATE_STATUS, clearance, danger_id=danger_id)
    body = _json_body()
    record = registry.update_status(danger_id, body.get("status"), clearance)
    return jsonify(_envelope(200, clearance, data=record.to_dict())), 200


@bp.route("/dangers/<danger_id>/inspections", methods=["POST"])
def record_inspection(danger_id: str):
    """Record a safety inspection now."""
    clearance = _clearance()
    record = _registry().record_inspection(danger_id, clearance)
    return jsonify(_envelope(200, clearance, data=record.to_dict())), 200


@bp.route("/security-logs", methods=["GET"])
def security_logs():
    """Read the security audit log, newest first.

    Query Params:
        limit: Maximum number of entries
    """
    clearance = _clearance()
    registry = _registry()
    registry.check_clearance(Operation.READ_AUDIT_LOG, clearance)

    raw_limit = request.args.get("limit")
    limit = None
    if raw_limit is not None:
        try:
            limit = int(raw_limit)
        except ValueError:
            raise ValidationFailedError(
                field="limit", reason="limit must be a non-negative integer"
            ) from None

    entries = registry.security_logs(clearance, limit)
    return jsonify(_envelope(
        200,
        clearance,
        totalCount=len(entries),
        data=[entry.to_dict() for entry in entries],
    )), 200


# ------------------------------------------------------------------
# Error handling
# ------------------------------------------------------------------


def _handle_hazard_error(error: HazardError):
    logger.info(
        "REST_REQUEST_REJECTED",
        extra={
            "code": error.code.value,
            "path": request.path,
            "method": request.method,
        }
    )
    return jsonify(error.to_payload()), error.http_status


def _handle_http_exception(error: HTTPException):
    if error.code in (404, 405):
        code = ErrorCode.NOT_FOUND
        message = "NAVIGATION ERROR: route does not exist or is not authorized"
    elif error.code is not None and error.code < 500:
        code = ErrorCode.VALIDATION_FAILED
        message = f"INVALID REQUEST: {error.description}"
    else:
        code = ErrorCode.SYSTEM_FAILURE
        message = SystemFailureError().message

    return jsonify({
        "code": code.value,
        "message": message,
        "timestamp": format_timestamp(utc_now()),
    }), error.code or 500


def _handle_unexpected(error: Exception):
    logger.exception(
        "REST_SYSTEM_FAILURE",
        extra={"path": request.path, "method": request.method, "error": str(error)}
    )
    failure = SystemFailureError()
    return jsonify(failure.to_payload()), failure.http_status


def create_app(
    registry: Optional[HazardRegistry] = None,
    config: Optional[RegistryConfig] = None,
) -> Flask:
    """Build the REST application.

    Args:
        registry: Registry to serve (process-wide registry by default)
        config: Server settings (read from environment by default)

    Returns:
        Configured Flask app
    """
    config = config or RegistryConfig.from_env()

    app = Flask(__name__)
    app.extensions[REGISTRY_EXTENSION] = registry if registry is not None else get_registry()
    app.register_blueprint(bp)
    app.register_error_handler(HazardError, _handle_hazard_error)
    app.register_error_handler(HTTPException, _handle_http_exception)
    app.register_error_handler(Exception, _handle_unexpected)
    CORS(app, origins=list(config.cors_origins))

    logger.info("REST_APP_CREATED", extra={"port": config.rest_port})
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = RegistryConfig.from_env()
    app = create_app(config=settings)
    port = int(os.getenv("PORT", settings.rest_port))
    app.run(host=settings.host, port=port, debug=settings.debug)
