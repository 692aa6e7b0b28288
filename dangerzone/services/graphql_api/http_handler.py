"""GraphQL API HTTP handler.

Clearance is read from ``Authorization: SecurityLevel <n>``. Any other
scheme counts as no credential. Registry errors are reported in the
``errors`` array with the same codes the REST API uses.
"""
import logging
import os
from typing import Any, Dict, Optional

from ariadne import graphql_sync, unwrap_graphql_error
from ariadne.explorer import ExplorerGraphiQL
from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from graphql import GraphQLError

from dangerzone.shared.errors import ErrorCode, HazardError, SystemFailureError
from dangerzone.shared.models import format_timestamp, utc_now
from dangerzone.shared.utils import (
    GRAPHQL_AUTH_HEADER,
    parse_security_level_authorization,
)
from dangerzone.services.registry_service import (
    HazardRegistry,
    RegistryConfig,
    get_registry,
)
from .schema import schema

logger = logging.getLogger(__name__)

REGISTRY_EXTENSION = "hazard_registry"

explorer_html = ExplorerGraphiQL(title="DANGER ZONE - GraphQL").html(None)


def format_graphql_error(error: GraphQLError, debug: bool = False) -> Dict[str, Any]:
    """Render a GraphQL error as ``{message, code, timestamp, path, ...}``.

    Registry errors keep their code and detail fields. Query documents the
    schema rejects are reported as not found (unknown field) or validation
    errors. Anything else becomes a generic system failure.
    """
    original = unwrap_graphql_error(error)

    if isinstance(original, HazardError):
        payload = original.to_payload()
    elif original is None or original is error:
        code = (
            ErrorCode.NOT_FOUND
            if "Cannot query field" in error.message
            else ErrorCode.VALIDATION_FAILED
        )
        payload = {
            "code": code.value,
            "message": error.message,
            "timestamp": format_timestamp(utc_now()),
        }
    else:
        logger.error(
            "GRAPHQL_SYSTEM_FAILURE",
            extra={"path": error.path, "error": str(original)},
            exc_info=original,
        )
        payload = SystemFailureError().to_payload()

    formatted = {
        "message": payload.pop("message"),
        "code": payload.pop("code"),
        "timestamp": payload.pop("timestamp"),
        "path": error.path,
    }
    formatted.update(payload)
    return formatted


def _registry() -> HazardRegistry:
    return current_app.extensions[REGISTRY_EXTENSION]


def graphql_explorer():
    """Serve the interactive explorer."""
    return explorer_html, 200


def graphql_server():
    """Execute a GraphQL operation.

    Request Body:
        {"query": "...", "variables": {...}, "operationName": "..."}

    Response:
        {"data": {...}, "errors": [{"message", "code", "timestamp", "path", ...}]}
    """
    data = request.get_json(silent=True)
    clearance = parse_security_level_authorization(request.headers.get(GRAPHQL_AUTH_HEADER))

    success, result = graphql_sync(
        schema,
        data,
        context_value={
            "request": request,
            "clearance": clearance,
            "registry": _registry(),
        },
        debug=current_app.debug,
        error_formatter=format_graphql_error,
    )

    if result.get("errors"):
        logger.info(
            "GRAPHQL_REQUEST_ERRORS",
            extra={
                "codes": [e.get("code") for e in result["errors"]],
                "clearance": clearance,
            }
        )

    return jsonify(result), 200 if success else 400


def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "dangerzone-graphql",
        "hazard_count": _registry().repository.count(),
    }), 200


def _handle_not_found(error):
    return jsonify({
        "code": ErrorCode.NOT_FOUND.value,
        "message": "NAVIGATION ERROR: route does not exist or is not authorized",
        "timestamp": format_timestamp(utc_now()),
    }), getattr(error, "code", 404) or 404


def create_app(
    registry: Optional[HazardRegistry] = None,
    config: Optional[RegistryConfig] = None,
) -> Flask:
    """Build the GraphQL application.

    Endpoints:
        GET  /graphql - Explorer UI
        POST /graphql - Execute an operation
        GET  /health  - Health check

    Args:
        registry: Registry to serve (process-wide registry by default)
        config: Server settings (read from environment by default)
    """
    config = config or RegistryConfig.from_env()

    app = Flask(__name__)
    app.extensions[REGISTRY_EXTENSION] = registry if registry is not None else get_registry()
    app.add_url_rule("/graphql", "graphql_explorer", graphql_explorer, methods=["GET"])
    app.add_url_rule("/graphql", "graphql_server", graphql_server, methods=["POST"])
    app.add_url_rule("/health", "health", health, methods=["GET"])
    app.register_error_handler(404, _handle_not_found)
    app.register_error_handler(405, _handle_not_found)
    CORS(app, origins=list(config.cors_origins))

    logger.info("GRAPHQL_APP_CREATED", extra={"port": config.graphql_port})
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = RegistryConfig.from_env()
    app = create_app(config=settings)
    port = int(os.getenv("PORT", settings.graphql_port))
    app.run(host=settings.host, port=port, debug=settings.debug)
