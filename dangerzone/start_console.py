#!/usr/bin/env python3
"""Start the DANGER ZONE registry.

Runs the REST and GraphQL APIs side by side over one shared registry, so a
hazard created through one surface is visible through the other.

Usage:
    python -m dangerzone.start_console

    # Or with custom ports
    python -m dangerzone.start_console --rest-port 3001 --graphql-port 4001
"""
import argparse
import logging
import threading
from typing import List, Optional, Tuple

from werkzeug.serving import BaseWSGIServer, make_server

from dangerzone.services.graphql_api import create_app as create_graphql_app
from dangerzone.services.registry_service import HazardRegistry, RegistryConfig
from dangerzone.services.rest_api import create_app as create_rest_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_servers(
    config: RegistryConfig,
    registry: Optional[HazardRegistry] = None,
) -> Tuple[BaseWSGIServer, BaseWSGIServer]:
    """Create REST and GraphQL servers sharing one registry.

    Returns:
        (rest_server, graphql_server), not yet serving
    """
    registry = registry if registry is not None else HazardRegistry()
    rest_server = make_server(
        config.host,
        config.rest_port,
        create_rest_app(registry=registry, config=config),
        threaded=True,
    )
    try:
        graphql_server = make_server(
            config.host,
            config.graphql_port,
            create_graphql_app(registry=registry, config=config),
            threaded=True,
        )
    except BaseException:
        logger.error("GRAPHQL_SERVER_BIND_FAILED", extra={"graphql_port": config.graphql_port})
        rest_server.server_close()
        raise
    return rest_server, graphql_server


def serve(servers: List[BaseWSGIServer]) -> List[threading.Thread]:
    """Start each server on its own daemon thread."""
    threads = []
    for server in servers:
        thread = threading.Thread(
            target=server.serve_forever,
            name=f"dangerzone-{server.server_port}",
            daemon=True,
        )
        thread.start()
        threads.append(thread)
    return threads


def main(argv: Optional[List[str]] = None):
    defaults = RegistryConfig.from_env()

    parser = argparse.ArgumentParser(description="Start the DANGER ZONE hazard registry")
    parser.add_argument("--host", default=defaults.host, help="Host to bind to")
    parser.add_argument("--rest-port", type=int, default=defaults.rest_port, help="REST API port")
    parser.add_argument(
        "--graphql-port", type=int, default=defaults.graphql_port, help="GraphQL API port"
    )
    args = parser.parse_args(argv)

    config = RegistryConfig(
        host=args.host,
        rest_port=args.rest_port,
        graphql_port=args.graphql_port,
        debug=defaults.debug,
        cors_origins=defaults.cors_origins,
    )
    servers = build_servers(config)

    print("\n" + "=" * 60)
    print("  DANGER ZONE - HAZARD REGISTRY")
    print("=" * 60)
    print(f"\n  REST API:    http://localhost:{config.rest_port}/dangers")
    print(f"  GraphQL API: http://localhost:{config.graphql_port}/graphql")
    print("\n  Send clearance with 'Security-Clearance: <n>' (REST)")
    print("  or 'Authorization: SecurityLevel <n>' (GraphQL)")
    print("\n" + "=" * 60 + "\n")

    threads = serve(list(servers))
    logger.info(
        "CONSOLE_STARTED",
        extra={"rest_port": config.rest_port, "graphql_port": config.graphql_port}
    )

    try:
        for thread in threads:
            thread.join()
    except KeyboardInterrupt:
        logger.info("CONSOLE_STOPPING")
    finally:
        for server in servers:
            server.shutdown()
            server.server_close()


if __name__ == "__main__":
    main()
