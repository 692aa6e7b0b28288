"""Runtime configuration for the registry servers."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

DEFAULT_REST_PORT = 3000
DEFAULT_GRAPHQL_PORT = 4000


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RegistryConfig:
    """Server settings for both API surfaces."""
    host: str = "0.0.0.0"
    rest_port: int = DEFAULT_REST_PORT
    graphql_port: int = DEFAULT_GRAPHQL_PORT
    debug: bool = False
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RegistryConfig":
        """Build config from environment variables.

        Reads HOST, REST_PORT, GRAPHQL_PORT, DANGERZONE_DEBUG and
        DANGERZONE_CORS_ORIGINS (comma separated).
        """
        env = os.environ if environ is None else environ
        origins = env.get("DANGERZONE_CORS_ORIGINS", "*")
        return cls(
            host=env.get("HOST", "0.0.0.0"),
            rest_port=int(env.get("REST_PORT", DEFAULT_REST_PORT)),
            graphql_port=int(env.get("GRAPHQL_PORT", DEFAULT_GRAPHQL_PORT)),
            debug=_env_flag(env.get("DANGERZONE_DEBUG")),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
