"""Service configuration for the exchange API."""

import os
from collections.abc import Mapping
from dataclasses import dataclass


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ServiceConfig:
    """Settings for the HTTP service, read from the environment.

    Protocol parameters (fee, price scale) are constants in dex.constants
    and deliberately not part of this configuration.

    Attributes:
        host: Interface to bind (DEX_HOST, default: 0.0.0.0)
        port: Port to bind (DEX_PORT, default: 8000)
        debug: Enable auto-reload (DEX_DEBUG, default: false)
        log_level: Minimum log level (DEX_LOG_LEVEL, default: INFO)
        log_json: Emit JSON log lines (DEX_LOG_JSON, default: false)
        max_request_size: Largest accepted request body in bytes (1 MB)
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False
    max_request_size: int = 1024 * 1024

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServiceConfig":
        """Build the configuration from environment variables.

        Raises:
            ValueError: If DEX_PORT is not an integer
        """
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("DEX_HOST", cls.host),
            port=int(env.get("DEX_PORT", str(cls.port))),
            debug=_env_flag(env.get("DEX_DEBUG", "false")),
            log_level=env.get("DEX_LOG_LEVEL", cls.log_level).upper(),
            log_json=_env_flag(env.get("DEX_LOG_JSON", "false")),
        )
