from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Event log
    db_path: str = os.getenv("SWARMSVC_DB_PATH", "swarmsvc.db")
    enable_events: bool = _env_bool("SWARMSVC_ENABLE_EVENTS", True)

    # Engine connection
    docker_host: str = os.getenv("SWARMSVC_DOCKER_HOST", "unix:///var/run/docker.sock")
    api_version: str = os.getenv("SWARMSVC_API_VERSION", "1.44")
    user_agent: str = os.getenv("SWARMSVC_USER_AGENT", "swarmsvc-1.0")
    engine_timeout_s: int = _env_int("SWARMSVC_ENGINE_TIMEOUT_S", 60)

    # Applied to every created service
    default_network: str = os.getenv("SWARMSVC_DEFAULT_NETWORK", "amp-public")
    role_label_key: str = os.getenv("SWARMSVC_ROLE_LABEL_KEY", "io.amp.role")

    # HTTP server
    api_host: str = os.getenv("SWARMSVC_API_HOST", "0.0.0.0")
    api_port: int = _env_int("SWARMSVC_API_PORT", 8000)


settings = Settings()
