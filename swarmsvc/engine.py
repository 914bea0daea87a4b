from __future__ import annotations

from typing import Protocol

import docker
import requests
from docker.errors import DockerException

from .settings import settings
from .translator import EngineServiceSpec


class EngineConnectionError(Exception):
    """The Docker Engine API could not be reached at startup."""


class EngineClient(Protocol):
    """What the service handler needs from the orchestration engine.

    Implementations must be safe to share between concurrent requests and
    should raise the engine's own errors unchanged.
    """

    def service_create(self, spec: EngineServiceSpec) -> str: ...

    def service_remove(self, ident: str) -> None: ...


class DockerEngineClient:
    """EngineClient backed by docker-py's low-level APIClient."""

    def __init__(self, api: docker.APIClient):
        self.api = api

    def service_create(self, spec: EngineServiceSpec) -> str:
        resp = self.api.create_service(**spec.create_kwargs())
        return resp["ID"]

    def service_remove(self, ident: str) -> None:
        self.api.remove_service(ident)


def connect_engine(
    base_url: str | None = None,
    version: str | None = None,
    user_agent: str | None = None,
    timeout_s: int | None = None,
) -> DockerEngineClient:
    """Open the engine connection and check that it answers.

    Raises EngineConnectionError instead of exiting, so the caller decides
    whether to abort, retry or back off.
    """
    base_url = base_url or settings.docker_host
    try:
        api = docker.APIClient(
            base_url=base_url,
            version=version or settings.api_version,
            user_agent=user_agent or settings.user_agent,
            timeout=timeout_s or settings.engine_timeout_s,
        )
        api.ping()
    except (DockerException, requests.RequestException) as e:
        raise EngineConnectionError(f"Cannot reach Docker Engine at {base_url}: {type(e).__name__}: {e}") from e
    return DockerEngineClient(api)
