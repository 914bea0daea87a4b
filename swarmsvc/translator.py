from __future__ import annotations

from dataclasses import dataclass
from typing import Any, assert_never

from docker.types import (
    ContainerSpec,
    EndpointSpec,
    NetworkAttachmentConfig,
    Placement,
    ServiceMode,
    TaskTemplate,
)

from .api_models import GlobalMode, PortPublishSpec, ReplicatedMode, ServiceDescription
from .settings import settings


# Single virtual IP per service, load-balancing across its tasks.
RESOLUTION_MODE_VIP = "vip"

ROLE_LABEL_VALUE = "user"


@dataclass(frozen=True)
class EngineServiceSpec:
    """Engine-native service spec, built from docker-py's spec types."""

    name: str
    labels: dict[str, str]
    task_template: TaskTemplate
    mode: ServiceMode
    update_config: dict[str, Any]
    endpoint_spec: EndpointSpec | None = None

    def create_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``docker.APIClient.create_service``."""
        kwargs: dict[str, Any] = {
            "task_template": self.task_template,
            "name": self.name,
            "labels": self.labels,
            "mode": self.mode,
            "update_config": self.update_config,
        }
        if self.endpoint_spec is not None:
            kwargs["endpoint_spec"] = self.endpoint_spec
        return kwargs


def _service_mode(mode: ReplicatedMode | GlobalMode) -> ServiceMode:
    if isinstance(mode, ReplicatedMode):
        return ServiceMode("replicated", replicas=mode.replicas)
    elif isinstance(mode, GlobalMode):
        return ServiceMode("global")
    else:
        assert_never(mode)


def _labels(labels: dict[str, str] | None) -> dict[str, str]:
    out = dict(labels or {})
    # Set last so callers cannot override the role.
    out[settings.role_label_key] = ROLE_LABEL_VALUE
    return out


def _port_config(publish: PortPublishSpec) -> dict[str, Any]:
    return {
        "Name": publish.name,
        "Protocol": publish.protocol.value,
        "TargetPort": publish.internal_port,
        "PublishedPort": publish.publish_port,
    }


def _endpoint_spec(publish_specs: list[PortPublishSpec]) -> EndpointSpec | None:
    if not publish_specs:
        return None
    return EndpointSpec(mode=RESOLUTION_MODE_VIP, ports=[_port_config(p) for p in publish_specs])


def translate(desc: ServiceDescription) -> EngineServiceSpec:
    """Map a service description onto the engine's service spec.

    Total and side-effect free. Resources, restart policy, log driver, mounts
    and stop grace period are not carried by the description and stay unset;
    placement is empty and the update config is zero-valued.
    """
    container_spec = ContainerSpec(
        image=desc.image,
        env=list(desc.env),
        labels=dict(desc.container_labels) if desc.container_labels is not None else None,
    )
    task_template = TaskTemplate(
        container_spec=container_spec,
        placement=Placement(),
        networks=[NetworkAttachmentConfig(target=settings.default_network, aliases=[desc.name])],
    )
    return EngineServiceSpec(
        name=desc.name,
        labels=_labels(desc.labels),
        task_template=task_template,
        mode=_service_mode(desc.mode),
        # No FailureAction: the engine treats an absent one as pause.
        update_config={"Parallelism": 0},
        endpoint_spec=_endpoint_spec(desc.publish_specs),
    )
