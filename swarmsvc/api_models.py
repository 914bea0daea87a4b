from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, model_validator


class PortProtocol(str, Enum):
    TCP = "tcp"
    UDP = "udp"
    SCTP = "sctp"


class PortPublishSpec(BaseModel):
    name: str = Field("", description="Port name, e.g. http")
    protocol: PortProtocol = Field(PortProtocol.TCP, description="tcp|udp|sctp")
    internal_port: int = Field(..., ge=0, le=65535, description="Port the container listens on")
    publish_port: int = Field(..., ge=0, le=65535, description="Port published on the routing mesh")


class ReplicatedMode(BaseModel):
    kind: Literal["replicated"] = "replicated"
    replicas: int = Field(..., ge=0, description="Number of identical tasks to keep running")


class GlobalMode(BaseModel):
    kind: Literal["global"] = "global"


ServiceMode = Annotated[Union[ReplicatedMode, GlobalMode], Field(discriminator="kind")]


# Engine features the description does not carry yet. They are accepted as
# explicit fields so that clients see them, but must be left unset.
UNSUPPORTED_FIELDS = (
    "resources",
    "restart_policy",
    "placement_constraints",
    "mounts",
    "stop_grace_period",
    "log_driver",
    "update_config",
)


class ServiceDescription(BaseModel):
    name: str = Field(..., min_length=1, description="Service name; also its alias on the default network")
    image: str = Field(..., min_length=1, description="Container image reference (name:tag)")
    env: list[str] = Field(default_factory=list, description="Environment as ordered KEY=VALUE strings")
    labels: dict[str, str] | None = Field(None, description="Service labels")
    container_labels: dict[str, str] | None = Field(None, description="Container labels")
    mode: ServiceMode
    publish_specs: list[PortPublishSpec] = Field(default_factory=list)

    # Not yet supported; see UNSUPPORTED_FIELDS.
    resources: dict[str, Any] | None = Field(None, description="Not yet supported")
    restart_policy: dict[str, Any] | None = Field(None, description="Not yet supported")
    placement_constraints: list[str] | None = Field(None, description="Not yet supported")
    mounts: list[dict[str, Any]] | None = Field(None, description="Not yet supported")
    stop_grace_period: int | None = Field(None, description="Not yet supported")
    log_driver: dict[str, Any] | None = Field(None, description="Not yet supported")
    update_config: dict[str, Any] | None = Field(None, description="Not yet supported")

    @model_validator(mode="after")
    def _reject_unsupported(self) -> "ServiceDescription":
        used = [f for f in UNSUPPORTED_FIELDS if getattr(self, f) is not None]
        if used:
            raise ValueError(f"Not yet supported: {', '.join(used)}. Leave these fields unset.")
        return self


class ServiceCreateResponse(BaseModel):
    id: str


class RemoveRequest(BaseModel):
    ident: str = Field(..., min_length=1, description="Service ID or name")


class RemoveResponse(BaseModel):
    ident: str
