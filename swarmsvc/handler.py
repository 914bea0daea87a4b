from __future__ import annotations

from .api_models import RemoveRequest, RemoveResponse, ServiceCreateResponse, ServiceDescription
from .db import log_event
from .engine import EngineClient
from .translator import translate


class ServiceHandler:
    """Create/remove requests relayed to the engine.

    Engine errors are re-raised exactly as received: no wrapping, no retry and
    no cleanup of partially created services.
    """

    def __init__(self, engine: EngineClient):
        self.engine = engine

    def create(self, desc: ServiceDescription) -> ServiceCreateResponse:
        spec = translate(desc)
        try:
            service_id = self.engine.service_create(spec)
        except Exception as e:
            log_event("ERROR", f"Service {desc.name} create failed: {type(e).__name__}: {e}", service_name=desc.name)
            raise
        log_event("INFO", f"Service {desc.name} created, id={service_id}", service_name=desc.name, service_id=service_id)
        return ServiceCreateResponse(id=service_id)

    def remove(self, req: RemoveRequest) -> RemoveResponse:
        try:
            self.engine.service_remove(req.ident)
        except Exception as e:
            log_event("ERROR", f"Service {req.ident} remove failed: {type(e).__name__}: {e}", service_id=req.ident)
            raise
        log_event("INFO", f"Service {req.ident} removed", service_id=req.ident)
        return RemoveResponse(ident=req.ident)
