from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

import uvicorn
from docker.errors import APIError
from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from swarmsvc import db
from swarmsvc.api_models import RemoveRequest, RemoveResponse, ServiceCreateResponse, ServiceDescription
from swarmsvc.engine import EngineClient, connect_engine
from swarmsvc.handler import ServiceHandler
from swarmsvc.settings import settings


def get_handler(request: Request) -> ServiceHandler:
    return request.app.state.handler


def create_app(engine: EngineClient | None = None, connect: Callable[[], EngineClient] = connect_engine) -> FastAPI:
    """Build the API.

    Without an injected engine the connection is opened on startup; if that
    fails the EngineConnectionError propagates and the server never starts
    serving requests.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db.init_db()
        app.state.handler = ServiceHandler(engine if engine is not None else connect())
        db.log_event("INFO", "API started")
        yield

    app = FastAPI(title="Swarm Service Provisioning API", version="1.0", lifespan=lifespan)

    @app.exception_handler(APIError)
    def engine_error(request: Request, exc: APIError) -> JSONResponse:
        # Relay the engine's own status and reason.
        return JSONResponse(
            status_code=exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": exc.explanation or str(exc)},
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.post("/v1/services", response_model=ServiceCreateResponse, status_code=status.HTTP_201_CREATED)
    def create_service(desc: ServiceDescription, handler: ServiceHandler = Depends(get_handler)):
        return handler.create(desc)

    @app.delete("/v1/services/{ident}", response_model=RemoveResponse)
    def remove_service(ident: str, handler: ServiceHandler = Depends(get_handler)):
        return handler.remove(RemoveRequest(ident=ident))

    @app.get("/v1/events")
    def events(limit: int = Query(50, ge=1, le=1000)):
        return db.latest_events(limit)

    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host=settings.api_host, port=settings.api_port)
