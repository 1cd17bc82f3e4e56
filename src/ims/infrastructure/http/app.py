"""FastAPI application factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ims.application.inventory_store import InventoryStore
from ims.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from ims.infrastructure.http.routes import router
from ims.infrastructure.storage.photo_store import PhotoStore

LOGGER = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def status_for(exc: DomainException) -> int:
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, ValidationError):
        return 400
    return 500


def create_app(store: InventoryStore, photos: PhotoStore) -> FastAPI:
    app = FastAPI(
        title="Inventory Service",
        description="Register, browse and search inventory items and their photos.",
        version="0.1.0",
    )
    app.state.inventory_store = store
    app.state.photo_store = photos
    app.include_router(router)

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        status = status_for(exc)
        LOGGER.debug("%s %s -> %d: %s", request.method, request.url.path, status, exc)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    # Registered last so every real route is matched first.
    @app.api_route("/{path:path}", methods=_ALL_METHODS, include_in_schema=False)
    async def method_not_allowed(path: str) -> PlainTextResponse:
        return PlainTextResponse("Method not allowed", status_code=405)

    return app
