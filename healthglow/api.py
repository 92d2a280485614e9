# -*- coding: utf-8 -*-
"""
HealthGlow API

Profiles, food logging with AI nutrition analysis, HRV samples, appointments,
medical document metadata and assistant conversation logs.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .analysis import FoodAnalyzer
from .appointments.api import router as appointments_router
from .auth.api import router as auth_router
from .config import Settings
from .conversations.api import router as conversations_router
from .documents.api import router as documents_router
from .food.api import router as food_router
from .hrv.api import router as hrv_router
from .profile.api import router as profile_router
from .storage import SQLiteStorage, Storage

logger = logging.getLogger(__name__)


def _validation_message(errors: list) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p not in {"body", "query", "path"})
    msg = first.get("msg") or "Invalid value"
    return f"{loc}: {msg}" if loc else msg


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        message = _validation_message(errors)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"message": message, "errors": errors})

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(
    settings: Settings | None = None,
    *,
    storage: Storage | None = None,
    analyzer: FoodAnalyzer | None = None,
) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level)

    if storage is None:
        sqlite_storage = SQLiteStorage(settings.db_path)
        sqlite_storage.init_schema()
        storage = sqlite_storage

    app = FastAPI(
        title="HealthGlow",
        description="Personal health tracking: profile, food, HRV, appointments, documents, AI assistant.",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.analyzer = analyzer or FoodAnalyzer.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(food_router)
    app.include_router(hrv_router)
    app.include_router(appointments_router)
    app.include_router(documents_router)
    app.include_router(conversations_router)

    @app.get("/api/health", include_in_schema=False)
    def health() -> dict:
        return {"ok": True}

    return app



def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("HEALTHGLOW_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("HEALTHGLOW_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("healthglow.api:create_app", factory=True, host=host, port=port, reload=False)
