"""FastAPI application entry point for the faculty CV API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from faculty_cv.api.routes import cv, health
from faculty_cv.config import configure_logging, get_settings
from faculty_cv.errors import (
    CVGenerationError,
    MissingIdentityError,
    RenderEngineError,
    ValidationError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the record store on startup and close it on shutdown."""
    from faculty_cv.data.db import RecordStore
    from faculty_cv.services.record_source import SqlRecordSource

    settings = get_settings()
    configure_logging(settings)
    store = RecordStore()
    if store.ping():
        store.init_schema()
    else:
        logger.warning("Record store unreachable at startup; CV requests will fail")
    app.state.record_store = store
    app.state.record_source = SqlRecordSource(store, institution=settings.institution)
    try:
        yield
    finally:
        app.state.record_source = None
        store.close()


app = FastAPI(
    title="Faculty CV API",
    description="API for generating faculty CVs as PDF or Word documents",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, message: str | None) -> JSONResponse:
    body = {"error": error}
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        details.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request", "; ".join(details))


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request", str(exc))


@app.exception_handler(MissingIdentityError)
async def missing_identity_handler(request: Request, exc: MissingIdentityError) -> JSONResponse:
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "personal information required", str(exc))


@app.exception_handler(CVGenerationError)
async def generation_error_handler(request: Request, exc: CVGenerationError) -> JSONResponse:
    logger.error("CV generation failed: %s", exc)
    if get_settings().is_production:
        message = None
    elif isinstance(exc, RenderEngineError):
        message = exc.message
    else:
        message = str(exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate CV", message)


app.include_router(health.router)
app.include_router(cv.router, prefix="/api")
