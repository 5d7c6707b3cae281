"""Shared dependencies for API routes."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from faculty_cv.config import Settings, get_settings
from faculty_cv.services.record_source import RecordSource


def get_record_source(request: Request) -> RecordSource:
    """Return the record source created by the application lifespan.

    Raises:
        HTTPException: If the store is not available (503).
    """
    source = getattr(request.app.state, "record_source", None)
    if source is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store is not initialised",
        )
    return source


def get_app_settings() -> Settings:
    return get_settings()
