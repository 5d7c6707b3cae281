"""Pydantic schemas for CV API endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, StrictInt


class CVGenerateRequest(BaseModel):
    """Request schema for generating a CV file."""

    person_id: StrictInt = Field(..., description="ID of the faculty member")
    template: str = Field(..., description="Template id: academic, professional, modern, classic")
    format: str = Field(..., description="Output format: pdf or word")
    sections: list[str] = Field(..., description="Section keys to include")


class CVPreviewRequest(BaseModel):
    """Request schema for previewing aggregated CV data."""

    person_id: StrictInt = Field(..., description="ID of the faculty member")
    sections: list[str] | None = Field(None, description="Section keys; all when omitted")


class CVPreviewResponse(BaseModel):
    """Aggregated CV data keyed by section in canonical order."""

    personal: dict[str, Any] | None
    sections: dict[str, list[dict[str, Any]]]


class SectionInfo(BaseModel):
    """One entry of the section catalogue."""

    key: str
    title: str
    layout: str


class TemplateInfo(BaseModel):
    """One selectable CV template."""

    id: str
    name: str


class ErrorResponse(BaseModel):
    """Shape of every error body returned by the CV endpoints."""

    error: str
    message: str | None = None
