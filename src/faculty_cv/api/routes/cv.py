"""CV generation routes for the API."""

from __future__ import annotations

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from faculty_cv.api.dependencies import get_app_settings, get_record_source
from faculty_cv.api.schemas.cv import (
    CVGenerateRequest,
    CVPreviewRequest,
    CVPreviewResponse,
    ErrorResponse,
    SectionInfo,
    TemplateInfo,
)
from faculty_cv.config import Settings
from faculty_cv.constants.sections import SECTION_SPECS
from faculty_cv.rendering.docx import DOCX_MEDIA_TYPE
from faculty_cv.services.cv_generator import CVRequest, generate_cv, preview_cv
from faculty_cv.services.record_source import RecordSource
from faculty_cv.templates import get_template, list_templates

router = APIRouter(prefix="/cv", tags=["cv"])

_ERRORS = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII names."""
    fallback = filename.encode("ascii", "ignore").decode("ascii")
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.post(
    "/generate",
    responses={
        200: {"content": {"application/pdf": {}, DOCX_MEDIA_TYPE: {}}},
        **_ERRORS,
    },
)
def generate_cv_endpoint(
    data: CVGenerateRequest,
    source: Annotated[RecordSource, Depends(get_record_source)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """Generate and download a CV as PDF or Word."""
    request = CVRequest(
        person_id=data.person_id,
        template=data.template,
        format=data.format,
        sections=data.sections,
    )
    document = generate_cv(request, source, settings=settings)
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": _content_disposition(document.filename)},
    )


@router.post("/preview", response_model=CVPreviewResponse, responses=_ERRORS)
def preview_cv_endpoint(
    data: CVPreviewRequest,
    source: Annotated[RecordSource, Depends(get_record_source)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CVPreviewResponse:
    """Return the aggregated CV data without rendering it."""
    document = preview_cv(data.person_id, source, data.sections, settings=settings)
    return CVPreviewResponse(**document.to_dict())


@router.get("/sections", response_model=list[SectionInfo])
def list_sections() -> list[SectionInfo]:
    """Return the section catalogue in canonical order."""
    return [
        SectionInfo(key=spec.key.value, title=spec.title, layout=spec.layout.value)
        for spec in SECTION_SPECS.values()
    ]


@router.get("/templates", response_model=list[TemplateInfo])
def list_templates_endpoint() -> list[TemplateInfo]:
    """Return every CV template with its display name."""
    return [
        TemplateInfo(id=template_id, name=get_template(template_id).name)
        for template_id in list_templates()
    ]
