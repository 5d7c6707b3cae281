"""CV generation orchestration.

Runs one request through the pipeline stages in order:
validate, aggregate, build blocks, render, respond.  Validation happens
before any store access; there are no retries.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from faculty_cv.config import Settings, get_settings
from faculty_cv.constants.sections import SectionKey, canonical_sections
from faculty_cv.errors import CVGenerationError, RenderEngineError, ValidationError
from faculty_cv.rendering import OutputFormat, Renderer, build_blocks, get_renderer
from faculty_cv.services.aggregator import aggregate_cv_data
from faculty_cv.services.cv_data import DocumentModel
from faculty_cv.services.record_source import RecordSource
from faculty_cv.templates import TemplateId, get_template

logger = logging.getLogger(__name__)

__all__ = [
    "CVRequest",
    "GeneratedDocument",
    "GenerationStage",
    "ValidatedRequest",
    "build_filename",
    "generate_cv",
    "preview_cv",
    "validate_request",
]

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME = re.compile(r'[\\/:"*?<>|]+')


class GenerationStage(StrEnum):
    VALIDATING = "Validating"
    AGGREGATING = "Aggregating"
    BUILDING_BLOCKS = "Building Blocks"
    RENDERING = "Rendering"
    RESPONDING = "Responding"


@dataclass(frozen=True)
class CVRequest:
    """Parameters of one CV generation request, as received."""

    person_id: int
    template: str
    format: str
    sections: Sequence[str]


@dataclass(frozen=True)
class ValidatedRequest:
    person_id: int
    template: TemplateId
    format: OutputFormat
    sections: list[SectionKey]


@dataclass(frozen=True)
class GeneratedDocument:
    """Rendered file ready to be returned to the caller."""

    content: bytes
    media_type: str
    filename: str


def _stage(stage: GenerationStage, person_id: object) -> None:
    logger.info("CV generation for person %s: %s", person_id, stage)


def _validate_person_id(person_id: object) -> int:
    if isinstance(person_id, bool) or not isinstance(person_id, int) or person_id <= 0:
        raise ValidationError("person_id must be a positive integer", field="person_id")
    return person_id


def _validate_sections(sections: object) -> list[SectionKey]:
    if isinstance(sections, str) or not sections:
        raise ValidationError("At least one section must be selected", field="sections")
    try:
        return canonical_sections(sections)  # type: ignore[arg-type]
    except ValueError as exc:
        raise ValidationError(str(exc), field="sections") from exc


def validate_request(request: CVRequest) -> ValidatedRequest:
    """Check every request field before any data is fetched.

    Raises:
        ValidationError: On the first malformed field.
    """
    person_id = _validate_person_id(request.person_id)
    try:
        template = get_template(request.template).template_id
    except ValueError as exc:
        raise ValidationError(str(exc), field="template") from exc
    try:
        output_format = OutputFormat(request.format)
    except ValueError:
        available = ", ".join(fmt.value for fmt in OutputFormat)
        msg = f"Unknown format {request.format!r}. Available: {available}"
        raise ValidationError(msg, field="format") from None
    sections = _validate_sections(request.sections)
    return ValidatedRequest(person_id, template, output_format, sections)


def build_filename(name: str, template: str, extension: str, on: date | None = None) -> str:
    """Return ``CV_<Name>_<template>_<YYYY-MM-DD>.<ext>``."""
    on = on or date.today()
    safe = _UNSAFE_FILENAME.sub("", _WHITESPACE.sub("_", name.strip())) or "Faculty"
    return f"CV_{safe}_{template}_{on.isoformat()}.{extension}"


def generate_cv(
    request: CVRequest,
    source: RecordSource,
    *,
    settings: Settings | None = None,
    renderer: Renderer | None = None,
) -> GeneratedDocument:
    """Generate one CV file.

    Args:
        request: Raw request parameters.
        source: Record-store collaborator.
        settings: Runtime configuration; read from the environment if omitted.
        renderer: Overrides the renderer chosen from ``request.format``.

    Returns:
        The rendered file with its media type and download filename.

    Raises:
        ValidationError: If the request is malformed.
        MissingIdentityError: If the person has no personal record.
        DataFetchError: If the personal record cannot be fetched.
        RenderEngineError: If rendering fails or times out.
    """
    settings = settings or get_settings()

    _stage(GenerationStage.VALIDATING, request.person_id)
    validated = validate_request(request)

    _stage(GenerationStage.AGGREGATING, validated.person_id)
    document = aggregate_cv_data(
        validated.person_id,
        validated.sections,
        source,
        max_workers=settings.fetch_workers,
        timeout=settings.fetch_timeout,
    )

    _stage(GenerationStage.BUILDING_BLOCKS, validated.person_id)
    template = get_template(validated.template)
    blocks = build_blocks(document, validated.sections, template)

    _stage(GenerationStage.RENDERING, validated.person_id)
    renderer = renderer or get_renderer(validated.format, settings)
    try:
        content = renderer.render(blocks, template)
    except CVGenerationError:
        raise
    except Exception as exc:
        logger.exception("%s renderer failed for person %d", validated.format, validated.person_id)
        raise RenderEngineError(f"Rendering failed: {exc}") from exc

    _stage(GenerationStage.RESPONDING, validated.person_id)
    name = (document.personal or {}).get("name", "")
    filename = build_filename(name, validated.template, renderer.extension)
    logger.info("Generated %s (%d bytes)", filename, len(content))
    return GeneratedDocument(content=content, media_type=renderer.media_type, filename=filename)


def preview_cv(
    person_id: int,
    source: RecordSource,
    sections: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
) -> DocumentModel:
    """Aggregate CV data without rendering; defaults to every section."""
    settings = settings or get_settings()
    _stage(GenerationStage.VALIDATING, person_id)
    person_id = _validate_person_id(person_id)
    keys = list(SectionKey) if sections is None else _validate_sections(sections)

    _stage(GenerationStage.AGGREGATING, person_id)
    return aggregate_cv_data(
        person_id,
        keys,
        source,
        max_workers=settings.fetch_workers,
        timeout=settings.fetch_timeout,
    )
