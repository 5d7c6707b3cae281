"""Template registry for CV generation."""

from __future__ import annotations

from faculty_cv.templates.academic import AcademicTemplate
from faculty_cv.templates.base import CVTemplate, SlotStyle, StyleSlot, TemplateId
from faculty_cv.templates.classic import ClassicTemplate
from faculty_cv.templates.modern import ModernTemplate
from faculty_cv.templates.professional import ProfessionalTemplate

__all__ = [
    "CVTemplate",
    "SlotStyle",
    "StyleSlot",
    "TemplateId",
    "get_template",
    "list_templates",
]

# Built at import: an incomplete template fails here, never during a render.
_REGISTRY: dict[TemplateId, CVTemplate] = {
    TemplateId.ACADEMIC: AcademicTemplate(),
    TemplateId.PROFESSIONAL: ProfessionalTemplate(),
    TemplateId.MODERN: ModernTemplate(),
    TemplateId.CLASSIC: ClassicTemplate(),
}


def get_template(name: TemplateId | str) -> CVTemplate:
    """Return the template registered under *name*.

    Raises:
        ValueError: If no template with that name exists.
    """
    try:
        return _REGISTRY[TemplateId(name)]
    except ValueError:
        available = ", ".join(list_templates())
        msg = f"Unknown template {name!r}. Available: {available}"
        raise ValueError(msg) from None


def list_templates() -> list[str]:
    """Return the names of all registered templates."""
    return [template_id.value for template_id in _REGISTRY]
