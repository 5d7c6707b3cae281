from __future__ import annotations

from faculty_cv.constants.sections import (
    CANONICAL_ORDER,
    SECTION_SPECS,
    FieldKind,
    FieldSpec,
    SectionKey,
    SectionLayout,
    SectionSpec,
    canonical_sections,
    get_section_spec,
)

__all__ = [
    "CANONICAL_ORDER",
    "SECTION_SPECS",
    "FieldKind",
    "FieldSpec",
    "SectionKey",
    "SectionLayout",
    "SectionSpec",
    "canonical_sections",
    "get_section_spec",
]
