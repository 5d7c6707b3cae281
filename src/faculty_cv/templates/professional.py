"""Professional CV template.

Arial on a solid blue header band, left-border accents on headings and
entries.
"""

from __future__ import annotations

from dataclasses import replace

from faculty_cv.templates.base import (
    Alignment,
    Border,
    BorderSide,
    CVTemplate,
    SlotStyle,
    StyleSlot,
    TemplateId,
)

__all__ = ["ProfessionalTemplate"]

_BLUE = "2563EB"
_DEEP_BLUE = "1D4ED8"
_PALE_BLUE = "DBEAFE"
_BODY = SlotStyle(font_family="Arial", font_size=10.5, color="374151")


class ProfessionalTemplate(CVTemplate):
    """Sans-serif layout with a coloured header band."""

    @property
    def template_id(self) -> TemplateId:
        return TemplateId.PROFESSIONAL

    @property
    def name(self) -> str:
        return "Professional"

    def define_slots(self) -> dict[StyleSlot, SlotStyle]:
        return {
            StyleSlot.DOCUMENT_BODY: _BODY,
            StyleSlot.HEADER_BAND: replace(
                _BODY, background=_BLUE, color="FFFFFF", align=Alignment.CENTER, space_after=22
            ),
            StyleSlot.NAME: replace(_BODY, font_size=24, color="FFFFFF", align=Alignment.CENTER),
            StyleSlot.TITLE: replace(
                _BODY, font_size=15, color=_PALE_BLUE, align=Alignment.CENTER, space_after=2
            ),
            StyleSlot.CONTACT: replace(
                _BODY, font_size=9, color=_PALE_BLUE, align=Alignment.CENTER, space_before=8
            ),
            StyleSlot.SECTION_WRAPPER: replace(_BODY, keep_together=True, space_after=18),
            StyleSlot.SECTION_TITLE: replace(
                _BODY,
                font_size=12,
                bold=True,
                color=_DEEP_BLUE,
                uppercase=True,
                border=Border(BorderSide.LEFT, 3, _BLUE),
                space_before=6,
                space_after=10,
            ),
            StyleSlot.ITEM_WRAPPER: replace(
                _BODY, border=Border(BorderSide.LEFT, 1.5, "E5E7EB"), space_after=10
            ),
            StyleSlot.ITEM_TITLE: replace(_BODY, bold=True, color="111827", space_after=2),
            StyleSlot.ITEM_SUBTITLE: replace(_BODY, color=_BLUE, space_after=2),
            StyleSlot.ITEM_DETAIL: replace(_BODY, font_size=10, color="4B5563", space_after=2),
            StyleSlot.TABLE: replace(_BODY, font_size=10, space_after=10),
            StyleSlot.TABLE_HEADER_CELL: replace(
                _BODY,
                font_size=10,
                bold=True,
                color="1E40AF",
                background="EFF6FF",
                border=Border(BorderSide.BOTTOM, 0.75, "BFDBFE"),
            ),
            StyleSlot.TABLE_DATA_CELL: replace(
                _BODY, font_size=10, border=Border(BorderSide.BOTTOM, 0.75, "E5E7EB")
            ),
            StyleSlot.PUBLICATION_ENTRY: replace(
                _BODY, border=Border(BorderSide.LEFT, 0.75, "BFDBFE"), space_after=8
            ),
        }
