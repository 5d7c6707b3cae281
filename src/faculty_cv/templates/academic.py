"""Academic CV template.

Times New Roman, navy accents, ruled section headings.  Formal and
scholarly.
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

__all__ = ["AcademicTemplate"]

_NAVY = "1E3A8A"
_BODY = SlotStyle(font_family="Times New Roman", font_size=11, color="333333")


class AcademicTemplate(CVTemplate):
    """Serif layout with navy rules under the header and section titles."""

    @property
    def template_id(self) -> TemplateId:
        return TemplateId.ACADEMIC

    @property
    def name(self) -> str:
        return "Academic"

    def define_slots(self) -> dict[StyleSlot, SlotStyle]:
        return {
            StyleSlot.DOCUMENT_BODY: _BODY,
            StyleSlot.HEADER_BAND: replace(
                _BODY,
                align=Alignment.CENTER,
                border=Border(BorderSide.BOTTOM, 1.5, _NAVY),
                space_after=22,
            ),
            StyleSlot.NAME: replace(
                _BODY, font_size=21, bold=True, color="1F2937", align=Alignment.CENTER
            ),
            StyleSlot.TITLE: replace(
                _BODY, font_size=13.5, color="4B5563", align=Alignment.CENTER, space_after=2
            ),
            StyleSlot.CONTACT: replace(
                _BODY, font_size=9, color="6B7280", align=Alignment.CENTER, space_before=8
            ),
            StyleSlot.SECTION_WRAPPER: replace(_BODY, keep_together=True, space_after=18),
            StyleSlot.SECTION_TITLE: replace(
                _BODY,
                font_size=12,
                bold=True,
                color=_NAVY,
                uppercase=True,
                border=Border(BorderSide.BOTTOM, 1.5, _NAVY),
                space_before=6,
                space_after=10,
            ),
            StyleSlot.ITEM_WRAPPER: replace(_BODY, space_after=10),
            StyleSlot.ITEM_TITLE: replace(_BODY, bold=True, color="1F2937", space_after=2),
            StyleSlot.ITEM_SUBTITLE: replace(
                _BODY, font_size=10.5, italic=True, color="4B5563", space_after=2
            ),
            StyleSlot.ITEM_DETAIL: replace(_BODY, font_size=10, color="6B7280", space_after=2),
            StyleSlot.TABLE: replace(
                _BODY, font_size=10, border=Border(BorderSide.BOX, 0.75, "D1D5DB"), space_after=10
            ),
            StyleSlot.TABLE_HEADER_CELL: replace(
                _BODY,
                font_size=10,
                bold=True,
                background="F3F4F6",
                border=Border(BorderSide.BOX, 0.75, "D1D5DB"),
            ),
            StyleSlot.TABLE_DATA_CELL: replace(
                _BODY, font_size=10, border=Border(BorderSide.BOX, 0.75, "D1D5DB")
            ),
            StyleSlot.PUBLICATION_ENTRY: replace(
                _BODY, font_size=10.5, align=Alignment.JUSTIFY, space_after=8
            ),
        }
