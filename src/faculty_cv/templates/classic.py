"""Classic CV template.

Georgia on warm paper, thin grey rules, letter-spaced capitals.
Traditional and elegant.
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

__all__ = ["ClassicTemplate"]

_RULE = "9CA3AF"
_BODY = SlotStyle(font_family="Georgia", font_size=11, color="1F2937", background="FEFDF8")


class ClassicTemplate(CVTemplate):
    """Traditional serif layout with fully ruled tables."""

    @property
    def template_id(self) -> TemplateId:
        return TemplateId.CLASSIC

    @property
    def name(self) -> str:
        return "Classic"

    def define_slots(self) -> dict[StyleSlot, SlotStyle]:
        plain = replace(_BODY, background=None)
        return {
            StyleSlot.DOCUMENT_BODY: _BODY,
            StyleSlot.HEADER_BAND: replace(
                plain,
                align=Alignment.CENTER,
                border=Border(BorderSide.BOTTOM, 0.75, _RULE),
                space_after=22,
            ),
            StyleSlot.NAME: replace(plain, font_size=21, bold=True, align=Alignment.CENTER),
            StyleSlot.TITLE: replace(
                plain, font_size=13.5, color="374151", align=Alignment.CENTER, space_after=2
            ),
            StyleSlot.CONTACT: replace(
                plain, font_size=9, color="4B5563", align=Alignment.CENTER, space_before=8
            ),
            StyleSlot.SECTION_WRAPPER: replace(plain, keep_together=True, space_after=18),
            StyleSlot.SECTION_TITLE: replace(
                plain,
                font_size=12,
                bold=True,
                color="374151",
                uppercase=True,
                border=Border(BorderSide.BOTTOM, 0.75, _RULE),
                space_before=6,
                space_after=10,
            ),
            StyleSlot.ITEM_WRAPPER: replace(plain, space_after=10),
            StyleSlot.ITEM_TITLE: replace(plain, bold=True, space_after=2),
            StyleSlot.ITEM_SUBTITLE: replace(plain, italic=True, color="374151", space_after=2),
            StyleSlot.ITEM_DETAIL: replace(plain, font_size=10, color="4B5563", space_after=2),
            StyleSlot.TABLE: replace(
                plain, font_size=10, border=Border(BorderSide.BOX, 1.5, _RULE), space_after=10
            ),
            StyleSlot.TABLE_HEADER_CELL: replace(
                plain,
                font_size=10,
                bold=True,
                background="E5E7EB",
                border=Border(BorderSide.BOX, 0.75, _RULE),
            ),
            StyleSlot.TABLE_DATA_CELL: replace(
                plain, font_size=10, border=Border(BorderSide.BOX, 0.75, _RULE)
            ),
            StyleSlot.PUBLICATION_ENTRY: replace(plain, align=Alignment.JUSTIFY, space_after=8),
        }
