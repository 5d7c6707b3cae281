"""Modern CV template.

Light sans-serif on a soft grey page, boxed header and entries, shaded
section labels.
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

__all__ = ["ModernTemplate"]

_BODY = SlotStyle(font_family="Segoe UI", font_size=10.5, color="111827", background="F9FAFB")


class ModernTemplate(CVTemplate):
    """Card-like layout with boxed entries."""

    @property
    def template_id(self) -> TemplateId:
        return TemplateId.MODERN

    @property
    def name(self) -> str:
        return "Modern"

    def define_slots(self) -> dict[StyleSlot, SlotStyle]:
        plain = replace(_BODY, background=None)
        return {
            StyleSlot.DOCUMENT_BODY: _BODY,
            StyleSlot.HEADER_BAND: replace(
                plain,
                background="FFFFFF",
                border=Border(BorderSide.BOX, 0.5, "E5E7EB"),
                align=Alignment.CENTER,
                space_after=22,
            ),
            StyleSlot.NAME: replace(plain, font_size=24, align=Alignment.CENTER),
            StyleSlot.TITLE: replace(
                plain, font_size=15, color="4B5563", align=Alignment.CENTER, space_after=2
            ),
            StyleSlot.CONTACT: replace(
                plain, font_size=9, color="6B7280", align=Alignment.CENTER, space_before=8
            ),
            StyleSlot.SECTION_WRAPPER: replace(plain, keep_together=True, space_after=18),
            StyleSlot.SECTION_TITLE: replace(
                plain, font_size=12, color="374151", background="E5E7EB", space_after=10
            ),
            StyleSlot.ITEM_WRAPPER: replace(
                plain,
                background="FFFFFF",
                border=Border(BorderSide.BOX, 0.5, "F3F4F6"),
                space_after=10,
            ),
            StyleSlot.ITEM_TITLE: replace(plain, space_after=2),
            StyleSlot.ITEM_SUBTITLE: replace(plain, color="4B5563", space_after=2),
            StyleSlot.ITEM_DETAIL: replace(plain, font_size=10, color="6B7280", space_after=2),
            StyleSlot.TABLE: replace(plain, font_size=10, background="FFFFFF", space_after=10),
            StyleSlot.TABLE_HEADER_CELL: replace(
                plain, font_size=10, color="374151", background="F3F4F6"
            ),
            StyleSlot.TABLE_DATA_CELL: replace(
                plain,
                font_size=10,
                background="FFFFFF",
                border=Border(BorderSide.BOTTOM, 0.75, "F3F4F6"),
            ),
            StyleSlot.PUBLICATION_ENTRY: replace(
                plain,
                background="FFFFFF",
                border=Border(BorderSide.BOX, 0.5, "F3F4F6"),
                space_after=8,
            ),
        }
