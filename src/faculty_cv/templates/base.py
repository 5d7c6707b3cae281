"""Style slots and the abstract base class for CV templates.

A template is a complete mapping from every :class:`StyleSlot` to an
immutable :class:`SlotStyle`.  Completeness is checked when the template
object is constructed, so a render can never hit a missing slot.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from faculty_cv.errors import TemplateDefinitionError

__all__ = [
    "Alignment",
    "Border",
    "BorderSide",
    "CVTemplate",
    "SlotStyle",
    "StyleSlot",
    "TemplateId",
]

_HEX_COLOR = re.compile(r"^[0-9A-F]{6}$")


class TemplateId(StrEnum):
    """Selectable visual variants."""

    ACADEMIC = "academic"
    PROFESSIONAL = "professional"
    MODERN = "modern"
    CLASSIC = "classic"


class StyleSlot(StrEnum):
    """Visual roles every template must style."""

    DOCUMENT_BODY = "document_body"
    HEADER_BAND = "header_band"
    NAME = "name"
    TITLE = "title"
    CONTACT = "contact"
    SECTION_WRAPPER = "section_wrapper"
    SECTION_TITLE = "section_title"
    ITEM_WRAPPER = "item_wrapper"
    ITEM_TITLE = "item_title"
    ITEM_SUBTITLE = "item_subtitle"
    ITEM_DETAIL = "item_detail"
    TABLE = "table"
    TABLE_HEADER_CELL = "table_header_cell"
    TABLE_DATA_CELL = "table_data_cell"
    PUBLICATION_ENTRY = "publication_entry"


class BorderSide(StrEnum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    BOX = "box"


class Alignment(StrEnum):
    LEFT = "left"
    CENTER = "center"
    JUSTIFY = "justify"


def _check_color(value: str | None, what: str) -> None:
    if value is not None and not _HEX_COLOR.match(value):
        msg = f"{what} must be an upper-case RRGGBB hex string, got {value!r}"
        raise TemplateDefinitionError(msg)


@dataclass(frozen=True)
class Border:
    """A rule drawn on one side of (or around) a styled element."""

    side: BorderSide
    width: float = 1.0  # pt
    color: str = "000000"

    def __post_init__(self) -> None:
        _check_color(self.color, "Border color")
        if self.width <= 0:
            raise TemplateDefinitionError("Border width must be positive")


@dataclass(frozen=True)
class SlotStyle:
    """Property bag applied to one visual role.

    Sizes and spacing are in points; colours are ``RRGGBB`` hex strings.
    ``keep_together`` is the page-break hint: renderers should avoid
    splitting the element across pages where they can.
    """

    font_family: str = "Times New Roman"
    font_size: float = 11.0
    bold: bool = False
    italic: bool = False
    color: str = "1F2937"
    background: str | None = None
    space_before: float = 0.0
    space_after: float = 0.0
    border: Border | None = None
    keep_together: bool = False
    uppercase: bool = False
    align: Alignment = Alignment.LEFT

    def __post_init__(self) -> None:
        _check_color(self.color, "Text color")
        _check_color(self.background, "Background color")
        if self.font_size <= 0:
            raise TemplateDefinitionError("Font size must be positive")


class CVTemplate(ABC):
    """Interface that every CV template must implement.

    Subclasses declare their styles in :meth:`define_slots`; the
    constructor refuses templates that leave any slot undefined.
    """

    def __init__(self) -> None:
        slots = dict(self.define_slots())
        missing = [slot.value for slot in StyleSlot if slot not in slots]
        unknown = [str(slot) for slot in slots if not isinstance(slot, StyleSlot)]
        if missing or unknown:
            parts = []
            if missing:
                parts.append(f"missing slots: {', '.join(missing)}")
            if unknown:
                parts.append(f"unknown slots: {', '.join(unknown)}")
            msg = f"Template {self.template_id!s} is incomplete ({'; '.join(parts)})"
            raise TemplateDefinitionError(msg)
        self._slots: Mapping[StyleSlot, SlotStyle] = MappingProxyType(slots)

    @property
    @abstractmethod
    def template_id(self) -> TemplateId:
        """Identifier callers select the template by."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable template name shown in the UI."""

    @abstractmethod
    def define_slots(self) -> Mapping[StyleSlot, SlotStyle]:
        """Return the style of every :class:`StyleSlot`."""

    @property
    def slots(self) -> Mapping[StyleSlot, SlotStyle]:
        """Read-only view of the validated slot styles."""
        return self._slots

    def __getitem__(self, slot: StyleSlot) -> SlotStyle:
        return self._slots[slot]
