"""Renderer-agnostic block model and the section block builder.

Blocks carry text and the :class:`StyleSlot` each piece is drawn with,
never concrete style values.  Both renderers consume the same block
sequence, which is what keeps their section order and content identical.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from faculty_cv.constants.sections import (
    FieldKind,
    FieldSpec,
    SectionKey,
    SectionLayout,
    SectionSpec,
    canonical_sections,
    get_section_spec,
)
from faculty_cv.templates.base import StyleSlot

if TYPE_CHECKING:
    from faculty_cv.services.cv_data import CategoryRecord, DocumentModel, PersonalRecord
    from faculty_cv.templates.base import CVTemplate

__all__ = [
    "EMPTY_SECTION_TEXT",
    "Block",
    "HeaderBlock",
    "ItemBlock",
    "SectionBlock",
    "TableBlock",
    "build_blocks",
    "clean_text",
    "format_date",
    "format_field",
    "format_year",
]

logger = logging.getLogger(__name__)

EMPTY_SECTION_TEXT = "No data available for this section."
MISSING_CELL = "N/A"

PHOTO_SUFFIXES = frozenset({".png", ".jpg", ".jpeg"})

# Code points that are illegal in XML 1.0 and meaningless to TeX.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class HeaderBlock:
    """Name, affiliation and contact lines at the top of the CV."""

    name: str
    subtitle_lines: tuple[str, ...] = ()
    contact_lines: tuple[str, ...] = ()
    profile_image: str | None = None

    band_slot: ClassVar[StyleSlot] = StyleSlot.HEADER_BAND
    name_slot: ClassVar[StyleSlot] = StyleSlot.NAME
    title_slot: ClassVar[StyleSlot] = StyleSlot.TITLE
    contact_slot: ClassVar[StyleSlot] = StyleSlot.CONTACT


@dataclass(frozen=True)
class ItemBlock:
    """One record rendered as a title, optional subtitle and detail lines."""

    title: str
    subtitle: str = ""
    details: tuple[str, ...] = ()
    wrapper_slot: StyleSlot = StyleSlot.ITEM_WRAPPER

    title_slot: ClassVar[StyleSlot] = StyleSlot.ITEM_TITLE
    subtitle_slot: ClassVar[StyleSlot] = StyleSlot.ITEM_SUBTITLE
    detail_slot: ClassVar[StyleSlot] = StyleSlot.ITEM_DETAIL

    @property
    def is_publication(self) -> bool:
        return self.wrapper_slot is StyleSlot.PUBLICATION_ENTRY

    def text_lines(self) -> list[str]:
        """Visible text of the item, in reading order."""
        return [line for line in (self.title, self.subtitle, *self.details) if line]


@dataclass(frozen=True)
class TableBlock:
    """A section rendered as a grid with schema-derived headers."""

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    slot: ClassVar[StyleSlot] = StyleSlot.TABLE
    header_slot: ClassVar[StyleSlot] = StyleSlot.TABLE_HEADER_CELL
    cell_slot: ClassVar[StyleSlot] = StyleSlot.TABLE_DATA_CELL


@dataclass(frozen=True)
class SectionBlock:
    """A titled section holding either items or exactly one table."""

    key: SectionKey
    title: str
    items: tuple[ItemBlock, ...] = ()
    table: TableBlock | None = None

    wrapper_slot: ClassVar[StyleSlot] = StyleSlot.SECTION_WRAPPER
    title_slot: ClassVar[StyleSlot] = StyleSlot.SECTION_TITLE

    @property
    def is_empty(self) -> bool:
        return not self.items and (self.table is None or not self.table.rows)


Block = HeaderBlock | SectionBlock


# ----------------------------------------------------------------------
# Value formatting


def clean_text(value: object) -> str:
    """Return *value* as one line of text that both renderers accept.

    Control characters become spaces and whitespace runs collapse to a
    single space.
    """
    if value is None:
        return ""
    text = _CONTROL_CHARS.sub(" ", str(value))
    return _WHITESPACE.sub(" ", text).strip()


def _parse_iso(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def format_year(value: str | None) -> str:
    """Return the year of an ISO date, or the raw value if it is not one."""
    parsed = _parse_iso(value)
    if parsed is not None:
        return str(parsed.year)
    return value or ""


def format_date(value: str | None) -> str:
    """Return an ISO date as ``dd/mm/yyyy``, or the raw value if it is not one."""
    parsed = _parse_iso(value)
    if parsed is not None:
        return parsed.strftime("%d/%m/%Y")
    return value or ""


def _format_amount(value: str) -> str:
    try:
        amount = float(value.replace(",", ""))
    except ValueError:
        return value
    if amount.is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def _format_flag(value: str) -> str:
    return "Yes" if value.strip().lower() in {"1", "true", "yes", "y"} else "No"


def format_field(spec: FieldSpec, value: str | None) -> str:
    """Format a category-specific value according to its field kind."""
    if value is None or not str(value).strip():
        return ""
    value = str(value).strip()
    if spec.kind is FieldKind.DATE:
        return format_date(value)
    if spec.kind is FieldKind.AMOUNT:
        return _format_amount(value)
    if spec.kind is FieldKind.FLAG:
        return _format_flag(value)
    return value


# ----------------------------------------------------------------------
# Builders


def _photo(value: str | None) -> str | None:
    """Return the absolute path of a usable local photo, or ``None``."""
    if not value:
        return None
    path = Path(value).expanduser()
    if path.suffix.lower() not in PHOTO_SUFFIXES or not path.is_file():
        logger.debug("Profile image %r is not a local PNG or JPEG file; omitting it", value)
        return None
    return str(path.resolve())


def _header(personal: PersonalRecord) -> HeaderBlock:
    subtitle = tuple(
        line
        for line in (
            clean_text(personal.get("designation")),
            clean_text(personal.get("department")),
            clean_text(personal.get("institution")),
        )
        if line
    )

    contact: list[str] = []
    reach = [
        f"{caption}: {value}"
        for caption, value in (("Email", personal.get("email")), ("Phone", personal.get("phone")))
        if value
    ]
    if reach:
        contact.append(" | ".join(reach))
    for caption, key in (
        ("Date of Birth", "date_of_birth"),
        ("Address", "address"),
        ("ORCID", "orcid"),
    ):
        if personal.get(key):
            contact.append(f"{caption}: {personal[key]}")

    return HeaderBlock(
        name=clean_text(personal.get("name")),
        subtitle_lines=subtitle,
        contact_lines=tuple(clean_text(line) for line in contact),
        profile_image=_photo(personal.get("profile_image")),
    )


def _detail(record: CategoryRecord, spec: FieldSpec) -> str:
    return format_field(spec, record.get("details", {}).get(spec.key))


def _item(spec: SectionSpec, record: CategoryRecord) -> ItemBlock:
    subtitle = ", ".join(
        part for part in (record.get("institution", ""), format_year(record.get("date"))) if part
    )
    details = []
    for field_spec in spec.fields:
        value = _detail(record, field_spec)
        if value:
            details.append(clean_text(f"{field_spec.caption}: {value}"))
    return ItemBlock(
        title=clean_text(record.get("label")),
        subtitle=clean_text(subtitle),
        details=tuple(details),
    )


def _publication(spec: SectionSpec, record: CategoryRecord, number: int) -> ItemBlock:
    """Citation-style entry: ``n. Authors. "Title". Venue, Year. Extra: value.``"""
    segments: list[str] = []
    authors = record.get("details", {}).get("authors", "").strip()
    if authors:
        segments.append(authors)
    segments.append(f'"{record.get("label", "")}"')
    venue = ", ".join(
        part for part in (record.get("institution", ""), format_year(record.get("date"))) if part
    )
    if venue:
        segments.append(venue)
    for field_spec in spec.fields:
        if field_spec.key == "authors":
            continue
        value = _detail(record, field_spec)
        if value:
            segments.append(f"{field_spec.caption}: {value}")
    text = f"{number}. " + ". ".join(segments) + "."
    return ItemBlock(title=clean_text(text), wrapper_slot=StyleSlot.PUBLICATION_ENTRY)


def _table(spec: SectionSpec, records: list[CategoryRecord]) -> TableBlock:
    rows = []
    for record in records:
        cells = [
            record.get("label", ""),
            record.get("institution", ""),
            format_date(record.get("date")),
            *(_detail(record, field_spec) for field_spec in spec.fields),
        ]
        rows.append(tuple(clean_text(cell) or MISSING_CELL for cell in cells))
    return TableBlock(headers=tuple(spec.column_headers), rows=tuple(rows))


def _section(key: SectionKey, records: list[CategoryRecord]) -> SectionBlock:
    spec = get_section_spec(key)
    if spec.layout is SectionLayout.TABLE:
        return SectionBlock(key=key, title=spec.title, table=_table(spec, records))
    if not records:
        return SectionBlock(key=key, title=spec.title)
    if spec.layout is SectionLayout.PUBLICATIONS:
        items = tuple(_publication(spec, r, n) for n, r in enumerate(records, start=1))
    else:
        items = tuple(_item(spec, r) for r in records)
    return SectionBlock(key=key, title=spec.title, items=items)


def build_blocks(
    document: DocumentModel,
    sections: Iterable[SectionKey | str],
    template: CVTemplate | None = None,
) -> list[Block]:
    """Turn a document model into the ordered block sequence.

    Args:
        document: Aggregated CV data.
        sections: Requested section keys; caller order is discarded.
        template: The style dictionary the blocks will be rendered with.
            Blocks only name slots, so it does not change the output.

    Returns:
        One :class:`HeaderBlock` followed by one :class:`SectionBlock` per
        requested key, in canonical order.

    Raises:
        ValueError: If the document has no personal record.
    """
    if document.personal is None:
        raise ValueError("A CV cannot be built without personal information")

    blocks: list[Block] = [_header(document.personal)]
    for key in canonical_sections(sections):
        blocks.append(_section(key, document.records(key)))
    return blocks
