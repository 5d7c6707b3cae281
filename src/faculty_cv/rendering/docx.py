"""Editable-document (DOCX) renderer built on python-docx.

Slot styles map onto native run and paragraph formatting so the output
stays editable.  Shading, paragraph borders and the page background have
no python-docx API and are written as raw WordprocessingML.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from io import BytesIO

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor
from docx.table import Table
from docx.text.paragraph import Paragraph

from faculty_cv.rendering.base import OutputFormat, Renderer
from faculty_cv.rendering.blocks import (
    EMPTY_SECTION_TEXT,
    Block,
    HeaderBlock,
    ItemBlock,
    SectionBlock,
    TableBlock,
)
from faculty_cv.templates.base import Alignment, BorderSide, CVTemplate, SlotStyle, StyleSlot

__all__ = ["DOCX_MEDIA_TYPE", "DocxRenderer"]

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

PHOTO_WIDTH = Inches(1.2)

_ALIGN = {
    Alignment.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.JUSTIFY: WD_ALIGN_PARAGRAPH.JUSTIFY,
}

# Elements that must follow w:pBdr / w:shd inside w:pPr.
_PPR_AFTER_SHD = (
    "w:tabs",
    "w:suppressAutoHyphens",
    "w:kinsoku",
    "w:wordWrap",
    "w:overflowPunct",
    "w:topLinePunct",
    "w:autoSpaceDE",
    "w:autoSpaceDN",
    "w:bidi",
    "w:adjustRightInd",
    "w:snapToGrid",
    "w:spacing",
    "w:ind",
    "w:contextualSpacing",
    "w:mirrorIndents",
    "w:suppressOverlap",
    "w:jc",
    "w:textDirection",
    "w:textAlignment",
    "w:textboxTightWrap",
    "w:outlineLvl",
    "w:divId",
    "w:cnfStyle",
    "w:rPr",
    "w:sectPr",
    "w:pPrChange",
)
_PPR_AFTER_BDR = ("w:shd", *_PPR_AFTER_SHD)

# Elements that must follow w:tcBorders / w:shd inside w:tcPr.
_TCPR_AFTER_SHD = (
    "w:noWrap",
    "w:tcMar",
    "w:textDirection",
    "w:tcFitText",
    "w:vAlign",
    "w:hideMark",
)
_TCPR_AFTER_BDR = ("w:shd", *_TCPR_AFTER_SHD)


def _eighths(width: float) -> str:
    """Border width in the eighth-point units WordprocessingML uses."""
    return str(max(2, round(width * 8)))


def _border_element(side: str, width: float, color: str):
    border = OxmlElement(f"w:{side}")
    border.set(qn("w:val"), "single")
    border.set(qn("w:sz"), _eighths(width))
    border.set(qn("w:space"), "1")
    border.set(qn("w:color"), color)
    return border


def _shading_element(fill: str):
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    return shd


def _shade_paragraph(paragraph: Paragraph, fill: str) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    existing = pPr.find(qn("w:shd"))
    if existing is not None:
        pPr.remove(existing)
    pPr.insert_element_before(_shading_element(fill), *_PPR_AFTER_SHD)


def _border_paragraph(paragraph: Paragraph, sides: Sequence[str], width: float, color: str) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = pPr.find(qn("w:pBdr"))
    if pBdr is None:
        pBdr = OxmlElement("w:pBdr")
        pPr.insert_element_before(pBdr, *_PPR_AFTER_BDR)
    for side in sides:
        pBdr.append(_border_element(side, width, color))


def _shade_cell(cell, fill: str) -> None:
    tcPr = cell._element.get_or_add_tcPr()
    existing = tcPr.find(qn("w:shd"))
    if existing is not None:
        tcPr.remove(existing)
    tcPr.insert_element_before(_shading_element(fill), *_TCPR_AFTER_SHD)


def _border_cell(cell, side: str, width: float, color: str) -> None:
    tcPr = cell._element.get_or_add_tcPr()
    tcBorders = tcPr.find(qn("w:tcBorders"))
    if tcBorders is None:
        tcBorders = OxmlElement("w:tcBorders")
        tcPr.insert_element_before(tcBorders, *_TCPR_AFTER_BDR)
    tcBorders.append(_border_element(side, width, color))


def _style_run(run, style: SlotStyle) -> None:
    font = run.font
    font.name = style.font_family
    font.size = Pt(style.font_size)
    font.bold = style.bold
    font.italic = style.italic
    font.all_caps = style.uppercase
    font.color.rgb = RGBColor.from_string(style.color)


def _style_paragraph(paragraph: Paragraph, style: SlotStyle) -> None:
    fmt = paragraph.paragraph_format
    fmt.alignment = _ALIGN[style.align]
    fmt.space_before = Pt(style.space_before)
    fmt.space_after = Pt(style.space_after)


def _decorate(paragraphs: Sequence[Paragraph], style: SlotStyle) -> None:
    """Apply a wrapper's background, border and outer spacing to a run of paragraphs.

    Word merges identical borders on consecutive paragraphs into one box.
    """
    if not paragraphs:
        return
    if style.background is not None:
        for paragraph in paragraphs:
            _shade_paragraph(paragraph, style.background)

    border = style.border
    if border is not None:
        if border.side is BorderSide.BOX:
            for paragraph in paragraphs:
                _border_paragraph(
                    paragraph, ("top", "left", "bottom", "right"), border.width, border.color
                )
        elif border.side is BorderSide.LEFT:
            for paragraph in paragraphs:
                _border_paragraph(paragraph, ("left",), border.width, border.color)
        elif border.side is BorderSide.TOP:
            _border_paragraph(paragraphs[0], ("top",), border.width, border.color)
        else:
            _border_paragraph(paragraphs[-1], ("bottom",), border.width, border.color)

    _space(paragraphs, style)


def _space(paragraphs: Sequence[Paragraph], style: SlotStyle) -> None:
    """Apply outer spacing of a wrapper to the first and last paragraph."""
    if style.space_before:
        paragraphs[0].paragraph_format.space_before = Pt(style.space_before)
    if style.space_after:
        paragraphs[-1].paragraph_format.space_after = Pt(style.space_after)


class DocxRenderer(Renderer):
    """Renders blocks to a Letter-size Word document."""

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.WORD

    @property
    def media_type(self) -> str:
        return DOCX_MEDIA_TYPE

    @property
    def extension(self) -> str:
        return "docx"

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def render(self, blocks: Sequence[Block], template: CVTemplate) -> bytes:
        doc = self.build_document(blocks, template)
        buffer = BytesIO()
        doc.save(buffer)
        logger.debug("Rendered %d-block CV to %d bytes of DOCX", len(blocks), buffer.tell())
        return buffer.getvalue()

    def build_document(self, blocks: Sequence[Block], template: CVTemplate) -> DocxDocument:
        doc = self._create_document(template)
        for block in blocks:
            if isinstance(block, HeaderBlock):
                self._add_header(doc, block, template)
            else:
                self._add_section(doc, block, template)
        return doc

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _create_document(self, template: CVTemplate) -> DocxDocument:
        doc = Document()
        section = doc.sections[0]
        section.page_width = Inches(8.5)
        section.page_height = Inches(11)
        for side in ("top_margin", "bottom_margin", "left_margin", "right_margin"):
            setattr(section, side, Inches(1))

        body = template[StyleSlot.DOCUMENT_BODY]
        normal = doc.styles["Normal"]
        normal.font.name = body.font_family
        normal.font.size = Pt(body.font_size)
        normal.font.color.rgb = RGBColor.from_string(body.color)
        normal.paragraph_format.space_before = Pt(0)
        normal.paragraph_format.space_after = Pt(0)

        if body.background is not None:
            self._set_page_background(doc, body.background)
        return doc

    @staticmethod
    def _set_page_background(doc: DocxDocument, color: str) -> None:
        background = OxmlElement("w:background")
        background.set(qn("w:color"), color)
        doc.element.insert(0, background)

        settings = doc.settings.element
        display = OxmlElement("w:displayBackgroundShape")
        zoom = settings.find(qn("w:zoom"))
        if zoom is not None:
            zoom.addnext(display)
        else:
            settings.insert(0, display)

    def _add_paragraph(self, doc: DocxDocument, text: str, style: SlotStyle) -> Paragraph:
        paragraph = doc.add_paragraph()
        _style_run(paragraph.add_run(text), style)
        _style_paragraph(paragraph, style)
        return paragraph

    # -- header --------------------------------------------------------------

    def _add_header(self, doc: DocxDocument, block: HeaderBlock, template: CVTemplate) -> None:
        paragraphs = []
        if block.profile_image is not None:
            photo = doc.add_paragraph()
            photo.alignment = WD_ALIGN_PARAGRAPH.RIGHT
            photo.add_run().add_picture(block.profile_image, width=PHOTO_WIDTH)
            paragraphs.append(photo)
        paragraphs.append(self._add_paragraph(doc, block.name, template[block.name_slot]))
        for line in block.subtitle_lines:
            paragraphs.append(self._add_paragraph(doc, line, template[block.title_slot]))
        for line in block.contact_lines:
            paragraphs.append(self._add_paragraph(doc, line, template[block.contact_slot]))
        _decorate(paragraphs, template[block.band_slot])

    # -- sections ------------------------------------------------------------

    def _add_section(self, doc: DocxDocument, block: SectionBlock, template: CVTemplate) -> None:
        wrapper = template[block.wrapper_slot]
        title_style = template[block.title_slot]
        title = self._add_paragraph(doc, block.title, title_style)
        _decorate([title], title_style)
        paragraphs = [title]

        if block.is_empty:
            paragraphs.append(
                self._add_paragraph(doc, EMPTY_SECTION_TEXT, template[StyleSlot.ITEM_DETAIL])
            )
        elif block.table is not None:
            paragraphs.extend(self._add_table(doc, block.table, template))
            # Separates consecutive tables and carries the section spacing.
            paragraphs.append(doc.add_paragraph())
        else:
            for item in block.items:
                paragraphs.extend(self._add_item(doc, item, template))

        _space(paragraphs, wrapper)
        if wrapper.keep_together:
            for paragraph in paragraphs:
                paragraph.paragraph_format.keep_together = True
            for paragraph in paragraphs[:-1]:
                paragraph.paragraph_format.keep_with_next = True

    def _add_item(
        self, doc: DocxDocument, item: ItemBlock, template: CVTemplate
    ) -> list[Paragraph]:
        wrapper = template[item.wrapper_slot]
        if item.is_publication:
            paragraphs = [self._add_paragraph(doc, item.title, wrapper)]
        else:
            paragraphs = [self._add_paragraph(doc, item.title, template[item.title_slot])]
            if item.subtitle:
                paragraphs.append(
                    self._add_paragraph(doc, item.subtitle, template[item.subtitle_slot])
                )
            paragraphs.extend(
                self._add_paragraph(doc, detail, template[item.detail_slot])
                for detail in item.details
            )
        _decorate(paragraphs, wrapper)
        return paragraphs

    def _add_table(
        self, doc: DocxDocument, block: TableBlock, template: CVTemplate
    ) -> list[Paragraph]:
        table_style = template[block.slot]
        head_style = template[block.header_slot]
        cell_style = template[block.cell_slot]

        table: Table = doc.add_table(rows=1, cols=len(block.headers))
        table.autofit = True
        paragraphs: list[Paragraph] = []

        header_row = table.rows[0]
        # Repeat the header row on every page the table spans.
        header_row._tr.get_or_add_trPr().append(OxmlElement("w:tblHeader"))
        head_fill = head_style.background or table_style.background
        for cell, text in zip(header_row.cells, block.headers, strict=True):
            paragraphs.append(self._fill_cell(cell, text, head_style, head_fill))

        row_fill = cell_style.background or table_style.background
        for values in block.rows:
            cells = table.add_row().cells
            for cell, text in zip(cells, values, strict=True):
                paragraphs.append(self._fill_cell(cell, text, cell_style, row_fill))
                if cell_style.border is not None:
                    _border_cell(cell, "bottom", cell_style.border.width, cell_style.border.color)
        return paragraphs

    @staticmethod
    def _fill_cell(cell, text: str, style: SlotStyle, fill: str | None) -> Paragraph:
        paragraph = cell.paragraphs[0]
        _style_run(paragraph.add_run(text), style)
        _style_paragraph(paragraph, style)
        if fill is not None:
            _shade_cell(cell, fill)
        return paragraph
