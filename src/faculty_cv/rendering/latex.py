"""Fixed-layout (PDF) renderer built on PyLaTeX.

Slot styles become explicit font selections, ``xcolor`` colours, boxes and
rules.  The document targets a Unicode engine (XeLaTeX by default) with
``fontspec``, so record text in any script reaches the PDF unchanged.
:meth:`LatexRenderer.build_document` is public so the markup can be
inspected without a TeX installation.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from pylatex import Document, NoEscape, Package

from faculty_cv.rendering.base import OutputFormat, Renderer
from faculty_cv.rendering.blocks import (
    EMPTY_SECTION_TEXT,
    Block,
    HeaderBlock,
    ItemBlock,
    SectionBlock,
    TableBlock,
)
from faculty_cv.rendering.engine import LatexEngine
from faculty_cv.templates.base import Alignment, BorderSide, CVTemplate, SlotStyle, StyleSlot

__all__ = ["LatexRenderer", "escape_latex", "nfss_family", "photo_asset_name"]

logger = logging.getLogger(__name__)

# Characters with special meaning in LaTeX.  They are replaced in a single
# pass so that no replacement is escaped a second time.
_LATEX_REPLACEMENTS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
_LATEX_SPECIAL = re.compile(r"[\\&%$#_{}~^]")
_WHITESPACE = re.compile(r"\s+")

# Font names mapped onto NFSS family names.
_FONT_FAMILIES = {
    "times": "ptm",
    "georgia": "ppl",
    "palatino": "ppl",
    "arial": "phv",
    "helvetica": "phv",
    "segoe": "phv",
    "calibri": "phv",
    "courier": "pcr",
}
_DEFAULT_FAMILY = "ptm"

# Each family is backed by a TeX Gyre OpenType font, shipped with TeX Live
# and MiKTeX and loaded by file name.
_GYRE_FONTS = {
    "ptm": "texgyretermes",
    "ppl": "texgyrepagella",
    "phv": "texgyreheros",
    "pcr": "texgyrecursor",
}
_GYRE_OPTIONS = (
    "Extension=.otf,UprightFont=*-regular,BoldFont=*-bold,"
    "ItalicFont=*-italic,BoldItalicFont=*-bolditalic"
)

PHOTO_WIDTH = "1.2in"

# Baselines that fit on one page of body text.
_PAGE_LINES = 40

_PACKAGES: list[Package] = [
    Package("fontspec"),
    Package("xcolor", options=["table"]),
    Package("graphicx"),
    Package("array"),
    Package("longtable"),
    Package("needspace"),
]

_PREAMBLE_SETUP = r"""
\setlength{\parindent}{0pt}
\setlength{\parskip}{0pt}
\setlength{\tabcolsep}{4pt}
\setlength{\fboxsep}{6pt}
\setlength{\LTpre}{0pt}
\setlength{\LTpost}{0pt}
\raggedbottom
"""

_ALIGN = {
    Alignment.LEFT: r"\raggedright",
    Alignment.CENTER: r"\centering",
    Alignment.JUSTIFY: "",
}


def escape_latex(text: str) -> str:
    r"""Escape LaTeX special characters in *text* and collapse whitespace.

    Handles: ``& % $ # _ { } ~ ^ \``
    """
    result = _LATEX_SPECIAL.sub(lambda match: _LATEX_REPLACEMENTS[match.group()], text)
    return _WHITESPACE.sub(" ", result).strip()


def nfss_family(font_family: str) -> str:
    """Return the NFSS family code used for a template font name."""
    lowered = font_family.lower()
    for needle, family in _FONT_FAMILIES.items():
        if needle in lowered:
            return family
    return _DEFAULT_FAMILY


def photo_asset_name(block: HeaderBlock) -> str | None:
    """File name the profile photo is copied to next to the ``.tex`` source."""
    if block.profile_image is None:
        return None
    return "profile" + Path(block.profile_image).suffix.lower()


def _assets(blocks: Sequence[Block]) -> dict[str, Path]:
    assets = {}
    for block in blocks:
        if isinstance(block, HeaderBlock) and block.profile_image is not None:
            assets[photo_asset_name(block)] = Path(block.profile_image)
    return assets


def _font_setup(template: CVTemplate) -> str:
    """Declare every family the template uses, plus the main font."""
    families = sorted({nfss_family(template[slot].font_family) for slot in StyleSlot})
    lines = [
        rf"\newfontfamily\cvfont{family}[NFSSFamily={family},{_GYRE_OPTIONS}]"
        rf"{{{_GYRE_FONTS[family]}}}"
        for family in families
    ]
    body = nfss_family(template[StyleSlot.DOCUMENT_BODY].font_family)
    lines.append(rf"\setmainfont[{_GYRE_OPTIONS}]{{{_GYRE_FONTS[body]}}}")
    return "\n".join(lines)


def _pt(value: float) -> str:
    return f"{value:g}pt"


def _font(style: SlotStyle) -> str:
    commands = [
        rf"\color[HTML]{{{style.color}}}",
        rf"\fontfamily{{{nfss_family(style.font_family)}}}",
        rf"\fontsize{{{_pt(style.font_size)}}}{{{_pt(round(style.font_size * 1.2, 1))}}}",
        r"\selectfont",
    ]
    if style.bold:
        commands.append(r"\bfseries")
    if style.italic:
        commands.append(r"\itshape")
    return "".join(commands)


def _text(text: str, style: SlotStyle) -> str:
    escaped = escape_latex(text)
    return rf"\MakeUppercase{{{escaped}}}" if style.uppercase else escaped


def _inline(text: str, style: SlotStyle) -> str:
    return r"{\leavevmode" + _font(style) + " " + _text(text, style) + "}"


def _paragraph(text: str, style: SlotStyle, *, spaced: bool = True) -> str:
    opening = "{" + _ALIGN[style.align] + r"\leavevmode" + _font(style)
    body = opening + " " + _text(text, style) + r"\par}"
    return _spaced(body, style) if spaced else body


def _spaced(markup: str, style: SlotStyle) -> str:
    parts = []
    if style.space_before:
        parts.append(rf"\vspace{{{_pt(style.space_before)}}}")
    parts.append(markup)
    if style.space_after:
        parts.append(rf"\vspace{{{_pt(style.space_after)}}}")
    return "\n".join(parts)


def _minipage(inner: str, width: str = r"\dimexpr\linewidth-2\fboxsep-2\fboxrule\relax") -> str:
    return rf"\begin{{minipage}}{{{width}}}" + "\n" + inner + "\n" + r"\end{minipage}"


def _framed(inner: str, style: SlotStyle) -> str:
    """Wrap *inner* markup in the background, border and spacing of *style*."""
    border = style.border
    if border is not None and border.side is BorderSide.BOX:
        fill = style.background or "FFFFFF"
        inner = (
            rf"\noindent{{\setlength{{\fboxrule}}{{{_pt(border.width)}}}"
            rf"\fcolorbox[HTML]{{{border.color}}}{{{fill}}}{{{_minipage(inner)}}}}}\par"
        )
    elif style.background is not None:
        inner = rf"\noindent\colorbox[HTML]{{{style.background}}}{{{_minipage(inner)}}}\par"

    if border is not None and border.side is BorderSide.LEFT:
        gap = 6
        width = rf"\dimexpr\linewidth-{_pt(border.width + gap)}\relax"
        inner = (
            rf"\noindent{{\color[HTML]{{{border.color}}}\vrule width {_pt(border.width)}}}"
            rf"\hspace{{{gap}pt}}{_minipage(inner, width)}\par"
        )
    rule = (
        rf"{{\color[HTML]{{{border.color}}}\rule{{\linewidth}}{{{_pt(border.width)}}}\par}}"
        if border is not None
        else ""
    )
    if border is not None and border.side is BorderSide.TOP:
        inner = rule + "\n" + inner
    elif border is not None and border.side is BorderSide.BOTTOM:
        inner = inner + "\n" + r"\vspace{2pt}" + "\n" + rule
    return _spaced(inner, style)


def _item_lines(item: ItemBlock) -> int:
    return len(item.text_lines()) + 1


def _estimated_lines(section: SectionBlock) -> int:
    """Rough height of *section* in baselines, for the keep-together hint."""
    title = 2
    if section.is_empty:
        return title + 1
    if section.table is not None:
        entries = [2] * len(section.table.rows)
        head = 2
    else:
        entries = [_item_lines(item) for item in section.items]
        head = 0
    total = title + head + sum(entries)
    if total > _PAGE_LINES:
        # Too long to move as a whole: keep the title with the first entry.
        return title + head + entries[0]
    return total


class LatexRenderer(Renderer):
    """Renders blocks to PDF through a sandboxed TeX engine."""

    def __init__(self, engine: LatexEngine | None = None) -> None:
        self.engine = engine or LatexEngine()

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.PDF

    @property
    def media_type(self) -> str:
        return "application/pdf"

    @property
    def extension(self) -> str:
        return "pdf"

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def render(self, blocks: Sequence[Block], template: CVTemplate) -> bytes:
        source = self.build_document(blocks, template).dumps()
        logger.debug("Compiling %d-block CV (%d chars of LaTeX)", len(blocks), len(source))
        return self.engine.compile(source, assets=_assets(blocks))

    def build_document(self, blocks: Sequence[Block], template: CVTemplate) -> Document:
        doc = self._create_document(template)
        for block in blocks:
            if isinstance(block, HeaderBlock):
                doc.append(NoEscape(self._header(block, template)))
            else:
                doc.append(NoEscape(self._section(block, template)))
        return doc

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _create_document(self, template: CVTemplate) -> Document:
        doc = Document(
            documentclass="article",
            document_options=["letterpaper", "11pt"],
            geometry_options={"margin": "1in"},
            page_numbers=False,
            indent=True,
            lmodern=False,
            textcomp=False,
            microtype=False,
            # fontspec handles encodings under XeLaTeX and LuaLaTeX.
            fontenc=None,
            inputenc=None,
        )
        for pkg in _PACKAGES:
            doc.packages.append(pkg)
        doc.preamble.append(NoEscape(_font_setup(template)))
        doc.preamble.append(NoEscape(_PREAMBLE_SETUP))

        body = template[StyleSlot.DOCUMENT_BODY]
        if body.background is not None:
            doc.append(NoEscape(rf"\pagecolor[HTML]{{{body.background}}}"))
        doc.append(NoEscape(_font(body)))
        return doc

    # -- header --------------------------------------------------------------

    def _header(self, block: HeaderBlock, template: CVTemplate) -> str:
        lines = [_paragraph(block.name, template[block.name_slot])]
        lines.extend(_paragraph(line, template[block.title_slot]) for line in block.subtitle_lines)
        lines.extend(
            _paragraph(line, template[block.contact_slot]) for line in block.contact_lines
        )
        body = "\n".join(lines)

        photo = photo_asset_name(block)
        if photo is not None:
            text_width = rf"\dimexpr\linewidth-{PHOTO_WIDTH}-12pt\relax"
            picture = (
                rf"\includegraphics[width={PHOTO_WIDTH},height={PHOTO_WIDTH},"
                rf"keepaspectratio]{{{photo}}}"
            )
            body = (
                rf"\begin{{minipage}}[t]{{{text_width}}}\vspace{{0pt}}" + "\n" + body + "\n"
                r"\end{minipage}\hfill"
                rf"\begin{{minipage}}[t]{{{PHOTO_WIDTH}}}\vspace{{0pt}}\raggedleft{picture}"
                r"\end{minipage}\par"
            )
        return _framed(body, template[block.band_slot])

    # -- sections ------------------------------------------------------------

    def _section(self, block: SectionBlock, template: CVTemplate) -> str:
        wrapper = template[block.wrapper_slot]
        parts = []
        if wrapper.keep_together:
            parts.append(rf"\needspace{{{_estimated_lines(block)}\baselineskip}}")

        title_style = template[block.title_slot]
        parts.append(_framed(_paragraph(block.title, title_style, spaced=False), title_style))

        if block.is_empty:
            parts.append(_paragraph(EMPTY_SECTION_TEXT, template[StyleSlot.ITEM_DETAIL]))
        elif block.table is not None:
            parts.append(self._table(block.table, template))
        else:
            parts.extend(self._item(item, template) for item in block.items)
        return _spaced("\n".join(parts), wrapper)

    def _item(self, item: ItemBlock, template: CVTemplate) -> str:
        wrapper = template[item.wrapper_slot]
        if item.is_publication:
            return _framed(_paragraph(item.title, wrapper, spaced=False), wrapper)

        lines = [_paragraph(item.title, template[item.title_slot])]
        if item.subtitle:
            lines.append(_paragraph(item.subtitle, template[item.subtitle_slot]))
        lines.extend(_paragraph(detail, template[item.detail_slot]) for detail in item.details)
        return _framed("\n".join(lines), wrapper)

    def _table(self, table: TableBlock, template: CVTemplate) -> str:
        table_style = template[table.slot]
        head_style = template[table.header_slot]
        cell_style = template[table.cell_slot]

        columns = len(table.headers)
        width = rf"\dimexpr(\linewidth-{2 * columns}\tabcolsep)/{columns}\relax"
        spec = (r">{\raggedright\arraybackslash}p{" + width + "}") * columns
        lines = []
        rule = ""
        if cell_style.border is not None:
            lines.append(rf"\arrayrulecolor[HTML]{{{cell_style.border.color}}}")
            rule = r"\hline"
        lines.append(rf"\begin{{longtable}}{{{spec}}}")
        head_fill = head_style.background or table_style.background
        if head_fill:
            lines.append(rf"\rowcolor[HTML]{{{head_fill}}}")
        lines.append(" & ".join(_inline(h, head_style) for h in table.headers) + r" \\" + rule)
        lines.append(r"\endhead")

        row_fill = cell_style.background or table_style.background
        for row in table.rows:
            if row_fill:
                lines.append(rf"\rowcolor[HTML]{{{row_fill}}}")
            lines.append(" & ".join(_inline(cell, cell_style) for cell in row) + r" \\" + rule)
        lines.append(r"\end{longtable}")
        return _spaced("\n".join(lines), table_style)

