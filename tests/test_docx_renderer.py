"""Tests for the editable-document (DOCX) renderer."""

from __future__ import annotations

import base64
from io import BytesIO

import docx
import pytest
from docx.oxml.ns import qn
from docx.shared import Inches

from faculty_cv.constants.sections import SectionKey
from faculty_cv.rendering.blocks import EMPTY_SECTION_TEXT, build_blocks
from faculty_cv.rendering.docx import DOCX_MEDIA_TYPE, DocxRenderer
from faculty_cv.templates import StyleSlot, get_template

# 1x1 transparent PNG.
PNG_PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def _build(document, template_name="academic", sections=("education", "research", "books")):
    template = get_template(template_name)
    blocks = build_blocks(document, sections, template)
    return DocxRenderer().build_document(blocks, template)


def _texts(doc) -> list[str]:
    return [p.text for p in doc.paragraphs if p.text]


def _paragraph(doc, text):
    return next(p for p in doc.paragraphs if p.text == text)


class TestDocxRenderer:
    def test_render_returns_loadable_docx(self, document):
        template = get_template("classic")
        blocks = build_blocks(document, ["education"], template)
        content = DocxRenderer().render(blocks, template)

        assert content.startswith(b"PK")
        loaded = docx.Document(BytesIO(content))
        assert "Dr. Asha Mehta" in _texts(loaded)

    def test_header_shows_date_of_birth(self, document):
        assert "Date of Birth: 04/03/1975" in _texts(_build(document))

    def test_profile_photo_embedded(self, document, tmp_path):
        photo = tmp_path / "asha.png"
        photo.write_bytes(PNG_PIXEL)
        document.personal["profile_image"] = str(photo)
        doc = _build(document, sections=["education"])

        assert len(doc.inline_shapes) == 1
        assert doc.inline_shapes[0].width == Inches(1.2)
        assert _texts(doc)[0] == "Dr. Asha Mehta"

    def test_no_photo_without_image(self, document):
        assert len(_build(document).inline_shapes) == 0

    def test_metadata(self):
        renderer = DocxRenderer()
        assert renderer.media_type == DOCX_MEDIA_TYPE
        assert renderer.extension == "docx"

    def test_letter_page_with_inch_margins(self, document):
        section = _build(document).sections[0]
        assert section.page_width == Inches(8.5)
        assert section.page_height == Inches(11)
        assert section.left_margin == Inches(1)
        assert section.top_margin == Inches(1)

    def test_section_order(self, document):
        texts = _texts(_build(document, sections=["awards", "books", "education"]))
        titles = [t for t in texts if t in ("Education", "Books Published", "Awards & Honors")]
        assert titles == ["Education", "Books Published", "Awards & Honors"]

    def test_empty_section_message(self, document):
        texts = _texts(_build(document, sections=["patents"]))
        assert texts[-2:] == ["Patents", EMPTY_SECTION_TEXT]

    def test_table_section(self, document):
        doc = _build(document, sections=["research"])
        assert len(doc.tables) == 1
        table = doc.tables[0]
        assert table.rows[0].cells[0].text == "Title"
        assert [c.text for c in table.rows[1].cells][:3] == [
            "Thin Film Sensors",
            "DST",
            "01/04/2019",
        ]
        assert table.rows[0]._tr.trPr.find(qn("w:tblHeader")) is not None

    def test_run_formatting_follows_slot(self, document):
        template = get_template("academic")
        style = template[StyleSlot.SECTION_TITLE]
        run = _paragraph(_build(document), "Education").runs[0]
        assert run.font.name == style.font_family
        assert run.font.bold is style.bold
        assert run.font.all_caps is style.uppercase
        assert str(run.font.color.rgb) == style.color

    def test_header_band_shading(self, document):
        name = _paragraph(_build(document, "professional"), "Dr. Asha Mehta")
        shd = name._p.pPr.find(qn("w:shd"))
        assert shd is not None
        assert shd.get(qn("w:fill")) == "2563EB"

    def test_page_background(self, document):
        doc = _build(document, "modern")
        background = doc.element.find(qn("w:background"))
        assert background is not None
        assert background.get(qn("w:color")) == "F9FAFB"
        assert _build(document, "academic").element.find(qn("w:background")) is None

    @pytest.mark.parametrize("name", ["academic", "professional", "modern", "classic"])
    def test_keep_together(self, document, name):
        doc = _build(document, name, sections=["education"])
        title = _paragraph(doc, "Education")
        detail = _paragraph(doc, "State: Karnataka")
        assert title.paragraph_format.keep_with_next is True
        assert title.paragraph_format.keep_together is True
        # Last paragraph of the section does not chain to the next one.
        assert detail.paragraph_format.keep_with_next in (None, False)

    def test_publications_justified(self, document):
        doc = _build(document, sections=["books"])
        entry = next(p for p in doc.paragraphs if p.text.startswith("1. "))
        assert entry.text.endswith("ISBN: 978-3-16-148410-0.")

    def test_all_sections_render(self, document):
        template = get_template("modern")
        blocks = build_blocks(document, [k.value for k in SectionKey], template)
        doc = DocxRenderer().build_document(blocks, template)
        assert _texts(doc).count(EMPTY_SECTION_TEXT) == 24 - 4
