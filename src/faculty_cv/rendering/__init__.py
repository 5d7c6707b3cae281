"""Block building and the two CV renderers."""

from __future__ import annotations

from faculty_cv.config import Settings
from faculty_cv.rendering.base import OutputFormat, Renderer
from faculty_cv.rendering.blocks import (
    Block,
    HeaderBlock,
    ItemBlock,
    SectionBlock,
    TableBlock,
    build_blocks,
)
from faculty_cv.rendering.docx import DocxRenderer
from faculty_cv.rendering.engine import LatexEngine
from faculty_cv.rendering.latex import LatexRenderer

__all__ = [
    "Block",
    "DocxRenderer",
    "HeaderBlock",
    "ItemBlock",
    "LatexEngine",
    "LatexRenderer",
    "OutputFormat",
    "Renderer",
    "SectionBlock",
    "TableBlock",
    "build_blocks",
    "get_renderer",
    "list_formats",
]


def get_renderer(output_format: str, settings: Settings | None = None) -> Renderer:
    """Return a renderer for *output_format* (``pdf`` or ``word``).

    Raises:
        ValueError: If the format is not supported.
    """
    try:
        fmt = OutputFormat(output_format)
    except ValueError:
        available = ", ".join(list_formats())
        msg = f"Unknown format {output_format!r}. Available: {available}"
        raise ValueError(msg) from None

    if fmt is OutputFormat.PDF:
        settings = settings or Settings()
        engine = LatexEngine(settings.latex_compiler, timeout=settings.render_timeout)
        return LatexRenderer(engine)
    return DocxRenderer()


def list_formats() -> list[str]:
    return [fmt.value for fmt in OutputFormat]
