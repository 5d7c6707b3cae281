"""Common interface for CV renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from faculty_cv.rendering.blocks import Block
    from faculty_cv.templates.base import CVTemplate

__all__ = ["OutputFormat", "Renderer"]


class OutputFormat(StrEnum):
    """Output formats a caller can request."""

    PDF = "pdf"
    WORD = "word"


class Renderer(ABC):
    """Turns a block sequence styled by a template into file bytes."""

    @property
    @abstractmethod
    def output_format(self) -> OutputFormat:
        """Format identifier this renderer produces."""

    @property
    @abstractmethod
    def media_type(self) -> str:
        """MIME type of the produced bytes."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension (without the dot) of the produced file."""

    @abstractmethod
    def render(self, blocks: Sequence[Block], template: CVTemplate) -> bytes:
        """Render *blocks* with *template*; never returns partial output."""
