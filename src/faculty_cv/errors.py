"""Exception taxonomy for CV generation.

Validation, missing-identity and render failures reach the caller, as does
a failed fetch of the personal record.  A failed section fetch raises
``DataFetchError`` inside the aggregator and is recovered there.
"""

from __future__ import annotations

__all__ = [
    "CVGenerationError",
    "DataFetchError",
    "MissingIdentityError",
    "RenderEngineError",
    "RenderTimeoutError",
    "TemplateDefinitionError",
    "ValidationError",
]


class CVGenerationError(Exception):
    """Base class for every error raised by the generation pipeline."""


class ValidationError(CVGenerationError):
    """Request parameters are malformed; raised before any store access.

    Attributes:
        field: Name of the offending request field.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class MissingIdentityError(CVGenerationError):
    """The person has no personal record, so no CV can be addressed."""

    def __init__(self, person_id: int) -> None:
        self.person_id = person_id
        super().__init__(f"No personal information found for person {person_id}")


class DataFetchError(CVGenerationError):
    """A record-store fetch failed.

    Attributes:
        section: Section key whose fetch failed, or ``"personal"``.
        person_id: Person the fetch was issued for.
    """

    def __init__(self, section: str, person_id: int, reason: str = "") -> None:
        self.section = section
        self.person_id = person_id
        message = f"Fetching section {section!r} for person {person_id} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RenderEngineError(CVGenerationError):
    """The rendering engine crashed or produced unusable output.

    Attributes:
        message: Error description.
        log_errors: Error lines recovered from the engine log, if any.
    """

    def __init__(self, message: str, log_errors: list[str] | None = None) -> None:
        self.message = message
        self.log_errors = list(log_errors or [])

        parts = [message]
        if self.log_errors:
            parts.append("Engine errors:")
            parts.extend(f"  {line}" for line in self.log_errors[:5])
        super().__init__("\n".join(parts))


class RenderTimeoutError(RenderEngineError):
    """The rendering engine exceeded its time budget and was terminated."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Rendering did not finish within {timeout:g}s")


class TemplateDefinitionError(ValueError):
    """A template does not define every style slot."""
