"""Template-agnostic data contracts for CV generation.

These types define the shape of data that flows from the record source
through the aggregator to the block builder.  Renderers never see them;
they only consume blocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict

from faculty_cv.constants.sections import SectionKey

__all__ = [
    "CategoryRecord",
    "DocumentModel",
    "PersonalRecord",
]


class PersonalRecord(TypedDict, total=False):
    """Identity and contact data shown in the CV header."""

    name: str
    designation: str
    department: str
    faculty: str
    institution: str
    email: str
    phone: str
    address: str
    date_of_birth: str  # dd/mm/yyyy
    orcid: str
    profile_image: str | None


class CategoryRecord(TypedDict, total=False):
    """A single record of one content category."""

    label: str
    date: str | None  # ISO date string
    institution: str
    document_ref: str | None
    details: dict[str, str]


@dataclass
class DocumentModel:
    """Everything one CV is rendered from.

    Built fresh for each request and never shared between requests.
    ``sections`` is keyed in canonical order.
    """

    personal: PersonalRecord | None
    sections: dict[SectionKey, list[CategoryRecord]] = field(default_factory=dict)

    def records(self, key: SectionKey) -> list[CategoryRecord]:
        """Return the records of *key*, or an empty list if not aggregated."""
        return self.sections.get(key, [])

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation used by the preview endpoint."""
        return {
            "personal": dict(self.personal) if self.personal is not None else None,
            "sections": {
                key.value: [
                    {**record, "details": dict(record.get("details", {}))} for record in records
                ]
                for key, records in self.sections.items()
            },
        }
