"""Record-store collaborator contract and its SQL implementation.

A record source answers two questions for a person: who they are, and what
records they have in one category.  An empty list means "no data"; an
exception means "the fetch failed".  Callers rely on the two staying
distinct, so implementations must never swallow errors into an empty list.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Protocol

from faculty_cv.config import DEFAULT_INSTITUTION
from faculty_cv.constants.sections import SectionKey
from faculty_cv.data.db import RecordStore
from faculty_cv.data.models import CategoryEntry, Teacher
from faculty_cv.services.cv_data import CategoryRecord, PersonalRecord

logger = logging.getLogger(__name__)

__all__ = ["RecordSource", "SqlRecordSource"]


class RecordSource(Protocol):
    """Fetch contract the aggregator depends on."""

    def fetch_personal(self, person_id: int) -> PersonalRecord | None:
        """Return the person's identity record, or None if there is none."""
        ...

    def fetch_section(self, key: SectionKey, person_id: int) -> list[CategoryRecord]:
        """Return the person's records of category *key* in display order."""
        ...


def _format_dob(value: date | None) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def _display_name(teacher: Teacher) -> str:
    """Build ``Dr. First Middle Last`` with blank parts skipped."""
    names = " ".join(p for p in (teacher.first_name, teacher.middle_name, teacher.last_name) if p)
    if teacher.honorific:
        return f"{teacher.honorific} {names}".strip()
    return names


def _parse_details(raw: str | None, entry_id: int) -> dict[str, str]:
    """Decode the JSON ``details`` column into a flat string mapping."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Category entry %d has malformed details; ignoring them", entry_id)
        return {}
    if not isinstance(parsed, dict):
        return {}
    return {str(k): "" if v is None else str(v) for k, v in parsed.items()}


class SqlRecordSource:
    """:class:`RecordSource` backed by the reference SQLAlchemy schema."""

    def __init__(self, store: RecordStore, institution: str = DEFAULT_INSTITUTION) -> None:
        self._store = store
        self._institution = institution

    def fetch_personal(self, person_id: int) -> PersonalRecord | None:
        with self._store.session() as session:
            teacher = session.get(Teacher, person_id)
            if teacher is None:
                return None
            return {
                "name": _display_name(teacher),
                "designation": teacher.designation or "",
                "department": teacher.department or "",
                "faculty": teacher.faculty or "",
                "institution": self._institution,
                "email": teacher.email or "",
                "phone": teacher.phone or "",
                "address": teacher.address or "",
                "date_of_birth": _format_dob(teacher.date_of_birth),
                "orcid": teacher.orcid or "",
                "profile_image": teacher.profile_image,
            }

    def fetch_section(self, key: SectionKey, person_id: int) -> list[CategoryRecord]:
        with self._store.session() as session:
            entries = (
                session.query(CategoryEntry)
                .filter(
                    CategoryEntry.teacher_id == person_id,
                    CategoryEntry.section == SectionKey(key).value,
                )
                .order_by(CategoryEntry.rank, CategoryEntry.entry_date, CategoryEntry.id)
                .all()
            )
            return [
                {
                    "label": entry.label,
                    "date": entry.entry_date.isoformat() if entry.entry_date else None,
                    "institution": entry.institution or "",
                    "document_ref": entry.document_ref,
                    "details": _parse_details(entry.details, entry.id),
                }
                for entry in entries
            ]
