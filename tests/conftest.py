from __future__ import annotations

import json
import threading
import time
from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

from faculty_cv.constants.sections import SectionKey
from faculty_cv.data.db import RecordStore
from faculty_cv.data.models import CategoryEntry, Teacher
from faculty_cv.services.cv_data import CategoryRecord, DocumentModel, PersonalRecord

PERSON_ID = 7

PERSONAL: PersonalRecord = {
    "name": "Dr. Asha Mehta",
    "designation": "Professor",
    "department": "Department of Physics",
    "faculty": "Faculty of Science",
    "institution": "The Maharaja Sayajirao University of Baroda",
    "email": "asha.mehta@example.edu",
    "phone": "+91 265 000 0000",
    "address": "Sayajigunj, Vadodara",
    "date_of_birth": "04/03/1975",
    "orcid": "0000-0002-1825-0097",
    "profile_image": None,
}

SECTIONS: dict[SectionKey, list[CategoryRecord]] = {
    SectionKey.EDUCATION: [
        {
            "label": "Ph.D. Physics",
            "date": "2004-06-30",
            "institution": "IISc Bangalore",
            "document_ref": None,
            "details": {"subject": "Condensed Matter", "state": "Karnataka"},
        }
    ],
    SectionKey.RESEARCH: [
        {
            "label": "Thin Film Sensors",
            "date": "2019-04-01",
            "institution": "DST",
            "document_ref": None,
            "details": {"grant_sanctioned": "1250000", "status": "Ongoing"},
        }
    ],
    SectionKey.BOOKS: [
        {
            "label": "Solid State Notes",
            "date": "2021-01-15",
            "institution": "Springer",
            "document_ref": None,
            "details": {"authors": "A. Mehta, R. Shah", "isbn": "978-3-16-148410-0"},
        }
    ],
    SectionKey.AWARDS: [
        {
            "label": "Young Scientist Award",
            "date": "2010-11-20",
            "institution": "INSA",
            "document_ref": None,
            "details": {"level": "National"},
        }
    ],
}


class FakeRecordSource:
    """In-memory record source that counts fetches and can fail or stall."""

    def __init__(
        self,
        personal: PersonalRecord | None = PERSONAL,
        sections: dict[SectionKey, list[CategoryRecord]] | None = None,
        *,
        failing: set[SectionKey] | None = None,
        delays: dict[SectionKey, float] | None = None,
    ) -> None:
        self.personal = personal
        self.sections = SECTIONS if sections is None else sections
        self.failing = failing or set()
        self.delays = delays or {}
        self.personal_calls = 0
        self.section_calls: list[SectionKey] = []
        self.active = 0
        self.peak_active = 0
        self._lock = threading.Lock()

    @property
    def total_calls(self) -> int:
        return self.personal_calls + len(self.section_calls)

    def fetch_personal(self, person_id: int) -> PersonalRecord | None:
        self.personal_calls += 1
        return self.personal

    def fetch_section(self, key: SectionKey, person_id: int) -> list[CategoryRecord]:
        with self._lock:
            self.section_calls.append(key)
            self.active += 1
            self.peak_active = max(self.peak_active, self.active)
        try:
            delay = self.delays.get(key, 0.0)
            if delay:
                time.sleep(delay)
            if key in self.failing:
                raise ConnectionError(f"store unavailable for {key}")
            return list(self.sections.get(key, []))
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def fake_source() -> FakeRecordSource:
    return FakeRecordSource()


@pytest.fixture
def document() -> DocumentModel:
    return DocumentModel(personal=dict(PERSONAL), sections=dict(SECTIONS))


@pytest.fixture
def cv_store(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[RecordStore]:
    """Use a temporary SQLite DB seeded with one faculty member."""
    db_path = tmp_path / "cv.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    store = RecordStore()
    store.init_schema()

    with store.session() as session:
        teacher = Teacher(
            id=PERSON_ID,
            honorific="Dr.",
            first_name="Asha",
            last_name="Mehta",
            designation="Professor",
            department="Department of Physics",
            email="asha.mehta@example.edu",
            phone="+91 265 000 0000",
            date_of_birth=date(1975, 3, 4),
        )
        session.add(teacher)
        session.flush()
        session.add_all(
            [
                CategoryEntry(
                    teacher_id=teacher.id,
                    section=SectionKey.AWARDS.value,
                    label="Best Teacher",
                    entry_date=date(2018, 9, 5),
                    institution="MSU",
                    details=json.dumps({"level": "University"}),
                    rank=1,
                ),
                CategoryEntry(
                    teacher_id=teacher.id,
                    section=SectionKey.AWARDS.value,
                    label="Young Scientist Award",
                    entry_date=date(2010, 11, 20),
                    institution="INSA",
                    details=json.dumps({"level": "National"}),
                    rank=0,
                ),
                CategoryEntry(
                    teacher_id=teacher.id,
                    section=SectionKey.BOOKS.value,
                    label="Solid State Notes",
                    entry_date=date(2021, 1, 15),
                    institution="Springer",
                    details="{not json",
                ),
            ]
        )

    yield store
    store.close()
