"""Tests for concurrent CV data aggregation."""

from __future__ import annotations

import logging
import time

import pytest
from conftest import PERSON_ID, SECTIONS, FakeRecordSource

from faculty_cv.constants.sections import SectionKey
from faculty_cv.errors import DataFetchError, MissingIdentityError
from faculty_cv.services.aggregator import aggregate_cv_data


class TestAggregateCvData:
    def test_sections_in_canonical_order(self, fake_source):
        doc = aggregate_cv_data(PERSON_ID, ["awards", "books", "education"], fake_source)
        assert list(doc.sections) == [
            SectionKey.EDUCATION,
            SectionKey.BOOKS,
            SectionKey.AWARDS,
        ]
        assert doc.personal["name"] == "Dr. Asha Mehta"

    def test_records_preserved(self, fake_source):
        doc = aggregate_cv_data(PERSON_ID, ["books"], fake_source)
        assert doc.records(SectionKey.BOOKS) == SECTIONS[SectionKey.BOOKS]

    def test_section_without_data_is_empty(self, fake_source):
        doc = aggregate_cv_data(PERSON_ID, ["patents"], fake_source)
        assert doc.sections == {SectionKey.PATENTS: []}

    def test_duplicates_fetched_once(self, fake_source):
        aggregate_cv_data(PERSON_ID, ["books", "books", "education"], fake_source)
        assert sorted(fake_source.section_calls) == [SectionKey.BOOKS, SectionKey.EDUCATION]

    def test_missing_identity(self):
        source = FakeRecordSource(personal=None)
        with pytest.raises(MissingIdentityError):
            aggregate_cv_data(PERSON_ID, ["books"], source)

    def test_failed_personal_fetch_aborts(self, fake_source, monkeypatch):
        def unavailable(person_id):
            raise ConnectionError("store unavailable")

        monkeypatch.setattr(fake_source, "fetch_personal", unavailable)
        with pytest.raises(DataFetchError) as exc_info:
            aggregate_cv_data(PERSON_ID, ["books"], fake_source)
        assert exc_info.value.section == "personal"
        assert "store unavailable" in str(exc_info.value)
        assert fake_source.section_calls == []

    def test_failed_section_degrades_to_empty(self, caplog):
        source = FakeRecordSource(failing={SectionKey.BOOKS})
        with caplog.at_level(logging.ERROR):
            doc = aggregate_cv_data(PERSON_ID, ["education", "books", "awards"], source)

        assert doc.records(SectionKey.BOOKS) == []
        assert doc.records(SectionKey.EDUCATION) == SECTIONS[SectionKey.EDUCATION]
        assert doc.records(SectionKey.AWARDS) == SECTIONS[SectionKey.AWARDS]
        assert "books" in caplog.text

    def test_order_independent_of_completion(self):
        source = FakeRecordSource(delays={SectionKey.EDUCATION: 0.2})
        doc = aggregate_cv_data(PERSON_ID, ["awards", "education", "books"], source)
        assert list(doc.sections) == [
            SectionKey.EDUCATION,
            SectionKey.BOOKS,
            SectionKey.AWARDS,
        ]
        assert doc.records(SectionKey.EDUCATION)

    def test_worker_bound(self):
        keys = list(SectionKey)
        source = FakeRecordSource(delays={key: 0.02 for key in keys})
        aggregate_cv_data(PERSON_ID, keys, source, max_workers=3)
        assert source.peak_active <= 3
        assert len(source.section_calls) == len(keys)

    def test_deadline_degrades_slow_sections(self, caplog):
        source = FakeRecordSource(delays={SectionKey.AWARDS: 1.0})
        start = time.monotonic()
        with caplog.at_level(logging.WARNING):
            doc = aggregate_cv_data(PERSON_ID, ["education", "awards"], source, timeout=0.2)

        assert time.monotonic() - start < 0.9
        assert doc.records(SectionKey.AWARDS) == []
        assert doc.records(SectionKey.EDUCATION) == SECTIONS[SectionKey.EDUCATION]
        assert "awards" in caplog.text

    def test_deterministic(self, fake_source):
        sections = ["visits", "books", "research", "education"]
        first = aggregate_cv_data(PERSON_ID, sections, fake_source)
        second = aggregate_cv_data(PERSON_ID, list(reversed(sections)), fake_source)
        assert first == second
        assert list(first.sections) == list(second.sections)
