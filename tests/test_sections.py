"""Tests for the section catalogue and canonical ordering."""

from __future__ import annotations

import pytest

from faculty_cv.constants.sections import (
    CANONICAL_ORDER,
    SECTION_SPECS,
    SectionKey,
    SectionLayout,
    canonical_sections,
    get_section_spec,
)


class TestCatalogue:
    def test_every_key_has_a_schema(self):
        assert set(SECTION_SPECS) == set(SectionKey)
        assert len(CANONICAL_ORDER) == 24

    def test_canonical_order_starts_and_ends_as_expected(self):
        assert CANONICAL_ORDER[0] is SectionKey.EDUCATION
        assert CANONICAL_ORDER[-1] is SectionKey.VISITS

    def test_publication_layouts(self):
        pubs = [k for k, s in SECTION_SPECS.items() if s.layout is SectionLayout.PUBLICATIONS]
        assert pubs == [
            SectionKey.BOOKS,
            SectionKey.PAPERS,
            SectionKey.ARTICLES,
            SectionKey.POLICY_DOCUMENTS,
        ]

    def test_table_layouts(self):
        tables = {k for k, s in SECTION_SPECS.items() if s.layout is SectionLayout.TABLE}
        assert tables == {
            SectionKey.RESEARCH,
            SectionKey.CONSULTANCY,
            SectionKey.PHD_GUIDANCE,
            SectionKey.ORIENTATION,
            SectionKey.FINANCIAL_SUPPORT,
        }

    def test_column_headers_follow_schema(self):
        spec = get_section_spec("research")
        headers = spec.column_headers
        assert headers[:3] == ["Title", "Funding Agency", "Start Date"]
        assert "Grant Sanctioned" in headers

    def test_unknown_spec_rejected(self):
        with pytest.raises(ValueError):
            get_section_spec("hobbies")


class TestCanonicalSections:
    def test_caller_order_discarded(self):
        assert canonical_sections(["visits", "books", "education"]) == [
            SectionKey.EDUCATION,
            SectionKey.BOOKS,
            SectionKey.VISITS,
        ]

    def test_duplicates_collapsed(self):
        assert canonical_sections(["awards", "awards", SectionKey.AWARDS]) == [SectionKey.AWARDS]

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            canonical_sections(["education", "hobbies"])

    def test_empty_request(self):
        assert canonical_sections([]) == []
