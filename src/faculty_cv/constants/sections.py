"""Section catalogue for CV generation.

This module defines every content category a CV can contain, the fixed
order in which categories appear, and the per-category schema used to turn
stored records into display text:

- ``SectionKey``: the closed set of category identifiers.
- ``CANONICAL_ORDER``: the order sections are always emitted in.
- ``SECTION_SPECS``: title, layout and field captions per category.

The layout of a category (list items, numbered publications or a table) is
fixed here and cannot be chosen by callers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum


class SectionKey(StrEnum):
    """Content categories, declared in canonical output order."""

    EDUCATION = "education"
    POSTDOC = "postdoc"
    EXPERIENCE = "experience"
    RESEARCH = "research"
    PATENTS = "patents"
    COPYRIGHTS = "copyrights"
    ECONTENT = "econtent"
    CONSULTANCY = "consultancy"
    COLLABORATIONS = "collaborations"
    PHD_GUIDANCE = "phdguidance"
    BOOKS = "books"
    PAPERS = "papers"
    ARTICLES = "articles"
    POLICY_DOCUMENTS = "policy_documents"
    AWARDS = "awards"
    TALKS = "talks"
    ACADEMIC_CONTRIBUTION = "academic_contribution"
    ACADEMIC_PARTICIPATION = "academic_participation"
    COMMITTEES = "committees"
    PERFORMANCE = "performance"
    EXTENSION = "extension"
    ORIENTATION = "orientation"
    FINANCIAL_SUPPORT = "financial_support"
    VISITS = "visits"


class SectionLayout(StrEnum):
    """How a section's records are laid out."""

    ITEMS = "items"
    PUBLICATIONS = "publications"
    TABLE = "table"


class FieldKind(StrEnum):
    """Formatting applied to a category-specific field value."""

    TEXT = "text"
    DATE = "date"
    AMOUNT = "amount"
    FLAG = "flag"


@dataclass(frozen=True)
class FieldSpec:
    """A category-specific field: storage key, display caption, formatting."""

    key: str
    caption: str
    kind: FieldKind = FieldKind.TEXT


@dataclass(frozen=True)
class SectionSpec:
    """Display schema for one category.

    Attributes:
        key: Category identifier.
        title: Heading printed above the section.
        layout: Item, publication or table layout.
        label_caption: Caption of the record's primary label.
        institution_caption: Caption of the record's institution/venue.
        date_caption: Caption of the record's date.
        fields: Category-specific fields in display order.
    """

    key: SectionKey
    title: str
    layout: SectionLayout
    label_caption: str
    institution_caption: str
    date_caption: str
    fields: tuple[FieldSpec, ...] = ()

    @property
    def column_headers(self) -> list[str]:
        """Table column headers derived from the schema."""
        return [
            self.label_caption,
            self.institution_caption,
            self.date_caption,
            *(f.caption for f in self.fields),
        ]


_F = FieldSpec
_ITEMS = SectionLayout.ITEMS
_PUBS = SectionLayout.PUBLICATIONS
_TABLE = SectionLayout.TABLE

_SPECS: tuple[SectionSpec, ...] = (
    SectionSpec(
        SectionKey.EDUCATION,
        "Education",
        _ITEMS,
        "Degree",
        "Institution/University",
        "Year",
        (_F("subject", "Subject"), _F("state", "State"), _F("qs_ranking", "QS Ranking")),
    ),
    SectionSpec(
        SectionKey.POSTDOC,
        "Post Doctoral Research Experience",
        _ITEMS,
        "Institute",
        "Sponsored By",
        "Start Date",
        (_F("end_date", "End Date", FieldKind.DATE),),
    ),
    SectionSpec(
        SectionKey.EXPERIENCE,
        "Professional Experience",
        _ITEMS,
        "Designation",
        "Employer/Institution",
        "Start Date",
        (
            _F("end_date", "End Date", FieldKind.DATE),
            _F("nature", "Nature"),
            _F("currently_working", "Currently Working", FieldKind.FLAG),
        ),
    ),
    SectionSpec(
        SectionKey.RESEARCH,
        "Research Projects",
        _TABLE,
        "Title",
        "Funding Agency",
        "Start Date",
        (
            _F("project_nature", "Project Nature"),
            _F("grant_sanctioned", "Grant Sanctioned", FieldKind.AMOUNT),
            _F("duration", "Duration (Months)"),
            _F("status", "Status"),
        ),
    ),
    SectionSpec(
        SectionKey.PATENTS,
        "Patents",
        _ITEMS,
        "Title",
        "Filed With",
        "Date",
        (
            _F("application_no", "Application No"),
            _F("level", "Level"),
            _F("status", "Status"),
            _F("tech_licence", "Tech Licence"),
        ),
    ),
    SectionSpec(
        SectionKey.COPYRIGHTS,
        "Copyrights",
        _ITEMS,
        "Title",
        "Registered With",
        "Date",
        (_F("registration_no", "Registration No"), _F("reference", "Reference")),
    ),
    SectionSpec(
        SectionKey.ECONTENT,
        "E-Contents",
        _ITEMS,
        "Title",
        "Publishing Authority",
        "Published",
        (
            _F("content_type", "Content Type"),
            _F("platform", "Platform"),
            _F("link", "Link"),
            _F("brief_details", "Brief Details"),
        ),
    ),
    SectionSpec(
        SectionKey.CONSULTANCY,
        "Consultancy Undertaken",
        _TABLE,
        "Name",
        "Collaborating Institution",
        "Start Date",
        (
            _F("duration", "Duration"),
            _F("amount", "Amount", FieldKind.AMOUNT),
            _F("outcome", "Outcome"),
        ),
    ),
    SectionSpec(
        SectionKey.COLLABORATIONS,
        "Collaborations",
        _ITEMS,
        "Collaboration",
        "Collaborating Institution",
        "Started",
        (
            _F("category", "Category"),
            _F("level", "Level"),
            _F("outcome", "Outcome"),
            _F("duration", "Duration"),
            _F("status", "Status"),
        ),
    ),
    SectionSpec(
        SectionKey.PHD_GUIDANCE,
        "Ph.D. Guidance",
        _TABLE,
        "Student Name",
        "Department",
        "Date Registered",
        (
            _F("registration_no", "Registration No"),
            _F("topic", "Topic"),
            _F("status", "Status"),
            _F("year_of_completion", "Year of Completion"),
        ),
    ),
    SectionSpec(
        SectionKey.BOOKS,
        "Books Published",
        _PUBS,
        "Title",
        "Publisher",
        "Year",
        (
            _F("authors", "Authors"),
            _F("place", "Place"),
            _F("book_type", "Book Type"),
            _F("isbn", "ISBN"),
        ),
    ),
    SectionSpec(
        SectionKey.PAPERS,
        "Papers Presented",
        _PUBS,
        "Title of Paper",
        "Organising Body",
        "Year",
        (
            _F("authors", "Authors"),
            _F("theme", "Theme"),
            _F("level", "Level"),
            _F("place", "Place"),
        ),
    ),
    SectionSpec(
        SectionKey.ARTICLES,
        "Published Articles/Papers in Journals",
        _PUBS,
        "Title",
        "Journal",
        "Year",
        (
            _F("authors", "Authors"),
            _F("volume", "Volume"),
            _F("pages", "Pages"),
            _F("issn", "ISSN"),
            _F("impact_factor", "IF"),
            _F("doi", "DOI"),
        ),
    ),
    SectionSpec(
        SectionKey.POLICY_DOCUMENTS,
        "Policy Documents",
        _PUBS,
        "Title",
        "Submitted To",
        "Year",
        (_F("authors", "Authors"), _F("level", "Level")),
    ),
    SectionSpec(
        SectionKey.AWARDS,
        "Awards & Honors",
        _ITEMS,
        "Name",
        "Organization",
        "Date of Award",
        (_F("level", "Level"), _F("details", "Details"), _F("address", "Address")),
    ),
    SectionSpec(
        SectionKey.TALKS,
        "Talks",
        _ITEMS,
        "Title",
        "Place",
        "Date",
        (_F("programme", "Programme"), _F("participated_as", "Participated As")),
    ),
    SectionSpec(
        SectionKey.ACADEMIC_CONTRIBUTION,
        "Contribution in Academic Programme",
        _ITEMS,
        "Name",
        "Place",
        "Date",
        (_F("programme", "Programme"), _F("participated_as", "Participated As")),
    ),
    SectionSpec(
        SectionKey.ACADEMIC_PARTICIPATION,
        "Participation in Academic Programme",
        _ITEMS,
        "Name",
        "Academic Body",
        "Date",
        (_F("participated_as", "Participated As"), _F("place", "Place")),
    ),
    SectionSpec(
        SectionKey.COMMITTEES,
        "Participation in Academic Committee",
        _ITEMS,
        "Committee",
        "Institution",
        "Date",
        (_F("level", "Level"), _F("participated_as", "Participated As")),
    ),
    SectionSpec(
        SectionKey.PERFORMANCE,
        "Performance by Individual/Group",
        _ITEMS,
        "Name",
        "Place",
        "Date",
        (_F("nature", "Nature"),),
    ),
    SectionSpec(
        SectionKey.EXTENSION,
        "Extension Activities",
        _ITEMS,
        "Activity",
        "Place",
        "Date",
        (_F("level", "Level"), _F("sponsored_by", "Sponsored By")),
    ),
    SectionSpec(
        SectionKey.ORIENTATION,
        "Orientation/Refresher Courses",
        _TABLE,
        "Name",
        "Institute",
        "Start Date",
        (
            _F("course_type", "Course Type"),
            _F("university", "University"),
            _F("end_date", "End Date", FieldKind.DATE),
        ),
    ),
    SectionSpec(
        SectionKey.FINANCIAL_SUPPORT,
        "Financial Support Received",
        _TABLE,
        "Purpose",
        "Funding Agency",
        "Date",
        (_F("support_type", "Support Type"), _F("amount", "Amount", FieldKind.AMOUNT)),
    ),
    SectionSpec(
        SectionKey.VISITS,
        "Academic Visits",
        _ITEMS,
        "Purpose",
        "Host Institution",
        "Date",
        (
            _F("role", "Visited As"),
            _F("sponsored_by", "Sponsored By"),
            _F("duration", "Duration"),
        ),
    ),
)

SECTION_SPECS: dict[SectionKey, SectionSpec] = {spec.key: spec for spec in _SPECS}

CANONICAL_ORDER: tuple[SectionKey, ...] = tuple(SectionKey)

if tuple(SECTION_SPECS) != CANONICAL_ORDER:
    raise RuntimeError("SECTION_SPECS must describe every SectionKey once, in declaration order")


def get_section_spec(key: SectionKey | str) -> SectionSpec:
    """Return the schema for *key*.

    Raises:
        ValueError: If *key* is not a known section.
    """
    return SECTION_SPECS[SectionKey(key)]


def canonical_sections(requested: Iterable[SectionKey | str]) -> list[SectionKey]:
    """Return the requested keys in canonical order, without duplicates.

    Raises:
        ValueError: If any requested key is unknown.
    """
    wanted = {SectionKey(key) for key in requested}
    return [key for key in CANONICAL_ORDER if key in wanted]
