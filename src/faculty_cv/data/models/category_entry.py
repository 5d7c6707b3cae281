"""CategoryEntry model storing one record of any CV content category.

Common fields get their own columns; category-specific fields are kept as a
JSON object in ``details`` and interpreted through the section catalogue.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from faculty_cv.constants.sections import SectionKey
from faculty_cv.data.db import Base

if TYPE_CHECKING:
    from faculty_cv.data.models.teacher import Teacher


class CategoryEntry(Base):
    """A single CV record (an award, a book, a project, ...).

    Attributes:
        id: Auto-incrementing primary key.
        teacher_id: Foreign key to teachers table.
        section: SectionKey value the record belongs to.
        label: Primary label (title, degree, name of activity, ...).
        entry_date: Main date of the record.
        institution: Institution, venue, publisher or agency.
        document_ref: Object-storage key of a supporting document.
        details: JSON object of category-specific fields.
        rank: User-defined ordering within the section (lower = earlier).
        updated_at: UTC timestamp when the record was last updated.
    """

    __tablename__ = "category_entries"
    __table_args__ = (CheckConstraint("rank >= 0", name="ck_category_entry_rank_positive"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("teachers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    section: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    label: Mapped[str] = mapped_column(String(512), nullable=False)
    entry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    institution: Mapped[str | None] = mapped_column(String(512), nullable=True)
    document_ref: Mapped[str | None] = mapped_column(String(512), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON object
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    teacher: Mapped[Teacher] = relationship("Teacher", back_populates="entries")

    @validates("section")
    def validate_section(self, key: str, value: str) -> str:
        """Validate section is a known SectionKey."""
        return SectionKey(value).value

    @validates("rank")
    def validate_rank(self, key: str, value: int) -> int:
        """Validate rank is non-negative."""
        if value < 0:
            raise ValueError("Rank must be non-negative")
        return value
