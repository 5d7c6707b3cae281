"""Teacher model holding the personal information printed in a CV header.

It has a 1:many relationship with the CategoryEntry model.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from faculty_cv.data.db import Base

if TYPE_CHECKING:
    from faculty_cv.data.models.category_entry import CategoryEntry


class Teacher(Base):
    """Faculty member whose records make up a CV.

    Attributes:
        id: Auto-incrementing primary key (the CV ``person_id``).
        honorific: Optional prefix such as ``Dr.`` or ``Prof.``.
        first_name: Given name.
        middle_name: Middle name.
        last_name: Family name.
        designation: Job title, e.g. Associate Professor.
        department: Department name.
        faculty: Faculty the department belongs to.
        email: Contact email address.
        phone: Phone number.
        address: Postal address.
        date_of_birth: Date of birth.
        orcid: ORCID identifier.
        profile_image: Object-storage key of the profile photo.
        updated_at: UTC timestamp when the record was last updated.
    """

    __tablename__ = "teachers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    honorific: Mapped[str | None] = mapped_column(String(32), nullable=True)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(128), nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    faculty: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    orcid: Mapped[str | None] = mapped_column(String(64), nullable=True)
    profile_image: Mapped[str | None] = mapped_column(String(512), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    entries: Mapped[list[CategoryEntry]] = relationship(
        "CategoryEntry", back_populates="teacher", cascade="all, delete-orphan"
    )
