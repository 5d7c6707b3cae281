"""ORM models package for the reference record-store schema.

This package provides SQLAlchemy ORM models representing database tables:
- Teacher: personal record shown in the CV header
- CategoryEntry: one record of any CV content category

All models inherit from the shared Base declarative class defined in data.db.
"""

from faculty_cv.data.db import Base
from faculty_cv.data.models.category_entry import CategoryEntry
from faculty_cv.data.models.teacher import Teacher

__all__ = ["Base", "CategoryEntry", "Teacher"]
