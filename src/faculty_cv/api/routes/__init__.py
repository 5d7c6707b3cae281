"""Route handlers for the API."""

from faculty_cv.api.routes import cv, health

__all__ = [
    "cv",
    "health",
]
