"""Services"""

from faculty_cv.services.aggregator import aggregate_cv_data
from faculty_cv.services.cv_generator import (
    CVRequest,
    GeneratedDocument,
    generate_cv,
    preview_cv,
    validate_request,
)
from faculty_cv.services.record_source import RecordSource, SqlRecordSource

__all__ = [
    "CVRequest",
    "GeneratedDocument",
    "RecordSource",
    "SqlRecordSource",
    "aggregate_cv_data",
    "generate_cv",
    "preview_cv",
    "validate_request",
]
