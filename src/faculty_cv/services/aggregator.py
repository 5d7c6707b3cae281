"""CV data aggregation.

Pulls the personal record and every requested section from a
:class:`~faculty_cv.services.record_source.RecordSource` into one
:class:`~faculty_cv.services.cv_data.DocumentModel`.

Section fetches run concurrently on a small thread pool so that a request
for every category does not open more store connections than the pool
allows.  A section whose fetch fails, or does not finish before the
deadline, is logged and rendered empty: a partial CV is preferred over
none.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait

from faculty_cv.constants.sections import SectionKey, canonical_sections
from faculty_cv.errors import DataFetchError, MissingIdentityError
from faculty_cv.services.cv_data import CategoryRecord, DocumentModel
from faculty_cv.services.record_source import RecordSource

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_FETCH_TIMEOUT", "DEFAULT_MAX_WORKERS", "aggregate_cv_data"]

DEFAULT_MAX_WORKERS = 4
DEFAULT_FETCH_TIMEOUT = 30.0


def _fetch_section(source: RecordSource, key: SectionKey, person_id: int) -> list[CategoryRecord]:
    """Run one section fetch, converting any failure into DataFetchError."""
    try:
        records = source.fetch_section(key, person_id)
    except Exception as exc:
        raise DataFetchError(key.value, person_id, str(exc) or type(exc).__name__) from exc
    return list(records)


def aggregate_cv_data(
    person_id: int,
    sections: Iterable[SectionKey | str],
    source: RecordSource,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    timeout: float | None = DEFAULT_FETCH_TIMEOUT,
) -> DocumentModel:
    """Fetch and assemble all data needed to render a CV.

    Args:
        person_id: Target person.
        sections: Requested section keys; order and duplicates are ignored.
        source: Record-store collaborator.
        max_workers: Upper bound on concurrent section fetches.
        timeout: Seconds to wait for the whole fan-out; ``None`` waits forever.

    Returns:
        A :class:`DocumentModel` whose sections follow canonical order.

    Raises:
        MissingIdentityError: If the person has no personal record.
        DataFetchError: If fetching the personal record fails.
    """
    try:
        personal = source.fetch_personal(person_id)
    except Exception as exc:
        # Without the identity record there is nothing to degrade to.
        raise DataFetchError("personal", person_id, str(exc) or type(exc).__name__) from exc
    if personal is None:
        raise MissingIdentityError(person_id)

    keys = canonical_sections(sections)
    fetched: dict[SectionKey, list[CategoryRecord]] = {}

    if keys:
        executor = ThreadPoolExecutor(
            max_workers=max(1, min(max_workers, len(keys))),
            thread_name_prefix="cv-fetch",
        )
        try:
            futures: dict[Future[list[CategoryRecord]], SectionKey] = {
                executor.submit(_fetch_section, source, key, person_id): key for key in keys
            }
            done, pending = wait(futures, timeout=timeout)

            for future in done:
                key = futures[future]
                try:
                    fetched[key] = future.result()
                except DataFetchError:
                    logger.exception("Section %s degraded to empty for person %d", key, person_id)

            for future in pending:
                future.cancel()
                logger.warning(
                    "Section %s not fetched within %ss for person %d; rendering it empty",
                    futures[future],
                    timeout,
                    person_id,
                )
        finally:
            # Stragglers past the deadline are abandoned, not awaited.
            executor.shutdown(wait=False, cancel_futures=True)

    return DocumentModel(
        personal=personal,
        sections={key: fetched.get(key, []) for key in keys},
    )
