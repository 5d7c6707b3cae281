"""Runtime configuration read from environment variables.

Every knob has a default so the service starts with no environment at all.
A ``.env`` file in the working directory is loaded on import.
The database URL follows the ``DB_URL`` convention used by ``data.db``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

__all__ = ["Settings", "configure_logging", "get_settings"]

load_dotenv()

DEFAULT_INSTITUTION = "The Maharaja Sayajirao University of Baroda"


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the generator configuration.

    Attributes:
        fetch_workers: Upper bound on concurrent per-section store fetches.
        fetch_timeout: Seconds the aggregator waits for the whole fan-out.
        render_timeout: Seconds a single TeX engine run may take.
        latex_compiler: Executable used by the fixed-layout renderer.
        environment: Deployment name; ``production`` hides error details.
        institution: Institution printed in every CV header.
        log_level: Root log level name.
    """

    fetch_workers: int = 4
    fetch_timeout: float = 30.0
    render_timeout: float = 60.0
    latex_compiler: str = "xelatex"
    environment: str = "development"
    institution: str = DEFAULT_INSTITUTION
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, raw)
        return default
    return value if value > 0 else default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-numeric %s=%r", name, raw)
        return default
    return value if value > 0 else default


def get_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""
    return Settings(
        fetch_workers=_int_env("CV_FETCH_WORKERS", 4),
        fetch_timeout=_float_env("CV_FETCH_TIMEOUT", 30.0),
        render_timeout=_float_env("CV_RENDER_TIMEOUT", 60.0),
        latex_compiler=os.getenv("CV_LATEX_COMPILER") or "xelatex",
        environment=os.getenv("CV_ENV") or "development",
        institution=os.getenv("CV_INSTITUTION") or DEFAULT_INSTITUTION,
        log_level=(os.getenv("CV_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Install a basic root handler at the configured level."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
