"""Tests for environment-driven configuration."""

from __future__ import annotations

from faculty_cv.config import DEFAULT_INSTITUTION, Settings, get_settings

_VARS = (
    "CV_FETCH_WORKERS",
    "CV_FETCH_TIMEOUT",
    "CV_RENDER_TIMEOUT",
    "CV_LATEX_COMPILER",
    "CV_ENV",
    "CV_INSTITUTION",
    "CV_LOG_LEVEL",
)


def _clear(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    settings = get_settings()
    assert settings == Settings()
    assert settings.fetch_workers == 4
    assert settings.fetch_timeout == 30.0
    assert settings.render_timeout == 60.0
    assert settings.latex_compiler == "xelatex"
    assert settings.institution == DEFAULT_INSTITUTION
    assert not settings.is_production


def test_overrides(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("CV_FETCH_WORKERS", "8")
    monkeypatch.setenv("CV_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("CV_RENDER_TIMEOUT", "15")
    monkeypatch.setenv("CV_LATEX_COMPILER", "lualatex")
    monkeypatch.setenv("CV_ENV", "Production")
    monkeypatch.setenv("CV_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.fetch_workers == 8
    assert settings.fetch_timeout == 2.5
    assert settings.render_timeout == 15.0
    assert settings.latex_compiler == "lualatex"
    assert settings.is_production
    assert settings.log_level == "DEBUG"


def test_invalid_numbers_fall_back(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("CV_FETCH_WORKERS", "many")
    monkeypatch.setenv("CV_FETCH_TIMEOUT", "-1")
    settings = get_settings()
    assert settings.fetch_workers == 4
    assert settings.fetch_timeout == 30.0
