"""Tests for the faculty-cv command line."""

from __future__ import annotations

from conftest import PERSON_ID
from typer.testing import CliRunner

from faculty_cv.cli import app

runner = CliRunner()


class TestGenerateCommand:
    def test_writes_word_file(self, cv_store, tmp_path):
        out_dir = tmp_path / "out"
        result = runner.invoke(
            app,
            [
                "generate",
                "--person-id",
                str(PERSON_ID),
                "--template",
                "classic",
                "--format",
                "word",
                "--section",
                "awards",
                "--section",
                "books",
                "--output",
                str(out_dir),
            ],
        )

        assert result.exit_code == 0, result.output
        written = list(out_dir.iterdir())
        assert len(written) == 1
        path = written[0]
        assert str(path) in result.output
        assert path.name.startswith("CV_Dr._Asha_Mehta_classic_")
        assert path.read_bytes().startswith(b"PK")

    def test_defaults_to_all_sections(self, cv_store, tmp_path):
        result = runner.invoke(
            app,
            ["generate", "--person-id", str(PERSON_ID), "-f", "word", "-o", str(tmp_path)],
        )
        assert result.exit_code == 0, result.output

    def test_invalid_template(self, cv_store, tmp_path):
        result = runner.invoke(
            app,
            ["generate", "--person-id", str(PERSON_ID), "--template", "fancy", "-o", str(tmp_path)],
        )
        assert result.exit_code == 1
        assert "Unknown template" in result.output

    def test_unknown_person(self, cv_store, tmp_path):
        result = runner.invoke(
            app, ["generate", "--person-id", "999", "-f", "word", "-o", str(tmp_path)]
        )
        assert result.exit_code == 1
        assert "No personal information" in result.output
        assert not list(tmp_path.glob("CV_*"))


def test_no_arguments_shows_help():
    result = runner.invoke(app, [])
    assert "generate" in result.output


class TestServeCommand:
    def test_runs_api_app(self, monkeypatch):
        import uvicorn

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

        result = runner.invoke(app, ["serve", "--port", "9001", "--reload"])

        assert result.exit_code == 0, result.output
        assert calls == [("faculty_cv.api.main:app", {"host": "0.0.0.0", "port": 9001, "reload": True})]


def test_api_module_has_no_second_entry_point():
    import faculty_cv.api.main as api_main

    assert not hasattr(api_main, "main")
