"""Tests for sandboxed TeX engine sessions."""

from __future__ import annotations

import signal
import subprocess
from pathlib import Path

import pytest
from pypdf import PdfWriter

import faculty_cv.rendering.engine as engine_module
from faculty_cv.errors import RenderEngineError, RenderTimeoutError
from faculty_cv.rendering.engine import LatexEngine, parse_latex_log


def _write_pdf(path: Path) -> None:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    with path.open("wb") as fh:
        writer.write(fh)


class FakeProcess:
    """Stands in for ``subprocess.Popen``; behaviour set per test."""

    instances: list[FakeProcess] = []
    mode = "ok"
    log = ""

    def __init__(self, cmd, **kwargs):
        self.cmd = cmd
        self.kwargs = kwargs
        self.cwd = Path(kwargs["cwd"])
        self.pid = 4242 + len(FakeProcess.instances)
        self.returncode = None
        self.killed = False
        FakeProcess.instances.append(self)

    def communicate(self, timeout=None):
        self.inputs = {p.name: p.read_bytes() for p in self.cwd.iterdir()}
        if FakeProcess.mode == "hang":
            raise subprocess.TimeoutExpired(self.cmd, timeout)
        (self.cwd / "cv.log").write_text(FakeProcess.log)
        if FakeProcess.mode == "fail":
            self.returncode = 1
        else:
            self.returncode = 0
            if FakeProcess.mode == "ok":
                _write_pdf(self.cwd / "cv.pdf")
            elif FakeProcess.mode == "garbage":
                (self.cwd / "cv.pdf").write_bytes(b"not a pdf")
        return b"", None

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if self.returncode is None:
            self.returncode = -9
        return self.returncode


@pytest.fixture
def fake_popen(monkeypatch):
    FakeProcess.instances = []
    FakeProcess.mode = "ok"
    FakeProcess.log = "This is pdfTeX\nOutput written on cv.pdf (1 page).\n"
    monkeypatch.setattr(engine_module.subprocess, "Popen", FakeProcess)
    kills: list[tuple[int, int]] = []
    monkeypatch.setattr(engine_module.os, "killpg", lambda pid, sig: kills.append((pid, sig)))
    return kills


class TestParseLatexLog:
    def test_error_lines(self):
        log = "ok\n! Undefined control sequence.\nl.5 \\foo\n! Emergency stop.\n"
        assert parse_latex_log(log) == ["Undefined control sequence.", "Emergency stop."]

    def test_clean_log(self):
        assert parse_latex_log("Output written on cv.pdf") == []


class TestLatexEngine:
    def test_returns_pdf_bytes(self, fake_popen):
        content = LatexEngine("xelatex", timeout=5).compile(r"\documentclass{article}")
        assert content.startswith(b"%PDF")

        process = FakeProcess.instances[0]
        assert process.cmd[0] == "xelatex"
        assert "-no-shell-escape" in process.cmd
        assert process.kwargs["start_new_session"] is True

    def test_session_directory_removed(self, fake_popen):
        engine = LatexEngine("xelatex", timeout=5)
        with engine.session() as session:
            workdir = session.workdir
            session.compile("source")
            assert (workdir / "cv.tex").read_text() == "source"
        assert not workdir.exists()

    def test_assets_copied_next_to_source(self, fake_popen, tmp_path):
        photo = tmp_path / "Asha Mehta.PNG"
        photo.write_bytes(b"image-bytes")
        LatexEngine("xelatex", timeout=5).compile("source", {"profile.png": photo})

        inputs = FakeProcess.instances[0].inputs
        assert inputs["profile.png"] == b"image-bytes"
        assert inputs["cv.tex"] == b"source"

    def test_timeout_kills_process_group(self, fake_popen):
        FakeProcess.mode = "hang"
        engine = LatexEngine("xelatex", timeout=0.5)
        with pytest.raises(RenderTimeoutError) as exc_info:
            with engine.session() as session:
                workdir = session.workdir
                session.compile("source")

        process = FakeProcess.instances[0]
        assert fake_popen == [(process.pid, signal.SIGKILL)]
        assert exc_info.value.timeout == 0.5
        assert not workdir.exists()

    def test_timeout_is_render_engine_error(self):
        assert issubclass(RenderTimeoutError, RenderEngineError)

    def test_failure_carries_log_errors(self, fake_popen):
        FakeProcess.mode = "fail"
        FakeProcess.log = "! LaTeX Error: File `needspace.sty' not found.\n"
        with pytest.raises(RenderEngineError) as exc_info:
            LatexEngine("xelatex", timeout=5).compile("source")
        assert exc_info.value.log_errors == ["LaTeX Error: File `needspace.sty' not found."]
        assert "exit code 1" in exc_info.value.message

    def test_missing_output(self, fake_popen):
        FakeProcess.mode = "nopdf"
        with pytest.raises(RenderEngineError, match="no PDF"):
            LatexEngine("xelatex", timeout=5).compile("source")

    def test_unreadable_output(self, fake_popen):
        FakeProcess.mode = "garbage"
        with pytest.raises(RenderEngineError, match="unreadable"):
            LatexEngine("xelatex", timeout=5).compile("source")

    def test_rerun_requested(self, fake_popen):
        FakeProcess.log = "Package longtable Warning: Table widths have changed. Rerun LaTeX.\n"
        LatexEngine("xelatex", timeout=5).compile("source")
        assert len(FakeProcess.instances) == 2

    def test_compiler_not_found(self):
        engine = LatexEngine("faculty-cv-no-such-compiler", timeout=5)
        assert not engine.is_available()
        with pytest.raises(RenderEngineError, match="not found"):
            engine.compile("source")
