"""Sandboxed TeX engine runs.

Every compilation happens inside :meth:`LatexEngine.session`: a fresh
temporary directory and a compiler process started in its own process
group.  Leaving the session, by success, error or timeout, kills whatever
is left of that group and removes the directory.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import signal
import subprocess
import tempfile
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from io import BytesIO
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from faculty_cv.errors import RenderEngineError, RenderTimeoutError

__all__ = ["EngineSession", "LatexEngine", "parse_latex_log"]

logger = logging.getLogger(__name__)

JOB_NAME = "cv"
MAX_PASSES = 2

_ERROR_LINE = re.compile(r"^! (.+)$", re.MULTILINE)
_RERUN_HINTS = ("Rerun LaTeX", "Table widths have changed", "Rerun to get")


def parse_latex_log(log_content: str) -> list[str]:
    """Return the ``! ...`` error lines of a TeX log."""
    return [match.group(1).strip() for match in _ERROR_LINE.finditer(log_content)]


class EngineSession:
    """One isolated compilation context.

    Attributes:
        workdir: Private temporary directory of this session.
    """

    def __init__(self, workdir: Path, compiler: str, timeout: float) -> None:
        self.workdir = workdir
        self._compiler = compiler
        self._timeout = timeout
        self._process: subprocess.Popen[bytes] | None = None

    def compile(self, source: str, assets: Mapping[str, Path] | None = None) -> bytes:
        """Compile *source* and return validated PDF bytes.

        *assets* maps file names referenced by the source, such as images,
        to the files copied into the work directory under those names.

        Raises:
            RenderTimeoutError: If all passes together exceed the timeout.
            RenderEngineError: If the compiler is missing, fails, or
                produces no readable PDF.
        """
        for name, path in (assets or {}).items():
            shutil.copyfile(path, self.workdir / name)
        tex_path = self.workdir / f"{JOB_NAME}.tex"
        tex_path.write_text(source, encoding="utf-8")
        deadline = time.monotonic() + self._timeout

        for attempt in range(1, MAX_PASSES + 1):
            returncode = self._run_pass(deadline)
            log_content = self._read_log()
            if returncode != 0:
                raise RenderEngineError(
                    f"LaTeX compilation failed with exit code {returncode}",
                    parse_latex_log(log_content),
                )
            if not any(hint in log_content for hint in _RERUN_HINTS):
                break
            logger.debug("TeX pass %d requested a rerun", attempt)

        return self._collect_pdf()

    def terminate(self) -> None:
        """Kill the compiler's process group if it is still alive."""
        process = self._process
        if process is None or process.poll() is not None:
            return
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        process.wait()
        logger.warning("Killed TeX engine process group %d", process.pid)

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _run_pass(self, deadline: float) -> int:
        cmd = [
            self._compiler,
            "-interaction=nonstopmode",
            "-halt-on-error",
            "-no-shell-escape",
            f"-jobname={JOB_NAME}",
            f"{JOB_NAME}.tex",
        ]
        try:
            self._process = subprocess.Popen(
                cmd,
                cwd=self.workdir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        except FileNotFoundError:
            msg = f"LaTeX compiler not found: {self._compiler}. Please install TeX Live."
            raise RenderEngineError(msg) from None

        remaining = deadline - time.monotonic()
        try:
            self._process.communicate(timeout=max(remaining, 0.0))
        except subprocess.TimeoutExpired:
            self.terminate()
            raise RenderTimeoutError(self._timeout) from None
        return self._process.returncode

    def _read_log(self) -> str:
        log_path = self.workdir / f"{JOB_NAME}.log"
        if not log_path.exists():
            return ""
        return log_path.read_text(encoding="utf-8", errors="replace")

    def _collect_pdf(self) -> bytes:
        pdf_path = self.workdir / f"{JOB_NAME}.pdf"
        if not pdf_path.exists():
            raise RenderEngineError(
                "LaTeX compilation produced no PDF", parse_latex_log(self._read_log())
            )
        content = pdf_path.read_bytes()
        try:
            pages = len(PdfReader(BytesIO(content)).pages)
        except PdfReadError as exc:
            raise RenderEngineError(f"Generated PDF is unreadable: {exc}") from exc
        if pages == 0:
            raise RenderEngineError("Generated PDF has no pages")
        logger.debug("TeX engine produced %d page(s), %d bytes", pages, len(content))
        return content


class LatexEngine:
    """Factory for isolated TeX compilation sessions.

    Args:
        compiler: Executable to run (``xelatex`` by default).  The generated
            source needs a Unicode engine with ``fontspec``.
        timeout: Seconds one compilation may take across all passes.
    """

    def __init__(self, compiler: str = "xelatex", *, timeout: float = 60.0) -> None:
        self.compiler = compiler
        self.timeout = timeout

    @contextmanager
    def session(self) -> Iterator[EngineSession]:
        workdir = Path(tempfile.mkdtemp(prefix="faculty-cv-"))
        session = EngineSession(workdir, self.compiler, self.timeout)
        try:
            yield session
        finally:
            session.terminate()
            shutil.rmtree(workdir, ignore_errors=True)

    def compile(self, source: str, assets: Mapping[str, Path] | None = None) -> bytes:
        """Compile LaTeX *source* in a fresh session and return PDF bytes."""
        with self.session() as session:
            return session.compile(source, assets)

    def is_available(self) -> bool:
        return shutil.which(self.compiler) is not None
