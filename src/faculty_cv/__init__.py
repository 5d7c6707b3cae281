def main() -> None:
    """Entry point for the ``faculty-cv`` command."""
    from faculty_cv.cli import app

    app()
