"""Command-line interface for faculty CV generation.

Commands:
    generate - Render one CV from the record store to a file
    serve    - Start the HTTP API

Examples:

    faculty-cv generate --person-id 42 --template modern --format pdf \\
        --section education --section books --output out/

    faculty-cv serve --port 8000
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from faculty_cv.config import configure_logging, get_settings
from faculty_cv.constants.sections import SectionKey
from faculty_cv.data.db import RecordStore
from faculty_cv.errors import CVGenerationError
from faculty_cv.services.cv_generator import CVRequest, generate_cv
from faculty_cv.services.record_source import SqlRecordSource

app = typer.Typer(
    help="Generate faculty CVs as PDF or Word documents",
    add_completion=False,
    no_args_is_help=True,
)


@app.command()
def generate(
    person_id: Annotated[int, typer.Option("--person-id", help="ID of the faculty member")],
    template: Annotated[
        str, typer.Option("--template", "-t", help="academic, professional, modern or classic")
    ] = "academic",
    output_format: Annotated[str, typer.Option("--format", "-f", help="pdf or word")] = "pdf",
    sections: Annotated[
        list[str] | None,
        typer.Option("--section", "-s", help="Section key to include (repeatable; default all)"),
    ] = None,
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Directory to write the CV into")
    ] = Path("."),
) -> None:
    """Generate one CV and print the path of the written file."""
    settings = get_settings()
    configure_logging(settings)

    store = RecordStore()
    try:
        source = SqlRecordSource(store, institution=settings.institution)
        request = CVRequest(
            person_id=person_id,
            template=template,
            format=output_format,
            sections=sections or [key.value for key in SectionKey],
        )
        document = generate_cv(request, source, settings=settings)
    except CVGenerationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        store.close()

    output.mkdir(parents=True, exist_ok=True)
    path = output / document.filename
    path.write_bytes(document.content)
    typer.echo(str(path))


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Interface to bind")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port to listen on")] = 8000,
    reload: Annotated[bool, typer.Option(help="Reload on code changes")] = False,
) -> None:
    """Start the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("faculty_cv.api.main:app", host=host, port=port, reload=reload)
