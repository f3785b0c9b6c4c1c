from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import Settings
from .dataset.parse import parse_csv, resolve_columns, split_lines
from .errors import ErrorKind, LoadError
from .pipeline import Pipeline, PipelineState
from .source import is_url, load_text


app = typer.Typer(add_completion=False, help="Limitrofes: explore which municipalities border each other.")
console = Console()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
):
    settings = Settings()
    level = (log_level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format="%(levelname)s %(name)s: %(message)s")


def _load(source: str | None) -> Pipeline:
    settings = Settings()
    pipeline = Pipeline.from_settings(settings, source=source)
    if pipeline.load() is not PipelineState.READY:
        err = pipeline.error
        console.print(f"Failed to load data: {err}", style="red", markup=False)
        if pipeline.error_kind is ErrorKind.MISSING_COLUMN:
            console.print(
                f"  Fix: the header must contain {settings.entity_field!r} and {settings.neighbor_field!r}.",
                style="yellow",
                markup=False,
            )
        raise typer.Exit(code=2)
    return pipeline


@app.command()
def entities(
    source: str | None = typer.Option(None, "--source", help="CSV URL or local path (defaults to LIMITROFES_DATA_URL)"),
    contains: str | None = typer.Option(None, "--contains", help="Only show names containing this text"),
):
    """List the municipalities available for selection."""
    pipeline = _load(source)
    names = list(pipeline.dataset.entities)
    if contains:
        needle = contains.casefold()
        names = [n for n in names if needle in n.casefold()]

    for n in names:
        console.print(n, markup=False)
    console.print(f"\n{len(names)} municipalities", style="dim")


@app.command()
def neighbors(
    municipio: str = typer.Argument(..., help="Exact municipality name (case-sensitive)"),
    source: str | None = typer.Option(None, "--source", help="CSV URL or local path (defaults to LIMITROFES_DATA_URL)"),
):
    """Show the municipalities bordering MUNICIPIO."""
    pipeline = _load(source)
    res = pipeline.select(municipio)

    if not res.found:
        console.print(res.message, style="yellow", markup=False)
        return

    table = Table(title=f"Limítrofes de {municipio}")
    table.add_column("#", justify="right", width=4)
    table.add_column("municipality")
    for i, name in enumerate(res.neighbors, start=1):
        table.add_row(Text(str(i)), Text(name))
    console.print(table)


@app.command()
def stats(
    source: str | None = typer.Option(None, "--source", help="CSV URL or local path (defaults to LIMITROFES_DATA_URL)"),
):
    """Show dataset stats."""
    pipeline = _load(source)

    table = Table(title="Limitrofes Stats")
    table.add_column("Metric")
    table.add_column("Value")
    for k, v in pipeline.dataset.stats().items():
        table.add_row(k, str(v))
    console.print(table)


@app.command()
def doctor(
    source: str | None = typer.Option(None, "--source", help="CSV URL or local path to check"),
):
    """Check that the data source is reachable and has the required columns."""
    settings = Settings()
    location = source or settings.data_url
    kind = "URL" if is_url(location) else "file"

    console.print("Source:")
    try:
        text = load_text(location, timeout_s=settings.fetch_timeout)
    except LoadError as e:
        console.print(f"- Not reachable ({kind}): {e}", style="red", markup=False)
        console.print("  Fix: check LIMITROFES_DATA_URL or pass --source.", style="yellow")
        raise typer.Exit(code=1)
    console.print(f"- Reachable {kind}: {location} ({len(text)} chars)", style="green", markup=False)

    console.print("\nHeader:")
    header = split_lines(text.lstrip("\ufeff"))[0].split(settings.delimiter)
    ent_pos, nb_pos = resolve_columns(header, entity_field=settings.entity_field, neighbor_field=settings.neighbor_field)
    ok = True
    for name, pos in ((settings.entity_field, ent_pos), (settings.neighbor_field, nb_pos)):
        if pos == -1:
            console.print(f"- Missing column: {name}", style="red", markup=False)
            ok = False
        else:
            console.print(f"- {name} at position {pos}", style="green", markup=False)

    if not ok:
        console.print(f"  Header found: {header}", style="yellow", markup=False)
        raise typer.Exit(code=1)

    parsed = parse_csv(
        text,
        entity_field=settings.entity_field,
        neighbor_field=settings.neighbor_field,
        delimiter=settings.delimiter,
    )
    console.print("\nRows:")
    console.print(f"- Records: {len(parsed.records)}", style="green" if parsed.records else "yellow")
    if parsed.short_rows:
        console.print(f"- Short rows: {parsed.short_rows} (missing values are ignored)", style="yellow")


@app.command()
def serve(
    source: str | None = typer.Option(None, "--source", help="CSV URL or local path (defaults to LIMITROFES_DATA_URL)"),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Run the web UI (FastAPI)."""
    try:
        import uvicorn
    except ImportError:
        console.print("Missing web dependencies. Install: `pip install -e '.[web]'`", style="red")
        raise typer.Exit(code=2)

    from .web.server import create_app

    app_ = create_app(source=source)
    uvicorn.run(app_, host=host, port=int(port))


if __name__ == "__main__":
    app()
