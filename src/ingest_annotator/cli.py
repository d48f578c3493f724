#!/usr/bin/env python3
"""Command-line interface for ingest-annotator."""

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import track
from rich.table import Table

from .config import SENTENCE_MODEL_KEY, SENTIMENT_MODEL_KEY, EngineSettings
from .document import Document
from .engine import AnnotationEngine
from .errors import AnnotatorError
from .processor import DEFAULT_TARGET_FIELD, AnnotationProcessor
from .utils.file_io import is_jsonl, read_documents, write_documents

app = typer.Typer(help="Ingest Annotator - Entity and sentiment annotation for documents")
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _start_engine(models_dir: Path | None) -> AnnotationEngine:
    try:
        settings = EngineSettings.from_env()
    except AnnotatorError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if models_dir is not None:
        settings = dataclasses.replace(settings, models_dir=models_dir)

    console.print(f"[bold]Loading models from:[/bold] {settings.models_dir}")
    return AnnotationEngine.start(settings)


def _require_sentence_model(engine: AnnotationEngine) -> None:
    if not engine.registry.has_sentence_model():
        console.print("[red]Sentence model not loaded, entity recognition is unavailable[/red]")
        raise typer.Exit(1)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, AnnotatorError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


def _default_output(input_file: Path) -> Path:
    suffix = ".jsonl" if is_jsonl(input_file) else ".json"
    return input_file.with_name(f"{input_file.stem}.annotated{suffix}")


@app.command()
def annotate(
    input_file: Path = typer.Argument(
        ..., help="JSON or JSONL file with documents", exists=True, dir_okay=False
    ),
    field: list[str] = typer.Option(
        ..., "--field", "-f", help="Source field to annotate (repeatable, 'list.sub' for nested)"
    ),
    target_field: str = typer.Option(
        DEFAULT_TARGET_FIELD, "--target-field", "-t", help="Field to write entities to"
    ),
    category: list[str] = typer.Option(
        None, "--category", "-c", help="Category to extract (repeatable, default: all loaded)"
    ),
    output: Path = typer.Option(None, "--output", "-o", help="Output file"),
    models_dir: Path = typer.Option(None, "--models-dir", "-m", help="Model directory"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Parallel worker threads"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Annotate every document in a JSON or JSONL file."""
    _setup_logging(verbose)

    engine = _start_engine(models_dir)
    _require_sentence_model(engine)

    processor = AnnotationProcessor(
        engine,
        source_fields=field,
        target_field=target_field,
        categories=category or None,
    )

    try:
        sources = read_documents(input_file)
    except ValueError as e:
        console.print(f"[red]Could not read documents:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(
        f"[bold]Annotating {len(sources)} documents[/bold] "
        f"(categories: {', '.join(processor.categories) or 'none'})"
    )

    stats = {"total": len(sources), "annotated": 0, "failed": 0}
    errors: list[tuple[int, str]] = []

    def annotate_one(index: int) -> None:
        processor.execute(Document(sources[index]))

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(annotate_one, i): i for i in range(len(sources))}
            for future in track(
                as_completed(futures), total=len(futures), description="Annotating"
            ):
                exc = future.exception()
                if exc is None:
                    stats["annotated"] += 1
                else:
                    stats["failed"] += 1
                    errors.append((futures[future], _describe(exc)))
    else:
        for i in track(range(len(sources)), description="Annotating"):
            try:
                annotate_one(i)
                stats["annotated"] += 1
            except Exception as e:
                stats["failed"] += 1
                errors.append((i, _describe(e)))

    output = output or _default_output(input_file)
    write_documents(output, sources)

    console.print("\n[bold green]✓ Annotation complete[/bold green]")
    console.print(f"Total documents: {stats['total']}")
    console.print(f"Annotated: {stats['annotated']}")
    console.print(f"Failed: {stats['failed']}")
    for index, message in sorted(errors)[:20]:
        console.print(f"  [red]document {index}:[/red] {escape(message)}")

    console.print(f"\n[bold]Saved to:[/bold] {output}")

    if stats["failed"]:
        raise typer.Exit(1)


@app.command()
def extract(
    text: str = typer.Argument(..., help="Text to annotate"),
    category: list[str] = typer.Option(
        None, "--category", "-c", help="Category to extract (repeatable, default: all loaded)"
    ),
    models_dir: Path = typer.Option(None, "--models-dir", "-m", help="Model directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Extract entities (and sentiment, when enabled) from a piece of text."""
    _setup_logging(verbose)

    engine = _start_engine(models_dir)
    _require_sentence_model(engine)

    categories = sorted(category) if category else sorted(engine.categories())
    table = Table(title="Entities")
    table.add_column("Category", style="cyan")
    table.add_column("Entities", style="green")

    try:
        for name in categories:
            table.add_row(name, ", ".join(sorted(engine.find(text, name))) or "-")
        sentiment = engine.classify(text) if engine.sentiment_enabled() else None
    except AnnotatorError as e:
        console.print(f"[red]Extraction failed:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(table)
    if sentiment is not None:
        console.print(f"[bold]Sentiment:[/bold] {sentiment or 'unknown'}")


@app.command()
def models(
    models_dir: Path = typer.Option(None, "--models-dir", "-m", help="Model directory"),
):
    """Load all configured models and show which ones are available."""
    _setup_logging(False)

    engine = _start_engine(models_dir)
    report = engine.load_report

    table = Table(title="Models")
    table.add_column("Model", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Status")
    table.add_column("Load time", justify="right")
    table.add_column("Error", style="dim")

    names = sorted(set(report.loaded) | {f.name for f in report.failures})
    for name in names:
        if name == SENTENCE_MODEL_KEY:
            kind = "sentences"
        elif name == SENTIMENT_MODEL_KEY:
            kind = "sentiment"
        else:
            kind = "entities"

        failure = report.failure_for(name)
        status = "[red]failed[/red]" if failure else "[green]loaded[/green]"
        error = type(failure.cause).__name__ if failure else ""
        table.add_row(name, kind, status, f"{report.timings.get(name, 0.0):.2f}s", error)

    console.print(table)
    console.print(f"Categories: {', '.join(sorted(engine.categories())) or 'none'}")
    console.print(f"Sentiment: {'enabled' if engine.sentiment_enabled() else 'disabled'}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
