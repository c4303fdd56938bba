"""Command-line front-end for entry ordering.

Commands:
    entry-sequencer resolve     -- Print the resolved order
    entry-sequencer check       -- Validate declarations and report every problem
    entry-sequencer waves       -- Print groups of entries that become ready together
    entry-sequencer dependents  -- Print the direct dependents of one entry
"""

from __future__ import annotations

import json as json_lib
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import OUTPUT_FORMATS, load_config
from .cycles import ensure_acyclic
from .declarations import load_many
from .engine import check as check_registry
from .engine import resolve as resolve_registry
from .exceptions import CycleDetectedError, SequencerError, UnknownReferenceError
from .graph import build_graph, get_dependents
from .registry import Registry
from .sorter import ordering_waves

logger = logging.getLogger(__name__)

app = typer.Typer(help="Resolve named entries into a deterministic order")
console = Console()
err_console = Console(stderr=True)

FilesArgument = typer.Argument(
    None,
    help="Declaration files (defaults to sequencer.yaml / ENTRY_SEQUENCER_PATHS)",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Resolve named entries into a deterministic order."""
    if verbose:
        package_logger = logging.getLogger("entry_sequencer")
        package_logger.setLevel(logging.DEBUG)
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


def _load(files: Optional[List[Path]]) -> Registry:
    paths = list(files or [])
    if not paths:
        try:
            paths = load_config().declaration_paths
        except SequencerError as exc:
            _fail(str(exc))
    if not paths:
        _fail("No declaration files given and none configured")
    try:
        return load_many(paths)
    except SequencerError as exc:
        _fail(str(exc))


def _describe(error: SequencerError) -> list[str]:
    if isinstance(error, UnknownReferenceError):
        return [str(ref) for ref in error.references]
    if isinstance(error, CycleDetectedError):
        return [f"cycle: {' -> '.join(error.path)}"]
    return [str(error)]


@app.command()
def resolve(
    files: Optional[List[Path]] = FilesArgument,
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help=f"Output format: {', '.join(OUTPUT_FORMATS)}"
    ),
) -> None:
    """Print the resolved order of all declared entries."""
    registry = _load(files)
    fmt = output_format
    if fmt is None:
        try:
            fmt = load_config().output_format
        except SequencerError as exc:
            logger.debug("Ignoring sequencer config: %s", exc)
            fmt = "table"
    if fmt not in OUTPUT_FORMATS:
        _fail(f"Unknown format '{fmt}'")

    try:
        ordered = resolve_registry(registry)
    except SequencerError as exc:
        _fail(str(exc))

    if fmt == "json":
        # Safe-loaded YAML may carry dates and timestamps.
        items = [{"name": name, "data": payload} for name, payload in ordered]
        typer.echo(json_lib.dumps(items, indent=2, default=str))
        return
    if fmt == "plain":
        for name, _payload in ordered:
            typer.echo(name)
        return

    table = Table(title="Resolved Order")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="bold cyan")
    table.add_column("Source", style="magenta")
    for position, (name, _payload) in enumerate(ordered, start=1):
        table.add_row(str(position), name, registry.source_of(name) or "")
    console.print(table)


@app.command()
def check(files: Optional[List[Path]] = FilesArgument) -> None:
    """Validate declarations; exit 1 if they cannot be resolved."""
    registry = _load(files)
    errors = check_registry(registry)
    if not errors:
        console.print(f"[green]OK[/green] {len(registry)} entries resolve cleanly")
        return

    for error in errors:
        for line in _describe(error):
            err_console.print(f"[red]✗[/red] {escape(line)}")
    raise typer.Exit(1)


@app.command()
def waves(files: Optional[List[Path]] = FilesArgument) -> None:
    """Print the waves of entries that become ready together."""
    registry = _load(files)
    try:
        graph = build_graph(registry)
        ensure_acyclic(graph)
        groups = ordering_waves(graph)
    except SequencerError as exc:
        _fail(str(exc))

    for index, group in enumerate(groups):
        console.print(f"[bold]{index}[/bold]: {escape(', '.join(group))}")


@app.command()
def dependents(
    name: str = typer.Argument(..., help="Entry name"),
    files: Optional[List[Path]] = FilesArgument,
) -> None:
    """Print entries that must directly follow NAME."""
    registry = _load(files)
    if name not in registry:
        _fail(f"Unknown entry '{name}'")
    try:
        graph = build_graph(registry)
    except SequencerError as exc:
        _fail(str(exc))

    for dependent in get_dependents(name, graph):
        typer.echo(dependent)


if __name__ == "__main__":
    app()
