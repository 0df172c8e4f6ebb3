"""mapforge CLI - typer application entry point."""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from mapforge.observability import close_file_logging, configure_logging, get_logger

if TYPE_CHECKING:
    from mapforge.config import MapConfig
    from mapforge.generation.pipeline import GeneratedMap
    from mapforge.validation import ValidationReport

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="mapforge",
    help="mapforge: Layered roguelike map generation.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)
log = get_logger(__name__)

DEFAULT_LOG_DIR = Path("logs")
OUTPUT_FORMATS = ("json", "dot", "mermaid")

_SEVERITY_STYLE = {"pass": "green", "warn": "yellow", "fail": "red"}


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_enabled: Annotated[
        bool,
        typer.Option("--log", help="Enable JSONL file logging (debug.jsonl) in --log-dir."),
    ] = False,
    log_dir: Annotated[
        Path,
        typer.Option("--log-dir", help="Directory for log files.", envvar="MAPFORGE_LOG_DIR"),
    ] = DEFAULT_LOG_DIR,
) -> None:
    """mapforge: Layered roguelike map generation."""
    configure_logging(verbosity=verbose, log_to_file=log_enabled, log_dir=log_dir)
    if log_enabled:
        atexit.register(close_file_logging)


def _load_config_or_exit(config_path: Path) -> MapConfig:
    from mapforge.config import MapConfigError, load_map_config

    try:
        return load_map_config(config_path)
    except MapConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _print_summary(result: GeneratedMap) -> None:
    """Print per-layer node counts and generation diagnostics."""
    graph = result.graph
    table = Table(title=f"Map: {result.config.name}")
    table.add_column("Layer", justify="right")
    table.add_column("Active", justify="right")
    table.add_column("Edges up", justify="right")
    table.add_column("Nodes")

    for index in reversed(range(graph.layer_count)):
        active = [n for n in graph.layer_nodes(index) if n.active]
        edges_up = sum(len(n.outgoing) for n in active)
        names = ", ".join(
            f"{n.column}:{n.blueprint.name if n.blueprint else '-'}" for n in active
        )
        table.add_row(str(index), str(len(active)), str(edges_up), names)

    console.print(table)

    diag = result.diagnostics
    console.print(
        f"Boss: {result.boss}  Seed: {result.seed}  Path attempts: {diag.attempts}  "
        f"Starting columns: {diag.distinct_starting_columns}/{diag.starting_target}"
    )


def _warn_shortfall(result: GeneratedMap) -> None:
    """Report a starting-column shortfall on stderr."""
    diag = result.diagnostics
    if not diag.target_met:
        err_console.print(
            f"[yellow]Warning:[/yellow] only {diag.distinct_starting_columns} distinct "
            f"starting columns reached (target {diag.starting_target}) "
            f"after {diag.attempts} attempts"
        )


def _print_report(report: ValidationReport, target: Console | None = None) -> None:
    target = target or console
    table = Table(title="Validation")
    table.add_column("Check")
    table.add_column("Result")
    table.add_column("Detail")
    for check in report.checks:
        style = _SEVERITY_STYLE[check.severity]
        table.add_row(check.name, f"[{style}]{check.severity}[/{style}]", check.message)
    target.print(table)
    target.print(f"Summary: {report.summary}")


def _render(result: GeneratedMap, output_format: str) -> str:
    if output_format == "json":
        from mapforge.export import map_to_json

        return map_to_json(result)

    from mapforge.visualization import render_dot, render_mermaid

    if output_format == "dot":
        return render_dot(result)
    return render_mermaid(result)


@app.command()
def version() -> None:
    """Show version information."""
    from mapforge import __version__

    console.print(f"mapforge v{__version__}")


@app.command()
def init(
    path: Annotated[Path, typer.Argument(help="Where to write the config YAML")] = Path(
        "map.yaml"
    ),
    name: Annotated[str, typer.Option("--name", "-n", help="Config name")] = "act_one",
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file")] = False,
) -> None:
    """Write a default map configuration to PATH."""
    from mapforge.config import create_default_config, save_map_config

    if path.exists() and not force:
        console.print(f"[red]Error:[/red] '{path}' already exists (use --force to overwrite)")
        raise typer.Exit(1)

    save_map_config(create_default_config(name), path)
    console.print(f"[green]✓[/green] Wrote config: [bold]{path}[/bold]")
    console.print("Next steps:")
    console.print(f"  mapforge generate {path} --seed 42")


@app.command()
def generate(
    config_path: Annotated[Path, typer.Argument(help="Map config YAML")],
    seed: Annotated[
        int | None,
        typer.Option(
            "--seed", "-s", help="Random seed for a reproducible map", envvar="MAPFORGE_SEED"
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json, dot or mermaid"),
    ] = "json",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write output to this file instead of stdout"),
    ] = None,
    run_checks: Annotated[
        bool,
        typer.Option("--validate", help="Run structural checks after generating"),
    ] = False,
) -> None:
    """Generate a map from CONFIG_PATH."""
    from mapforge.generation import MapGenerator

    if output_format not in OUTPUT_FORMATS:
        console.print(
            f"[red]Error:[/red] Unknown format '{output_format}'. "
            f"Choose from: {', '.join(OUTPUT_FORMATS)}"
        )
        raise typer.Exit(1)

    config = _load_config_or_exit(config_path)
    result = MapGenerator(config, seed=seed).generate()
    rendered = _render(result, output_format)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered + "\n", encoding="utf-8")
        _print_summary(result)
        console.print(f"[green]✓[/green] Wrote {output_format}: {output}")
    else:
        typer.echo(rendered)
    _warn_shortfall(result)

    if run_checks:
        from mapforge.validation import validate_map

        report = validate_map(result)
        # Keep stdout clean when the map itself went there
        _print_report(report, console if output is not None else err_console)
        if report.has_failures:
            raise typer.Exit(1)


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Map config YAML")],
    seed: Annotated[
        int | None,
        typer.Option(
            "--seed", "-s", help="Random seed for a reproducible map", envvar="MAPFORGE_SEED"
        ),
    ] = None,
) -> None:
    """Generate a map from CONFIG_PATH and run structural checks on it."""
    from mapforge.generation import MapGenerator
    from mapforge.validation import validate_map

    config = _load_config_or_exit(config_path)
    result = MapGenerator(config, seed=seed).generate()
    _print_summary(result)
    _warn_shortfall(result)

    report = validate_map(result)
    _print_report(report)
    log.info("validate_command_done", failures=report.has_failures)
    if report.has_failures:
        raise typer.Exit(1)
