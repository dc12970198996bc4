"""pom-release CLI application -- Typer-based developer interface.

Provides commands to analyse the release of a coordinate across a
workspace of Maven projects and to list the projects that were loaded.
Human-readable output goes to *stderr* via Rich; ``--json`` writes the
machine-readable report to *stdout* so that pipelines can compose cleanly.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from release_engine.config import Settings
    from release_engine.graph import ProjectGraph

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from release_cli.display import display_project_list, display_release_report, display_timings

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="pom-release",
    help="pom-release - compute the descriptor edits needed to release a project",
    no_args_is_help=True,
)
console = Console(stderr=True)

# Mutable global options populated by the Typer callback.
_json_output: bool = False
_verbose: bool = False


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    json_mode: bool = typer.Option(
        False,
        "--json/--no-json",
        help="Emit structured JSON to stdout instead of human-readable output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log analysis progress and timings to stderr.",
    ),
) -> None:
    """Global options applied to every command."""
    global _json_output, _verbose  # noqa: PLW0603
    _json_output = json_mode
    _verbose = verbose
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_settings(**overrides: object) -> Settings:
    """Load settings, exiting 3 when the environment or an option holds an invalid value."""
    from release_engine.config import load_settings

    try:
        return load_settings(**overrides)
    except ValidationError as exc:
        console.print(f"[red]Invalid settings: {escape(str(exc))}[/red]")
        raise typer.Exit(code=3) from exc


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr at DEBUG (verbose) or the configured level."""
    level = "DEBUG" if verbose else _load_settings().log_level
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _load_graph(repo: Path, settings: Settings) -> ProjectGraph:
    """Load descriptors under *repo* and build the project graph, exiting 3 on failure."""
    from release_engine.graph import DuplicateProjectError, build_project_graph
    from release_engine.loader import DescriptorLoadError, load_projects_from_directory

    try:
        projects = load_projects_from_directory(repo, settings)
        return build_project_graph(projects)
    except (DescriptorLoadError, DuplicateProjectError) as exc:
        console.print(f"[red]Failed to load projects: {exc}[/red]")
        raise typer.Exit(code=3) from exc


def _show_timings() -> None:
    """Print the profiled operation timings when running verbose."""
    if not _verbose:
        return
    from release_engine.profiling import TimingCollector

    display_timings(console, TimingCollector.get_instance().get_all_stats())


# ---------------------------------------------------------------------------
# release
# ---------------------------------------------------------------------------


@app.command()
def release(
    repo: Path = typer.Argument(
        ...,
        help="Workspace directory containing the project descriptors.",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    coordinate: str = typer.Argument(
        ...,
        help="Coordinate to release, as group:artifact:version.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with code 1 when a project needing a change has no loaded descriptor.",
    ),
    qualifier: str | None = typer.Option(
        None,
        "--qualifier",
        "-q",
        help="Version qualifier removed on release (default: -SNAPSHOT).",
    ),
) -> None:
    """Show every descriptor edit needed to release COORDINATE.

    Walks parent and dependency relations from the released project and
    lists, for each reached project whose version still carries the
    qualifier, the files and locations to change.  Nothing is written.
    """
    from release_engine.graph import GraphLocationResolver
    from release_engine.models import parse_coordinate
    from release_engine.release import MALFORMED_COORDINATE_ERROR, ReleaseAnalyzer, serialize_report

    if parse_coordinate(coordinate) is None:
        console.print(f"[red]{MALFORMED_COORDINATE_ERROR}[/red]")
        raise typer.Exit(code=3)

    overrides: dict[str, object] = {}
    if qualifier is not None:
        overrides["release_qualifier"] = qualifier
    settings = _load_settings(**overrides)

    graph = _load_graph(repo, settings)
    analyzer = ReleaseAnalyzer(graph, GraphLocationResolver(graph), settings=settings)
    report = analyzer.analyze(coordinate)

    if _json_output:
        sys.stdout.write(serialize_report(report) + "\n")
    else:
        display_release_report(console, report)
    _show_timings()

    if not report.visits:
        raise typer.Exit(code=3)
    if strict and report.unlocatable:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# projects
# ---------------------------------------------------------------------------


@app.command()
def projects(
    repo: Path = typer.Argument(
        ...,
        help="Workspace directory containing the project descriptors.",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
) -> None:
    """List the projects discovered in a workspace."""
    graph = _load_graph(repo, _load_settings())

    if _json_output:
        rows = [
            {
                "coordinate": str(p.coordinate),
                "parent": str(p.parent_coordinate) if p.parent_coordinate else None,
                "dependencies": [str(d) for d in graph.dependencies_of(p.coordinate)],
                "descriptor": str(p.descriptor),
            }
            for p in graph.projects()
        ]
        payload = {
            "projects": rows,
            "missing": [str(c) for c in graph.missing_references()],
        }
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    else:
        display_project_list(console, graph)
    _show_timings()
