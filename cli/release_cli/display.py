"""Rich output formatting for the pom-release CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that machine-readable output on *stdout* is never
polluted with human-readable decoration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from release_engine.graph import ProjectGraph
    from release_engine.models import Coordinate
    from release_engine.release import ReleaseReport


# ---------------------------------------------------------------------------
# Relation colour mapping
# ---------------------------------------------------------------------------

_RELATION_COLOURS: dict[str, str] = {
    "ROOT": "bold yellow",
    "HIERARCHICAL": "blue",
    "TRANSITIVE": "green",
}


def _coloured_relation(kind: str) -> str:
    """Return a Rich markup string with the relation kind colour-coded."""
    colour = _RELATION_COLOURS.get(kind, "white")
    return f"[{colour}]{kind}[/{colour}]"


# ---------------------------------------------------------------------------
# Release report
# ---------------------------------------------------------------------------


def display_release_report(console: Console, report: ReleaseReport) -> None:
    """Render a release report: header, summary, warnings and details.

    Parameters
    ----------
    console:
        Rich console to write to (typically stderr).
    report:
        The analysed release.
    """
    if report.error is not None:
        console.print(f"[red]{report.error}[/red]")
        return

    header_lines = [
        f"[bold]Releasing:[/bold] {report.root}",
        f"[bold]Visited:[/bold]   {len(report.visits)} project(s)",
        f"[bold]Changes:[/bold]   {len(report.changes)}",
    ]
    console.print(Panel("\n".join(header_lines), title="Release", border_style="blue"))

    if not report.visits:
        console.print(f"[red]{report.summary}[/red]")
        return

    display_visit_tree(console, report)

    if report.up_to_date:
        console.print(f"[green]{report.summary}[/green]")
        return

    # Summary: what moves where.
    if report.releases:
        table = Table(title=f"Summary ({len(report.releases)})", expand=False)
        table.add_column("Project", style="bold")
        table.add_column("Relation")
        table.add_column("Changed To")
        table.add_column("Locations", justify="right")
        for release in report.releases:
            table.add_row(
                str(release.old),
                _coloured_relation(release.relation.value),
                str(release.new),
                str(release.location_count),
            )
        console.print(table)

    for item in report.unlocatable:
        console.print(
            f"[bold orange3]project should be changed and source files can't be found ! "
            f"coordinate: {item.coordinate}[/bold orange3]"
        )

    display_change_details(console, report)

    if report.truncated:
        console.print("[yellow]Traversal stopped at the project limit; results are partial.[/yellow]")

    console.print(report.summary)


def display_visit_tree(console: Console, report: ReleaseReport) -> None:
    """Render the traversal as a flat tree grouped under the root."""
    tree = Tree(f"[bold yellow]{report.root}[/bold yellow]", guide_style="dim")
    for visit in report.visits[1:]:
        tree.add(f"{_coloured_relation(visit.kind.value)} {visit.coordinate}")
    for missing in report.not_found:
        style = "red" if missing.needs_change else "dim"
        tree.add(f"[{style}]missing {missing.coordinate} ({missing.message})[/{style}]")
    console.print(Panel(tree, title="Traversal", border_style="yellow"))


def display_change_details(console: Console, report: ReleaseReport) -> None:
    """Render the per-location change table."""
    if not report.changes:
        console.print("[dim]No descriptor locations to change.[/dim]")
        return

    table = Table(title=f"Details ({len(report.changes)})", show_lines=False, expand=False)
    table.add_column("File")
    table.add_column("Location")
    table.add_column("Old")
    table.add_column("New", style="green")
    for change in report.changes:
        table.add_row(
            str(change.location.descriptor),
            str(change.location),
            change.old_value,
            change.new_value,
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Project list
# ---------------------------------------------------------------------------


def display_project_list(console: Console, graph: ProjectGraph) -> None:
    """Render a table of all loaded projects followed by missing references."""
    projects = graph.projects()
    if not projects:
        console.print("[dim]No projects found.[/dim]")
        return

    table = Table(title=f"Projects ({len(projects)})", expand=False)
    table.add_column("Coordinate", style="bold")
    table.add_column("Parent")
    table.add_column("Dependencies", justify="right")
    table.add_column("Descriptor")
    for project in projects:
        parent = project.parent_coordinate
        table.add_row(
            str(project.coordinate),
            str(parent) if parent is not None else "-",
            str(len(graph.dependencies_of(project.coordinate))),
            str(project.descriptor),
        )
    console.print(table)

    display_missing_references(console, graph.missing_references())


def display_missing_references(console: Console, missing: list[Coordinate]) -> None:
    if not missing:
        return
    console.print(f"[yellow]{len(missing)} referenced project(s) not found:[/yellow]")
    for coordinate in missing:
        console.print(f"  [dim]{coordinate}[/dim]")


# ---------------------------------------------------------------------------
# Timings
# ---------------------------------------------------------------------------


def display_timings(console: Console, stats: list[dict[str, Any]]) -> None:
    """Render the profiled operation timings collected during the command."""
    if not stats:
        return

    table = Table(title="Timings", expand=False)
    table.add_column("Operation", style="bold")
    table.add_column("Calls", justify="right")
    table.add_column("Mean ms", justify="right")
    table.add_column("Min ms", justify="right")
    table.add_column("Max ms", justify="right")
    for row in stats:
        table.add_row(
            row["operation"],
            str(row["count"]),
            f"{row['mean_ms']:.3f}",
            f"{row['min_ms']:.3f}",
            f"{row['max_ms']:.3f}",
        )
    console.print(table)
