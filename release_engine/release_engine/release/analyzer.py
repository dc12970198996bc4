"""Release analysis entry point.

:class:`ReleaseAnalyzer` ties the pieces together for one requested
coordinate: parse the input, walk the graph with a
:class:`~release_engine.release.change_set.ChangeSetBuilder` attached,
resolve edit locations and assemble a :class:`ReleaseReport`.  Analysis is
read-only; applying the result is left to
:mod:`release_engine.release.tasks`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from release_engine.config import Settings, load_settings
from release_engine.graph.locations import GraphLocationResolver, LocationResolver
from release_engine.graph.project_graph import ProjectGraphAccessor, build_project_graph
from release_engine.loader.pom_loader import load_projects_from_directory
from release_engine.models.coordinate import Coordinate, parse_coordinate
from release_engine.release.change_set import ChangeSet, ChangeSetBuilder
from release_engine.release.report import (
    NotFoundRecord,
    ReleaseRecord,
    ReleaseReport,
    VisitRecord,
)
from release_engine.release.traversal import TraversalResult, traverse_release
from release_engine.rules.release_rule import CoordinateRule, needs_change, rule_from_settings

logger = logging.getLogger(__name__)

MALFORMED_COORDINATE_ERROR = "specify the coordinate with the group:artifact:version format"


class ReleaseAnalyzer:
    """Compute what releasing a coordinate changes across a project graph.

    Parameters
    ----------
    accessor:
        Graph queries used by the traversal.
    resolver:
        Source of edit locations for coordinates that must change.
    rule:
        Release rule.  Defaults to the rule configured in *settings*.
    settings:
        Traversal settings; defaults to :func:`load_settings`.
    """

    def __init__(
        self,
        accessor: ProjectGraphAccessor,
        resolver: LocationResolver,
        rule: CoordinateRule | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._accessor = accessor
        self._resolver = resolver
        self._settings = settings or load_settings()
        self._rule = rule or rule_from_settings(self._settings)

    def analyze(self, coordinate: str) -> ReleaseReport:
        """Analyse the release of *coordinate* (``group:artifact:version``).

        Malformed input yields a report whose ``error`` is set; no traversal
        is run in that case.  Every other outcome, including a root that is
        not in the graph, is reported rather than raised.
        """
        root = parse_coordinate(coordinate)
        if root is None:
            logger.info("Rejected malformed coordinate %r", coordinate)
            return ReleaseReport(
                requested=coordinate,
                error=MALFORMED_COORDINATE_ERROR,
                summary=MALFORMED_COORDINATE_ERROR,
            )

        builder = ChangeSetBuilder(self._rule)
        traversal = traverse_release(
            self._accessor,
            root,
            builder,
            follow_parents=self._settings.follow_parents,
            max_projects=self._settings.max_visited_projects,
        )
        change_set = builder.build(self._resolver)
        return self._assemble(coordinate, root, traversal, change_set)

    def _assemble(
        self,
        requested: str,
        root: Coordinate,
        traversal: TraversalResult,
        change_set: ChangeSet,
    ) -> ReleaseReport:
        visits = [
            VisitRecord(kind=v.kind, coordinate=v.project.coordinate, descriptor=v.project.descriptor)
            for v in traversal.visits
        ]
        not_found = [
            NotFoundRecord(
                coordinate=n.coordinate,
                message=n.message,
                referrer=n.referrer,
                needs_change=needs_change(self._rule, n.coordinate),
            )
            for n in traversal.not_found
        ]
        releases = [
            ReleaseRecord(
                old=r.old,
                new=r.new,
                relation=r.relation,
                descriptor=r.project.descriptor,
                location_count=r.location_count,
            )
            for r in change_set.releases
        ]

        up_to_date = traversal.root_found and change_set.is_empty
        return ReleaseReport(
            requested=requested,
            root=root,
            visits=visits,
            not_found=not_found,
            releases=releases,
            unlocatable=change_set.unlocatable,
            changes=change_set.changes,
            truncated=traversal.truncated,
            up_to_date=up_to_date,
            summary=_summarize(root, traversal, change_set, up_to_date),
        )


def _summarize(root: Coordinate, traversal: TraversalResult, change_set: ChangeSet, up_to_date: bool) -> str:
    if not traversal.root_found:
        return f"Project {root} not found."
    if up_to_date:
        return f"{root}: project up to date."

    files = {c.location.descriptor for c in change_set.changes}
    parts = [
        f"Releasing {root}: {len(change_set.releases)} project(s) to change, "
        f"{len(change_set.changes)} change(s) across {len(files)} file(s)."
    ]
    if change_set.unlocatable:
        parts.append(f"{len(change_set.unlocatable)} project(s) need a change but their sources cannot be found.")
    if traversal.truncated:
        parts.append("Traversal stopped early at the project limit.")
    return " ".join(parts)


def analyze_directory(
    root: Path,
    coordinate: str,
    settings: Settings | None = None,
    rule: CoordinateRule | None = None,
) -> ReleaseReport:
    """Load every descriptor under *root* and analyse the release of *coordinate*.

    Raises
    ------
    DescriptorLoadError
        If *root* is not a directory.
    DuplicateProjectError
        If two descriptors declare the same coordinate.
    """
    settings = settings or load_settings()
    graph = build_project_graph(load_projects_from_directory(root, settings))
    analyzer = ReleaseAnalyzer(graph, GraphLocationResolver(graph), rule, settings=settings)
    return analyzer.analyze(coordinate)
