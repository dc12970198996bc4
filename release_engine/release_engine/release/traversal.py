"""Walk the project graph outward from the project being released.

Starting at a root coordinate, the walk follows two kinds of edge from every
project it reaches:

1. the ``<parent>`` edge (:attr:`RelationKind.HIERARCHICAL`), explored first
   and to completion;
2. each dependency edge (:attr:`RelationKind.TRANSITIVE`), in declaration
   order.

The order is a depth-first pre-order identical to a recursive walk, but an
explicit stack is used so deep chains cannot exhaust the interpreter stack.
A project is entered at most once: later edges reaching it (diamonds,
cycles) are skipped, so each reachable project yields exactly one visit
event carrying the first relation through which it was found.  Missing
projects are reported per edge and never stop the walk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from release_engine.graph.project_graph import ProjectGraphAccessor
from release_engine.models.coordinate import Coordinate
from release_engine.models.project import Project
from release_engine.profiling import profile_operation

logger = logging.getLogger(__name__)

ROOT_NOT_FOUND_MESSAGE = "project not found"


class RelationKind(str, Enum):
    """How a visited project was reached."""

    ROOT = "ROOT"
    HIERARCHICAL = "HIERARCHICAL"
    TRANSITIVE = "TRANSITIVE"


class ReleaseVisitor(Protocol):
    """Receives traversal events synchronously, in walk order."""

    def project(self, kind: RelationKind, project: Project) -> None: ...

    def project_not_found(self, coordinate: Coordinate, message: str) -> None: ...


# ---------------------------------------------------------------------------
# Events and result
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProjectVisit:
    """A project reached for the first time."""

    kind: RelationKind
    project: Project


@dataclass(frozen=True, slots=True)
class ProjectNotFound:
    """An edge pointing at a coordinate with no loaded project."""

    coordinate: Coordinate
    message: str
    referrer: Coordinate | None = None


TraversalEvent = ProjectVisit | ProjectNotFound


@dataclass
class TraversalResult:
    """Ordered log of everything one traversal observed."""

    root: Coordinate
    events: list[TraversalEvent] = field(default_factory=list)
    truncated: bool = False

    @property
    def visits(self) -> list[ProjectVisit]:
        return [e for e in self.events if isinstance(e, ProjectVisit)]

    @property
    def not_found(self) -> list[ProjectNotFound]:
        return [e for e in self.events if isinstance(e, ProjectNotFound)]

    @property
    def visited_coordinates(self) -> list[Coordinate]:
        return [v.project.coordinate for v in self.visits]

    @property
    def root_found(self) -> bool:
        return any(v.kind == RelationKind.ROOT for v in self.visits)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Edge:
    kind: RelationKind
    target: Coordinate
    referrer: Project


def _child_edges(accessor: ProjectGraphAccessor, project: Project, follow_parents: bool) -> list[_Edge]:
    """Return the outgoing edges of *project* in exploration order."""
    edges: list[_Edge] = []
    if follow_parents:
        parent = accessor.parent_of(project.coordinate)
        if parent is not None:
            edges.append(_Edge(RelationKind.HIERARCHICAL, parent, project))
    for dependency in accessor.dependencies_of(project.coordinate):
        edges.append(_Edge(RelationKind.TRANSITIVE, dependency, project))
    return edges


def _missing_message(edge: _Edge) -> str:
    if edge.kind == RelationKind.HIERARCHICAL:
        return f"parent missing for project {edge.referrer.coordinate}"
    return f"dependent project missing {edge.referrer.coordinate}"


@profile_operation("release.traverse")
def traverse_release(
    accessor: ProjectGraphAccessor,
    root: Coordinate,
    visitor: ReleaseVisitor | None = None,
    *,
    follow_parents: bool = True,
    max_projects: int | None = None,
) -> TraversalResult:
    """Walk every project reachable from *root* through parent and dependency edges.

    Parameters
    ----------
    accessor:
        Read-only graph queries.
    root:
        Coordinate of the project being released.
    visitor:
        Optional callback receiver.  Every event appended to the result is
        also passed to the visitor, in the same order.
    follow_parents:
        When ``False``, only dependency edges are walked.
    max_projects:
        Upper bound on visited projects.  Reaching it stops the walk and
        sets :attr:`TraversalResult.truncated`.

    Returns
    -------
    TraversalResult
        The ordered event log.  If the root itself cannot be found the log
        holds a single :class:`ProjectNotFound` event.
    """
    result = TraversalResult(root=root)

    def emit(event: TraversalEvent) -> None:
        result.events.append(event)
        if visitor is None:
            return
        if isinstance(event, ProjectVisit):
            visitor.project(event.kind, event.project)
        else:
            visitor.project_not_found(event.coordinate, event.message)

    root_project = accessor.find_project(root)
    if root_project is None:
        logger.info("Release root %s not found in the project graph", root)
        emit(ProjectNotFound(coordinate=root, message=ROOT_NOT_FOUND_MESSAGE))
        return result

    entered: set[Coordinate] = {root_project.coordinate}
    emit(ProjectVisit(kind=RelationKind.ROOT, project=root_project))

    # Edges are pushed in reverse so they pop in exploration order.
    stack: list[_Edge] = list(reversed(_child_edges(accessor, root_project, follow_parents)))

    while stack:
        edge = stack.pop()
        project = accessor.find_project(edge.target)
        if project is None:
            logger.debug("%s edge %s -> %s: not found", edge.kind.value, edge.referrer.coordinate, edge.target)
            emit(
                ProjectNotFound(
                    coordinate=edge.target,
                    message=_missing_message(edge),
                    referrer=edge.referrer.coordinate,
                )
            )
            continue

        if project.coordinate in entered:
            logger.debug("Already visited %s (via %s)", project.coordinate, edge.referrer.coordinate)
            continue

        if max_projects is not None and len(entered) >= max_projects:
            logger.warning(
                "Stopping release traversal from %s after %d project(s); remaining edges skipped",
                root,
                len(entered),
            )
            result.truncated = True
            break

        entered.add(project.coordinate)
        emit(ProjectVisit(kind=edge.kind, project=project))
        stack.extend(reversed(_child_edges(accessor, project, follow_parents)))

    logger.info(
        "Traversal from %s visited %d project(s), %d missing reference(s)",
        root,
        len(entered),
        len(result.not_found),
    )
    return result
