"""Project graph construction and read-only queries using NetworkX.

The graph stores one node per :class:`~release_engine.models.Coordinate`
seen in the loaded descriptors.  Nodes for coordinates that are referenced
but have no loaded descriptor carry ``project=None`` so that traversals can
report them as missing.

Edges point **from** a project **to** what it relies on and are keyed by
relation:

* ``"parent"`` -- the ``<parent>`` declaration (configuration inheritance).
* ``"dependency"`` -- a declared dependency.  The edge's ``order`` attribute
  records the declaration position so that queries return dependencies in
  the order the descriptor lists them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

import networkx as nx

from release_engine.models.coordinate import Coordinate
from release_engine.models.project import Project
from release_engine.profiling import profile_operation

logger = logging.getLogger(__name__)

PARENT_EDGE = "parent"
DEPENDENCY_EDGE = "dependency"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DuplicateProjectError(Exception):
    """Raised when two different descriptors declare the same coordinate.

    Attributes
    ----------
    coordinate:
        The coordinate claimed twice.
    descriptors:
        The descriptor paths of both claimants.
    """

    def __init__(self, coordinate: Coordinate, first: Project, second: Project) -> None:
        self.coordinate = coordinate
        self.descriptors = [first.descriptor, second.descriptor]
        super().__init__(
            f"Coordinate {coordinate} is declared by both '{first.descriptor}' and '{second.descriptor}'"
        )


# ---------------------------------------------------------------------------
# Accessor interface
# ---------------------------------------------------------------------------


@runtime_checkable
class ProjectGraphAccessor(Protocol):
    """Read-only view of the project graph consumed by the release traversal."""

    def find_project(self, coordinate: Coordinate) -> Project | None:
        """Return the project declaring *coordinate*, if it was loaded."""
        ...

    def parent_of(self, coordinate: Coordinate) -> Coordinate | None:
        """Return the parent coordinate of *coordinate*, if it declares one."""
        ...

    def dependencies_of(self, coordinate: Coordinate) -> list[Coordinate]:
        """Return the dependency coordinates of *coordinate* in declaration order."""
        ...


# ---------------------------------------------------------------------------
# In-memory graph
# ---------------------------------------------------------------------------


class ProjectGraph:
    """NetworkX-backed implementation of :class:`ProjectGraphAccessor`.

    Parameters
    ----------
    graph:
        A ``MultiDiGraph`` laid out as described in the module docstring.
        Use :func:`build_project_graph` rather than building one by hand.
    """

    def __init__(self, graph: nx.MultiDiGraph) -> None:
        self._graph = graph

    @property
    def graph(self) -> nx.MultiDiGraph:
        return self._graph

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._graph

    def __len__(self) -> int:
        return sum(1 for _ in self.projects())

    # -- ProjectGraphAccessor -------------------------------------------

    def find_project(self, coordinate: Coordinate) -> Project | None:
        if coordinate not in self._graph:
            return None
        return self._graph.nodes[coordinate].get("project")

    def parent_of(self, coordinate: Coordinate) -> Coordinate | None:
        if coordinate not in self._graph:
            return None
        for _, target, key in self._graph.out_edges(coordinate, keys=True):
            if key == PARENT_EDGE:
                return target
        return None

    def dependencies_of(self, coordinate: Coordinate) -> list[Coordinate]:
        if coordinate not in self._graph:
            return []
        edges = [
            (data["order"], target)
            for _, target, key, data in self._graph.out_edges(coordinate, keys=True, data=True)
            if key == DEPENDENCY_EDGE
        ]
        return [target for _, target in sorted(edges, key=lambda e: e[0])]

    # -- Additional queries ---------------------------------------------

    def projects(self) -> list[Project]:
        """Return every loaded project in insertion order."""
        return [data["project"] for _, data in self._graph.nodes(data=True) if data.get("project") is not None]

    def dependents_of(self, coordinate: Coordinate) -> list[Coordinate]:
        """Return coordinates that declare *coordinate* as parent or dependency.

        The result is sorted for deterministic display.
        """
        if coordinate not in self._graph:
            return []
        return sorted(set(self._graph.predecessors(coordinate)), key=Coordinate.sort_key)

    def missing_references(self) -> list[Coordinate]:
        """Return referenced coordinates for which no descriptor was loaded."""
        missing = [node for node, data in self._graph.nodes(data=True) if data.get("project") is None]
        return sorted(missing, key=Coordinate.sort_key)

    def find_cycles(self) -> list[list[Coordinate]]:
        """Return every elementary cycle through parent or dependency edges."""
        simple = nx.DiGraph(self._graph)
        return [list(cycle) for cycle in nx.simple_cycles(simple)]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


@profile_operation("graph.build")
def build_project_graph(projects: Iterable[Project]) -> ProjectGraph:
    """Build a :class:`ProjectGraph` from parsed projects.

    Every project becomes a node keyed by its coordinate, with the full
    :class:`Project` stored under node key ``"project"``.  Parent and
    dependency references become edges; references to coordinates that no
    project declares create placeholder nodes with ``project=None``.

    Parameters
    ----------
    projects:
        Parsed projects.  Their order fixes the order of
        :meth:`ProjectGraph.projects`.

    Returns
    -------
    ProjectGraph

    Raises
    ------
    DuplicateProjectError
        If two different projects declare the same coordinate.
    """
    graph = nx.MultiDiGraph()
    loaded: list[Project] = []

    # Add every project first so that edge targets already carry their
    # project when they are loaded.
    for project in projects:
        existing = graph.nodes[project.coordinate].get("project") if project.coordinate in graph else None
        if existing is not None:
            if existing == project:
                continue
            raise DuplicateProjectError(project.coordinate, existing, project)
        graph.add_node(project.coordinate, project=project)
        loaded.append(project)

    for project in loaded:
        source = project.coordinate
        parent = project.parent_coordinate
        if parent is not None and parent != source:
            if parent not in graph:
                graph.add_node(parent, project=None)
            graph.add_edge(source, parent, key=PARENT_EDGE)

        order = 0
        for dependency in project.dependency_coordinates:
            if dependency == source or graph.has_edge(source, dependency, key=DEPENDENCY_EDGE):
                continue
            if dependency not in graph:
                graph.add_node(dependency, project=None)
            graph.add_edge(source, dependency, key=DEPENDENCY_EDGE, order=order)
            order += 1

    logger.info(
        "Built project graph with %d project(s) and %d edge(s).",
        len(loaded),
        graph.number_of_edges(),
    )
    return ProjectGraph(graph)
