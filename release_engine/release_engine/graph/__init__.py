"""Project graph construction, queries and location resolution."""

from release_engine.graph.locations import (
    GraphLocationResolver,
    LocationResolver,
    project_locations,
)
from release_engine.graph.project_graph import (
    DuplicateProjectError,
    ProjectGraph,
    ProjectGraphAccessor,
    build_project_graph,
)

__all__ = [
    "DuplicateProjectError",
    "GraphLocationResolver",
    "LocationResolver",
    "ProjectGraph",
    "ProjectGraphAccessor",
    "build_project_graph",
    "project_locations",
]
