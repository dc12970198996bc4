"""Find the descriptor sites that reference a coordinate.

Changing a project's coordinate means editing its own declaration and every
place another descriptor points at it: ``<parent>`` blocks, dependencies,
``<dependencyManagement>`` entries and build plugins.  The resolver below
walks every loaded project and lists those sites.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from release_engine.graph.project_graph import ProjectGraph
from release_engine.models.coordinate import Coordinate
from release_engine.models.project import (
    DeclaredReference,
    Location,
    LocationSection,
    Project,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class LocationResolver(Protocol):
    """Source of edit locations for a coordinate."""

    def locations_for(self, coordinate: Coordinate) -> list[Location]:
        """Return every distinct site referencing *coordinate*, in a stable order."""
        ...


def _section_locations(
    project: Project,
    section: LocationSection,
    references: Iterable[DeclaredReference],
    coordinate: Coordinate,
) -> list[Location]:
    return [
        Location(
            project=project.coordinate,
            descriptor=project.descriptor,
            section=section,
            index=index,
            referenced=ref.coordinate,
            version_property=ref.version_property,
        )
        for index, ref in enumerate(references)
        if ref.coordinate == coordinate
    ]


def project_locations(project: Project, coordinate: Coordinate) -> list[Location]:
    """Return the sites inside *project*'s descriptor referencing *coordinate*.

    Sites are ordered by section (own declaration, parent, dependencies,
    managed dependencies, plugins) and then by declaration position.
    """
    locations: list[Location] = []

    # An inherited version has no own declaration; the parent site covers it.
    if project.coordinate == coordinate and project.declares_version:
        locations.append(
            Location(
                project=project.coordinate,
                descriptor=project.descriptor,
                section=LocationSection.PROJECT,
                referenced=coordinate,
                version_property=project.version_property,
            )
        )

    if project.parent is not None:
        locations.extend(_section_locations(project, LocationSection.PARENT, [project.parent], coordinate))

    locations.extend(_section_locations(project, LocationSection.DEPENDENCY, project.dependencies, coordinate))
    locations.extend(
        _section_locations(
            project,
            LocationSection.DEPENDENCY_MANAGEMENT,
            project.managed_dependencies,
            coordinate,
        )
    )
    locations.extend(_section_locations(project, LocationSection.PLUGIN, project.plugins, coordinate))
    return locations


class GraphLocationResolver:
    """:class:`LocationResolver` over every project of a :class:`ProjectGraph`.

    Projects are scanned in graph insertion order, so the result order is
    stable for a given set of loaded descriptors.
    """

    def __init__(self, graph: ProjectGraph) -> None:
        self._graph = graph

    def locations_for(self, coordinate: Coordinate) -> list[Location]:
        seen: set[Location] = set()
        locations: list[Location] = []
        for project in self._graph.projects():
            for location in project_locations(project, coordinate):
                if location in seen:
                    continue
                seen.add(location)
                locations.append(location)

        logger.debug("Found %d location(s) referencing %s", len(locations), coordinate)
        return locations
