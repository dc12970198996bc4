"""Turn traversal events into the ordered list of descriptor edits.

:class:`ChangeSetBuilder` is a :class:`~release_engine.release.traversal.ReleaseVisitor`:
it collects, during the walk, the projects whose coordinate the release rule
would move, and the missing projects that would need a move but cannot be
edited.  Once the walk is over, :meth:`ChangeSetBuilder.build` asks a
:class:`~release_engine.graph.locations.LocationResolver` where each of
those coordinates is referenced and emits one :class:`Change` per site.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from release_engine.graph.locations import LocationResolver
from release_engine.models.coordinate import Coordinate
from release_engine.models.project import Change, Location, Project
from release_engine.profiling import profile_operation
from release_engine.release.traversal import RelationKind
from release_engine.rules.release_rule import CoordinateRule, needs_change, release_rule

logger = logging.getLogger(__name__)


class ProjectRelease(BaseModel):
    """A visited project whose coordinate must change."""

    project: Project
    relation: RelationKind = Field(..., description="First relation through which the project was reached.")
    old: Coordinate
    new: Coordinate
    location_count: int = Field(default=0, description="Number of changes emitted for this project.")


class UnlocatableProject(BaseModel):
    """A coordinate that needs a change but has no loaded descriptor."""

    coordinate: Coordinate
    target: Coordinate = Field(..., description="Coordinate the rule would move it to.")
    message: str = Field(default="", description="Not-found message of the first occurrence.")


class ChangeSet(BaseModel):
    """Everything a release has to edit, in a stable order."""

    releases: list[ProjectRelease] = Field(default_factory=list)
    changes: list[Change] = Field(default_factory=list)
    unlocatable: list[UnlocatableProject] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.releases and not self.unlocatable


class ChangeSetBuilder:
    """Collect projects to release while a traversal runs, then build changes.

    Parameters
    ----------
    rule:
        Transformation deciding whether, and where to, a coordinate moves.
    """

    def __init__(self, rule: CoordinateRule = release_rule) -> None:
        self._rule = rule
        # Insertion-ordered set of projects, remembering the first relation.
        self._projects: dict[Project, RelationKind] = {}
        self._unlocatable: dict[Coordinate, UnlocatableProject] = {}

    # -- ReleaseVisitor -------------------------------------------------

    def project(self, kind: RelationKind, project: Project) -> None:
        if not needs_change(self._rule, project.coordinate):
            return
        self._projects.setdefault(project, kind)

    def project_not_found(self, coordinate: Coordinate, message: str) -> None:
        if not needs_change(self._rule, coordinate):
            return
        if coordinate in self._unlocatable:
            return
        logger.warning("Project %s should be changed but its descriptor cannot be found", coordinate)
        self._unlocatable[coordinate] = UnlocatableProject(
            coordinate=coordinate,
            target=self._rule(coordinate),
            message=message,
        )

    # -- Results --------------------------------------------------------

    @property
    def projects(self) -> list[Project]:
        """Projects needing a change, in the order they were first visited."""
        return list(self._projects)

    @property
    def unlocatable(self) -> list[UnlocatableProject]:
        return list(self._unlocatable.values())

    @profile_operation("release.change_set")
    def build(self, resolver: LocationResolver) -> ChangeSet:
        """Resolve edit locations for every collected project.

        Changes follow project visit order, then resolver order.  A
        ``(location, new_value)`` pair is emitted at most once even if two
        projects resolve to the same site.
        """
        releases: list[ProjectRelease] = []
        changes: list[Change] = []
        emitted: set[tuple[Location, str]] = set()

        for project, relation in self._projects.items():
            old = project.coordinate
            new = self._rule(old)
            old_value, new_value = str(old), str(new)

            count = 0
            for location in resolver.locations_for(old):
                key = (location, new_value)
                if key in emitted:
                    continue
                emitted.add(key)
                changes.append(Change(location=location, old_value=old_value, new_value=new_value))
                count += 1

            if count == 0:
                logger.info("No descriptor references %s; nothing to edit", old)

            releases.append(
                ProjectRelease(
                    project=project,
                    relation=relation,
                    old=old,
                    new=new,
                    location_count=count,
                )
            )

        logger.info(
            "Change set: %d project(s) to release, %d change(s), %d unlocatable",
            len(releases),
            len(changes),
            len(self._unlocatable),
        )
        return ChangeSet(releases=releases, changes=changes, unlocatable=self.unlocatable)
