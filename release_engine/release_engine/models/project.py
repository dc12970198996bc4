"""Project descriptors, edit locations and changes.

A :class:`Project` is the in-memory form of one parsed descriptor file.  It
is frozen so that the same project can be collected into sets while a
release is being analysed; two projects are the same project only when
their coordinate, descriptor path and declarations all match.

A :class:`Location` points at one textual reference to a coordinate inside
a descriptor, and a :class:`Change` is the substitution required there.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from release_engine.models.coordinate import Coordinate


class LocationSection(str, Enum):
    """Descriptor section in which a coordinate is referenced."""

    PROJECT = "PROJECT"
    PARENT = "PARENT"
    DEPENDENCY = "DEPENDENCY"
    DEPENDENCY_MANAGEMENT = "DEPENDENCY_MANAGEMENT"
    PLUGIN = "PLUGIN"


class DeclaredReference(BaseModel):
    """A coordinate as declared inside a descriptor section."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    version_property: str | None = Field(
        default=None,
        description="Name of the ${property} the version was resolved from, if any.",
    )


class Project(BaseModel):
    """One project of the graph, backed by a descriptor file."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate = Field(..., description="The project's own coordinate.")
    descriptor: Path = Field(..., description="Path to the descriptor file (e.g. pom.xml).")
    parent: DeclaredReference | None = Field(default=None, description="Declared parent project.")
    dependencies: tuple[DeclaredReference, ...] = Field(
        default=(),
        description="Declared dependencies, in declaration order.",
    )
    managed_dependencies: tuple[DeclaredReference, ...] = Field(
        default=(),
        description="Entries of the dependencyManagement section.",
    )
    plugins: tuple[DeclaredReference, ...] = Field(
        default=(),
        description="Build plugins with an explicit version.",
    )
    declares_version: bool = Field(
        default=True,
        description="False when the version is inherited from the parent block.",
    )
    version_property: str | None = Field(
        default=None,
        description="Property the project's own version was resolved from, if any.",
    )

    @property
    def parent_coordinate(self) -> Coordinate | None:
        return self.parent.coordinate if self.parent is not None else None

    @property
    def dependency_coordinates(self) -> list[Coordinate]:
        return [ref.coordinate for ref in self.dependencies]

    def __str__(self) -> str:
        return str(self.coordinate)


class Location(BaseModel):
    """A single reference site to a coordinate inside a descriptor."""

    model_config = ConfigDict(frozen=True)

    project: Coordinate = Field(..., description="Project owning the descriptor.")
    descriptor: Path = Field(..., description="Descriptor file containing the reference.")
    section: LocationSection
    index: int = Field(
        default=0,
        ge=0,
        description="Position of the declaration within its section.",
    )
    referenced: Coordinate = Field(..., description="Coordinate referenced at this site.")
    version_property: str | None = None

    def __str__(self) -> str:
        where = f"{self.section.value.lower()}[{self.index}]"
        if self.version_property:
            where += f" via ${{{self.version_property}}}"
        return f"{self.project} {where}"


class Change(BaseModel):
    """One required text substitution at a :class:`Location`."""

    model_config = ConfigDict(frozen=True)

    location: Location
    old_value: str
    new_value: str
