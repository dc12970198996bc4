"""Domain models for the release engine."""

from release_engine.models.coordinate import Coordinate, parse_coordinate
from release_engine.models.project import (
    Change,
    DeclaredReference,
    Location,
    LocationSection,
    Project,
)

__all__ = [
    "Change",
    "Coordinate",
    "DeclaredReference",
    "Location",
    "LocationSection",
    "Project",
    "parse_coordinate",
]
