"""Artifact coordinates (``group:artifact:version``).

A :class:`Coordinate` uniquely identifies one project or artifact in the
graph.  Coordinates are immutable and compare structurally, so they can be
used directly as graph node keys and set members.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Separator between the three coordinate fields in the string form.
COORDINATE_SEPARATOR = ":"


class Coordinate(BaseModel):
    """An immutable ``(group, artifact, version)`` triple."""

    model_config = ConfigDict(frozen=True)

    group: str = Field(..., min_length=1, description="Maven groupId.")
    artifact: str = Field(..., min_length=1, description="Maven artifactId.")
    version: str = Field(..., min_length=1, description="Project version, possibly with a qualifier.")

    def to_string(self) -> str:
        """Return the canonical ``group:artifact:version`` form."""
        return COORDINATE_SEPARATOR.join((self.group, self.artifact, self.version))

    def with_version(self, version: str) -> Coordinate:
        """Return a copy of this coordinate carrying *version*."""
        return Coordinate(group=self.group, artifact=self.artifact, version=version)

    def sort_key(self) -> tuple[str, str, str]:
        return (self.group, self.artifact, self.version)

    def __str__(self) -> str:
        return self.to_string()


def parse_coordinate(text: str) -> Coordinate | None:
    """Parse ``group:artifact:version`` into a :class:`Coordinate`.

    Surrounding whitespace is ignored.  The text must contain exactly three
    non-empty fields.

    Parameters
    ----------
    text:
        User or descriptor supplied coordinate string.

    Returns
    -------
    Coordinate | None
        The parsed coordinate, or ``None`` when *text* is not a coordinate.
        Malformed input never raises.
    """
    if not isinstance(text, str):
        return None

    parts = text.strip().split(COORDINATE_SEPARATOR)
    if len(parts) != 3 or any(not part for part in parts):
        return None

    group, artifact, version = parts
    return Coordinate(group=group, artifact=artifact, version=version)
