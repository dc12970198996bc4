"""Coordinate transformation rules.

A rule maps a coordinate to the coordinate it must become once released.
Returning the input unchanged means "no change needed".  Rules are plain
callables so alternative release policies can be passed to the traversal
and change-set builder without subclassing anything.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from release_engine.models.coordinate import Coordinate

if TYPE_CHECKING:
    from release_engine.config import Settings

CoordinateRule = Callable[[Coordinate], Coordinate]

SNAPSHOT_QUALIFIER = "-SNAPSHOT"


def strip_qualifier_rule(qualifier: str) -> CoordinateRule:
    """Build a rule that removes a trailing version *qualifier*.

    Stacked qualifiers (``1.0-SNAPSHOT-SNAPSHOT``) are all removed so that
    applying the rule twice gives the same result as applying it once.  A
    version made only of the qualifier is left untouched, since stripping it
    would leave an empty version.

    Parameters
    ----------
    qualifier:
        Literal suffix to remove, e.g. ``"-SNAPSHOT"``.

    Raises
    ------
    ValueError
        If *qualifier* is empty.
    """
    if not qualifier:
        raise ValueError("qualifier must not be empty")

    def rule(coordinate: Coordinate) -> Coordinate:
        version = coordinate.version
        while version.endswith(qualifier) and len(version) > len(qualifier):
            version = version[: -len(qualifier)]
        if version == coordinate.version or version == qualifier:
            return coordinate
        return coordinate.with_version(version)

    rule.__name__ = f"strip_{qualifier.strip('-').lower() or 'qualifier'}"
    rule.__doc__ = f"Remove the trailing '{qualifier}' qualifier from the version."
    return rule


release_rule: CoordinateRule = strip_qualifier_rule(SNAPSHOT_QUALIFIER)


def needs_change(rule: CoordinateRule, coordinate: Coordinate) -> bool:
    """Return ``True`` when *rule* would move *coordinate* somewhere else."""
    return rule(coordinate) != coordinate


def rule_from_settings(settings: Settings) -> CoordinateRule:
    """Return the strip rule for the configured release qualifier."""
    if settings.release_qualifier == SNAPSHOT_QUALIFIER:
        return release_rule
    return strip_qualifier_rule(settings.release_qualifier)
