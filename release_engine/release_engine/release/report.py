"""Release report models and deterministic serialization.

The report is the structured output of one release analysis: the visit and
not-found streams of the traversal, the projects to release, the projects
that cannot be edited and the full list of changes.  Rendering is left to
the caller (see the CLI's display module); :func:`serialize_report` gives a
byte-stable JSON form for pipelines.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from release_engine.models.coordinate import Coordinate
from release_engine.models.project import Change
from release_engine.release.change_set import UnlocatableProject
from release_engine.release.traversal import RelationKind


class VisitRecord(BaseModel):
    """A project reached by the traversal."""

    kind: RelationKind
    coordinate: Coordinate
    descriptor: Path


class NotFoundRecord(BaseModel):
    """A reference to a coordinate with no loaded descriptor."""

    coordinate: Coordinate
    message: str
    referrer: Coordinate | None = None
    needs_change: bool = Field(default=False, description="Whether the release rule would move this coordinate.")


class ReleaseRecord(BaseModel):
    """A project whose coordinate changes with the release."""

    old: Coordinate
    new: Coordinate
    relation: RelationKind
    descriptor: Path
    location_count: int = 0


class ReleaseReport(BaseModel):
    """Complete outcome of analysing the release of one coordinate."""

    requested: str = Field(..., description="Coordinate text as supplied by the caller.")
    root: Coordinate | None = Field(default=None, description="Parsed root coordinate.")
    error: str | None = Field(default=None, description="User-facing input error; no traversal was run.")
    visits: list[VisitRecord] = Field(default_factory=list)
    not_found: list[NotFoundRecord] = Field(default_factory=list)
    releases: list[ReleaseRecord] = Field(default_factory=list)
    unlocatable: list[UnlocatableProject] = Field(default_factory=list)
    changes: list[Change] = Field(default_factory=list)
    truncated: bool = Field(default=False, description="Traversal stopped at the project cap.")
    up_to_date: bool = Field(default=False, description="Nothing reachable from the root needs a change.")
    summary: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def serialize_report(report: ReleaseReport) -> str:
    """Serialize a report to JSON with sorted keys and 2-space indentation."""
    raw = report.model_dump(mode="json")
    return json.dumps(raw, indent=2, sort_keys=True, ensure_ascii=False)


def deserialize_report(json_str: str) -> ReleaseReport:
    """Load a report produced by :func:`serialize_report`.

    Raises
    ------
    pydantic.ValidationError
        If the JSON does not match the report schema.
    """
    return ReleaseReport.model_validate_json(json_str)
