"""Deferred version-set tasks.

Applying a release plan is the job of an external command that rewrites a
project's version on disk.  This module only packages *which* coordinates
such a command must be run for; callers decide whether and when to execute
the tasks with a :class:`VersionSetter` of their choosing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from release_engine.models.coordinate import Coordinate
from release_engine.release.change_set import ChangeSet


class VersionSetter(Protocol):
    """External command that moves a project to a new coordinate."""

    def set_version(self, coordinate: Coordinate) -> str:
        """Apply *coordinate* and return the command's output."""
        ...


@dataclass(frozen=True, slots=True)
class ChangeVersionTask:
    """Set one project's version to the released *coordinate*."""

    coordinate: Coordinate

    def execute(self, setter: VersionSetter) -> str:
        return setter.set_version(self.coordinate)

    def __str__(self) -> str:
        return f"set version {self.coordinate}"


def plan_version_tasks(change_set: ChangeSet) -> list[ChangeVersionTask]:
    """Return one task per released coordinate, in release order."""
    seen: set[ChangeVersionTask] = set()
    tasks: list[ChangeVersionTask] = []
    for release in change_set.releases:
        task = ChangeVersionTask(coordinate=release.new)
        if task not in seen:
            seen.add(task)
            tasks.append(task)
    return tasks


def run_version_tasks(tasks: Iterable[ChangeVersionTask], setter: VersionSetter) -> list[str]:
    """Execute *tasks* in order and collect each command's output.

    The first failing command propagates its exception; tasks after it are
    not run.
    """
    return [task.execute(setter) for task in tasks]
