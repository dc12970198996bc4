"""Unit tests for release_engine.release.tasks."""

from __future__ import annotations

from pathlib import Path

import pytest

from release_engine.models.coordinate import Coordinate, parse_coordinate
from release_engine.models.project import Project
from release_engine.release.change_set import ChangeSet, ProjectRelease
from release_engine.release.tasks import ChangeVersionTask, plan_version_tasks, run_version_tasks
from release_engine.release.traversal import RelationKind


def _gav(text: str) -> Coordinate:
    c = parse_coordinate(text)
    assert c is not None
    return c


def _release(old: str, new: str) -> ProjectRelease:
    coordinate = _gav(old)
    return ProjectRelease(
        project=Project(coordinate=coordinate, descriptor=Path(f"/ws/{coordinate.artifact}/pom.xml")),
        relation=RelationKind.TRANSITIVE,
        old=coordinate,
        new=_gav(new),
    )


class _FakeSetter:
    def __init__(self, fail_on: str | None = None):
        self.applied: list[Coordinate] = []
        self.fail_on = fail_on

    def set_version(self, coordinate):
        if coordinate.artifact == self.fail_on:
            raise RuntimeError(f"cannot set {coordinate}")
        self.applied.append(coordinate)
        return f"ok {coordinate}"


class TestPlanVersionTasks:
    def test_one_task_per_release_in_order(self):
        change_set = ChangeSet(
            releases=[_release("g:b:1-SNAPSHOT", "g:b:1"), _release("g:a:2-SNAPSHOT", "g:a:2")],
        )
        tasks = plan_version_tasks(change_set)
        assert [t.coordinate for t in tasks] == [_gav("g:b:1"), _gav("g:a:2")]

    def test_duplicate_targets_collapsed(self):
        change_set = ChangeSet(
            releases=[_release("g:a:1-SNAPSHOT", "g:a:1"), _release("g:a:1-SNAPSHOT-SNAPSHOT", "g:a:1")],
        )
        assert len(plan_version_tasks(change_set)) == 1

    def test_empty(self):
        assert plan_version_tasks(ChangeSet()) == []

    def test_task_str(self):
        assert str(ChangeVersionTask(coordinate=_gav("g:a:1"))) == "set version g:a:1"


class TestRunVersionTasks:
    def test_runs_in_order_and_collects_output(self):
        setter = _FakeSetter()
        tasks = [ChangeVersionTask(_gav("g:a:1")), ChangeVersionTask(_gav("g:b:1"))]
        assert run_version_tasks(tasks, setter) == ["ok g:a:1", "ok g:b:1"]
        assert setter.applied == [_gav("g:a:1"), _gav("g:b:1")]

    def test_failure_stops_remaining_tasks(self):
        setter = _FakeSetter(fail_on="b")
        tasks = [ChangeVersionTask(_gav(f"g:{a}:1")) for a in ("a", "b", "c")]
        with pytest.raises(RuntimeError, match="cannot set g:b:1"):
            run_version_tasks(tasks, setter)
        assert setter.applied == [_gav("g:a:1")]
