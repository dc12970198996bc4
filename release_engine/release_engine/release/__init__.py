"""Release-impact traversal, change-set building and reporting.

All analysis is read-only.  The traversal walks parent and dependency
edges from the project being released; the change-set builder turns what
it saw into an ordered list of descriptor edits.
"""

from __future__ import annotations

from release_engine.release.analyzer import (
    MALFORMED_COORDINATE_ERROR,
    ReleaseAnalyzer,
    analyze_directory,
)
from release_engine.release.change_set import (
    ChangeSet,
    ChangeSetBuilder,
    ProjectRelease,
    UnlocatableProject,
)
from release_engine.release.report import (
    NotFoundRecord,
    ReleaseRecord,
    ReleaseReport,
    VisitRecord,
    deserialize_report,
    serialize_report,
)
from release_engine.release.tasks import (
    ChangeVersionTask,
    VersionSetter,
    plan_version_tasks,
    run_version_tasks,
)
from release_engine.release.traversal import (
    ProjectNotFound,
    ProjectVisit,
    RelationKind,
    ReleaseVisitor,
    TraversalResult,
    traverse_release,
)

__all__ = [
    "MALFORMED_COORDINATE_ERROR",
    "ChangeSet",
    "ChangeSetBuilder",
    "ChangeVersionTask",
    "NotFoundRecord",
    "ProjectNotFound",
    "ProjectRelease",
    "ProjectVisit",
    "RelationKind",
    "ReleaseAnalyzer",
    "ReleaseRecord",
    "ReleaseReport",
    "ReleaseVisitor",
    "TraversalResult",
    "UnlocatableProject",
    "VersionSetter",
    "VisitRecord",
    "analyze_directory",
    "deserialize_report",
    "plan_version_tasks",
    "run_version_tasks",
    "serialize_report",
    "traverse_release",
]
