"""Release rules deciding which coordinates must change."""

from release_engine.rules.release_rule import (
    SNAPSHOT_QUALIFIER,
    CoordinateRule,
    needs_change,
    release_rule,
    rule_from_settings,
    strip_qualifier_rule,
)

__all__ = [
    "SNAPSHOT_QUALIFIER",
    "CoordinateRule",
    "needs_change",
    "release_rule",
    "rule_from_settings",
    "strip_qualifier_rule",
]
