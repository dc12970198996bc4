"""Unit tests for release_engine.models.coordinate."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from release_engine.models.coordinate import Coordinate, parse_coordinate


class TestParseCoordinate:
    def test_valid(self):
        c = parse_coordinate("com.acme:core:1.0-SNAPSHOT")
        assert c == Coordinate(group="com.acme", artifact="core", version="1.0-SNAPSHOT")

    def test_surrounding_whitespace_ignored(self):
        assert parse_coordinate("  com.acme:core:1.0\n") == Coordinate(group="com.acme", artifact="core", version="1.0")

    @pytest.mark.parametrize(
        "text",
        [
            "not-a-gav",
            "",
            "com.acme:core",
            "com.acme:core:1.0:jar",
            "com.acme::1.0",
            ":core:1.0",
            "com.acme:core:",
        ],
    )
    def test_malformed_returns_none(self, text):
        assert parse_coordinate(text) is None

    def test_non_string_returns_none(self):
        assert parse_coordinate(None) is None  # type: ignore[arg-type]


class TestCoordinate:
    def test_to_string(self):
        c = Coordinate(group="g", artifact="a", version="1")
        assert c.to_string() == "g:a:1"
        assert str(c) == "g:a:1"

    @pytest.mark.parametrize(
        "text",
        ["com.acme:core:1.0-SNAPSHOT", "org.example:lib-x:2.3.4", "a:b:c"],
    )
    def test_round_trip(self, text):
        c = parse_coordinate(text)
        assert c is not None
        assert parse_coordinate(str(c)) == c
        assert str(c) == text

    def test_structural_equality_and_hash(self):
        a = Coordinate(group="g", artifact="a", version="1")
        b = Coordinate(group="g", artifact="a", version="1")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_differs_on_any_field(self):
        base = Coordinate(group="g", artifact="a", version="1")
        assert base != Coordinate(group="h", artifact="a", version="1")
        assert base != Coordinate(group="g", artifact="b", version="1")
        assert base != Coordinate(group="g", artifact="a", version="2")

    def test_immutable(self):
        c = Coordinate(group="g", artifact="a", version="1")
        with pytest.raises(ValidationError):
            c.version = "2"  # type: ignore[misc]

    def test_empty_field_rejected(self):
        with pytest.raises(ValidationError):
            Coordinate(group="", artifact="a", version="1")

    def test_with_version(self):
        c = Coordinate(group="g", artifact="a", version="1-SNAPSHOT")
        assert c.with_version("1") == Coordinate(group="g", artifact="a", version="1")
        assert c.version == "1-SNAPSHOT"

    def test_sort_key(self):
        coords = [parse_coordinate(t) for t in ("b:a:1", "a:b:2", "a:b:1")]
        assert [str(c) for c in sorted(coords, key=Coordinate.sort_key)] == ["a:b:1", "a:b:2", "b:a:1"]
