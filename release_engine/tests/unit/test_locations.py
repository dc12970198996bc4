"""Unit tests for release_engine.graph.locations."""

from __future__ import annotations

from pathlib import Path

from release_engine.graph.locations import (
    GraphLocationResolver,
    LocationResolver,
    project_locations,
)
from release_engine.graph.project_graph import build_project_graph
from release_engine.models.coordinate import Coordinate, parse_coordinate
from release_engine.models.project import DeclaredReference, Location, LocationSection, Project


def _gav(text: str) -> Coordinate:
    c = parse_coordinate(text)
    assert c is not None
    return c


def _ref(text: str, prop: str | None = None) -> DeclaredReference:
    return DeclaredReference(coordinate=_gav(text), version_property=prop)


def _project(gav: str, **kwargs) -> Project:
    coordinate = _gav(gav)
    return Project(coordinate=coordinate, descriptor=Path(f"/ws/{coordinate.artifact}/pom.xml"), **kwargs)


LIB = "com.acme:lib:1.0-SNAPSHOT"


class TestProjectLocations:
    def test_own_declaration(self):
        project = _project(LIB, version_property="revision")
        [location] = project_locations(project, _gav(LIB))
        assert location.section == LocationSection.PROJECT
        assert location.project == _gav(LIB)
        assert location.version_property == "revision"

    def test_inherited_version_has_no_own_site(self):
        project = _project(LIB, declares_version=False)
        assert project_locations(project, _gav(LIB)) == []

    def test_all_sections_in_order(self):
        project = _project(
            "com.acme:app:1",
            parent=_ref(LIB),
            dependencies=(_ref("x:y:1"), _ref(LIB, "lib.version")),
            managed_dependencies=(_ref(LIB),),
            plugins=(_ref(LIB),),
        )
        locations = project_locations(project, _gav(LIB))
        assert [(l.section, l.index) for l in locations] == [
            (LocationSection.PARENT, 0),
            (LocationSection.DEPENDENCY, 1),
            (LocationSection.DEPENDENCY_MANAGEMENT, 0),
            (LocationSection.PLUGIN, 0),
        ]
        assert locations[1].version_property == "lib.version"
        assert all(l.descriptor == Path("/ws/app/pom.xml") for l in locations)

    def test_unrelated_coordinate(self):
        project = _project("com.acme:app:1", dependencies=(_ref("x:y:1"),))
        assert project_locations(project, _gav(LIB)) == []

    def test_other_version_does_not_match(self):
        project = _project("com.acme:app:1", dependencies=(_ref("com.acme:lib:0.9"),))
        assert project_locations(project, _gav(LIB)) == []


class TestGraphLocationResolver:
    def test_protocol(self):
        assert isinstance(GraphLocationResolver(build_project_graph([])), LocationResolver)

    def test_walks_every_project_in_graph_order(self):
        graph = build_project_graph(
            [
                _project(LIB),
                _project("com.acme:b:1", dependencies=(_ref(LIB),)),
                _project("com.acme:a:1", parent=_ref(LIB)),
            ]
        )
        locations = GraphLocationResolver(graph).locations_for(_gav(LIB))
        assert [(str(l.project), l.section) for l in locations] == [
            (LIB, LocationSection.PROJECT),
            ("com.acme:b:1", LocationSection.DEPENDENCY),
            ("com.acme:a:1", LocationSection.PARENT),
        ]

    def test_repeated_declarations_are_distinct_sites(self):
        graph = build_project_graph([_project("com.acme:app:1", dependencies=(_ref(LIB), _ref(LIB)))])
        locations = GraphLocationResolver(graph).locations_for(_gav(LIB))
        assert len(locations) == 2
        assert len(set(locations)) == 2

    def test_no_locations(self):
        graph = build_project_graph([_project("com.acme:app:1")])
        assert GraphLocationResolver(graph).locations_for(_gav(LIB)) == []


class TestLocationModel:
    def test_structural_equality(self):
        kwargs = dict(
            project=_gav("g:a:1"),
            descriptor=Path("/ws/a/pom.xml"),
            section=LocationSection.DEPENDENCY,
            index=2,
            referenced=_gav(LIB),
        )
        assert Location(**kwargs) == Location(**kwargs)
        assert hash(Location(**kwargs)) == hash(Location(**kwargs))

    def test_str(self):
        location = Location(
            project=_gav("g:a:1"),
            descriptor=Path("/ws/a/pom.xml"),
            section=LocationSection.DEPENDENCY,
            index=2,
            referenced=_gav(LIB),
            version_property="lib.version",
        )
        assert str(location) == "g:a:1 dependency[2] via ${lib.version}"
