"""Load Maven ``pom.xml`` descriptors into :class:`Project` objects.

Only the parts of a POM that matter for release analysis are read: the
project's own coordinate, its ``<parent>``, declared dependencies,
``<dependencyManagement>`` entries and build plugins.  ``${...}``
placeholders are resolved against ``<properties>`` and the usual
``project.*`` / ``project.parent.*`` built-ins so that a dependency declared
with ``${project.version}`` still matches the coordinate it points at.

Typical usage::

    projects = load_projects_from_directory(Path("workspace/"))
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from release_engine.config import Settings, load_settings
from release_engine.models.coordinate import Coordinate
from release_engine.models.project import DeclaredReference, Project

logger = logging.getLogger(__name__)

# Plugins declared without a groupId belong to this group.
DEFAULT_PLUGIN_GROUP = "org.apache.maven.plugins"

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")

# Placeholder chains longer than this are treated as unresolvable.
_MAX_RESOLUTION_DEPTH = 10


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DescriptorParseError(Exception):
    """Raised when a descriptor cannot be parsed into a :class:`Project`."""


class DescriptorLoadError(Exception):
    """Raised when the descriptor search root is unusable."""


# ---------------------------------------------------------------------------
# XML helpers
# ---------------------------------------------------------------------------


def _local(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tag names."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element | None, name: str) -> ET.Element | None:
    if element is None:
        return None
    for child in element:
        if isinstance(child.tag, str) and _local(child.tag) == name:
            return child
    return None


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if isinstance(child.tag, str) and _local(child.tag) == name]


def _path(element: ET.Element | None, *names: str) -> ET.Element | None:
    for name in names:
        element = _child(element, name)
    return element


def _text(element: ET.Element | None, name: str) -> str | None:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


# ---------------------------------------------------------------------------
# Property resolution
# ---------------------------------------------------------------------------


def _resolve(value: str, properties: dict[str, str]) -> tuple[str, str | None]:
    """Substitute ``${name}`` placeholders in *value*.

    Returns
    -------
    tuple[str, str | None]
        The resolved text and, when *value* is a single placeholder, the
        name of that property (the place where the value is really defined).
        Unknown placeholders are left verbatim.
    """
    whole = _PLACEHOLDER.fullmatch(value)
    property_name = whole.group(1) if whole else None

    resolved = value
    for _ in range(_MAX_RESOLUTION_DEPTH):
        substituted = _PLACEHOLDER.sub(lambda m: properties.get(m.group(1), m.group(0)), resolved)
        if substituted == resolved:
            break
        resolved = substituted

    return resolved, property_name


def _reference(
    element: ET.Element,
    properties: dict[str, str],
    *,
    default_group: str | None = None,
) -> DeclaredReference | None:
    """Build a reference from a ``groupId/artifactId/version`` element.

    Returns ``None`` for declarations that are not full coordinates: no
    version (managed elsewhere) or placeholders that could not be resolved.
    """
    raw_group = _text(element, "groupId") or default_group
    raw_artifact = _text(element, "artifactId")
    raw_version = _text(element, "version")
    if not raw_group or not raw_artifact or not raw_version:
        return None

    group, _ = _resolve(raw_group, properties)
    artifact, _ = _resolve(raw_artifact, properties)
    version, version_property = _resolve(raw_version, properties)
    if any("${" in part for part in (group, artifact, version)):
        logger.debug("Skipping unresolved declaration %s:%s:%s", group, artifact, version)
        return None

    return DeclaredReference(
        coordinate=Coordinate(group=group, artifact=artifact, version=version),
        version_property=version_property,
    )


def _references(
    elements: list[ET.Element],
    properties: dict[str, str],
    *,
    default_group: str | None = None,
) -> list[DeclaredReference]:
    references: list[DeclaredReference] = []
    for element in elements:
        ref = _reference(element, properties, default_group=default_group)
        if ref is not None:
            references.append(ref)
    return references


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_descriptor(path: Path) -> Project:
    """Parse one ``pom.xml`` file into a :class:`Project`.

    Parameters
    ----------
    path:
        Descriptor file to read.

    Returns
    -------
    Project
        The parsed project.  ``groupId`` and ``version`` are inherited from
        the ``<parent>`` block when the descriptor omits them.

    Raises
    ------
    DescriptorParseError
        If the file cannot be read, is not well-formed XML, or does not
        yield a complete coordinate for the project itself.
    """
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as exc:
        raise DescriptorParseError(f"Cannot read descriptor '{path}': {exc}") from exc

    if _local(root.tag) != "project":
        raise DescriptorParseError(f"Descriptor '{path}' has root element <{_local(root.tag)}>, expected <project>")

    parent_el = _child(root, "parent")
    parent_group = _text(parent_el, "groupId")
    parent_version = _text(parent_el, "version")

    artifact = _text(root, "artifactId")
    group = _text(root, "groupId") or parent_group
    declared_version = _text(root, "version")
    raw_version = declared_version or parent_version
    if not artifact or not group or not raw_version:
        raise DescriptorParseError(f"Descriptor '{path}' does not declare a complete groupId:artifactId:version")

    properties: dict[str, str] = {}
    properties_el = _child(root, "properties")
    if properties_el is not None:
        for prop in properties_el:
            if isinstance(prop.tag, str) and prop.text is not None:
                properties[_local(prop.tag)] = prop.text.strip()

    # Parent built-ins must be known before the own version is resolved:
    # ${project.parent.version} is a common way to declare it.
    if parent_group:
        properties["project.parent.groupId"] = parent_group
    if parent_version:
        properties["project.parent.version"] = parent_version

    group, _ = _resolve(group, properties)
    version, version_property = _resolve(raw_version, properties)
    properties.update(
        {
            "project.groupId": group,
            "project.artifactId": artifact,
            "project.version": version,
            "pom.groupId": group,
            "pom.version": version,
        }
    )

    if "${" in group or "${" in version:
        raise DescriptorParseError(f"Descriptor '{path}' has an unresolvable coordinate {group}:{artifact}:{version}")

    parent = _reference(parent_el, properties) if parent_el is not None else None
    dependencies = _references(_children(_child(root, "dependencies"), "dependency"), properties)
    managed = _references(
        _children(_path(root, "dependencyManagement", "dependencies"), "dependency"),
        properties,
    )
    plugins = _references(
        _children(_path(root, "build", "plugins"), "plugin")
        + _children(_path(root, "build", "pluginManagement", "plugins"), "plugin"),
        properties,
        default_group=DEFAULT_PLUGIN_GROUP,
    )

    return Project(
        coordinate=Coordinate(group=group, artifact=artifact, version=version),
        descriptor=path,
        parent=parent,
        dependencies=tuple(dependencies),
        managed_dependencies=tuple(managed),
        plugins=tuple(plugins),
        declares_version=declared_version is not None,
        version_property=version_property,
    )


def load_projects_from_directory(root: Path, settings: Settings | None = None) -> list[Project]:
    """Discover and parse every descriptor under *root*.

    Parameters
    ----------
    root:
        Directory searched recursively for ``settings.descriptor_name``.
        Directories named in ``settings.exclude_dirs`` are skipped.
    settings:
        Loader settings; defaults to :func:`load_settings`.

    Returns
    -------
    list[Project]
        Parsed projects sorted by descriptor path.  Descriptors that fail to
        parse are logged and skipped.

    Raises
    ------
    DescriptorLoadError
        If *root* does not exist or is not a directory.
    """
    if not root.is_dir():
        raise DescriptorLoadError(f"Project directory does not exist or is not a directory: '{root}'")

    settings = settings or load_settings()
    excluded = set(settings.exclude_dirs)

    descriptors = [
        path
        for path in sorted(root.rglob(settings.descriptor_name))
        if path.is_file() and not excluded.intersection(path.relative_to(root).parts[:-1])
    ]
    if not descriptors:
        logger.warning("No %s files found under '%s'.", settings.descriptor_name, root)
        return []

    logger.info("Parsing %d descriptor(s) under '%s'.", len(descriptors), root)

    projects: list[Project] = []
    for path in descriptors:
        try:
            projects.append(parse_descriptor(path))
        except DescriptorParseError as exc:
            logger.warning("Skipping '%s': %s", path, exc)

    logger.info("Loaded %d project(s).", len(projects))
    return projects
