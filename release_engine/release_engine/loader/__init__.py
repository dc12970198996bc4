"""Descriptor discovery and parsing."""

from release_engine.loader.pom_loader import (
    DescriptorLoadError,
    DescriptorParseError,
    load_projects_from_directory,
    parse_descriptor,
)

__all__ = [
    "DescriptorLoadError",
    "DescriptorParseError",
    "load_projects_from_directory",
    "parse_descriptor",
]
