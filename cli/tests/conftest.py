"""Shared fixtures for CLI tests.

The CLI reconfigures root logging on every invocation, so the root
logger's handlers are restored after each test.  The module-level Rich
console is swapped for a wide one so long paths and summaries do not wrap
inside assertions.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.console import Console

import release_cli.app as app_module
from release_engine.profiling import TimingCollector


@pytest.fixture(autouse=True)
def _isolated_cli(monkeypatch):
    monkeypatch.setenv("RELEASE_LOG_LEVEL", "ERROR")
    monkeypatch.setattr(app_module, "console", Console(stderr=True, width=300, no_color=True, highlight=False))

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    TimingCollector.reset()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    TimingCollector.reset()


def write_pom(directory: Path, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "pom.xml"
    path.write_text(
        '<project xmlns="http://maven.apache.org/POM/4.0.0">'
        "<modelVersion>4.0.0</modelVersion>"
        f"{body}</project>",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def pom():
    """Return the descriptor writer so tests can build their own workspaces."""
    return write_pom


@pytest.fixture
def workspace(tmp_path) -> Path:
    """A small multi-module workspace.

    ``parent`` (2.0-SNAPSHOT) is inherited by ``core``; ``app`` depends on
    ``core`` through a property and on ``util`` (already released); ``core``
    depends on ``ghost``, which has no descriptor.
    """
    write_pom(
        tmp_path,
        "<groupId>com.acme</groupId><artifactId>parent</artifactId><version>2.0-SNAPSHOT</version>",
    )
    write_pom(
        tmp_path / "core",
        "<parent><groupId>com.acme</groupId><artifactId>parent</artifactId><version>2.0-SNAPSHOT</version></parent>"
        "<artifactId>core</artifactId>"
        "<dependencies>"
        "<dependency><groupId>com.acme</groupId><artifactId>util</artifactId><version>1.4</version></dependency>"
        "<dependency><groupId>com.acme</groupId><artifactId>ghost</artifactId><version>0.1-SNAPSHOT</version>"
        "</dependency>"
        "</dependencies>",
    )
    write_pom(
        tmp_path / "util",
        "<groupId>com.acme</groupId><artifactId>util</artifactId><version>1.4</version>",
    )
    write_pom(
        tmp_path / "app",
        "<groupId>com.acme</groupId><artifactId>app</artifactId><version>5.0-SNAPSHOT</version>"
        "<properties><core.version>2.0-SNAPSHOT</core.version></properties>"
        "<dependencies>"
        "<dependency><groupId>com.acme</groupId><artifactId>core</artifactId>"
        "<version>${core.version}</version></dependency>"
        "</dependencies>",
    )
    return tmp_path
