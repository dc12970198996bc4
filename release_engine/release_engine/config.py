"""Release engine configuration loaded from environment variables."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ReleaseEnv(str, Enum):
    DEV = "dev"
    CI = "ci"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with RELEASE_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="RELEASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    env: ReleaseEnv = ReleaseEnv.DEV
    debug: bool = False

    # Release rule
    release_qualifier: str = "-SNAPSHOT"

    # Descriptor discovery
    descriptor_name: str = "pom.xml"
    exclude_dirs: list[str] = ["target", ".git", "node_modules"]

    # Traversal
    max_visited_projects: int = 10000
    follow_parents: bool = True

    # Logging
    log_level: str = "WARNING"

    @field_validator("release_qualifier")
    @classmethod
    def qualifier_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("release_qualifier must not be blank")
        return v

    @field_validator("max_visited_projects")
    @classmethod
    def cap_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_visited_projects must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{v}'")
        return level


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded settings for environment: %s", settings.env.value)

    return settings
