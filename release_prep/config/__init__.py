"""Configuration management for release preparation."""

from release_prep.config.loader import load_config
from release_prep.config.models import (
    GitConfig,
    PathsConfig,
    ReleasePrepConfig,
    TimeoutsConfig,
    VersionConfig,
)

__all__ = [
    "ReleasePrepConfig",
    "PathsConfig",
    "VersionConfig",
    "GitConfig",
    "TimeoutsConfig",
    "load_config",
]
