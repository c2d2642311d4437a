"""Pydantic v2 configuration models for release_prep.yml.

These models provide:
- Type-safe configuration loading
- Automatic validation
- Default values, so a project without a config file still works
- Environment variable override support
"""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RELEASE_TYPES = ("major", "minor", "patch")


class PathsConfig(BaseModel):
    """Locations of the release artifacts, relative to the project root."""

    changelog: str = Field(
        default="CHANGELOG.md",
        description="Changelog document",
    )
    config: str = Field(
        default="config/app.php",
        description="Application config holding the version default",
    )
    env: str = Field(
        default=".env",
        description="Environment file holding the version variable",
    )

    def tracked_files(self) -> list[str]:
        """Files staged in the release commit."""
        return [self.changelog, self.config, self.env]


class VersionConfig(BaseModel):
    """Version management configuration."""

    variable: str = Field(
        default="APP_VERSION",
        description="Environment variable that carries the version",
    )
    default_type: str = Field(
        default="minor",
        description="Release type used when none is given (major, minor, patch)",
    )

    @field_validator("variable")
    @classmethod
    def validate_variable(cls, v: str) -> str:
        if not v or not v.replace("_", "").isalnum():
            raise ValueError("variable must be a non-empty environment variable name")
        return v

    @field_validator("default_type")
    @classmethod
    def validate_default_type(cls, v: str) -> str:
        if v not in RELEASE_TYPES:
            raise ValueError(f"default_type must be one of: {', '.join(RELEASE_TYPES)}")
        return v


class GitConfig(BaseModel):
    """Git workflow configuration."""

    user_name: str | None = Field(
        default=None,
        description="Commit author name used when git has none configured",
    )
    user_email: str | None = Field(
        default=None,
        description="Commit author email used when git has none configured",
    )
    sign_commits: bool = Field(
        default=False,
        description="GPG sign commits",
    )
    sign_tags: bool = Field(
        default=False,
        description="GPG sign tags",
    )
    create_tag: bool = Field(
        default=True,
        description="Create an annotated tag for the release",
    )
    commit_changes: bool = Field(
        default=True,
        description="Commit the changed artifacts",
    )


class TimeoutsConfig(BaseModel):
    """Timeout configuration in seconds."""

    git_operations: int = Field(
        default=30,
        ge=5,
        description="Git operation timeout",
    )


class ReleasePrepConfig(BaseSettings):
    """Root configuration model for release_prep.yml.

    Supports environment variable overrides with RELEASE_PREP_ prefix.
    Example: RELEASE_PREP_GIT__USER_EMAIL=ci@example.com
    """

    paths: PathsConfig = Field(default_factory=PathsConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    model_config = SettingsConfigDict(
        env_prefix="RELEASE_PREP_",
        env_nested_delimiter="__",
    )
