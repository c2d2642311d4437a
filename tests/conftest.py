"""Pytest fixtures for release preparation tests.

Provides common fixtures for:
- Temporary project directories
- Git repository setup
- Laravel-style application projects (config/app.php, .env)
- In-memory fakes of the version control and artifact ports
"""

import io
import os
import subprocess
from collections.abc import Callable, Generator, Sequence
from datetime import date
from pathlib import Path

import pytest
from rich.console import Console

from release_prep.core.ports import ArtifactWriterPort, CommitRecord, VersionControlPort
from release_prep.exceptions import VcsOperationError

APP_CONFIG = """<?php

return [

    'name' => env('APP_NAME', 'RunTracker'),
    'version' => env('APP_VERSION', '0.9.0'),

    'env' => env('APP_ENV', 'production'),

];
"""

APP_ENV = """APP_NAME=RunTracker
APP_ENV=local
APP_VERSION=0.9.0
APP_DEBUG=true
"""


class FakeVersionControl(VersionControlPort):
    """In-memory VersionControlPort that records every call."""

    def __init__(self) -> None:
        self.repository = True
        self.tags: list[str] = []
        self.commits: list[CommitRecord] = []
        self.commit_error: VcsOperationError | None = None
        self.tag_error: VcsOperationError | None = None
        self.calls: list[str] = []
        self.committed: list[tuple[list[str], str]] = []
        self.created_tags: list[tuple[str, str]] = []

    def is_repository(self) -> bool:
        self.calls.append("is_repository")
        return self.repository

    def get_last_tag(self) -> str | None:
        self.calls.append("get_last_tag")
        return self.tags[-1] if self.tags else None

    def get_commits_since_tag(self, tag: str | None) -> list[CommitRecord]:
        self.calls.append("get_commits_since_tag")
        return list(self.commits)

    def create_tag(self, name: str, message: str) -> None:
        self.calls.append("create_tag")
        if self.tag_error is not None:
            raise self.tag_error
        self.created_tags.append((name, message))
        self.tags.append(name)

    def commit(self, files: Sequence[str], message: str) -> None:
        self.calls.append("commit")
        if self.commit_error is not None:
            raise self.commit_error
        self.committed.append((list(files), message))


class FakeArtifactWriter(ArtifactWriterPort):
    """In-memory ArtifactWriterPort that records every write."""

    def __init__(self) -> None:
        self.config_versions: list[str] = []
        self.env_versions: list[str] = []
        self.changelog_entries: list[str] = []
        self.config_error: Exception | None = None
        self.env_error: Exception | None = None
        self.changelog_error: Exception | None = None

    def update_version_in_config(self, version: str) -> None:
        if self.config_error is not None:
            raise self.config_error
        self.config_versions.append(version)

    def update_version_in_env(self, version: str) -> None:
        if self.env_error is not None:
            raise self.env_error
        self.env_versions.append(version)

    def prepend_to_changelog(self, entry: str) -> None:
        if self.changelog_error is not None:
            raise self.changelog_error
        self.changelog_entries.append(entry)

    @property
    def touched(self) -> bool:
        return bool(self.config_versions or self.env_versions or self.changelog_entries)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Yields:
        Path to temporary directory
    """
    yield tmp_path
    # Cleanup handled by pytest's tmp_path


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """Create a temporary project directory.

    Returns:
        Path to project directory
    """
    project = temp_dir / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def git_env(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
    """Isolate git from the user's global and system configuration."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(temp_dir / "gitconfig-global"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


@pytest.fixture
def git_repo(project_dir: Path, git_env: None) -> Path:
    """Create a git repository in the project directory.

    Returns:
        Path to git repository
    """
    for args in (
        ["git", "init"],
        ["git", "config", "user.email", "test@test.com"],
        ["git", "config", "user.name", "Test User"],
        ["git", "config", "commit.gpgsign", "false"],
        ["git", "config", "tag.gpgsign", "false"],
    ):
        subprocess.run(args, cwd=project_dir, capture_output=True, check=True)
    return project_dir


@pytest.fixture
def make_commit() -> Callable[..., None]:
    """Return a helper that writes a file and commits it.

    Usage: make_commit(repo, "feat: add login", filename="login.txt")
    """

    def _make_commit(repo: Path, message: str, filename: str | None = None) -> None:
        name = filename or f"file-{len(list(repo.iterdir()))}.txt"
        path = repo / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(message + "\n")
        subprocess.run(["git", "add", name], cwd=repo, capture_output=True, check=True)
        subprocess.run(
            ["git", "commit", "-m", message],
            cwd=repo,
            capture_output=True,
            check=True,
        )

    return _make_commit


@pytest.fixture
def make_tag() -> Callable[..., None]:
    """Return a helper that tags HEAD (annotated by default)."""

    def _make_tag(repo: Path, name: str, annotated: bool = True) -> None:
        cmd = ["git", "tag", "-a", name, "-m", f"Release {name}"] if annotated else ["git", "tag", name]
        subprocess.run(cmd, cwd=repo, capture_output=True, check=True)

    return _make_tag


@pytest.fixture
def app_files(project_dir: Path) -> Path:
    """Write config/app.php and .env into the project directory.

    Returns:
        Path to project directory
    """
    (project_dir / "config").mkdir()
    (project_dir / "config" / "app.php").write_text(APP_CONFIG)
    (project_dir / ".env").write_text(APP_ENV)
    return project_dir


@pytest.fixture
def app_project(git_repo: Path, app_files: Path) -> Path:
    """Create an application project with config/app.php and .env.

    Returns:
        Path to project directory, with one initial commit
    """
    subprocess.run(["git", "add", "."], cwd=git_repo, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"],
        cwd=git_repo,
        capture_output=True,
        check=True,
    )
    return git_repo


@pytest.fixture
def fake_vcs() -> FakeVersionControl:
    """In-memory version control, a repository without tags or commits."""
    return FakeVersionControl()


@pytest.fixture
def fake_artifacts() -> FakeArtifactWriter:
    """In-memory artifact writer."""
    return FakeArtifactWriter()


@pytest.fixture
def quiet_console() -> Console:
    """Console that writes into a buffer instead of the terminal."""
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def commit_record() -> Callable[..., CommitRecord]:
    """Return a factory for CommitRecord values."""

    def _commit_record(
        message: str,
        short_hash: str = "abc1234",
        author: str = "Test User",
        day: date = date(2024, 1, 15),
    ) -> CommitRecord:
        return CommitRecord(message=message, short_hash=short_hash, author=author, date=day)

    return _commit_record


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Temporarily clean environment variables.

    Removes RELEASE_PREP_* environment variables during test.
    """
    old_env = {}
    for key in list(os.environ.keys()):
        if key.startswith("RELEASE_PREP_"):
            old_env[key] = os.environ.pop(key)

    yield

    os.environ.update(old_env)


