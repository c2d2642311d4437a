"""Git state query operations.

Read-only git operations for inspecting a repository. All functions
use release_prep.utils.shell.run() and raise GitError on failures.
"""

import re
from datetime import date
from pathlib import Path

from release_prep.core.ports import CommitRecord
from release_prep.exceptions import GitError
from release_prep.utils.shell import ShellError, run

# %s = subject, %h = short SHA, %an = author name, %ad = author date
LOG_FIELD_SEPARATOR = "|||"
LOG_FORMAT = LOG_FIELD_SEPARATOR.join(["%s", "%h", "%an", "%ad"])

# stderr of 'git describe' when no tag can be found
NO_TAGS_MESSAGES = re.compile(r"No names found|No tags can describe")


def is_repository(cwd: Path) -> bool:
    """Check if a directory is the root of a git repository.

    A '.git' directory (or, for worktrees and submodules, a '.git' file)
    must exist directly inside it.

    Args:
        cwd: Directory to inspect

    Returns:
        True if git metadata is present
    """
    return (cwd / ".git").exists()


def get_latest_tag(cwd: Path, timeout: int = 30) -> str | None:
    """Get the most recent git tag reachable from HEAD.

    Uses 'git describe --tags --abbrev=0'.

    Args:
        cwd: Repository root
        timeout: Command timeout in seconds

    Returns:
        Most recent tag name (e.g., "v1.0.12"), or None if no tags exist

    Raises:
        GitError: If git fails for a reason other than missing tags
    """
    try:
        result = run(
            ["git", "describe", "--tags", "--abbrev=0"],
            cwd=cwd,
            check=False,
            timeout=timeout,
        )
    except ShellError as e:
        raise GitError(
            "Failed to get latest git tag",
            details=str(e),
            fix_hint="Ensure git is installed and the project is a git repository",
        ) from e

    if result.returncode != 0:
        if NO_TAGS_MESSAGES.search(result.stderr) or not _has_any_tag(cwd, timeout):
            return None
        raise GitError(
            "Failed to get latest git tag",
            details=result.stderr.strip(),
            fix_hint="Run 'git describe --tags' to see the error",
        )
    tag = result.stdout.strip()
    return tag or None


def _has_any_tag(cwd: Path, timeout: int) -> bool:
    try:
        result = run(["git", "tag", "--list"], cwd=cwd, check=True, timeout=timeout)
    except ShellError as e:
        raise GitError(
            "Failed to list git tags",
            details=str(e),
            fix_hint="Run 'git tag --list' to see the error",
        ) from e
    return bool(result.stdout.strip())


def has_commits(cwd: Path, timeout: int = 30) -> bool:
    """Check if HEAD points at a commit.

    Args:
        cwd: Repository root
        timeout: Command timeout in seconds

    Returns:
        False for a freshly initialized repository
    """
    try:
        result = run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
            cwd=cwd,
            check=False,
            timeout=timeout,
        )
    except ShellError as e:
        raise GitError(
            "Failed to inspect HEAD",
            details=str(e),
            fix_hint="Ensure git is installed and the project is a git repository",
        ) from e
    return result.returncode == 0


def parse_log_line(line: str) -> CommitRecord:
    """Parse one line of 'git log' output produced with LOG_FORMAT.

    The subject is split off from the right so separators inside a
    commit message survive.

    Raises:
        ValueError: If the line does not have the expected fields
    """
    message, short_hash, author, date_str = line.rsplit(LOG_FIELD_SEPARATOR, 3)
    return CommitRecord(
        message=message,
        short_hash=short_hash,
        author=author,
        date=date.fromisoformat(date_str.strip()),
    )


def get_commits_since_tag(
    tag: str | None, cwd: Path, timeout: int = 30
) -> list[CommitRecord]:
    """Get all commits since a given tag, newest first.

    Args:
        tag: Tag name to compare against (e.g., "v1.0.11"), or None for
            the full history
        cwd: Repository root
        timeout: Command timeout in seconds

    Returns:
        Commits in 'git log' order; empty for a repository without commits

    Raises:
        GitError: If the tag does not exist or git output cannot be parsed
    """
    if not has_commits(cwd, timeout=timeout):
        return []

    rev_range = f"{tag}..HEAD" if tag else "HEAD"
    try:
        result = run(
            [
                "git",
                "log",
                rev_range,
                f"--pretty=format:{LOG_FORMAT}",
                "--date=short",
            ],
            cwd=cwd,
            check=True,
            timeout=timeout,
        )
    except ShellError as e:
        raise GitError(
            f"Failed to get commits since '{tag or 'the first commit'}'",
            details=str(e),
            fix_hint="Run 'git tag' to check that the tag exists.",
        ) from e

    commits = []
    for line in result.stdout.splitlines():
        if not line.strip():
            continue
        try:
            commits.append(parse_log_line(line))
        except ValueError as e:
            raise GitError(
                "Unexpected git log output",
                details=f"{line!r}: {e}",
            ) from e
    return commits


def get_config_value(key: str, cwd: Path, timeout: int = 30) -> str | None:
    """Read a git config value (e.g., 'user.email').

    Args:
        key: Config key
        cwd: Repository root
        timeout: Command timeout in seconds

    Returns:
        The value, or None if unset or empty
    """
    try:
        result = run(["git", "config", key], cwd=cwd, check=False, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to read git config '{key}'",
            details=str(e),
        ) from e
    if result.returncode != 0:
        return None
    value = result.stdout.strip()
    return value or None
