"""Git state modification operations.

Git operations that modify repository state. All functions use
release_prep.utils.shell.run() and raise GitError on failures.
"""

from pathlib import Path

from release_prep.exceptions import GitError
from release_prep.utils.shell import ShellError, run


def add(files: list[str], cwd: Path, timeout: int = 30) -> None:
    """Stage files.

    Args:
        files: Paths relative to the repository root
        cwd: Repository root
        timeout: Command timeout in seconds

    Raises:
        GitError: If a file cannot be staged
    """
    for file in files:
        try:
            # List form keeps filenames with spaces intact
            run(["git", "add", "--", file], cwd=cwd, timeout=timeout)
        except ShellError as e:
            raise GitError(
                f"Failed to stage '{file}'",
                details=str(e),
            ) from e


def commit(
    message: str,
    cwd: Path,
    sign: bool = False,
    timeout: int = 30,
) -> str:
    """Commit staged changes.

    Args:
        message: Commit message
        cwd: Repository root
        sign: Whether to GPG sign the commit
        timeout: Command timeout in seconds

    Returns:
        SHA of the new commit

    Raises:
        GitError: If commit fails or there is nothing to commit
    """
    cmd = ["git", "commit", "-m", message]
    if sign:
        cmd.append("-S")

    try:
        run(cmd, cwd=cwd, timeout=timeout)
        sha_result = run(["git", "rev-parse", "HEAD"], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            "Failed to create git commit",
            details=str(e),
            fix_hint="Ensure there are staged changes. Run 'git status' to check.",
        ) from e
    return sha_result.stdout.strip()


def tag(
    name: str,
    cwd: Path,
    message: str | None = None,
    sign: bool = False,
    timeout: int = 30,
) -> None:
    """Create an annotated git tag.

    Args:
        name: Tag name (e.g., "v1.0.12")
        cwd: Repository root
        message: Tag annotation message (defaults to tag name if None)
        sign: Whether to GPG sign the tag
        timeout: Command timeout in seconds

    Raises:
        GitError: If tag creation fails or tag already exists
    """
    tag_message = message if message is not None else name
    cmd = ["git", "tag", "-a", name, "-m", tag_message]
    if sign:
        cmd.append("-s")

    try:
        run(cmd, cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to create git tag '{name}'",
            details=str(e),
            fix_hint=f"Ensure tag '{name}' doesn't already exist. Run 'git tag -d {name}' to delete it first.",
        ) from e


def set_config_value(key: str, value: str, cwd: Path, timeout: int = 30) -> None:
    """Set a repository-local git config value.

    Raises:
        GitError: If git config fails
    """
    try:
        run(["git", "config", key, value], cwd=cwd, timeout=timeout)
    except ShellError as e:
        raise GitError(
            f"Failed to set git config '{key}'",
            details=str(e),
        ) from e
