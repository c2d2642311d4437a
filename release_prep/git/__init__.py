"""Git operations and the git-backed VersionControlPort.

All commands run through release_prep.utils.shell.run() with the
repository root passed explicitly, and raise GitError on failures.
"""

from release_prep.git.operations import add, commit, set_config_value, tag
from release_prep.git.queries import (
    get_commits_since_tag,
    get_config_value,
    get_latest_tag,
    has_commits,
    is_repository,
)
from release_prep.git.repository import GitIdentity, GitRepository

__all__ = [
    # Query operations
    "is_repository",
    "get_latest_tag",
    "has_commits",
    "get_commits_since_tag",
    "get_config_value",
    # Modification operations
    "add",
    "commit",
    "tag",
    "set_config_value",
    # Port implementation
    "GitIdentity",
    "GitRepository",
]
