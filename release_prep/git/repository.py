"""Git-backed implementation of VersionControlPort."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from release_prep.core.ports import CommitRecord, VersionControlPort
from release_prep.exceptions import GitError, VcsOperationError
from release_prep.git import operations as git_ops
from release_prep.git import queries as git_queries


@dataclass(frozen=True)
class GitIdentity:
    """Author identity applied when the repository has none configured."""

    name: str
    email: str


class GitRepository(VersionControlPort):
    """Runs the git binary against one repository root.

    The root is fixed at construction; the process working directory
    is never consulted, so several instances can target different
    repositories side by side.
    """

    def __init__(
        self,
        project_root: Path,
        identity: GitIdentity | None = None,
        sign_commits: bool = False,
        sign_tags: bool = False,
        timeout: int = 30,
    ) -> None:
        """Initialize the adapter.

        Args:
            project_root: Repository root directory
            identity: Fallback author identity for commits
            sign_commits: GPG sign commits
            sign_tags: GPG sign tags
            timeout: Timeout for each git command in seconds
        """
        self.project_root = Path(project_root)
        self.identity = identity
        self.sign_commits = sign_commits
        self.sign_tags = sign_tags
        self.timeout = timeout

    def is_repository(self) -> bool:
        return git_queries.is_repository(self.project_root)

    def get_last_tag(self) -> str | None:
        if not self.is_repository():
            return None
        return git_queries.get_latest_tag(self.project_root, timeout=self.timeout)

    def get_commits_since_tag(self, tag: str | None) -> list[CommitRecord]:
        return git_queries.get_commits_since_tag(
            tag, self.project_root, timeout=self.timeout
        )

    def create_tag(self, name: str, message: str) -> None:
        try:
            git_ops.tag(
                name,
                cwd=self.project_root,
                message=message,
                sign=self.sign_tags,
                timeout=self.timeout,
            )
        except GitError as e:
            raise VcsOperationError(e.message, details=e.details, fix_hint=e.fix_hint) from e

    def commit(self, files: Sequence[str], message: str) -> None:
        existing = [f for f in files if (self.project_root / f).exists()]

        try:
            self.ensure_identity()
            git_ops.add(existing, cwd=self.project_root, timeout=self.timeout)
            git_ops.commit(
                message,
                cwd=self.project_root,
                sign=self.sign_commits,
                timeout=self.timeout,
            )
        except VcsOperationError:
            raise
        except GitError as e:
            raise VcsOperationError(
                "No changes to commit or commit failed",
                details=str(e),
                fix_hint="Run 'git status' to check the working tree.",
            ) from e

    def ensure_identity(self) -> None:
        """Make sure commits have an author.

        If user.name or user.email is missing, the fallback identity is
        written to the repository's local git config.

        Raises:
            VcsOperationError: If no identity is configured and there is
                no fallback
        """
        name = git_queries.get_config_value(
            "user.name", self.project_root, timeout=self.timeout
        )
        email = git_queries.get_config_value(
            "user.email", self.project_root, timeout=self.timeout
        )
        if name and email:
            return

        if self.identity is None:
            raise VcsOperationError(
                "Git user not configured",
                details="user.name and user.email must both be set to commit",
                fix_hint=(
                    'Run: git config user.email "you@example.com" && '
                    'git config user.name "Your Name", or set '
                    "RELEASE_PREP_GIT__USER_NAME and RELEASE_PREP_GIT__USER_EMAIL"
                ),
            )

        git_ops.set_config_value(
            "user.name", self.identity.name, cwd=self.project_root, timeout=self.timeout
        )
        git_ops.set_config_value(
            "user.email", self.identity.email, cwd=self.project_root, timeout=self.timeout
        )
