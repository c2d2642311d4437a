"""Abstract collaborators used by release preparation.

The orchestrator only talks to git and to the project files through
these interfaces, so tests can swap in in-memory fakes:
- VersionControlPort: tags, commit history, committing, tagging
- ArtifactWriterPort: config file, env file, changelog document
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CommitRecord:
    """A single commit as reported by version control.

    Attributes:
        message: Commit subject line
        short_hash: Abbreviated commit SHA
        author: Author name
        date: Commit date
    """

    message: str
    short_hash: str
    author: str
    date: date


class VersionControlPort(ABC):
    """Read and write access to the project's version control."""

    @abstractmethod
    def is_repository(self) -> bool:
        """Check whether the working location holds version control metadata."""
        pass

    @abstractmethod
    def get_last_tag(self) -> str | None:
        """Get the most recent tag as stored (e.g., 'v1.2.3' or '1.2.3').

        Returns:
            Tag name, or None if nothing has been released yet
        """
        pass

    @abstractmethod
    def get_commits_since_tag(self, tag: str | None) -> Sequence[CommitRecord]:
        """Get commits made after a tag.

        Args:
            tag: Tag to start from, or None for the full history

        Returns:
            Commits in the order version control lists them
        """
        pass

    @abstractmethod
    def create_tag(self, name: str, message: str) -> None:
        """Create an annotated tag.

        Raises:
            VcsOperationError: If the tag could not be created
        """
        pass

    @abstractmethod
    def commit(self, files: Sequence[str], message: str) -> None:
        """Stage the given files and commit them.

        Files that do not exist are skipped.

        Raises:
            VcsOperationError: If nothing could be committed
        """
        pass


class ArtifactWriterPort(ABC):
    """Write access to the files that carry the release version."""

    @abstractmethod
    def update_version_in_config(self, version: str) -> None:
        """Rewrite the version key in the application config.

        Raises:
            ArtifactWriteError: If the change could not be persisted
        """
        pass

    @abstractmethod
    def update_version_in_env(self, version: str) -> None:
        """Rewrite the version variable in the env file.

        Raises:
            ArtifactWriteError: If the change could not be persisted
        """
        pass

    @abstractmethod
    def prepend_to_changelog(self, entry: str) -> None:
        """Insert a rendered entry above the previous releases.

        Raises:
            ArtifactWriteError: If the change could not be persisted
        """
        pass
