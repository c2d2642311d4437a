"""Core release preparation logic.

This package contains the pieces with real decision rules:
- Semantic version parsing and bumping
- Next-version resolution from git tags
- Commit classification and changelog rendering
- The port interfaces the orchestrator drives
"""

from release_prep.core.changelog import (
    CHANGELOG_PREAMBLE,
    ChangelogCategory,
    categorize_message,
    classify_commits,
    render_changelog_entry,
)
from release_prep.core.ports import ArtifactWriterPort, CommitRecord, VersionControlPort
from release_prep.core.resolver import VersionResolver
from release_prep.core.version import ReleaseKind, SemanticVersion

__all__ = [
    # Version
    "ReleaseKind",
    "SemanticVersion",
    "VersionResolver",
    # Changelog
    "CHANGELOG_PREAMBLE",
    "ChangelogCategory",
    "categorize_message",
    "classify_commits",
    "render_changelog_entry",
    # Ports
    "ArtifactWriterPort",
    "CommitRecord",
    "VersionControlPort",
]
