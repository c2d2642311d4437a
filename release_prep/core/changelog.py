"""Changelog entry generation from commit messages.

Commits are sorted into Keep a Changelog sections by the prefix of
their message (``feat: ...``, ``fix(api): ...``) and rendered as a
Markdown block for a single release.
"""

import re
from collections.abc import Mapping, Sequence
from datetime import date
from enum import Enum

from release_prep.core.ports import CommitRecord
from release_prep.core.version import SemanticVersion


class ChangelogCategory(Enum):
    """Changelog sections, in the order they are rendered."""

    ADDED = "Added"
    CHANGED = "Changed"
    FIXED = "Fixed"
    REMOVED = "Removed"
    SECURITY = "Security"
    OTHER = "Other"


def _prefix_rule(*types: str) -> re.Pattern[str]:
    # type, optional "(scope)", then the colon
    alternatives = "|".join(types)
    return re.compile(rf"^({alternatives})(\(.*?\))?:", re.IGNORECASE)


# Evaluated top to bottom, first match wins
CLASSIFICATION_RULES: tuple[tuple[re.Pattern[str], ChangelogCategory], ...] = (
    (_prefix_rule("feat", "feature", "add"), ChangelogCategory.ADDED),
    (_prefix_rule("fix", "bug"), ChangelogCategory.FIXED),
    (_prefix_rule("change", "update", "refactor"), ChangelogCategory.CHANGED),
    (_prefix_rule("remove", "delete"), ChangelogCategory.REMOVED),
    (_prefix_rule("security", "sec"), ChangelogCategory.SECURITY),
)

CHANGELOG_PREAMBLE = (
    "# Changelog\n"
    "\n"
    "All notable changes to this project will be documented in this file.\n"
    "\n"
    "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),\n"
    "and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).\n"
    "\n"
)


def categorize_message(message: str) -> ChangelogCategory:
    """Pick the changelog section for a single commit message.

    Examples:
        >>> categorize_message('feat(api): add login')
        <ChangelogCategory.ADDED: 'Added'>
        >>> categorize_message('chore: bump deps')
        <ChangelogCategory.OTHER: 'Other'>
    """
    for pattern, category in CLASSIFICATION_RULES:
        if pattern.match(message):
            return category
    return ChangelogCategory.OTHER


def classify_commits(
    commits: Sequence[CommitRecord],
) -> dict[ChangelogCategory, list[CommitRecord]]:
    """Group commits into changelog sections.

    Every section is present in the result, empty or not, in render order.
    Commits keep the order in which they were given.

    Args:
        commits: Commits since the last release

    Returns:
        Mapping of section to the commits that belong to it
    """
    grouped: dict[ChangelogCategory, list[CommitRecord]] = {
        category: [] for category in ChangelogCategory
    }
    for commit in commits:
        grouped[categorize_message(commit.message)].append(commit)
    return grouped


def render_changelog_entry(
    categorized: Mapping[ChangelogCategory, Sequence[CommitRecord]],
    version: SemanticVersion,
    release_date: date,
) -> str:
    """Render one release as a Markdown changelog entry.

    Sections without commits are left out entirely.

    Args:
        categorized: Output of classify_commits()
        version: Version being released
        release_date: Date shown next to the version

    Returns:
        Markdown block ending with a blank line, e.g.::

            ## [1.0.0] - 2024-01-15

            ### Added

            - feat: login ([abc123])

    """
    lines = [f"## [{version.without_prefix()}] - {release_date.isoformat()}", ""]

    for category in ChangelogCategory:
        commits = categorized.get(category, ())
        if not commits:
            continue
        lines.append(f"### {category.value}")
        lines.append("")
        for commit in commits:
            lines.append(f"- {commit.message} ([{commit.short_hash}])")
        lines.append("")

    return "\n".join(lines) + "\n"
