"""Semantic version value object and release types.

Only strict MAJOR.MINOR.PATCH is supported. Git tags may carry a
'v' or 'V' prefix (e.g., 'v1.2.3'); formatted versions always use a
lowercase 'v'.
"""

import re
from dataclasses import dataclass
from enum import Enum

from release_prep.exceptions import InvalidFormatError, InvalidReleaseKindError

# Three non-negative integers, no leading zeros except a bare '0'
SEMVER_PATTERN = re.compile(r"(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)")

# Leading characters accepted (and dropped) by SemanticVersion.parse
TAG_PREFIXES = ("v", "V")


class ReleaseKind(Enum):
    """Which version component a release increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def from_string(cls, value: str) -> "ReleaseKind":
        """Look up a release kind by its lowercase name.

        Matching is case-sensitive: 'minor' is accepted, 'Minor' is not.

        Args:
            value: One of 'major', 'minor', 'patch'

        Returns:
            The matching ReleaseKind

        Raises:
            InvalidReleaseKindError: For any other input
        """
        for kind in cls:
            if kind.value == value:
                return kind
        raise InvalidReleaseKindError(
            f"Invalid release type: '{value}'",
            details="Release type must be one of: major, minor, patch",
            fix_hint="Use --type major, --type minor or --type patch",
        )


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """Immutable MAJOR.MINOR.PATCH version.

    Field order makes the generated comparison operators lexicographic
    over (major, minor, patch).
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidFormatError(
                    f"Invalid {name} version component: {value!r}",
                    details="Version components must be non-negative integers",
                )

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        """Parse a version string such as '1.2.3', 'v1.2.3' or 'V1.2.3'.

        Args:
            text: Version string, optionally prefixed with 'v' or 'V'

        Returns:
            Parsed SemanticVersion

        Raises:
            InvalidFormatError: If the text is not exactly MAJOR.MINOR.PATCH

        Examples:
            >>> SemanticVersion.parse('v1.2.3')
            SemanticVersion(major=1, minor=2, patch=3)
            >>> SemanticVersion.parse('01.0.0')
            InvalidFormatError: Invalid version format: '01.0.0'
        """
        candidate = text[1:] if text[:1] in TAG_PREFIXES else text

        match = SEMVER_PATTERN.fullmatch(candidate)
        if not match:
            raise InvalidFormatError(
                f"Invalid version format: '{text}'",
                details="Expected format: 'X.Y.Z' (optionally prefixed with 'v')",
                fix_hint="Use a version like '1.2.3' or 'v1.2.3'",
            )

        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    @classmethod
    def initial(cls) -> "SemanticVersion":
        """Version used for the first release of a project."""
        return cls(1, 0, 0)

    def format(self) -> str:
        """Render as 'vMAJOR.MINOR.PATCH'."""
        return f"v{self.without_prefix()}"

    def without_prefix(self) -> str:
        """Render as 'MAJOR.MINOR.PATCH' (used in config files and changelog headings)."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def equals(self, other: "SemanticVersion") -> bool:
        return self == other

    def is_greater_than(self, other: "SemanticVersion") -> bool:
        return self > other

    def increment(self, kind: ReleaseKind) -> "SemanticVersion":
        """Return the next version for a release kind.

        Args:
            kind: Component to bump

        Returns:
            New SemanticVersion; this instance is left unchanged
        """
        if kind is ReleaseKind.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if kind is ReleaseKind.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return self.format()


__all__ = [
    "ReleaseKind",
    "SemanticVersion",
    "SEMVER_PATTERN",
]
