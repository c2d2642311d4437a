"""Next-version calculation."""

from release_prep.core.ports import VersionControlPort
from release_prep.core.version import ReleaseKind, SemanticVersion


class VersionResolver:
    """Works out which version the next release gets.

    An explicit version always wins and never touches version control.
    Otherwise the latest tag is bumped according to the release kind,
    and a project without tags starts at 1.0.0.
    """

    def __init__(self, vcs: VersionControlPort) -> None:
        self.vcs = vcs

    def resolve_next(
        self,
        explicit_version: str | None,
        kind: ReleaseKind,
    ) -> SemanticVersion:
        """Resolve the version for the upcoming release.

        Args:
            explicit_version: Version requested by the user, if any
            kind: Component to bump when no explicit version is given

        Returns:
            The version to release

        Raises:
            InvalidFormatError: If the explicit version or the latest tag
                is not a valid MAJOR.MINOR.PATCH version
        """
        if explicit_version is not None:
            return SemanticVersion.parse(explicit_version)

        last_tag = self.vcs.get_last_tag()
        if last_tag is None:
            return SemanticVersion.initial()

        return SemanticVersion.parse(last_tag).increment(kind)
