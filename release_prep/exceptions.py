"""Custom exception hierarchy for release preparation.

Exit codes follow Unix conventions:
- 1: General error
- 2: Configuration error
- 3: Validation error (bad version string, bad release type)
- 4: Git error (not a repository, commit or tag failure)
- 5: Artifact write error
"""


class ReleaseError(Exception):
    """Base exception for all release preparation errors.

    Each subclass defines an exit_code for CLI error reporting.
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Brief error message
            details: Detailed explanation of what went wrong
            fix_hint: Suggested command or action to fix the issue
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"\nDetails: {self.details}")
        if self.fix_hint:
            parts.append(f"\nFix: {self.fix_hint}")
        return "".join(parts)


class ConfigurationError(ReleaseError):
    """Configuration file errors.

    Raised when:
    - An explicitly requested config file does not exist
    - Config file has invalid syntax (YAML/TOML)
    - Config values fail validation
    """

    exit_code = 2


class ValidationError(ReleaseError):
    """Input validation failures.

    Raised before anything on disk or in git has been touched.
    """

    exit_code = 3


class InvalidFormatError(ValidationError):
    """A version string is not strict MAJOR.MINOR.PATCH.

    Also raised when the latest git tag cannot be read back as a version.
    """


class InvalidReleaseKindError(ValidationError):
    """A release type other than major, minor or patch was requested."""


class GitError(ReleaseError):
    """Git operation failures.

    Raised when:
    - Git commands fail
    - Tag creation fails
    - Commit fails or there is nothing to commit
    """

    exit_code = 4


class NotARepositoryError(GitError):
    """No git metadata was found in the project root."""


class VcsOperationError(GitError):
    """Committing or tagging did not succeed.

    The orchestrator reports this as a warning, not a fatal error.
    """


class ArtifactWriteError(ReleaseError):
    """A version or changelog change could not be persisted.

    Raised when:
    - Config or env file is missing
    - No place to write the version was found in the config file
    - Reading or writing a file failed
    """

    exit_code = 5
