"""Release preparation: next version, changelog, version files, commit and tag."""

__version__ = "0.1.0"

from release_prep.exceptions import (
    ArtifactWriteError,
    ConfigurationError,
    GitError,
    InvalidFormatError,
    InvalidReleaseKindError,
    NotARepositoryError,
    ReleaseError,
    ValidationError,
    VcsOperationError,
)

__all__ = [
    "__version__",
    "ReleaseError",
    "ConfigurationError",
    "ValidationError",
    "InvalidFormatError",
    "InvalidReleaseKindError",
    "GitError",
    "NotARepositoryError",
    "VcsOperationError",
    "ArtifactWriteError",
]
