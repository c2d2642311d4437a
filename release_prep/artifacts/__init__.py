"""Project file adapters."""

from release_prep.artifacts.files import FileArtifactWriter

__all__ = ["FileArtifactWriter"]
