"""File-backed implementation of ArtifactWriterPort.

Three files carry the release version:
- the application config, which reads the version from an env var
  with an optional literal default: 'version' => env('APP_VERSION', '1.2.3')
- the env file, with a single APP_VERSION=1.2.3 line
- the changelog, a Keep a Changelog document

Edits use regex replacement so the rest of each file keeps its
formatting.
"""

import re
from pathlib import Path

from release_prep.core.changelog import CHANGELOG_PREAMBLE
from release_prep.core.ports import ArtifactWriterPort
from release_prep.exceptions import ArtifactWriteError

# Start of the first release section in a changelog
RELEASE_HEADING_PATTERN = re.compile(r"^## ", re.MULTILINE)


def _strip_prefix(version: str) -> str:
    return version.lstrip("vV")


def _line_ending(content: str) -> str:
    """Line ending the file already uses ('\\r\\n' or '\\n')."""
    return "\r\n" if "\r\n" in content else "\n"


class FileArtifactWriter(ArtifactWriterPort):
    """Rewrites the version in project files under a root directory."""

    def __init__(
        self,
        project_root: Path,
        changelog: str = "CHANGELOG.md",
        config: str = "config/app.php",
        env: str = ".env",
        version_variable: str = "APP_VERSION",
    ) -> None:
        """Initialize the writer.

        Args:
            project_root: Directory the file paths are relative to
            changelog: Changelog path
            config: Application config path
            env: Env file path
            version_variable: Environment variable holding the version
        """
        self.project_root = Path(project_root)
        self.changelog_path = self.project_root / changelog
        self.config_path = self.project_root / config
        self.env_path = self.project_root / env
        self.version_variable = version_variable

    def update_version_in_config(self, version: str) -> None:
        """Set the version default in the application config.

        Replaces an existing 'version' entry, or adds one directly below
        the 'name' entry.

        Raises:
            ArtifactWriteError: If the file is missing or has neither entry
        """
        version = _strip_prefix(version)
        content = self._read(self.config_path, "Config file")
        var = re.escape(self.version_variable)

        # The default argument is optional: env('APP_VERSION') or env('APP_VERSION', '1.0.0')
        version_entry = re.compile(
            rf"""(['"])version\1\s*=>\s*env\(\s*(['"]){var}\2\s*(?:,\s*(['"])[^'"]*\3\s*)?\)"""
        )
        new_entry = f"'version' => env('{self.version_variable}', '{version}')"

        if version_entry.search(content):
            content = version_entry.sub(lambda _: new_entry, content)
        elif re.search(r"""(['"])version\1\s*=>""", content):
            raise ArtifactWriteError(
                f"Unsupported version entry in {self.config_path}",
                details=f"The 'version' key does not read {self.version_variable} through env()",
                fix_hint=f"Change the entry to \"{new_entry},\"",
            )
        else:
            name_entry = re.compile(
                r"""((['"])name\2\s*=>\s*env\(\s*(['"])APP_NAME\3\s*,\s*(['"])[^'"]*\4\s*\),)"""
            )
            eol = _line_ending(content)
            content, count = name_entry.subn(
                lambda m: f"{m.group(1)}{eol}    {new_entry},", content, count=1
            )
            if count == 0:
                raise ArtifactWriteError(
                    f"No version entry found in {self.config_path}",
                    details="Expected a 'version' or 'name' entry to update",
                    fix_hint=f"Add \"{new_entry},\" to the config array",
                )

        self._write(self.config_path, content, "config file")

    def update_version_in_env(self, version: str) -> None:
        """Set the version variable in the env file.

        Raises:
            ArtifactWriteError: If the file is missing or cannot be written
        """
        version = _strip_prefix(version)
        content = self._read(self.env_path, "Env file")
        line = f"{self.version_variable}={version}"

        # Value stops before the line ending so a CRLF file keeps its "\r"
        pattern = re.compile(rf"^{re.escape(self.version_variable)}=[^\r\n]*", re.MULTILINE)
        if pattern.search(content):
            content = pattern.sub(lambda _: line, content)
        else:
            eol = _line_ending(content)
            content += f"{eol}{line}{eol}"

        self._write(self.env_path, content, "env file")

    def prepend_to_changelog(self, entry: str) -> None:
        """Insert an entry above the most recent release section.

        A missing changelog is created with the standard preamble first.

        Raises:
            ArtifactWriteError: If the changelog cannot be read or written
        """
        if not self.changelog_path.exists():
            self._write(self.changelog_path, CHANGELOG_PREAMBLE, "changelog file")

        existing = self._read(self.changelog_path, "Changelog file")
        eol = _line_ending(existing)
        entry = entry.replace("\n", eol)

        match = RELEASE_HEADING_PATTERN.search(existing)
        if match:
            updated = existing[: match.start()] + entry + existing[match.start() :]
        else:
            updated = existing + eol + entry

        self._write(self.changelog_path, updated, "changelog file")

    def _read(self, path: Path, label: str) -> str:
        if not path.exists():
            raise ArtifactWriteError(
                f"{label} not found: {path}",
                fix_hint="Create the file or point the 'paths' config section at it",
            )
        try:
            # newline="" keeps CRLF line endings as they are
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise ArtifactWriteError(
                f"Failed to read {path}",
                details=str(e),
            ) from e

    def _write(self, path: Path, content: str, label: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ArtifactWriteError(
                f"Failed to write {label}: {path}",
                details=str(e),
            ) from e
