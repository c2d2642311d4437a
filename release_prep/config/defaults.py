"""Default configuration file generation."""

from pathlib import Path

import yaml

from release_prep.config.models import (
    GitConfig,
    PathsConfig,
    TimeoutsConfig,
    VersionConfig,
)
from release_prep.exceptions import ConfigurationError

HEADER = """\
# release-prep configuration
#
# Every value can be overridden from the environment, e.g.
#   RELEASE_PREP_GIT__USER_EMAIL=ci@example.com
#   RELEASE_PREP_VERSION__DEFAULT_TYPE=patch

"""


def generate_default_config() -> str:
    """Render the default configuration as YAML.

    Returns:
        YAML document with a comment header
    """
    # Built from the section models so RELEASE_PREP_* overrides stay out of the template
    data = {
        "paths": PathsConfig().model_dump(),
        "version": VersionConfig().model_dump(),
        "git": GitConfig().model_dump(),
        "timeouts": TimeoutsConfig().model_dump(),
    }
    return HEADER + yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def write_default_config(path: Path, force: bool = False) -> Path:
    """Write the default configuration file.

    Args:
        path: Destination file
        force: Overwrite an existing file

    Returns:
        The path written

    Raises:
        ConfigurationError: If the file exists and force is False, or it
            cannot be written
    """
    if path.exists() and not force:
        raise ConfigurationError(
            f"Configuration file already exists: {path}",
            fix_hint="Use --force to overwrite it",
        )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generate_default_config(), encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Failed to write configuration file: {path}",
            details=str(e),
        ) from e
    return path
