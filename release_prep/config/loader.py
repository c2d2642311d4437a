"""Configuration file loading utilities.

Supports loading configuration from YAML and TOML files with:
- Automatic format detection
- Error reporting with file location
- Built-in defaults when no file exists
"""

import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from release_prep.config.models import ReleasePrepConfig
from release_prep.exceptions import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Searched in order when no explicit path is given
CONFIG_SEARCH_PATHS = (
    "release_prep.yml",
    "release_prep.yaml",
    "config/release_prep.yml",
    "config/release_prep.yaml",
    "release_prep.toml",
    "config/release_prep.toml",
)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as dictionary

    Raises:
        ConfigurationError: If file cannot be read or parsed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            fix_hint="Create the file or run 'release-prep init-config' to generate one",
        ) from None
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {path}",
            details=str(e),
            fix_hint="Check YAML syntax at the indicated line",
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in {path}",
            details=f"Expected a mapping at the top level, got {type(data).__name__}",
        )
    return data


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML configuration file.

    Args:
        path: Path to the TOML file

    Returns:
        Parsed TOML as dictionary

    Raises:
        ConfigurationError: If file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            data: dict[str, Any] = tomllib.load(f)
            return data
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            fix_hint="Create the file or run 'release-prep init-config' to generate one",
        ) from None
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {path}",
            details=str(e),
            fix_hint="Check TOML syntax at the indicated line",
        ) from e


def find_config_file(project_root: Path) -> Path | None:
    """Return the first config file found in CONFIG_SEARCH_PATHS."""
    for search_path in CONFIG_SEARCH_PATHS:
        candidate = project_root / search_path
        if candidate.is_file():
            return candidate
    return None


def load_config(
    path: Path | None = None,
    project_root: Path | None = None,
) -> ReleasePrepConfig:
    """Load release configuration.

    Without an explicit path the standard locations are searched; if none
    exists, the built-in defaults (plus RELEASE_PREP_* environment
    overrides) are used.

    Args:
        path: Explicit path to config file
        project_root: Project root directory (defaults to cwd)

    Returns:
        Validated ReleasePrepConfig instance

    Raises:
        ConfigurationError: If an explicit file is missing, or a file is invalid
    """
    if project_root is None:
        project_root = Path.cwd()

    config_path: Path | None
    if path:
        config_path = Path(path)
        if not config_path.is_absolute():
            config_path = project_root / config_path
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                fix_hint="Run 'release-prep init-config' to create a configuration file",
            )
    else:
        config_path = find_config_file(project_root)

    data: dict[str, Any] = {}
    if config_path is not None:
        if config_path.suffix in (".yml", ".yaml"):
            data = load_yaml(config_path)
        elif config_path.suffix == ".toml":
            data = load_toml(config_path)
        else:
            raise ConfigurationError(
                f"Unsupported config format: {config_path.suffix}",
                fix_hint="Use .yml, .yaml, or .toml extension",
            )

    source = str(config_path) if config_path else "environment"
    try:
        return ReleasePrepConfig(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {source}",
            details=str(e),
            fix_hint="Check the configuration values match expected types",
        ) from e
