"""Utility modules for release preparation."""

from release_prep.utils.shell import ShellError, run, strip_ansi

__all__ = [
    "run",
    "strip_ansi",
    "ShellError",
]
