"""Subprocess execution for the git adapter.

Provides:
- ANSI escape code stripping (tag names and versions must stay clean)
- ShellError with the failing command and its output
- Timeout support
"""

import os
import re
import subprocess
from pathlib import Path


class ShellError(Exception):
    """Exception raised when a command fails or cannot be started.

    Attributes:
        cmd: The command that failed
        returncode: Exit code of the failed command (-1 if it never ran)
        stdout: Standard output (ANSI stripped)
        stderr: Standard error (ANSI stripped)
    """

    def __init__(
        self,
        cmd: str,
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {returncode}: {cmd}")

    def __str__(self) -> str:
        parts = [f"Command failed: {self.cmd}"]
        parts.append(f"Exit code: {self.returncode}")
        if self.stderr:
            parts.append(f"Stderr: {self.stderr}")
        if self.stdout:
            parts.append(f"Stdout: {self.stdout}")
        return "\n".join(parts)


# ESC[...m, OSC sequences and other control sequences
ANSI_PATTERN = re.compile(
    r"\x1b\[[0-9;]*[a-zA-Z]|\x1b\][^\x07]*\x07|\x1b[PX^_][^\x1b]*\x1b\\"
)

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences and stray control characters.

    Git can colorize output when color.ui=always is configured; the
    escape codes must not end up in tag names or commit messages.
    """
    if not text:
        return ""
    result = ANSI_PATTERN.sub("", text)
    return CONTROL_CHARS_PATTERN.sub("", result)


def run(
    cmd: list[str],
    cwd: Path | None = None,
    check: bool = True,
    timeout: int = 30,
    env: dict[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute a command without a shell and capture its output.

    Args:
        cmd: Command and arguments
        cwd: Working directory for the command
        check: Whether to raise ShellError on non-zero exit
        timeout: Maximum execution time in seconds
        env: Additional environment variables

    Returns:
        CompletedProcess with ANSI-stripped stdout/stderr

    Raises:
        ShellError: If the command fails (check=True), cannot be started,
            or exceeds the timeout
    """
    merged_env = {**os.environ}
    if env:
        merged_env.update(env)

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=merged_env,
        )
    except subprocess.TimeoutExpired as e:
        raise ShellError(
            cmd=" ".join(cmd),
            returncode=-1,
            stdout="",
            stderr=f"Timed out after {timeout}s",
        ) from e
    except OSError as e:
        # Missing executable or working directory
        raise ShellError(
            cmd=" ".join(cmd),
            returncode=-1,
            stdout="",
            stderr=str(e),
        ) from e

    result.stdout = strip_ansi(result.stdout) if result.stdout else ""
    result.stderr = strip_ansi(result.stderr) if result.stderr else ""

    if check and result.returncode != 0:
        raise ShellError(
            cmd=" ".join(cmd),
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    return result
