"""Child-process execution.

Usage:
    runner = SubprocessRunner(cwd="/path/to/checkout")
    result = runner.run(["git", "merge-base", "main", "HEAD"])
    base   = check(runner, ["git", "merge-base", "main", "HEAD"]).stdout

Anything that needs to run a command takes a ``ProcessRunner`` so tests can
substitute an in-memory fake.
"""

import subprocess
from typing import Protocol, Sequence

from stale_skips.models import ProcessResult


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ExternalToolError(Exception):
    """Raised when a child process cannot be started or exits abnormally."""


# ---------------------------------------------------------------------------
# Runner interface
# ---------------------------------------------------------------------------

class ProcessRunner(Protocol):
    def run(self, args: Sequence[str]) -> ProcessResult:
        """Run *args* to completion and return its captured output.

        Raises:
            ExternalToolError: the process could not be started.
        """
        ...


def check(runner: ProcessRunner, args: Sequence[str], ok_codes: Sequence[int] = (0,)) -> ProcessResult:
    """Run *args* and raise ExternalToolError unless it exits with one of *ok_codes*."""
    result = runner.run(args)
    if result.exit_code not in ok_codes:
        detail = result.stderr.strip()[:500] or "(no error output)"
        raise ExternalToolError(
            f"'{' '.join(args)}' exited with status {result.exit_code}: {detail}"
        )
    return result


# ---------------------------------------------------------------------------
# Real implementation
# ---------------------------------------------------------------------------

class SubprocessRunner:
    """Runs commands synchronously with ``subprocess.run``, no timeout.

    Output is captured as bytes and decoded as UTF-8 without newline
    translation, so a lone ``\\r`` inside a line stays where it is.
    """

    def __init__(self, cwd: str | None = None) -> None:
        self._cwd = cwd

    def run(self, args: Sequence[str]) -> ProcessResult:
        try:
            process = subprocess.run(
                list(args),
                cwd=self._cwd,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise ExternalToolError(f"Unable to run '{args[0]}': {exc}") from exc

        return ProcessResult(
            args=tuple(args),
            exit_code=process.returncode,
            stdout=process.stdout.decode("utf-8", errors="replace"),
            stderr=process.stderr.decode("utf-8", errors="replace"),
        )
