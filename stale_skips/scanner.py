"""Skip/FIXME scanner.

Searches the source tree for skip directives and FIXME comments that still
reference a given set of issue numbers.

Functions:
    build_skip_pattern(issues)                -> str  (POSIX extended regex)
    is_accepted_path(path, extensions, scripts) -> bool
    parse_match_line(line)                    -> MatchLine
    find_stale_skips(issues, config, runner)  -> list[MatchLine]
"""

import posixpath
import re
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import click

from stale_skips.models import MatchLine
from stale_skips.runner import ProcessRunner, check

if TYPE_CHECKING:
    from stale_skips.config import Config

# Fixed default roots: tests, command entry points, core library, shared
# packages. vendor/ is never scanned.
SCAN_ROOTS: tuple[str, ...] = ("test", "cmd", "libpod", "pkg")

ACCEPTED_EXTENSIONS: tuple[str, ...] = (".go", ".bats")
ACCEPTED_SCRIPTS: tuple[str, ...] = ("test/buildah-bud/apply-podman-deltas",)

# grep --null ends the file name with NUL, so paths may contain ":"
_GREP_LINE = re.compile(r"^(?P<path>[^\0]+)\0(?P<line>\d+):(?P<text>.*)$")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class InternalContractError(Exception):
    """Raised when the search output does not have the expected shape."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def build_skip_pattern(issues: Sequence[str]) -> str:
    """Return a grep -E pattern matching skip/FIXME lines for any of *issues*.

    The issue number must be followed by a non-digit (or end of line), so
    a search for 12 never matches ``#123``.
    """
    if not issues:
        raise ValueError("build_skip_pattern() needs at least one issue number")
    alternation = "|".join(issues)
    return (
        r"^[[:space:]]*(//|#)?[[:space:]]*(skip|fixme)"
        rf".*#({alternation})([^0-9]|$)"
    )


def is_accepted_path(
    path: str,
    extensions: Sequence[str] = ACCEPTED_EXTENSIONS,
    scripts: Sequence[str] = ACCEPTED_SCRIPTS,
) -> bool:
    """True for test/build-script files whose skips we care about."""
    normalized = posixpath.normpath(path)
    if normalized in scripts:
        return True
    return posixpath.splitext(normalized)[1] in extensions


def parse_match_line(line: str) -> MatchLine:
    """Split one ``path\\0lineno:text`` line of ``grep --null`` output.

    Raises:
        InternalContractError: the line does not have that shape.
    """
    m = _GREP_LINE.match(line)
    if m is None:
        raise InternalContractError(
            f"Unexpected search output (expected 'path\\0lineno:text'): {line!r}"
        )
    path, number, text = m.group("path", "line", "text")
    return MatchLine(
        path=path,
        line_number=int(number),
        text=text,
        raw=f"{path}:{number}:{text}",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def find_stale_skips(issues: Sequence[str], config: "Config", runner: ProcessRunner) -> list[MatchLine]:
    """Return accepted skip/FIXME lines referencing *issues*, sorted by line text.

    Raises:
        ValueError:            *issues* is empty.
        ExternalToolError:     grep could not run or failed.
        InternalContractError: grep produced a line we cannot parse.
    """
    if not issues:
        raise ValueError("find_stale_skips() needs at least one issue number")

    workdir = Path(config.workdir)
    roots = [r for r in config.scan_roots if (workdir / r).exists()]
    if not roots:
        if config.debug:
            click.echo(f"[debug] none of {', '.join(config.scan_roots)} exist; nothing to scan", err=True)
        return []

    args = ["grep", "-rIinE", "--null", build_skip_pattern(issues), "--", *roots]
    if config.debug:
        click.echo(f"[debug] running: {' '.join(args)}", err=True)

    # grep exits 1 when nothing matched
    result = check(runner, args, ok_codes=(0, 1))

    accepted: list[MatchLine] = []
    for line in result.stdout.split("\n"):
        if not line:
            continue
        match = parse_match_line(line)
        if is_accepted_path(match.path, config.extensions, config.scripts):
            accepted.append(match)
        elif config.debug:
            click.echo(f"[debug] ignoring non-test file: {match.raw}", err=True)

    return sorted(accepted, key=lambda m: m.raw)
