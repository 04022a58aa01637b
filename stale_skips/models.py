"""Data models shared across the check.

Contains:
    - ProcessResult   captured output of a child process
    - MatchLine       one skip/FIXME line found by the scanner
    - Outcome         terminal state of a run
    - CheckResult     what the driver hands to the reporter
"""

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProcessResult:
    args: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str = ""


@dataclass(frozen=True)
class MatchLine:
    path: str
    line_number: int
    text: str
    # Full "path:lineno:text" line as emitted by the search; used for sorting
    raw: str


class Outcome(enum.Enum):
    NO_ISSUES_CLAIMED = "no_issues_claimed"
    NO_SKIPS = "issues_claimed_no_skips"
    SKIPS_FOUND = "issues_claimed_skips_found"

    @property
    def exit_code(self) -> int:
        return 1 if self is Outcome.SKIPS_FOUND else 0


@dataclass
class CheckResult:
    outcome: Outcome
    issues: list[str] = field(default_factory=list)
    matches: list[MatchLine] = field(default_factory=list)
