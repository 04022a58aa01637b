"""Check driver and diagnostic formatting.

Functions:
    run_check(config, runner, env)   -> CheckResult
    format_report(result)            -> str
"""

from typing import Mapping

import click

from stale_skips.config import Config
from stale_skips.extract import extract_issue_numbers
from stale_skips.models import CheckResult, Outcome
from stale_skips.runner import ProcessRunner
from stale_skips.scanner import find_stale_skips
from stale_skips.sources import get_change_message, get_commit_log

ADVISORY = """\
This PR claims to fix the issue(s) above, but the skip directives or FIXME
comments listed still reference them. Please do one of the following:

  - If the issue really is fixed, remove the skip (or resolve the FIXME)
    so the affected tests run again.
  - If the issue is only partly fixed, reword the commit message and PR
    description so they do not say "Fixes", "Closes" or "Resolves".
"""


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

def run_check(config: Config, runner: ProcessRunner, env: Mapping[str, str] | None = None) -> CheckResult:
    """Gather change text, extract fix claims and scan for stale skips.

    Raises:
        ConfigError, ExternalToolError, InternalContractError: all fatal.
    """
    change_message = get_change_message(env)
    commit_log = get_commit_log(runner, env)

    if config.debug:
        click.echo(
            f"[debug] PR description: {'present' if change_message else 'none'}; "
            f"commit log: {'present' if commit_log else 'none'}",
            err=True,
        )

    issues = extract_issue_numbers([change_message, commit_log], config.fix_verbs)
    if not issues:
        return CheckResult(outcome=Outcome.NO_ISSUES_CLAIMED)

    if config.debug:
        click.echo(f"[debug] issues claimed as fixed: {', '.join(issues)}", err=True)

    matches = find_stale_skips(issues, config, runner)
    if not matches:
        return CheckResult(outcome=Outcome.NO_SKIPS, issues=issues)

    return CheckResult(outcome=Outcome.SKIPS_FOUND, issues=issues, matches=matches)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_report(result: CheckResult) -> str:
    """Render the failure diagnostic for a SKIPS_FOUND result."""
    refs = ", ".join(f"#{n}" for n in result.issues)
    noun = "issue" if len(result.issues) == 1 else "issues"
    pronoun = "it" if len(result.issues) == 1 else "them"
    lines = [f"This PR claims to fix {noun} {refs}, but skips/FIXMEs still reference {pronoun}:", ""]
    lines += [f"  {m.path}:{m.line_number}: {m.text.strip()}" for m in result.matches]
    lines += ["", ADVISORY]
    return "\n".join(lines)
