"""CLI entry point: a single Click command with no positional arguments.

Exit codes:
    0   no fix claims, or no stale skips for the claimed issues
    1   stale skips/FIXMEs found
    2   usage, configuration, external-tool or internal error
"""

import functools
import sys

import click

from stale_skips import __version__

EXIT_ERROR = 2


def _handle_errors(func):
    """Decorator that catches the check's fatal exceptions and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from stale_skips.config import ConfigError
        from stale_skips.runner import ExternalToolError
        from stale_skips.scanner import InternalContractError

        try:
            return func(*args, **kwargs)
        except ConfigError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(EXIT_ERROR)
        except ExternalToolError as exc:
            click.echo(f"External tool error: {exc}", err=True)
            sys.exit(EXIT_ERROR)
        except InternalContractError as exc:
            click.echo(f"Internal error: {exc}", err=True)
            sys.exit(EXIT_ERROR)

    return wrapper


@click.command(context_settings={"help_option_names": ["--help"]})
@click.option("--debug/--no-debug", default=False, show_default=True,
              help="Show discarded matches and other diagnostic detail.")
@click.option("--config", "config_path", default=None,
              type=click.Path(dir_okay=False),
              help="Optional YAML file overriding scan roots and pattern tables.")
@click.version_option(__version__, prog_name="stale-skips")
@_handle_errors
def cli(debug: bool, config_path: str | None) -> None:
    """Fail if a PR claims to fix an issue that skips or FIXMEs still reference.

    Reads the PR description from $CIRRUS_CHANGE_MESSAGE and the commit
    messages since the merge-base with $DEST_BRANCH, then searches the
    source tree for skip/FIXME lines naming the claimed issue numbers.
    """
    from stale_skips.config import load
    from stale_skips.models import Outcome
    from stale_skips.report import format_report, run_check
    from stale_skips.runner import SubprocessRunner

    config = load(config_path, debug=debug)
    runner = SubprocessRunner(cwd=config.workdir)

    result = run_check(config, runner)

    if result.outcome is Outcome.SKIPS_FOUND:
        click.echo(format_report(result), err=True)
    elif debug:
        click.echo(f"[debug] outcome: {result.outcome.value}", err=True)

    sys.exit(result.outcome.exit_code)


def main() -> None:
    cli()
