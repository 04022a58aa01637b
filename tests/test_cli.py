"""End-to-end tests for stale_skips/cli.py"""

import shutil
import textwrap

import pytest
from click.testing import CliRunner

from stale_skips import __version__
from stale_skips.cli import cli
from stale_skips.models import ProcessResult
from stale_skips.runner import SubprocessRunner

needs_grep = pytest.mark.skipif(shutil.which("grep") is None, reason="grep not installed")

# Passing None to CliRunner unsets the variable for the duration of the call
CLEAN_ENV = {
    "CIRRUS_CHANGE_MESSAGE": None,
    "CIRRUS_PR": None,
    "CIRRUS_CHANGE_IN_REPO": None,
    "DEST_BRANCH": None,
}


@pytest.fixture
def source_tree(tmp_path, monkeypatch):
    """A checkout with one Go test that still carries a FIXME for #42."""
    go_test = tmp_path / "test" / "e2e" / "run_test.go"
    go_test.parent.mkdir(parents=True)
    go_test.write_text(textwrap.dedent("""\
        package e2e

        // FIXME: #42 still broken
        func TestRun() {}
        """), encoding="utf-8")
    (tmp_path / "pkg").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


def invoke(args=(), **env):
    return CliRunner().invoke(cli, list(args), env={**CLEAN_ENV, **env})


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def test_not_a_pr_and_no_dest_branch(source_tree):
    result = invoke()
    assert result.exit_code == 0
    assert result.output == ""


@needs_grep
def test_claim_without_stale_skip(source_tree):
    (source_tree / "test" / "e2e" / "run_test.go").write_text("package e2e\n", encoding="utf-8")
    result = invoke(CIRRUS_PR="7", CIRRUS_CHANGE_MESSAGE="Fixes #42")
    assert result.exit_code == 0
    assert result.output == ""


@needs_grep
def test_claim_with_stale_fixme(source_tree):
    result = invoke(CIRRUS_PR="7", CIRRUS_CHANGE_MESSAGE="Fixes #42")
    assert result.exit_code == 1
    assert "issue #42" in result.output
    assert "test/e2e/run_test.go:3: // FIXME: #42 still broken" in result.output
    assert "remove the skip" in result.output


@needs_grep
def test_unrelated_issue_number(source_tree):
    result = invoke(CIRRUS_CHANGE_MESSAGE="Fixes #4")
    assert result.exit_code == 0


def test_pr_without_description_is_fatal(source_tree):
    result = invoke(CIRRUS_PR="7")
    assert result.exit_code == 2
    assert "Configuration error" in result.output
    assert "CIRRUS_CHANGE_MESSAGE" in result.output


def test_extra_argument_is_usage_error(source_tree):
    result = invoke(["extra"], CIRRUS_CHANGE_MESSAGE="Fixes #42")
    assert result.exit_code == 2
    assert "unexpected extra argument" in result.output.lower()


def test_unknown_option_is_usage_error(source_tree):
    result = invoke(["--verbose"])
    assert result.exit_code == 2
    assert "No such option" in result.output


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------

def test_help():
    result = invoke(["--help"])
    assert result.exit_code == 0
    assert "--debug / --no-debug" in result.output
    assert "--version" in result.output


def test_version():
    result = invoke(["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"stale-skips, version {__version__}"


def test_debug_outcome_line(source_tree):
    result = invoke(["--debug"])
    assert result.exit_code == 0
    assert "[debug] outcome: no_issues_claimed" in result.output


@needs_grep
def test_debug_lists_ignored_files(source_tree):
    (source_tree / "test" / "NOTES.md").write_text("skip until #42 is fixed\n", encoding="utf-8")
    result = invoke(["--debug"], CIRRUS_CHANGE_MESSAGE="Closes: #42")
    assert result.exit_code == 1
    assert "[debug] ignoring non-test file: test/NOTES.md:1:skip until #42 is fixed" in result.output


@needs_grep
def test_config_file_extends_extensions(source_tree):
    (source_tree / "test" / "helpers.sh").write_text("# FIXME #42\n", encoding="utf-8")
    (source_tree / "test" / "e2e" / "run_test.go").write_text("package e2e\n", encoding="utf-8")
    cfg = source_tree / "stale-skips.yaml"
    cfg.write_text("extensions: [.sh]\n", encoding="utf-8")

    result = invoke(["--config", str(cfg)], CIRRUS_CHANGE_MESSAGE="Fixes #42")

    assert result.exit_code == 1
    assert "test/helpers.sh:1: # FIXME #42" in result.output


def test_missing_config_file(source_tree):
    result = invoke(["--config", "nope.yaml"])
    assert result.exit_code == 2
    assert "Config file not found" in result.output


def test_git_failure_is_fatal(source_tree):
    # tmp_path is not a git checkout, so merge-base fails
    result = invoke(DEST_BRANCH="main")
    assert result.exit_code == 2
    assert "External tool error" in result.output


def test_malformed_search_output_is_internal_error(source_tree, monkeypatch):
    def run(self, args):
        return ProcessResult(args=tuple(args), exit_code=0, stdout="Binary file matches\n")

    monkeypatch.setattr(SubprocessRunner, "run", run)

    result = invoke(CIRRUS_CHANGE_MESSAGE="Fixes #42")

    assert result.exit_code == 2
    assert "Internal error: Unexpected search output" in result.output
