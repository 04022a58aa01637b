"""Where the change text comes from.

Functions:
    get_change_message(env)               -> str | None   PR description
    get_commit_log(runner, env)           -> str | None   commit messages since the merge-base

Both return ``None`` when the CI context simply does not provide the data
(not a PR, no destination branch). Anything else that goes wrong is fatal.
"""

import os
from typing import Mapping

from stale_skips.config import ConfigError
from stale_skips.runner import ExternalToolError, ProcessRunner, check

CHANGE_MESSAGE_VAR = "CIRRUS_CHANGE_MESSAGE"
PR_VAR = "CIRRUS_PR"
CURRENT_REF_VAR = "CIRRUS_CHANGE_IN_REPO"
DEST_BRANCH_VAR = "DEST_BRANCH"


def get_change_message(env: Mapping[str, str] | None = None) -> str | None:
    """Return the pull request description, or None outside a PR.

    Raises:
        ConfigError: running on a PR but the description variable is unset
                     or empty, which means the CI environment is broken.
    """
    env = os.environ if env is None else env
    message = env.get(CHANGE_MESSAGE_VAR, "")
    if message:
        return message
    if PR_VAR in env:
        raise ConfigError(
            f"${CHANGE_MESSAGE_VAR} is empty or unset, but ${PR_VAR} is set: "
            "the PR description must be available when running on a pull request."
        )
    return None


def get_commit_log(runner: ProcessRunner, env: Mapping[str, str] | None = None) -> str | None:
    """Return the full messages of every commit in (merge-base, current].

    Returns None when ``$DEST_BRANCH`` is not set.

    Raises:
        ExternalToolError: ``git merge-base`` or ``git log`` failed.
    """
    env = os.environ if env is None else env
    dest_branch = env.get(DEST_BRANCH_VAR, "")
    if not dest_branch:
        return None
    current = env.get(CURRENT_REF_VAR) or "HEAD"

    base = check(runner, ["git", "merge-base", dest_branch, current]).stdout.strip()
    if not base:
        raise ExternalToolError(
            f"'git merge-base {dest_branch} {current}' returned no commit"
        )

    return check(runner, ["git", "log", "--format=%B", f"{base}..{current}"]).stdout
