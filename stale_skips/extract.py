"""Issue-reference extraction.

Finds "Fixes #123" / "Closes: #45" / "Resolved #6" style claims in free text.

Functions:
    build_fix_pattern(verbs)                   -> compiled regex
    extract_issue_numbers(messages, verbs)     -> list[str]
"""

import re
from typing import Iterable, Sequence

# Verb stems; each may be followed by "e", "es" or "ed"
FIX_VERBS: tuple[str, ...] = ("Fix", "Clos", "Resolv")


def build_fix_pattern(verbs: Sequence[str] = FIX_VERBS) -> re.Pattern:
    """Compile the fix-claim regex for the given verb stems.

    The separator class ``[:\\s]`` lets a claim wrap onto the next line
    without letting it reach across unrelated words.
    """
    stems = "|".join(re.escape(v) for v in verbs)
    return re.compile(rf"\b(?:{stems})(?:e[sd]?)?[:\s]+#(\d+)", re.IGNORECASE)


def extract_issue_numbers(
    messages: Iterable[str | None],
    verbs: Sequence[str] = FIX_VERBS,
) -> list[str]:
    """Return issue numbers claimed as fixed, deduplicated, in first-seen order.

    *messages* may contain ``None`` or empty entries; they are skipped.
    An empty result means no fix claims were found.
    """
    pattern = build_fix_pattern(verbs)
    seen: dict[str, None] = {}
    for message in messages:
        if not message:
            continue
        for number in pattern.findall(message):
            seen.setdefault(number, None)
    return list(seen)
