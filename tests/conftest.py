"""Shared test helpers."""

from typing import Sequence

import pytest

from stale_skips.models import ProcessResult


class FakeRunner:
    """In-memory ProcessRunner: maps a command's leading words to a canned result."""

    def __init__(self, responses: dict[tuple[str, ...], ProcessResult] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, ...]] = []

    def add(self, prefix: Sequence[str], stdout: str = "", exit_code: int = 0, stderr: str = "") -> None:
        self.responses[tuple(prefix)] = ProcessResult(
            args=tuple(prefix), exit_code=exit_code, stdout=stdout, stderr=stderr,
        )

    def run(self, args: Sequence[str]) -> ProcessResult:
        args = tuple(args)
        self.calls.append(args)
        # Longest matching prefix wins
        for prefix in sorted(self.responses, key=len, reverse=True):
            if args[:len(prefix)] == prefix:
                return self.responses[prefix]
        raise AssertionError(f"unexpected command: {args}")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
