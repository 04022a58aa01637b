"""stale-skips: fail CI when a PR claims to fix an issue still referenced by a skip or FIXME."""

__version__ = "1.0.0"
