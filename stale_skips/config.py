"""Run configuration.

Usage:
    config = Config(debug=True)                       # built-in defaults
    config = load("stale-skips.yaml", debug=False)    # raises ConfigError on bad config

The configuration is built once by the CLI and passed to every component
that needs it. The scan roots default to a fixed list; a YAML file can
override them along with the other pattern tables.
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from stale_skips.extract import FIX_VERBS
from stale_skips.scanner import ACCEPTED_EXTENSIONS, ACCEPTED_SCRIPTS, SCAN_ROOTS


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration or the CI environment is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    debug: bool = False
    scan_roots: list[str] = field(default_factory=lambda: list(SCAN_ROOTS))
    extensions: list[str] = field(default_factory=lambda: list(ACCEPTED_EXTENSIONS))
    scripts: list[str] = field(default_factory=lambda: list(ACCEPTED_SCRIPTS))
    fix_verbs: list[str] = field(default_factory=lambda: list(FIX_VERBS))
    # Directory the search and git commands run from
    workdir: str = "."


# Keys accepted in the YAML file, mapped to the Config attribute they set
_FILE_KEYS = ("scan_roots", "extensions", "scripts", "fix_verbs")


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str | None = None, debug: bool = False, workdir: str = ".") -> Config:
    """Build the run configuration, optionally overlaying a YAML file.

    Raises:
        ConfigError: if the file is missing, malformed, or holds unknown or
                     invalid keys.
    """
    config = Config(debug=debug, workdir=workdir)
    if config_path is None:
        return config

    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: '{config_path}'")

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc

    if raw is None:
        return config
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")

    _validate(raw, config_path)
    for key in _FILE_KEYS:
        if key in raw:
            setattr(config, key, [str(v) for v in raw[key]])
    return config


def _validate(raw: dict, config_path: str) -> None:
    """Raise ConfigError listing every problem in *raw*."""
    errors: list[str] = []

    for key in raw:
        if key not in _FILE_KEYS:
            errors.append(f"  - unknown key '{key}' (expected one of: {', '.join(_FILE_KEYS)})")

    for key in _FILE_KEYS:
        if key not in raw:
            continue
        value = raw[key]
        if not isinstance(value, list) or not value:
            errors.append(f"  - '{key}' must be a non-empty list")
        elif not all(isinstance(v, str) and v.strip() for v in value):
            errors.append(f"  - '{key}' entries must be non-empty strings")

    if errors:
        raise ConfigError(f"Invalid configuration in '{config_path}':\n" + "\n".join(errors))
