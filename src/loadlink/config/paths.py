"""Where the configuration file lives."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "loadlink"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "LOADLINK_CONFIG"


def default_config_path() -> Path:
    # an empty XDG_CONFIG_HOME counts as unset
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_NAME / CONFIG_FILENAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    """Return the config path and whether it exists.

    An explicit ``LOADLINK_CONFIG`` must point to an existing file unless
    ``allow_missing`` is set; the default location may be absent.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()
