"""Locating and reading ``dbref.toml``.

Precedence: an explicit ``--config`` path, then the ``DBREF_CONFIG`` env
var, then the first ``dbref.toml`` found walking up from the start
directory.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "dbref.toml"
CONFIG_ENV_VAR = "DBREF_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the ``dbref.toml`` in effect for *start* (default: cwd), or None.

    A set ``DBREF_CONFIG`` wins over the walk-up even when it names a
    missing file, in which case no config is used.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for parent in (directory, *directory.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(config_path: str | None = None, start: Path | None = None) -> Path | None:
    """Apply the full precedence: *config_path* if given, else :func:`find_config`."""
    if config_path:
        explicit = Path(config_path)
        return explicit if explicit.is_file() else None
    return find_config(start)


def read_toml(path: Path | None) -> dict[str, Any]:
    """Parse *path* into a dict; None or a missing file gives ``{}``.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    return tomllib.loads(path.read_text(encoding="utf-8"))
