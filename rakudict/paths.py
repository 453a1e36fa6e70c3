"""Default locations of the dictionary files."""

from __future__ import annotations

import os
import sys
from pathlib import Path

SKK_JISYO_NAMES = ("SKK-JISYO.L", "SKK-JISYO.ML", "SKK-JISYO.M", "SKK-JISYO.S")


def _config_root() -> Path | None:
    """The per-user rakukan directory, or None when the environment lacks it."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata is None:
            return None
        return Path(appdata) / "rakukan"
    home = os.environ.get("HOME")
    if home is None:
        return None
    return Path(home) / ".config" / "rakukan"


def dict_dir() -> Path | None:
    """Directory holding the system dictionaries."""
    root = _config_root()
    return None if root is None else root / "dict"


def user_dict_path() -> Path | None:
    """Path of the user dictionary file."""
    root = _config_root()
    return None if root is None else root / "user_dict.toml"


def find_mozc_dict() -> Path | None:
    """Path of rakukan.dict if it is installed."""
    directory = dict_dir()
    if directory is None:
        return None
    path = directory / "rakukan.dict"
    return path if path.exists() else None


def find_skk_jisyo() -> list[Path]:
    """Installed SKK-JISYO files in priority order (L, ML, M, S)."""
    directory = dict_dir()
    if directory is None:
        return []
    return [p for p in (directory / name for name in SKK_JISYO_NAMES) if p.exists()]