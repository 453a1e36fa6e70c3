"""Combined lookup over the user, binary and SKK dictionaries.

Priority: user dictionary > binary dictionary (by cost) > SKK dictionaries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

from rakudict import skk
from rakudict.mozc_dict import DictFormatError, MozcDict
from rakudict.user_dict import UserDict

log = logging.getLogger(__name__)


class DictSource(Enum):
    """Which dictionaries contributed to a lookup."""

    USER = "user"
    MOZC = "mozc"
    SKK = "skk"
    MERGED = "merged"
    NONE = "none"


@dataclass
class DictResult:
    """Candidates for a reading and where they came from."""

    candidates: list[str] = field(default_factory=list)
    source: DictSource = DictSource.NONE


class DictStore:
    """Read-only view over all loaded dictionaries."""

    def __init__(
        self,
        user: dict[str, list[str]] | None = None,
        mozc: MozcDict | None = None,
        skk_map: dict[str, list[str]] | None = None,
        skk_loaded: bool = False,
    ) -> None:
        self._user = user or {}
        self._mozc = mozc
        self._skk = skk_map or {}
        self._skk_loaded = skk_loaded

    @classmethod
    def load(
        cls,
        user_path: str | Path | None,
        mozc_path: str | Path | None,
        skk_paths: Iterable[str | Path],
    ) -> DictStore:
        """Load every dictionary given; a broken binary or SKK file is skipped."""
        user = UserDict.load(user_path).to_map() if user_path is not None else {}

        mozc = None
        if mozc_path is not None:
            mozc_path = Path(mozc_path)
            if mozc_path.exists():
                try:
                    mozc = MozcDict.open(mozc_path)
                    log.info(
                        "MozcDict loaded: %d readings, %d entries",
                        mozc.n_readings(),
                        mozc.n_entries(),
                    )
                except (DictFormatError, OSError) as exc:
                    log.warning("MozcDict load failed %s: %s", mozc_path, exc)
            else:
                log.info("rakukan.dict not found, using SKK only: %s", mozc_path)

        skk_map: dict[str, list[str]] = {}
        skk_loaded = False
        for path in skk_paths:
            try:
                loaded = load_skk_file(path)
            except (OSError, ValueError) as exc:
                log.warning("SKK dictionary load failed %s: %s", path, exc)
                continue
            for reading, candidates in loaded.items():
                skk_map.setdefault(reading, []).extend(candidates)
            skk_loaded = True

        log.info(
            "DictStore: user=%d entries, mozc=%s, SKK=%d entries",
            len(user),
            "enabled" if mozc is not None else "none",
            len(skk_map),
        )
        return cls(user, mozc, skk_map, skk_loaded)

    @classmethod
    def empty(cls) -> DictStore:
        """A store with no dictionaries."""
        return cls()

    def lookup(self, reading: str, limit: int) -> DictResult:
        """Candidates for a hiragana reading, user entries first."""
        user_cands = self._user.get(reading)
        mozc_cands = (
            [surface for surface, _ in self._mozc.lookup(reading, limit)]
            if self._mozc is not None
            else []
        )
        skk_cands = self._skk.get(reading)

        has_user = user_cands is not None
        has_mozc = bool(mozc_cands)
        has_skk = skk_cands is not None

        if not (has_user or has_mozc or has_skk):
            return DictResult([], DictSource.NONE)

        merged: list[str] = []
        for surface in user_cands or []:
            if surface not in merged:
                merged.append(surface)
        for surface in [*mozc_cands, *(skk_cands or [])]:
            if len(merged) >= limit:
                break
            if surface not in merged:
                merged.append(surface)
        del merged[max(limit, 0):]

        flags = (has_user, has_mozc, has_skk)
        source = {
            (True, False, False): DictSource.USER,
            (False, True, False): DictSource.MOZC,
            (False, False, True): DictSource.SKK,
        }.get(flags, DictSource.MERGED)
        return DictResult(merged, source)

    def is_mozc_loaded(self) -> bool:
        return self._mozc is not None

    def is_skk_loaded(self) -> bool:
        return self._skk_loaded

    def user_entry_count(self) -> int:
        return len(self._user)

    def skk_entry_count(self) -> int:
        return len(self._skk)


def load_skk_file(path: str | Path) -> skk.SkkDict:
    """Read an SKK dictionary stored as UTF-8 or EUC-JP."""
    path = Path(path)
    data = path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = skk.decode_eucjp(data)
    result = skk.parse(text)
    log.info("SKK dict loaded: %s (%d entries)", path, len(result))
    return result