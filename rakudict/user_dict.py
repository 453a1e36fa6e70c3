"""User-registered words stored as TOML."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

log = logging.getLogger(__name__)


@dataclass
class UserEntry:
    """One reading with its surfaces, most preferred first."""

    reading: str
    surfaces: list[str] = field(default_factory=list)


def _entry_from_table(table: object) -> UserEntry:
    if not isinstance(table, dict):
        raise ValueError("user_dict parse error: entry is not a table")
    reading = table.get("reading")
    surfaces = table.get("surfaces")
    if not isinstance(reading, str):
        raise ValueError("user_dict parse error: missing or invalid 'reading'")
    if not isinstance(surfaces, list) or not all(isinstance(s, str) for s in surfaces):
        raise ValueError("user_dict parse error: missing or invalid 'surfaces'")
    return UserEntry(reading, list(surfaces))


@dataclass
class UserDict:
    """The user dictionary: a list of entries in file order."""

    entries: list[UserEntry] = field(default_factory=list)

    @classmethod
    def load(cls, path: str | Path) -> UserDict:
        """Read the dictionary from a file; a missing file gives an empty one."""
        path = Path(path)
        if not path.exists():
            log.debug("user_dict: not found, using empty dict")
            return cls()
        text = path.read_text(encoding="utf-8")
        try:
            document = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"user_dict parse error: {exc}") from exc
        tables = document.get("entries", [])
        if not isinstance(tables, list):
            raise ValueError("user_dict parse error: 'entries' is not an array")
        result = cls([_entry_from_table(t) for t in tables])
        log.info("user_dict: loaded %d entries from %s", len(result.entries), path)
        return result

    def save(self, path: str | Path) -> None:
        """Write the dictionary to a file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "entries": [
                {"reading": e.reading, "surfaces": list(e.surfaces)} for e in self.entries
            ]
        }
        path.write_text(tomli_w.dumps(document), encoding="utf-8")
        log.debug("user_dict: saved %d entries to %s", len(self.entries), path)

    def to_map(self) -> dict[str, list[str]]:
        """Reading -> surfaces mapping; a later entry for a reading wins."""
        return {e.reading: list(e.surfaces) for e in self.entries}

    def _find(self, reading: str) -> UserEntry | None:
        return next((e for e in self.entries if e.reading == reading), None)

    def add(self, reading: str, surface: str) -> None:
        """Put surface first for reading, removing any earlier copy of it."""
        entry = self._find(reading)
        if entry is None:
            self.entries.append(UserEntry(reading, [surface]))
            return
        entry.surfaces = [surface] + [s for s in entry.surfaces if s != surface]

    def remove(self, reading: str, surface: str) -> None:
        """Remove surface from reading and drop entries left empty."""
        entry = self._find(reading)
        if entry is not None:
            entry.surfaces = [s for s in entry.surfaces if s != surface]
        self.entries = [e for e in self.entries if e.surfaces]