"""Build rakukan.dict from mozc dictionary TSV files.

Input lines have the mozc layout::

    reading TAB lid TAB rid TAB cost TAB surface

The output layout is the one read by :class:`rakudict.mozc_dict.MozcDict`.
"""

from __future__ import annotations

import argparse
import logging
import struct
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from itertools import groupby
from pathlib import Path
from typing import Iterable, Sequence

from rakudict.mozc_dict import MAGIC, VERSION

log = logging.getLogger(__name__)

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF

_HEADER = struct.Struct("<4sIII")
_INDEX_ENTRY = struct.Struct("<IHIH")
_ENTRY_RECORD = struct.Struct("<IHH")


@dataclass
class Entry:
    """One dictionary line: a reading, its surface form and its cost."""

    reading: str
    surface: str
    cost: int


@dataclass
class ReadingGroup:
    """All surfaces of one reading as (surface, cost), lowest cost first."""

    reading: str
    tokens: list[tuple[str, int]] = field(default_factory=list)


def _parse_u32(text: str) -> int | None:
    """Parse an unsigned 32-bit decimal, accepting an optional leading '+'."""
    digits = text[1:] if text.startswith("+") else text
    if not digits or not all("0" <= c <= "9" for c in digits):
        return None
    value = int(digits)
    return value if value <= U32_MAX else None


def parse_tsv(path: str | Path, max_cost: int) -> list[Entry]:
    """Read a mozc TSV file, skipping comments, malformed lines and costly entries."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")

    entries: list[Entry] = []
    skipped = 0
    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        cols = line.split("\t", 4)
        if len(cols) < 5:
            log.warning(
                "%s:%d missing columns (%d cols): %r", path, lineno, len(cols), line
            )
            skipped += 1
            continue

        reading, cost_text, surface = cols[0], cols[3], cols[4]
        value = _parse_u32(cost_text)
        if value is None:
            log.warning("%s:%d cannot parse cost: %r", path, lineno, cost_text)
            skipped += 1
            continue
        if value > U16_MAX:
            log.debug("cost clamped: %d -> %d", value, U16_MAX)
            value = U16_MAX

        if value > max_cost or not reading or not surface:
            skipped += 1
            continue

        entries.append(Entry(reading, surface, value))

    log.info("%s: %d entries read, %d skipped", path, len(entries), skipped)
    return entries


def build_groups(entries: Iterable[Entry], max_per_reading: int) -> list[ReadingGroup]:
    """Group entries by reading, sorted by reading; tokens sorted by (cost, surface).

    Adjacent repeats of the same surface keep only the cheapest one, and each
    reading keeps at most max_per_reading tokens.
    """
    by_reading: dict[str, list[tuple[str, int]]] = defaultdict(list)
    for entry in entries:
        by_reading[entry.reading].append((entry.surface, entry.cost))

    groups = []
    for reading, tokens in by_reading.items():
        tokens.sort(key=lambda t: (t[1], t[0]))
        unique = [next(run) for _, run in groupby(tokens, key=lambda t: t[0])]
        groups.append(ReadingGroup(reading, unique[: max(max_per_reading, 0)]))

    groups.sort(key=lambda g: g.reading)
    return groups


def write_dict(groups: Sequence[ReadingGroup], output: str | Path) -> None:
    """Write groups (already sorted by reading) as a rakukan.dict file."""
    output = Path(output)

    reading_heap = bytearray()
    surface_heap = bytearray()
    index = bytearray()
    records = bytearray()
    cursor = 0
    n_entries = 0

    for group in groups:
        reading_bytes = group.reading.encode("utf-8")
        reading_off = len(reading_heap)
        reading_heap += reading_bytes

        for surface, cost in group.tokens:
            surface_bytes = surface.encode("utf-8")
            records += _ENTRY_RECORD.pack(
                len(surface_heap) & U32_MAX,
                len(surface_bytes) & U16_MAX,
                cost & U16_MAX,
            )
            surface_heap += surface_bytes
            n_entries += 1

        n_tokens = len(group.tokens) & U16_MAX
        index += _INDEX_ENTRY.pack(
            reading_off & U32_MAX,
            len(reading_bytes) & U16_MAX,
            cursor & U32_MAX,
            n_tokens,
        )
        cursor += n_tokens

    n_readings = len(groups)
    log.info(
        "writing: %d readings, %d entries, reading_heap=%d bytes, surface_heap=%d bytes",
        n_readings,
        n_entries,
        len(reading_heap),
        len(surface_heap),
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("wb") as handle:
        handle.write(_HEADER.pack(MAGIC, VERSION, n_entries & U32_MAX, n_readings & U32_MAX))
        handle.write(index)
        handle.write(reading_heap)
        handle.write(records)
        handle.write(surface_heap)

    log.info("output: %s (%d bytes)", output, output.stat().st_size)


def _u16_arg(text: str) -> int:
    value = _parse_u32(text)
    if value is None or value > U16_MAX:
        raise argparse.ArgumentTypeError(f"expected an integer in 0..{U16_MAX}: {text!r}")
    return value


def _count_arg(text: str) -> int:
    if not text.isdigit():
        raise argparse.ArgumentTypeError(f"expected a non-negative integer: {text!r}")
    return int(text)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rakukan-dict-builder",
        description="Convert mozc TSV dictionaries to the rakukan.dict binary format.",
    )
    parser.add_argument(
        "-i", "--input", dest="inputs", action="append", required=True, type=Path,
        help="input TSV file (may be given several times)",
    )
    parser.add_argument("-o", "--output", required=True, type=Path, help="output file")
    parser.add_argument(
        "--max-per-reading", type=_count_arg, default=50,
        help="maximum candidates per reading (default: 50)",
    )
    parser.add_argument(
        "--max-cost", type=_u16_arg, default=U16_MAX,
        help="drop entries with a higher cost (default: no limit)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point; returns the process exit status."""
    args = _parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    all_entries: list[Entry] = []
    try:
        for path in args.inputs:
            all_entries.extend(parse_tsv(path, args.max_cost))
        log.info("total %d entries", len(all_entries))

        groups = build_groups(all_entries, args.max_per_reading)
        log.info("unique readings: %d", len(groups))

        write_dict(groups, args.output)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"done: {len(groups)} readings -> {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())