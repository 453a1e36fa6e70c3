"""Parser for SKK dictionaries (okuri-nasi entries only)."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import IO, Union

log = logging.getLogger(__name__)

SkkDict = dict[str, list[str]]

Source = Union[str, bytes, IO[str], IO[bytes], Iterable[str], Iterable[bytes]]


def _iter_lines(source: Source) -> Iterator[str]:
    if isinstance(source, str):
        yield from source.split("\n")
        return
    raw_lines = source.split(b"\n") if isinstance(source, (bytes, bytearray)) else source
    for line in raw_lines:
        if isinstance(line, str):
            yield line
            continue
        try:
            yield bytes(line).decode("utf-8")
        except UnicodeDecodeError as exc:
            log.warning("SKK parse: line read error: %s", exc)


def parse(source: Source) -> SkkDict:
    """Parse SKK dictionary text into a reading -> candidates mapping.

    Only entries in the okuri-nasi section are kept; okuri-ari entries are skipped.
    """
    result: SkkDict = {}
    in_okuri_nasi = False
    skipped_okuri_ari = 0
    parsed = 0

    for raw in _iter_lines(source):
        line = raw.strip()

        if line.startswith(";"):
            if "okuri-nasi" in line:
                in_okuri_nasi = True
                log.debug("SKK: okuri-nasi section started")
            elif "okuri-ari" in line:
                in_okuri_nasi = False
            continue

        if not line:
            continue

        reading, sep, rest = line.partition(" ")
        if not sep:
            continue

        last = reading[-1:]
        if not in_okuri_nasi or ("a" <= last <= "z" and last != ""):
            skipped_okuri_ari += 1
            continue

        candidates = parse_candidates(rest)
        if not candidates:
            continue

        result.setdefault(to_hiragana(reading), []).extend(candidates)
        parsed += 1

    log.debug("SKK: parsed %d entries, skipped %d okuri-ari", parsed, skipped_okuri_ari)
    return result


def _is_ascii_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or code == 0x7F


def parse_candidates(text: str) -> list[str]:
    """Split a "/cand1/cand2;note/" field into candidates, dropping annotations."""
    candidates = []
    for token in text.split("/"):
        if not token:
            continue
        candidate = token.split(";", 1)[0]
        if not candidate or all(_is_ascii_control(c) for c in candidate):
            continue
        candidates.append(candidate)
    return candidates


def to_hiragana(text: str) -> str:
    """Convert katakana (U+30A1..U+30F6) to hiragana; other characters are kept."""
    return "".join(
        chr(ord(c) - 0x60) if 0x30A1 <= ord(c) <= 0x30F6 else c for c in text
    )


def decode_eucjp(data: bytes) -> str:
    """Decode EUC-JP bytes, replacing invalid sequences with U+FFFD."""
    try:
        return data.decode("euc_jp")
    except UnicodeDecodeError:
        log.warning(
            "SKK decode_eucjp: encoding errors detected "
            "(non-EUC-JP bytes replaced with U+FFFD)"
        )
        return data.decode("euc_jp", errors="replace")