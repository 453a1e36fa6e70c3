"""Reader for the rakukan binary dictionary (rakukan.dict).

Layout, all integers little-endian::

    Header  (16 bytes)            magic="RKND", version=1, n_entries, n_readings
    Index   (n_readings x 12)     reading_off:u32, reading_len:u16,
                                  entries_start:u32, n_tokens:u16
    Reading heap                  UTF-8
    Entries (n_entries x 8)       surface_off:u32, surface_len:u16, cost:u16
    Surface heap                  UTF-8

The index is sorted by reading, so lookups use binary search; the entries of
each reading are stored in ascending cost order.
"""

from __future__ import annotations

import logging
import mmap
import os
import struct
from pathlib import Path
from typing import Union

log = logging.getLogger(__name__)

MAGIC = b"RKND"
VERSION = 1

_HEADER = struct.Struct("<4sIII")
_INDEX_ENTRY = struct.Struct("<IHIH")
_ENTRY_RECORD = struct.Struct("<IHH")
_READING_SPAN = struct.Struct("<IH")

HEADER_SIZE = _HEADER.size
INDEX_ENTRY_SIZE = _INDEX_ENTRY.size
ENTRY_RECORD_SIZE = _ENTRY_RECORD.size

Buffer = Union[bytes, bytearray, memoryview, mmap.mmap]


class DictFormatError(ValueError):
    """The data is not a valid rakukan.dict."""


class MozcDict:
    """A binary dictionary held in memory or memory-mapped from a file."""

    def __init__(self, data: Buffer) -> None:
        self._data = data
        size = len(data)
        if size < HEADER_SIZE:
            raise DictFormatError(f"rakukan.dict: file too small ({size}B)")

        magic, version, n_entries, n_readings = _HEADER.unpack_from(data, 0)
        if magic != MAGIC:
            raise DictFormatError("rakukan.dict: magic mismatch (expected RKND)")
        if version != VERSION:
            raise DictFormatError(
                f"rakukan.dict: version mismatch (got {version}, expected {VERSION})"
            )

        self._n_entries = n_entries
        self._n_readings = n_readings
        self._index_off = HEADER_SIZE
        self._reading_heap_off = self._index_off + n_readings * INDEX_ENTRY_SIZE
        self._entries_off = self._reading_heap_off + self._reading_heap_size()
        self._surface_heap_off = self._entries_off + n_entries * ENTRY_RECORD_SIZE

        if self._surface_heap_off > size:
            raise DictFormatError(
                f"rakukan.dict: file too short ({size}B, "
                f"expected >= {self._surface_heap_off}B)"
            )

        log.debug(
            "MozcDict opened: n_readings=%d, n_entries=%d, reading_heap_off=%d, "
            "entries_off=%d, surface_heap_off=%d",
            n_readings,
            n_entries,
            self._reading_heap_off,
            self._entries_off,
            self._surface_heap_off,
        )

    @classmethod
    def open(cls, path: str | Path) -> MozcDict:
        """Memory-map a dictionary file and validate its header."""
        path = Path(path)
        with path.open("rb") as handle:
            size = os.fstat(handle.fileno()).st_size
            if size < HEADER_SIZE:
                raise DictFormatError(f"rakukan.dict: file too small ({size}B)")
            mapped = mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)
        try:
            return cls(mapped)
        except Exception:
            mapped.close()
            raise

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> MozcDict:
        """Build a dictionary from an in-memory copy of the file."""
        return cls(bytes(data))

    def close(self) -> None:
        """Release the memory map, if any."""
        if isinstance(self._data, mmap.mmap) and not self._data.closed:
            self._data.close()

    def __enter__(self) -> MozcDict:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def n_readings(self) -> int:
        """Number of distinct readings."""
        return self._n_readings

    def n_entries(self) -> int:
        """Total number of entries."""
        return self._n_entries

    def lookup(self, reading: str, limit: int) -> list[tuple[str, int]]:
        """Candidates for reading as (surface, cost), lowest cost first, at most limit."""
        idx = self._binary_search(reading)
        if idx is None:
            return []

        _, _, entries_start, n_tokens = _INDEX_ENTRY.unpack_from(
            self._data, self._index_off + idx * INDEX_ENTRY_SIZE
        )
        data = self._data
        size = len(data)
        results: list[tuple[str, int]] = []
        for i in range(min(n_tokens, max(limit, 0))):
            record_off = self._entries_off + (entries_start + i) * ENTRY_RECORD_SIZE
            if record_off + ENTRY_RECORD_SIZE > size:
                log.warning("entry out of range: reading=%r", reading)
                break
            surface_off, surface_len, cost = _ENTRY_RECORD.unpack_from(data, record_off)
            start = self._surface_heap_off + surface_off
            end = start + surface_len
            if end > size:
                log.warning("surface out of range: reading=%r", reading)
                break
            try:
                surface = bytes(data[start:end]).decode("utf-8")
            except UnicodeDecodeError:
                surface = ""
            results.append((surface, cost))
        return results

    def _binary_search(self, reading: str) -> int | None:
        lo, hi = 0, self._n_readings
        while lo < hi:
            mid = (lo + hi) // 2
            current = self._reading_at(mid)
            # An unreadable reading sorts before every valid one.
            if current == reading:
                return mid
            if current is None or current < reading:
                lo = mid + 1
            else:
                hi = mid
        return None

    def _reading_at(self, i: int) -> str | None:
        off, length = _READING_SPAN.unpack_from(
            self._data, self._index_off + i * INDEX_ENTRY_SIZE
        )
        start = self._reading_heap_off + off
        end = start + length
        if end > self._entries_off:
            return None
        try:
            return bytes(self._data[start:end]).decode("utf-8")
        except UnicodeDecodeError:
            return None

    def _reading_heap_size(self) -> int:
        """The reading heap ends at the furthest reading_off + reading_len."""
        size = len(self._data)
        max_end = 0
        for i in range(self._n_readings):
            base = self._index_off + i * INDEX_ENTRY_SIZE
            if base + 8 > size:
                raise DictFormatError("rakukan.dict: index out of range")
            off, length = _READING_SPAN.unpack_from(self._data, base)
            max_end = max(max_end, off + length)
        return max_end