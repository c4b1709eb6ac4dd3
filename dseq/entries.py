"""Data stream entry types and their printable form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

STREAM_TYPE_SEQUENCER = 1


class EntryType(IntEnum):
    """Kinds of entries written to the sequencer stream."""

    BLOCK_START = 1
    TRANSACTION = 2
    BLOCK_END = 3


_KINDS = {
    EntryType.BLOCK_START: "block start",
    EntryType.TRANSACTION: "transaction",
    EntryType.BLOCK_END: "block end",
}


@dataclass(frozen=True)
class StreamEntry:
    """One numbered entry in the data stream."""

    number: int
    entry_type: int
    data: bytes = b""


def entry_kind(entry_type):
    """Human-readable name of an entry type, or "unknown"."""
    try:
        return _KINDS[EntryType(entry_type)]
    except ValueError:
        return "unknown"


def format_entry(entry):
    """Format an entry as a line: number, kind and hex data."""
    return f"{entry.number:6d} | {entry_kind(entry.entry_type):>11} | 0x{bytes(entry.data).hex()}"