"""Shared constants and enumerations for slot extraction and word lookup."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Slot orientations supported by the board."""

    ACROSS = "ACROSS"
    DOWN = "DOWN"


# Positions 0..5 are packed into the bucket key, one byte each.
MAX_FAST_LENGTH = 6
KEY_BITS_PER_LETTER = 8

# Word identifiers are 16-bit in the index, so 65536 words at most.
MAX_WORD_IDS = 1 << 16

UNKNOWN_LETTER = "?"
DEFAULT_ENCODING = "cp1251"
MIN_SLOT_LENGTH = 2
BLOCKED_BYTE = 0x23


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def cell_id(self, row: int, col: int) -> int:
        return row * self.cols + col
