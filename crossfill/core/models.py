"""Data models shared by the dictionary index and the board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .constants import UNKNOWN_LETTER, Direction


@dataclass(frozen=True)
class DictionaryEntry:
    """A loaded dictionary word: canonical key plus its original spelling and gloss."""

    key: str
    surface: str
    explanation: str


@dataclass
class Cell:
    """A board cell. Open cells hold at most one letter."""

    blocked: bool = False
    letter: Optional[str] = None


@dataclass(frozen=True)
class SlotCell:
    """Coordinates of a slot cell plus its row-major linear id."""

    row: int
    col: int
    cell_id: int


@dataclass
class Slot:
    """A maximal run of open cells in one row or column.

    ``cells`` holds the board's own :class:`Cell` objects, so a letter written
    through one slot is seen by every crossing slot.
    """

    direction: Direction
    positions: List[SlotCell]
    cells: List[Cell] = field(repr=False, compare=False)

    @property
    def length(self) -> int:
        return len(self.positions)

    @property
    def start(self) -> Tuple[int, int]:
        first = self.positions[0]
        return first.row, first.col

    @property
    def cell_ids(self) -> List[int]:
        return [position.cell_id for position in self.positions]

    def pattern(self, unknown: str = UNKNOWN_LETTER) -> str:
        """Return the current fill state as a query pattern."""

        return "".join(cell.letter or unknown for cell in self.cells)

    def is_filled(self) -> bool:
        return all(cell.letter is not None for cell in self.cells)

    def fill(self, word: str) -> List[Optional[str]]:
        """Write ``word`` into the slot and return the letters it replaced."""

        if len(word) != self.length:
            raise ValueError(f"Word {word!r} does not fit slot of length {self.length}")
        previous = [cell.letter for cell in self.cells]
        for cell, letter in zip(self.cells, word):
            cell.letter = letter
        return previous

    def restore(self, previous: Sequence[Optional[str]]) -> None:
        """Undo a :meth:`fill` using the letters it returned."""

        for cell, letter in zip(self.cells, previous):
            cell.letter = letter

    def intersections(self, other: "Slot") -> List[Tuple[int, int]]:
        """Return ``(index_in_self, index_in_other)`` for every shared cell."""

        if other.direction == self.direction:
            return []
        other_index = {cell_id: index for index, cell_id in enumerate(other.cell_ids)}
        return [
            (index, other_index[cell_id])
            for index, cell_id in enumerate(self.cell_ids)
            if cell_id in other_index
        ]
