"""Board representation and slot extraction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from ..core.constants import (
    BLOCKED_BYTE,
    DEFAULT_ENCODING,
    MIN_SLOT_LENGTH,
    UNKNOWN_LETTER,
    Bounds,
    Direction,
)
from ..core.exceptions import GridFormatError
from ..core.models import Cell, Slot, SlotCell
from ..data.normalization import is_letter_code, upper_code
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

GRID_REMAP_OFFSET = 0x40
GRID_LETTER_THRESHOLD = 0xC0

BLOCKED_SYMBOL = "#"
EMPTY_SYMBOLS = frozenset({".", UNKNOWN_LETTER})


@dataclass
class GridConfig:
    """Configuration values for decoding grid files."""

    blocked_byte: int = BLOCKED_BYTE
    encoding: str = DEFAULT_ENCODING
    min_slot_length: int = MIN_SLOT_LENGTH

    def __post_init__(self) -> None:
        if self.min_slot_length < MIN_SLOT_LENGTH:
            raise ValueError(
                f"min_slot_length must be at least {MIN_SLOT_LENGTH}, got {self.min_slot_length}"
            )


def remap_grid_byte(value: int) -> int:
    """Shift a legacy cell byte into the Windows-1251 letter range when it lands there."""

    shifted = (value + GRID_REMAP_OFFSET) & 0xFF
    if shifted >= GRID_LETTER_THRESHOLD:
        return shifted
    return value


def slot_order(slot: Slot) -> Tuple[int, int, int]:
    """Sort key: shortest first, then across before down, then by first cell id."""

    direction_rank = 0 if slot.direction == Direction.ACROSS else 1
    return slot.length, direction_rank, slot.positions[0].cell_id


class Board:
    """Rectangular grid of blocked and open cells."""

    def __init__(self, cells: List[List[Cell]], config: GridConfig | None = None) -> None:
        if not cells or not cells[0]:
            raise GridFormatError("Board needs at least one row and one column")
        width = len(cells[0])
        if any(len(row) != width for row in cells):
            raise GridFormatError("Board rows must all have the same width")
        self.config = config or GridConfig()
        self.cells = cells
        self.bounds = Bounds(rows=len(cells), cols=width)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_rows(cls, rows: Sequence[str], config: GridConfig | None = None) -> "Board":
        """Build a board from text rows: ``#`` blocked, ``.``/``?`` empty, letters prefilled."""

        cells: List[List[Cell]] = []
        for text in rows:
            row: List[Cell] = []
            for symbol in text:
                if symbol == BLOCKED_SYMBOL:
                    row.append(Cell(blocked=True))
                elif symbol in EMPTY_SYMBOLS:
                    row.append(Cell())
                else:
                    row.append(Cell(letter=symbol.upper()))
            cells.append(row)
        return cls(cells, config)

    @classmethod
    def from_bytes(cls, data: bytes, config: GridConfig | None = None) -> "Board":
        """Parse the binary grid format: rows, cols, then one byte per cell."""

        config = config or GridConfig()
        if len(data) < 2:
            raise GridFormatError("Grid data is missing its dimension header")
        rows, cols = data[0], data[1]
        if rows == 0 or cols == 0:
            raise GridFormatError(f"Grid has invalid dimensions {rows}x{cols}")
        body = data[2:]
        if len(body) < rows * cols:
            raise GridFormatError(
                f"Grid body has {len(body)} cells, expected {rows * cols}"
            )

        cells = [
            [cls._decode_cell(body[r * cols + c], config) for c in range(cols)]
            for r in range(rows)
        ]
        LOGGER.debug("Parsed %sx%s grid", rows, cols)
        return cls(cells, config)

    @classmethod
    def load(cls, path: Path | str, config: GridConfig | None = None) -> "Board":
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise GridFormatError(f"Could not read grid file {path}: {exc}") from exc
        return cls.from_bytes(data, config)

    @staticmethod
    def _decode_cell(value: int, config: GridConfig) -> Cell:
        if value == config.blocked_byte:
            return Cell(blocked=True)
        code = remap_grid_byte(value)
        if not is_letter_code(code):
            return Cell()
        return Cell(letter=bytes([upper_code(code)]).decode(config.encoding))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def is_blocked(self, row: int, col: int) -> bool:
        return self.cells[row][col].blocked

    def rows(self) -> List[str]:
        """Text rows in the :meth:`from_rows` format."""

        return [
            "".join(
                BLOCKED_SYMBOL if cell.blocked else (cell.letter or ".")
                for cell in row
            )
            for row in self.cells
        ]

    # ------------------------------------------------------------------
    # Slot extraction
    # ------------------------------------------------------------------
    def extract_slots(self) -> List[Slot]:
        """Return every maximal run of open cells, in :func:`slot_order`."""

        slots: List[Slot] = []
        for r in range(self.bounds.rows):
            slots.extend(self._runs(Direction.ACROSS, [(r, c) for c in range(self.bounds.cols)]))
        for c in range(self.bounds.cols):
            slots.extend(self._runs(Direction.DOWN, [(r, c) for r in range(self.bounds.rows)]))
        slots.sort(key=slot_order)
        LOGGER.debug("Extracted %s slots from %sx%s board", len(slots), self.bounds.rows, self.bounds.cols)
        return slots

    def _runs(self, direction: Direction, line: Sequence[Tuple[int, int]]) -> Iterable[Slot]:
        run: List[Tuple[int, int]] = []
        for row, col in line:
            if not self.is_blocked(row, col):
                run.append((row, col))
                continue
            if len(run) >= self.config.min_slot_length:
                yield self._make_slot(direction, run)
            run = []
        if len(run) >= self.config.min_slot_length:
            yield self._make_slot(direction, run)

    def _make_slot(self, direction: Direction, coords: Sequence[Tuple[int, int]]) -> Slot:
        return Slot(
            direction=direction,
            positions=[SlotCell(r, c, self.bounds.cell_id(r, c)) for r, c in coords],
            cells=[self.cells[r][c] for r, c in coords],
        )

    @staticmethod
    def crossings(slots: Sequence[Slot]) -> List[Tuple[int, int, int, int]]:
        """Return ``(slot_a, index_a, slot_b, index_b)`` for every shared cell.

        Slot numbers are positions in ``slots``; each crossing appears once
        with ``slot_a < slot_b``.
        """

        result: List[Tuple[int, int, int, int]] = []
        for a, first in enumerate(slots):
            for b in range(a + 1, len(slots)):
                for index_a, index_b in first.intersections(slots[b]):
                    result.append((a, index_a, b, index_b))
        return result
