"""
Board model for TicTacToe.
A fixed 3x3 grid of marks, stored as a read-only numpy array.

Boards are immutable: placing a mark returns a new Board, so the opponent can
try hypothetical moves without touching the board in play.
"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple
from dataclasses import dataclass, field

import numpy as np

from .config import GameConfig
from .errors import OutOfRangeError


class Mark(Enum):
    """What can sit in a cell."""
    EMPTY = 0
    X = 1   # Human player (moves first)
    O = 2   # Agent

    def opposite(self) -> "Mark":
        """Get the other player's mark."""
        if self is Mark.EMPTY:
            raise ValueError("EMPTY has no opposite")
        return Mark.O if self is Mark.X else Mark.X

    @property
    def glyph(self) -> str:
        """Single character used when rendering."""
        return GameConfig.EMPTY_GLYPH if self is Mark.EMPTY else self.name

    @classmethod
    def from_glyph(cls, char: str) -> "Mark":
        char = char.upper()
        if char in ("X", "O"):
            return cls[char]
        if char in (GameConfig.EMPTY_GLYPH, " ", "."):
            return cls.EMPTY
        raise ValueError(f"Unknown board glyph: {char!r}")


@dataclass(frozen=True)
class Move:
    """
    A move request. Transient, never stored on the board.
    Coordinates are not range checked here; see MoveValidator.
    """
    row: int    # Row (0-2)
    col: int    # Column (0-2)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


def _empty_grid() -> np.ndarray:
    size = GameConfig.BOARD_SIZE
    return np.full((size, size), Mark.EMPTY.value, dtype=np.int8)


@dataclass(frozen=True, eq=False)
class Board:
    """
    The 3x3 TicTacToe board.

    Invariants:
    - at most 9 non-empty cells (trivially, it's a 3x3 grid)
    - a cell never goes back to EMPTY; only Board.empty() gives a clean board
    """

    cells: np.ndarray = field(default_factory=_empty_grid)

    def __post_init__(self):
        size = GameConfig.BOARD_SIZE
        grid = np.array(self.cells, dtype=np.int8)
        if grid.shape != (size, size):
            raise ValueError(f"Board must be {size}x{size}, got shape {grid.shape}")
        valid = [mark.value for mark in Mark]
        if not np.all(np.isin(grid, valid)):
            bad = sorted(set(grid[~np.isin(grid, valid)].tolist()))
            raise ValueError(f"Board cells must be one of {valid}, got {bad}")
        grid.setflags(write=False)
        object.__setattr__(self, "cells", grid)

    @classmethod
    def empty(cls) -> "Board":
        """A fresh board with all 9 cells empty (the reset operation)."""
        return cls()

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Board":
        """
        Build a board from text rows.

        Args:
            rows: Three strings of three glyphs each, e.g. ["XO-", "-X-", "--O"].

        Returns:
            The corresponding Board.
        """
        grid = [[Mark.from_glyph(char).value for char in row] for row in rows]
        return cls(np.array(grid, dtype=np.int8))

    @staticmethod
    def in_range(row: int, col: int) -> bool:
        size = GameConfig.BOARD_SIZE
        return 0 <= row < size and 0 <= col < size

    def get(self, row: int, col: int) -> Mark:
        """
        Get the mark in a cell.

        Raises:
            OutOfRangeError: if row or col is not in 0-2.
        """
        if not self.in_range(row, col):
            raise OutOfRangeError(row, col)
        return Mark(int(self.cells[row, col]))

    def with_mark(self, row: int, col: int, mark: Mark) -> "Board":
        """
        Return a copy of this board with one cell overwritten.

        No legality check is done - callers validate first. The board in
        use is left untouched.

        Raises:
            OutOfRangeError: if row or col is not in 0-2.
            ValueError: if asked to write EMPTY (only a reset clears cells).
        """
        if not self.in_range(row, col):
            raise OutOfRangeError(row, col)
        if mark is Mark.EMPTY:
            raise ValueError("Cells can only be cleared by resetting the board")
        grid = self.cells.copy()
        grid[row, col] = mark.value
        return Board(grid)

    def get_empty_cells(self) -> List[Tuple[int, int]]:
        """
        Get all empty cells on the board.

        Returns:
            List of (row, col) tuples, in row-major order.
        """
        rows, cols = np.nonzero(self.cells == Mark.EMPTY.value)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def is_full(self) -> bool:
        return not np.any(self.cells == Mark.EMPTY.value)

    def count(self, mark: Mark) -> int:
        return int(np.count_nonzero(self.cells == mark.value))

    def first_empty(self, cells: Iterable[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        """Return the first of the given cells that is empty, if any."""
        for row, col in cells:
            if self.get(row, col) is Mark.EMPTY:
                return (row, col)
        return None

    def to_rows(self) -> List[str]:
        return ["".join(Mark(int(v)).glyph for v in row) for row in self.cells]

    def render(self) -> str:
        """
        Render the board as a fixed-width text grid.

        Example:
                 0   1   2
            0    X | - | O
                -----------
            1    - | X | -
                -----------
            2    - | - | O
        """
        size = GameConfig.BOARD_SIZE
        width = GameConfig.ROW_PREFIX_WIDTH
        lines = [" " * width + "   ".join(str(col) for col in range(size))]

        for row in range(size):
            cells = GameConfig.CELL_SEPARATOR.join(
                Mark(int(v)).glyph for v in self.cells[row]
            )
            lines.append(f"{str(row).ljust(width)}{cells}")
            if row < size - 1:
                lines.append(GameConfig.ROW_SEPARATOR)

        return "\n".join(lines)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.cells, other.cells))

    def __hash__(self) -> int:
        return hash(self.cells.tobytes())

    def __repr__(self) -> str:
        return f"Board({self.to_rows()!r})"


# Quick test
if __name__ == "__main__":
    print("Testing Board...")

    board = Board.empty()
    board = board.with_mark(1, 1, Mark.X).with_mark(0, 2, Mark.O)
    print(board.render())
    print(f"Empty cells: {board.get_empty_cells()}")

    assert board.get(1, 1) is Mark.X
    assert Board.empty().get(1, 1) is Mark.EMPTY

    print("\nBoard test done!")
