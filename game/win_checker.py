"""
Win checker for TicTacToe.
Checks if a player has won or if the game is a draw.
"""

from typing import Optional, List, Tuple

import numpy as np

from .board import Board, Mark, Move


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 identical marks in a row
    (horizontally, vertically, or diagonally)

    All checks are pure queries on a Board. Callers must check for a winner
    before checking for a draw - a full board with a line is a win.
    """

    # All possible winning lines (as list of (row, col) tuples)
    WINNING_LINES = [
        # Rows
        [(0, 0), (0, 1), (0, 2)],
        [(1, 0), (1, 1), (1, 2)],
        [(2, 0), (2, 1), (2, 2)],
        # Columns
        [(0, 0), (1, 0), (2, 0)],
        [(0, 1), (1, 1), (2, 1)],
        [(0, 2), (1, 2), (2, 2)],
        # Diagonals
        [(0, 0), (1, 1), (2, 2)],
        [(0, 2), (1, 1), (2, 0)],
    ]

    # Same lines as index arrays, for numpy fancy indexing
    _LINE_ROWS = np.array([[r for r, _ in line] for line in WINNING_LINES])
    _LINE_COLS = np.array([[c for _, c in line] for line in WINNING_LINES])

    def _line_values(self, board: Board) -> np.ndarray:
        """8x3 array: the marks along each winning line."""
        return board.cells[self._LINE_ROWS, self._LINE_COLS]

    def _winning_index(self, board: Board) -> Optional[int]:
        values = self._line_values(board)
        complete = (values[:, 0] != Mark.EMPTY.value) & np.all(
            values == values[:, [0]], axis=1
        )
        hits = np.flatnonzero(complete)
        return int(hits[0]) if hits.size else None

    def check_winner(self, board: Board) -> Optional[Mark]:
        """
        Check if there's a winner.

        Args:
            board: The current board.

        Returns:
            The winning Mark, or None if no winner yet.
        """
        index = self._winning_index(board)
        if index is None:
            return None
        row, col = self.WINNING_LINES[index][0]
        return board.get(row, col)

    def has_winner(self, board: Board) -> bool:
        return self._winning_index(board) is not None

    def is_draw(self, board: Board) -> bool:
        """
        Check if the game is a draw.

        A draw occurs when all cells are filled AND there is no winner.
        """
        return board.is_full() and not self.has_winner(board)

    def get_winning_line(self, board: Board) -> Optional[List[Tuple[int, int]]]:
        """
        Get the winning line if there is one.

        Returns:
            The winning line as list of (row, col), or None.
        """
        index = self._winning_index(board)
        return None if index is None else self.WINNING_LINES[index]

    def wins_with(self, board: Board, move: Move, mark: Mark) -> bool:
        """
        Would placing `mark` at `move` complete a line?

        Evaluated on a new board; the given board is not modified.
        """
        return self.has_winner(board.with_mark(move.row, move.col, mark))

    def outcome(self, board: Board) -> Optional[str]:
        """
        Classify a board: "win", "draw", or None if play continues.
        """
        if self.has_winner(board):
            return "win"
        if self.is_draw(board):
            return "draw"
        return None
