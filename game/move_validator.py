"""
Move validator for TicTacToe.
Parses move text and checks that moves follow the rules.
"""

import re
from typing import Optional, Tuple, List
from dataclasses import dataclass

from .board import Board, Mark, Move
from .errors import IllegalMoveError, ParseError


# "(r, c)", "(r,c)", "r,c" - single ASCII digits, optional parens and whitespace
MOVE_PATTERN = re.compile(r"^\s*\(?\s*([0-9])\s*,\s*([0-9])\s*\)?\s*$")


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. Row and column must be 0-2
    2. Can only place on empty cells
    """

    def parse(self, text: Optional[str]) -> Move:
        """
        Parse move text into a Move.

        Args:
            text: Something like "(0, 2)", "(0,2)" or "0,2".

        Returns:
            The parsed Move.

        Raises:
            ParseError: if the text is not a single-digit (row, col) pair
                with both values in 0-2.
        """
        if text is None:
            raise ParseError(text)

        match = MOVE_PATTERN.match(text)
        if not match:
            raise ParseError(text)

        row, col = int(match.group(1)), int(match.group(2))
        if not Board.in_range(row, col):
            raise ParseError(text)

        return Move(row, col)

    def is_legal(self, board: Board, move: Move) -> bool:
        """True if the move is on the board and the target cell is empty."""
        return self.validate_move(board, move).is_valid

    def validate_move(self, board: Board, move: Move) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current board.
            move: Move to check.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        row, col = move.row, move.col

        # Check if row/col are in valid range
        if not Board.in_range(row, col):
            return ValidationResult(
                is_valid=False,
                error_message=f"Position ({row}, {col}) is out of bounds. Must be 0-2."
            )

        # Check if cell is empty
        occupant = board.get(row, col)
        if occupant is not Mark.EMPTY:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell ({row}, {col}) is already occupied by {occupant.glyph}."
            )

        return ValidationResult(is_valid=True)

    def require_legal(self, board: Board, move: Move) -> None:
        """
        Raise IllegalMoveError unless the move is legal on this board.
        """
        result = self.validate_move(board, move)
        if not result.is_valid:
            raise IllegalMoveError(move.row, move.col, result.error_message)

    def get_valid_moves(self, board: Board) -> List[Tuple[int, int]]:
        """
        Get all valid moves, in row-major order.

        Args:
            board: Current board.

        Returns:
            List of (row, col) valid move positions.
        """
        return board.get_empty_cells()
