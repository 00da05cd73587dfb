"""
Errors raised by the TicTacToe game logic.

ParseError and IllegalMoveError are user mistakes: the session layer turns
them into guidance text. NoLegalMoveError means the caller asked the
opponent to move on a full board and is never shown to a player.
"""

from typing import Optional


class GameError(Exception):
    """Base class for game logic errors."""


class OutOfRangeError(GameError):
    """A row or column outside the 3x3 board."""

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        super().__init__(f"Position ({row}, {col}) is off the board. Must be 0-2.")


class ParseError(GameError):
    """Move text that is not in (row, col) format."""

    def __init__(self, text: Optional[str]):
        self.text = text
        super().__init__(
            "Invalid move format. Please use (row, col) format, e.g., (0, 2)"
        )


class IllegalMoveError(GameError):
    """A well-formed move that targets an occupied or off-board cell."""

    def __init__(self, row: int, col: int, reason: Optional[str] = None):
        self.row = row
        self.col = col
        self.reason = reason or "The cell is either occupied or out of bounds."
        super().__init__(f"Invalid move at ({row}, {col}). {self.reason}")


class NoLegalMoveError(GameError):
    """The opponent was asked to move but the board is full."""
