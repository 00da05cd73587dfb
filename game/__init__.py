"""
Game module for the TicTacToe reward agent.
Handles the board, rules, and the rule-based opponent.
"""

from .config import GameConfig
from .errors import (
    GameError,
    OutOfRangeError,
    ParseError,
    IllegalMoveError,
    NoLegalMoveError,
)
from .board import Board, Mark, Move
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker
from .opponent import OpponentPolicy
