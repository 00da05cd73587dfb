"""
Opponent player for TicTacToe.
Picks moves with a fixed, priority-ordered set of rules.
"""

from typing import Optional, Tuple

from .board import Board, Mark, Move
from .config import GameConfig
from .errors import NoLegalMoveError
from .win_checker import WinChecker


class OpponentPolicy:
    """
    A deterministic rule-based TicTacToe opponent.

    Rules, in priority order:
    1. Win now if a move completes one of our lines
    2. Block the other player's winning move
    3. Take the center
    4. Take the first free corner: (0,0), (0,2), (2,0), (2,2)
    5. Take the first free cell, scanning row by row

    It is not a perfect player - it can be beaten with a fork.
    """

    def __init__(self, mark: Mark = Mark.O, config: Optional[GameConfig] = None):
        """
        Initialize the opponent.

        Args:
            mark: Which mark the opponent plays (default: O)
            config: Game settings (default: GameConfig)
        """
        self.mark = mark
        self.config = config or GameConfig()
        self.win_checker = WinChecker()

        # Which rule chose the last move (for debugging)
        self.last_rule: Optional[str] = None

    def select_move(self, board: Board) -> Move:
        """
        Choose the opponent's move for the given board.

        Args:
            board: Current board. Not modified.

        Returns:
            The chosen Move. Same board in, same move out.

        Raises:
            NoLegalMoveError: if the board is full. Callers must check for a
                win or draw before asking for a move.
        """
        if board.is_full():
            raise NoLegalMoveError("Opponent asked to move on a full board")

        rule, cell = self._choose(board)
        self.last_rule = rule

        if self.config.DEBUG_MODE:
            print(f"Opponent ({self.mark.name}) plays {cell} by rule: {rule}")

        return Move(*cell)

    def _choose(self, board: Board) -> Tuple[str, Tuple[int, int]]:
        win = self.find_winning_move(board, self.mark)
        if win is not None:
            return "win", win.as_tuple()

        block = self.find_winning_move(board, self.mark.opposite())
        if block is not None:
            return "block", block.as_tuple()

        if board.get(*self.config.CENTER) is Mark.EMPTY:
            return "center", self.config.CENTER

        corner = board.first_empty(self.config.CORNERS)
        if corner is not None:
            return "corner", corner

        return "first-free", board.get_empty_cells()[0]

    def find_winning_move(self, board: Board, mark: Mark) -> Optional[Move]:
        """
        Find the first empty cell (row-major) where `mark` would complete a line.

        Args:
            board: Board to search. Not modified.
            mark: Whose line to complete.

        Returns:
            The Move, or None if no such cell exists.
        """
        for row, col in board.get_empty_cells():
            move = Move(row, col)
            if self.win_checker.wins_with(board, move, mark):
                return move
        return None


# Quick test
if __name__ == "__main__":
    print("Testing OpponentPolicy...")

    opponent = OpponentPolicy()

    # Test 1: opponent should block a winning move
    board = Board.from_rows(["XX-", "-O-", "---"])
    print(board.render())
    print("\nX is about to win with (0,2)!")
    move = opponent.select_move(board)
    print(f"Opponent's move: {move} ({opponent.last_rule})")
    assert move == Move(0, 2), f"Expected (0, 2), got {move}"

    # Test 2: opponent should take a winning move over a block
    board = Board.from_rows(["OO-", "XX-", "X--"])
    print(board.render())
    move = opponent.select_move(board)
    print(f"Opponent's move: {move} ({opponent.last_rule})")
    assert move == Move(0, 2), f"Expected (0, 2), got {move}"

    print("\nOpponentPolicy test done!")
