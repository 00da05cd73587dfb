"""
Tests for the rule-based opponent.
"""

import pytest

from game.board import Board, Mark, Move
from game.errors import NoLegalMoveError
from game.opponent import OpponentPolicy


@pytest.fixture
def opponent():
    return OpponentPolicy(Mark.O)


class TestPriorities:

    def test_takes_center_on_empty_board(self, opponent):
        assert opponent.select_move(Board.empty()) == Move(1, 1)
        assert opponent.last_rule == "center"

    def test_takes_first_corner_when_center_taken(self, opponent):
        board = Board.from_rows(["---", "-X-", "---"])
        assert opponent.select_move(board) == Move(0, 0)
        assert opponent.last_rule == "corner"

    def test_corner_order(self, opponent):
        board = Board.from_rows(["X--", "-O-", "---"])
        assert opponent.select_move(board) == Move(0, 2)

        board = Board.from_rows(["O-X", "-X-", "---"])
        # X threatens (2,0) on the anti-diagonal: block beats corner
        assert opponent.select_move(board) == Move(2, 0)
        assert opponent.last_rule == "block"

    def test_first_free_cell_when_no_corner(self, opponent):
        board = Board.from_rows(["XOX", "-X-", "OXO"])
        assert opponent.select_move(board) == Move(1, 0)
        assert opponent.last_rule == "first-free"

    def test_blocks_human_win(self, opponent):
        board = Board.from_rows(["XX-", "-O-", "---"])
        assert opponent.select_move(board) == Move(0, 2)
        assert opponent.last_rule == "block"

    def test_prefers_win_over_block(self, opponent):
        board = Board.from_rows(["OO-", "XX-", "X--"])
        assert opponent.select_move(board) == Move(0, 2)
        assert opponent.last_rule == "win"

    def test_first_winning_cell_in_row_major_order(self, opponent):
        # O can win at (0,2) or (1,0); (0,2) comes first
        board = Board.from_rows(["OO-", "-X-", "O-X"])
        assert opponent.select_move(board) == Move(0, 2)

    def test_first_blocking_cell_in_row_major_order(self, opponent):
        # X threatens (0,2) and (2,0); O blocks the first
        board = Board.from_rows(["XX-", "-O-", "X--"])
        assert opponent.select_move(board) == Move(0, 2)

    def test_opponent_can_play_x(self):
        opponent = OpponentPolicy(Mark.X)
        board = Board.from_rows(["OO-", "-X-", "---"])
        assert opponent.select_move(board) == Move(0, 2)
        assert opponent.last_rule == "block"


class TestContract:

    def test_deterministic(self, opponent):
        board = Board.from_rows(["X--", "---", "--O"])
        moves = {opponent.select_move(board) for _ in range(10)}
        assert len(moves) == 1

    def test_board_not_modified(self, opponent):
        board = Board.from_rows(["XX-", "-O-", "---"])
        before = board.to_rows()
        opponent.select_move(board)
        assert board.to_rows() == before

    def test_full_board_raises(self, opponent):
        with pytest.raises(NoLegalMoveError):
            opponent.select_move(Board.from_rows(["XOX", "XOO", "OXX"]))

    def test_chosen_cell_is_always_empty(self, opponent):
        board = Board.from_rows(["XOX", "OX-", "---"])
        move = opponent.select_move(board)
        assert board.get(move.row, move.col) is Mark.EMPTY
