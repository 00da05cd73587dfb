"""
Shared test fixtures: fake reward capabilities and sessions in known states.
"""

import pytest

from dialogue.session import Session, SessionState
from game.board import Board, Mark
from rewards.capabilities import Capabilities


class FakeRewards:
    """Stands in for the faucet and tweet services, counting every call."""

    def __init__(self, reference="0xabc123", fail_funding=False, fail_announcement=False):
        self.reference = reference
        self.fail_funding = fail_funding
        self.fail_announcement = fail_announcement
        self.fund_calls = []
        self.announce_calls = []

    def request_funds(self, token, amount):
        self.fund_calls.append((token, amount))
        if self.fail_funding:
            raise RuntimeError("faucet is dry")
        return {"transaction_hash": self.reference}

    def post_announcement(self, text):
        self.announce_calls.append(text)
        if self.fail_announcement:
            raise RuntimeError("rate limited")
        return {"id": "tweet-1"}

    def capabilities(self):
        return Capabilities(
            request_funds=self.request_funds,
            post_announcement=self.post_announcement,
            timeout=None,
        )


@pytest.fixture
def rewards():
    return FakeRewards()


@pytest.fixture
def won_session():
    """X has just completed the top row."""
    return Session(
        board=Board.from_rows(["XXX", "OO-", "---"]),
        current_mark=Mark.X,
        state=SessionState.PLAYER_WON,
    )


@pytest.fixture
def scenario_b_session():
    """X on (0,0),(0,1); O on (1,0),(1,1); X to move."""
    return Session(
        board=Board.from_rows(["XX-", "OO-", "---"]),
        current_mark=Mark.X,
        state=SessionState.IN_PROGRESS,
    )
