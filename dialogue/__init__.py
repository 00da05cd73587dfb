"""
Dialogue module for the TicTacToe reward agent.
Session state machine, action dispatcher, and the agent tool wrapper.
"""

from .session import (
    Session,
    SessionState,
    Transition,
    start_game,
    play_move,
    describe,
    handle_command,
    decide_funding,
    decide_announcement,
)
from .dispatcher import ActionRequest, dispatch
from .tool import TicTacToeTool
