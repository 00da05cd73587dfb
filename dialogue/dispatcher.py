"""
Command dispatcher for the TicTacToe reward agent.
One entry point: an action request in, a Transition out.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from game.config import GameConfig
from game.opponent import OpponentPolicy
from rewards.capabilities import Capabilities
from rewards.config import RewardConfig

from .session import (
    Session,
    Transition,
    describe,
    handle_command,
    play_move,
    start_game,
)


ACTIONS = ("start", "move", "print", "command")

USAGE = 'Invalid action. Use "start", "move (row, col)", "print", or enter a command.'
MISSING_MOVE = "Invalid input. Please provide move in format (row, col)"
MISSING_COMMAND = "Invalid input. Please provide a command"


@dataclass(frozen=True)
class ActionRequest:
    """
    One request from the outside: {action, move?, command?}.
    """
    action: str
    move: Optional[str] = None
    command: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ActionRequest":
        """Build a request from a dict payload, ignoring unknown keys."""
        def text(key):
            value = payload.get(key)
            return None if value is None else str(value)

        return cls(
            action=text("action") or "",
            move=text("move"),
            command=text("command"),
        )


def dispatch(
    session: Session,
    request: ActionRequest,
    capabilities: Optional[Capabilities] = None,
    policy: Optional[OpponentPolicy] = None,
    reward_config: Optional[RewardConfig] = None,
) -> Transition:
    """
    Route one action to the session state machine.

    Args:
        session: Current session.
        request: The action to perform. `action` is case-insensitive.
        capabilities: Funding/announcement capabilities for reward commands.
        policy: The agent's move picker.
        reward_config: Reward settings.

    Returns:
        Transition with the session to keep and the text to display.
        Player input problems are reported in the text, never raised.
    """
    action = request.action.strip().lower()

    if action == "start":
        result = start_game(session)
    elif action == "move":
        if not request.move:
            return Transition(session, MISSING_MOVE)
        result = play_move(session, request.move, policy, reward_config)
    elif action == "print":
        return Transition(session, describe(session, reward_config))
    elif action == "command":
        if not request.command:
            return Transition(session, MISSING_COMMAND)
        result = handle_command(session, request.command, capabilities, reward_config)
    else:
        return Transition(session, USAGE)

    if GameConfig.DEBUG_MODE and result.session.state is not session.state:
        print(f"Session: {session.state.value} -> {result.session.state.value} ({action})")

    return result
