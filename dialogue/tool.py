"""
The TicTacToe game packaged as an agent tool.

Keeps one Session per conversation in memory (nothing survives a restart)
and makes sure two actions never run against the same session at once.
Different conversations don't block each other.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Mapping, Optional, Union

from game.opponent import OpponentPolicy
from rewards.capabilities import Capabilities
from rewards.config import RewardConfig

from .dispatcher import ActionRequest, dispatch
from .session import AGENT, Session


DEFAULT_CONVERSATION = "default"


class TicTacToeTool:
    """
    Play Tic-Tac-Toe against the agent; winners can claim faucet funds and
    tweet about it.
    """

    NAME = "tic_tac_toe"
    DESCRIPTION = (
        "Play Tic-Tac-Toe against an AI agent. Winners can receive USDC faucet "
        "funds and tweet about their victory!"
    )
    ARGS_SCHEMA = {
        "type": "object",
        "properties": {
            "action": {
                "type": "string",
                "description": "The action to perform: start, move, print, or command",
            },
            "move": {
                "type": "string",
                "description": "The move in format (row, col), e.g., (0, 2)",
            },
            "command": {
                "type": "string",
                "description": "Command to execute (yes for faucet, yes to tweet about the win)",
            },
        },
        "required": ["action"],
    }

    def __init__(
        self,
        capabilities: Optional[Capabilities] = None,
        policy: Optional[OpponentPolicy] = None,
        reward_config: Optional[RewardConfig] = None,
    ):
        """
        Initialize the tool.

        Args:
            capabilities: External funding/announcement capabilities.
                Without them, reward requests are reported as unavailable.
            policy: The agent's move picker (default: OpponentPolicy for O).
            reward_config: Reward settings (default: RewardConfig).
        """
        self.capabilities = capabilities or Capabilities()
        self.policy = policy or OpponentPolicy(AGENT)
        self.reward_config = reward_config or RewardConfig()

        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, conversation_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(conversation_id)
            if lock is None:
                lock = self._locks[conversation_id] = threading.Lock()
            return lock

    @contextmanager
    def _locked(self, conversation_id: str):
        """Hold the conversation's lock. Retries if reset() dropped it meanwhile."""
        while True:
            lock = self._lock_for(conversation_id)
            lock.acquire()
            with self._registry_lock:
                current = self._locks.get(conversation_id) is lock
            if current:
                break
            lock.release()
        try:
            yield
        finally:
            lock.release()

    def __call__(
        self,
        payload: Union[ActionRequest, Mapping[str, Any]],
        conversation_id: str = DEFAULT_CONVERSATION,
    ) -> str:
        """
        Run one action for a conversation and return the reply text.

        Args:
            payload: An ActionRequest or a {action, move?, command?} dict.
            conversation_id: Which conversation's game to act on.
        """
        request = payload if isinstance(payload, ActionRequest) else ActionRequest.from_mapping(payload)

        with self._locked(conversation_id):
            session = self._sessions.get(conversation_id, Session())
            result = dispatch(
                session,
                request,
                capabilities=self.capabilities,
                policy=self.policy,
                reward_config=self.reward_config,
            )
            self._sessions[conversation_id] = result.session

        return result.message

    def session(self, conversation_id: str = DEFAULT_CONVERSATION) -> Session:
        """Current session for a conversation (IDLE if it never played)."""
        with self._registry_lock:
            return self._sessions.get(conversation_id, Session())

    def reset(self, conversation_id: str = DEFAULT_CONVERSATION) -> None:
        """Forget a conversation's game, and its lock."""
        with self._locked(conversation_id):
            with self._registry_lock:
                self._sessions.pop(conversation_id, None)
                self._locks.pop(conversation_id, None)
