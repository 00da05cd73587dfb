"""
Game session state machine for the TicTacToe reward agent.

A Session is an immutable value: the board, whose turn it is, where the
conversation is, and the reference of any reward already paid out. Every
transition is a function that takes a Session and returns a Transition
(new Session + text for the player). Only the reward transitions touch the
outside world, through the injected Capabilities.

    IDLE --start--> IN_PROGRESS --X wins--> PLAYER_WON (funding offer)
                         |                      |
                         |--O wins--> OPPONENT_WON
                         |--full----> DRAW      v
                                  AWAITING_ANNOUNCEMENT_DECISION --> IDLE

`start` works from any state.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from game.board import Board, Mark, Move
from game.errors import IllegalMoveError, ParseError
from game.move_validator import MoveValidator
from game.opponent import OpponentPolicy
from game.win_checker import WinChecker
from rewards.capabilities import Capabilities, ExternalCapabilityError
from rewards.config import RewardConfig


class SessionState(Enum):
    """Where the game and the conversation around it stand."""
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    PLAYER_WON = "player_won"
    # The funding offer is made as soon as the player wins
    AWAITING_FUNDING_DECISION = "player_won"
    OPPONENT_WON = "opponent_won"
    DRAW = "draw"
    AWAITING_ANNOUNCEMENT_DECISION = "awaiting_announcement_decision"


HUMAN = Mark.X
AGENT = Mark.O

NO_ACTIVE_GAME = "No active game. Start a new game with the 'start' command."
MOVE_PROMPT = "Your turn! Make your move (row, col):"
ANNOUNCEMENT_OFFER = "Would you like me to tweet about your victory? (yes/no)"
INVALID_COMMAND = (
    "Invalid command. Available commands: 'yes' (or 'request faucet') to claim "
    "faucet funds after a win, and 'yes' to tweet about your victory."
)


@dataclass(frozen=True)
class Session:
    """
    The complete state of one conversation's game.

    Tracks:
    - The 3x3 board
    - Whose mark goes next
    - Where the game/reward dialogue is
    - The reward transaction reference, once funds were paid for this win
    - Move history (mark, move) in play order
    """
    board: Board = field(default_factory=Board.empty)
    current_mark: Mark = HUMAN
    state: SessionState = SessionState.IDLE
    reward_reference: Optional[str] = None
    history: Tuple[Tuple[Mark, Move], ...] = ()

    @property
    def active(self) -> bool:
        """True while moves are being accepted."""
        return self.state is SessionState.IN_PROGRESS

    def place(self, mark: Mark, move: Move) -> "Session":
        """Put a mark on the board (no validation) and record it."""
        return replace(
            self,
            board=self.board.with_mark(move.row, move.col, mark),
            history=self.history + ((mark, move),),
        )


@dataclass(frozen=True)
class Transition:
    """Result of an action: the session to keep and the reply to show."""
    session: Session
    message: str


def board_text(board: Board) -> str:
    return f"Current board:\n\n{board.render()}"


def funding_offer(config: RewardConfig) -> str:
    return (
        "Congratulations! As a victory reward, would you like me to request "
        f"{config.FAUCET_AMOUNT} {config.FAUCET_TOKEN} faucet funds for you? (yes/no)"
    )


def _normalize(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def is_funding_request(text: Optional[str]) -> bool:
    """'yes', or anything mentioning 'request' or 'faucet'."""
    norm = _normalize(text)
    return norm == "yes" or "request" in norm or "faucet" in norm


def is_affirmative(text: Optional[str]) -> bool:
    return _normalize(text) == "yes"


# ==================== GAME TRANSITIONS ====================

def start_game(session: Optional[Session] = None) -> Transition:
    """
    Start a fresh game from any state.

    The board is cleared, X moves first, and any previous reward reference
    is forgotten.
    """
    fresh = Session(state=SessionState.IN_PROGRESS)
    message = (
        "New game started! You are X, Agent is O.\n"
        f"{board_text(fresh.board)}\n"
        "Make your move using (row, col) format, e.g., (0, 2)"
    )
    return Transition(fresh, message)


def play_move(
    session: Session,
    move_text: Optional[str],
    policy: Optional[OpponentPolicy] = None,
    reward_config: Optional[RewardConfig] = None,
) -> Transition:
    """
    Apply the player's move and, if the game goes on, the agent's reply.

    Bad input never raises: unparseable text and illegal cells come back as
    guidance and the session is returned unchanged.

    Args:
        session: Current session.
        move_text: The player's move, e.g. "(0, 2)".
        policy: The agent's move picker (default: OpponentPolicy for O).
        reward_config: Reward settings for the winner's offer.

    Returns:
        Transition with the updated session and the reply text.
    """
    policy = policy or OpponentPolicy(AGENT)
    reward_config = reward_config or RewardConfig()
    validator = MoveValidator()
    checker = WinChecker()

    if not session.active:
        return Transition(session, NO_ACTIVE_GAME)

    try:
        move = validator.parse(move_text)
        validator.require_legal(session.board, move)
    except ParseError as e:
        return Transition(session, str(e))
    except IllegalMoveError as e:
        return Transition(session, f"{e}\n{board_text(session.board)}")

    # Player's move
    session = session.place(HUMAN, move)
    response = f"You placed {HUMAN.name} at {move}.\n{board_text(session.board)}\n"

    outcome = checker.outcome(session.board)
    if outcome == "win":
        session = replace(session, state=SessionState.PLAYER_WON)
        return Transition(
            session,
            f"{response}\nPlayer {HUMAN.name} wins! Game Over.\n\n{funding_offer(reward_config)}"
        )
    if outcome == "draw":
        session = replace(session, state=SessionState.DRAW)
        return Transition(session, f"{response}It's a draw! Game Over.")

    # Agent's move
    session = replace(session, current_mark=AGENT)
    reply = policy.select_move(session.board)
    session = session.place(AGENT, reply)
    response += (
        "\nAgent's turn...\n"
        f"Agent placed {AGENT.name} at {reply}.\n{board_text(session.board)}\n"
    )

    outcome = checker.outcome(session.board)
    if outcome == "win":
        session = replace(session, state=SessionState.OPPONENT_WON)
        return Transition(session, f"{response}Agent ({AGENT.name}) wins! Game Over.")
    if outcome == "draw":
        session = replace(session, state=SessionState.DRAW)
        return Transition(session, f"{response}It's a draw! Game Over.")

    session = replace(session, current_mark=HUMAN)
    return Transition(session, f"{response}{MOVE_PROMPT}")


def describe(session: Session, reward_config: Optional[RewardConfig] = None) -> str:
    """
    Text for the `print` action. Never changes anything.
    """
    reward_config = reward_config or RewardConfig()
    state = session.state

    if state is SessionState.IDLE:
        return NO_ACTIVE_GAME

    if state is SessionState.IN_PROGRESS:
        return f"{board_text(session.board)}\n\n{MOVE_PROMPT}"

    headers = {
        SessionState.PLAYER_WON: f"Game over - you won!\n\n{funding_offer(reward_config)}",
        SessionState.OPPONENT_WON: f"Game over - Agent ({AGENT.name}) won.",
        SessionState.DRAW: "Game over - it's a draw.",
        SessionState.AWAITING_ANNOUNCEMENT_DECISION: f"Game over - you won!\n\n{ANNOUNCEMENT_OFFER}",
    }
    return f"{board_text(session.board)}\n\n{headers[state]}"


# ==================== REWARD TRANSITIONS ====================

def _already_rewarded(session: Session, config: RewardConfig) -> Transition:
    url = config.EXPLORER_TX_URL.format(reference=session.reward_reference)
    return Transition(
        session,
        f"You've already received faucet funds for this win. Transaction: {url}"
    )


def decide_funding(
    session: Session,
    text: Optional[str],
    capabilities: Capabilities,
    reward_config: Optional[RewardConfig] = None,
) -> Transition:
    """
    Handle the answer to the funding offer (session must be PLAYER_WON).

    Yes -> one funding call, then the announcement offer. Anything else
    skips straight to the announcement offer. A failed call is reported
    and the dialogue still moves on.
    """
    config = reward_config or RewardConfig()
    next_state = SessionState.AWAITING_ANNOUNCEMENT_DECISION

    if not is_funding_request(text):
        return Transition(
            replace(session, state=next_state),
            f"No problem! {ANNOUNCEMENT_OFFER}"
        )

    if session.reward_reference is not None:
        return _already_rewarded(session, config)

    try:
        reference = capabilities.fund(
            config.FAUCET_TOKEN, config.FAUCET_AMOUNT, timeout=config.CAPABILITY_TIMEOUT_S
        )
    except ExternalCapabilityError as e:
        print(f"ERROR: Error requesting faucet funds: {e}")
        return Transition(
            replace(session, state=next_state),
            f"Sorry, there was an error requesting faucet funds ({e.reason})\n"
            f"Would you like me to tweet about your victory instead? (yes/no)"
        )

    url = config.EXPLORER_TX_URL.format(reference=reference)
    return Transition(
        replace(session, state=next_state, reward_reference=reference),
        f"Successfully requested {config.FAUCET_AMOUNT} {config.FAUCET_TOKEN} from faucet! 🎉\n"
        f"Transaction: {url}\n{ANNOUNCEMENT_OFFER}"
    )


def decide_announcement(
    session: Session,
    text: Optional[str],
    capabilities: Capabilities,
    reward_config: Optional[RewardConfig] = None,
) -> Transition:
    """
    Handle the answer to the announcement offer. Always ends in IDLE.
    """
    config = reward_config or RewardConfig()
    done = replace(session, state=SessionState.IDLE)

    if not is_affirmative(text):
        return Transition(done, "No problem! Would you like to start another game?")

    try:
        capabilities.announce(config.ANNOUNCEMENT_TEXT, timeout=config.CAPABILITY_TIMEOUT_S)
    except ExternalCapabilityError as e:
        print(f"ERROR: Error posting tweet: {e}")
        return Transition(done, f"Sorry, there was an error posting your tweet ({e.reason})")

    return Transition(done, "Victory tweet posted successfully! 🎉")


def handle_command(
    session: Session,
    text: Optional[str],
    capabilities: Optional[Capabilities] = None,
    reward_config: Optional[RewardConfig] = None,
) -> Transition:
    """
    Route free-text commands to whichever decision the session is waiting on.

    A second funding request for a win that was already paid is refused
    without calling the faucet again.
    """
    capabilities = capabilities or Capabilities()
    config = reward_config or RewardConfig()
    state = session.state

    if state is SessionState.PLAYER_WON:
        return decide_funding(session, text, capabilities, config)

    if state is SessionState.AWAITING_ANNOUNCEMENT_DECISION:
        # "yes" answers the tweet question; "faucet"/"request" is a repeat claim
        if (session.reward_reference is not None
                and is_funding_request(text) and not is_affirmative(text)):
            return _already_rewarded(session, config)
        return decide_announcement(session, text, capabilities, config)

    if session.reward_reference is not None and is_funding_request(text):
        return _already_rewarded(session, config)

    return Transition(session, INVALID_COMMAND)
