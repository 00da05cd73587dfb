"""
Tests for the action dispatcher and the agent tool wrapper.
"""

import threading

from dialogue.dispatcher import (
    MISSING_COMMAND,
    MISSING_MOVE,
    USAGE,
    ActionRequest,
    dispatch,
)
from dialogue.session import NO_ACTIVE_GAME, Session, SessionState
from dialogue.tool import TicTacToeTool
from game.board import Mark
from rewards.capabilities import Capabilities
from rewards.config import RewardConfig


class TestActionRequest:

    def test_from_mapping_ignores_unknown_keys(self):
        request = ActionRequest.from_mapping({"action": "move", "move": "(0, 1)", "extra": 1})
        assert request == ActionRequest(action="move", move="(0, 1)")

    def test_from_mapping_without_action(self):
        assert ActionRequest.from_mapping({}).action == ""


class TestDispatch:

    def test_action_is_case_insensitive(self):
        result = dispatch(Session(), ActionRequest(action="  START "))
        assert result.session.state is SessionState.IN_PROGRESS

    def test_unknown_action_gives_usage(self):
        session = Session()
        result = dispatch(session, ActionRequest(action="resign"))
        assert result.message == USAGE
        assert result.session is session

    def test_move_requires_move_field(self):
        session = dispatch(Session(), ActionRequest("start")).session
        result = dispatch(session, ActionRequest("move"))
        assert result.message == MISSING_MOVE
        assert result.session is session

    def test_command_requires_command_field(self):
        result = dispatch(Session(), ActionRequest("command", command=""))
        assert result.message == MISSING_COMMAND

    def test_print_when_idle(self):
        assert dispatch(Session(), ActionRequest("print")).message == NO_ACTIVE_GAME

    def test_print_is_read_only(self):
        session = dispatch(Session(), ActionRequest("start")).session
        session = dispatch(session, ActionRequest("move", move="(2,2)")).session

        result = dispatch(session, ActionRequest("PRINT"))
        assert result.session is session
        assert session.board.render() in result.message

    def test_malformed_move_does_not_raise(self):
        session = dispatch(Session(), ActionRequest("start")).session
        result = dispatch(session, ActionRequest("move", move="a,b"))
        assert result.session is session
        assert "Invalid move format" in result.message

    def test_full_win_and_reward_flow(self, rewards):
        caps = rewards.capabilities()
        # (2,0) forks column 0 and row 2; the agent can only block one
        session = dispatch(Session(), ActionRequest("start")).session
        for move in ["(0,0)", "(2,2)", "(2,0)"]:
            session = dispatch(session, ActionRequest("move", move=move)).session
        assert session.state is SessionState.IN_PROGRESS
        session = dispatch(session, ActionRequest("move", move="(2,1)")).session
        assert session.state is SessionState.PLAYER_WON

        session = dispatch(session, ActionRequest("command", command="yes"), caps).session
        assert session.state is SessionState.AWAITING_ANNOUNCEMENT_DECISION
        session = dispatch(session, ActionRequest("command", command="yes"), caps).session
        assert session.state is SessionState.IDLE
        assert len(rewards.fund_calls) == 1
        assert len(rewards.announce_calls) == 1


class TestTool:

    def test_metadata(self):
        assert TicTacToeTool.NAME == "tic_tac_toe"
        assert TicTacToeTool.ARGS_SCHEMA["required"] == ["action"]
        assert set(TicTacToeTool.ARGS_SCHEMA["properties"]) == {"action", "move", "command"}

    def test_dict_payload(self):
        tool = TicTacToeTool()
        text = tool({"action": "start"})
        assert "New game started!" in text
        assert tool.session().active

    def test_conversations_are_independent(self):
        tool = TicTacToeTool()
        tool({"action": "start"}, conversation_id="alice")
        tool({"action": "move", "move": "(0,0)"}, conversation_id="alice")

        assert tool.session("alice").board.get(0, 0) is Mark.X
        assert tool.session("bob").state is SessionState.IDLE
        assert tool({"action": "print"}, conversation_id="bob") == NO_ACTIVE_GAME

    def test_reset_forgets_session(self):
        tool = TicTacToeTool()
        tool({"action": "start"})
        tool.reset()
        assert tool.session().state is SessionState.IDLE

    def test_reset_drops_conversation_lock(self):
        tool = TicTacToeTool()
        tool({"action": "start"}, conversation_id="alice")
        assert "alice" in tool._locks

        tool.reset("alice")
        assert "alice" not in tool._locks
        assert tool.session("alice").state is SessionState.IDLE

        # reading a conversation that never played allocates nothing
        tool.session("ghost")
        assert "ghost" not in tool._locks

        # and the conversation can be played again after a reset
        assert "New game started!" in tool({"action": "start"}, conversation_id="alice")
        assert tool.session("alice").active

    def test_many_short_conversations_leave_no_locks(self):
        tool = TicTacToeTool()
        for i in range(50):
            name = f"guest-{i}"
            tool({"action": "start"}, conversation_id=name)
            tool.reset(name)
        assert tool._locks == {}
        assert tool._sessions == {}

    def test_reward_deadline_follows_tool_config(self, won_session):
        class FastDeadline(RewardConfig):
            CAPABILITY_TIMEOUT_S = 0.05

        release = threading.Event()

        def stalled(token, amount):
            release.wait(2)
            return "0xlate"

        tool = TicTacToeTool(Capabilities(request_funds=stalled), reward_config=FastDeadline())
        tool._sessions["winner"] = won_session
        try:
            text = tool({"action": "command", "command": "yes"}, conversation_id="winner")
        finally:
            release.set()

        assert "no response after 0.05s" in text
        assert tool.session("winner").reward_reference is None
        assert tool.session("winner").state is SessionState.AWAITING_ANNOUNCEMENT_DECISION

    def test_reward_without_capabilities_is_reported(self):
        tool = TicTacToeTool()
        tool({"action": "start"})
        for move in ["(0,0)", "(2,2)", "(2,0)", "(2,1)"]:
            tool({"action": "move", "move": move})
        text = tool({"action": "command", "command": "yes"})
        assert "Couldn't find the faucet tool" in text
        assert tool.session().state is SessionState.AWAITING_ANNOUNCEMENT_DECISION

    def test_parallel_conversations(self):
        tool = TicTacToeTool()
        moves = ["(0,0)", "(2,2)", "(2,0)", "(1,2)", "(0,1)"]
        errors = []

        def play(name):
            try:
                tool({"action": "start"}, conversation_id=name)
                for move in moves:
                    tool({"action": "move", "move": move}, conversation_id=name)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=play, args=(f"player-{i}",)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        for i in range(8):
            assert tool.session(f"player-{i}").state is SessionState.DRAW
