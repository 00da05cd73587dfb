"""
Console front end for the TicTacToe reward agent.

This script ties together:
- Game (board, rules, rule-based opponent)
- Dialogue (session state machine and action dispatcher)
- Rewards (faucet funding and victory announcement capabilities)

Run this script to play TicTacToe against the agent from a terminal!
"""

import sys
from typing import Optional

from game.config import GameConfig
from dialogue.dispatcher import ActionRequest
from dialogue.tool import TicTacToeTool
from rewards.capabilities import Capabilities, simulated_capabilities


HELP_TEXT = """Commands:
  start            start a new game (you are X)
  move (r, c)      place your mark, e.g. move (0, 2) - or just type (0, 2)
  print            show the board
  quit             leave
Anything else is sent as a command (e.g. 'yes' after winning)."""


def parse_line(line: str) -> Optional[ActionRequest]:
    """
    Turn a console line into an ActionRequest.

    Returns:
        The request, or None for a blank line.
    """
    text = line.strip()
    if not text:
        return None

    word, _, rest = text.partition(" ")
    word = word.lower()

    if word in ("start", "print"):
        return ActionRequest(action=word)
    if word == "move":
        return ActionRequest(action="move", move=rest)
    if text.startswith("(") or text[0].isdigit():
        return ActionRequest(action="move", move=text)
    return ActionRequest(action="command", command=text)


def run_console(tool: TicTacToeTool, stream=sys.stdin):
    """Main input loop. Reads one action per line until quit or EOF."""
    print(HELP_TEXT)
    print()

    for line in stream:
        if line.strip().lower() in ("quit", "exit", "q"):
            print("\nGame quit by user.")
            return

        request = parse_line(line)
        if request is None:
            continue

        print(tool(request))
        print()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="TicTacToe Reward Agent")
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Use simulated faucet/tweet capabilities (no network)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print opponent decisions and state transitions"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for a faucet/tweet call"
    )

    args = parser.parse_args()

    if args.debug:
        GameConfig.DEBUG_MODE = True

    # Real faucet/tweet services are wired in by the hosting agent;
    # on the console they're either simulated or unavailable.
    capabilities = simulated_capabilities() if args.simulate else Capabilities()
    if args.timeout is not None:
        capabilities.timeout = args.timeout

    print("\n" + "="*60)
    print("   TicTacToe Reward Agent")
    print("   You play: X   Agent plays: O")
    print(f"   Rewards: {'simulated' if args.simulate else 'not connected'}")
    print("="*60 + "\n")

    tool = TicTacToeTool(capabilities=capabilities)

    try:
        run_console(tool)
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")


if __name__ == "__main__":
    main()
