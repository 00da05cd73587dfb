"""
Reward configuration for the TicTacToe reward agent.
What a winner is offered, and how long to wait for the outside world.
"""


class RewardConfig:
    """
    Configuration class for the post-game reward flow.
    The funding and announcement services themselves are supplied by the
    caller; these are the fixed arguments they are called with.
    """

    # ==================== FAUCET SETTINGS ====================
    FAUCET_TOKEN = "USDC"
    FAUCET_AMOUNT = "20"

    # Block explorer link for a funding transaction (Base Sepolia testnet)
    EXPLORER_TX_URL = "https://sepolia.basescan.org/tx/{reference}"

    # ==================== ANNOUNCEMENT SETTINGS ====================
    ANNOUNCEMENT_TEXT = (
        "🎮 Just won a game of Tic-Tac-Toe against an AI and got rewarded with USDC! 🎯💰\n"
        "#Gaming #AI #Victory #Crypto"
    )

    # ==================== CALL SETTINGS ====================
    # Seconds to wait for a funding/announcement call (None = wait forever).
    # A timeout is treated exactly like a failed call.
    CAPABILITY_TIMEOUT_S = 30.0
