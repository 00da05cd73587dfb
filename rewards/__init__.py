"""
Rewards module for the TicTacToe reward agent.
Settings and the external funding/announcement capability boundary.
"""

from .config import RewardConfig
from .capabilities import (
    Capabilities,
    ExternalCapabilityError,
    call_with_deadline,
    extract_reference,
    simulated_capabilities,
)
