"""
Game configuration for the TicTacToe reward agent.
Board geometry, opponent preferences and display settings.
"""


class GameConfig:
    """
    Configuration class for game settings.
    Change these values to tweak how the game looks and talks.
    """

    # ==================== BOARD SETTINGS ====================
    # TicTacToe is a 3x3 grid (other sizes are not supported)
    BOARD_SIZE = 3

    # ==================== OPPONENT SETTINGS ====================
    # Positional preferences, tried after win/block
    CENTER = (1, 1)
    CORNERS = [(0, 0), (0, 2), (2, 0), (2, 2)]  # fixed enumeration order

    # ==================== DISPLAY SETTINGS ====================
    EMPTY_GLYPH = "-"
    CELL_SEPARATOR = " | "
    ROW_SEPARATOR = "    -----------"
    ROW_PREFIX_WIDTH = 5  # "0    X | - | O"

    # ==================== DEBUG SETTINGS ====================
    # Print opponent decisions and state transitions to the console
    DEBUG_MODE = False
