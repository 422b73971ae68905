"""
utils.py - Constants, enumerations and helpers shared across tictactoe7

This module provides the board dimensions, the mark and result enumerations,
position conversions and the ASCII board renderer.
"""

from enum import Enum, auto
from typing import Optional, Sequence, Tuple

# Game constants
GRID_SIZE = 7
RUN_LENGTH = 4  # Number of marks in a row to win


class Mark(Enum):
    """Enumeration representing cell contents and the players owning them."""
    EMPTY = 0
    X = 1    # First player
    O = 2    # Second player

    def other(self) -> 'Mark':
        """Get the opposing mark."""
        if self == Mark.X:
            return Mark.O
        elif self == Mark.O:
            return Mark.X
        return Mark.EMPTY

    def __str__(self):
        if self == Mark.EMPTY:
            return " "
        return self.name


class GameResult(Enum):
    """Enumeration representing the game outcome."""
    IN_PROGRESS = auto()
    X_WINS = auto()
    O_WINS = auto()
    DRAW = auto()

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameResult.IN_PROGRESS

    def winner(self) -> Optional[Mark]:
        """The winning mark, or None for a draw or unfinished game."""
        if self == GameResult.X_WINS:
            return Mark.X
        elif self == GameResult.O_WINS:
            return Mark.O
        return None

    @classmethod
    def won_by(cls, mark: Mark) -> 'GameResult':
        if mark == Mark.X:
            return cls.X_WINS
        elif mark == Mark.O:
            return cls.O_WINS
        raise ValueError(f"{mark!r} cannot win a game")


class GameMode(Enum):
    """Menu modes. Both alternate two human turns on the same board."""
    SINGLE = 'single'
    TWO = 'two'

    def label(self) -> str:
        return "Single Player" if self == GameMode.SINGLE else "Two Player"


class Direction(Enum):
    """Enumeration representing the directions a winning line can run."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_DOWN = auto()  # top-left to bottom-right
    DIAGONAL_UP = auto()    # top-right to bottom-left


# Direction vectors (row, col) for each direction
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_DOWN: (1, 1),
    Direction.DIAGONAL_UP: (1, -1),
}


def is_valid_position(row: int, col: int, size: int = GRID_SIZE) -> bool:
    """Check if a (row, col) pair lies on a ``size`` x ``size`` grid."""
    return 0 <= row < size and 0 <= col < size


def to_index(row: int, col: int, size: int = GRID_SIZE) -> int:
    """Map a (row, col) pair to its flat board position."""
    return row * size + col


def to_row_col(position: int, size: int = GRID_SIZE) -> Tuple[int, int]:
    """Map a flat board position back to (row, col)."""
    return divmod(position, size)


def render_board_ascii(board: Sequence[int], size: int = GRID_SIZE,
                       highlight: Sequence[int] = ()) -> str:
    """
    Render a flat board as ASCII art.

    Args:
        board: Flat sequence of Mark values, row-major
        size: Side length of the grid
        highlight: Positions to draw in lowercase (e.g. a winning line)

    Returns:
        ASCII representation of the board with row and column numbers
    """
    highlighted = set(highlight)
    width = size * 2 - 1
    col_numbers = " ".join(str(col % 10) for col in range(size))

    result = ["  " + col_numbers, " +" + "-" * width + "+"]
    for row in range(size):
        cells = []
        for col in range(size):
            position = to_index(row, col, size)
            symbol = str(Mark(int(board[position])))
            if position in highlighted:
                symbol = symbol.lower()
            cells.append(symbol)
        result.append(f"{row % 10}|" + " ".join(cells) + "|")
    result.append(" +" + "-" * width + "+")

    return "\n".join(result)
