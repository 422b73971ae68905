"""
tictactoe7.game - Core game mechanics

This package contains the winning-line catalog, the game engine and the
session and environment wrappers built on top of it.
"""

from tictactoe7.game.engine import (GameState, InvalidMove, InvalidReason, apply_move,
                                    get_outcome, new_game, reset)
from tictactoe7.game.lines import generate_lines, lines_through
from tictactoe7.game.rules import TicTacToeEnv, TicTacToeGame

__all__ = ['GameState', 'InvalidMove', 'InvalidReason', 'apply_move', 'get_outcome',
           'new_game', 'reset', 'generate_lines', 'lines_through',
           'TicTacToeEnv', 'TicTacToeGame']
