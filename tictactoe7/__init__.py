"""
tictactoe7 - Four-in-a-row tic-tac-toe on a 7x7 grid

This package provides the winning-line catalog, an immutable game engine,
a session manager with a Gymnasium environment, and a command-line interface.
"""

__version__ = '0.1.0'
