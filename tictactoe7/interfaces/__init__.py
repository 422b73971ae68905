"""
tictactoe7.interfaces - User interfaces for tictactoe7
"""

# Don't import anything here to avoid circular imports
__all__ = []
