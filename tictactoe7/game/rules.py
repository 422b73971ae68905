"""
rules.py - Game session management and Gymnasium environment for tictactoe7

This module provides:
1. TicTacToeGame, the mutable session wrapper used by interfaces
2. TicTacToeEnv, a gymnasium-compatible environment around the engine
"""

from typing import Dict, List, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from tictactoe7.debug import debug
from tictactoe7.game.engine import (GameState, InvalidMove, apply_move, get_outcome,
                                    new_game, reset, valid_moves, validate_move)
from tictactoe7.game.lines import Line
from tictactoe7.utils import GRID_SIZE, RUN_LENGTH, GameMode, GameResult, Mark


class TicTacToeGame:
    """
    High-level game session.

    Keeps the current GameState, the selected mode and the states before each
    move so that moves can be undone. After every successful move
    ``last_transition`` holds the (before, after) results, which is what an
    interface compares to announce a win or draw exactly once.
    """

    def __init__(self, mode: GameMode = GameMode.TWO, size: int = GRID_SIZE,
                 run_length: int = RUN_LENGTH):
        debug.debug(f"Initializing TicTacToeGame ({mode.value})", "game")
        self.mode = mode
        self.state = new_game(size, run_length)
        self.history: List[GameState] = []
        self.last_transition: Optional[Tuple[GameResult, GameResult]] = None

    def reset(self) -> None:
        """Reset the game to its initial state."""
        debug.debug("Resetting game", "game")
        self.state = reset(self.state)
        self.history = []
        self.last_transition = None

    def set_mode(self, mode: GameMode) -> None:
        """Switch mode; a mode change always starts a fresh game."""
        self.mode = mode
        self.reset()

    def make_move(self, position: int) -> bool:
        """
        Play the current player's mark at ``position``.

        Returns:
            True if the move was applied, False if it was rejected
        """
        before = get_outcome(self.state)
        outcome = apply_move(self.state, position)
        if isinstance(outcome, InvalidMove):
            debug.debug(f"Game: move {position!r} ignored ({outcome.reason.name})", "game")
            return False

        self.history.append(self.state)
        self.state = outcome
        self.last_transition = (before, get_outcome(outcome))
        return True

    def undo_move(self) -> bool:
        """
        Undo the last move.

        Returns:
            True if a move was undone, False if there is nothing to undo
        """
        if not self.history:
            debug.debug("No moves to undo", "game")
            return False

        self.state = self.history.pop()
        self.last_transition = None
        return True

    def get_state(self) -> GameState:
        return self.state

    def is_valid_move(self, position: int) -> bool:
        return validate_move(self.state, position) is None

    def is_game_over(self) -> bool:
        return self.state.result.is_game_over()

    def get_winner(self) -> Optional[Mark]:
        return self.state.result.winner()

    def get_current_player(self) -> Mark:
        return self.state.turn

    def get_valid_moves(self) -> List[int]:
        return valid_moves(self.state)

    def get_winning_line(self) -> Optional[Line]:
        return self.state.winning_line

    def render(self) -> str:
        return self.state.render()


class TicTacToeEnv(gym.Env):
    """
    Gymnasium environment for two agents taking turns on one board.

    Actions are flat board positions, observations the board as an int8 array
    with 0 for empty, 1 for X and 2 for O. Rewards are from X's point of view.
    """

    metadata = {'render_modes': ['ascii', 'human', 'rgb_array'], 'render_fps': 4}

    CELL_PIXELS = 40
    COLORS = {
        Mark.EMPTY.value: (0, 0, 0),
        Mark.X.value: (255, 0, 0),
        Mark.O.value: (255, 255, 0),
    }

    def __init__(self, render_mode: Optional[str] = None, size: int = GRID_SIZE,
                 run_length: int = RUN_LENGTH):
        debug.debug("Initializing TicTacToeEnv", "env")
        if render_mode is not None and render_mode not in self.metadata['render_modes']:
            raise ValueError(f"Unsupported render mode: {render_mode}")

        self.size = size
        self.run_length = run_length
        self.action_space = spaces.Discrete(size * size)
        self.observation_space = spaces.Box(low=0, high=2, shape=(size, size), dtype=np.int8)
        self.render_mode = render_mode
        self.state = new_game(size, run_length)

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        debug.debug("Resetting environment", "env")
        super().reset(seed=seed)
        self.state = reset(self.state)

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Play ``action`` for the mark whose turn it is.

        An invalid action leaves the board untouched and truncates the episode.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        debug.debug(f"Environment step with action {action}", "env")

        outcome = apply_move(self.state, action)
        if isinstance(outcome, InvalidMove):
            debug.warning(f"Invalid action {action}: {outcome.reason.name}", "env")
            info = self._get_info()
            info['invalid_move'] = outcome.reason.name
            return self._get_observation(), self.reward_invalid_move, False, True, info

        self.state = outcome
        result = get_outcome(outcome)
        reward = {
            GameResult.X_WINS: self.reward_win,
            GameResult.O_WINS: self.reward_lose,
            GameResult.DRAW: self.reward_draw,
        }.get(result, self.reward_step)
        terminated = result.is_game_over()
        if terminated:
            debug.info(f"Game over: {result.name}", "env")

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[Union[str, np.ndarray]]:
        if self.render_mode is None:
            return None

        if self.render_mode == "ascii":
            return self.state.render()

        if self.render_mode == "human":
            print(self.state.render())
            return None

        # rgb_array: one square per cell, a filled disc for each mark
        grid = self.state.to_array()
        cell = self.CELL_PIXELS
        ys, xs = np.mgrid[0:cell, 0:cell]
        radius = cell // 2 - 4
        disc = (ys - cell // 2) ** 2 + (xs - cell // 2) ** 2 <= radius ** 2

        frame = np.zeros((self.size * cell, self.size * cell, 3), dtype=np.uint8)
        frame[:, :] = (0, 0, 128)
        for (row, col), value in np.ndenumerate(grid):
            tile = frame[row * cell:(row + 1) * cell, col * cell:(col + 1) * cell]
            tile[disc] = self.COLORS[int(value)]
        return frame

    def _get_observation(self) -> np.ndarray:
        return self.state.to_array()

    def _get_info(self) -> Dict:
        moves = valid_moves(self.state)
        return {
            'valid_moves': moves,
            'num_valid_moves': len(moves),
            'current_player': self.state.turn.value,
            'game_result': self.state.result.name,
            'moves_made': self.state.move_count,
            'winning_line': self.state.winning_line,
            'last_move': self.state.last_move,
        }

    def close(self):
        pass
