"""
engine.py - Game state and move application for tictactoe7

Every transition returns a new immutable GameState. Invalid moves never raise;
they return an InvalidMove signal carrying the untouched state so that callers
can simply ignore them.
"""

import numbers
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from tictactoe7.debug import debug
from tictactoe7.game.lines import Line, generate_lines, lines_through
from tictactoe7.utils import GRID_SIZE, RUN_LENGTH, GameResult, Mark, render_board_ascii

Board = Tuple[int, ...]

CELL_VALUES = frozenset(mark.value for mark in Mark)


class InvalidReason(Enum):
    """Why a move was rejected."""
    GAME_OVER = auto()
    OUT_OF_RANGE = auto()
    OCCUPIED = auto()


@dataclass(frozen=True)
class GameState:
    """Board, turn and outcome of one game at one point in time."""
    board: Board
    turn: Mark = Mark.X
    result: GameResult = GameResult.IN_PROGRESS
    size: int = GRID_SIZE
    run_length: int = RUN_LENGTH
    last_move: Optional[int] = None
    winning_line: Optional[Line] = None

    def __post_init__(self):
        if len(self.board) != self.size * self.size:
            raise ValueError(f"board has {len(self.board)} cells, expected {self.size * self.size}")

    def cell(self, position: int) -> Mark:
        return Mark(self.board[position])

    @property
    def move_count(self) -> int:
        return sum(1 for value in self.board if value != Mark.EMPTY.value)

    def is_full(self) -> bool:
        return Mark.EMPTY.value not in self.board

    def to_array(self) -> np.ndarray:
        """Copy of the board as a ``size`` x ``size`` numpy array."""
        return np.array(self.board, dtype=np.int8).reshape(self.size, self.size)

    def render(self) -> str:
        return render_board_ascii(self.board, self.size, self.winning_line or ())

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class InvalidMove:
    """Signal returned by apply_move when a move is rejected."""
    position: object
    reason: InvalidReason
    state: GameState


def new_game(size: int = GRID_SIZE, run_length: int = RUN_LENGTH) -> GameState:
    """
    Create the initial state: empty board, X to move, game in progress.

    Raises:
        ValueError: If the grid cannot hold a line of ``run_length``
    """
    generate_lines(size, run_length)  # validates the dimensions
    debug.debug(f"New {size}x{size} game, {run_length} in a row", "engine")
    return GameState(board=(Mark.EMPTY.value,) * (size * size), size=size, run_length=run_length)


def reset(state: Optional[GameState] = None) -> GameState:
    """Start over with the dimensions of ``state`` (or the defaults)."""
    if state is None:
        return new_game()
    return new_game(state.size, state.run_length)


def get_outcome(state: GameState) -> GameResult:
    return state.result


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validate_move(state: GameState, position) -> Optional[InvalidReason]:
    """
    Check whether the player to move may play at ``position``.

    Returns:
        None if the move is allowed, otherwise the reason it is not
    """
    if state.result.is_game_over():
        return InvalidReason.GAME_OVER
    if not _is_integer(position) or not 0 <= position < len(state.board):
        return InvalidReason.OUT_OF_RANGE
    if state.board[position] != Mark.EMPTY.value:
        return InvalidReason.OCCUPIED
    return None


def valid_moves(state: GameState) -> List[int]:
    if state.result.is_game_over():
        return []
    return [position for position, value in enumerate(state.board) if value == Mark.EMPTY.value]


def _line_owner(board: Sequence[int], line: Line) -> Optional[Mark]:
    first = board[line[0]]
    if first == Mark.EMPTY.value:
        return None
    if all(board[position] == first for position in line[1:]):
        return Mark(first)
    return None


def _find_winning_line(board: Sequence[int], lines: Iterable[Line]) -> Optional[Tuple[Mark, Line]]:
    for line in lines:
        owner = _line_owner(board, line)
        if owner is not None:
            return owner, line
    return None


def evaluate_board(board: Sequence[int], size: int = GRID_SIZE,
                   run_length: int = RUN_LENGTH) -> Tuple[GameResult, Optional[Line]]:
    """
    Evaluate a board from scratch by scanning every line in catalog order.

    A complete line always takes precedence over a full board.

    Returns:
        The result and the first winning line found (None unless won)
    """
    found = _find_winning_line(board, generate_lines(size, run_length))
    if found is not None:
        mark, line = found
        return GameResult.won_by(mark), line
    if Mark.EMPTY.value not in board:
        return GameResult.DRAW, None
    return GameResult.IN_PROGRESS, None


def apply_move(state: GameState, position) -> Union[GameState, InvalidMove]:
    """
    Place the current player's mark at ``position``.

    Only lines through the new mark can have been completed, so the win check
    is limited to those. The turn passes to the other mark only while the game
    is still in progress.

    Returns:
        The next GameState, or an InvalidMove wrapping the unchanged state
    """
    reason = validate_move(state, position)
    if reason is not None:
        debug.debug(f"Rejected move {position!r} for {state.turn}: {reason.name}", "engine")
        return InvalidMove(position=position, reason=reason, state=state)

    position = int(position)
    mark = state.turn
    board = list(state.board)
    board[position] = mark.value
    board = tuple(board)
    debug.trace(f"{mark} plays {position}", "engine")

    found = _find_winning_line(board, lines_through(position, state.size, state.run_length))
    if found is not None:
        result, winning_line, turn = GameResult.won_by(mark), found[1], mark
        debug.info(f"{mark} wins with line {winning_line}", "engine")
    elif Mark.EMPTY.value not in board:
        result, winning_line, turn = GameResult.DRAW, None, mark
        debug.info("Game ends in a draw", "engine")
    else:
        result, winning_line, turn = GameResult.IN_PROGRESS, None, mark.other()

    return replace(state, board=board, turn=turn, result=result,
                   last_move=position, winning_line=winning_line)


def state_from_board(board: Sequence, turn: Optional[Mark] = None,
                     size: int = GRID_SIZE, run_length: int = RUN_LENGTH) -> GameState:
    """
    Build a state from an arbitrary board and evaluate it.

    Args:
        board: Flat sequence of Marks or Mark values (0, 1, 2)
        turn: Mark to move next; derived from the mark counts when omitted
        size: Side length of the grid
        run_length: Number of marks in a row needed to win

    Raises:
        ValueError: If the board has the wrong length or an unknown cell value
    """
    if len(board) != size * size:
        raise ValueError(f"board has {len(board)} cells, expected {size * size}")

    cells = []
    for value in board:
        if isinstance(value, Mark):
            value = value.value
        if not _is_integer(value) or int(value) not in CELL_VALUES:
            raise ValueError(f"invalid cell value {value!r}")
        cells.append(int(value))
    cells = tuple(cells)

    if turn is None:
        x_count = cells.count(Mark.X.value)
        o_count = cells.count(Mark.O.value)
        turn = Mark.X if x_count <= o_count else Mark.O

    result, winning_line = evaluate_board(cells, size, run_length)
    return GameState(board=cells, turn=turn, result=result, size=size,
                     run_length=run_length, winning_line=winning_line)
