"""
lines.py - Catalog of winning lines for tictactoe7

A line is a tuple of ``run_length`` flat board positions lying in one straight
run (horizontal, vertical or either diagonal). The catalog of a given grid size
and run length never changes, so it is generated once and cached.
"""

from functools import lru_cache
from typing import Dict, Iterator, Tuple

from tictactoe7.debug import debug
from tictactoe7.utils import GRID_SIZE, RUN_LENGTH, Direction, DIRECTION_VECTORS, to_index

Line = Tuple[int, ...]


def _check_dimensions(size: int, run_length: int) -> None:
    if run_length < 2:
        raise ValueError(f"run_length must be at least 2, got {run_length}")
    if size < run_length:
        raise ValueError(f"size {size} is smaller than run_length {run_length}")


def _start_cells(direction: Direction, size: int, run_length: int) -> Iterator[Tuple[int, int]]:
    """Yield every (row, col) a line in ``direction`` can start from, in catalog order."""
    last_start = size - run_length
    if direction == Direction.HORIZONTAL:
        for row in range(size):
            for col in range(last_start + 1):
                yield row, col
    elif direction == Direction.VERTICAL:
        # column-major sweep
        for col in range(size):
            for row in range(last_start + 1):
                yield row, col
    elif direction == Direction.DIAGONAL_DOWN:
        for row in range(last_start + 1):
            for col in range(last_start + 1):
                yield row, col
    else:
        for row in range(last_start + 1):
            for col in range(run_length - 1, size):
                yield row, col


@lru_cache(maxsize=None)
def generate_lines(size: int = GRID_SIZE, run_length: int = RUN_LENGTH) -> Tuple[Line, ...]:
    """
    Generate every winning line on a ``size`` x ``size`` grid.

    Lines are ordered horizontal, vertical, diagonal top-left to bottom-right,
    then diagonal top-right to bottom-left.

    Args:
        size: Side length of the grid
        run_length: Number of marks in a row needed to win

    Returns:
        Tuple of lines, each a tuple of ``run_length`` flat positions

    Raises:
        ValueError: If run_length < 2 or size < run_length
    """
    _check_dimensions(size, run_length)

    lines = []
    for direction, (dr, dc) in DIRECTION_VECTORS.items():
        for row, col in _start_cells(direction, size, run_length):
            cells = [(row + i * dr, col + i * dc) for i in range(run_length)]
            lines.append(tuple(to_index(r, c, size) for r, c in cells))

    debug.debug(f"Generated {len(lines)} lines for size={size}, run_length={run_length}", "lines")
    return tuple(lines)


@lru_cache(maxsize=None)
def _lines_by_position(size: int, run_length: int) -> Dict[int, Tuple[Line, ...]]:
    index: Dict[int, list] = {position: [] for position in range(size * size)}
    for line in generate_lines(size, run_length):
        for position in line:
            index[position].append(line)
    return {position: tuple(lines) for position, lines in index.items()}


def lines_through(position: int, size: int = GRID_SIZE,
                  run_length: int = RUN_LENGTH) -> Tuple[Line, ...]:
    """
    Get the catalog lines that contain ``position``, in catalog order.

    Raises:
        IndexError: If position is not on the board
    """
    if not 0 <= position < size * size:
        raise IndexError(f"position {position} is outside a {size}x{size} board")
    return _lines_by_position(size, run_length)[position]


def count_lines(size: int = GRID_SIZE, run_length: int = RUN_LENGTH) -> int:
    """Closed-form number of lines: rows and columns plus both diagonal directions."""
    _check_dimensions(size, run_length)
    starts = size - run_length + 1
    return 2 * size * starts + 2 * starts * starts
