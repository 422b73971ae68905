"""
cli.py - Command-line interface for tictactoe7

This module provides a text interface for playing the game from a menu,
analysing board positions, running the built-in validation scenarios and
benchmarking the engine.
"""

import argparse
import random
import sys
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from tictactoe7.debug import debug, DebugLevel
from tictactoe7.game.engine import (GameState, InvalidMove, apply_move, evaluate_board,
                                    new_game, state_from_board, validate_move)
from tictactoe7.game.lines import count_lines, generate_lines
from tictactoe7.game.rules import TicTacToeGame
from tictactoe7.utils import GRID_SIZE, RUN_LENGTH, GameMode, GameResult, Mark, to_index

# In-game commands
QUIT = 'q'
RESTART = 'r'
UNDO = 'u'
MENU = 'm'
COMMANDS = (QUIT, RESTART, UNDO, MENU)


def parse_move(text: str, size: int = GRID_SIZE) -> int:
    """
    Parse a move typed as a flat position ("10") or as "row,col" ("1,3").

    Raises:
        ValueError: If the text is not a position on the board
    """
    parts = text.replace(',', ' ').split()
    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        raise ValueError("Please enter a position or a command.") from None

    if len(numbers) == 1:
        position = numbers[0]
    elif len(numbers) == 2:
        row, col = numbers
        if not (0 <= row < size and 0 <= col < size):
            raise ValueError(f"Row and column must be between 0 and {size - 1}.")
        position = to_index(row, col, size)
    else:
        raise ValueError("Enter a position number or row,col.")

    if not 0 <= position < size * size:
        raise ValueError(f"Position must be between 0 and {size * size - 1}.")
    return position


def parse_position(text: str, size: int = GRID_SIZE, run_length: int = RUN_LENGTH) -> GameState:
    """
    Parse a comma-separated list of size*size cell values (0, 1, 2) into a state.

    Raises:
        ValueError: If the list has the wrong length or contains bad values
    """
    values = [int(value) for value in text.split(',')]
    if len(values) != size * size:
        raise ValueError(f"Position string must have {size * size} values")
    return state_from_board(values, size=size, run_length=run_length)


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def draw_pattern(size: int = GRID_SIZE) -> List[int]:
    """A full board with no run longer than two in any direction."""
    return [Mark.X.value if (col // 2 + row) % 2 == 0 else Mark.O.value
            for row in range(size) for col in range(size)]


class SimpleCLI:
    """Simple command-line interface for playing and testing the game."""

    def __init__(self):
        self.game: Optional[TicTacToeGame] = None
        self.args = None

    def parse_args(self, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(description='Four-in-a-row tic-tac-toe CLI')
        parser.add_argument('--debug_level',
                            choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                            default='warning', help='Logging verbosity')

        board_options = argparse.ArgumentParser(add_help=False)
        board_options.add_argument('--size', type=int, default=GRID_SIZE,
                                   help=f'Grid side length (default: {GRID_SIZE})')
        board_options.add_argument('--run-length', dest='run_length', type=int, default=RUN_LENGTH,
                                   help=f'Marks in a row needed to win (default: {RUN_LENGTH})')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', parents=[board_options],
                                            help='Play a game interactively')
        play_parser.add_argument('--debug', action='store_true', help='Enable debug mode')
        play_parser.add_argument('--mode', choices=[mode.value for mode in GameMode],
                                 help='Skip the menu and start in this mode')

        test_parser = subparsers.add_parser('test', parents=[board_options],
                                            help='Analyse a board position')
        test_parser.add_argument('--position', type=str,
                                 help='Comma-separated cell values (0 empty, 1 X, 2 O), row by row')

        subparsers.add_parser('test_all', help='Run all validation scenarios')

        benchmark_parser = subparsers.add_parser('benchmark', parents=[board_options],
                                                 help='Benchmark performance')
        benchmark_parser.add_argument('--iterations', type=positive_int, default=1000,
                                      help='Number of iterations for benchmarking')

        self.args = parser.parse_args(argv)

        if getattr(self.args, 'debug', False):
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.configure(level=DebugLevel[self.args.debug_level.upper()])
        return self.args

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run the CLI based on the parsed arguments; returns an exit code."""
        if not self.args:
            self.parse_args(argv)

        try:
            if self.args.command == 'play':
                self.play_game()
            elif self.args.command == 'test':
                self.test_position()
            elif self.args.command == 'test_all':
                return 0 if self.run_all_tests() else 1
            elif self.args.command == 'benchmark':
                self.benchmark()
            else:
                print("Please specify a command. Use --help for options.")
                return 1
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        return 0

    # --- Playing ---

    def play_game(self) -> None:
        """Show the menu and play rounds until the player quits."""
        size = getattr(self.args, 'size', GRID_SIZE)
        run_length = getattr(self.args, 'run_length', RUN_LENGTH)
        self.game = TicTacToeGame(size=size, run_length=run_length)

        mode = GameMode(self.args.mode) if getattr(self.args, 'mode', None) else None
        while True:
            if mode is None:
                mode = self.choose_mode()
                if mode is None:
                    print("Goodbye!")
                    return

            if self.play_round(mode) == QUIT:
                print("Quitting game.")
                return
            mode = None

    def choose_mode(self) -> Optional[GameMode]:
        """Show the main menu; returns None when the player quits."""
        print("\nTic Tac Toe")
        print("  1) Single Player")
        print("  2) Two Player")
        print("  q) Quit")
        choices = {'1': GameMode.SINGLE, '2': GameMode.TWO}
        while True:
            choice = self._read("Select mode: ")
            if choice in (None, QUIT):
                return None
            if choice in choices:
                return choices[choice]
            print("Please choose 1, 2 or q.")

    def play_round(self, mode: GameMode) -> str:
        """
        Play on the current board until the player leaves.

        Returns:
            MENU to go back to the menu, QUIT to exit
        """
        game = self.game
        game.set_mode(mode)
        size = game.state.size
        print(f"\nStarting a new {mode.label()} game!")
        print(f"Enter a position (0-{size * size - 1}) or row,col to place a mark.")
        print("Other commands: 'r' to restart, 'u' to undo, 'm' for the menu, 'q' to quit.")
        print(game.render())

        while True:
            print(self.status_line())
            move = self.get_human_move()

            if move is None:
                continue
            elif move in (QUIT, MENU):
                return move
            elif move == RESTART:
                game.reset()
                print("Game restarted.")
                print(game.render())
                continue
            elif move == UNDO:
                if game.undo_move():
                    print("Move undone.")
                    print(game.render())
                else:
                    print("No moves to undo.")
                continue

            if game.make_move(move):
                print(game.render())
                self.announce_transition()
            elif game.is_game_over():
                print("The game is over. 'r' to restart, 'm' for the menu.")
            else:
                print(f"Invalid move: {move}")

    def status_line(self) -> str:
        result = self.game.state.result
        if result == GameResult.DRAW:
            return "It's a Draw!"
        if result.is_game_over():
            return f"{result.winner()} Wins!"
        return f"Next Turn: {self.game.get_current_player()}"

    def announce_transition(self) -> None:
        """Report a game-ending move once, when the result has just changed."""
        if not self.game.last_transition:
            return
        before, after = self.game.last_transition
        if before == after:
            return
        if after == GameResult.DRAW:
            print("Game over! It's a draw!")
        else:
            print(f"Game over! {after.winner()} wins!")

    def get_human_move(self) -> Union[int, str, None]:
        """
        Read a move from the player.

        Returns:
            Board position, a command letter, or None if the input was invalid
        """
        user_input = self._read(f"Your move ({self.game.get_current_player()}): ")
        if user_input is None:
            return QUIT
        if user_input in COMMANDS:
            return user_input

        try:
            return parse_move(user_input, self.game.state.size)
        except ValueError as e:
            print(f"Invalid input. {e}")
            return None

    @staticmethod
    def _read(prompt: str) -> Optional[str]:
        try:
            return input(prompt).strip().lower()
        except EOFError:
            return None

    # --- Analysis ---

    def test_position(self) -> None:
        """Analyse a board given with --position."""
        if not self.args.position:
            print("Please provide a position string with --position")
            return

        try:
            state = parse_position(self.args.position, self.args.size, self.args.run_length)
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return

        print("Loaded position:")
        print(state.render())

        print("\nTesting win conditions:")
        if state.winning_line is not None:
            print(f"Win for {state.result.winner()} on line {state.winning_line}")
        else:
            print("No win detected for any player")

        grid = state.to_array()
        empty_count = int(np.count_nonzero(grid == Mark.EMPTY.value))
        if empty_count == 0:
            print("Board is full")
        else:
            print(f"Empty spaces: {empty_count}")
        print(f"Result: {state.result.name}")
        if not state.result.is_game_over():
            print(f"Next turn: {state.turn}")

    # --- Validation scenarios ---

    def run_all_tests(self) -> bool:
        """Run the built-in validation scenarios; returns True when all pass."""
        print("Running all validation tests...")
        tests_run = 0
        tests_passed = 0

        groups = [
            ("line catalog", self.create_catalog_tests()),
            ("horizontal win detection", self.create_horizontal_win_tests()),
            ("vertical win detection", self.create_vertical_win_tests()),
            ("diagonal win detection", self.create_diagonal_win_tests()),
            ("draw condition", self.create_draw_tests()),
            ("move validation", self.create_move_validation_tests()),
        ]
        for title, tests in groups:
            print(f"\nTesting {title}:")
            for i, (name, actual, expected) in enumerate(tests):
                tests_run += 1
                success = actual == expected
                tests_passed += 1 if success else 0
                print(f"  Test {i + 1} ({name}): {'PASSED' if success else 'FAILED'}")
                if not success:
                    print(f"    Expected: {expected}, Got: {actual}")

        print(f"\nTest summary: {tests_passed}/{tests_run} tests passed")
        if tests_passed == tests_run:
            print("All tests passed!")
        else:
            print(f"Failed tests: {tests_run - tests_passed}")
        return tests_passed == tests_run

    @staticmethod
    def _board_with(cells: Sequence[Tuple[int, int]], mark: Mark) -> List[int]:
        board = [Mark.EMPTY.value] * (GRID_SIZE * GRID_SIZE)
        for row, col in cells:
            board[to_index(row, col)] = mark.value
        return board

    def _won(self, cells: Sequence[Tuple[int, int]], mark: Mark) -> bool:
        return state_from_board(self._board_with(cells, mark)).result.winner() == mark

    def create_catalog_tests(self) -> List[Tuple[str, object, object]]:
        lines = generate_lines()
        return [
            ("88 lines on 7x7", len(lines), 88),
            ("no duplicate lines", len({frozenset(line) for line in lines}), len(lines)),
            ("closed-form count", count_lines(), len(lines)),
            ("classic 3x3 has 8 lines", len(generate_lines(3, 3)), 8),
        ]

    def create_horizontal_win_tests(self) -> List[Tuple[str, object, object]]:
        return [
            ("X top row", self._won([(0, c) for c in range(4)], Mark.X), True),
            ("O middle row", self._won([(3, c) for c in range(2, 6)], Mark.O), True),
            ("three in a row", self._won([(5, c) for c in range(3)], Mark.X), False),
            ("broken run", self._won([(6, c) for c in range(5) if c != 2], Mark.X), False),
        ]

    def create_vertical_win_tests(self) -> List[Tuple[str, object, object]]:
        return [
            ("X left column", self._won([(r, 0) for r in range(3, 7)], Mark.X), True),
            ("O middle column", self._won([(r, 3) for r in range(4)], Mark.O), True),
            ("three in a column", self._won([(r, 6) for r in range(3)], Mark.X), False),
            ("broken column", self._won([(r, 2) for r in range(5) if r != 2], Mark.O), False),
        ]

    def create_diagonal_win_tests(self) -> List[Tuple[str, object, object]]:
        return [
            ("X top-left to bottom-right", self._won([(i, i) for i in range(4)], Mark.X), True),
            ("O top-right to bottom-left", self._won([(i, 6 - i) for i in range(4)], Mark.O), True),
            ("offset diagonal", self._won([(3 + i, 1 + i) for i in range(4)], Mark.X), True),
            ("three on a diagonal", self._won([(i, i) for i in range(3)], Mark.X), False),
            ("broken diagonal", self._won([(i, 6 - i) for i in range(5) if i != 2], Mark.O), False),
        ]

    def create_draw_tests(self) -> List[Tuple[str, object, object]]:
        full = draw_pattern()
        nearly_full = list(full)
        nearly_full[to_index(0, 3)] = Mark.EMPTY.value
        return [
            ("full board without a line", evaluate_board(full)[0], GameResult.DRAW),
            ("one empty cell left", evaluate_board(nearly_full)[0], GameResult.IN_PROGRESS),
        ]

    def create_move_validation_tests(self) -> List[Tuple[str, object, object]]:
        state = new_game()
        occupied = apply_move(state, 24)
        finished = state_from_board(self._board_with([(0, c) for c in range(4)], Mark.X))
        return [
            ("empty cell", validate_move(state, 24) is None, True),
            ("occupied cell", validate_move(occupied, 24) is None, False),
            ("position too low", validate_move(state, -1) is None, False),
            ("position too high", validate_move(state, 49) is None, False),
            ("game over", validate_move(finished, 48) is None, False),
        ]

    # --- Benchmark ---

    def benchmark(self) -> None:
        """Benchmark line generation, move application and board evaluation."""
        iterations = self.args.iterations
        size, run_length = self.args.size, self.args.run_length
        print(f"Running benchmark with {iterations} iterations...")

        with debug.timed("line_generation", "cli") as timing:
            for _ in range(iterations):
                generate_lines.cache_clear()
                generate_lines(size, run_length)
        print(f"Line generation: {timing['elapsed']:.6f} seconds total, "
              f"{timing['elapsed'] / iterations * 1000:.6f} ms per catalog")

        games_played = 0
        moves_made = 0
        with debug.timed("game_simulation", "cli") as timing:
            for _ in range(max(1, iterations // 10)):
                state = new_game(size, run_length)
                while not state.result.is_game_over():
                    position = random.choice([p for p, v in enumerate(state.board)
                                              if v == Mark.EMPTY.value])
                    outcome = apply_move(state, position)
                    if isinstance(outcome, InvalidMove):
                        break
                    state = outcome
                    moves_made += 1
                games_played += 1
        print(f"Played {games_played} games with {moves_made} total moves: "
              f"{timing['elapsed']:.6f} seconds total, "
              f"{timing['elapsed'] / max(1, moves_made) * 1000:.6f} ms per move")

        board = draw_pattern(size)
        with debug.timed("full_evaluation", "cli") as timing:
            for _ in range(iterations):
                evaluate_board(board, size, run_length)
        print(f"Full-board evaluation: {timing['elapsed']:.6f} seconds total, "
              f"{timing['elapsed'] / iterations * 1000:.6f} ms per evaluation")

        state = state_from_board(board, size=size, run_length=run_length)
        with debug.timed("rendering", "cli") as timing:
            for _ in range(iterations):
                state.render()
        print(f"Rendering board {iterations} times: {timing['elapsed']:.6f} seconds total, "
              f"{timing['elapsed'] / iterations * 1000:.6f} ms per render")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    return cli.run(argv)


def run_main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for run.py, which groups the commands under a component:
    ``run.py game <command> [options]``.
    """
    parser = argparse.ArgumentParser(description='tictactoe7 - four-in-a-row tic-tac-toe')
    parser.add_argument('component', choices=['game'], help='Component to run')
    parser.add_argument('args', nargs=argparse.REMAINDER,
                        help='Command and options for the component')
    args = parser.parse_args(argv)

    if args.component == 'game':
        return main(args.args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
