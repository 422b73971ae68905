import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from tictactoe7.game.rules import TicTacToeGame
from tictactoe7.interfaces.cli import (SimpleCLI, draw_pattern, main, parse_move,
                                     parse_position, run_main)
from tictactoe7.utils import GameMode, GameResult


def run_cli(argv, inputs=()):
    out = io.StringIO()
    with patch('builtins.input', side_effect=list(inputs)), redirect_stdout(out):
        code = main(argv)
    return code, out.getvalue()


class TestParsing(unittest.TestCase):
    def test_given_move_text_when_parsing_then_flat_position(self):
        self.assertEqual(parse_move("10"), 10)
        self.assertEqual(parse_move("1,3"), 10)
        self.assertEqual(parse_move(" 1 3 "), 10)
        self.assertEqual(parse_move("2,2", size=3), 8)

    def test_given_bad_move_text_when_parsing_then_value_error(self):
        for text in ("49", "-1", "7,0", "abc", "", "1,2,3"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_move(text)

    def test_given_position_string_when_parsing_then_evaluated_state(self):
        text = ",".join(str(v) for v in draw_pattern())
        self.assertEqual(parse_position(text).result, GameResult.DRAW)

        won = ",".join(["1", "1", "1", "1"] + ["0"] * 45)
        self.assertEqual(parse_position(won).result, GameResult.X_WINS)

    def test_given_malformed_position_string_when_parsing_then_value_error(self):
        with self.assertRaises(ValueError):
            parse_position("1,2,0")
        with self.assertRaises(ValueError):
            parse_position(",".join(["a"] * 49))
        with self.assertRaises(ValueError):
            parse_position(",".join(["5"] * 49))
        with self.assertRaises(ValueError):
            parse_position(",".join(["99999999999999999999"] + ["0"] * 48))
        with self.assertRaises(ValueError):
            parse_position(",".join(["1.5"] + ["0"] * 48))


class TestCommands(unittest.TestCase):
    def test_given_test_all_when_run_then_every_scenario_passes(self):
        code, output = run_cli(['test_all'])
        self.assertEqual(code, 0)
        self.assertIn("All tests passed!", output)
        self.assertNotIn("FAILED", output)

    def test_given_position_when_testing_then_win_reported(self):
        position = ",".join(["2"] * 4 + ["1"] * 3 + ["0"] * 42)
        code, output = run_cli(['test', '--position', position])
        self.assertEqual(code, 0)
        self.assertIn("Win for O on line (0, 1, 2, 3)", output)
        self.assertIn("Empty spaces: 42", output)

    def test_given_bad_position_when_testing_then_error_printed(self):
        code, output = run_cli(['test', '--position', '1,2'])
        self.assertEqual(code, 0)
        self.assertIn("Error parsing position", output)

    def test_given_small_benchmark_when_run_then_timings_printed(self):
        code, output = run_cli(['benchmark', '--iterations', '10'])
        self.assertEqual(code, 0)
        self.assertIn("Line generation", output)
        self.assertIn("Rendering board 10 times", output)

    def test_given_zero_iterations_when_benchmarking_then_rejected_by_parser(self):
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            run_cli(['benchmark', '--iterations', '0'])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("must be at least 1", err.getvalue())

    def test_given_huge_cell_value_when_testing_then_error_printed(self):
        position = ",".join(["99999999999999999999"] + ["0"] * 48)
        code, output = run_cli(['test', '--position', position])
        self.assertEqual(code, 0)
        self.assertIn("Error parsing position", output)

    def test_given_bad_dimensions_when_benchmarking_then_error_exit(self):
        code, output = run_cli(['benchmark', '--iterations', '5', '--size', '3', '--run-length', '4'])
        self.assertEqual(code, 1)
        self.assertIn("Error:", output)

    def test_given_no_command_when_run_then_usage_hint(self):
        code, output = run_cli([])
        self.assertEqual(code, 1)
        self.assertIn("Please specify a command", output)


class TestRunEntryPoint(unittest.TestCase):
    def test_given_game_component_when_running_then_command_dispatched(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = run_main(['game', 'test_all'])
        self.assertEqual(code, 0)
        self.assertIn("All tests passed!", out.getvalue())

    def test_given_component_options_when_running_then_passed_through(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = run_main(['game', 'benchmark', '--iterations', '5'])
        self.assertEqual(code, 0)
        self.assertIn("Rendering board 5 times", out.getvalue())

    def test_given_unknown_component_when_running_then_usage_error(self):
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            run_main(['ai', 'train'])
        self.assertEqual(ctx.exception.code, 2)


class TestPlay(unittest.TestCase):
    def test_given_two_player_menu_when_x_completes_row_then_win_announced(self):
        moves = ['2', '0', '7', '1', '8', '2', '9', '0,3', '5', 'q']
        code, output = run_cli(['play'], moves)
        self.assertEqual(code, 0)
        self.assertIn("Starting a new Two Player game!", output)
        self.assertEqual(output.count("Game over! X wins!"), 1)
        self.assertIn("The game is over.", output)
        self.assertIn("Quitting game.", output)

    def test_given_occupied_cell_and_undo_when_playing_then_handled(self):
        code, output = run_cli(['play', '--mode', 'single'], ['0', '0', 'u', 'u', 'x', 'q'])
        self.assertEqual(code, 0)
        self.assertIn("Starting a new Single Player game!", output)
        self.assertIn("Invalid move: 0", output)
        self.assertIn("Move undone.", output)
        self.assertIn("No moves to undo.", output)
        self.assertIn("Invalid input.", output)

    def test_given_restart_and_menu_when_playing_then_back_to_menu(self):
        code, output = run_cli(['play', '--mode', 'two'], ['0', 'r', 'm', '3', 'q'])
        self.assertEqual(code, 0)
        self.assertIn("Game restarted.", output)
        self.assertIn("Please choose 1, 2 or q.", output)
        self.assertIn("Goodbye!", output)

    def test_given_input_closed_when_playing_then_quits(self):
        code, output = run_cli(['play'], [EOFError()])
        self.assertEqual(code, 0)
        self.assertIn("Goodbye!", output)

    def test_given_cli_when_status_checked_then_next_turn_shown(self):
        cli = SimpleCLI()
        cli.parse_args(['play'])
        cli.game = TicTacToeGame(mode=GameMode.TWO)
        self.assertEqual(cli.status_line(), "Next Turn: X")
        cli.game.make_move(0)
        self.assertEqual(cli.status_line(), "Next Turn: O")


if __name__ == '__main__':
    unittest.main()
