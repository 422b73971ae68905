import unittest

from tictactoe7.game.lines import count_lines, generate_lines, lines_through
from tictactoe7.utils import DIRECTION_VECTORS, to_row_col


class TestLineCatalog(unittest.TestCase):
    def test_given_default_grid_when_generating_then_88_lines_of_four(self):
        lines = generate_lines()
        self.assertEqual(len(lines), 88)
        for line in lines:
            self.assertEqual(len(line), 4)
            self.assertEqual(len(set(line)), 4)
            self.assertTrue(all(0 <= position < 49 for position in line))

    def test_given_default_grid_when_generating_then_every_line_is_straight_and_on_grid(self):
        steps = set(DIRECTION_VECTORS.values())
        for line in generate_lines():
            cells = [to_row_col(position, 7) for position in line]
            deltas = {(r2 - r1, c2 - c1) for (r1, c1), (r2, c2) in zip(cells, cells[1:])}
            self.assertEqual(len(deltas), 1, line)
            self.assertIn(deltas.pop(), steps)

    def test_given_other_sizes_when_generating_then_every_position_on_grid(self):
        for size in range(4, 9):
            for run_length in range(2, size + 1):
                for line in generate_lines(size, run_length):
                    cells = [to_row_col(position, size) for position in line]
                    self.assertTrue(all(0 <= position < size * size for position in line))
                    self.assertLessEqual(max(abs(c1 - c2) for (_, c1), (_, c2) in zip(cells, cells[1:])), 1)

    def test_given_default_grid_when_normalizing_direction_then_no_duplicates(self):
        lines = generate_lines()
        self.assertEqual(len({frozenset(line) for line in lines}), len(lines))
        normalized = {min(line, tuple(reversed(line))) for line in lines}
        self.assertEqual(len(normalized), len(lines))

    def test_given_default_grid_when_generating_then_directions_in_catalog_order(self):
        lines = generate_lines()
        self.assertEqual(lines[0], (0, 1, 2, 3))
        self.assertEqual(lines[27], (45, 46, 47, 48))
        self.assertEqual(lines[28], (0, 7, 14, 21))
        self.assertEqual(lines[29], (7, 14, 21, 28))
        self.assertEqual(lines[56], (0, 8, 16, 24))
        self.assertEqual(lines[71], (24, 32, 40, 48))
        self.assertEqual(lines[72], (3, 9, 15, 21))
        self.assertEqual(lines[87], (27, 33, 39, 45))

    def test_given_classic_board_when_generating_then_eight_tictactoe_lines(self):
        lines = generate_lines(3, 3)
        expected = {
            (0, 1, 2), (3, 4, 5), (6, 7, 8),
            (0, 3, 6), (1, 4, 7), (2, 5, 8),
            (0, 4, 8), (2, 4, 6),
        }
        self.assertEqual(set(lines), expected)
        self.assertEqual(len(lines), 8)

    def test_given_many_sizes_when_counting_then_closed_form_matches(self):
        for size in range(2, 10):
            for run_length in range(2, size + 1):
                with self.subTest(size=size, run_length=run_length):
                    self.assertEqual(len(generate_lines(size, run_length)),
                                     count_lines(size, run_length))

    def test_given_bad_dimensions_when_generating_then_value_error(self):
        with self.assertRaises(ValueError):
            generate_lines(3, 4)
        with self.assertRaises(ValueError):
            generate_lines(5, 1)
        with self.assertRaises(ValueError):
            count_lines(2, 3)

    def test_given_same_dimensions_when_generating_twice_then_cached_result(self):
        self.assertIs(generate_lines(7, 4), generate_lines(7, 4))

    def test_given_position_when_listing_lines_through_then_exactly_containing_lines(self):
        for position in (0, 6, 24, 48):
            expected = tuple(line for line in generate_lines() if position in line)
            self.assertEqual(lines_through(position), expected)
        self.assertEqual(len(lines_through(24)), 16)
        self.assertEqual(len(lines_through(0)), 3)
        self.assertEqual(len(lines_through(6)), 3)

    def test_given_off_board_position_when_listing_lines_through_then_index_error(self):
        with self.assertRaises(IndexError):
            lines_through(49)
        with self.assertRaises(IndexError):
            lines_through(-1)


if __name__ == '__main__':
    unittest.main()
