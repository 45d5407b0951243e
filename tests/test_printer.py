import unittest

from calcudoku.io.parser import parse_puzzle
from calcudoku.io.printer import (
    UNICODE_TEMPLATE,
    format_puzzle,
    format_spec,
    horizontal_joins,
    vertical_joins,
)


SPEC = """\
A+6  A   B*3
C-1  A   B
C    1   2
"""

SOLUTION = [1, 2, 3, 2, 3, 1, 3, 1, 2]


class FormatSpecTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = parse_puzzle(SPEC)

    def test_clues_on_first_member(self) -> None:
        self.assertEqual(
            format_spec(self.puzzle),
            "A+6\tA\tB*3\nC-1\tA\tB\nC\t1\t2",
        )

    def test_values_replace_cage_letters(self) -> None:
        self.assertEqual(format_spec(self.puzzle, SOLUTION), "1\t2\t3\n2\t3\t1\n3\t1\t2")

    def test_output_parses_back(self) -> None:
        self.assertEqual(parse_puzzle(format_spec(self.puzzle)), self.puzzle)

    def test_empty_cells_print_as_dots(self) -> None:
        self.assertEqual(format_spec(parse_puzzle(". 1\n1 .")), ".\t1\n1\t.")


class FormatPuzzleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = parse_puzzle(SPEC)

    def test_joins(self) -> None:
        self.assertEqual(horizontal_joins(self.puzzle, 0), 0b01)
        self.assertEqual(horizontal_joins(self.puzzle, 1), 0)
        self.assertEqual(vertical_joins(self.puzzle, 0), 0b110)
        self.assertEqual(vertical_joins(self.puzzle, 1), 0b001)

    def test_ascii_layout(self) -> None:
        lines = format_puzzle(self.puzzle).split("\n")

        self.assertEqual(len(lines), 13)
        self.assertEqual({len(line) for line in lines}, {19})
        self.assertEqual(lines[0], "+" + "=" * 17 + "+")
        self.assertEqual(lines[1], "|6+   :     |3*   |")
        self.assertEqual(lines[4], "+=====+.....|.....|")
        self.assertEqual(lines[10], "|     |  1  |  2  |")

    def test_solution_values_are_centred(self) -> None:
        lines = format_puzzle(self.puzzle, SOLUTION).split("\n")
        self.assertEqual(lines[2], "|  1  :  2  |  3  |")

    def test_unicode_template(self) -> None:
        lines = format_puzzle(self.puzzle, template=UNICODE_TEMPLATE).split("\n")
        self.assertEqual(lines[0], "╔═════" + "═" + "═════" + "╦" + "═════" + "╗")
        self.assertEqual(lines[4], "╠═════╗┈┈┈┈┈║┈┈┈┈┈║")
        self.assertTrue(lines[-1].startswith("╚"))

    def test_wide_clues_widen_cells(self) -> None:
        puzzle = parse_puzzle("A*390625 A A A A\nA A A . .\n. . . . .\n. . . . .\n. . . . .\n")
        lines = format_puzzle(puzzle).split("\n")
        self.assertTrue(lines[1].startswith("|390625*:"))
        self.assertEqual(len(lines[0]), 5 * 7 + 6)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
