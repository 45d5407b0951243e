import unittest

from calcudoku.core.constants import CageType, GeneratorFlags
from calcudoku.core.exceptions import ValidationError
from calcudoku.core.models import Puzzle
from calcudoku.engine.validator import PuzzleValidator


SOLUTION = [1, 2, 3, 2, 3, 1, 3, 1, 2]


def puzzle_with_cage(cage_type: CageType, target: int, members: list) -> Puzzle:
    puzzle = Puzzle.empty(3)
    puzzle.values[:] = SOLUTION
    cage = puzzle.cages[0]
    cage.type = cage_type
    cage.target = target
    cage.members[:] = members
    for member in members:
        puzzle.values[member] = 0
    puzzle.rebuild_cage_map()
    return puzzle


class PuzzleValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = PuzzleValidator()

    def test_valid_puzzle_passes(self) -> None:
        puzzle = puzzle_with_cage(CageType.SUM, 6, [0, 1, 4])
        result = self.validator.validate(puzzle, SOLUTION)
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_non_contiguous_cage(self) -> None:
        puzzle = puzzle_with_cage(CageType.SUM, 4, [0, 2])
        with self.assertLogs("calcudoku.engine.validator", level="ERROR"):
            result = self.validator.validate(puzzle)
        self.assertFalse(result.ok)
        self.assertIn("not contiguous", result.messages[0])

    def test_single_member_cage(self) -> None:
        puzzle = puzzle_with_cage(CageType.SUM, 1, [0])
        result = self.validator.validate(puzzle)
        self.assertIn("single member", result.messages[0])

    def test_zero_product_target(self) -> None:
        puzzle = puzzle_with_cage(CageType.PRODUCT, 0, [0, 1])
        result = self.validator.validate(puzzle)
        self.assertIn("target of 0", result.messages[0])

    def test_two_cell_mode_limits_difference_cages(self) -> None:
        puzzle = puzzle_with_cage(CageType.DIFFERENCE, 0, [0, 1, 2])
        self.assertTrue(self.validator.validate(puzzle, SOLUTION).ok)

        strict = PuzzleValidator(flags=GeneratorFlags.TWO_CELL)
        result = strict.validate(puzzle, SOLUTION)
        self.assertFalse(result.ok)
        self.assertIn("more than two members", result.messages[0])

    def test_target_must_match_solution(self) -> None:
        puzzle = puzzle_with_cage(CageType.SUM, 5, [0, 1, 4])
        self.assertTrue(self.validator.validate(puzzle).ok)
        result = self.validator.validate(puzzle, SOLUTION)
        self.assertIn("does not match", result.messages[0])

    def test_given_must_match_solution(self) -> None:
        puzzle = puzzle_with_cage(CageType.SUM, 6, [0, 1, 4])
        puzzle.values[8] = 3
        result = self.validator.validate(puzzle, SOLUTION)
        self.assertFalse(result.ok)

    def test_stale_cage_map(self) -> None:
        puzzle = puzzle_with_cage(CageType.SUM, 6, [0, 1, 4])
        puzzle.cage_map[2] = 0
        result = self.validator.validate(puzzle)
        self.assertIn("map", result.messages[0])

    def test_validate_or_raise(self) -> None:
        puzzle = puzzle_with_cage(CageType.SUM, 1, [0])
        with self.assertRaises(ValidationError):
            self.validator.validate_or_raise(puzzle)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
