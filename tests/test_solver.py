import unittest
from typing import List, Sequence, Tuple

from calcudoku.core.constants import CageType, SolveStatus
from calcudoku.core.models import Puzzle
from calcudoku.engine.solver import (
    candidates,
    difficulty_multiplier,
    least_free_cell,
    row_column_candidates,
    solve,
)


LATIN_4 = [
    1, 2, 3, 4,
    2, 1, 4, 3,
    3, 4, 1, 2,
    4, 3, 2, 1,
]


def make_puzzle(
    size: int,
    values: Sequence[int],
    cages: Sequence[Tuple[CageType, int, List[int]]] = (),
) -> Puzzle:
    puzzle = Puzzle.empty(size)
    puzzle.values[:] = values
    for index, (cage_type, target, members) in enumerate(cages):
        cage = puzzle.cages[index]
        cage.type = cage_type
        cage.target = target
        cage.members[:] = members
    puzzle.rebuild_cage_map()
    return puzzle


def three_by_three() -> Puzzle:
    return make_puzzle(
        3,
        [0, 0, 0, 0, 0, 0, 0, 1, 2],
        [
            (CageType.SUM, 6, [0, 1, 4]),
            (CageType.PRODUCT, 3, [2, 5]),
            (CageType.DIFFERENCE, 1, [3, 6]),
        ],
    )


class CandidateTests(unittest.TestCase):
    def test_row_column_exclusion(self) -> None:
        self.assertEqual(row_column_candidates(2, [1, 0, 0, 0]), [2, 2, 2, 3])

    def test_cage_sets_intersect_row_column_sets(self) -> None:
        puzzle = make_puzzle(3, [0] * 9, [(CageType.PRODUCT, 3, [0, 1])])
        result = candidates(puzzle, puzzle.values)
        self.assertEqual(result[0], 0b101)
        self.assertEqual(result[1], 0b101)
        self.assertEqual(result[3], 0b111)

    def test_least_free_cell_prefers_fewest_then_lowest(self) -> None:
        self.assertEqual(least_free_cell([1, 0, 0, 0], [2, 2, 2, 3]), (1, 2))

    def test_least_free_cell_on_full_grid(self) -> None:
        self.assertEqual(least_free_cell([1, 2, 2, 1], [0, 0, 0, 0]), (-1, 0))

    def test_difficulty_multiplier_exceeds_cell_count(self) -> None:
        self.assertEqual(difficulty_multiplier(1), 10)
        self.assertEqual(difficulty_multiplier(3), 10)
        self.assertEqual(difficulty_multiplier(4), 100)
        self.assertEqual(difficulty_multiplier(10), 1000)
        self.assertEqual(difficulty_multiplier(16), 1000)


class SolveTests(unittest.TestCase):
    def test_single_empty_cell(self) -> None:
        result = solve(Puzzle.empty(1))
        self.assertEqual(result.status, SolveStatus.UNIQUE)
        self.assertEqual(result.solution, [1])
        self.assertEqual(result.difficulty, 1)

    def test_fully_given_grid(self) -> None:
        puzzle = make_puzzle(2, [1, 2, 2, 1])
        result = solve(puzzle)
        self.assertEqual(result.status, SolveStatus.UNIQUE)
        self.assertEqual(result.solution, [1, 2, 2, 1])
        self.assertEqual(result.difficulty, 0)

    def test_whole_grid_sum_cage_has_two_solutions(self) -> None:
        puzzle = make_puzzle(2, [0, 0, 0, 0], [(CageType.SUM, 6, [0, 1, 2, 3])])
        result = solve(puzzle)
        self.assertEqual(result.status, SolveStatus.MULTIPLE)
        self.assertIsNone(result.difficulty)
        self.assertIn(result.solution, ([1, 2, 2, 1], [2, 1, 1, 2]))

    def test_impossible_sum_is_unsolvable(self) -> None:
        puzzle = make_puzzle(2, [0, 0, 0, 0], [(CageType.SUM, 5, [0, 1])])
        result = solve(puzzle)
        self.assertEqual(result.status, SolveStatus.UNSOLVABLE)
        self.assertFalse(result.solvable)
        self.assertIsNone(result.solution)

    def test_forced_cells_have_no_branch_cost(self) -> None:
        values = list(LATIN_4)
        for pos in (0, 1, 4):
            values[pos] = 0
        result = solve(make_puzzle(4, values))
        self.assertEqual(result.status, SolveStatus.UNIQUE)
        self.assertEqual(result.solution, LATIN_4)
        self.assertEqual(result.difficulty, 3)

    def test_intercalate_is_not_unique(self) -> None:
        values = list(LATIN_4)
        for pos in (0, 1, 4, 5):
            values[pos] = 0
        result = solve(make_puzzle(4, values))
        self.assertEqual(result.status, SolveStatus.MULTIPLE)
        self.assertIsNone(result.difficulty)

    def test_cages_of_several_types(self) -> None:
        result = solve(three_by_three())
        self.assertTrue(result.unique)
        self.assertEqual(result.solution, [1, 2, 3, 2, 3, 1, 3, 1, 2])
        self.assertEqual(result.difficulty, 7)

    def test_ratio_cage(self) -> None:
        values = list(LATIN_4)
        values[0] = values[1] = 0
        puzzle = make_puzzle(4, values, [(CageType.RATIO, 2, [0, 1])])
        result = solve(puzzle)
        self.assertEqual(result.status, SolveStatus.UNIQUE)
        self.assertEqual(result.solution, LATIN_4)

    def test_solve_leaves_puzzle_untouched(self) -> None:
        puzzle = three_by_three()
        before = puzzle.copy()
        solve(puzzle)
        self.assertEqual(puzzle, before)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
