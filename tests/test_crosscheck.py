import unittest

from calcudoku.core.constants import GeneratorFlags, SolveStatus
from calcudoku.engine.crosscheck import build_model, crosscheck_puzzle
from calcudoku.engine.generator import GeneratorConfig, PuzzleGenerator
from calcudoku.engine.solver import solve
from calcudoku.io.parser import parse_puzzle


SPEC = """\
A+6  A   B*3
C-1  A   B
C    1   2
"""


class CrossCheckTests(unittest.TestCase):
    def test_unique_puzzle(self) -> None:
        result = crosscheck_puzzle(parse_puzzle(SPEC))
        self.assertEqual(result.status, SolveStatus.UNIQUE)
        self.assertEqual(result.solution, [1, 2, 3, 2, 3, 1, 3, 1, 2])

    def test_multiple_solutions(self) -> None:
        result = crosscheck_puzzle(parse_puzzle("A+6 A\nA A\n"))
        self.assertEqual(result.status, SolveStatus.MULTIPLE)

    def test_unsolvable(self) -> None:
        result = crosscheck_puzzle(parse_puzzle("A+5 A\n. .\n"))
        self.assertEqual(result.status, SolveStatus.UNSOLVABLE)
        self.assertIsNone(result.solution)

    def test_model_has_one_variable_per_cell(self) -> None:
        _, cells = build_model(parse_puzzle(SPEC))
        self.assertEqual(len(cells), 9)

    def test_agrees_with_search_on_generated_puzzles(self) -> None:
        for seed, flags in ((4, GeneratorFlags.NONE), (5, GeneratorFlags.TWO_CELL)):
            with self.subTest(seed=seed):
                config = GeneratorConfig(size=5, flags=flags, seed=seed, iterations=15)
                puzzle = PuzzleGenerator(config).generate().puzzle
                search = solve(puzzle)
                check = crosscheck_puzzle(puzzle)
                self.assertEqual(check.status, search.status)
                self.assertEqual(check.solution, search.solution)

    def test_generator_records_crosscheck(self) -> None:
        config = GeneratorConfig(size=4, seed=12, iterations=10, crosscheck=True)
        result = PuzzleGenerator(config).generate()
        self.assertEqual(result.validation_messages, [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
