"""Backtracking Calcudoku solver with uniqueness check and difficulty score.

At each step the solver picks the empty cell with the fewest candidate values
(row-major order breaks ties), tries each candidate in ascending order and
recurses. The search stops once the tree is exhausted or a second solution
turns up.

While searching it keeps a branch difficulty score: the sum of ``(B - 1) ** 2``
over the branching factors ``B`` met on the way from the root to the current
position. A puzzle that never needs to guess scores 0. The score of the first
solution found becomes the puzzle's branch cost, and the reported difficulty
is::

    D = branch_cost * M + E

where ``M`` is the smallest power of ten greater than the number of cells and
``E`` is the number of cells left empty by the puzzle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.constants import SolveStatus
from ..core.models import Puzzle, all_values, count_values, iter_values, value_bit
from ..utils.logger import get_logger
from .cages import cage_candidates


LOGGER = get_logger(__name__)


@dataclass
class SolveResult:
    status: SolveStatus
    solution: Optional[List[int]] = None
    difficulty: Optional[int] = None

    @property
    def solvable(self) -> bool:
        return self.status != SolveStatus.UNSOLVABLE

    @property
    def unique(self) -> bool:
        return self.status == SolveStatus.UNIQUE


@dataclass
class _SearchContext:
    puzzle: Puzzle
    values: List[int]
    count: int = 0
    branch_cost: int = 0
    solution: Optional[List[int]] = None
    nodes: int = 0


# ----------------------------------------------------------------------
# Candidate analysis
# ----------------------------------------------------------------------
def row_column_candidates(size: int, values: List[int]) -> List[int]:
    """For each cell, the values not yet used in its row or column."""

    rows = [0] * size
    cols = [0] * size
    for pos, value in enumerate(values):
        if value:
            row, col = divmod(pos, size)
            bit = value_bit(value)
            rows[row] |= bit
            cols[col] |= bit

    full = all_values(size)
    return [full ^ (rows[pos // size] | cols[pos % size]) for pos in range(size * size)]


def candidates(puzzle: Puzzle, values: List[int]) -> List[int]:
    """Row/column exclusion intersected with every cage's candidate set."""

    result = row_column_candidates(puzzle.size, values)
    for _, cage in puzzle.allocated_cages():
        allowed = cage_candidates(cage, values, puzzle.size)
        for member in cage.members:
            result[member] &= allowed
    return result


def least_free_cell(values: List[int], cell_candidates: List[int]) -> Tuple[int, int]:
    """Empty cell with the fewest candidates, or ``(-1, 0)`` if the grid is full."""

    best = -1
    best_count = 0
    for pos, value in enumerate(values):
        if value:
            continue
        count = count_values(cell_candidates[pos])
        if best < 0 or count < best_count:
            best = pos
            best_count = count
            if not count:
                break
    if best < 0:
        return -1, 0
    return best, cell_candidates[best]


# ----------------------------------------------------------------------
# Search
# ----------------------------------------------------------------------
def _solve_recurse(ctx: _SearchContext, branch_cost: int) -> None:
    ctx.nodes += 1
    cell, options = least_free_cell(ctx.values, candidates(ctx.puzzle, ctx.values))

    if cell < 0:
        if not ctx.count:
            ctx.solution = list(ctx.values)
            ctx.branch_cost = branch_cost
        ctx.count += 1
        return

    if not options:
        return

    spread = count_values(options) - 1
    cost = branch_cost + spread * spread

    for value in iter_values(options):
        ctx.values[cell] = value
        _solve_recurse(ctx, cost)
        ctx.values[cell] = 0

        if ctx.count >= 2:
            return


def difficulty_multiplier(size: int) -> int:
    """Smallest power of ten strictly greater than the cell count."""

    multiplier = 1
    while multiplier <= size * size:
        multiplier *= 10
    return multiplier


def solve(puzzle: Puzzle) -> SolveResult:
    """Solve ``puzzle``, reporting uniqueness and (for unique puzzles) difficulty.

    The puzzle is not modified. For a puzzle with several solutions the first
    one found is returned but no difficulty is reported.
    """

    ctx = _SearchContext(puzzle=puzzle, values=list(puzzle.values))
    _solve_recurse(ctx, 0)
    LOGGER.debug("Search visited %d nodes, found %d solution(s)", ctx.nodes, ctx.count)

    if not ctx.count:
        return SolveResult(status=SolveStatus.UNSOLVABLE)

    if ctx.count > 1:
        return SolveResult(status=SolveStatus.MULTIPLE, solution=ctx.solution)

    difficulty = ctx.branch_cost * difficulty_multiplier(puzzle.size) + puzzle.empty_cell_count()
    return SolveResult(status=SolveStatus.UNIQUE, solution=ctx.solution, difficulty=difficulty)
