"""Independent uniqueness check using the OR-Tools CP-SAT solver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ortools.sat.python import cp_model

from ..core.constants import CageType, SolveStatus
from ..core.models import Cage, Puzzle
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


@dataclass
class CrossCheckResult:
    """``status`` is ``None`` when CP-SAT ran out of time."""

    status: Optional[SolveStatus]
    solution: Optional[List[int]] = None


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    """Record the first solution and stop at the second."""

    def __init__(self, cells: List[cp_model.IntVar], limit: int = 2) -> None:
        super().__init__()
        self._cells = cells
        self._limit = limit
        self.count = 0
        self.first: Optional[List[int]] = None

    def on_solution_callback(self) -> None:
        if self.first is None:
            self.first = [self.value(cell) for cell in self._cells]
        self.count += 1
        if self.count >= self._limit:
            self.stop_search()


def build_model(puzzle: Puzzle) -> tuple[cp_model.CpModel, List[cp_model.IntVar]]:
    """Model the puzzle with exact cage constraints."""

    size = puzzle.size
    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Cell variables, givens fixed
    # ------------------------------------------------------------------
    cells: List[cp_model.IntVar] = []
    for pos, given in enumerate(puzzle.values):
        row, col = puzzle.row_col(pos)
        if given:
            cells.append(model.new_int_var(given, given, f"v_{row}_{col}"))
        else:
            cells.append(model.new_int_var(1, size, f"v_{row}_{col}"))

    # ------------------------------------------------------------------
    # Step 2: Latin square
    # ------------------------------------------------------------------
    for index in range(size):
        model.add_all_different(cells[index * size:(index + 1) * size])
        model.add_all_different(cells[index::size])

    # ------------------------------------------------------------------
    # Step 3: Cages
    # ------------------------------------------------------------------
    for index, cage in puzzle.allocated_cages():
        _add_cage(model, cells, size, index, cage)

    return model, cells


def _add_cage(model: cp_model.CpModel, cells: List[cp_model.IntVar], size: int, index: int, cage: Cage) -> None:
    members = [cells[m] for m in cage.members]

    if cage.type == CageType.SUM:
        model.add(sum(members) == cage.target)
        return

    if cage.type == CageType.PRODUCT:
        product = model.new_int_var(1, size ** cage.size, f"prod_{index}")
        model.add_multiplication_equality(product, members)
        model.add(product == cage.target)
        return

    largest = model.new_int_var(1, size, f"max_{index}")
    model.add_max_equality(largest, members)

    if cage.type == CageType.DIFFERENCE:
        model.add(2 * largest - sum(members) == cage.target)
        return

    square = model.new_int_var(1, size * size, f"sq_{index}")
    model.add_multiplication_equality(square, [largest, largest])
    product = model.new_int_var(1, size ** cage.size, f"prod_{index}")
    model.add_multiplication_equality(product, members)
    model.add(square == cage.target * product)


def crosscheck_puzzle(puzzle: Puzzle, timeout: float = 30.0) -> CrossCheckResult:
    """Count solutions (up to two) with CP-SAT."""

    model, cells = build_model(puzzle)

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1

    counter = _SolutionCounter(cells)
    status = solver.solve(model, counter)
    LOGGER.debug(
        "CP-SAT cross-check: status=%s, solutions=%d, %.2fs",
        solver.status_name(status),
        counter.count,
        solver.wall_time,
    )

    if counter.count >= 2:
        return CrossCheckResult(status=SolveStatus.MULTIPLE, solution=counter.first)
    if status == cp_model.OPTIMAL:
        if counter.count == 1:
            return CrossCheckResult(status=SolveStatus.UNIQUE, solution=counter.first)
        return CrossCheckResult(status=SolveStatus.UNSOLVABLE)
    if status == cp_model.INFEASIBLE:
        return CrossCheckResult(status=SolveStatus.UNSOLVABLE)
    return CrossCheckResult(status=None, solution=counter.first)
