"""Deterministic structural validation for puzzles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.constants import MAX_CAGE_SIZE, MAX_SIZE, CageType, GeneratorFlags
from ..core.exceptions import ValidationError
from ..core.models import Cage, Puzzle, cage_to_char, flood_fill
from ..utils.logger import get_logger
from .grid import is_latin_square
from .mutator import derive_target


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class PuzzleValidator:
    """Checks puzzle geometry and clues, optionally against a known solution."""

    def __init__(self, flags: GeneratorFlags = GeneratorFlags.NONE) -> None:
        self.flags = flags

    def validate(self, puzzle: Puzzle, solution: Optional[Sequence[int]] = None) -> ValidationResult:
        try:
            self._check_size(puzzle)
            self._check_values(puzzle)
            self._check_cage_map(puzzle)
            for index, cage in puzzle.allocated_cages():
                self._check_cage(puzzle, index, cage)
            if solution is not None:
                self._check_solution(puzzle, solution)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def validate_or_raise(self, puzzle: Puzzle, solution: Optional[Sequence[int]] = None) -> None:
        result = self.validate(puzzle, solution)
        if not result.ok:
            raise ValidationError("; ".join(result.messages))

    def _check_size(self, puzzle: Puzzle) -> None:
        if not 1 <= puzzle.size <= MAX_SIZE:
            raise ValidationError(f"Puzzle size {puzzle.size} outside 1..{MAX_SIZE}")
        if len(puzzle.values) != puzzle.cell_count or len(puzzle.cage_map) != puzzle.cell_count:
            raise ValidationError("Grid arrays do not match the puzzle size")

    def _check_values(self, puzzle: Puzzle) -> None:
        for pos, value in enumerate(puzzle.values):
            if not 0 <= value <= puzzle.size:
                row, col = puzzle.row_col(pos)
                raise ValidationError(f"Given value {value} out of range at ({row},{col})")

    def _check_cage_map(self, puzzle: Puzzle) -> None:
        expected: List[Optional[int]] = [None] * puzzle.cell_count
        for index, cage in puzzle.allocated_cages():
            for member in cage.members:
                if not 0 <= member < puzzle.cell_count:
                    raise ValidationError(f"Cage {cage_to_char(index)} has a member outside the grid")
                if expected[member] is not None:
                    raise ValidationError(
                        f"Cell {puzzle.row_col(member)} belongs to cages "
                        f"{cage_to_char(expected[member])} and {cage_to_char(index)}"
                    )
                expected[member] = index
        if expected != list(puzzle.cage_map):
            raise ValidationError("Cell-to-cage map does not match cage members")

    def _check_cage(self, puzzle: Puzzle, index: int, cage: Cage) -> None:
        name = cage_to_char(index)

        if cage.type is None:
            raise ValidationError(f"Cage {name} has no type")
        if cage.target < 0:
            raise ValidationError(f"Cage {name} has no target")
        if cage.size < 2:
            raise ValidationError(f"Cage {name} has only a single member")
        if cage.size > MAX_CAGE_SIZE:
            raise ValidationError(f"Cage {name} has more than {MAX_CAGE_SIZE} members")
        if cage.type in (CageType.PRODUCT, CageType.RATIO) and not cage.target:
            raise ValidationError(f"Cage {name} is of type {cage.type.value} but it has a target of 0")
        if (
            cage.type in (CageType.DIFFERENCE, CageType.RATIO)
            and cage.size > 2
            and self.flags & GeneratorFlags.TWO_CELL
        ):
            raise ValidationError(f"Cage {name} of type {cage.type.value} has more than two members")

        reached = flood_fill(puzzle, cage.members[0])
        for member in cage.members:
            if member not in reached:
                row, col = puzzle.row_col(member)
                raise ValidationError(f"Cage {name} is not contiguous at cell ({row},{col})")

        for member in cage.members:
            if puzzle.values[member]:
                row, col = puzzle.row_col(member)
                raise ValidationError(f"Cage {name} member ({row},{col}) has a given value")

    def _check_solution(self, puzzle: Puzzle, solution: Sequence[int]) -> None:
        if not is_latin_square(puzzle.size, list(solution)):
            raise ValidationError("Solution grid is not a Latin square")

        for pos, value in enumerate(puzzle.values):
            if value and value != solution[pos]:
                row, col = puzzle.row_col(pos)
                raise ValidationError(f"Given value at ({row},{col}) disagrees with the solution")

        for index, cage in puzzle.allocated_cages():
            target = derive_target(cage.type, [solution[m] for m in cage.members])
            if target != cage.target:
                raise ValidationError(
                    f"Cage {cage_to_char(index)} target {cage.target} does not match "
                    f"the solution (expected {target})"
                )
