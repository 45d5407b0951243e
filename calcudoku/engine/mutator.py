"""Cage layout edits against a fixed solution grid.

The primitives in the first section keep the cell-to-cage map consistent
but may leave a cage fragmented or with a stale target. The mutations in
the second section combine them so that every cage stays contiguous, has at
least two members and carries a target achievable from the solution.

Cells that leave a cage always get their solution value back as a given, so
the puzzle keeps the same solution throughout.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from ..core.constants import MAX_CAGE_SIZE, CageType, GeneratorFlags
from ..core.models import Puzzle, flood_fill
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

CAGE_TYPES = (CageType.SUM, CageType.DIFFERENCE, CageType.PRODUCT, CageType.RATIO)


def derive_target(cage_type: CageType, values: Sequence[int]) -> Optional[int]:
    """Clue for ``values`` under ``cage_type``, or ``None`` if there is none."""

    if not values:
        return None

    largest = max(values)
    total = sum(values)
    product = 1
    for value in values:
        product *= value

    if cage_type == CageType.SUM:
        return total
    if cage_type == CageType.DIFFERENCE:
        if largest * 2 < total:
            return None
        return largest * 2 - total
    if cage_type == CageType.PRODUCT:
        return product
    if (largest * largest) % product:
        return None
    return largest * largest // product


class CageMutator:
    """Invariant-preserving cage edits for one solution grid."""

    def __init__(
        self,
        solution: Sequence[int],
        flags: GeneratorFlags = GeneratorFlags.NONE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.solution = list(solution)
        self.flags = flags
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------
    def allocate(self, puzzle: Puzzle) -> Optional[int]:
        for index, cage in enumerate(puzzle.cages):
            if not cage.is_allocated():
                return index
        return None

    def destroy(self, puzzle: Puzzle, index: int) -> None:
        cage = puzzle.cages[index]
        for member in cage.members:
            puzzle.values[member] = self.solution[member]
            puzzle.cage_map[member] = None
        cage.clear()

    def add_cell(self, puzzle: Puzzle, index: int, pos: int) -> bool:
        """Add a cage-free cell to the cage. No geometry checks are made."""

        cage = puzzle.cages[index]
        if puzzle.cage_map[pos] is not None or cage.size >= MAX_CAGE_SIZE:
            return False
        cage.members.append(pos)
        puzzle.values[pos] = 0
        puzzle.cage_map[pos] = index
        return True

    def remove_cell(self, puzzle: Puzzle, index: int, pos: int) -> None:
        cage = puzzle.cages[index]
        if pos not in cage.members:
            return
        slot = cage.members.index(pos)
        cage.members[slot] = cage.members[-1]
        cage.members.pop()
        puzzle.values[pos] = self.solution[pos]
        puzzle.cage_map[pos] = None
        if cage.size < 2:
            self.destroy(puzzle, index)

    def retarget(self, puzzle: Puzzle, index: int) -> bool:
        """Recompute the cage target from the solution. False if impossible."""

        cage = puzzle.cages[index]
        if not cage.is_allocated():
            return True

        if (
            cage.type in (CageType.DIFFERENCE, CageType.RATIO)
            and cage.size > 2
            and self.flags & GeneratorFlags.TWO_CELL
        ):
            return False

        target = derive_target(cage.type, [self.solution[m] for m in cage.members])
        if target is None:
            return False
        cage.target = target
        return True

    def cut_islands(self, puzzle: Puzzle, index: int) -> None:
        """Release members not 4-connected to the cage's first member."""

        cage = puzzle.cages[index]
        if not cage.is_allocated():
            return

        reached = flood_fill(puzzle, cage.members[0])
        kept: List[int] = []
        for member in cage.members:
            if member in reached:
                kept.append(member)
            else:
                puzzle.values[member] = self.solution[member]
                puzzle.cage_map[member] = None
        cage.members[:] = kept

        if cage.size < 2:
            self.destroy(puzzle, index)

    def select_type(self, puzzle: Puzzle, index: int) -> bool:
        """Give the cage a random type whose target can be derived."""

        types = list(CAGE_TYPES)
        self.rng.shuffle(types)
        cage = puzzle.cages[index]
        for cage_type in types:
            cage.type = cage_type
            if self.retarget(puzzle, index):
                return True
        return False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def _settle(self, puzzle: Puzzle, index: int) -> None:
        if self.retarget(puzzle, index):
            return
        if not self.select_type(puzzle, index):
            LOGGER.debug("No satisfiable type for cage %d, destroying it", index)
            self.destroy(puzzle, index)

    def detach_cell(self, puzzle: Puzzle, pos: int) -> None:
        """Take ``pos`` out of its cage, repairing what is left of the cage."""

        index = puzzle.cage_map[pos]
        if index is None:
            return

        if puzzle.cages[index].size <= 2:
            self.destroy(puzzle, index)
            return

        self.remove_cell(puzzle, index, pos)
        self.cut_islands(puzzle, index)
        self._settle(puzzle, index)

    def join_cells(self, puzzle: Puzzle, pos: int, neighbor: int) -> None:
        """Put ``pos`` in the same cage as the adjacent cell ``neighbor``."""

        neighbor_index = puzzle.cage_map[neighbor]
        own_index = puzzle.cage_map[pos]

        if own_index is not None:
            if own_index == neighbor_index:
                return
            self.detach_cell(puzzle, pos)

        if neighbor_index is not None:
            self.add_cell(puzzle, neighbor_index, pos)
            self._settle(puzzle, neighbor_index)
            return

        index = self.allocate(puzzle)
        if index is None:
            LOGGER.debug("All cages allocated, skipping join at %d", pos)
            return
        self.add_cell(puzzle, index, pos)
        self.add_cell(puzzle, index, neighbor)
        if not self.select_type(puzzle, index):
            self.destroy(puzzle, index)

    # ------------------------------------------------------------------
    # Random site selection
    # ------------------------------------------------------------------
    def choose_cell(self, size: int) -> int:
        row = self.rng.randrange(size)
        col = self.rng.randrange(size)
        return row * size + col

    def choose_neighbor(self, size: int, pos: int) -> int:
        """Pick one of the four neighbours of ``pos`` at random."""

        row, col = divmod(pos, size)
        next_col = col + 1
        next_row = row + 1

        if next_col >= size or (col and self.rng.randrange(2)):
            next_col = col - 1
        if next_row >= size or (row and self.rng.randrange(2)):
            next_row = row - 1

        if self.rng.randrange(2):
            return row * size + next_col
        return next_row * size + col

    def mutate(self, puzzle: Puzzle) -> None:
        """Join a random cell with a random neighbour."""

        pos = self.choose_cell(puzzle.size)
        self.join_cells(puzzle, pos, self.choose_neighbor(puzzle.size, pos))
