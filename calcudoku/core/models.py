"""Data models supporting the Calcudoku solver and generator.

A grid is stored as a flat list of ``size * size`` cells indexed in
row-major order, so ``pos = row * size + col``. Ordering positions by index
is the same as scanning the grid row by row, which the solver relies on for
tie-breaking and the generator relies on when choosing the cell that carries
a cage's clue.

Sets of values are plain ``int`` bitmasks: bit ``v - 1`` set means value
``v`` is a member.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .constants import MAX_CAGES, ORTHOGONAL_STEPS, TARGET_UNSET, CageType


# ----------------------------------------------------------------------
# Value sets
# ----------------------------------------------------------------------
def value_bit(value: int) -> int:
    return 1 << (value - 1)


def value_range(low: int, high: int) -> int:
    """Set containing every value in ``[low, high]``."""

    if low > high:
        return 0
    return ((1 << (high - low + 1)) - 1) << (low - 1)


def all_values(size: int) -> int:
    return (1 << size) - 1


def count_values(values: int) -> int:
    return bin(values).count("1")


def iter_values(values: int) -> Iterator[int]:
    """Yield the members of a value set in ascending order."""

    value = 1
    while values:
        if values & 1:
            yield value
        values >>= 1
        value += 1


# ----------------------------------------------------------------------
# Cage naming
# ----------------------------------------------------------------------
def cage_to_char(index: int) -> str:
    if index < 26:
        return chr(ord("A") + index)
    return chr(ord("a") + index - 26)


def char_to_cage(ch: str) -> Optional[int]:
    if "A" <= ch <= "Z":
        return ord(ch) - ord("A")
    if "a" <= ch <= "z":
        return ord(ch) - ord("a") + 26
    return None


# ----------------------------------------------------------------------
# Models
# ----------------------------------------------------------------------
@dataclass
class Cage:
    """A group of contiguous cells sharing one arithmetic clue.

    A cage without members is unallocated.
    """

    type: Optional[CageType] = None
    target: int = TARGET_UNSET
    members: List[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    def is_allocated(self) -> bool:
        return bool(self.members)

    def clear(self) -> None:
        self.type = None
        self.target = TARGET_UNSET
        self.members.clear()

    def copy(self) -> "Cage":
        return Cage(type=self.type, target=self.target, members=list(self.members))


@dataclass
class Puzzle:
    """Grid size, given values, cage definitions and the cell-to-cage map.

    Invariants kept by every mutating helper:

    * ``cage_map[p] == i`` for every member ``p`` of cage ``i``;
    * a cell belongs to at most one cage;
    * caged cells have no given value.
    """

    size: int
    values: List[int]
    cages: List[Cage]
    cage_map: List[Optional[int]]

    @classmethod
    def empty(cls, size: int) -> "Puzzle":
        cells = size * size
        return cls(
            size=size,
            values=[0] * cells,
            cages=[Cage() for _ in range(MAX_CAGES)],
            cage_map=[None] * cells,
        )

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def pos(self, row: int, col: int) -> int:
        return row * self.size + col

    def row_col(self, pos: int) -> Tuple[int, int]:
        return divmod(pos, self.size)

    def neighbors(self, pos: int) -> Iterable[int]:
        row, col = self.row_col(pos)
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = row + dr, col + dc
            if 0 <= nr < self.size and 0 <= nc < self.size:
                yield self.pos(nr, nc)

    def allocated_cages(self) -> Iterator[Tuple[int, Cage]]:
        for index, cage in enumerate(self.cages):
            if cage.is_allocated():
                yield index, cage

    def cage_of(self, pos: int) -> Optional[Cage]:
        index = self.cage_map[pos]
        return None if index is None else self.cages[index]

    def rebuild_cage_map(self) -> None:
        self.cage_map = [None] * self.cell_count
        for index, cage in self.allocated_cages():
            for member in cage.members:
                self.cage_map[member] = index

    def empty_cell_count(self) -> int:
        return sum(1 for value in self.values if not value)

    def copy(self) -> "Puzzle":
        return Puzzle(
            size=self.size,
            values=list(self.values),
            cages=[cage.copy() for cage in self.cages],
            cage_map=list(self.cage_map),
        )


# ----------------------------------------------------------------------
# Geometry
# ----------------------------------------------------------------------
def flood_fill(puzzle: Puzzle, start: int, cage_map: Optional[Sequence[Optional[int]]] = None) -> Set[int]:
    """Return every cell 4-connected to ``start`` through cells of its cage."""

    cage_map = puzzle.cage_map if cage_map is None else cage_map
    source = cage_map[start]
    reached = {start}
    frontier = deque([start])
    while frontier:
        current = frontier.popleft()
        for neighbor in puzzle.neighbors(current):
            if neighbor not in reached and cage_map[neighbor] == source:
                reached.add(neighbor)
                frontier.append(neighbor)
    return reached


def is_contiguous(puzzle: Puzzle, index: int) -> bool:
    cage = puzzle.cages[index]
    if not cage.members:
        return True
    return flood_fill(puzzle, cage.members[0]) == set(cage.members)
