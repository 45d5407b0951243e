"""Shared constants and enumerations for the Calcudoku solver/generator."""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag
from typing import Tuple


# Capacity limits. Value sets are bitmasks of at least MAX_SIZE bits and
# cages are named by a single letter, so these bounds are hard limits.
MAX_SIZE = 16
MAX_CAGES = 52
MAX_CAGE_SIZE = 8

# Marker for "no target yet" on a cage being built by the parser.
TARGET_UNSET = -1


class CageType(str, Enum):
    """Arithmetic clue attached to a cage. Values are the operators used in puzzle text."""

    SUM = "+"
    DIFFERENCE = "-"
    PRODUCT = "*"
    RATIO = "/"


class SolveStatus(IntEnum):
    """Outcome of a complete search."""

    UNSOLVABLE = -1
    UNIQUE = 0
    MULTIPLE = 1


class GeneratorFlags(IntFlag):
    """Constraints imposed on the generator's cage layout."""

    NONE = 0
    # Difference and ratio cages may only have two members.
    TWO_CELL = 1


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

