"""Random Latin square generation for solution grids."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.constants import MAX_SIZE
from ..core.exceptions import GridGenerationError
from ..core.models import value_bit
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class _FillContext:
    size: int
    rng: random.Random
    grid: List[int]
    rows_used: List[int] = field(default_factory=list)
    cols_used: List[int] = field(default_factory=list)


def random_permutation(size: int, rng: random.Random) -> List[int]:
    values = list(range(1, size + 1))
    rng.shuffle(values)
    return values


def _fill(ctx: _FillContext, pos: int) -> bool:
    if pos >= ctx.size * ctx.size:
        return True

    row, col = divmod(pos, ctx.size)
    used = ctx.rows_used[row] | ctx.cols_used[col]

    for value in random_permutation(ctx.size, ctx.rng):
        bit = value_bit(value)
        if used & bit:
            continue

        ctx.rows_used[row] |= bit
        ctx.cols_used[col] |= bit
        ctx.grid[pos] = value

        if _fill(ctx, pos + 1):
            return True

        ctx.rows_used[row] &= ~bit
        ctx.cols_used[col] &= ~bit
        ctx.grid[pos] = 0

    return False


def generate_grid(size: int, rng: Optional[random.Random] = None) -> List[int]:
    """Return a random ``size`` x ``size`` Latin square as a flat row-major list.

    The top row is a uniformly random permutation; every following cell is
    filled in row-major order with the remaining values tried in random order,
    backtracking on dead ends.
    """

    if not 1 <= size <= MAX_SIZE:
        raise ValueError(f"Grid size must be between 1 and {MAX_SIZE}, got {size}")

    rng = rng or random.Random()
    ctx = _FillContext(
        size=size,
        rng=rng,
        grid=[0] * (size * size),
        rows_used=[0] * size,
        cols_used=[0] * size,
    )

    for col, value in enumerate(random_permutation(size, rng)):
        ctx.grid[col] = value
        ctx.rows_used[0] |= value_bit(value)
        ctx.cols_used[col] = value_bit(value)

    if not _fill(ctx, size):
        raise GridGenerationError(f"Latin square fill exhausted for size {size}")

    LOGGER.debug("Generated %dx%d solution grid", size, size)
    return ctx.grid


def is_latin_square(size: int, values: List[int]) -> bool:
    expected = set(range(1, size + 1))
    if len(values) != size * size:
        return False
    for index in range(size):
        row = values[index * size:(index + 1) * size]
        col = values[index::size]
        if set(row) != expected or set(col) != expected:
            return False
    return True
