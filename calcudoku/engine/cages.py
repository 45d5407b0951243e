"""Per-cage candidate derivation.

Given a cage and the values already placed in some of its members, work out
which values could still occupy any one of the empty members. Every routine
returns an empty set when the arithmetic admits no continuation; that is how
local inconsistency is reported to the search.

The sum-style derivations use a min/max envelope on a single addend rather
than an exact enumeration, so results are supersets of the truly feasible
values. Once only one member is empty the derivations are exact.
"""

from __future__ import annotations

from typing import List, Sequence

from ..core.constants import CageType
from ..core.models import Cage, value_bit, value_range


def addends_for(target: int, count: int, max_value: int) -> int:
    """Possible addends when ``count`` values in ``[1, max_value]`` sum to ``target``."""

    if target < 1 or count < 1:
        return 0

    if count == 1:
        if target <= max_value:
            return value_bit(target)
        return 0

    low = max(1, target - max_value * (count - 1))
    high = min(max_value, target - (count - 1))
    return value_range(low, high)


def factors_for(target: int, count: int, max_value: int) -> int:
    """Possible factors when ``count`` values in ``[1, max_value]`` multiply to ``target``."""

    if target < 1 or count < 1:
        return 0

    if count == 1:
        if target <= max_value:
            return value_bit(target)
        return 0

    out = 0
    i = 1
    while i * i <= target and i <= max_value:
        if not target % i:
            out |= value_bit(i)
            pair = target // i
            if pair <= max_value:
                out |= value_bit(pair)
        i += 1
    return out


def sum_candidates(target: int, size: int, filled: Sequence[int], max_value: int) -> int:
    return addends_for(target - sum(filled), size - len(filled), max_value)


def difference_candidates(target: int, size: int, filled: Sequence[int], max_value: int) -> int:
    # target = largest * 2 - sum of all members
    partial_sum = sum(filled)
    missing = size - len(filled)
    out = 0

    # The largest value is already placed; the rest are addends.
    if filled:
        largest = max(filled)
        out |= addends_for(largest * 2 - partial_sum - target, missing, max_value)

    # The largest value is still missing, alone or with some addends.
    if missing == 1:
        largest = target + partial_sum
        if 1 <= largest <= max_value:
            out |= value_bit(largest)
    else:
        for largest in range(target + partial_sum + missing - 1, max_value + 1):
            terms = addends_for(largest - partial_sum - target, missing - 1, max_value)
            if terms:
                out |= terms | value_bit(largest)

    return out


def product_candidates(target: int, size: int, filled: Sequence[int], max_value: int) -> int:
    partial_product = 1
    for value in filled:
        partial_product *= value

    if target % partial_product:
        return 0
    return factors_for(target // partial_product, size - len(filled), max_value)


def ratio_candidates(target: int, size: int, filled: Sequence[int], max_value: int) -> int:
    # target = largest ** 2 / product of all members
    if target < 1:
        return 0

    partial_product = 1
    for value in filled:
        partial_product *= value
    missing = size - len(filled)
    out = 0

    # The largest value is already placed; the rest are factors.
    if filled:
        largest = max(filled)
        divisor = partial_product * target
        if not (largest * largest) % divisor:
            out |= factors_for(largest * largest // divisor, missing, max_value)

    # The largest value is still missing, alone or with some factors.
    base = partial_product * target
    if missing == 1:
        if base <= max_value:
            out |= value_bit(base)
    else:
        rest = 1
        while rest * base <= max_value:
            terms = factors_for(rest, missing - 1, max_value)
            if terms:
                out |= terms | value_bit(rest * base)
            rest += 1

    return out


_DERIVATIONS = {
    CageType.SUM: sum_candidates,
    CageType.DIFFERENCE: difference_candidates,
    CageType.PRODUCT: product_candidates,
    CageType.RATIO: ratio_candidates,
}


def cage_candidates(cage: Cage, values: Sequence[int], max_value: int) -> int:
    """Values that could legally fill any empty member of ``cage``."""

    filled: List[int] = [values[member] for member in cage.members if values[member]]
    derive = _DERIVATIONS[cage.type]
    return derive(cage.target, cage.size, filled, max_value)
