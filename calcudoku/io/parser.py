"""Puzzle spec parsing.

A spec is a grid of whitespace-separated cell tokens, one row per line,
ended by a blank line or the end of the text. A token is an optional cage
letter (``A``-``Z`` then ``a``-``z``), an optional operator (``+ - * /``) and
an optional decimal number. Without a cage letter the number is a given
value; with one it is the cage's target. ``.`` marks an empty cell outside
any cage. For example::

    A+6  A   B*3
    C-1  A   B
    C    1   2
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..core.constants import MAX_CAGE_SIZE, MAX_SIZE, CageType
from ..core.exceptions import PuzzleSpecError
from ..core.models import Puzzle, cage_to_char, char_to_cage
from ..engine.validator import PuzzleValidator
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

_OPERATORS = {cage_type.value: cage_type for cage_type in CageType}


@dataclass
class CellToken:
    cage: Optional[int] = None
    type: Optional[CageType] = None
    value: Optional[int] = None


def parse_token(token: str, row: int, col: int) -> CellToken:
    cell = CellToken()
    if token == ".":
        return cell

    for ch in token:
        if "0" <= ch <= "9":
            cell.value = (cell.value or 0) * 10 + int(ch)
        elif ch in _OPERATORS:
            cell.type = _OPERATORS[ch]
        elif char_to_cage(ch) is not None:
            cell.cage = char_to_cage(ch)
        else:
            raise PuzzleSpecError(f"Unexpected character {ch!r} in cell ({row}, {col})")

    if cell.cage is None and cell.type is not None:
        raise PuzzleSpecError(f"Operator without a cage in cell ({row}, {col})")
    return cell


def _split_rows(text: str) -> List[List[str]]:
    rows: List[List[str]] = []
    for line in text.splitlines():
        tokens = line.split()
        if not tokens:
            if rows:
                break
            continue
        rows.append(tokens)
    return rows


def parse_puzzle(text: str) -> Puzzle:
    """Parse and validate a puzzle spec. Raises :class:`PuzzleSpecError`."""

    rows = _split_rows(text)
    if not rows:
        raise PuzzleSpecError("No cells!")

    size = len(rows[0])
    if size > MAX_SIZE:
        raise PuzzleSpecError(f"Grid is {size} cells wide (maximum {MAX_SIZE})")
    if len(rows) != size:
        raise PuzzleSpecError(f"Grid is not square (width = {size}, height = {len(rows)})")

    puzzle = Puzzle.empty(size)

    for row, tokens in enumerate(rows):
        if len(tokens) != size:
            raise PuzzleSpecError(f"Jagged row {row} (expected {size} cells, got {len(tokens)})")

        for col, token in enumerate(tokens):
            cell = parse_token(token, row, col)
            pos = puzzle.pos(row, col)

            if cell.cage is None:
                value = cell.value or 0
                if value > size:
                    raise PuzzleSpecError(f"Given value {value} out of range at ({row}, {col})")
                puzzle.values[pos] = value
                continue

            cage = puzzle.cages[cell.cage]
            name = cage_to_char(cell.cage)
            if cage.size >= MAX_CAGE_SIZE:
                raise PuzzleSpecError(f"Maximum cage size exceeded: ({row}, {col}) (cage {name})")
            cage.members.append(pos)

            if cell.value is not None:
                if cage.target >= 0 and cage.target != cell.value:
                    raise PuzzleSpecError(
                        f"Cage {name} has two conflicting targets: {cell.value} vs {cage.target}"
                    )
                cage.target = cell.value

            if cell.type is not None:
                if cage.type is not None and cage.type != cell.type:
                    raise PuzzleSpecError(
                        f"Cage {name} has two conflicting types: {cell.type.value} vs {cage.type.value}"
                    )
                cage.type = cell.type

    puzzle.rebuild_cage_map()

    validation = PuzzleValidator().validate(puzzle)
    if not validation.ok:
        raise PuzzleSpecError("; ".join(validation.messages))

    LOGGER.debug(
        "Parsed %dx%d puzzle with %d cages",
        size,
        size,
        sum(1 for _ in puzzle.allocated_cages()),
    )
    return puzzle


def load_puzzle(path: Path | str) -> Puzzle:
    return parse_puzzle(Path(path).read_text(encoding="utf-8"))
