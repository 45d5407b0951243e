"""Spec printing and boxed grid rendering.

The boxed renderer draws three text rows per grid cell: the cage clue (on
the cage's first member), the cell value, and a blank row. Lines between
cells of the same cage are drawn with the template's minor characters, all
other lines with its major characters.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, TextIO, Tuple

from ..core.models import Puzzle, cage_to_char


@dataclass(frozen=True)
class BorderTemplate:
    """Characters for the top or bottom border."""

    start: str
    end: str
    tee_major: str
    tee_minor: str


# Indices into GridTemplate.inners: a set bit means the gridline leaving the
# junction in that direction is major.
INNER_LEFT = 1
INNER_RIGHT = 2
INNER_TOP = 4
INNER_BOTTOM = 8
INNER_ALL = INNER_LEFT | INNER_RIGHT | INNER_TOP | INNER_BOTTOM


@dataclass(frozen=True)
class GridTemplate:
    top: BorderTemplate
    bottom: BorderTemplate
    hline_major: str
    hline_minor: str
    vline_major: str
    vline_minor: str
    tee_left_major: str
    tee_left_minor: str
    tee_right_major: str
    tee_right_minor: str
    inners: Tuple[str, ...]


def _inners(**chars: str) -> Tuple[str, ...]:
    names = {
        "none": 0, "lr": 3, "tl": 5, "tr": 6, "tlr": 7, "bl": 9, "br": 10,
        "blr": 11, "bt": 12, "btl": 13, "btr": 14, "btlr": 15,
    }
    table = [" "] * 16
    for name, ch in chars.items():
        table[names[name]] = ch
    return tuple(table)


ASCII_TEMPLATE = GridTemplate(
    top=BorderTemplate(start="+", end="+", tee_major="=", tee_minor="="),
    bottom=BorderTemplate(start="+", end="+", tee_major="=", tee_minor="="),
    hline_major="=",
    hline_minor=".",
    vline_major="|",
    vline_minor=":",
    tee_left_major="+",
    tee_left_minor="|",
    tee_right_major="+",
    tee_right_minor="|",
    inners=_inners(
        none=" ", lr="=", tl="+", tr="+", tlr="+", bl="+", br="+",
        blr="+", bt="|", btl="+", btr="+", btlr="+",
    ),
)

UNICODE_TEMPLATE = GridTemplate(
    top=BorderTemplate(start="╔", end="╗", tee_major="╦", tee_minor="═"),
    bottom=BorderTemplate(start="╚", end="╝", tee_major="╩", tee_minor="═"),
    hline_major="═",
    hline_minor="┈",
    vline_major="║",
    vline_minor="┊",
    tee_left_major="╠",
    tee_left_minor="║",
    tee_right_major="╣",
    tee_right_minor="║",
    inners=_inners(
        none=" ", lr="═", tl="╝", tr="╚", tlr="╩",
        bl="╗", br="╔", blr="╦", bt="║", btl="╣",
        btr="╠", btlr="╬",
    ),
)


# ----------------------------------------------------------------------
# Spec output
# ----------------------------------------------------------------------
def format_clue(puzzle: Puzzle, pos: int) -> str:
    """Clue text shown on ``pos``; empty unless it is a cage's first member."""

    cage = puzzle.cage_of(pos)
    if cage is None or cage.members[0] != pos:
        return ""
    return f"{cage.target}{cage.type.value}"


def format_spec(puzzle: Puzzle, values: Optional[Sequence[int]] = None) -> str:
    """Return spec text for ``puzzle`` that :func:`parse_puzzle` reads back."""

    values = puzzle.values if values is None else values
    lines: List[str] = []
    for row in range(puzzle.size):
        tokens: List[str] = []
        for col in range(puzzle.size):
            pos = puzzle.pos(row, col)
            index = puzzle.cage_map[pos]
            if values[pos]:
                tokens.append(str(values[pos]))
            elif index is not None:
                cage = puzzle.cages[index]
                token = cage_to_char(index)
                if cage.members[0] == pos:
                    token += f"{cage.type.value}{cage.target}"
                tokens.append(token)
            else:
                tokens.append(".")
        lines.append("\t".join(tokens))
    return "\n".join(lines)


# ----------------------------------------------------------------------
# Boxed rendering
# ----------------------------------------------------------------------
def _same_cage(puzzle: Puzzle, a: int, b: int) -> bool:
    index = puzzle.cage_map[a]
    return index is not None and index == puzzle.cage_map[b]


def horizontal_joins(puzzle: Puzzle, row: int) -> int:
    """Bit ``x`` set if cells ``x`` and ``x + 1`` of ``row`` share a cage."""

    joins = 0
    for col in range(puzzle.size - 1):
        if _same_cage(puzzle, puzzle.pos(row, col), puzzle.pos(row, col + 1)):
            joins |= 1 << col
    return joins


def vertical_joins(puzzle: Puzzle, row: int) -> int:
    """Bit ``x`` set if cell ``x`` of ``row`` shares a cage with the cell below."""

    joins = 0
    for col in range(puzzle.size):
        if _same_cage(puzzle, puzzle.pos(row, col), puzzle.pos(row + 1, col)):
            joins |= 1 << col
    return joins


def _border(template: GridTemplate, border: BorderTemplate, size: int, width: int, joins: int) -> str:
    parts = [border.start]
    for col in range(size):
        parts.append(template.hline_major * width)
        if col + 1 < size:
            parts.append(border.tee_minor if joins & (1 << col) else border.tee_major)
    parts.append(border.end)
    return "".join(parts)


def _hline(template: GridTemplate, size: int, width: int, joins_above: int, joins: int, joins_below: int) -> str:
    parts = [template.tee_left_minor if joins & 1 else template.tee_left_major]
    for col in range(size):
        parts.append((template.hline_minor if joins & (1 << col) else template.hline_major) * width)
        if col + 1 < size:
            inner = INNER_ALL
            if joins & (1 << col):
                inner &= ~INNER_LEFT
            if joins & (1 << (col + 1)):
                inner &= ~INNER_RIGHT
            if joins_above & (1 << col):
                inner &= ~INNER_TOP
            if joins_below & (1 << col):
                inner &= ~INNER_BOTTOM
            parts.append(template.inners[inner])
    last = 1 << (size - 1)
    parts.append(template.tee_right_minor if joins & last else template.tee_right_major)
    return "".join(parts)


def _row(template: GridTemplate, size: int, width: int, joins: int, texts: Sequence[str], centre: bool) -> str:
    parts = [template.vline_major]
    for col, text in enumerate(texts):
        if centre:
            pad = width - len(text)
            parts.append(" " * (pad // 2) + text + " " * ((pad + 1) // 2))
        else:
            parts.append(text.ljust(width))
        if col + 1 < size:
            parts.append(template.vline_minor if joins & (1 << col) else template.vline_major)
    parts.append(template.vline_major)
    return "".join(parts)


def format_puzzle(
    puzzle: Puzzle,
    values: Optional[Sequence[int]] = None,
    template: GridTemplate = ASCII_TEMPLATE,
) -> str:
    """Render ``puzzle`` with ``values`` filled in as a boxed grid."""

    values = puzzle.values if values is None else values
    size = puzzle.size

    clues = [format_clue(puzzle, pos) for pos in range(puzzle.cell_count)]
    numbers = [str(value) if value else "" for value in values]
    width = max([5] + [len(text) for text in clues + numbers])

    lines = [_border(template, template.top, size, width, horizontal_joins(puzzle, 0))]
    for row in range(size):
        joins = horizontal_joins(puzzle, row)
        cells = slice(row * size, (row + 1) * size)
        blanks = [""] * size

        lines.append(_row(template, size, width, joins, clues[cells], centre=False))
        lines.append(_row(template, size, width, joins, numbers[cells], centre=True))
        lines.append(_row(template, size, width, joins, blanks, centre=False))

        if row + 1 < size:
            lines.append(
                _hline(
                    template,
                    size,
                    width,
                    joins,
                    vertical_joins(puzzle, row),
                    horizontal_joins(puzzle, row + 1),
                )
            )

    lines.append(_border(template, template.bottom, size, width, horizontal_joins(puzzle, size - 1)))
    return "\n".join(lines)


def write_puzzle(
    puzzle: Puzzle,
    values: Optional[Sequence[int]] = None,
    *,
    template: GridTemplate = ASCII_TEMPLATE,
    stream: Optional[TextIO] = None,
) -> None:
    """Print the puzzle spec followed by the boxed grid."""

    stream = stream or sys.stdout
    print(format_spec(puzzle, values), file=stream)
    print(file=stream)
    print(format_puzzle(puzzle, values, template), file=stream)
