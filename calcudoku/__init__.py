"""Calcudoku (KenKen-style) puzzle solver and generator.

This package exposes the public API surface via:

- ``calcudoku.engine.solver.solve``: counts solutions and scores difficulty.
- ``calcudoku.engine.generator.PuzzleGenerator``: builds uniquely solvable puzzles.
- ``calcudoku.io.parser.parse_puzzle`` / ``calcudoku.io.printer.format_puzzle``:
  the text spec format and its boxed rendering.
"""

from .core.constants import CageType, GeneratorFlags, SolveStatus
from .core.models import Cage, Puzzle
from .engine.generator import GeneratorConfig, PuzzleGenerator
from .engine.solver import SolveResult, solve
from .io.parser import load_puzzle, parse_puzzle
from .io.printer import format_puzzle, format_spec

__all__ = [
    "Cage",
    "CageType",
    "GeneratorConfig",
    "GeneratorFlags",
    "Puzzle",
    "PuzzleGenerator",
    "SolveResult",
    "SolveStatus",
    "format_puzzle",
    "format_spec",
    "load_puzzle",
    "parse_puzzle",
    "solve",
]

__version__ = "0.1.0"
