"""CLI entrypoint for the Calcudoku solver/generator."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

from calcudoku import __version__
from calcudoku.core.constants import GeneratorFlags, SolveStatus
from calcudoku.core.exceptions import CalcudokuError
from calcudoku.core.models import Puzzle
from calcudoku.engine.crosscheck import crosscheck_puzzle
from calcudoku.engine.generator import GeneratorConfig, PuzzleGenerator
from calcudoku.engine.solver import SolveResult, solve
from calcudoku.io.parser import parse_puzzle
from calcudoku.io.printer import ASCII_TEMPLATE, UNICODE_TEMPLATE, GridTemplate, write_puzzle
from calcudoku.utils.logger import configure_logging, get_logger


LOGGER = get_logger("calcudoku.cli")

COMMANDS = ("print", "solve", "examine", "generate")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cdok",
        description="Calcudoku solver/generator",
    )
    parser.add_argument("-u", "--unicode", action="store_true", help="Use Unicode line-drawing characters")
    parser.add_argument("-i", "--input", type=Path, help="Read the puzzle spec from FILE (default stdin)")
    parser.add_argument("-o", "--output", type=Path, help="Write to FILE (default stdout)")
    parser.add_argument(
        "--crosscheck",
        action="store_true",
        help="Confirm uniqueness with the OR-Tools CP-SAT solver",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    commands = parser.add_subparsers(dest="command", metavar="<command>", required=True)
    commands.add_parser("print", help="Parse a grid spec and print it")
    commands.add_parser("solve", help="Parse a grid spec and solve the puzzle")
    commands.add_parser("examine", help="Parse a grid spec and estimate difficulty")

    generate = commands.add_parser("generate", help="Generate a new puzzle")
    generate.add_argument("--size", type=int, default=6, help="Grid size (1-16)")
    generate.add_argument(
        "--two-cell",
        action="store_true",
        help="Restrict difference and ratio cages to two cells",
    )
    generate.add_argument("--iterations", type=int, default=100, help="Hardening iterations")
    generate.add_argument(
        "--max-difficulty",
        type=int,
        default=0,
        help="Never accept a puzzle harder than this (0 = no ceiling)",
    )
    generate.add_argument(
        "--target-difficulty",
        type=int,
        default=0,
        help="Stop hardening once this difficulty is reached (0 = never)",
    )
    generate.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    generate.add_argument("--show-solution", action="store_true", help="Also print the solution grid")
    return parser


def read_puzzle(path: Optional[Path]) -> Puzzle:
    if path is None:
        return parse_puzzle(sys.stdin.read())
    return parse_puzzle(path.read_text(encoding="utf-8"))


@contextmanager
def open_output(path: Optional[Path]) -> Iterator[TextIO]:
    if path is None:
        yield sys.stdout
        return
    with path.open("w", encoding="utf-8") as stream:
        yield stream


def summary_line(result: SolveResult) -> str:
    if result.status == SolveStatus.UNIQUE:
        return f"Solution is unique. Difficulty: {result.difficulty}"
    return "Solution is not unique."


def crosscheck_line(puzzle: Puzzle, result: SolveResult) -> str:
    check = crosscheck_puzzle(puzzle)
    if check.status is None:
        return "CP-SAT cross-check: timed out"
    if check.status != result.status:
        LOGGER.warning(
            "CP-SAT cross-check disagrees: search=%s, cp-sat=%s",
            result.status.name,
            check.status.name,
        )
    return f"CP-SAT cross-check: {check.status.name.lower()}"


def cmd_print(args: argparse.Namespace, template: GridTemplate) -> int:
    puzzle = read_puzzle(args.input)
    with open_output(args.output) as out:
        write_puzzle(puzzle, puzzle.values, template=template, stream=out)
    return 0


def cmd_solve(args: argparse.Namespace, template: GridTemplate, want_solution: bool) -> int:
    puzzle = read_puzzle(args.input)
    result = solve(puzzle)
    if result.status == SolveStatus.UNSOLVABLE:
        print("Puzzle is not solvable", file=sys.stderr)
        return 1

    with open_output(args.output) as out:
        if want_solution:
            write_puzzle(puzzle, result.solution, template=template, stream=out)
            print(file=out)
        print(summary_line(result), file=out)
        if args.crosscheck:
            print(crosscheck_line(puzzle, result), file=out)
    return 0


def cmd_generate(args: argparse.Namespace, template: GridTemplate) -> int:
    config = GeneratorConfig(
        size=args.size,
        flags=GeneratorFlags.TWO_CELL if args.two_cell else GeneratorFlags.NONE,
        iterations=args.iterations,
        max_difficulty=args.max_difficulty,
        target_difficulty=args.target_difficulty,
        seed=args.seed,
        crosscheck=args.crosscheck,
    )
    result = PuzzleGenerator(config).generate()

    with open_output(args.output) as out:
        write_puzzle(result.puzzle, result.puzzle.values, template=template, stream=out)
        print(file=out)
        print(f"Solution is unique. Difficulty: {result.difficulty}", file=out)
        for message in result.validation_messages:
            print(message, file=out)
        if args.show_solution:
            print(file=out)
            write_puzzle(result.puzzle, result.solution, template=template, stream=out)
    return 0


def run(args: argparse.Namespace) -> int:
    template = UNICODE_TEMPLATE if args.unicode else ASCII_TEMPLATE
    if args.command == "print":
        return cmd_print(args, template)
    if args.command in ("solve", "examine"):
        return cmd_solve(args, template, want_solution=args.command == "solve")
    return cmd_generate(args, template)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    configure_logging(level)

    try:
        return run(args)
    except ValueError as exc:
        parser.error(str(exc))
    except (CalcudokuError, OSError) as exc:
        LOGGER.debug("Command %s failed", args.command, exc_info=True)
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
