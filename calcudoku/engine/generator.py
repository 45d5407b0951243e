"""Puzzle generation by hardening a cage layout over a fixed solution.

Two-phase approach:
  1. Grid: build a random Latin square to serve as the solution.
  2. Hardening: repeatedly apply random cage mutations to a working copy of
     the best puzzle so far, keeping a mutated copy only when it is uniquely
     solvable and strictly harder (without passing the difficulty ceiling).
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..core.constants import MAX_SIZE, GeneratorFlags, SolveStatus
from ..core.exceptions import ValidationError
from ..core.models import Puzzle
from ..utils.logger import get_logger
from .crosscheck import crosscheck_puzzle
from .grid import generate_grid
from .mutator import CageMutator
from .solver import solve
from .validator import PuzzleValidator


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    size: int
    flags: GeneratorFlags = GeneratorFlags.NONE
    iterations: int = 100
    max_difficulty: int = 0
    target_difficulty: int = 0
    seed: Optional[int] = None
    mutations_per_iteration: int = 10
    crosscheck: bool = False
    crosscheck_timeout: float = 30.0

    def __post_init__(self) -> None:
        if not 1 <= self.size <= MAX_SIZE:
            raise ValueError(f"Puzzle size must be between 1 and {MAX_SIZE}, got {self.size}")
        if self.iterations < 0:
            raise ValueError("Iteration count cannot be negative")


@dataclass
class GenerationResult:
    puzzle: Puzzle
    solution: List[int]
    difficulty: int
    validation_messages: List[str] = field(default_factory=list)
    seed: Optional[int] = None


def normalize_labels(puzzle: Puzzle) -> None:
    """Move each cage's lowest-index member to the front; it carries the clue."""

    for _, cage in puzzle.allocated_cages():
        first = min(range(cage.size), key=lambda slot: cage.members[slot])
        cage.members[0], cage.members[first] = cage.members[first], cage.members[0]


def harden(
    puzzle: Puzzle,
    mutator: CageMutator,
    best_score: int,
    limit: int = 0,
    mutations: int = 10,
) -> Tuple[Puzzle, int]:
    """Run one hardening iteration and return the best puzzle and its score.

    A working copy of ``puzzle`` receives ``mutations`` random joins in
    sequence. After each one the copy is solved; if it is uniquely solvable,
    harder than the best so far and within ``limit`` (when positive), a
    snapshot of it becomes the new best. The input puzzle is never modified.
    """

    best = puzzle
    work = puzzle.copy()

    for _ in range(mutations):
        mutator.mutate(work)
        result = solve(work)

        if result.status != SolveStatus.UNIQUE:
            LOGGER.debug("Rejected mutation: status=%s", result.status.name)
            continue

        score = result.difficulty
        if score > best_score and (limit <= 0 or score <= limit):
            LOGGER.debug("Accepted mutation: difficulty %d -> %d", best_score, score)
            best = work.copy()
            best_score = score

    return best, best_score


def generate_puzzle(
    solution: Sequence[int],
    size: int,
    flags: GeneratorFlags = GeneratorFlags.NONE,
    iterations: int = 100,
    limit: int = 0,
    target: int = 0,
    rng: Optional[random.Random] = None,
    mutations: int = 10,
) -> Tuple[Puzzle, int]:
    """Harden a puzzle over ``solution`` and return it with its difficulty.

    Hardening stops after ``iterations`` rounds, or earlier once the
    difficulty reaches ``target`` (when positive). The difficulty is 0 if no
    mutation was ever accepted.
    """

    puzzle = Puzzle.empty(size)
    puzzle.values[:] = solution
    if size < 2:
        return puzzle, 0

    mutator = CageMutator(solution, flags=flags, rng=rng)
    best_score = 0

    for iteration in range(iterations):
        if target > 0 and best_score >= target:
            LOGGER.info("Target difficulty %d reached after %d iterations", target, iteration)
            break

        puzzle, score = harden(puzzle, mutator, best_score, limit, mutations)
        if score > best_score:
            LOGGER.info("Iteration %d: difficulty %d", iteration + 1, score)
        best_score = score

    normalize_labels(puzzle)
    return puzzle, best_score


class PuzzleGenerator:
    """High-level orchestrator: solution grid, hardening, then validation."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self.rng = random.Random(config.seed)
        self.validator = PuzzleValidator(flags=config.flags)

    def generate(self, solution: Optional[Sequence[int]] = None) -> GenerationResult:
        size = self.config.size
        if solution is None:
            solution = generate_grid(size, self.rng)
            LOGGER.info("Generated %dx%d solution grid", size, size)
        solution = list(solution)

        puzzle, difficulty = generate_puzzle(
            solution,
            size,
            flags=self.config.flags,
            iterations=self.config.iterations,
            limit=self.config.max_difficulty,
            target=self.config.target_difficulty,
            rng=self.rng,
            mutations=self.config.mutations_per_iteration,
        )

        validation = self.validator.validate(puzzle, solution)
        if not validation.ok:
            raise ValidationError(f"Generated puzzle failed validation: {validation.messages}")

        messages = list(validation.messages)
        if self.config.crosscheck:
            messages.extend(self._crosscheck(puzzle))

        LOGGER.info(
            "Puzzle generation completed with %d cages, difficulty %d",
            sum(1 for _ in puzzle.allocated_cages()),
            difficulty,
        )
        return GenerationResult(
            puzzle=puzzle,
            solution=solution,
            difficulty=difficulty,
            validation_messages=messages,
            seed=self.config.seed,
        )

    def _crosscheck(self, puzzle: Puzzle) -> List[str]:
        check = crosscheck_puzzle(puzzle, timeout=self.config.crosscheck_timeout)
        if check.status is None:
            return ["CP-SAT cross-check timed out"]
        if check.status != SolveStatus.UNIQUE:
            LOGGER.warning("CP-SAT cross-check disagrees: status=%s", check.status.name)
            return [f"CP-SAT cross-check reports {check.status.name.lower()}"]
        return []
