"""Custom exception hierarchy for puzzle handling."""


class CalcudokuError(Exception):
    """Base exception for solver/generator failures."""


class PuzzleSpecError(CalcudokuError):
    """Raised when puzzle spec text cannot be parsed into a valid puzzle."""


class ValidationError(CalcudokuError):
    """Raised when a puzzle breaks a structural invariant."""


class GridGenerationError(CalcudokuError):
    """Raised when the Latin square fill exhausts every branch."""
