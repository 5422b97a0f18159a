from __future__ import annotations


class SudokuError(Exception):
    """Base class for every error raised by the solver and generator."""


class IndexOutOfRange(SudokuError, IndexError):
    def __init__(self, row: int, col: int) -> None:
        super().__init__(
            f"Both row and column must be within [0..8] range. Got ({row}, {col})."
        )
        self.row = row
        self.col = col


class InvalidValue(SudokuError, ValueError):
    pass


class Contradiction(SudokuError):
    """The grid reached a state no valid completion can come from."""


class BandUnreachable(SudokuError):
    def __init__(self, level: int, attempts: int) -> None:
        super().__init__(
            f"No puzzle for level {level} within {attempts} attempts."
        )
        self.level = level
        self.attempts = attempts
