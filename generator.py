from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from config import GENERATOR_CONFIG, LEVEL_CONFIG, LOGIC_ONLY_MAX_LEVEL
from errors import BandUnreachable, Contradiction, InvalidValue, SudokuError
from grid import Grid
from solver import SearchOutcome, SudokuSolver

log = logging.getLogger(__name__)

_UNSET = object()

# One cell of every mirrored pair; the centre is its own mirror and is left out
UPPER_HALF = [(r, c) for r in range(4) for c in range(9)] + [(4, c) for c in range(4)]


@dataclass
class PuzzleRating:
    score: int
    solved: bool
    logic_only: bool
    level: Optional[int]


def level_settings(level: int) -> dict:
    try:
        return LEVEL_CONFIG[level]
    except (KeyError, TypeError):
        raise InvalidValue(
            f"Level must be one of {sorted(LEVEL_CONFIG)}. Got {level!r}."
        ) from None


def level_for_score(score: int) -> Optional[int]:
    for level, settings in LEVEL_CONFIG.items():
        low, high = settings["score_band"]
        if low <= score <= high:
            return level
    return None


def punch_holes(grid: Grid, count: int, rng: random.Random) -> None:
    """Empty ``count`` cells of a full grid, symmetric under a half-turn.

    Positions are drawn uniformly from ``UPPER_HALF`` and cleared together
    with their mirror ``(8 - r, 8 - c)``. An odd count empties the centre
    cell first.
    """
    if not 0 <= count <= 81:
        raise InvalidValue(f"Cannot empty {count} cells of a 9x9 grid.")
    emptied = 0
    if count % 2:
        grid.set_actual(4, 4, 0)
        emptied = 1
    while emptied < count:
        row, col = rng.choice(UPPER_HALF)
        if grid.get_actual(row, col) == 0:
            continue
        grid.set_actual(row, col, 0)
        grid.set_actual(8 - row, 8 - col, 0)
        emptied += 2
    grid.clear_candidates()


def rate_puzzle(puzzle: str, rng: Optional[random.Random] = None) -> PuzzleRating:
    """Solve a puzzle string and classify it by the score it accumulates."""
    grid = Grid.from_string(puzzle)
    solver = SudokuSolver(grid, rng=rng)
    try:
        logic_only = solver.solve()
        solved = logic_only
        if not solved:
            solved = solver.solve_by_brute_force() is SearchOutcome.SOLVED
    except Contradiction:
        return PuzzleRating(score=grid.score, solved=False, logic_only=False, level=None)
    return PuzzleRating(
        score=grid.score,
        solved=solved,
        logic_only=logic_only,
        level=level_for_score(grid.score) if solved else None,
    )


class PuzzleGenerator:
    """Builds puzzles by solving an empty grid and carving cells out of it."""

    def __init__(self, max_attempts=_UNSET, rng: Optional[random.Random] = None) -> None:
        if max_attempts is _UNSET:
            max_attempts = GENERATOR_CONFIG["max_attempts"]
        self.max_attempts: Optional[int] = max_attempts
        self.rng = rng or random.Random()
        self.grid = Grid()
        self.solver = SudokuSolver(self.grid, rng=self.rng)
        self.attempts = 0

    def generate_puzzle(self, level: int) -> str:
        settings = level_settings(level)
        low, high = settings["score_band"]
        self.attempts = 0
        while self.max_attempts is None or self.attempts < self.max_attempts:
            self.attempts += 1
            puzzle = self.generate_new_puzzle(level)
            if puzzle is None:
                continue
            if low <= self.grid.score <= high:
                log.info(
                    "level %d puzzle after %d attempts; score %d; %d empty cells",
                    level,
                    self.attempts,
                    self.grid.score,
                    puzzle.count("0"),
                )
                return puzzle
            log.debug(
                "attempt %d: score %d outside %d-%d", self.attempts, self.grid.score, low, high
            )
        log.warning("giving up on level %d after %d attempts", level, self.attempts)
        raise BandUnreachable(level, self.attempts)

    def generate_new_puzzle(self, level: int) -> Optional[str]:
        """One generation attempt. Returns the puzzle string, or None when rejected.

        The grid's score is left at the value accumulated while re-solving
        the returned puzzle.
        """
        settings = level_settings(level)
        self.grid = Grid()
        self.solver = SudokuSolver(self.grid, rng=self.rng)
        try:
            if not self.solver.solve():
                if self.solver.solve_by_brute_force() is not SearchOutcome.SOLVED:
                    log.debug("attempt %d: no full grid", self.attempts)
                    return None
        except SudokuError as exc:
            log.debug("attempt %d: full grid failed (%s)", self.attempts, exc)
            return None
        self.grid.save_solution()

        low, high = settings["empty_cells"]
        punch_holes(self.grid, self.rng.randint(low, high), self.rng)
        puzzle = self.grid.to_string()

        self.grid.reset_score()
        self.grid.clear_snapshots()
        try:
            if not self.solver.solve():
                if level <= LOGIC_ONLY_MAX_LEVEL:
                    log.debug("attempt %d: needs guessing", self.attempts)
                    return None
                if self.solver.solve_by_brute_force() is not SearchOutcome.SOLVED:
                    return None
        except Contradiction as exc:
            log.debug("attempt %d: verification failed (%s)", self.attempts, exc)
            return None
        return puzzle


def generate_puzzle(level: int, max_attempts=_UNSET, rng: Optional[random.Random] = None) -> str:
    return PuzzleGenerator(max_attempts=max_attempts, rng=rng).generate_puzzle(level)
