from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from config import TECHNIQUE_WEIGHTS
from errors import Contradiction
from grid import Grid, Rows, digits_of
from techniques import Technique, build_pipeline

log = logging.getLogger(__name__)


class SearchOutcome(Enum):
    SOLVED = "solved"
    EXHAUSTED = "exhausted"


@dataclass
class SolverResult:
    status: str
    solution: Optional[Rows]
    duration_ms: int
    score: int = 0
    used_search: bool = False
    message: str = ""


class SudokuSolver:
    """Deduction pipeline plus randomized backtracking, bound to one grid."""

    def __init__(
        self,
        grid: Grid,
        rng: Optional[random.Random] = None,
        pipeline: Optional[List[Technique]] = None,
    ) -> None:
        self.grid = grid
        self.rng = rng or random.Random()
        self.pipeline = pipeline if pipeline is not None else build_pipeline()
        self.grid.clear_snapshots()

    def solve(self) -> bool:
        """Apply the techniques until the grid is solved or nothing changes.

        A technique that changes the grid sends control back to the first
        (cheapest) technique, so elimination always reaches its fixpoint
        before anything more expensive runs again.

        Raises Contradiction if the grid turns out to be unsolvable.
        """
        grid = self.grid
        position = 0
        while position < len(self.pipeline):
            changed = self.pipeline[position].apply(grid)
            if grid.is_solved():
                return True
            position = 0 if changed else position + 1
        return grid.is_solved()

    def refresh_candidates(self) -> None:
        for r, c in self.grid.empty_cells():
            self.grid.set_candidate_mask(r, c, self.grid.calculate_candidate_mask(r, c))

    def solve_by_brute_force(self) -> SearchOutcome:
        """Guess a digit for the most constrained cell and keep deducing.

        Every invocation counts as one guess in the score. Failed branches
        are rolled back through the grid's snapshot stack.
        """
        grid = self.grid
        grid.score += TECHNIQUE_WEIGHTS["brute-force"]
        self.refresh_candidates()
        cell = grid.find_cell_with_fewest_candidates()
        if cell is None:
            return SearchOutcome.SOLVED if grid.is_solved() else SearchOutcome.EXHAUSTED
        row, col = cell
        digits = digits_of(grid.get_candidate_mask(row, col))
        self.rng.shuffle(digits)
        for digit in digits:
            grid.push_snapshot()
            grid.set_actual(row, col, digit)
            try:
                if self.solve():
                    grid.drop_snapshot()
                    return SearchOutcome.SOLVED
                if self.solve_by_brute_force() is SearchOutcome.SOLVED:
                    grid.drop_snapshot()
                    return SearchOutcome.SOLVED
            except Contradiction as exc:
                log.debug("Backtrack: r%dc%d != %d (%s)", row + 1, col + 1, digit, exc)
            grid.pop_snapshot()
        return SearchOutcome.EXHAUSTED

    def run(self) -> SolverResult:
        start = time.time()
        self.grid.clear_snapshots()
        used_search = False
        try:
            solved = self.solve()
            if not solved:
                used_search = True
                solved = self.solve_by_brute_force() is SearchOutcome.SOLVED
        except Contradiction as exc:
            duration_ms = int((time.time() - start) * 1000)
            return SolverResult(
                status="no-solution",
                solution=None,
                duration_ms=duration_ms,
                score=self.grid.score,
                used_search=used_search,
                message=f"Contradiction in givens: {exc}",
            )
        duration_ms = int((time.time() - start) * 1000)
        log.info(
            "solve end in %d ms; score %d; search %s",
            duration_ms,
            self.grid.score,
            "used" if used_search else "not needed",
        )
        log.debug("grid after solve:\n%s", self.grid.format())
        if not solved:
            return SolverResult(
                status="no-solution",
                solution=None,
                duration_ms=duration_ms,
                score=self.grid.score,
                used_search=used_search,
                message="No solution found.",
            )
        return SolverResult(
            status="solved",
            solution=self.grid.rows(),
            duration_ms=duration_ms,
            score=self.grid.score,
            used_search=used_search,
            message="Solved successfully.",
        )
