import random

import pytest

from config import LEVEL_CONFIG
from errors import BandUnreachable, InvalidValue
from generator import (
    UPPER_HALF,
    PuzzleGenerator,
    generate_puzzle,
    level_for_score,
    punch_holes,
    rate_puzzle,
)
from grid import Grid
from solver import SudokuSolver


def _is_symmetric(puzzle):
    return all(
        (puzzle[r * 9 + c] == "0") == (puzzle[(8 - r) * 9 + (8 - c)] == "0")
        for r in range(9)
        for c in range(9)
    )


@pytest.mark.parametrize("count", [0, 2, 40, 45, 57, 58, 81])
def test_punch_holes_is_exact_and_symmetric(solved_rows, count):
    grid = Grid(solved_rows)
    punch_holes(grid, count, random.Random(count))
    puzzle = grid.to_string()
    assert puzzle.count("0") == count
    assert _is_symmetric(puzzle)
    assert (grid.get_actual(4, 4) == 0) == (count % 2 == 1)


def test_punch_holes_keeps_remaining_values(solved_rows):
    grid = Grid(solved_rows)
    punch_holes(grid, 44, random.Random(9))
    for r in range(9):
        for c in range(9):
            assert grid.get_actual(r, c) in (0, solved_rows[r][c])


class RecordingRandom(random.Random):
    def __init__(self, seed):
        super().__init__(seed)
        self.choices = []

    def choice(self, seq):
        self.choices.append(seq)
        return super().choice(seq)


def test_upper_half_pairs_with_its_mirror():
    assert len(set(UPPER_HALF)) == 40
    mirrors = {(8 - r, 8 - c) for r, c in UPPER_HALF}
    assert not mirrors & set(UPPER_HALF)
    assert set(UPPER_HALF) | mirrors | {(4, 4)} == {(r, c) for r in range(9) for c in range(9)}


def test_punch_holes_draws_from_upper_half_table(solved_rows):
    rng = RecordingRandom(3)
    punch_holes(Grid(solved_rows), 50, rng)
    assert rng.choices
    assert all(seq is UPPER_HALF for seq in rng.choices)


def test_punch_holes_rejects_impossible_counts(solved_rows):
    with pytest.raises(InvalidValue):
        punch_holes(Grid(solved_rows), 82, random.Random(0))


def test_level_for_score():
    assert level_for_score(45) == 1
    assert level_for_score(60) == 2
    assert level_for_score(61) == 3
    assert level_for_score(115) == 4
    assert level_for_score(90) is None
    assert level_for_score(0) is None


@pytest.mark.parametrize("level", [0, 5, "1", None])
def test_unknown_level_is_rejected(level):
    with pytest.raises(InvalidValue):
        PuzzleGenerator(rng=random.Random(0)).generate_puzzle(level)


def test_band_unreachable_after_max_attempts():
    generator = PuzzleGenerator(max_attempts=0, rng=random.Random(0))
    with pytest.raises(BandUnreachable) as excinfo:
        generator.generate_puzzle(2)
    assert excinfo.value.level == 2
    assert excinfo.value.attempts == 0


def test_generate_easy_puzzle():
    generator = PuzzleGenerator(rng=random.Random(2024))
    puzzle = generator.generate_puzzle(1)
    assert len(puzzle) == 81
    assert 40 <= puzzle.count("0") <= 45
    assert _is_symmetric(puzzle)

    solution = generator.grid.solution_backup
    for index, ch in enumerate(puzzle):
        assert ch == "0" or int(ch) == solution[index // 9][index % 9]

    rating = rate_puzzle(puzzle)
    assert rating.solved and rating.logic_only
    assert 41 <= rating.score <= 50
    assert rating.level == 1


def test_easy_puzzle_solves_back_to_its_solution():
    generator = PuzzleGenerator(rng=random.Random(11))
    puzzle = generator.generate_puzzle(1)
    grid = Grid.from_string(puzzle)
    rating = rate_puzzle(puzzle)
    assert rating.logic_only
    SudokuSolver(grid).solve()
    assert grid.rows() == generator.grid.solution_backup


def test_single_expert_attempt_always_yields_a_solvable_puzzle():
    generator = PuzzleGenerator(rng=random.Random(5))
    puzzle = generator.generate_new_puzzle(4)
    assert puzzle is not None
    assert 54 <= puzzle.count("0") <= 58
    assert _is_symmetric(puzzle)
    assert generator.grid.is_solved()


def test_module_level_generate_puzzle():
    puzzle = generate_puzzle(1, rng=random.Random(99))
    assert 41 <= rate_puzzle(puzzle).score <= 50


def test_rate_solved_puzzle(solved_rows):
    rating = rate_puzzle(Grid(solved_rows).to_string())
    assert rating.solved
    assert rating.score == 0
    assert rating.level is None


def test_rate_contradicting_puzzle():
    puzzle = "0" + "12345678" + "0" * 18 + "9" + "0" * 53
    rating = rate_puzzle(puzzle)
    assert not rating.solved
    assert rating.level is None


@pytest.mark.parametrize("level, seed", [(2, 2), (3, 3)])
def test_logic_levels_land_in_their_band(level, seed):
    settings = LEVEL_CONFIG[level]
    low, high = settings["empty_cells"]
    band_low, band_high = settings["score_band"]
    generator = PuzzleGenerator(rng=random.Random(seed))
    puzzle = generator.generate_puzzle(level)
    assert low <= puzzle.count("0") <= high
    assert _is_symmetric(puzzle)
    rating = rate_puzzle(puzzle)
    assert rating.logic_only
    assert band_low <= rating.score <= band_high
    assert rating.level == level


def test_expert_level_lands_in_its_band():
    settings = LEVEL_CONFIG[4]
    low, high = settings["empty_cells"]
    band_low, band_high = settings["score_band"]
    generator = PuzzleGenerator(rng=random.Random(4))
    puzzle = generator.generate_puzzle(4)
    assert low <= puzzle.count("0") <= high
    assert _is_symmetric(puzzle)
    # the guesses made while verifying are random, so check the recorded score
    assert band_low <= generator.grid.score <= band_high
    assert generator.grid.is_solved()
