# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so the flat modules import without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

UNSOLVED = [
    [9, 0, 8, 1, 6, 2, 5, 0, 0],
    [0, 3, 1, 8, 0, 0, 0, 0, 0],
    [0, 6, 0, 3, 5, 0, 9, 8, 0],
    [0, 1, 0, 9, 0, 0, 0, 7, 6],
    [0, 0, 6, 0, 0, 0, 1, 0, 0],
    [2, 5, 0, 0, 0, 1, 0, 9, 0],
    [0, 4, 3, 0, 9, 8, 0, 2, 0],
    [0, 0, 0, 0, 0, 6, 3, 1, 0],
    [0, 0, 9, 7, 1, 3, 8, 0, 4],
]

SOLVED = [
    [9, 5, 4, 3, 8, 2, 1, 7, 6],
    [7, 3, 6, 1, 9, 5, 4, 8, 2],
    [8, 1, 2, 4, 6, 7, 3, 5, 9],
    [1, 8, 3, 9, 2, 6, 5, 4, 7],
    [6, 4, 5, 8, 7, 3, 9, 2, 1],
    [2, 9, 7, 5, 4, 1, 8, 6, 3],
    [5, 7, 9, 2, 1, 4, 6, 3, 8],
    [4, 6, 8, 7, 3, 9, 2, 1, 5],
    [3, 2, 1, 6, 5, 8, 7, 9, 4],
]


@pytest.fixture
def unsolved_rows():
    return [row[:] for row in UNSOLVED]


@pytest.fixture
def solved_rows():
    return [row[:] for row in SOLVED]
