from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set, Tuple

from errors import Contradiction, IndexOutOfRange, InvalidValue

Cell = Tuple[int, int]
Rows = List[List[int]]
Snapshot = Tuple[Tuple[int, ...], Tuple[int, ...]]

FULL_MASK = 0x1FF


def digit_bit(digit: int) -> int:
    return 1 << (digit - 1)


def mask_of(digits: Iterable[int]) -> int:
    mask = 0
    for digit in digits:
        mask |= digit_bit(digit)
    return mask


def digits_of(mask: int) -> List[int]:
    return [d for d in range(1, 10) if mask & digit_bit(d)]


def mask_size(mask: int) -> int:
    return bin(mask).count("1")


def single_digit(mask: int) -> int:
    """Return the digit of a one-bit mask, else 0."""
    if mask and not mask & (mask - 1):
        return mask.bit_length()
    return 0


def box_origin(row: int, col: int) -> Cell:
    return row - row % 3, col - col % 3


class Grid:
    """A 9x9 puzzle: placed values, per-cell candidates and search snapshots.

    Cells are addressed by ``(row, col)`` in ``[0, 8]``. Candidates are kept as
    9-bit masks; a mask of 0 on an empty cell means they have not been
    computed yet.
    """

    def __init__(self, rows: Optional[Sequence[Sequence[int]]] = None) -> None:
        self.reset()
        if rows is not None:
            if len(rows) != 9 or any(len(row) != 9 for row in rows):
                raise InvalidValue("Initial values must be a 9x9 matrix.")
            for r in range(9):
                for c in range(9):
                    self.set_actual(r, c, rows[r][c])

    def reset(self) -> None:
        self._actual: List[int] = [0] * 81
        self._candidates: List[int] = [0] * 81
        self._snapshots: List[Snapshot] = []
        self.score: int = 0
        self.solution_backup: Optional[Rows] = None

    @classmethod
    def from_string(cls, text: str) -> "Grid":
        if len(text) != 81 or not all(ch in "0123456789" for ch in text):
            raise InvalidValue(
                "A puzzle string must hold exactly 81 digits in the 0-9 range."
            )
        grid = cls()
        grid._actual = [int(ch) for ch in text]
        return grid

    def to_string(self) -> str:
        return "".join(str(value) for value in self._actual)

    def rows(self) -> Rows:
        return [self._actual[r * 9 : r * 9 + 9] for r in range(9)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._actual == other._actual

    def __repr__(self) -> str:
        return f"Grid({self.to_string()!r})"

    def format(self) -> str:
        lines = []
        for r in range(9):
            if r and r % 3 == 0:
                lines.append("------+-------+------")
            cells = [str(v) if v else "." for v in self._actual[r * 9 : r * 9 + 9]]
            lines.append(
                " | ".join(" ".join(cells[i : i + 3]) for i in range(0, 9, 3))
            )
        return "\n".join(lines)

    # accessors

    @staticmethod
    def _index(row: int, col: int) -> int:
        if not (0 <= row <= 8 and 0 <= col <= 8):
            raise IndexOutOfRange(row, col)
        return row * 9 + col

    def get_actual(self, row: int, col: int) -> int:
        return self._actual[self._index(row, col)]

    def set_actual(self, row: int, col: int, value: int) -> None:
        index = self._index(row, col)
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 9:
            raise InvalidValue(f"Cell value must be within [0..9]. Got {value!r}.")
        self._actual[index] = value
        if value:
            self._candidates[index] = 0

    def get_candidates(self, row: int, col: int) -> Set[int]:
        return set(digits_of(self._candidates[self._index(row, col)]))

    def set_candidates(self, row: int, col: int, digits: Iterable[int]) -> None:
        index = self._index(row, col)
        self._require_empty(index)
        digits = set(digits)
        if not digits <= set(range(1, 10)):
            raise InvalidValue(
                f"Candidates must be a subset of 1..9. Got {sorted(digits)!r}."
            )
        self._candidates[index] = mask_of(digits)

    def _require_empty(self, index: int) -> None:
        if self._actual[index]:
            row, col = divmod(index, 9)
            raise InvalidValue(
                f"r{row + 1}c{col + 1} already holds {self._actual[index]}; it takes no candidates."
            )

    def get_candidate_mask(self, row: int, col: int) -> int:
        return self._candidates[self._index(row, col)]

    def set_candidate_mask(self, row: int, col: int, mask: int) -> None:
        index = self._index(row, col)
        self._require_empty(index)
        if not 0 <= mask <= FULL_MASK:
            raise InvalidValue(f"Candidate mask out of range: {mask!r}.")
        self._candidates[index] = mask

    def clear_candidates(self) -> None:
        self._candidates = [0] * 81

    def reset_score(self) -> None:
        self.score = 0

    def empty_cells(self) -> List[Cell]:
        return [divmod(i, 9) for i, value in enumerate(self._actual) if value == 0]

    def empty_count(self) -> int:
        return self._actual.count(0)

    # constraint checks

    def placed_peer_mask(self, row: int, col: int) -> int:
        """Mask of digits placed in the row, column and box of a cell, itself excluded."""
        self._index(row, col)
        mask = 0
        for i in range(9):
            if i != col:
                mask |= self._bit_at(row, i)
            if i != row:
                mask |= self._bit_at(i, col)
        r0, c0 = box_origin(row, col)
        for r in range(r0, r0 + 3):
            for c in range(c0, c0 + 3):
                if (r, c) != (row, col):
                    mask |= self._bit_at(r, c)
        return mask

    def _bit_at(self, row: int, col: int) -> int:
        value = self._actual[row * 9 + col]
        return digit_bit(value) if value else 0

    def calculate_candidate_mask(self, row: int, col: int) -> int:
        stored = self._candidates[self._index(row, col)]
        mask = (stored or FULL_MASK) & ~self.placed_peer_mask(row, col)
        if not mask:
            raise Contradiction(f"No candidate left for r{row + 1}c{col + 1}.")
        return mask

    def calculate_candidates(self, row: int, col: int) -> Set[int]:
        return set(digits_of(self.calculate_candidate_mask(row, col)))

    def is_move_valid(self, row: int, col: int, value: int) -> bool:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 9:
            raise InvalidValue(f"Move value must be within [1..9]. Got {value!r}.")
        return not self.placed_peer_mask(row, col) & digit_bit(value)

    def is_solved(self) -> bool:
        if 0 in self._actual:
            return False
        for i in range(9):
            if mask_of(self._actual[i * 9 : i * 9 + 9]) != FULL_MASK:
                return False
            if mask_of(self._actual[i::9]) != FULL_MASK:
                return False
        for r0 in range(0, 9, 3):
            for c0 in range(0, 9, 3):
                box = [
                    self._actual[r * 9 + c]
                    for r in range(r0, r0 + 3)
                    for c in range(c0, c0 + 3)
                ]
                if mask_of(box) != FULL_MASK:
                    return False
        return True

    def find_cell_with_fewest_candidates(self) -> Optional[Cell]:
        """Row-major scan; a cell whose candidates were never computed counts as nine."""
        best: Optional[Cell] = None
        best_size = 10
        for index, value in enumerate(self._actual):
            if value:
                continue
            size = mask_size(self._candidates[index] or FULL_MASK)
            if size < best_size:
                best, best_size = divmod(index, 9), size
        return best

    def confirm(self, row: int, col: int, value: int, weight: int) -> None:
        """Place a deduced value and credit its technique weight to the score."""
        if not self.is_move_valid(row, col, value):
            raise Contradiction(
                f"r{row + 1}c{col + 1} = {value} repeats a placed peer."
            )
        self.set_actual(row, col, value)
        self.score += weight

    # snapshots

    @property
    def snapshot_depth(self) -> int:
        return len(self._snapshots)

    def push_snapshot(self) -> None:
        self._snapshots.append((tuple(self._actual), tuple(self._candidates)))

    def pop_snapshot(self) -> None:
        actual, candidates = self._snapshots.pop()
        self._actual = list(actual)
        self._candidates = list(candidates)

    def drop_snapshot(self) -> None:
        self._snapshots.pop()

    def clear_snapshots(self) -> None:
        self._snapshots = []

    def save_solution(self) -> None:
        self.solution_backup = self.rows()
