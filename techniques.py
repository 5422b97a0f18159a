from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, List, Sequence

from config import TECHNIQUE_WEIGHTS
from errors import Contradiction
from grid import Cell, Grid, digit_bit, mask_size, single_digit

Unit = Sequence[Cell]

ALL_CELLS: List[Cell] = [(r, c) for r in range(9) for c in range(9)]


def build_row_units() -> List[List[Cell]]:
    return [[(r, c) for c in range(9)] for r in range(9)]


def build_col_units() -> List[List[Cell]]:
    return [[(r, c) for r in range(9)] for c in range(9)]


def build_box_units() -> List[List[Cell]]:
    units: List[List[Cell]] = []
    for box_r in range(3):
        for box_c in range(3):
            cells = []
            for dr in range(3):
                for dc in range(3):
                    cells.append((box_r * 3 + dr, box_c * 3 + dc))
            units.append(cells)
    return units


ROW_UNITS = build_row_units()
COL_UNITS = build_col_units()
BOX_UNITS = build_box_units()


def placed_mask(grid: Grid, unit: Unit) -> int:
    mask = 0
    for r, c in unit:
        value = grid.get_actual(r, c)
        if value:
            mask |= digit_bit(value)
    return mask


class Technique:
    name: str = "technique"
    weight: int = 0

    def apply(self, grid: Grid) -> bool:
        """Run one pass over the grid. Returns True if anything changed.

        Raises Contradiction when the grid cannot be completed.
        """
        raise NotImplementedError


@dataclass
class Elimination(Technique):
    name: str = "elimination"
    weight: int = TECHNIQUE_WEIGHTS["elimination"]

    def apply(self, grid: Grid) -> bool:
        changed = False
        for r, c in ALL_CELLS:
            if grid.get_actual(r, c):
                continue
            mask = grid.calculate_candidate_mask(r, c)
            grid.set_candidate_mask(r, c, mask)
            digit = single_digit(mask)
            if digit:
                grid.confirm(r, c, digit, self.weight)
                changed = True
        return changed


@dataclass
class UnitTechnique(Technique):
    units: Sequence[Unit] = ()
    unit_kind: str = "unit"

    def __post_init__(self) -> None:
        self.name = f"{self.name}/{self.unit_kind}"

    def apply(self, grid: Grid) -> bool:
        changed = False
        for unit in self.units:
            changed = self.apply_unit(grid, unit) or changed
        return changed

    def apply_unit(self, grid: Grid, unit: Unit) -> bool:
        raise NotImplementedError

    def purge(self, grid: Grid, cells: Iterable[Cell], mask: int) -> bool:
        """Remove ``mask`` digits from ``cells``; place any cell left with one."""
        changed = False
        for r, c in cells:
            if grid.get_actual(r, c):
                continue
            current = grid.get_candidate_mask(r, c)
            if not current & mask:
                continue
            remaining = current & ~mask
            if not remaining:
                raise Contradiction(
                    f"{self.name} left no candidate for r{r + 1}c{c + 1}."
                )
            grid.set_candidate_mask(r, c, remaining)
            changed = True
            digit = single_digit(remaining)
            if digit:
                grid.confirm(r, c, digit, self.weight)
        return changed


@dataclass
class HiddenSingle(UnitTechnique):
    """Lone ranger: a digit only one empty cell of the unit can take."""

    name: str = "hidden-single"
    weight: int = TECHNIQUE_WEIGHTS["hidden-single"]

    def apply_unit(self, grid: Grid, unit: Unit) -> bool:
        changed = False
        for digit in range(1, 10):
            bit = digit_bit(digit)
            if placed_mask(grid, unit) & bit:
                continue
            hosts = [
                (r, c)
                for r, c in unit
                if not grid.get_actual(r, c) and grid.get_candidate_mask(r, c) & bit
            ]
            if len(hosts) == 1:
                r, c = hosts[0]
                grid.confirm(r, c, digit, self.weight)
                changed = True
        return changed


@dataclass
class NakedPair(UnitTechnique):
    """Twins: two cells sharing the same two candidates."""

    name: str = "naked-pair"
    weight: int = TECHNIQUE_WEIGHTS["naked-pair"]

    def apply_unit(self, grid: Grid, unit: Unit) -> bool:
        changed = False
        for first, second in combinations(unit, 2):
            if grid.get_actual(*first) or grid.get_actual(*second):
                continue
            mask = grid.get_candidate_mask(*first)
            if mask_size(mask) != 2 or grid.get_candidate_mask(*second) != mask:
                continue
            others = [cell for cell in unit if cell not in (first, second)]
            changed = self.purge(grid, others, mask) or changed
        return changed


@dataclass
class NakedTriple(UnitTechnique):
    """Triplets: three cells confined to the same three candidates."""

    name: str = "naked-triple"
    weight: int = TECHNIQUE_WEIGHTS["naked-triple"]

    def apply_unit(self, grid: Grid, unit: Unit) -> bool:
        changed = False
        for trio in combinations(unit, 3):
            masks = []
            for r, c in trio:
                mask = grid.get_candidate_mask(r, c)
                if grid.get_actual(r, c) or not 2 <= mask_size(mask) <= 3:
                    break
                masks.append(mask)
            else:
                union = masks[0] | masks[1] | masks[2]
                if mask_size(union) != 3:
                    continue
                others = [cell for cell in unit if cell not in trio]
                changed = self.purge(grid, others, union) or changed
        return changed


def build_pipeline() -> List[Technique]:
    """Techniques from cheapest to most expensive, each unit kind in box, row, column order."""
    pipeline: List[Technique] = [Elimination()]
    for technique in (HiddenSingle, NakedPair, NakedTriple):
        pipeline.append(technique(units=BOX_UNITS, unit_kind="box"))
        pipeline.append(technique(units=ROW_UNITS, unit_kind="row"))
        pipeline.append(technique(units=COL_UNITS, unit_kind="column"))
    return pipeline
