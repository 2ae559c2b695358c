"""4x4 Sudoku-Lite generator and validator.

Grids are flat lists of 16 cells (row-major), each 1..4 or None for a blank.
Four 2x2 boxes. All functions return new lists and never mutate their input.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import NamedTuple

SIZE = 4
BOX = 2
CELLS = SIZE * SIZE
VALUES = (1, 2, 3, 4)
DEFAULT_CLUES_TO_REMOVE = 8

Grid = list[int | None]


class SudokuPuzzle(NamedTuple):
    puzzle: Grid
    solution: list[int]


def _peers(pos: int) -> list[int]:
    """Indices sharing pos's row, then column, then box (pos itself excluded)."""

    row, col = divmod(pos, SIZE)
    out = [row * SIZE + c for c in range(SIZE)]
    out.extend(r * SIZE + col for r in range(SIZE))
    box_row = (row // BOX) * BOX
    box_col = (col // BOX) * BOX
    out.extend(r * SIZE + c for r in range(box_row, box_row + BOX) for c in range(box_col, box_col + BOX))
    return [idx for idx in out if idx != pos]


def _can_place(grid: Sequence[int | None], pos: int, value: int) -> bool:
    return all(grid[idx] != value for idx in _peers(pos))


def generate_solution(*, rng: random.Random | None = None) -> list[int]:
    """Fill a 4x4 grid by randomized backtracking.

    Candidates are shuffled per cell so repeated calls give different solutions.
    Recursion depth is bounded by the 16 cells.
    """

    rng = rng or random.Random()
    grid: list[int] = [0] * CELLS

    def solve(pos: int) -> bool:
        if pos == CELLS:
            return True
        candidates = list(VALUES)
        rng.shuffle(candidates)
        for value in candidates:
            if _can_place(grid, pos, value):
                grid[pos] = value
                if solve(pos + 1):
                    return True
                grid[pos] = 0
        return False

    solve(0)
    return grid


def generate_puzzle(clues_to_remove: int = DEFAULT_CLUES_TO_REMOVE, *, rng: random.Random | None = None) -> SudokuPuzzle:
    """Generate a solution and blank out `clues_to_remove` random cells.

    The count is clamped to 0..16. Uniqueness of the puzzle's solution is not checked.
    """

    rng = rng or random.Random()
    count = max(0, min(CELLS, clues_to_remove))

    solution = generate_solution(rng=rng)
    puzzle: Grid = list(solution)
    for pos in rng.sample(range(CELLS), count):
        puzzle[pos] = None

    return SudokuPuzzle(puzzle=puzzle, solution=solution)


def _unit_ok(values: list[int | None]) -> bool:
    return set(values) == set(VALUES)


def check_solution(grid: Sequence[int | None]) -> bool:
    if len(grid) != CELLS or any(v is None for v in grid):
        return False

    for r in range(SIZE):
        if not _unit_ok([grid[r * SIZE + c] for c in range(SIZE)]):
            return False

    for c in range(SIZE):
        if not _unit_ok([grid[r * SIZE + c] for r in range(SIZE)]):
            return False

    for br in range(0, SIZE, BOX):
        for bc in range(0, SIZE, BOX):
            box = [grid[r * SIZE + c] for r in range(br, br + BOX) for c in range(bc, bc + BOX)]
            if not _unit_ok(box):
                return False

    return True


def get_conflicts(grid: Sequence[int | None], pos: int, value: int) -> list[int]:
    """Other cells in pos's row, column or box that already hold `value`.

    A cell sharing two units with pos (e.g. same row and box) is reported once per unit.
    """

    if not 0 <= pos < CELLS:
        return []
    return [idx for idx in _peers(pos) if grid[idx] == value]


def is_valid_placement(grid: Sequence[int | None], pos: int, value: int) -> bool:
    return not get_conflicts(grid, pos, value)


def fixed_cells(puzzle: Sequence[int | None]) -> frozenset[int]:
    """Positions given in the puzzle; the player cannot change them."""

    return frozenset(i for i, v in enumerate(puzzle) if v is not None)


def set_cell(grid: Sequence[int | None], fixed: frozenset[int] | set[int], pos: int, value: int | None) -> Grid:
    """Return a copy of the player grid with `pos` set to `value`.

    Fixed cells, out-of-range positions and values outside 1..4 leave the copy unchanged.
    """

    out: Grid = list(grid)
    if not 0 <= pos < CELLS or pos in fixed:
        return out
    if value is not None and value not in VALUES:
        return out
    out[pos] = value
    return out
