from __future__ import annotations

import pytest

from neon_arcade.engines.pixel_grid import (
    COLOR_PALETTE,
    GRID_SIZE,
    clear_grid,
    count_painted,
    create_grid,
    erase_pixel,
    flood_fill,
    pixel_to_grid,
    place_pixel,
)

RED = "#ff0000"
BLUE = "#0044ff"


def test_create_grid_defaults() -> None:
    grid = create_grid()
    assert len(grid) == GRID_SIZE
    assert all(len(row) == GRID_SIZE for row in grid)
    assert count_painted(grid) == 0
    assert len(COLOR_PALETTE) == 16


def test_place_pixel_reports_changes() -> None:
    grid = create_grid(8)

    assert place_pixel(grid, 2, 3, RED) == 1
    assert grid[3][2] == RED
    assert place_pixel(grid, 2, 3, RED) == 0
    assert place_pixel(grid, 2, 3, BLUE) == 1
    assert place_pixel(grid, 8, 0, RED) == 0
    assert place_pixel(grid, -1, 0, RED) == 0


def test_erase_and_clear() -> None:
    grid = create_grid(8)
    place_pixel(grid, 1, 1, RED)
    place_pixel(grid, 2, 2, RED)

    erase_pixel(grid, 1, 1)
    erase_pixel(grid, 40, 40)
    assert grid[1][1] is None
    assert count_painted(grid) == 1

    clear_grid(grid)
    assert count_painted(grid) == 0


def test_fill_empty_grid_covers_everything() -> None:
    grid = create_grid()

    assert flood_fill(grid, 5, 5, RED) == GRID_SIZE * GRID_SIZE
    assert count_painted(grid) == GRID_SIZE * GRID_SIZE


def test_fill_is_idempotent() -> None:
    grid = create_grid(8)
    assert flood_fill(grid, 0, 0, RED) == 64
    before = [list(row) for row in grid]

    assert flood_fill(grid, 0, 0, RED) == 0
    assert grid == before


def test_fill_stops_at_region_boundary() -> None:
    grid = create_grid(8)
    for y in range(8):
        place_pixel(grid, 3, y, BLUE)

    filled = flood_fill(grid, 0, 0, RED)

    assert filled == 3 * 8
    assert all(grid[y][x] == RED for y in range(8) for x in range(3))
    assert all(grid[y][x] is None for y in range(8) for x in range(4, 8))


def test_fill_does_not_cross_diagonals() -> None:
    grid = create_grid(3)
    place_pixel(grid, 1, 0, BLUE)
    place_pixel(grid, 0, 1, BLUE)

    assert flood_fill(grid, 0, 0, RED) == 1


def test_fill_out_of_bounds_is_noop() -> None:
    grid = create_grid(4)
    assert flood_fill(grid, 4, 0, RED) == 0
    assert count_painted(grid) == 0


@pytest.mark.parametrize(
    ("x", "y", "display_width", "expected"),
    [
        (15, 15, 480, (1, 1)),
        (0, 0, 480, (0, 0)),
        (479, 479, 480, (31, 31)),
        (15, 15, 240, (2, 2)),
        (480, 10, 480, None),
        (-1, 10, 480, None),
        (10, 10, 0, None),
    ],
)
def test_pixel_to_grid(x: float, y: float, display_width: float, expected: tuple[int, int] | None) -> None:
    assert pixel_to_grid(x, y, display_width) == expected
