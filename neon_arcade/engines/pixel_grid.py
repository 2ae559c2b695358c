"""Community grid: a fixed N x N pixel-art canvas.

Cells hold a colour string or None (background). Operations mutate the grid in place
and ignore out-of-bounds coordinates.
"""

from __future__ import annotations

from neon_arcade.engines.grid import grid_size, in_bounds, make_grid

GRID_SIZE = 32
CELL_SIZE = 15
CANVAS_SIZE = GRID_SIZE * CELL_SIZE

COLOR_PALETTE: tuple[str, ...] = (
    "#000000",
    "#ffffff",
    "#ff0000",
    "#ff8800",
    "#ffff00",
    "#00cc00",
    "#0044ff",
    "#8800ff",
    "#ff66aa",
    "#00ffff",
    "#8b4513",
    "#888888",
    "#006600",
    "#000066",
    "#800000",
    "#ffd700",
)

PixelGrid = list[list[str | None]]


def create_grid(size: int = GRID_SIZE) -> PixelGrid:
    return make_grid(size, size, lambda: None)


def clear_grid(grid: PixelGrid) -> None:
    for row in grid:
        for x in range(len(row)):
            row[x] = None


def _inside(grid: PixelGrid, x: int, y: int) -> bool:
    width, height = grid_size(grid)
    return in_bounds(x, y, width, height)


def place_pixel(grid: PixelGrid, x: int, y: int, color: str) -> int:
    """Paint one cell. Returns 1 if the cell changed, else 0."""

    if not _inside(grid, x, y):
        return 0
    if grid[y][x] == color:
        return 0
    grid[y][x] = color
    return 1


def erase_pixel(grid: PixelGrid, x: int, y: int) -> None:
    if not _inside(grid, x, y):
        return
    grid[y][x] = None


def flood_fill(grid: PixelGrid, start_x: int, start_y: int, color: str) -> int:
    """Recolour the 4-connected region around the start cell.

    Iterative with an explicit stack so large regions don't hit the recursion limit.
    Returns the number of cells filled; 0 when the start cell already has `color`.
    """

    if not _inside(grid, start_x, start_y):
        return 0

    target = grid[start_y][start_x]
    if target == color:
        return 0

    filled = 0
    stack: list[tuple[int, int]] = [(start_x, start_y)]
    visited: set[tuple[int, int]] = set()

    while stack:
        x, y = stack.pop()
        if (x, y) in visited:
            continue
        if not _inside(grid, x, y):
            continue
        if grid[y][x] != target:
            continue

        visited.add((x, y))
        grid[y][x] = color
        filled += 1

        stack.append((x + 1, y))
        stack.append((x - 1, y))
        stack.append((x, y + 1))
        stack.append((x, y - 1))

    return filled


def pixel_to_grid(
    canvas_x: float,
    canvas_y: float,
    canvas_display_width: float,
    *,
    size: int = GRID_SIZE,
) -> tuple[int, int] | None:
    """Map a pointer position on the displayed canvas to grid coordinates.

    The displayed canvas may be scaled; `canvas_display_width` is its on-screen width.
    Returns None outside the grid (or for a non-positive display width).
    """

    if canvas_display_width <= 0:
        return None
    scale = (size * CELL_SIZE) / canvas_display_width
    x = int((canvas_x * scale) // CELL_SIZE)
    y = int((canvas_y * scale) // CELL_SIZE)
    if not in_bounds(x, y, size, size):
        return None
    return x, y


def count_painted(grid: PixelGrid) -> int:
    return sum(1 for row in grid for c in row if c is not None)
