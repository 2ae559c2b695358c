from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    return 0 <= x < width and 0 <= y < height


def make_grid(width: int, height: int, factory: Callable[[], T]) -> list[list[T]]:
    """Build a row-major grid (`grid[y][x]`) with a fresh cell value per position."""

    return [[factory() for _ in range(width)] for _ in range(height)]


def grid_size(grid: list[list[T]]) -> tuple[int, int]:
    """Return `(width, height)` of a row-major grid."""

    height = len(grid)
    width = len(grid[0]) if height else 0
    return width, height
