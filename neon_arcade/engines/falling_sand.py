"""Falling-sand cellular automaton.

The grid is row-major (`grid[y][x]`) and is mutated in place by `update_grid` and
`place_particle`. Every cell always holds a `Particle`; "empty" is a particle type,
not an absence.

Randomness (scan direction, fire drift, fire lifetime) comes from an optional
`random.Random` so sessions can replay deterministically from a seed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple

from neon_arcade.engines.grid import grid_size, in_bounds, make_grid

GRID_WIDTH = 200
GRID_HEIGHT = 150
CELL_SIZE = 4

FIRE_LIFE_MIN = 25
FIRE_LIFE_SPREAD = 10
# Used by renderers to turn remaining life into a colour band.
FIRE_LIFE_NOMINAL = 30
FIRE_DRIFT_CHANCE = 0.3
EVAPORATION_COST = 5

# Brush marker that clears cells instead of filling them.
ERASER = "eraser"


class ParticleType(StrEnum):
    empty = "empty"
    sand = "sand"
    water = "water"
    fire = "fire"
    wall = "wall"


@dataclass(slots=True)
class Particle:
    type: ParticleType = ParticleType.empty
    # Only meaningful for fire; counts down to removal.
    life: float = 0


class GridDimensions(NamedTuple):
    width: int
    height: int
    cell_size: int


SandGrid = list[list[Particle]]


def _empty() -> Particle:
    return Particle(ParticleType.empty, 0)


def create_grid(width: int = GRID_WIDTH, height: int = GRID_HEIGHT) -> SandGrid:
    return make_grid(width, height, _empty)


def get_grid_dimensions() -> GridDimensions:
    return GridDimensions(width=GRID_WIDTH, height=GRID_HEIGHT, cell_size=CELL_SIZE)


def _is_empty(grid: SandGrid, x: int, y: int, width: int, height: int) -> bool:
    return in_bounds(x, y, width, height) and grid[y][x].type == ParticleType.empty


def _step_sand(grid: SandGrid, x: int, y: int, width: int, height: int) -> None:
    particle = grid[y][x]
    for nx, ny in ((x, y + 1), (x - 1, y + 1), (x + 1, y + 1)):
        if _is_empty(grid, nx, ny, width, height):
            grid[ny][nx] = particle
            grid[y][x] = _empty()
            return

    # Sand sinks through water.
    if in_bounds(x, y + 1, width, height) and grid[y + 1][x].type == ParticleType.water:
        grid[y][x] = grid[y + 1][x]
        grid[y + 1][x] = particle


def _step_water(grid: SandGrid, x: int, y: int, width: int, height: int) -> None:
    particle = grid[y][x]
    for nx, ny in ((x, y + 1), (x - 1, y + 1), (x + 1, y + 1), (x - 1, y), (x + 1, y)):
        if _is_empty(grid, nx, ny, width, height):
            grid[ny][nx] = particle
            grid[y][x] = _empty()
            return


def _step_fire(grid: SandGrid, x: int, y: int, width: int, height: int, rng: random.Random) -> None:
    particle = grid[y][x]
    particle.life -= 1
    if particle.life <= 0:
        grid[y][x] = _empty()
        return

    drift = 0
    if rng.random() < FIRE_DRIFT_CHANCE:
        drift = -1 if rng.random() < 0.5 else 1

    new_y = y - 1
    if _is_empty(grid, x + drift, new_y, width, height):
        grid[new_y][x + drift] = particle
        grid[y][x] = _empty()
    elif _is_empty(grid, x, new_y, width, height):
        grid[new_y][x] = particle
        grid[y][x] = _empty()

    # Neighbours of the cell the fire started the tick in, fixed order: left, right, up, down.
    for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
        if in_bounds(nx, ny, width, height) and grid[ny][nx].type == ParticleType.water:
            grid[ny][nx] = _empty()
            particle.life -= EVAPORATION_COST
            break


def update_grid(grid: SandGrid, *, rng: random.Random | None = None) -> SandGrid:
    """Advance the simulation by one tick, in place.

    Rows are processed bottom to top so a falling particle lands in a row that has
    already been scanned and cannot move twice in the same tick. Each row picks its
    horizontal scan direction at random to avoid a left/right bias.
    """

    rng = rng or random.Random()
    width, height = grid_size(grid)
    # Rising fire and sideways water land in cells not scanned yet; each particle steps once.
    stepped: set[int] = set()

    for y in range(height - 1, -1, -1):
        left_to_right = rng.random() > 0.5
        for i in range(width):
            x = i if left_to_right else width - 1 - i
            particle = grid[y][x]
            kind = particle.type
            if kind in (ParticleType.empty, ParticleType.wall) or id(particle) in stepped:
                continue
            stepped.add(id(particle))

            if kind == ParticleType.sand:
                _step_sand(grid, x, y, width, height)
            elif kind == ParticleType.water:
                _step_water(grid, x, y, width, height)
            elif kind == ParticleType.fire:
                _step_fire(grid, x, y, width, height, rng)

    return grid


def place_particle(
    grid: SandGrid,
    x: int,
    y: int,
    type: ParticleType | str,
    brush_size: int,
    *,
    rng: random.Random | None = None,
) -> int:
    """Paint a square brush centred on (x, y).

    Fills only empty cells and returns how many were written. The eraser marker
    (or `empty`) clears occupied cells instead and always returns 0.
    Cells outside the grid are skipped.
    """

    rng = rng or random.Random()
    width, height = grid_size(grid)
    erase = type == ERASER or type == ParticleType.empty
    kind = None if erase else ParticleType(type)

    placed = 0
    half = max(brush_size, 1) // 2
    for dy in range(-half, half + 1):
        for dx in range(-half, half + 1):
            px, py = x + dx, y + dy
            if not in_bounds(px, py, width, height):
                continue

            if kind is None:
                if grid[py][px].type != ParticleType.empty:
                    grid[py][px] = _empty()
            elif grid[py][px].type == ParticleType.empty:
                life = FIRE_LIFE_MIN + rng.random() * FIRE_LIFE_SPREAD if kind == ParticleType.fire else 0
                grid[py][px] = Particle(kind, life)
                placed += 1

    return placed


def count_particles(grid: SandGrid) -> int:
    return sum(1 for row in grid for p in row if p.type != ParticleType.empty)


def fire_life_ratio(particle: Particle) -> float:
    """Remaining-life ratio of a fire particle (0 for anything else)."""

    if particle.type != ParticleType.fire:
        return 0.0
    return max(particle.life, 0) / FIRE_LIFE_NOMINAL
