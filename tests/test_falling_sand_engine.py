from __future__ import annotations

import random

from neon_arcade.engines.falling_sand import (
    ERASER,
    Particle,
    ParticleType,
    count_particles,
    create_grid,
    fire_life_ratio,
    get_grid_dimensions,
    place_particle,
    update_grid,
)


def _types(grid) -> list[str]:  # type: ignore[no-untyped-def]
    return ["".join(p.type.value[0] for p in row) for row in grid]


def test_create_grid_is_all_empty() -> None:
    grid = create_grid(20, 10)
    assert len(grid) == 10
    assert all(len(row) == 20 for row in grid)
    assert all(p.type == ParticleType.empty for row in grid for p in row)

    # Cells are distinct objects, not one shared particle.
    grid[0][0].life = 5
    assert grid[0][1].life == 0


def test_default_dimensions() -> None:
    dims = get_grid_dimensions()
    assert (dims.width, dims.height, dims.cell_size) == (200, 150, 4)
    grid = create_grid()
    assert len(grid) == 150 and len(grid[0]) == 200


def test_sand_falls_one_row_per_tick() -> None:
    grid = create_grid(10, 10)
    grid[0][5] = Particle(ParticleType.sand)

    update_grid(grid, rng=random.Random(1))

    assert grid[0][5].type == ParticleType.empty
    assert grid[1][5].type == ParticleType.sand


def test_sand_comes_to_rest_on_bottom_row() -> None:
    height = 12
    grid = create_grid(8, height)
    grid[0][3] = Particle(ParticleType.sand)
    rng = random.Random(7)

    for _ in range(height):
        update_grid(grid, rng=rng)
        assert count_particles(grid) == 1

    assert grid[height - 1][3].type == ParticleType.sand


def test_sand_slides_down_left_before_right() -> None:
    grid = create_grid(3, 2)
    grid[0][1] = Particle(ParticleType.sand)
    grid[1][1] = Particle(ParticleType.wall)

    update_grid(grid, rng=random.Random(3))

    assert grid[1][0].type == ParticleType.sand
    assert grid[1][2].type == ParticleType.empty
    assert grid[0][1].type == ParticleType.empty


def test_sand_sinks_through_water() -> None:
    grid = create_grid(1, 2)
    grid[0][0] = Particle(ParticleType.sand)
    grid[1][0] = Particle(ParticleType.water)

    update_grid(grid, rng=random.Random(0))

    assert grid[1][0].type == ParticleType.sand
    assert grid[0][0].type == ParticleType.water


def test_water_flows_sideways_when_it_cannot_fall() -> None:
    grid = create_grid(3, 1)
    grid[0][1] = Particle(ParticleType.water)

    update_grid(grid, rng=random.Random(0))

    # Left is checked before right.
    assert _types(grid) == ["we" + "e"]


def test_walls_never_move() -> None:
    grid = create_grid(4, 4)
    grid[0][2] = Particle(ParticleType.wall)

    for _ in range(5):
        update_grid(grid, rng=random.Random(2))

    assert grid[0][2].type == ParticleType.wall


def test_fire_burns_out() -> None:
    grid = create_grid(3, 3)
    grid[2][1] = Particle(ParticleType.fire, life=1)

    update_grid(grid, rng=random.Random(0))

    assert count_particles(grid) == 0


def test_fire_rises_one_cell_per_tick() -> None:
    grid = create_grid(1, 3)
    grid[2][0] = Particle(ParticleType.fire, life=10)

    update_grid(grid, rng=random.Random(4))

    assert grid[2][0].type == ParticleType.empty
    assert grid[1][0].type == ParticleType.fire
    assert grid[1][0].life == 9
    assert grid[0][0].type == ParticleType.empty


def test_fire_evaporates_first_water_neighbour() -> None:
    grid = create_grid(3, 1)
    grid[0][0] = Particle(ParticleType.water)
    grid[0][1] = Particle(ParticleType.fire, life=20)
    grid[0][2] = Particle(ParticleType.water)

    update_grid(grid, rng=random.Random(9))

    # Left neighbour is checked first; only one water is consumed per tick.
    assert grid[0][0].type == ParticleType.empty
    assert grid[0][2].type == ParticleType.water
    fire = grid[0][1]
    assert fire.type == ParticleType.fire
    assert fire.life == 20 - 1 - 5


def test_ticks_never_create_particles() -> None:
    rng = random.Random(11)
    grid = create_grid(30, 20)
    for _ in range(40):
        kind = rng.choice([ParticleType.sand, ParticleType.water, ParticleType.wall])
        place_particle(grid, rng.randrange(30), rng.randrange(20), kind, 1, rng=rng)

    before = count_particles(grid)
    for _ in range(25):
        update_grid(grid, rng=rng)
        assert count_particles(grid) == before


def test_place_particle_fills_square_brush() -> None:
    grid = create_grid(10, 10)

    assert place_particle(grid, 5, 5, ParticleType.sand, 3) == 9
    # Brush never overwrites occupied cells.
    assert place_particle(grid, 5, 5, ParticleType.water, 3) == 0
    assert place_particle(grid, 6, 5, "water", 3) == 3
    assert count_particles(grid) == 12


def test_place_particle_clips_at_edges_and_ignores_out_of_bounds() -> None:
    grid = create_grid(10, 10)

    assert place_particle(grid, 0, 0, ParticleType.wall, 3) == 4
    assert place_particle(grid, -5, -5, ParticleType.sand, 3) == 0
    assert place_particle(grid, 50, 3, ParticleType.sand, 1) == 0
    assert count_particles(grid) == 4


def test_eraser_clears_brush_area() -> None:
    grid = create_grid(10, 10)
    place_particle(grid, 5, 5, ParticleType.sand, 3)

    assert place_particle(grid, 5, 5, ERASER, 1) == 0
    assert grid[5][5].type == ParticleType.empty
    assert count_particles(grid) == 8

    place_particle(grid, 5, 5, ParticleType.empty, 3)
    assert count_particles(grid) == 0


def test_placed_fire_gets_randomized_life() -> None:
    grid = create_grid(10, 10)
    place_particle(grid, 5, 5, ParticleType.fire, 3, rng=random.Random(5))

    lives = [p.life for row in grid for p in row if p.type == ParticleType.fire]
    assert len(lives) == 9
    assert all(25 <= life < 35 for life in lives)
    assert len(set(lives)) > 1


def test_fire_life_ratio() -> None:
    assert fire_life_ratio(Particle(ParticleType.fire, 15)) == 0.5
    assert fire_life_ratio(Particle(ParticleType.fire, -2)) == 0.0
    assert fire_life_ratio(Particle(ParticleType.sand)) == 0.0
