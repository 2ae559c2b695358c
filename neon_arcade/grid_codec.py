"""Conversion between engine state and the persisted session snapshots.

Falling-sand grids are large (200x150 by default), so they are stored as one string
per row with a character per cell, plus a sparse map of fire lifetimes.
"""

from __future__ import annotations

from neon_arcade.api.models import BlockModel, PixelSnapshot, SandSnapshot, StackSnapshot
from neon_arcade.engines.falling_sand import Particle, ParticleType, SandGrid
from neon_arcade.engines.grid import grid_size
from neon_arcade.engines.pixel_grid import PixelGrid
from neon_arcade.engines.stack import Block, StackState

PARTICLE_CHARS: dict[ParticleType, str] = {
    ParticleType.empty: ".",
    ParticleType.sand: "s",
    ParticleType.water: "w",
    ParticleType.fire: "f",
    ParticleType.wall: "#",
}
CHAR_PARTICLES: dict[str, ParticleType] = {c: t for t, c in PARTICLE_CHARS.items()}


class GridCodecError(ValueError):
    pass


def _fire_key(x: int, y: int) -> str:
    return f"{x},{y}"


def encode_sand(grid: SandGrid, *, particles_placed: int = 0) -> SandSnapshot:
    width, height = grid_size(grid)
    rows: list[str] = []
    fire_life: dict[str, float] = {}

    for y, row in enumerate(grid):
        rows.append("".join(PARTICLE_CHARS[p.type] for p in row))
        for x, p in enumerate(row):
            if p.type == ParticleType.fire:
                fire_life[_fire_key(x, y)] = p.life

    return SandSnapshot(width=width, height=height, rows=rows, fire_life=fire_life, particles_placed=particles_placed)


def decode_sand(snapshot: SandSnapshot) -> SandGrid:
    if len(snapshot.rows) != snapshot.height:
        raise GridCodecError(f"expected {snapshot.height} rows, got {len(snapshot.rows)}")

    grid: SandGrid = []
    for y, line in enumerate(snapshot.rows):
        if len(line) != snapshot.width:
            raise GridCodecError(f"row {y}: expected {snapshot.width} cells, got {len(line)}")
        row: list[Particle] = []
        for x, ch in enumerate(line):
            kind = CHAR_PARTICLES.get(ch)
            if kind is None:
                raise GridCodecError(f"row {y}: unknown particle char {ch!r}")
            life = snapshot.fire_life.get(_fire_key(x, y), 0) if kind == ParticleType.fire else 0
            row.append(Particle(kind, life))
        grid.append(row)
    return grid


def _block_model(block: Block) -> BlockModel:
    return BlockModel(x=block.x, y=block.y, width=block.width, height=block.height, color=block.color)


def _block(model: BlockModel) -> Block:
    return Block(x=model.x, y=model.y, width=model.width, height=model.height, color=model.color)


def encode_stack(state: StackState) -> StackSnapshot:
    return StackSnapshot(
        blocks=[_block_model(b) for b in state.blocks],
        current_block=_block_model(state.current_block) if state.current_block is not None else None,
        direction=state.direction,
        speed=state.speed,
        game_over=state.game_over,
        score=state.score,
    )


def decode_stack(snapshot: StackSnapshot) -> StackState:
    return StackState(
        blocks=[_block(b) for b in snapshot.blocks],
        current_block=_block(snapshot.current_block) if snapshot.current_block is not None else None,
        direction=1 if snapshot.direction >= 0 else -1,
        speed=snapshot.speed,
        game_over=snapshot.game_over,
        score=snapshot.score,
    )


def encode_pixels(grid: PixelGrid, *, pixels_placed: int = 0) -> PixelSnapshot:
    width, _ = grid_size(grid)
    return PixelSnapshot(size=width, cells=[list(row) for row in grid], pixels_placed=pixels_placed)


def decode_pixels(snapshot: PixelSnapshot) -> PixelGrid:
    if len(snapshot.cells) != snapshot.size or any(len(row) != snapshot.size for row in snapshot.cells):
        raise GridCodecError(f"expected a {snapshot.size}x{snapshot.size} grid")
    return [list(row) for row in snapshot.cells]
