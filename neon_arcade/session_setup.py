from __future__ import annotations

import random
from collections.abc import Sequence
from datetime import datetime

from neon_arcade.api.models import GameSession, SessionOptions, SudokuSnapshot
from neon_arcade.engines import falling_sand, pixel_grid, stack, sudoku
from neon_arcade.fsm import SessionFSM
from neon_arcade.grid_codec import encode_pixels, encode_sand, encode_stack
from neon_arcade.registry import COMMUNITY_GRID, FALLING_SAND, STACK, SUDOKU_LITE


def session_rng(session: GameSession) -> random.Random:
    """RNG for the session's next action.

    Derived from the seed and action counter so a session replays identically.
    """

    return random.Random(session.seed * 1_000_003 + session.action_seq)


def sudoku_conflict_cells(grid: Sequence[int | None], fixed: frozenset[int]) -> list[int]:
    """Cells involved in a clash with a player-entered value."""

    out: set[int] = set()
    for pos, value in enumerate(grid):
        if value is None or pos in fixed:
            continue
        clashes = sudoku.get_conflicts(grid, pos, value)
        if clashes:
            out.add(pos)
            out.update(clashes)
    return sorted(out)


def new_sudoku_snapshot(*, clues_to_remove: int, rng: random.Random) -> SudokuSnapshot:
    generated = sudoku.generate_puzzle(clues_to_remove, rng=rng)
    fixed = sudoku.fixed_cells(generated.puzzle)
    return SudokuSnapshot(
        puzzle=generated.puzzle,
        solution=generated.solution,
        player_grid=list(generated.puzzle),
        fixed_cells=sorted(fixed),
        clues_removed=sum(1 for v in generated.puzzle if v is None),
        is_complete=sudoku.check_solution(generated.puzzle),
    )


def apply_initial_state(*, session: GameSession, options: SessionOptions, rng: random.Random) -> None:
    """Attach a fresh engine state for the session's game."""

    slug = session.game_slug
    if slug == STACK:
        session.stack = encode_stack(stack.create_initial_state())
    elif slug == SUDOKU_LITE:
        session.sudoku = new_sudoku_snapshot(clues_to_remove=options.clues_to_remove, rng=rng)
    elif slug == FALLING_SAND:
        session.sand = encode_sand(falling_sand.create_grid(options.width, options.height))
    elif slug == COMMUNITY_GRID:
        session.pixels = encode_pixels(pixel_grid.create_grid(options.size))
    else:
        raise ValueError(f"Unknown game: {slug}")


def mark_sudoku_completed(*, session: GameSession, fsm: SessionFSM, now: datetime) -> None:
    """Finish a solved sudoku session; the score is the solve time in seconds."""

    if fsm.is_terminal:
        return
    fsm.complete()
    session.completed_at = now
    session.score = max(0, round((now - session.created_at).total_seconds()))
