from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import redis

from neon_arcade.action_processing.validators import ValidationContext, pipeline_for_game
from neon_arcade.api.models import (
    EraseRequest,
    GameSession,
    PaintRequest,
    PlaceRequest,
    ResetRequest,
    SetCellRequest,
    TickRequest,
)
from neon_arcade.engines import falling_sand, pixel_grid, stack, sudoku
from neon_arcade.fsm import SessionFSM
from neon_arcade.grid_codec import decode_pixels, decode_sand, decode_stack, encode_pixels, encode_sand, encode_stack
from neon_arcade.lock import session_lock
from neon_arcade.registry import COMMUNITY_GRID, FALLING_SAND, STACK, SUDOKU_LITE
from neon_arcade.session_setup import mark_sudoku_completed, new_sudoku_snapshot, session_rng, sudoku_conflict_cells
from neon_arcade.session_store import require_session, save_session
from neon_arcade.settings import settings_from_env

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionResult:
    session: GameSession
    # How much the session score moved with this action.
    score_delta: int


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _apply_stack(*, session: GameSession, fsm: SessionFSM, action: str, payload: dict[str, Any]) -> None:
    assert session.stack is not None
    state = decode_stack(session.stack)

    if action == "tick":
        req = TickRequest.model_validate(payload)
        for _ in range(req.steps):
            state = stack.update_moving_block(state)
    elif action == "drop":
        state = stack.drop_block(state)
        if state.game_over and not fsm.is_terminal:
            fsm.fail()
            logger.info("session %s: stack missed at score %d", session.session_id, state.score)
    elif action == "reset":
        state = stack.create_initial_state()
        fsm.restart()
    else:
        raise ValueError(f"Unknown action: {action}")

    session.stack = encode_stack(state)
    session.score = state.score


def _apply_sudoku(
    *,
    session: GameSession,
    fsm: SessionFSM,
    action: str,
    payload: dict[str, Any],
    rng: random.Random,
) -> None:
    assert session.sudoku is not None
    snap = session.sudoku

    if action == "set_cell":
        req = SetCellRequest.model_validate(payload)
        if snap.is_complete:
            return
        fixed = frozenset(snap.fixed_cells)
        grid = sudoku.set_cell(snap.player_grid, fixed, req.pos, req.value)
        snap.player_grid = grid
        snap.conflicts = sudoku_conflict_cells(grid, fixed)
        snap.is_complete = sudoku.check_solution(grid)
        if snap.is_complete:
            mark_sudoku_completed(session=session, fsm=fsm, now=_now())
    elif action == "reset":
        req_reset = ResetRequest.model_validate(payload)
        clues = req_reset.clues_to_remove if req_reset.clues_to_remove is not None else snap.clues_removed
        fsm.restart()
        session.completed_at = None
        session.score = 0
        session.sudoku = new_sudoku_snapshot(clues_to_remove=clues, rng=rng)
        if session.sudoku.is_complete:
            mark_sudoku_completed(session=session, fsm=fsm, now=_now())
    else:
        raise ValueError(f"Unknown action: {action}")


def _apply_sand(*, session: GameSession, action: str, payload: dict[str, Any], rng: random.Random) -> None:
    assert session.sand is not None
    grid = decode_sand(session.sand)
    placed_total = session.sand.particles_placed

    if action == "place":
        req = PlaceRequest.model_validate(payload)
        placed_total += falling_sand.place_particle(grid, req.x, req.y, req.element, req.brush_size, rng=rng)
    elif action == "tick":
        req_tick = TickRequest.model_validate(payload)
        for _ in range(req_tick.steps):
            falling_sand.update_grid(grid, rng=rng)
    elif action == "clear":
        grid = falling_sand.create_grid(session.sand.width, session.sand.height)
    else:
        raise ValueError(f"Unknown action: {action}")

    session.sand = encode_sand(grid, particles_placed=placed_total)
    session.score = placed_total


def _apply_pixels(*, session: GameSession, action: str, payload: dict[str, Any]) -> None:
    assert session.pixels is not None
    grid = decode_pixels(session.pixels)
    placed_total = session.pixels.pixels_placed

    if action == "paint":
        req = PaintRequest.model_validate(payload)
        placed_total += pixel_grid.place_pixel(grid, req.x, req.y, req.color)
    elif action == "fill":
        req = PaintRequest.model_validate(payload)
        placed_total += pixel_grid.flood_fill(grid, req.x, req.y, req.color)
    elif action == "erase":
        req_erase = EraseRequest.model_validate(payload)
        pixel_grid.erase_pixel(grid, req_erase.x, req_erase.y)
    elif action == "clear":
        pixel_grid.clear_grid(grid)
    else:
        raise ValueError(f"Unknown action: {action}")

    session.pixels = encode_pixels(grid, pixels_placed=placed_total)
    session.score = placed_total


def dispatch_action(*, r: redis.Redis, session_id: UUID, action: str, payload: dict[str, Any]) -> ActionResult:
    """Entry point for every session action.

    Applies an action by:
    - locking the session
    - running the validator pipeline for the session's game
    - feeding the decoded engine state through the engine transition
    - syncing the lifecycle FSM and persisting the new snapshot
    """

    settings = settings_from_env()

    with session_lock(r=r, session_id=str(session_id)):
        session = require_session(r=r, session_id=session_id)

        ctx = ValidationContext(session_id=str(session_id), action=action, payload=payload)
        try:
            pipeline = pipeline_for_game(
                session.game_slug,
                max_tick_steps=settings.max_tick_steps,
                max_tick_cells=settings.max_tick_cells,
            )
            pipeline.validate(ctx=ctx, session=session)
        except ValueError as e:
            logger.info("session %s: rejected action %s: %s", session_id, action, e)
            raise

        fsm = SessionFSM(session)
        rng = session_rng(session)
        score_before = session.score
        status_before = session.status

        slug = session.game_slug
        if slug == STACK:
            _apply_stack(session=session, fsm=fsm, action=action, payload=payload)
        elif slug == SUDOKU_LITE:
            _apply_sudoku(session=session, fsm=fsm, action=action, payload=payload, rng=rng)
        elif slug == FALLING_SAND:
            _apply_sand(session=session, action=action, payload=payload, rng=rng)
        elif slug == COMMUNITY_GRID:
            _apply_pixels(session=session, action=action, payload=payload)
        else:
            raise ValueError(f"Unknown game: {slug}")

        fsm.sync_status_to_model()
        session.action_seq += 1
        save_session(r=r, session=session)

        logger.debug(
            "session %s: %s applied (seq=%d status=%s score=%d)",
            session_id,
            action,
            session.action_seq,
            session.status.value,
            session.score,
        )
        if session.status != status_before and fsm.is_terminal:
            logger.info("session %s: finished with status=%s score=%d", session_id, session.status.value, session.score)

        return ActionResult(session=session, score_delta=session.score - score_before)
