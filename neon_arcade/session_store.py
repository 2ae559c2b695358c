from __future__ import annotations

import logging
import random
from datetime import UTC, datetime
from uuid import UUID, uuid4

import redis

from neon_arcade.api.models import GameSession, SessionOptions, SessionStatus
from neon_arcade.fsm import SessionFSM
from neon_arcade.registry import require_game_config
from neon_arcade.session_setup import apply_initial_state, mark_sudoku_completed
from neon_arcade.settings import settings_from_env

logger = logging.getLogger(__name__)

SESSIONS_SET_KEY = "arcade:sessions"
SESSION_KEY_PREFIX = "arcade:session:"  # + {uuid}


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _session_key(session_id: UUID) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


def _write(*, r: redis.Redis, session: GameSession) -> None:
    ttl = settings_from_env().session_ttl_s
    r.set(_session_key(session.session_id), session.model_dump_json(), ex=ttl or None)


def save_session(*, r: redis.Redis, session: GameSession) -> None:
    session.last_updated_at = _now()
    _write(r=r, session=session)


def get_session(*, r: redis.Redis, session_id: UUID) -> GameSession | None:
    raw = r.get(_session_key(session_id))
    if not raw:
        return None
    return GameSession.model_validate_json(raw)


def require_session(*, r: redis.Redis, session_id: UUID) -> GameSession:
    session = get_session(r=r, session_id=session_id)
    if session is None:
        raise ValueError("Session not found")
    return session


def create_session(*, r: redis.Redis, game_slug: str, options: SessionOptions | None = None) -> GameSession:
    game = require_game_config(game_slug)
    if not game.enabled:
        raise ValueError(f"Game is disabled: {game.slug}")

    now = _now()
    seed = random.SystemRandom().randint(1, 2**31 - 1)

    session = GameSession(
        session_id=uuid4(),
        game_slug=game.slug,
        created_at=now,
        last_updated_at=now,
        seed=seed,
        status=SessionStatus.playing,
    )
    apply_initial_state(session=session, options=options or SessionOptions(), rng=random.Random(seed))

    # A sudoku with nothing removed is solved from the start.
    if session.sudoku is not None and session.sudoku.is_complete:
        fsm = SessionFSM(session)
        mark_sudoku_completed(session=session, fsm=fsm, now=now)
        fsm.sync_status_to_model()

    _write(r=r, session=session)
    r.sadd(SESSIONS_SET_KEY, str(session.session_id))

    logger.info("created session %s game=%s seed=%d", session.session_id, session.game_slug, seed)
    return session


def list_sessions(*, r: redis.Redis, game_slug: str | None = None) -> list[GameSession]:
    ids = sorted(r.smembers(SESSIONS_SET_KEY))
    out: list[GameSession] = []
    for sid in ids:
        try:
            session_id = UUID(sid)
        except ValueError:
            continue
        session = get_session(r=r, session_id=session_id)
        if session is None:
            # Expired; drop the dangling index entry.
            r.srem(SESSIONS_SET_KEY, sid)
            continue
        if game_slug is not None and session.game_slug != game_slug:
            continue
        out.append(session)
    out.sort(key=lambda s: s.created_at, reverse=True)
    return out
