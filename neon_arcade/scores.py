from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import redis

from neon_arcade.achievements import achievements_for_score
from neon_arcade.api.models import (
    LeaderboardEntry,
    LeaderboardPeriod,
    ScoreEntry,
    ScoreSubmitRequest,
    ScoreSubmitResponse,
    ScoreType,
)
from neon_arcade.registry import require_game_config
from neon_arcade.streams import publish_activity

logger = logging.getLogger(__name__)

SCORES_KEY_PREFIX = "arcade:scores:"  # + {game_slug}, sorted set of entry ids
SCORE_ENTRY_KEY_PREFIX = "arcade:score:"  # + {entry_id}
MAX_LEADERBOARD_LIMIT = 100


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _scores_key(game_slug: str) -> str:
    return f"{SCORES_KEY_PREFIX}{game_slug}"


def _entry_key(entry_id: str) -> str:
    return f"{SCORE_ENTRY_KEY_PREFIX}{entry_id}"


def submit_score(*, r: redis.Redis, request: ScoreSubmitRequest, now: datetime | None = None) -> ScoreSubmitResponse:
    game = require_game_config(request.game_slug)

    entry = ScoreEntry(
        entry_id=uuid4().hex,
        game_slug=game.slug,
        player_name=request.player_name,
        score=request.score,
        metadata=request.metadata,
        created_at=now or _now(),
    )

    r.set(_entry_key(entry.entry_id), entry.model_dump_json())
    r.zadd(_scores_key(game.slug), {entry.entry_id: float(entry.score)})

    earned = achievements_for_score(game_slug=game.slug, score=float(entry.score))

    publish_activity(
        r=r,
        fields={
            "type": "score_submitted",
            "game_slug": game.slug,
            "player_name": entry.player_name,
            "score": str(entry.score),
            "ts": entry.created_at.isoformat(),
        },
    )
    logger.info("score %s for %s by %s", entry.score, game.slug, entry.player_name)

    return ScoreSubmitResponse(score=entry, achievements=[a.slug for a in earned])


def _period_start(period: LeaderboardPeriod, now: datetime) -> datetime | None:
    if period == LeaderboardPeriod.daily:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == LeaderboardPeriod.weekly:
        return now - timedelta(days=7)
    return None


def get_leaderboard(
    *,
    r: redis.Redis,
    game_slug: str,
    period: LeaderboardPeriod = LeaderboardPeriod.alltime,
    limit: int = 10,
    now: datetime | None = None,
) -> list[LeaderboardEntry]:
    """Best scores for a game, ranked.

    Time-scored games rank lowest first; everything else highest first.
    """

    game = require_game_config(game_slug)
    limit = max(1, min(limit, MAX_LEADERBOARD_LIMIT))
    since = _period_start(period, now or _now())

    ids = r.zrange(_scores_key(game.slug), 0, -1, desc=game.score_type != ScoreType.time)

    out: list[LeaderboardEntry] = []
    for entry_id in ids:
        raw = r.get(_entry_key(entry_id))
        if not raw:
            continue
        entry = ScoreEntry.model_validate_json(raw)
        if since is not None and entry.created_at < since:
            continue
        out.append(
            LeaderboardEntry(
                rank=len(out) + 1,
                username=entry.player_name or "Anonymous",
                score=entry.score,
                created_at=entry.created_at,
            )
        )
        if len(out) >= limit:
            break
    return out
