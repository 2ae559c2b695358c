from __future__ import annotations

import asyncio
from dataclasses import asdict
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
import redis

from neon_arcade.achievements import get_game_achievements
from neon_arcade.actions import dispatch_action
from neon_arcade.api.deps import get_redis
from neon_arcade.api.models import (
    GameCategory,
    GameConfig,
    GameListResponse,
    GameSession,
    LeaderboardPeriod,
    LeaderboardResponse,
    ScoreSubmitRequest,
    ScoreSubmitResponse,
    SessionCreateRequest,
    SessionListResponse,
)
from neon_arcade.lock import SessionBusyError
from neon_arcade.registry import get_enabled_games, get_game_by_slug, get_games_by_category
from neon_arcade.scores import get_leaderboard, submit_score
from neon_arcade.session_store import create_session, get_session, list_sessions
from neon_arcade.streams import recent_activity
from neon_arcade.websocket_hub import hub

router = APIRouter()


@router.websocket("/ws/session/{session_id}")
async def session_updates_ws(websocket: WebSocket, session_id: UUID) -> None:
    sid = str(session_id)
    await hub.connect(sid, websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(sid, websocket)
    except Exception:
        await hub.disconnect(sid, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/games", response_model=GameListResponse)
async def list_games_route(category: GameCategory | None = None) -> GameListResponse:
    games = get_games_by_category(category) if category is not None else get_enabled_games()
    return GameListResponse(games=games)


@router.get("/games/{slug}", response_model=GameConfig)
async def get_game_route(slug: str) -> GameConfig:
    game = get_game_by_slug(slug)
    if game is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
    return game


@router.get("/games/{slug}/achievements")
async def game_achievements_route(slug: str) -> dict[str, object]:
    game = get_game_by_slug(slug)
    if game is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
    return {"game_slug": game.slug, "achievements": [asdict(a) for a in get_game_achievements(game.slug)]}


@router.post("/sessions", response_model=GameSession, status_code=status.HTTP_201_CREATED)
async def create_session_route(payload: SessionCreateRequest, r: redis.Redis = Depends(get_redis)) -> GameSession:
    try:
        session = create_session(r=r, game_slug=payload.game_slug, options=payload.options)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return session


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions_route(game_slug: str | None = None, r: redis.Redis = Depends(get_redis)) -> SessionListResponse:
    return SessionListResponse(sessions=list_sessions(r=r, game_slug=game_slug))


@router.get("/sessions/{session_id}", response_model=GameSession)
async def get_session_route(session_id: UUID, r: redis.Redis = Depends(get_redis)) -> GameSession:
    session = get_session(r=r, session_id=session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session


@router.post("/sessions/{session_id}/actions/{action}", response_model=GameSession)
async def session_action_route(
    session_id: UUID,
    action: str,
    body: dict[str, Any] | None = Body(default=None),
    r: redis.Redis = Depends(get_redis),
) -> GameSession:
    if get_session(r=r, session_id=session_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")

    try:
        # Engine work is CPU-bound; keep it off the event loop serving WebSockets.
        result = await asyncio.to_thread(dispatch_action, r=r, session_id=session_id, action=action, payload=body or {})
    except SessionBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    await hub.broadcast(
        str(session_id),
        {"type": "session_updated", "session_id": str(session_id), "score_delta": result.score_delta},
    )
    return result.session


@router.post("/scores", response_model=ScoreSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_score_route(payload: ScoreSubmitRequest, r: redis.Redis = Depends(get_redis)) -> ScoreSubmitResponse:
    try:
        return submit_score(r=r, request=payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.get("/scores", response_model=LeaderboardResponse)
async def leaderboard_route(
    game_slug: str = Query(..., alias="gameSlug", min_length=1),
    period: LeaderboardPeriod = LeaderboardPeriod.alltime,
    limit: int = 10,
    r: redis.Redis = Depends(get_redis),
) -> LeaderboardResponse:
    try:
        entries = get_leaderboard(r=r, game_slug=game_slug, period=period, limit=limit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return LeaderboardResponse(game_slug=game_slug, period=period, scores=entries)


@router.get("/activity")
async def activity_route(count: int = 20, r: redis.Redis = Depends(get_redis)) -> dict[str, object]:
    if count < 1 or count > 200:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="count must be between 1 and 200")
    return {"entries": recent_activity(r=r, count=count)}
