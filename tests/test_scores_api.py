from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
from fastapi.testclient import TestClient

from neon_arcade.achievements import achievements_for_score, get_achievement_by_slug
from neon_arcade.api.models import LeaderboardPeriod, ScoreSubmitRequest
from neon_arcade.scores import get_leaderboard, submit_score


def _submit(client: TestClient, game_slug: str, score: float, player: str = "ada") -> dict:
    resp = client.post("/scores", json={"gameSlug": game_slug, "score": score, "playerName": player})
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_submit_score_reports_achievements(client: TestClient) -> None:
    body = _submit(client, "stack", 12)

    assert body["score"]["game_slug"] == "stack"
    assert body["score"]["player_name"] == "ada"
    assert body["achievements"] == ["stack-10"]

    assert _submit(client, "stack", 3)["achievements"] == []


def test_submit_score_defaults_player_name(client: TestClient) -> None:
    resp = client.post("/scores", json={"gameSlug": "stack", "score": 1})
    assert resp.status_code == 201
    assert resp.json()["score"]["player_name"] == "Anonymous"


def test_submit_score_for_unknown_game(client: TestClient) -> None:
    resp = client.post("/scores", json={"gameSlug": "pong", "score": 1})
    assert resp.status_code == 422


def test_leaderboard_ranks_points_descending(client: TestClient) -> None:
    _submit(client, "stack", 5, "a")
    _submit(client, "stack", 20, "b")
    _submit(client, "stack", 11, "c")

    resp = client.get("/scores", params={"gameSlug": "stack"})
    assert resp.status_code == 200
    scores = resp.json()["scores"]
    assert [(s["rank"], s["username"], s["score"]) for s in scores] == [(1, "b", 20), (2, "c", 11), (3, "a", 5)]

    resp = client.get("/scores", params={"gameSlug": "stack", "limit": 2})
    assert len(resp.json()["scores"]) == 2


def test_leaderboard_ranks_solve_times_ascending(client: TestClient) -> None:
    _submit(client, "sudoku-lite", 95, "slow")
    _submit(client, "sudoku-lite", 42, "fast")

    scores = client.get("/scores", params={"gameSlug": "sudoku-lite"}).json()["scores"]
    assert [s["username"] for s in scores] == ["fast", "slow"]


def test_leaderboard_requires_known_game(client: TestClient) -> None:
    assert client.get("/scores").status_code == 422
    assert client.get("/scores", params={"gameSlug": "pong"}).status_code == 422


def test_leaderboard_periods(redis_client: fakeredis.FakeRedis) -> None:
    now = datetime(2026, 3, 11, 15, 0, tzinfo=UTC)

    def submit(player: str, score: int, at: datetime) -> None:
        req = ScoreSubmitRequest(game_slug="stack", score=score, player_name=player)
        submit_score(r=redis_client, request=req, now=at)

    submit("today", 3, now - timedelta(hours=2))
    submit("this-week", 7, now - timedelta(days=3))
    submit("old", 9, now - timedelta(days=30))

    def names(period: LeaderboardPeriod) -> list[str]:
        return [e.username for e in get_leaderboard(r=redis_client, game_slug="stack", period=period, now=now)]

    assert names(LeaderboardPeriod.daily) == ["today"]
    assert names(LeaderboardPeriod.weekly) == ["this-week", "today"]
    assert names(LeaderboardPeriod.alltime) == ["old", "this-week", "today"]


def test_leaderboard_limit_is_clamped(redis_client: fakeredis.FakeRedis) -> None:
    for i in range(3):
        submit_score(r=redis_client, request=ScoreSubmitRequest(game_slug="stack", score=i))

    assert len(get_leaderboard(r=redis_client, game_slug="stack", limit=0)) == 1
    assert len(get_leaderboard(r=redis_client, game_slug="stack", limit=1000)) == 3


@pytest.mark.parametrize(
    ("game_slug", "score", "expected"),
    [
        ("stack", 25, ["stack-10", "stack-25"]),
        ("sudoku-lite", 59, ["sudoku-fast"]),
        ("sudoku-lite", 60, []),
        ("sudoku-lite", 0, []),
        ("falling-sand", 500, ["sand-500"]),
        ("community-grid", 255, []),
    ],
)
def test_achievement_criteria(game_slug: str, score: float, expected: list[str]) -> None:
    assert [a.slug for a in achievements_for_score(game_slug=game_slug, score=score)] == expected


def test_achievement_lookup() -> None:
    found = get_achievement_by_slug("grid-256")
    assert found is not None
    assert found.game_slug == "community-grid"
    assert get_achievement_by_slug("nope") is None


def test_activity_feed_lists_newest_first(client: TestClient) -> None:
    _submit(client, "stack", 1, "first")
    _submit(client, "stack", 2, "second")

    resp = client.get("/activity", params={"count": 5})
    assert resp.status_code == 200
    entries = resp.json()["entries"]
    assert [e["fields"]["player_name"] for e in entries] == ["second", "first"]
    assert entries[0]["fields"]["type"] == "score_submitted"

    assert client.get("/activity", params={"count": 0}).status_code == 422
    assert client.get("/activity", params={"count": 201}).status_code == 422
