from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from neon_arcade.api.models import GameCategory
from neon_arcade.registry import get_enabled_games, get_game_by_slug, get_games_by_category, require_game_config


def test_lookup_is_case_insensitive() -> None:
    game = get_game_by_slug("  Stack ")
    assert game is not None
    assert game.slug == "stack"
    assert get_game_by_slug("pong") is None


def test_require_game_config_raises_for_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown game"):
        require_game_config("pong")


def test_category_filter() -> None:
    creative = {g.slug for g in get_games_by_category(GameCategory.creative)}
    assert creative == {"falling-sand", "community-grid"}
    assert len(get_enabled_games()) == 4


def test_games_api(client: TestClient) -> None:
    resp = client.get("/games")
    assert resp.status_code == 200
    assert {g["slug"] for g in resp.json()["games"]} == {"stack", "sudoku-lite", "falling-sand", "community-grid"}

    resp = client.get("/games", params={"category": "puzzle"})
    assert [g["slug"] for g in resp.json()["games"]] == ["sudoku-lite"]

    resp = client.get("/games/sudoku-lite")
    assert resp.status_code == 200
    assert resp.json()["score_type"] == "time"
    assert resp.json()["rendering_mode"] == "dom"

    assert client.get("/games/pong").status_code == 404


def test_game_achievements_api(client: TestClient) -> None:
    resp = client.get("/games/stack/achievements")
    assert resp.status_code == 200
    assert [a["slug"] for a in resp.json()["achievements"]] == ["stack-10", "stack-25"]

    assert client.get("/games/pong/achievements").status_code == 404


def test_healthcheck_and_info(client: TestClient) -> None:
    assert client.get("/healthcheck").json() == {"status": "ok"}
    assert client.get("/info").json()["name"] == "neon-arcade"
