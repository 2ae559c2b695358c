from __future__ import annotations

from neon_arcade.api.models import GameCategory, GameConfig, RenderingMode, ScoreType

STACK = "stack"
SUDOKU_LITE = "sudoku-lite"
FALLING_SAND = "falling-sand"
COMMUNITY_GRID = "community-grid"


GAME_REGISTRY: tuple[GameConfig, ...] = (
    GameConfig(
        slug=FALLING_SAND,
        title="Falling Sand",
        description="A digital sandbox. Drop sand, water, and fire particles and watch them interact.",
        category=GameCategory.creative,
        score_type=ScoreType.custom,
        rendering_mode=RenderingMode.canvas,
        color="#ffe600",
        estimated_play_time="5+ min",
        difficulty="easy",
        tags=["sandbox", "physics", "creative"],
    ),
    GameConfig(
        slug=STACK,
        title="Stack",
        description="Stack blocks as high as you can. Time your drops perfectly: each miss shrinks the platform.",
        category=GameCategory.arcade,
        score_type=ScoreType.points,
        rendering_mode=RenderingMode.canvas,
        color="#39ff14",
        estimated_play_time="2-5 min",
        difficulty="medium",
        tags=["timing", "precision", "arcade"],
    ),
    GameConfig(
        slug=SUDOKU_LITE,
        title="Sudoku Lite",
        description="A simplified 4x4 Sudoku. Fill the grid so each row, column, and box has 1-4. Race the clock!",
        category=GameCategory.puzzle,
        score_type=ScoreType.time,
        rendering_mode=RenderingMode.dom,
        color="#b026ff",
        estimated_play_time="3-10 min",
        difficulty="medium",
        tags=["logic", "numbers", "puzzle"],
    ),
    GameConfig(
        slug=COMMUNITY_GRID,
        title="Community Grid",
        description="A shared pixel art canvas. Place colored pixels on a 32x32 grid to create art.",
        category=GameCategory.creative,
        score_type=ScoreType.custom,
        rendering_mode=RenderingMode.canvas,
        color="#00fff5",
        estimated_play_time="5+ min",
        difficulty="easy",
        tags=["pixel-art", "creative", "sandbox", "art"],
    ),
)

_BY_SLUG: dict[str, GameConfig] = {g.slug: g for g in GAME_REGISTRY}


def get_game_by_slug(slug: str) -> GameConfig | None:
    return _BY_SLUG.get(slug.strip().casefold())


def require_game_config(slug: str) -> GameConfig:
    game = get_game_by_slug(slug)
    if game is None:
        raise ValueError(f"Unknown game: {slug}")
    return game


def get_enabled_games() -> list[GameConfig]:
    return [g for g in GAME_REGISTRY if g.enabled]


def get_games_by_category(category: GameCategory | str) -> list[GameConfig]:
    cat = GameCategory(category)
    return [g for g in GAME_REGISTRY if g.category == cat]
