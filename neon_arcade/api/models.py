from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GameCategory(StrEnum):
    arcade = "arcade"
    puzzle = "puzzle"
    creative = "creative"
    chill = "chill"


class ScoreType(StrEnum):
    points = "points"
    time = "time"
    accuracy = "accuracy"
    combo = "combo"
    custom = "custom"


class RenderingMode(StrEnum):
    dom = "dom"
    canvas = "canvas"


class GameConfig(BaseModel):
    slug: str
    title: str
    description: str
    category: GameCategory
    score_type: ScoreType
    rendering_mode: RenderingMode
    # Neon accent colour for the game's card.
    color: str
    min_players: int = 1
    max_players: int = 1
    estimated_play_time: str
    difficulty: Literal["easy", "medium", "hard"]
    tags: list[str] = Field(default_factory=list)
    enabled: bool = True


class GameListResponse(BaseModel):
    games: list[GameConfig]


# --- Sessions ---


class SessionStatus(StrEnum):
    playing = "playing"
    game_over = "game_over"
    completed = "completed"


class BlockModel(BaseModel):
    x: float
    y: float
    width: float
    height: float
    color: str


class StackSnapshot(BaseModel):
    blocks: list[BlockModel]
    current_block: BlockModel | None = None
    direction: int = 1
    speed: float
    game_over: bool = False
    score: int = 0


class SudokuSnapshot(BaseModel):
    puzzle: list[int | None]
    solution: list[int]
    player_grid: list[int | None]
    fixed_cells: list[int]
    clues_removed: int
    is_complete: bool = False

    # Player-entered cells that currently clash with another cell (for highlighting).
    conflicts: list[int] = Field(default_factory=list)


class SandSnapshot(BaseModel):
    width: int
    height: int

    # One string per row, one character per cell (see grid_codec).
    rows: list[str]

    # Remaining life of each fire cell, keyed "x,y".
    fire_life: dict[str, float] = Field(default_factory=dict)

    # Total particles the player has placed this session.
    particles_placed: int = 0


class PixelSnapshot(BaseModel):
    size: int
    cells: list[list[str | None]]
    pixels_placed: int = 0


class GameSession(BaseModel):
    session_id: UUID
    game_slug: str
    created_at: datetime
    last_updated_at: datetime
    completed_at: datetime | None = None

    # For reproducibility/debugging; every action derives its RNG from seed + action_seq.
    seed: int
    action_seq: int = 0

    status: SessionStatus = SessionStatus.playing
    score: int = 0

    # Exactly one of these is set, matching game_slug.
    stack: StackSnapshot | None = None
    sudoku: SudokuSnapshot | None = None
    sand: SandSnapshot | None = None
    pixels: PixelSnapshot | None = None


class SessionOptions(BaseModel):
    # sudoku-lite; clamped to 0..16 by the generator.
    clues_to_remove: int = 8
    # falling-sand
    width: int = Field(200, ge=1, le=400)
    height: int = Field(150, ge=1, le=300)
    # community-grid
    size: int = Field(32, ge=1, le=128)


class SessionCreateRequest(BaseModel):
    game_slug: str = Field(..., min_length=1)
    options: SessionOptions = Field(default_factory=SessionOptions)


class SessionListResponse(BaseModel):
    sessions: list[GameSession]


# --- Action payloads ---


class TickRequest(BaseModel):
    steps: int = Field(1, ge=1)


class PlaceRequest(BaseModel):
    x: int
    y: int
    element: Literal["sand", "water", "fire", "wall", "eraser"]
    brush_size: int = Field(1, ge=1, le=3)


class SetCellRequest(BaseModel):
    pos: int = Field(..., ge=0, le=15)
    value: int | None = Field(None, ge=1, le=4)


class PaintRequest(BaseModel):
    x: int
    y: int
    color: str = Field(..., min_length=1, max_length=32)


class EraseRequest(BaseModel):
    x: int
    y: int


class ResetRequest(BaseModel):
    clues_to_remove: int | None = None


# --- Scores ---


class LeaderboardPeriod(StrEnum):
    daily = "daily"
    weekly = "weekly"
    alltime = "alltime"


class ScoreSubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    game_slug: str = Field(..., alias="gameSlug", min_length=1)
    score: int | float
    metadata: dict[str, Any] | None = None
    player_name: str = Field("Anonymous", alias="playerName", min_length=1, max_length=64)


class ScoreEntry(BaseModel):
    entry_id: str
    game_slug: str
    player_name: str
    score: int | float
    metadata: dict[str, Any] | None = None
    created_at: datetime


class ScoreSubmitResponse(BaseModel):
    score: ScoreEntry
    # Slugs of achievements whose criteria this score meets.
    achievements: list[str] = Field(default_factory=list)


class LeaderboardEntry(BaseModel):
    rank: int
    username: str
    score: int | float
    created_at: datetime


class LeaderboardResponse(BaseModel):
    game_slug: str
    period: LeaderboardPeriod
    scores: list[LeaderboardEntry]
