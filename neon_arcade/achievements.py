from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

CriteriaType = Literal["score", "time_under"]


@dataclass(frozen=True, slots=True)
class AchievementDef:
    slug: str
    title: str
    description: str
    icon: str
    game_slug: str
    criteria_type: CriteriaType
    value: float

    def is_met_by(self, score: float) -> bool:
        if self.criteria_type == "score":
            return score >= self.value
        # time_under: a solve time, lower is better; 0 means "not timed".
        return 0 < score < self.value


ACHIEVEMENTS: tuple[AchievementDef, ...] = (
    AchievementDef("stack-10", "Tower Builder", "Stack 10 blocks", "🧱", "stack", "score", 10),
    AchievementDef("stack-25", "Skyscraper", "Stack 25 blocks", "🏗️", "stack", "score", 25),
    AchievementDef("sudoku-fast", "Speed Solver", "Complete Sudoku in under 60 seconds", "⚡", "sudoku-lite", "time_under", 60),
    AchievementDef("sand-500", "Sandbox Architect", "Place 500 particles in one session", "⏳", "falling-sand", "score", 500),
    AchievementDef("grid-256", "Muralist", "Paint 256 pixels in one session", "🎨", "community-grid", "score", 256),
)


def get_achievement_by_slug(slug: str) -> AchievementDef | None:
    return next((a for a in ACHIEVEMENTS if a.slug == slug), None)


def get_game_achievements(game_slug: str) -> list[AchievementDef]:
    return [a for a in ACHIEVEMENTS if a.game_slug == game_slug]


def achievements_for_score(*, game_slug: str, score: float) -> list[AchievementDef]:
    """Achievements of this game whose criteria a single submitted score meets."""

    return [a for a in get_game_achievements(game_slug) if a.is_met_by(score)]
