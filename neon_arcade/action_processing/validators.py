from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from neon_arcade.api.models import GameSession, TickRequest
from neon_arcade.registry import COMMUNITY_GRID, FALLING_SAND, STACK, SUDOKU_LITE

ACTIONS_BY_GAME: dict[str, frozenset[str]] = {
    STACK: frozenset({"tick", "drop", "reset"}),
    SUDOKU_LITE: frozenset({"set_cell", "reset"}),
    FALLING_SAND: frozenset({"place", "tick", "clear"}),
    COMMUNITY_GRID: frozenset({"paint", "erase", "fill", "clear"}),
}


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    session_id: str
    action: str
    payload: dict[str, Any] = field(default_factory=dict)


class ActionValidator(ABC):
    """A small, composable validation unit for an incoming action."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, session: GameSession) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class GameActionValidator(ActionValidator):
    """The action must be one the session's game understands."""

    allowed_actions: frozenset[str]

    def validate(self, *, ctx: ValidationContext, session: GameSession) -> None:
        if ctx.action not in self.allowed_actions:
            allowed = ",".join(sorted(self.allowed_actions))
            raise ValueError(f"Action '{ctx.action}' not allowed for game '{session.game_slug}' (allowed: {allowed})")


@dataclass(frozen=True, slots=True)
class TickBudgetValidator(ActionValidator):
    """Cap how much simulation work one tick request may run.

    `max_steps` bounds the step count for every game. On falling-sand sessions the
    steps times the grid area must also stay within `max_cells`, so large grids get
    proportionally fewer steps per request.
    """

    max_steps: int
    max_cells: int | None = None

    def validate(self, *, ctx: ValidationContext, session: GameSession) -> None:
        if ctx.action != "tick":
            return
        # Same coercion the handlers apply, so "700" and 700.0 are capped like 700.
        steps = TickRequest.model_validate(ctx.payload).steps
        if steps > self.max_steps:
            raise ValueError(f"steps must be at most {self.max_steps}")

        if self.max_cells is None or session.sand is None:
            return
        area = session.sand.width * session.sand.height
        if steps * area > self.max_cells:
            allowed = self.max_cells // area
            raise ValueError(
                f"steps must be at most {allowed} for a {session.sand.width}x{session.sand.height} grid"
            )


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[ActionValidator, ...]

    def validate(self, *, ctx: ValidationContext, session: GameSession) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, session=session)


def pipeline_for_game(game_slug: str, *, max_tick_steps: int, max_tick_cells: int | None = None) -> ValidatorPipeline:
    actions = ACTIONS_BY_GAME.get(game_slug)
    if actions is None:
        raise ValueError(f"Unknown game: {game_slug}")
    return ValidatorPipeline(
        validators=(
            GameActionValidator(allowed_actions=actions),
            TickBudgetValidator(max_steps=max_tick_steps, max_cells=max_tick_cells),
        )
    )
