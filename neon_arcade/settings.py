from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ArcadeSettings:
    redis_url: str
    log_level: str
    # 0 disables expiry of session keys.
    session_ttl_s: int
    # Upper bound for `steps` on tick actions.
    max_tick_steps: int
    # Upper bound for steps x grid area on falling-sand ticks.
    max_tick_cells: int


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from e


def settings_from_env() -> ArcadeSettings:
    return ArcadeSettings(
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        log_level=os.environ.get("NEON_ARCADE_LOG_LEVEL", "INFO").upper(),
        session_ttl_s=max(0, _int_from_env("NEON_ARCADE_SESSION_TTL_S", 86_400)),
        max_tick_steps=max(1, _int_from_env("NEON_ARCADE_MAX_TICK_STEPS", 600)),
        max_tick_cells=max(1, _int_from_env("NEON_ARCADE_MAX_TICK_CELLS", 3_000_000)),
    )
