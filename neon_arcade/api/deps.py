from __future__ import annotations

from collections.abc import Generator

import redis

from neon_arcade.infra.redis_client import create_redis


def get_redis() -> Generator[redis.Redis, None, None]:
    """One Redis connection per request; tests swap this out via `dependency_overrides`."""

    client = create_redis()
    try:
        yield client
    finally:
        client.close()
