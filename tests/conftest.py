from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import fakeredis
import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (PyCharm/CLI).

    In CI, we *don't* auto-load `.env` by default so a developer's local settings
    (log level, tick budget) can't change test behaviour.
    Opt-in with: NEON_ARCADE_LOAD_DOTENV_FOR_TESTS=1
    """

    if os.environ.get("CI") and os.environ.get("NEON_ARCADE_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture()
def redis_client() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def client_and_redis(redis_client: fakeredis.FakeRedis) -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient wired to a fakeredis instance through dependency overrides."""

    from neon_arcade.api.deps import get_redis
    from neon_arcade.main import app

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield redis_client

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, redis_client
    app.dependency_overrides.clear()


@pytest.fixture()
def client(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> TestClient:
    return client_and_redis[0]
