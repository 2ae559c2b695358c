from __future__ import annotations

from contextlib import contextmanager
from uuid import uuid4

import redis


class SessionBusyError(ValueError):
    pass


def _lock_key(session_id: str) -> str:
    return f"lock:session:{session_id}"


def _release(*, r: redis.Redis, key: str, token: str) -> None:
    """Delete the lock only while it still holds our token."""

    with r.pipeline() as pipe:
        try:
            pipe.watch(key)
            if pipe.get(key) != token:
                # Expired and possibly taken by another request; leave it alone.
                return
            pipe.multi()
            pipe.delete(key)
            pipe.execute()
        except redis.WatchError:
            # The key changed under us, so it is no longer ours.
            return


@contextmanager
def session_lock(*, r: redis.Redis, session_id: str, ttl_ms: int = 5_000):
    """Per-session lock held for the duration of one action.

    Each holder writes a unique token, so a request whose lock expired cannot release a
    lock that another request has since acquired. Action work is bounded well under
    `ttl_ms` by the tick budget.
    """

    key = _lock_key(session_id)
    token = uuid4().hex
    acquired = r.set(key, token, nx=True, px=ttl_ms)
    if not acquired:
        raise SessionBusyError("Session is busy")
    try:
        yield
    finally:
        _release(r=r, key=key, token=token)
