from __future__ import annotations

from typing import Mapping, cast

import redis

ACTIVITY_STREAM_KEY = "arcade:activity"
# Approximate cap on retained activity entries.
ACTIVITY_MAXLEN = 1_000


def publish_activity(*, r: redis.Redis, fields: Mapping[str, str]) -> str:
    """Append an entry to the shared activity feed stream."""

    # redis-py stubs expect field/value unions; in our app we only use string fields/values.
    stream_id = r.xadd(
        ACTIVITY_STREAM_KEY,
        {str(k): str(v) for k, v in fields.items()},
        maxlen=ACTIVITY_MAXLEN,
        approximate=True,
    )
    return cast(str, stream_id)


def recent_activity(*, r: redis.Redis, count: int = 20) -> list[dict[str, object]]:
    """Newest-first activity entries."""

    entries = r.xrevrange(ACTIVITY_STREAM_KEY, max="+", min="-", count=count)
    return [{"id": mid, "fields": fields} for mid, fields in entries]
