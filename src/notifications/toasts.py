"""Per-operator notification feed in Redis.

The dashboard polls `recent_toasts()` to show the outcome of each action
(success or failure) to the operator who triggered it. The feed is a
capped list under `toasts:{operator}` that expires with the form sessions.
"""

from __future__ import annotations

import logging

from redis.exceptions import RedisError

from src.config import settings
from src.db.engine import redis_client
from src.forms.errors import FetchError
from src.schemas.events import SystemEvent, Toast

logger = logging.getLogger(__name__)


def _key(operator: str) -> str:
    return f"toasts:{operator}"


async def remember_toast(event: SystemEvent) -> None:
    """Subscriber: push an event's message onto its actor's feed. Never raises."""
    if not event.message or not event.actor_id:
        return
    key = _key(event.actor_id)
    try:
        await redis_client.lpush(key, Toast.from_event(event).model_dump_json(by_alias=True))
        await redis_client.ltrim(key, 0, settings.forms.toast_limit - 1)
        await redis_client.expire(key, settings.forms.session_ttl_seconds)
    except RedisError:
        logger.exception("Failed to store notification for %s: %s", event.actor_id, event.message)


async def recent_toasts(operator: str, limit: int | None = None) -> list[Toast]:
    """Newest first."""
    count = min(limit or settings.forms.toast_limit, settings.forms.toast_limit)
    try:
        raw = await redis_client.lrange(_key(operator), 0, count - 1)
    except RedisError as exc:
        logger.exception("Failed to read notifications for %s", operator)
        raise FetchError("Notifications unavailable") from exc
    return [Toast.model_validate_json(item) for item in raw]
