"""Redis-backed storage for builder and fill-up sessions.

A session is the editable state of one open builder or form: it is loaded,
mutated by a single operation and written back, with a sliding TTL.

Usage:
    from src.forms.sessions import session_store

    builder = await session_store.load_builder(session_id)
    builder.add_field("basicInformation")
    await session_store.save_builder(session_id, builder)
"""

from __future__ import annotations

import logging
import uuid

from pydantic import ValidationError as SnapshotError
from redis.exceptions import RedisError

from src.config import settings
from src.db.engine import redis_client
from src.forms.builder import BuilderSnapshot, FormBuilder
from src.forms.errors import FetchError, NotFoundError, WriteError
from src.forms.renderer import FormRenderer, RendererSnapshot

logger = logging.getLogger(__name__)


class SessionStore:
    """Builder/renderer snapshots as JSON strings under `form:{kind}:{id}`."""

    def __init__(self, redis: object, ttl_seconds: int) -> None:
        self._redis = redis
        self._ttl = ttl_seconds

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def _key(kind: str, session_id: str) -> str:
        return f"form:{kind}:{session_id}"

    async def _load(self, kind: str, session_id: str) -> str:
        try:
            raw = await self._redis.get(self._key(kind, session_id))
        except RedisError as exc:
            logger.exception("Failed to read %s session %s", kind, session_id)
            raise FetchError("Session storage unavailable") from exc
        if raw is None:
            raise NotFoundError(f"{kind.capitalize()} session {session_id} not found or expired")
        return raw

    async def _save(self, kind: str, session_id: str, payload: str) -> None:
        try:
            await self._redis.set(self._key(kind, session_id), payload, ex=self._ttl)
        except RedisError as exc:
            logger.exception("Failed to write %s session %s", kind, session_id)
            raise WriteError("Session storage unavailable") from exc

    # ── Builder ────────────────────────────────────────────────────

    async def load_builder(self, session_id: str) -> FormBuilder:
        raw = await self._load("builder", session_id)
        try:
            return FormBuilder.from_snapshot(BuilderSnapshot.model_validate_json(raw))
        except SnapshotError as exc:
            logger.exception("Corrupt builder session %s", session_id)
            raise FetchError("Builder session is unreadable") from exc

    async def save_builder(self, session_id: str, builder: FormBuilder) -> None:
        await self._save("builder", session_id, builder.to_snapshot().model_dump_json())

    # ── Renderer ───────────────────────────────────────────────────

    async def load_renderer(self, session_id: str) -> FormRenderer:
        raw = await self._load("fill", session_id)
        try:
            return FormRenderer(RendererSnapshot.model_validate_json(raw))
        except SnapshotError as exc:
            logger.exception("Corrupt fill-up session %s", session_id)
            raise FetchError("Form session is unreadable") from exc

    async def save_renderer(self, session_id: str, renderer: FormRenderer) -> None:
        await self._save("fill", session_id, renderer.to_snapshot().model_dump_json())

    async def discard(self, kind: str, session_id: str) -> None:
        try:
            await self._redis.delete(self._key(kind, session_id))
        except RedisError as exc:
            logger.exception("Failed to discard %s session %s", kind, session_id)
            raise WriteError("Session storage unavailable") from exc


# Module-level singleton
session_store = SessionStore(redis_client, settings.forms.session_ttl_seconds)
