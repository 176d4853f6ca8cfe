"""Tests for the notification bus, the audit subscriber and the toast feed."""

from __future__ import annotations

import asyncio
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.forms.errors import FetchError
from src.notifications.audit import audit_on_event
from src.notifications.events import NotificationBus
from src.notifications.toasts import recent_toasts, remember_toast
from src.schemas.events import EventType, NotificationLevel, SystemEvent, Toast


def _make_event(**kwargs) -> SystemEvent:
    defaults = {"event_type": EventType.RECORD_SUBMITTED, "source_module": "test"}
    defaults.update(kwargs)
    return SystemEvent(**defaults)


# ── Bus ──────────────────────────────────────────────────────────────


class TestNotificationBus:
    @pytest.mark.asyncio
    async def test_inline_delivery_before_start(self):
        bus = NotificationBus()
        seen: list[SystemEvent] = []

        async def collect(event: SystemEvent) -> None:
            seen.append(event)

        bus.subscribe(collect)
        event = _make_event()
        await bus.emit(event)

        assert seen == [event]
        assert not bus.running

    @pytest.mark.asyncio
    async def test_queued_events_delivered_by_stop(self):
        bus = NotificationBus()
        seen: list[EventType] = []

        async def collect(event: SystemEvent) -> None:
            await asyncio.sleep(0)
            seen.append(event.event_type)

        bus.subscribe(collect)
        await bus.start()
        assert bus.running
        await bus.emit(_make_event(event_type=EventType.TEMPLATE_CREATED))
        await bus.emit(_make_event(event_type=EventType.RECORD_DELETED))
        await bus.stop()

        assert seen == [EventType.TEMPLATE_CREATED, EventType.RECORD_DELETED]
        assert not bus.running

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_block_others(self):
        bus = NotificationBus()
        received: list[SystemEvent] = []

        async def broken(event: SystemEvent) -> None:
            raise RuntimeError("boom")

        async def working(event: SystemEvent) -> None:
            received.append(event)

        bus.subscribe(broken)
        bus.subscribe(working)
        event = _make_event()
        await bus.deliver(event)

        assert received == [event]


# ── Audit subscriber ─────────────────────────────────────────────────


class TestAuditSubscriber:
    @pytest.mark.asyncio
    async def test_event_written_with_its_message(self):
        record_id = uuid.uuid4()
        event = _make_event(
            event_type=EventType.RECORD_DELETED,
            entity_id=record_id,
            data={"template_id": "t-1"},
            actor_id="tech1",
            actor_role="operator",
            message="Record deleted successfully!",
            level=NotificationLevel.SUCCESS,
        )

        with patch("src.notifications.audit.async_session_factory") as mock_factory:
            mock_session = AsyncMock()
            mock_factory.return_value.__aenter__ = AsyncMock(return_value=mock_session)
            mock_factory.return_value.__aexit__ = AsyncMock(return_value=False)

            await audit_on_event(event)

        mock_session.add.assert_called_once()
        added = mock_session.add.call_args.args[0]
        assert added.event_type == "record.deleted"
        assert added.entity_id == record_id
        assert added.actor_id == "tech1"
        assert added.data == {"template_id": "t-1", "message": "Record deleted successfully!"}
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_db_failure_logged_not_raised(self):
        event = _make_event(event_type=EventType.SYSTEM_STARTUP)

        with patch("src.notifications.audit.async_session_factory") as mock_factory:
            mock_factory.return_value.__aenter__ = AsyncMock(side_effect=Exception("DB connection lost"))
            mock_factory.return_value.__aexit__ = AsyncMock(return_value=False)

            await audit_on_event(event)


# ── Toast feed ───────────────────────────────────────────────────────


class TestToastFeed:
    @pytest.mark.asyncio
    async def test_message_pushed_to_actor_feed(self):
        event = _make_event(
            event_type=EventType.SUBMISSION_FAILED,
            actor_id="tech1",
            message="Failed to submit form",
            level=NotificationLevel.ERROR,
        )

        with patch("src.notifications.toasts.redis_client") as mock_redis:
            mock_redis.lpush = AsyncMock()
            mock_redis.ltrim = AsyncMock()
            mock_redis.expire = AsyncMock()
            await remember_toast(event)

        key, payload = mock_redis.lpush.call_args.args
        assert key == "toasts:tech1"
        toast = Toast.model_validate_json(payload)
        assert toast.level == NotificationLevel.ERROR
        assert toast.message == "Failed to submit form"
        mock_redis.ltrim.assert_awaited_once_with("toasts:tech1", 0, 19)

    @pytest.mark.asyncio
    async def test_background_events_are_not_toasts(self):
        with patch("src.notifications.toasts.redis_client") as mock_redis:
            mock_redis.lpush = AsyncMock()
            await remember_toast(_make_event(event_type=EventType.OPERATOR_ACCESS, actor_id="tech1"))
            await remember_toast(_make_event(event_type=EventType.SYSTEM_STARTUP, message="up"))

        mock_redis.lpush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redis_failure_logged_not_raised(self):
        event = _make_event(actor_id="tech1", message="Form submitted successfully!")
        with patch("src.notifications.toasts.redis_client") as mock_redis:
            mock_redis.lpush = AsyncMock(side_effect=RedisConnectionError("down"))
            await remember_toast(event)

    @pytest.mark.asyncio
    async def test_recent_toasts_newest_first(self):
        older = Toast.from_event(_make_event(actor_id="tech1", message="Form created successfully!"))
        newer = Toast.from_event(_make_event(actor_id="tech1", message="Form submitted successfully!"))

        with patch("src.notifications.toasts.redis_client") as mock_redis:
            mock_redis.lrange = AsyncMock(return_value=[
                newer.model_dump_json(by_alias=True),
                older.model_dump_json(by_alias=True),
            ])
            toasts = await recent_toasts("tech1", limit=5)

        assert [t.message for t in toasts] == ["Form submitted successfully!", "Form created successfully!"]
        mock_redis.lrange.assert_awaited_once_with("toasts:tech1", 0, 4)

    @pytest.mark.asyncio
    async def test_recent_toasts_unavailable(self):
        with patch("src.notifications.toasts.redis_client") as mock_redis:
            mock_redis.lrange = AsyncMock(side_effect=RedisConnectionError("down"))
            with pytest.raises(FetchError):
                await recent_toasts("tech1")
