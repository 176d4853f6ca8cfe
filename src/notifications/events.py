"""Notification bus for the dashboard.

Each outcome an operator would see as a toast (form saved, record deleted,
submit failed, ...) is emitted as a SystemEvent carrying its message and
level. A single background task hands queued events to the subscribers
registered at startup: the audit trail and the per-operator toast feed.

Usage:
    from src.notifications.events import emit

    await emit(SystemEvent(
        event_type=EventType.RECORD_DELETED,
        entity_id=record_id,
        actor_id=operator,
        message="Record deleted successfully!",
        level=NotificationLevel.SUCCESS,
    ))
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from src.schemas.events import SystemEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[SystemEvent], Coroutine[Any, Any, None]]


class NotificationBus:
    """Queue drained by one worker task into every subscriber.

    Before `start()` (scripts, tests) events are delivered inline.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._queue: asyncio.Queue[SystemEvent] | None = None
        self._worker: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)
        logger.info("Notification subscriber registered: %s", subscriber.__name__)

    async def emit(self, event: SystemEvent) -> None:
        if self._queue is None or not self.running:
            await self.deliver(event)
            return
        await self._queue.put(event)

    async def deliver(self, event: SystemEvent) -> None:
        """Hand one event to every subscriber; a failing subscriber never stops the others."""
        results = await asyncio.gather(
            *(subscriber(event) for subscriber in self._subscribers), return_exceptions=True
        )
        for subscriber, result in zip(self._subscribers, results):
            if isinstance(result, Exception):
                logger.error("%s failed on %s: %s", subscriber.__name__, event.event_type.value, result)

    async def _drain(self) -> None:
        assert self._queue is not None
        while True:
            event = await self._queue.get()
            try:
                await self.deliver(event)
            except Exception:
                logger.exception("Dropped notification %s", event.event_type.value)
            finally:
                self._queue.task_done()

    async def start(self) -> None:
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._drain())
        logger.info("Notification bus started with %d subscribers", len(self._subscribers))

    async def stop(self) -> None:
        """Deliver what is still queued, then stop the worker."""
        if self._queue is not None and self.running:
            await self._queue.join()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None
        self._queue = None
        logger.info("Notification bus stopped")


bus = NotificationBus()


async def emit(event: SystemEvent) -> None:
    """Publish an event on the application bus."""
    await bus.emit(event)
