"""Audit subscriber: persists every SystemEvent to the audit_log table.

Registered as a global subscriber. Never raises: a failed audit write is
logged and dropped so it cannot break the action that emitted the event.
"""

from __future__ import annotations

import logging

from src.db.engine import async_session_factory
from src.models.audit import AuditLog
from src.schemas.events import SystemEvent

logger = logging.getLogger(__name__)


async def audit_on_event(event: SystemEvent) -> None:
    """Write a SystemEvent to the audit_log table."""
    try:
        async with async_session_factory() as db:
            data = dict(event.data)
            if event.message:
                data["message"] = event.message
            db.add(AuditLog(
                event_type=event.event_type.value,
                entity_id=event.entity_id,
                actor_id=event.actor_id,
                actor_role=event.actor_role,
                data=data,
            ))
            await db.commit()
    except Exception:
        logger.exception(
            "Failed to persist audit event: %s (entity=%s)",
            event.event_type.value,
            event.entity_id,
        )
