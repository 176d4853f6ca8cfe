"""SystemEvent schema: the notification that flows through the dashboard.

Every outcome an operator sees (template saved, record submitted, ...) is
emitted as a SystemEvent. Events with a `message` become toasts in the
acting operator's feed; every event lands in the audit log.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    """All event types emitted by the system."""

    # Form templates
    TEMPLATE_CREATED = "template.created"
    TEMPLATE_UPDATED = "template.updated"
    TEMPLATE_DELETED = "template.deleted"

    # Submissions
    RECORD_SUBMITTED = "record.submitted"
    RECORD_UPDATED = "record.updated"
    RECORD_DELETED = "record.deleted"
    SUBMISSION_FAILED = "record.submission_failed"

    # Cross-entity data
    CUSTOMER_CREATED = "customer.created"
    CUSTOMER_UPDATED = "customer.updated"
    CUSTOMER_DELETED = "customer.deleted"
    ENGINE_CREATED = "engine.created"
    ENGINE_UPDATED = "engine.updated"
    ENGINE_DELETED = "engine.deleted"
    COMPANY_CREATED = "company.created"
    COMPANY_UPDATED = "company.updated"
    COMPANY_DELETED = "company.deleted"

    # Dashboard
    OPERATOR_ACCESS = "operator.access"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class SystemEvent(BaseModel):
    """Core event emitted by the dashboard. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Context (optional, system events have no entity)
    entity_id: uuid.UUID | None = None
    actor_id: str | None = None
    actor_role: str | None = None

    # Toast text for the acting operator; None for background events
    message: str | None = None
    level: NotificationLevel = NotificationLevel.INFO

    data: dict[str, Any] = Field(default_factory=dict)
    source_module: str | None = None


class Toast(BaseModel):
    """One entry of an operator's notification feed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    level: NotificationLevel
    message: str
    event_type: EventType
    entity_id: uuid.UUID | None = None
    timestamp: datetime

    @classmethod
    def from_event(cls, event: SystemEvent) -> Toast:
        return cls(
            level=event.level,
            message=event.message or "",
            event_type=event.event_type,
            entity_id=event.entity_id,
            timestamp=event.timestamp,
        )
