"""Domain enums used across SQLAlchemy models, Pydantic schemas and form sessions.

All enums use str mixin so they serialize straight into JSON blobs.
"""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    """Input kind of a template field."""

    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    DATE = "date"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    FILE = "file"


# Field types that take their choices from `options`
OPTION_FIELD_TYPES: frozenset[FieldType] = frozenset({
    FieldType.SELECT,
    FieldType.RADIO,
    FieldType.CHECKBOX,
})

# Field types that can carry an autocomplete dropdown
TEXT_LIKE_FIELD_TYPES: frozenset[FieldType] = frozenset({
    FieldType.TEXT,
    FieldType.EMAIL,
    FieldType.NUMBER,
    FieldType.TEXTAREA,
})


class BuilderMode(str, Enum):
    """Whether a builder session will create a new template or replace one."""

    CREATE = "create"
    EDIT = "edit"


class PresetKind(str, Enum):
    """Bulk-insert field bundles offered by the builder."""

    CUSTOMER = "customer"
    ENGINE = "engine"


class RendererState(str, Enum):
    """Lifecycle of a fill-up (renderer) session."""

    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    NOT_FOUND = "not_found"


class RendererMode(str, Enum):
    """New submission vs. in-place edit of an existing record."""

    SUBMIT = "submit"
    EDIT = "edit"
