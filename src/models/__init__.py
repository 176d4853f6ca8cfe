"""SQLAlchemy ORM models.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from src.models.audit import AuditLog
from src.models.base import Base
from src.models.company import Company
from src.models.customer import Customer
from src.models.engine import Engine
from src.models.enums import (
    BuilderMode,
    FieldType,
    PresetKind,
    RendererMode,
    RendererState,
)
from src.models.form_record import FormRecord
from src.models.form_template import FormTemplate

__all__ = [
    # Base
    "Base",
    # Models
    "AuditLog",
    "Company",
    "Customer",
    "Engine",
    "FormRecord",
    "FormTemplate",
    # Enums
    "BuilderMode",
    "FieldType",
    "PresetKind",
    "RendererMode",
    "RendererState",
]
