"""FormRecord model: the Submission Store row.

`data` is a two-level map `{sectionName: {fieldName: value}}` captured at
submission time. `company_form_id` has no foreign key: deleting a
template leaves its records (and their captured layout) untouched.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class FormRecord(TimestampMixin, Base):
    """One submission against a form template."""

    __tablename__ = "form_records"

    company_form_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    job_order: Mapped[str | None] = mapped_column(String(100), index=True)
    data: Mapped[dict[str, dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<FormRecord id={self.id} form={self.company_form_id} job_order={self.job_order}>"
