"""FormTemplate model: the Schema Store row for a dynamic form.

Fields and custom sections are stored as JSONB arrays in their backend shape
(`{fieldName, fieldType, required, ...}` / `{id, name, label, order, sectionNumber?}`).
A save always replaces the whole document.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.company import Company


class FormTemplate(TimestampMixin, Base):
    """A user-authored form schema."""

    __tablename__ = "company_forms"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    form_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("companies.id", ondelete="SET NULL"), index=True
    )

    fields: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    sections: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)

    company: Mapped[Company | None] = relationship("Company", back_populates="forms", lazy="selectin")

    def __repr__(self) -> str:
        return f"<FormTemplate id={self.id} name={self.name} type={self.form_type}>"
