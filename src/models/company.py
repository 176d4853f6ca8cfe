"""Company model: an owning organisation for engines and form templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.engine import Engine
    from src.models.form_template import FormTemplate


class Company(TimestampMixin, Base):
    """A customer-facing company whose engines are serviced."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500), comment="Object storage URL of the logo")

    engines: Mapped[list[Engine]] = relationship("Engine", back_populates="company", lazy="selectin")
    forms: Mapped[list[FormTemplate]] = relationship("FormTemplate", back_populates="company")

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name}>"
