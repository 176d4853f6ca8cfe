"""Customer model: autocomplete source for customer-linked template fields."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class Customer(TimestampMixin, Base):
    """A serviced customer."""

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    equipment: Mapped[str | None] = mapped_column(String(200))
    customer: Mapped[str | None] = mapped_column(String(200), comment="Billing/parent customer name")
    contact_person: Mapped[str | None] = mapped_column(String(200))
    address: Mapped[str | None] = mapped_column(Text)
    email: Mapped[str | None] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name}>"
