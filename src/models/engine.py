"""Engine model: an installed engine/genset, autocomplete source for engine fields."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.company import Company


class Engine(TimestampMixin, Base):
    """Engine nameplate and service data."""

    __tablename__ = "engines"

    company_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("companies.id", ondelete="SET NULL"), index=True
    )

    # Nameplate
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    serial_no: Mapped[str | None] = mapped_column(String(100), index=True)
    alt_brand_model: Mapped[str | None] = mapped_column(String(100), comment="Alternator brand/model")
    equip_model: Mapped[str | None] = mapped_column(String(100))
    equip_serial_no: Mapped[str | None] = mapped_column(String(100))
    alt_serial_no: Mapped[str | None] = mapped_column(String(100))
    location: Mapped[str | None] = mapped_column(String(200))
    rating: Mapped[str | None] = mapped_column(String(50))
    rpm: Mapped[str | None] = mapped_column(String(20))
    start_voltage: Mapped[str | None] = mapped_column(String(20))
    run_hours: Mapped[str | None] = mapped_column(String(20))

    # Fuel, lubrication and turbo
    fuel_pump_sn: Mapped[str | None] = mapped_column(String(100))
    fuel_pump_code: Mapped[str | None] = mapped_column(String(100))
    lube_oil: Mapped[str | None] = mapped_column(String(100))
    fuel_type: Mapped[str | None] = mapped_column(String(50))
    coolant_additive: Mapped[str | None] = mapped_column(String(100))
    turbo_model: Mapped[str | None] = mapped_column(String(100))
    turbo_sn: Mapped[str | None] = mapped_column(String(100))

    image_url: Mapped[str | None] = mapped_column(String(500))

    company: Mapped[Company | None] = relationship("Company", back_populates="engines")

    def __repr__(self) -> str:
        return f"<Engine id={self.id} model={self.model} serial={self.serial_no}>"
