"""Pydantic schemas for the cross-entity lookups (customers, engines, companies)."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _EntityModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CustomerIn(_EntityModel):
    """Create/update payload for a customer."""

    name: str = Field(min_length=1)
    equipment: str | None = None
    customer: str | None = None
    contact_person: str | None = None
    address: str | None = None
    email: str | None = None


class CustomerOut(CustomerIn):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CompanyIn(_EntityModel):
    """Create/update payload for a company."""

    name: str = Field(min_length=1)
    image_url: str | None = None


class CompanyOut(CompanyIn):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EngineIn(_EntityModel):
    """Create/update payload for an engine (nameplate and service data)."""

    company_id: uuid.UUID | None = None
    model: str = Field(min_length=1)
    serial_no: str | None = None
    alt_brand_model: str | None = None
    equip_model: str | None = None
    equip_serial_no: str | None = None
    alt_serial_no: str | None = None
    location: str | None = None
    rating: str | None = None
    rpm: str | None = None
    start_voltage: str | None = None
    run_hours: str | None = None
    fuel_pump_sn: str | None = Field(default=None, alias="fuelPumpSN")
    fuel_pump_code: str | None = None
    lube_oil: str | None = None
    fuel_type: str | None = None
    coolant_additive: str | None = None
    turbo_model: str | None = None
    turbo_sn: str | None = Field(default=None, alias="turboSN")
    image_url: str | None = None


class EngineOut(EngineIn):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OverviewCounts(_EntityModel):
    """Dashboard overview tiles."""

    companies: int
    customers: int
    engines: int
    templates: int
    records: int
