"""Cross-entity data: customers, engines and companies, plus the overview counts.

All three entities share the same read/create/update/delete shape; the
public functions are thin wrappers naming the entity for logs and errors.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.forms.errors import FetchError, NotFoundError, WriteError
from src.models.company import Company
from src.models.customer import Customer
from src.models.engine import Engine
from src.models.form_record import FormRecord
from src.models.form_template import FormTemplate
from src.schemas.entities import CompanyIn, CustomerIn, EngineIn
from src.stores.templates import parse_id

logger = logging.getLogger(__name__)

EntityRow = TypeVar("EntityRow", Customer, Engine, Company)


async def _list(db: AsyncSession, model: type[EntityRow], what: str, *order_by: Any) -> list[EntityRow]:
    try:
        result = await db.execute(select(model).order_by(*order_by))
    except SQLAlchemyError as exc:
        logger.exception("Failed to list %s", what)
        raise FetchError(f"Failed to load {what}") from exc
    return list(result.scalars().all())


async def _get(db: AsyncSession, model: type[EntityRow], what: str, raw_id: str | uuid.UUID) -> EntityRow:
    entity_id = parse_id(raw_id, what)
    try:
        result = await db.execute(select(model).where(model.id == entity_id))
    except SQLAlchemyError as exc:
        logger.exception("Failed to load %s %s", what, entity_id)
        raise FetchError(f"Failed to load {what}") from exc
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(f"{what.capitalize()} {entity_id} not found")
    return row


async def _create(db: AsyncSession, model: type[EntityRow], what: str, payload: BaseModel) -> EntityRow:
    row = model(**payload.model_dump())
    try:
        db.add(row)
        await db.flush()
        await db.refresh(row)
    except SQLAlchemyError as exc:
        logger.exception("Failed to create %s", what)
        raise WriteError(f"Failed to create {what}") from exc
    logger.info("%s created: %s", what.capitalize(), row.id)
    return row


async def _update(
    db: AsyncSession, model: type[EntityRow], what: str, raw_id: str | uuid.UUID, payload: BaseModel
) -> EntityRow:
    row = await _get(db, model, what, raw_id)
    for key, value in payload.model_dump().items():
        setattr(row, key, value)
    try:
        await db.flush()
        await db.refresh(row)
    except SQLAlchemyError as exc:
        logger.exception("Failed to update %s %s", what, row.id)
        raise WriteError(f"Failed to update {what}") from exc
    logger.info("%s updated: %s", what.capitalize(), row.id)
    return row


async def _delete(db: AsyncSession, model: type[EntityRow], what: str, raw_id: str | uuid.UUID) -> None:
    row = await _get(db, model, what, raw_id)
    try:
        await db.delete(row)
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete %s %s", what, row.id)
        raise WriteError(f"Failed to delete {what}") from exc
    logger.info("%s deleted: %s", what.capitalize(), row.id)


# ── Customers ────────────────────────────────────────────────────────


async def list_customers(db: AsyncSession) -> list[Customer]:
    return await _list(db, Customer, "customers", Customer.name)


async def get_customer(db: AsyncSession, customer_id: str | uuid.UUID) -> Customer:
    return await _get(db, Customer, "customer", customer_id)


async def create_customer(db: AsyncSession, payload: CustomerIn) -> Customer:
    return await _create(db, Customer, "customer", payload)


async def update_customer(db: AsyncSession, customer_id: str | uuid.UUID, payload: CustomerIn) -> Customer:
    return await _update(db, Customer, "customer", customer_id, payload)


async def delete_customer(db: AsyncSession, customer_id: str | uuid.UUID) -> None:
    await _delete(db, Customer, "customer", customer_id)


# ── Engines ──────────────────────────────────────────────────────────


async def list_engines(db: AsyncSession) -> list[Engine]:
    return await _list(db, Engine, "engines", Engine.model, Engine.serial_no)


async def get_engine(db: AsyncSession, engine_id: str | uuid.UUID) -> Engine:
    return await _get(db, Engine, "engine", engine_id)


async def create_engine(db: AsyncSession, payload: EngineIn) -> Engine:
    return await _create(db, Engine, "engine", payload)


async def update_engine(db: AsyncSession, engine_id: str | uuid.UUID, payload: EngineIn) -> Engine:
    return await _update(db, Engine, "engine", engine_id, payload)


async def delete_engine(db: AsyncSession, engine_id: str | uuid.UUID) -> None:
    await _delete(db, Engine, "engine", engine_id)


# ── Companies ────────────────────────────────────────────────────────


async def list_companies(db: AsyncSession) -> list[Company]:
    return await _list(db, Company, "companies", Company.name)


async def get_company(db: AsyncSession, company_id: str | uuid.UUID) -> Company:
    return await _get(db, Company, "company", company_id)


async def create_company(db: AsyncSession, payload: CompanyIn) -> Company:
    return await _create(db, Company, "company", payload)


async def update_company(db: AsyncSession, company_id: str | uuid.UUID, payload: CompanyIn) -> Company:
    return await _update(db, Company, "company", company_id, payload)


async def delete_company(db: AsyncSession, company_id: str | uuid.UUID) -> None:
    """Engines and forms of the company keep existing with no company."""
    await _delete(db, Company, "company", company_id)


async def get_overview_counts(db: AsyncSession) -> dict[str, int]:
    """Row counts for the overview tiles."""
    counts: dict[str, int] = {}
    tables = {
        "companies": Company.id,
        "customers": Customer.id,
        "engines": Engine.id,
        "templates": FormTemplate.id,
        "records": FormRecord.id,
    }
    try:
        for key, column in tables.items():
            result = await db.execute(select(func.count(column)))
            counts[key] = result.scalar() or 0
    except SQLAlchemyError as exc:
        logger.exception("Failed to compute overview counts")
        raise FetchError("Failed to load overview") from exc
    return counts
