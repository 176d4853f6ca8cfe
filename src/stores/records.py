"""Submission Store access: `form_records` rows.

Listing is a plain select by template id; search, date filtering and
pagination happen in memory (src.forms.records).
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.forms.errors import FetchError, NotFoundError, WriteError
from src.models.form_record import FormRecord
from src.schemas.forms import FormRecordCreate, FormRecordUpdate
from src.stores.templates import parse_id

logger = logging.getLogger(__name__)


async def create_record(db: AsyncSession, payload: FormRecordCreate) -> FormRecord:
    """Persist one submission in a single insert."""
    row = FormRecord(
        company_form_id=payload.company_form_id,
        job_order=payload.job_order,
        data=payload.model_dump(mode="json")["data"],
    )
    try:
        db.add(row)
        await db.flush()
        await db.refresh(row)
    except SQLAlchemyError as exc:
        logger.exception("Failed to create record for template %s", payload.company_form_id)
        raise WriteError("Failed to submit form") from exc
    logger.info("Record %s submitted for template %s", row.id, row.company_form_id)
    return row


async def list_records(db: AsyncSession, template_id: str | uuid.UUID) -> list[FormRecord]:
    """Every record of a template, newest first."""
    tid = parse_id(template_id)
    try:
        result = await db.execute(
            select(FormRecord)
            .where(FormRecord.company_form_id == tid)
            .order_by(FormRecord.created_at.desc())
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to list records for template %s", tid)
        raise FetchError("Failed to load records") from exc
    return list(result.scalars().all())


async def get_record(db: AsyncSession, record_id: str | uuid.UUID) -> FormRecord:
    rid = parse_id(record_id, "record")
    try:
        result = await db.execute(select(FormRecord).where(FormRecord.id == rid))
    except SQLAlchemyError as exc:
        logger.exception("Failed to load record %s", rid)
        raise FetchError("Failed to load record") from exc
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(f"Record {rid} not found")
    return row


async def update_record(db: AsyncSession, record_id: str | uuid.UUID, payload: FormRecordUpdate) -> FormRecord:
    """Replace job order, template reference and data of a record."""
    row = await get_record(db, record_id)
    row.company_form_id = payload.company_form_id
    row.job_order = payload.job_order
    row.data = payload.model_dump(mode="json")["data"]
    try:
        await db.flush()
        await db.refresh(row)
    except SQLAlchemyError as exc:
        logger.exception("Failed to update record %s", row.id)
        raise WriteError("Failed to update record") from exc
    logger.info("Record %s updated", row.id)
    return row


async def delete_record(db: AsyncSession, record_id: str | uuid.UUID) -> None:
    row = await get_record(db, record_id)
    try:
        await db.delete(row)
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete record %s", row.id)
        raise WriteError("Failed to delete record") from exc
    logger.info("Record %s deleted", row.id)
