"""Schema Store access: form template documents in `company_forms`.

Only simple selects/inserts/updates. Saves replace the whole document (no
version token, last save wins). SQLAlchemy failures are logged and re-raised
as FetchError/WriteError.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.forms.errors import FetchError, NotFoundError, WriteError
from src.models.form_template import FormTemplate
from src.schemas.forms import FormTemplateDocument

logger = logging.getLogger(__name__)


def parse_id(raw: str | uuid.UUID, what: str = "template") -> uuid.UUID:
    """Parse an opaque id; anything that is not a UUID cannot exist at the store."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError as exc:
        raise NotFoundError(f"{what.capitalize()} {raw} not found") from exc


def _row_payload(document: FormTemplateDocument) -> dict[str, object]:
    return {
        "name": document.name,
        "form_type": document.form_type,
        "company_id": document.company_id,
        "fields": [f.model_dump(mode="json", by_alias=True, exclude_none=True) for f in document.fields],
        "sections": [s.model_dump(mode="json", by_alias=True, exclude_none=True) for s in document.sections],
    }


async def list_templates(db: AsyncSession, search: str | None = None) -> list[FormTemplate]:
    """All templates, newest first, optionally filtered by name/form type (case-insensitive)."""
    query = select(FormTemplate).order_by(FormTemplate.created_at.desc())
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            FormTemplate.name.ilike(pattern),
            FormTemplate.form_type.ilike(pattern),
        ))
    try:
        result = await db.execute(query)
    except SQLAlchemyError as exc:
        logger.exception("Failed to list form templates")
        raise FetchError("Failed to load form templates") from exc
    return list(result.scalars().all())


async def get_template(db: AsyncSession, template_id: str | uuid.UUID) -> FormTemplate:
    """Fetch one template or raise NotFoundError."""
    tid = parse_id(template_id)
    try:
        result = await db.execute(select(FormTemplate).where(FormTemplate.id == tid))
    except SQLAlchemyError as exc:
        logger.exception("Failed to load form template %s", tid)
        raise FetchError("Failed to load form template") from exc
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(f"Template {tid} not found")
    return row


async def get_template_document(db: AsyncSession, template_id: str | uuid.UUID) -> FormTemplateDocument:
    return FormTemplateDocument.model_validate(await get_template(db, template_id))


async def create_template(db: AsyncSession, document: FormTemplateDocument) -> FormTemplate:
    """Insert a new template; the store assigns the id."""
    row = FormTemplate(**_row_payload(document))
    try:
        db.add(row)
        await db.flush()
        await db.refresh(row)
    except SQLAlchemyError as exc:
        logger.exception("Failed to create form template %r", document.name)
        raise WriteError("Failed to create form") from exc
    logger.info("Form template created: %s (%s)", row.id, row.name)
    return row


async def replace_template(
    db: AsyncSession, template_id: str | uuid.UUID, document: FormTemplateDocument
) -> FormTemplate:
    """Overwrite every column of an existing template."""
    row = await get_template(db, template_id)
    for key, value in _row_payload(document).items():
        setattr(row, key, value)
    try:
        await db.flush()
        await db.refresh(row)
    except SQLAlchemyError as exc:
        logger.exception("Failed to update form template %s", row.id)
        raise WriteError("Failed to update form") from exc
    logger.info("Form template replaced: %s (%s)", row.id, row.name)
    return row


async def delete_template(db: AsyncSession, template_id: str | uuid.UUID) -> None:
    """Delete a template. Its submissions are left in place."""
    row = await get_template(db, template_id)
    try:
        await db.delete(row)
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete form template %s", row.id)
        raise WriteError("Failed to delete form") from exc
    logger.info("Form template deleted: %s", row.id)
