"""Template list, template detail and template deletion."""
# ruff: noqa: B008

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import emit_access, verify_operator
from src.api.errors import http_error
from src.db.engine import get_session
from src.forms.conversion import definition_from_document
from src.forms.errors import ConfirmationRequiredError, FormError
from src.notifications.events import emit
from src.schemas.events import EventType, NotificationLevel, SystemEvent
from src.schemas.forms import FormTemplateSummary, TemplateDefinition
from src.stores.templates import delete_template, get_template_document, list_templates, parse_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.get("", response_model=list[FormTemplateSummary])
async def list_forms(
    search: str | None = Query(None, max_length=200),
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> list[FormTemplateSummary]:
    """All templates, optionally narrowed by name or form type."""
    await emit_access(operator, "templates")
    try:
        rows = await list_templates(db, search)
    except FormError as exc:
        raise http_error(exc) from exc
    return [FormTemplateSummary.model_validate(row) for row in rows]


@router.get("/{template_id}", response_model=TemplateDefinition)
async def get_form(
    template_id: str,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> TemplateDefinition:
    """One template in its editable (camelCase field) shape."""
    await emit_access(operator, "template")
    try:
        document = await get_template_document(db, template_id)
    except FormError as exc:
        raise http_error(exc) from exc
    return definition_from_document(document)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_form(
    template_id: str,
    confirm: bool = Query(False),
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> Response:
    """Delete a template after the confirm step. Its records stay in place."""
    try:
        if not confirm:
            raise ConfirmationRequiredError("Confirm to delete this form")
        await delete_template(db, template_id)
    except FormError as exc:
        raise http_error(exc) from exc

    logger.info("Template %s deleted by %s", template_id, operator)
    await emit(SystemEvent(
        event_type=EventType.TEMPLATE_DELETED,
        entity_id=parse_id(template_id),
        actor_id=operator,
        actor_role="operator",
        message="Form deleted successfully!",
        level=NotificationLevel.SUCCESS,
        source_module="api.templates",
    ))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
