"""Records view API: filtered/paginated submissions, record detail, edit and delete."""
# ruff: noqa: B008

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import emit_access, verify_operator
from src.api.errors import http_error
from src.api.fill import fill_view
from src.config import settings
from src.db.engine import get_session
from src.forms.errors import ConfirmationRequiredError, FormError
from src.forms.records import RecordListView
from src.forms.renderer import FormRenderer
from src.forms.sessions import session_store
from src.notifications.events import emit
from src.schemas.api import FillView
from src.schemas.events import EventType, NotificationLevel, SystemEvent
from src.schemas.forms import FormRecordOut, RecordPage
from src.stores.records import delete_record, get_record, list_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["records"])


@router.get("/templates/{template_id}/records", response_model=RecordPage)
async def records_page(
    template_id: str,
    search: str | None = Query(None, max_length=200),
    start: date | None = Query(None),
    end: date | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=settings.forms.max_page_size),
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> RecordPage:
    """One page of a template's submissions after search and date filtering."""
    await emit_access(operator, "records")
    try:
        rows = await list_records(db, template_id)
    except FormError as exc:
        raise http_error(exc) from exc

    view = RecordListView(
        [FormRecordOut.model_validate(row) for row in rows],
        page_size=page_size or settings.forms.records_page_size,
        tz=settings.forms.timezone,
    )
    view.search = search
    view.set_date_range(start, end)
    view.go_to(page)

    return RecordPage(
        records=list(view.page_items()),
        total=view.total,
        page=view.page,
        page_size=view.page_size,
        total_pages=view.total_pages,
        pages=view.pages(),
    )


@router.get("/records/{record_id}", response_model=FormRecordOut)
async def record_detail(
    record_id: str,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> FormRecordOut:
    await emit_access(operator, "record")
    try:
        row = await get_record(db, record_id)
    except FormError as exc:
        raise http_error(exc) from exc
    return FormRecordOut.model_validate(row)


@router.post("/records/{record_id}/edit", response_model=FillView, status_code=status.HTTP_201_CREATED)
async def edit_record(
    record_id: str,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> FillView:
    """Open a fill-up session in edit mode, pre-filled from the record."""
    renderer = FormRenderer()
    try:
        record = FormRecordOut.model_validate(await get_record(db, record_id))
        await renderer.load_template(db, str(record.company_form_id))
        await renderer.load_entities(db)
        renderer.open_record(record)
        session_id = session_store.new_id()
        await session_store.save_renderer(session_id, renderer)
    except FormError as exc:
        raise http_error(exc) from exc
    return fill_view(session_id, renderer)


@router.delete("/records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_record(
    record_id: str,
    confirm: bool = Query(False),
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> Response:
    try:
        if not confirm:
            raise ConfirmationRequiredError("Confirm to delete this record")
        row = await get_record(db, record_id)
        record_uuid, template_uuid = row.id, row.company_form_id
        await delete_record(db, record_uuid)
    except FormError as exc:
        raise http_error(exc) from exc

    logger.info("Record %s deleted by %s", record_uuid, operator)
    await emit(SystemEvent(
        event_type=EventType.RECORD_DELETED,
        entity_id=record_uuid,
        actor_id=operator,
        actor_role="operator",
        message="Record deleted successfully!",
        level=NotificationLevel.SUCCESS,
        data={"template_id": str(template_uuid)},
        source_module="api.records",
    ))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
