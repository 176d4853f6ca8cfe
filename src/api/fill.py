"""Fill-up API: renders a template as an input session and submits it.

The submit handler persists the SUBMITTING state before the store call, so a
second submit on the same session is refused with 409 while the first is in
flight.
"""
# ruff: noqa: B008

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import emit_access, verify_operator
from src.api.errors import http_error
from src.db.engine import get_session
from src.forms.autocomplete import autocomplete_kind, display_label
from src.forms.errors import FormError
from src.forms.renderer import FormRenderer
from src.forms.sessions import session_store
from src.schemas.api import (
    AutocompleteInput,
    EntitySelection,
    FieldValueIn,
    FieldView,
    FillOpen,
    FillView,
    OptionToggle,
    SectionView,
    SubmitRequest,
    Suggestion,
)
from src.schemas.entities import CustomerOut, EngineOut
from src.schemas.forms import FormRecordOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/fill", tags=["fill"])


def fill_view(session_id: str, renderer: FormRenderer) -> FillView:
    """What the fill-up page shows: sections in order with their fields and values."""
    values = renderer.values
    sections = []
    for section, fields in renderer.sections():
        views = []
        for field in fields:
            kind = autocomplete_kind(field)
            views.append(FieldView(
                field=field,
                value=values.get(field.name),
                display=renderer.display(field.name) if kind else None,
                autocomplete=kind,
            ))
        sections.append(SectionView(section=section, fields=views))

    return FillView(
        session_id=session_id,
        state=renderer.state,
        mode=renderer.mode,
        template_id=renderer.template_id,
        template_name=renderer.template.name if renderer.template else None,
        record_id=renderer.record_id,
        job_order=renderer.job_order,
        has_fields=renderer.has_fields,
        can_submit=renderer.can_submit,
        active_dropdown=renderer.active_dropdown,
        sections=sections,
    )


def _suggestion(entity: CustomerOut | EngineOut) -> Suggestion:
    if isinstance(entity, CustomerOut):
        detail = entity.email or entity.contact_person
    else:
        detail = entity.serial_no
    return Suggestion(id=str(entity.id), label=display_label(entity), detail=detail)


async def _apply(session_id: str, change: Callable[[FormRenderer], Any]) -> FillView:
    try:
        renderer = await session_store.load_renderer(session_id)
        change(renderer)
        await session_store.save_renderer(session_id, renderer)
    except FormError as exc:
        raise http_error(exc) from exc
    return fill_view(session_id, renderer)


@router.post("", response_model=FillView, status_code=status.HTTP_201_CREATED)
async def open_form(
    body: FillOpen,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> FillView:
    """Load a template for fill-up, together with the autocomplete entity lists."""
    await emit_access(operator, "fill")
    renderer = FormRenderer()
    try:
        await renderer.load_template(db, body.template_id)
        await renderer.load_entities(db)
        session_id = session_store.new_id()
        await session_store.save_renderer(session_id, renderer)
    except FormError as exc:
        raise http_error(exc) from exc
    return fill_view(session_id, renderer)


@router.get("/{session_id}", response_model=FillView)
async def get_form(session_id: str, operator: str = Depends(verify_operator)) -> FillView:
    return await _apply(session_id, lambda renderer: None)


@router.put("/{session_id}/values/{field_name}", response_model=FillView)
async def set_value(
    session_id: str,
    field_name: str,
    body: FieldValueIn,
    operator: str = Depends(verify_operator),
) -> FillView:
    return await _apply(session_id, lambda renderer: renderer.set_field_value(field_name, body.value))


@router.post("/{session_id}/values/{field_name}/toggle", response_model=FillView)
async def toggle_option(
    session_id: str,
    field_name: str,
    body: OptionToggle,
    operator: str = Depends(verify_operator),
) -> FillView:
    """Check or uncheck one option of a checkbox group."""
    return await _apply(session_id, lambda renderer: renderer.toggle_option(field_name, body.option, body.checked))


@router.post("/{session_id}/autocomplete/{field_name}", response_model=list[Suggestion])
async def type_autocomplete(
    session_id: str,
    field_name: str,
    body: AutocompleteInput,
    operator: str = Depends(verify_operator),
) -> list[Suggestion]:
    """Typing into an autocomplete field; returns the dropdown entries."""
    try:
        renderer = await session_store.load_renderer(session_id)
        matches = renderer.type_autocomplete(field_name, body.text)
        await session_store.save_renderer(session_id, renderer)
    except FormError as exc:
        raise http_error(exc) from exc
    return [_suggestion(entity) for entity in matches]


@router.post("/{session_id}/autocomplete/{field_name}/select", response_model=FillView)
async def select_entity(
    session_id: str,
    field_name: str,
    body: EntitySelection,
    operator: str = Depends(verify_operator),
) -> FillView:
    return await _apply(session_id, lambda renderer: renderer.select_entity(field_name, body.entity_id))


@router.post("/{session_id}/dismiss", response_model=FillView)
async def dismiss_dropdown(session_id: str, operator: str = Depends(verify_operator)) -> FillView:
    """Click outside any autocomplete: close the open dropdown."""
    return await _apply(session_id, lambda renderer: renderer.close_dropdown())


@router.post("/{session_id}/reset", response_model=FillView)
async def reset_form(session_id: str, operator: str = Depends(verify_operator)) -> FillView:
    return await _apply(session_id, lambda renderer: renderer.reset())


@router.post("/{session_id}/submit", response_model=FormRecordOut, status_code=status.HTTP_201_CREATED)
async def submit_form(
    session_id: str,
    body: SubmitRequest,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> FormRecordOut:
    """Submit (or, for a record edit session, save) the form in one store call."""
    try:
        renderer = await session_store.load_renderer(session_id)
        if body.job_order is not None:
            renderer.set_job_order(body.job_order)
        data = renderer.begin_submit(confirmed=body.confirm)
        await session_store.save_renderer(session_id, renderer)
    except FormError as exc:
        raise http_error(exc) from exc

    try:
        record = await renderer.complete_submit(db, data, actor=operator)
    except FormError as exc:
        await session_store.save_renderer(session_id, renderer)
        raise http_error(exc) from exc

    try:
        await session_store.save_renderer(session_id, renderer)
    except FormError:
        logger.warning("Record %s stored but session %s could not be updated", record.id, session_id)
    return record


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_form(session_id: str, operator: str = Depends(verify_operator)) -> Response:
    try:
        await session_store.discard("fill", session_id)
    except FormError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
