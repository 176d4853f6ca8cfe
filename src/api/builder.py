"""Form builder API: one Redis-backed builder session per open editor.

Each request loads the session, applies one builder operation and writes it
back. Only `POST /{session_id}/save` touches the template table.
"""
# ruff: noqa: B008

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import emit_access, verify_operator
from src.api.errors import http_error
from src.db.engine import get_session
from src.forms.builder import FormBuilder
from src.forms.errors import FormError
from src.forms.sessions import session_store
from src.schemas.api import (
    BuilderOpen,
    BuilderView,
    Confirmation,
    FieldCreate,
    PresetCreate,
    SectionCreate,
    TemplateDetails,
)
from src.stores.templates import get_template_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/builder", tags=["builder"])


def _view(session_id: str, builder: FormBuilder) -> BuilderView:
    return BuilderView(
        session_id=session_id,
        mode=builder.mode,
        template=builder.template,
        sections=builder.sections(),
    )


async def _apply(session_id: str, change: Callable[[FormBuilder], Any]) -> BuilderView:
    """Load → mutate → store one builder session."""
    try:
        builder = await session_store.load_builder(session_id)
        change(builder)
        await session_store.save_builder(session_id, builder)
    except FormError as exc:
        raise http_error(exc) from exc
    return _view(session_id, builder)


@router.post("", response_model=BuilderView, status_code=status.HTTP_201_CREATED)
async def open_builder(
    body: BuilderOpen,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> BuilderView:
    """Start a builder: blank for a new form, pre-filled to edit an existing one."""
    await emit_access(operator, "builder")
    try:
        if body.template_id:
            builder = FormBuilder.for_document(await get_template_document(db, body.template_id))
        else:
            builder = FormBuilder()
        session_id = session_store.new_id()
        await session_store.save_builder(session_id, builder)
    except FormError as exc:
        raise http_error(exc) from exc
    return _view(session_id, builder)


@router.get("/{session_id}", response_model=BuilderView)
async def get_builder(session_id: str, operator: str = Depends(verify_operator)) -> BuilderView:
    return await _apply(session_id, lambda builder: None)


@router.patch("/{session_id}/details", response_model=BuilderView)
async def update_details(
    session_id: str,
    body: TemplateDetails,
    operator: str = Depends(verify_operator),
) -> BuilderView:
    return await _apply(session_id, lambda builder: builder.set_details(**body.model_dump()))


@router.post("/{session_id}/sections", response_model=BuilderView)
async def add_section(
    session_id: str,
    body: SectionCreate,
    operator: str = Depends(verify_operator),
) -> BuilderView:
    return await _apply(session_id, lambda builder: builder.add_section(body.name, body.label))


@router.delete("/{session_id}/sections/{section_id}", response_model=BuilderView)
async def remove_section(
    session_id: str,
    section_id: str,
    operator: str = Depends(verify_operator),
) -> BuilderView:
    """Remove a custom section together with its fields."""
    return await _apply(session_id, lambda builder: builder.remove_section(section_id))


@router.post("/{session_id}/fields", response_model=BuilderView)
async def add_field(
    session_id: str,
    body: FieldCreate,
    operator: str = Depends(verify_operator),
) -> BuilderView:
    return await _apply(session_id, lambda builder: builder.add_field(body.section))


@router.post("/{session_id}/presets", response_model=BuilderView)
async def add_preset(
    session_id: str,
    body: PresetCreate,
    operator: str = Depends(verify_operator),
) -> BuilderView:
    """Append the customer or engine preset field group to a section."""
    return await _apply(session_id, lambda builder: builder.add_preset_fields(body.kind, body.section))


@router.patch("/{session_id}/fields/{field_id}", response_model=BuilderView)
async def update_field(
    session_id: str,
    field_id: str,
    updates: dict[str, Any] = Body(...),
    operator: str = Depends(verify_operator),
) -> BuilderView:
    return await _apply(session_id, lambda builder: builder.update_field(field_id, updates))


@router.delete("/{session_id}/fields/{field_id}", response_model=BuilderView)
async def remove_field(
    session_id: str,
    field_id: str,
    operator: str = Depends(verify_operator),
) -> BuilderView:
    return await _apply(session_id, lambda builder: builder.remove_field(field_id))


@router.post("/{session_id}/save", response_model=BuilderView)
async def save_builder(
    session_id: str,
    body: Confirmation,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> BuilderView:
    """Create or update the template. A failed save leaves the session unchanged."""
    try:
        builder = await session_store.load_builder(session_id)
        await builder.save(db, confirmed=body.confirm, actor=operator)
        await session_store.save_builder(session_id, builder)
    except FormError as exc:
        raise http_error(exc) from exc
    logger.info("Builder %s saved template %s", session_id, builder.template.id)
    return _view(session_id, builder)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_builder(session_id: str, operator: str = Depends(verify_operator)) -> Response:
    """Cancel: drop the builder session without saving."""
    try:
        await session_store.discard("builder", session_id)
    except FormError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
