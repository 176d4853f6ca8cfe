"""Customers, engines, companies and the dashboard overview."""
# ruff: noqa: B008

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import emit_access, verify_operator
from src.api.errors import http_error
from src.db.engine import get_session
from src.forms.errors import ConfirmationRequiredError, FormError
from src.notifications.events import emit
from src.schemas.entities import (
    CompanyIn,
    CompanyOut,
    CustomerIn,
    CustomerOut,
    EngineIn,
    EngineOut,
    OverviewCounts,
)
from src.schemas.events import EventType, NotificationLevel, SystemEvent
from src.stores.entities import (
    create_company,
    create_customer,
    create_engine,
    delete_company,
    delete_customer,
    delete_engine,
    get_company,
    get_customer,
    get_engine,
    get_overview_counts,
    list_companies,
    list_customers,
    list_engines,
    update_company,
    update_customer,
    update_engine,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["entities"])


async def _changed(event_type: EventType, entity_id: uuid.UUID, label: str, operator: str) -> None:
    """Emit a create/update/delete event with its toast, e.g. "Engine updated successfully!"."""
    kind, action = event_type.value.split(".")
    await emit(SystemEvent(
        event_type=event_type,
        entity_id=entity_id,
        actor_id=operator,
        actor_role="operator",
        message=f"{kind.capitalize()} {action} successfully!",
        level=NotificationLevel.SUCCESS,
        data={"name": label},
        source_module="api.entities",
    ))


def _require_confirm(confirm: bool, what: str) -> None:
    if not confirm:
        raise ConfirmationRequiredError(f"Confirm to delete this {what}")


@router.get("/overview", response_model=OverviewCounts)
async def overview(
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> OverviewCounts:
    """Counts behind the dashboard overview tiles."""
    await emit_access(operator, "overview")
    try:
        counts = await get_overview_counts(db)
    except FormError as exc:
        raise http_error(exc) from exc
    return OverviewCounts(**counts)


# ── Customers ────────────────────────────────────────────────────────


@router.get("/customers", response_model=list[CustomerOut])
async def customers(
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> list[CustomerOut]:
    await emit_access(operator, "customers")
    try:
        rows = await list_customers(db)
    except FormError as exc:
        raise http_error(exc) from exc
    return [CustomerOut.model_validate(row) for row in rows]


@router.get("/customers/{customer_id}", response_model=CustomerOut)
async def customer_detail(
    customer_id: str,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> CustomerOut:
    try:
        row = await get_customer(db, customer_id)
    except FormError as exc:
        raise http_error(exc) from exc
    return CustomerOut.model_validate(row)


@router.post("/customers", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
async def add_customer(
    body: CustomerIn,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> CustomerOut:
    try:
        customer = CustomerOut.model_validate(await create_customer(db, body))
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.CUSTOMER_CREATED, customer.id, customer.name, operator)
    return customer


@router.put("/customers/{customer_id}", response_model=CustomerOut)
async def edit_customer(
    customer_id: str,
    body: CustomerIn,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> CustomerOut:
    try:
        customer = CustomerOut.model_validate(await update_customer(db, customer_id, body))
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.CUSTOMER_UPDATED, customer.id, customer.name, operator)
    return customer


@router.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_customer(
    customer_id: str,
    confirm: bool = Query(False),
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> Response:
    try:
        _require_confirm(confirm, "customer")
        customer = CustomerOut.model_validate(await get_customer(db, customer_id))
        await delete_customer(db, customer.id)
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.CUSTOMER_DELETED, customer.id, customer.name, operator)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Engines ──────────────────────────────────────────────────────────


@router.get("/engines", response_model=list[EngineOut])
async def engines(
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> list[EngineOut]:
    await emit_access(operator, "engines")
    try:
        rows = await list_engines(db)
    except FormError as exc:
        raise http_error(exc) from exc
    return [EngineOut.model_validate(row) for row in rows]


@router.get("/engines/{engine_id}", response_model=EngineOut)
async def engine_detail(
    engine_id: str,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> EngineOut:
    try:
        row = await get_engine(db, engine_id)
    except FormError as exc:
        raise http_error(exc) from exc
    return EngineOut.model_validate(row)


@router.post("/engines", response_model=EngineOut, status_code=status.HTTP_201_CREATED)
async def add_engine(
    body: EngineIn,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> EngineOut:
    try:
        engine = EngineOut.model_validate(await create_engine(db, body))
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.ENGINE_CREATED, engine.id, engine.model, operator)
    return engine


@router.put("/engines/{engine_id}", response_model=EngineOut)
async def edit_engine(
    engine_id: str,
    body: EngineIn,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> EngineOut:
    try:
        engine = EngineOut.model_validate(await update_engine(db, engine_id, body))
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.ENGINE_UPDATED, engine.id, engine.model, operator)
    return engine


@router.delete("/engines/{engine_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_engine(
    engine_id: str,
    confirm: bool = Query(False),
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> Response:
    try:
        _require_confirm(confirm, "engine")
        engine = EngineOut.model_validate(await get_engine(db, engine_id))
        await delete_engine(db, engine.id)
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.ENGINE_DELETED, engine.id, engine.model, operator)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Companies ────────────────────────────────────────────────────────


@router.get("/companies", response_model=list[CompanyOut])
async def companies(
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> list[CompanyOut]:
    """Also the choices of the builder's company selector."""
    try:
        rows = await list_companies(db)
    except FormError as exc:
        raise http_error(exc) from exc
    return [CompanyOut.model_validate(row) for row in rows]


@router.get("/companies/{company_id}", response_model=CompanyOut)
async def company_detail(
    company_id: str,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> CompanyOut:
    try:
        row = await get_company(db, company_id)
    except FormError as exc:
        raise http_error(exc) from exc
    return CompanyOut.model_validate(row)


@router.post("/companies", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
async def add_company(
    body: CompanyIn,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> CompanyOut:
    try:
        company = CompanyOut.model_validate(await create_company(db, body))
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.COMPANY_CREATED, company.id, company.name, operator)
    return company


@router.put("/companies/{company_id}", response_model=CompanyOut)
async def edit_company(
    company_id: str,
    body: CompanyIn,
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> CompanyOut:
    try:
        company = CompanyOut.model_validate(await update_company(db, company_id, body))
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.COMPANY_UPDATED, company.id, company.name, operator)
    return company


@router.delete("/companies/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_company(
    company_id: str,
    confirm: bool = Query(False),
    db: AsyncSession = Depends(get_session),
    operator: str = Depends(verify_operator),
) -> Response:
    """Engines and forms of the company stay, with no company."""
    try:
        _require_confirm(confirm, "company")
        company = CompanyOut.model_validate(await get_company(db, company_id))
        await delete_company(db, company.id)
    except FormError as exc:
        raise http_error(exc) from exc
    await _changed(EventType.COMPANY_DELETED, company.id, company.name, operator)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
