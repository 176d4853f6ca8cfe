"""Tests for the template, record and entity store helpers and the HTTP error mapping.

The AsyncSession is a MagicMock with awaitable execute/flush/refresh/delete.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.api.errors import http_error
from src.forms.errors import (
    ConfirmationRequiredError,
    FetchError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    WriteError,
)
from src.schemas.entities import CompanyIn, EngineIn
from src.schemas.forms import FormRecordCreate, FormTemplateDocument
from src.stores.entities import create_engine, delete_company, delete_engine, get_company, update_company
from src.stores.records import create_record, get_record, list_records
from src.stores.templates import create_template, delete_template, get_template, list_templates, parse_id


def _db(scalar=None, rows=None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = rows or []
    db = MagicMock()
    db.execute = AsyncMock(return_value=result)
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    return db


def _db_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestParseId:
    def test_uuid_passthrough(self):
        value = uuid.uuid4()
        assert parse_id(value) is value

    def test_string_uuid(self):
        value = uuid.uuid4()
        assert parse_id(str(value)) == value

    def test_garbage_is_not_found(self):
        with pytest.raises(NotFoundError, match="Record nope not found"):
            parse_id("nope", "record")


class TestTemplateStore:
    @pytest.mark.asyncio
    async def test_list_returns_rows(self):
        rows = [MagicMock(), MagicMock()]
        db = _db(rows=rows)
        assert await list_templates(db, "service") == rows
        db.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_failure_is_fetch_error(self):
        db = _db()
        db.execute.side_effect = _db_error()
        with pytest.raises(FetchError):
            await list_templates(db)

    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self):
        with pytest.raises(NotFoundError):
            await get_template(_db(scalar=None), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_create_adds_row_with_wire_shaped_blobs(self):
        db = _db()
        document = FormTemplateDocument.model_validate({
            "name": "Service Report",
            "formType": "service",
            "fields": [{"fieldName": "customerName", "fieldType": "text", "required": True,
                        "section": "customerInfo"}],
            "sections": [{"id": "s1", "name": "findings", "label": "Findings", "order": 6}],
        })

        row = await create_template(db, document)

        db.add.assert_called_once_with(row)
        db.flush.assert_awaited_once()
        assert row.name == "Service Report"
        assert row.fields[0]["fieldName"] == "customerName"
        assert row.sections[0]["name"] == "findings"

    @pytest.mark.asyncio
    async def test_create_failure_is_write_error(self):
        db = _db()
        db.flush.side_effect = _db_error()
        document = FormTemplateDocument(name="X", form_type="y")
        with pytest.raises(WriteError):
            await create_template(db, document)

    @pytest.mark.asyncio
    async def test_delete_removes_existing_row(self):
        row = MagicMock(id=uuid.uuid4())
        db = _db(scalar=row)
        await delete_template(db, row.id)
        db.delete.assert_awaited_once_with(row)


class TestRecordStore:
    @pytest.mark.asyncio
    async def test_create_stores_section_keyed_data(self):
        db = _db()
        payload = FormRecordCreate(
            company_form_id=uuid.uuid4(),
            job_order="JO-7",
            data={"customerInfo": {"customerName": "Acme"}, "findings": {"hours": 12}},
        )

        row = await create_record(db, payload)

        assert row.job_order == "JO-7"
        assert row.data == {"customerInfo": {"customerName": "Acme"}, "findings": {"hours": 12}}
        db.add.assert_called_once_with(row)

    @pytest.mark.asyncio
    async def test_create_failure_is_write_error(self):
        db = _db()
        db.flush.side_effect = _db_error()
        payload = FormRecordCreate(company_form_id=uuid.uuid4(), data={})
        with pytest.raises(WriteError):
            await create_record(db, payload)

    @pytest.mark.asyncio
    async def test_list_with_bad_template_id_is_not_found(self):
        db = _db()
        with pytest.raises(NotFoundError):
            await list_records(db, "not-a-uuid")
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_failure_is_fetch_error(self):
        db = _db()
        db.execute.side_effect = _db_error()
        with pytest.raises(FetchError):
            await get_record(db, uuid.uuid4())


class TestEntityStore:
    @pytest.mark.asyncio
    async def test_create_engine_maps_nameplate_fields(self):
        db = _db()
        payload = EngineIn.model_validate({"model": "QSK60", "fuelPumpSN": "FP-1", "runHours": "1200"})

        row = await create_engine(db, payload)

        db.add.assert_called_once_with(row)
        db.refresh.assert_awaited_once_with(row)
        assert row.model == "QSK60"
        assert row.fuel_pump_sn == "FP-1"
        assert row.run_hours == "1200"

    @pytest.mark.asyncio
    async def test_create_engine_failure_is_write_error(self):
        db = _db()
        db.flush.side_effect = _db_error()
        with pytest.raises(WriteError, match="Failed to create engine"):
            await create_engine(db, EngineIn(model="QSK60"))

    @pytest.mark.asyncio
    async def test_update_company_overwrites_fields(self):
        row = MagicMock(id=uuid.uuid4())
        db = _db(scalar=row)

        updated = await update_company(db, str(row.id), CompanyIn(name="Delta Power", image_url="logo.png"))

        assert updated is row
        assert row.name == "Delta Power"
        assert row.image_url == "logo.png"
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_company_removes_row(self):
        row = MagicMock(id=uuid.uuid4())
        db = _db(scalar=row)
        await delete_company(db, row.id)
        db.delete.assert_awaited_once_with(row)

    @pytest.mark.asyncio
    async def test_missing_engine_is_not_found(self):
        engine_id = uuid.uuid4()
        with pytest.raises(NotFoundError, match=f"Engine {engine_id} not found"):
            await delete_engine(_db(scalar=None), engine_id)

    @pytest.mark.asyncio
    async def test_bad_company_id_is_not_found(self):
        db = _db()
        with pytest.raises(NotFoundError, match="Company nope not found"):
            await get_company(db, "nope")
        db.execute.assert_not_awaited()


class TestHttpError:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (ValidationError("bad"), 422),
            (NotFoundError("gone"), 404),
            (ConfirmationRequiredError("confirm"), 409),
            (InvalidTransitionError("busy"), 409),
            (FetchError("down"), 502),
            (WriteError("down"), 502),
        ],
    )
    def test_status_codes(self, exc, code):
        error = http_error(exc)
        assert error.status_code == code
        assert error.detail == {"error": type(exc).__name__, "message": str(exc)}
