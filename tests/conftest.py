"""Shared fixtures: in-memory Redis stand-in and a test app with every API router."""

from __future__ import annotations

import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.db.engine import get_session
from src.forms.sessions import SessionStore


def make_auth_header(username: str = "tech1", password: str = "testpass123") -> dict[str, str]:
    """Build HTTP Basic Auth header."""
    credentials = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {credentials}"}


@pytest.fixture
def fake_redis():
    """In-memory stand-in for the redis.asyncio client."""
    data: dict[str, str] = {}
    mock = AsyncMock()

    async def fake_get(key):
        return data.get(key)

    async def fake_set(key, value, ex=None):
        data[key] = value

    async def fake_delete(key):
        data.pop(key, None)

    mock.get.side_effect = fake_get
    mock.set.side_effect = fake_set
    mock.delete.side_effect = fake_delete
    mock.data = data
    return mock


@pytest.fixture
def api(fake_redis):
    """Test client over all routers with DB, Redis, auth settings and events mocked."""
    from src.api import builder, entities, fill, notifications, records, templates

    store = SessionStore(fake_redis, ttl_seconds=600)
    db = AsyncMock()

    async def fake_get_session():
        yield db

    with (
        patch("src.api.auth.settings") as mock_settings,
        patch("src.api.auth.emit", new_callable=AsyncMock),
        patch("src.api.templates.emit", new_callable=AsyncMock) as emit_templates,
        patch("src.api.records.emit", new_callable=AsyncMock) as emit_records,
        patch("src.api.entities.emit", new_callable=AsyncMock) as emit_entities,
        patch("src.forms.builder.emit", new_callable=AsyncMock),
        patch("src.forms.renderer.emit", new_callable=AsyncMock),
        patch("src.api.builder.session_store", store),
        patch("src.api.fill.session_store", store),
        patch("src.api.records.session_store", store),
    ):
        mock_settings.security.dashboard_password = "testpass123"

        app = FastAPI()
        for module in (templates, records, builder, fill, entities, notifications):
            app.include_router(module.router)
        app.dependency_overrides[get_session] = fake_get_session

        yield SimpleNamespace(
            client=TestClient(app),
            db=db,
            store=store,
            redis=fake_redis,
            headers=make_auth_header(),
            auth_header=make_auth_header,
            emit_templates=emit_templates,
            emit_records=emit_records,
            emit_entities=emit_entities,
        )
