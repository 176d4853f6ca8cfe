"""Tests for the Redis-backed builder / fill-up session store."""

from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.forms.builder import FormBuilder
from src.forms.errors import FetchError, NotFoundError, WriteError
from src.forms.renderer import FormRenderer
from src.forms.sessions import SessionStore
from src.models.enums import BuilderMode, RendererState


@pytest.fixture
def redis(fake_redis):
    return fake_redis


@pytest.fixture
def store(redis):
    return SessionStore(redis, ttl_seconds=600)


class TestBuilderSessions:
    @pytest.mark.asyncio
    async def test_round_trip(self, store, redis):
        builder = FormBuilder()
        builder.set_details(name="Genset PM", form_type="preventive")
        builder.add_section("partsUsed", "Parts Used")
        builder.add_preset_fields("customer", "partsUsed")

        await store.save_builder("abc", builder)
        loaded = await store.load_builder("abc")

        assert "form:builder:abc" in redis.data
        assert redis.set.call_args.kwargs["ex"] == 600
        assert loaded.mode == BuilderMode.CREATE
        assert loaded.template == builder.template

    @pytest.mark.asyncio
    async def test_missing(self, store):
        with pytest.raises(NotFoundError):
            await store.load_builder("nope")

    @pytest.mark.asyncio
    async def test_corrupt(self, store, redis):
        redis.data["form:builder:bad"] = '{"mode": "sideways"}'
        with pytest.raises(FetchError):
            await store.load_builder("bad")

    @pytest.mark.asyncio
    async def test_discard(self, store, redis):
        await store.save_builder("abc", FormBuilder())
        await store.discard("builder", "abc")
        assert redis.data == {}


class TestRendererSessions:
    @pytest.mark.asyncio
    async def test_round_trip(self, store):
        renderer = FormRenderer()
        await store.save_renderer("xyz", renderer)
        loaded = await store.load_renderer("xyz")
        assert loaded.state == RendererState.LOADING

    @pytest.mark.asyncio
    async def test_kinds_are_separate(self, store):
        await store.save_builder("same", FormBuilder())
        with pytest.raises(NotFoundError):
            await store.load_renderer("same")


class TestRedisFailures:
    @pytest.mark.asyncio
    async def test_read_failure(self, store, redis):
        redis.get.side_effect = RedisConnectionError("down")
        with pytest.raises(FetchError):
            await store.load_builder("abc")

    @pytest.mark.asyncio
    async def test_write_failure(self, store, redis):
        redis.set.side_effect = RedisConnectionError("down")
        with pytest.raises(WriteError):
            await store.save_renderer("abc", FormRenderer())
