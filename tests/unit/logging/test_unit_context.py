# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py: contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from originality.logging.context import (
    clear_context,
    get_context,
    set_check_context,
    set_stage_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.check_id is None
        assert ctx.stage is None
        assert ctx.url is None

    def test_set_check_context(self):
        set_check_context("abc123")
        assert get_context().check_id == "abc123"

    def test_stage_resets_url(self):
        set_stage_context("fetch", "https://a/1")
        set_stage_context("aggregate")
        ctx = get_context()
        assert ctx.stage == "aggregate"
        assert ctx.url is None

    def test_as_dict_filters_none(self):
        set_check_context("abc123")
        d = get_context().as_dict()
        assert d == {"check_id": "abc123"}

    def test_clear(self):
        set_check_context("abc123")
        set_stage_context("search")
        clear_context()
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_isolated_between_tasks(self):
        async def run(check_id: str) -> str | None:
            set_check_context(check_id)
            await asyncio.sleep(0)
            return get_context().check_id

        assert await asyncio.gather(run("one"), run("two")) == ["one", "two"]
