# tests/unit/logging/test_unit_context.py — v1
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

from varletmeta.logging.context import clear_context, get_context, set_request_context


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.operation is None
        assert ctx.version_token is None
        assert ctx.request_id is None

    def test_set_request_context(self):
        request_id = set_request_context("get_component", "3.0.0", request_id="req1")
        ctx = get_context()
        assert request_id == "req1"
        assert ctx.operation == "get_component"
        assert ctx.version_token == "3.0.0"
        assert ctx.request_id == "req1"

    def test_generates_request_id(self):
        request_id = set_request_context("get_directive")
        assert len(request_id) == 12
        assert get_context().request_id == request_id

    def test_as_dict_filters_none(self):
        set_request_context("invalidate_cache")
        d = get_context().as_dict()
        assert d["operation"] == "invalidate_cache"
        assert "version_token" not in d

    def test_clear(self):
        set_request_context("get_component", "latest")
        clear_context()
        assert get_context().as_dict() == {}
