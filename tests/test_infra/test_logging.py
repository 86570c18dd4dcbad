"""Tests for logging helpers."""

import structlog

from plm.infra.logging import bind_request_context, clear_request_context, get_logger


class TestRequestContext:
    def test_bind_replaces_previous_context(self):
        bind_request_context(request_id="a", path="/garments")
        bind_request_context(request_id="b")

        assert structlog.contextvars.get_contextvars() == {"request_id": "b"}
        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_get_logger_binds_initial_context(self):
        logger = get_logger("plm.test", component="store")
        assert logger is not None
