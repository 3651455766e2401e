"""Tests for request id resolution and log levels in the request log middleware."""

import logging

from src.bk_gateway.middleware.request_log import _level_for, resolve_request_id


class TestResolveRequestId:
    def test_keeps_well_formed_client_id(self) -> None:
        assert resolve_request_id("app-7f3e_01") == "app-7f3e_01"

    def test_generates_when_missing(self) -> None:
        rid = resolve_request_id(None)
        assert rid.startswith("req_")
        assert len(rid) == 16

    def test_rejects_unsafe_or_oversized_ids(self) -> None:
        assert resolve_request_id("a b").startswith("req_")
        assert resolve_request_id("x" * 65).startswith("req_")


class TestLevels:
    def test_server_errors_log_at_error(self) -> None:
        assert _level_for("/api/v1/sales", 500) == logging.ERROR

    def test_client_errors_log_at_warning(self) -> None:
        assert _level_for("/api/v1/clients/payments", 422) == logging.WARNING

    def test_health_probe_is_quiet(self) -> None:
        assert _level_for("/health", 200) == logging.DEBUG
        assert _level_for("/api/v1/sales", 201) == logging.INFO
