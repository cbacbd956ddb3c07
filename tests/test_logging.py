"""
Tests for logging helpers and the request logging middleware.
"""

import json
import logging
from types import SimpleNamespace

import pytest

from flarewise.core.logging_config import (
    MASK, JSONFormatter, filter_sensitive_data, setup_logging, truncate_large_data,
)
from flarewise.middleware.logging_middleware import _body_for_log, _error_reason


class TestFilters:

    def test_masks_secrets_and_notes(self):
        data = {"llm_api_key": "sk-1", "symptoms": [{"notes": "private", "severity": 2}]}
        filtered = filter_sensitive_data(data)
        assert filtered["llm_api_key"] == MASK
        assert filtered["symptoms"][0] == {"notes": MASK, "severity": 2}
        assert data["symptoms"][0]["notes"] == "private"

    def test_truncate(self):
        assert truncate_large_data("abc", 5) == "abc"
        assert truncate_large_data("x" * 10, 4).startswith("xxxx... (truncated, total length: 10)")


class TestJSONFormatter:

    def test_extra_fields_are_filtered(self):
        record = logging.LogRecord("flarewise.test", logging.INFO, __file__, 1, "hello", None, None)
        record.extra_fields = {"entries": 12, "notes": "secret"}
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "hello"
        assert payload["entries"] == 12
        assert payload["notes"] == MASK


class TestSetupLogging:

    def test_file_handler(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        config = SimpleNamespace(
            log_level="debug", log_console_enabled=False, log_file_enabled=True,
            log_file_path=str(tmp_path / "logs" / "app.log"), log_json_format=True,
        )
        try:
            setup_logging(config)
            assert root.level == logging.DEBUG
            assert (tmp_path / "logs" / "app.log").exists()
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestMiddlewareHelpers:

    def test_json_body_is_masked(self):
        text = _body_for_log(b'{"notes": "flare after gardening", "severity": 3}', "application/json")
        assert json.loads(text) == {"notes": MASK, "severity": 3}

    def test_csv_body_logged_by_size(self):
        assert _body_for_log(b"Date,Severity\n", "text/csv; charset=utf-8") == (
            "<14 bytes text/csv; charset=utf-8>"
        )

    def test_empty_body(self):
        assert _body_for_log(b"", "application/json") is None

    @pytest.mark.parametrize("body,reason", [
        ('{"detail": "Medication not found: x"}', "Medication not found: x"),
        ('{"ok": false}', None),
        ("plain failure", "plain failure"),
        (None, None),
    ])
    def test_error_reason(self, body, reason):
        assert _error_reason(body) == reason
