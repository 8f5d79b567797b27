from __future__ import annotations

import json
import logging

from waqf.core.logger import JSONFormatter


def test_json_formatter_includes_extra_keys():
    record = logging.LogRecord("waqf.test", logging.INFO, __file__, 1, "auth.login", None, None)
    record.event = "auth.login"
    record.user_id = "u-1"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "auth.login"
    assert payload["event"] == "auth.login"
    assert payload["user_id"] == "u-1"
    assert payload["level"] == "INFO"


def test_json_formatter_drops_unlisted_extras():
    record = logging.LogRecord("waqf.test", logging.INFO, __file__, 1, "auth.refresh", None, None)
    record.refresh_token = "secret-value"
    record.password = "12345678"

    payload = json.loads(JSONFormatter().format(record))

    assert "refresh_token" not in payload
    assert "password" not in payload
