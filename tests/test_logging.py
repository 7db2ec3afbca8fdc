"""Unit tests for structured JSON logging."""

import json
import logging
import sys

from adlens.core.logging import JSONFormatter, get_logger, redact


def make_record(msg, exc_info=None, **extra):
    record = logging.LogRecord(
        name="adlens.test",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_redact_masks_token_only():
    url = "https://graph.facebook.com/v21.0/act_1/insights?fields=spend&access_token=EAAB123xyz&limit=5"

    assert redact(url) == (
        "https://graph.facebook.com/v21.0/act_1/insights?fields=spend&access_token=***&limit=5"
    )
    assert redact("no secrets here") == "no secrets here"


def test_formatter_emits_one_json_line_with_extras():
    record = make_record(
        "Meta API error on GET /act_1/insights",
        method="GET",
        path="/act_1/insights",
        attempt=3,
        status_code=503,
        error_kind="server",
    )

    line = JSONFormatter().format(record)

    assert "\n" not in line
    entry = json.loads(line)
    assert entry["level"] == "ERROR"
    assert entry["logger"] == "adlens.test"
    assert entry["message"] == "Meta API error on GET /act_1/insights"
    assert entry["attempt"] == 3
    assert entry["status_code"] == 503
    assert entry["error_kind"] == "server"
    assert "entity_id" not in entry


def test_formatter_redacts_message_extras_and_traceback():
    try:
        raise RuntimeError("GET /me?access_token=SECRET failed")
    except RuntimeError:
        exc_info = sys.exc_info()

    record = make_record(
        "Network error: GET /me?access_token=SECRET",
        exc_info=exc_info,
        path="/me?access_token=SECRET",
    )

    line = JSONFormatter().format(record)

    assert "SECRET" not in line
    entry = json.loads(line)
    assert entry["message"] == "Network error: GET /me?access_token=***"
    assert entry["path"] == "/me?access_token=***"
    assert "RuntimeError" in entry["exception"]


def test_get_logger_is_namespaced_and_reuses_handler():
    first = get_logger("test.namespace")
    second = get_logger("test.namespace")

    assert first is second
    assert first.name == "adlens.test.namespace"
    assert len(first.handlers) == 1
    assert isinstance(first.handlers[0].formatter, JSONFormatter)
