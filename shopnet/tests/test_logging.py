"""Tests for structured logging helpers."""

import json
import logging

from shopnet.core.logging import (
    JsonFormatter,
    PrettyFormatter,
    latency_bucket_ms,
    log_event,
    request_id_ctx_var,
)


def _record(msg="shop.check.resolved", **extra):
    record = logging.LogRecord("shopnet", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_carries_context_fields():
    line = JsonFormatter().format(_record(request_id="rid-1", shop_id=7, decision="go_to_dashboard"))
    payload = json.loads(line)
    assert payload["message"] == "shop.check.resolved"
    assert payload["request_id"] == "rid-1"
    assert payload["shop_id"] == 7
    assert payload["decision"] == "go_to_dashboard"
    assert payload["timestamp"].endswith("Z")


def test_pretty_formatter_includes_request_id():
    line = PrettyFormatter().format(_record(request_id="rid-2"))
    assert "[rid=rid-2]" in line
    assert "[shopnet]" in line


def test_latency_buckets():
    assert latency_bucket_ms(None) == "unknown"
    assert latency_bucket_ms(5) == "<10ms"
    assert latency_bucket_ms(250) == "100-500ms"
    assert latency_bucket_ms(1500) == ">=1000ms"


def test_log_event_uses_context_request_id_and_truncates(caplog):
    token = request_id_ctx_var.set("ctx-rid")
    try:
        with caplog.at_level(logging.INFO, logger="shopnet"):
            log_event("warning", "shop.check.failed", error_code="shop_unreachable", extra={"error_message": "x" * 600})
    finally:
        request_id_ctx_var.reset(token)
    record = [r for r in caplog.records if r.getMessage() == "shop.check.failed"][-1]
    assert record.levelno == logging.WARNING
    assert record.request_id == "ctx-rid"
    assert record.error_code == "shop_unreachable"
    assert record.error_message.endswith("...<truncated>")


def test_log_event_only_carries_set_context(caplog):
    with caplog.at_level(logging.INFO, logger="shopnet"):
        log_event("info", "shop.check.resolved", shop_id=7, event_type="shop.check")
    record = [r for r in caplog.records if r.getMessage() == "shop.check.resolved"][-1]
    assert record.shop_id == 7
    assert not hasattr(record, "user_id")
    assert "user_id" not in json.loads(JsonFormatter().format(record))
