"""Tests for the JSON log formatter."""

from __future__ import annotations

import json
import logging

from metricslab.lib.logger import JsonFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("metricslab.test", logging.WARNING, __file__, 1, "limit %s", ("hit",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extras() -> None:
    payload = json.loads(JsonFormatter().format(_record(metric="requests", limit=3)))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "metricslab.test"
    assert payload["message"] == "limit hit"
    assert payload["metric"] == "requests"
    assert payload["limit"] == 3
    assert "timestamp" in payload


def test_formatter_falls_back_to_repr_for_unserializable_extras() -> None:
    payload = json.loads(JsonFormatter().format(_record(handle=object())))

    assert payload["handle"].startswith("<object object")


def test_configure_logging_adjusts_level() -> None:
    root = logging.getLogger()
    original = root.level
    try:
        configure_logging("warning")
        assert root.level == logging.WARNING
        assert sum(isinstance(h.formatter, JsonFormatter) for h in root.handlers) <= 1
    finally:
        root.setLevel(original)
