"""Tests for the JSON log line format."""

import json
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app.core.logging import JsonLogFormatter, RequestContextFilter
from app.middlewares import principal_ctx_var, request_id_ctx_var


def _record(level=logging.INFO, msg="timer.started", extra_data=None, exc_info=None):
    record = logging.LogRecord("app.services.timers", level, __file__, 10, msg, None, exc_info)
    if extra_data is not None:
        record.extra_data = extra_data
    return record


def test_record_carries_request_context_and_extra_fields():
    formatter = JsonLogFormatter("TimeTracker")
    rid = request_id_ctx_var.set("req-1")
    who = principal_ctx_var.set("user-9")
    try:
        record = _record(extra_data={"timer_id": "t1"})
        RequestContextFilter().filter(record)
    finally:
        request_id_ctx_var.reset(rid)
        principal_ctx_var.reset(who)

    line = json.loads(formatter.format(record))

    assert line["event"] == "timer.started"
    assert line["level"] == "info"
    assert line["service"] == "TimeTracker"
    assert line["request_id"] == "req-1"
    assert line["principal"] == "user-9"
    assert line["timer_id"] == "t1"
    assert line["ts"].endswith("Z")
    assert "where" not in line


def test_errors_include_location_and_traceback():
    try:
        raise OSError("disk gone")
    except OSError:
        record = _record(level=logging.ERROR, msg="storage.failure", exc_info=sys.exc_info())
    RequestContextFilter().filter(record)

    line = json.loads(JsonLogFormatter("TimeTracker").format(record))

    assert line["error"] == "OSError"
    assert "disk gone" in line["traceback"]
    assert line["where"].endswith(":10")
    assert "request_id" not in line
