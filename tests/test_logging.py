"""
tests.test_logging

Log sink integration: JSON output, ambient context merge and error rendering.

Responsibilities:
- Exercise the end-to-end flow from bound context through wrapped errors to one log line.
"""

from __future__ import annotations

import json
import sys

from structerr.attrs import group
from structerr.context import bind_context, current_context, with_attrs
from structerr.errors import StructuredError, new, wrap
from structerr.normalize import attr, fields
from structerr.observability import logging as obs_logging
from structerr.observability.logging import get_logger
from structerr.settings import Settings


def _lines(buf) -> list[dict]:
    return [json.loads(line) for line in buf.getvalue().splitlines() if line.strip()]


def test_json_line_with_explicit_fields(log_output) -> None:
    get_logger("t").info("hello", **fields("a", 1, group("g", x="y")))

    (rec,) = _lines(log_output)
    assert rec["event"] == "hello"
    assert rec["level"] == "info"
    assert rec["logger"] == "t"
    assert rec["a"] == 1
    assert rec["g"] == {"x": "y"}
    assert "timestamp" in rec


def test_below_threshold_is_dropped(log_output) -> None:
    get_logger("t").debug("quiet")
    assert _lines(log_output) == []


def test_ambient_context_is_merged(log_output) -> None:
    with bind_context(request_id="r1"):
        get_logger("t").info("inside", request_id="explicit")
        with bind_context(user_id="u1"):
            get_logger("t").info("nested")
    get_logger("t").info("outside")

    inside, nested, outside = _lines(log_output)
    assert inside["request_id"] == "explicit"
    assert nested["request_id"] == "r1"
    assert nested["user_id"] == "u1"
    assert "request_id" not in outside


def test_attribute_values_are_rendered(log_output, app) -> None:
    ctx = with_attrs(None, "application", app)
    get_logger("t").info("values", _=ctx, extra=attr("k", "v"), err=new("boom", a=1))

    (rec,) = _lines(log_output)
    assert rec["application"]["version"] == {"major": 1, "minor": 7, "patch": 2}
    assert rec["extra"] == {"k": "v"}
    assert rec["err"]["a"] == 1
    assert rec["err"]["error"]["msg"] == "boom"
    assert "_" not in rec


def test_end_to_end_request_failure(log_output) -> None:
    db_err = LookupError("sql: no rows in result set")

    def query_user() -> None:
        # C: fails and attaches its own attributes.
        raise wrap(db_err, "lookup failed", group("db", query="SELECT first_name FROM users WHERE id=$1"))

    def handle_user() -> None:
        # B: child extends the context.
        with bind_context(user_id="u1"):
            try:
                query_user()
            except StructuredError as err:
                get_logger("t").error("request failed", **fields(current_context(), err))

    # A: root of the call tree.
    with bind_context(request_id="r1"):
        handle_user()

    (rec,) = _lines(log_output)
    user_keys = set(rec) - {"event", "level", "logger", "timestamp"}
    assert user_keys == {"request_id", "user_id", "db", "error"}
    assert rec["db"] == {"query": "SELECT first_name FROM users WHERE id=$1"}
    assert rec["error"]["msg"] == "lookup failed: sql: no rows in result set"
    assert rec["error"]["stack"].startswith(__file__ + ":")


def test_service_name_processor(log_output) -> None:
    obs_logging.configure_logging(output=log_output, service_name="billing")
    get_logger("t").warning("svc")

    (rec,) = _lines(log_output)
    assert rec["service"] == "billing"
    assert rec["level"] == "warning"


def test_configure_from_settings(monkeypatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(obs_logging, "configure_logging", lambda **kw: calls.append(kw))

    obs_logging.configure_logging_from_settings(
        Settings(log_level="DEBUG", log_output="stdout", service_name="svc")
    )

    assert calls == [{"level": "DEBUG", "output": sys.stdout, "service_name": "svc"}]


# --- Module Notes -----------------------------------------------------------
# `log_output` reconfigures structlog per test; see conftest for teardown.
