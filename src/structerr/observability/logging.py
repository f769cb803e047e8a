"""
structerr.observability.logging

Structured logging configuration and processors.

Responsibilities:
- Configure `structlog` for JSON lines on a chosen stream with a minimum level.
- Merge the ambient `LogContext` into every log event.
- Render `Attr`, `GroupValue`, `LogValuer` and structured-error values as plain data.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from structerr.attrs import Attr, GroupValue, LogValuer, render_attrs, render_value
from structerr.context import LogContext, current_context
from structerr.settings import Settings


def configure_logging(
    *,
    level: str = "INFO",
    output: TextIO | None = None,
    service_name: str = "",
) -> None:
    """
    Structured JSON logs, INFO and above on stderr unless told otherwise.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=output if output is not None else sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    # structlog processors run on each log event; keep this list focused and stable.
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        merge_log_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if service_name:
        processors.append(_add_service_name(service_name))
    processors += [
        render_log_values,
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Reconfiguration (tests, re-init) must take effect for existing loggers.
        cache_logger_on_first_use=False,
    )


def configure_logging_from_settings(settings: Settings) -> None:
    configure_logging(
        level=settings.log_level,
        output=sys.stdout if settings.log_output == "stdout" else sys.stderr,
        service_name=settings.service_name,
    )


def merge_log_context(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    # Ambient attributes never override fields passed explicitly to the log call.
    for key, value in render_attrs(current_context().flatten()).items():
        event_dict.setdefault(key, value)
    return event_dict


def render_log_values(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Turn attribute-aware values into plain data.

    - `Attr` / `LogContext` values under the `_` key are expanded into the event.
    - `GroupValue`, `Attr` and `LogValuer` values (structured errors included)
      elsewhere are rendered in place.
    """

    inline = event_dict.get("_")
    if isinstance(inline, (Attr, LogContext)):
        del event_dict["_"]
        attrs = inline.flatten() if isinstance(inline, LogContext) else [inline]
        for key, value in render_attrs(attrs).items():
            event_dict.setdefault(key, value)

    for key, value in list(event_dict.items()):
        if isinstance(value, (Attr, GroupValue, LogValuer)):
            event_dict[key] = render_value(value)
    return event_dict


def _add_service_name(service_name: str):
    # Adds a stable "service" field for log routing/aggregation across environments.
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Typical top-level use:
#     log.error("request failed", **fields(current_context(), err))
# `fields` already renders to plain data, so `render_log_values` is a no-op there.
