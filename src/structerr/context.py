"""
structerr.context

Immutable propagation context carrying log attributes down a call tree.

Responsibilities:
- Extend a context with new attributes without mutating the parent.
- Flatten a context chain into a deterministic, name-sorted attribute list.
- Hold the ambient context in a `ContextVar` so descendants see it implicitly.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from structerr.attrs import Attr, sorted_attrs


@dataclass(frozen=True, slots=True, eq=False)
class LogContext:
    """
    Persistent context node: own attributes plus a link to the parent.

    Children share the parent node instead of copying it.
    """

    parent: LogContext | None = None
    attrs: Mapping[str, Attr] = field(default_factory=lambda: MappingProxyType({}))

    def with_attrs(self, /, *args: Any, **fields: Any) -> LogContext:
        # normalize imports this module; resolved at call time.
        from structerr.normalize import parse_log_args

        own = parse_log_args(args, fields)
        if not own:
            return self
        return LogContext(parent=self, attrs=MappingProxyType(own))

    def as_dict(self) -> dict[str, Attr]:
        merged: dict[str, Attr] = {}
        # Root first so that descendants override ancestors.
        for node in reversed(list(self._lineage())):
            merged.update(node.attrs)
        return merged

    def flatten(self) -> list[Attr]:
        return sorted_attrs(self.as_dict())

    def _lineage(self) -> Iterator[LogContext]:
        node: LogContext | None = self
        while node is not None:
            yield node
            node = node.parent


ROOT = LogContext()


def with_attrs(parent: LogContext | None, /, *args: Any, **fields: Any) -> LogContext:
    return (parent or ROOT).with_attrs(*args, **fields)


def flatten(ctx: LogContext | None) -> list[Attr]:
    if ctx is None:
        return []
    return ctx.flatten()


_current: ContextVar[LogContext] = ContextVar("structerr_log_context", default=ROOT)


def current_context() -> LogContext:
    return _current.get()


@contextmanager
def bind_context(*args: Any, **fields: Any) -> Iterator[LogContext]:
    """
    Extend the ambient context for the duration of a `with` block.

        with bind_context(request_id="r1") as ctx:
            ...
    """

    ctx = _current.get().with_attrs(*args, **fields)
    token = _current.set(ctx)
    try:
        yield ctx
    finally:
        # Restore even on error so bound attributes never leak to the caller.
        _current.reset(token)


# --- Module Notes -----------------------------------------------------------
# `structerr.observability.logging.merge_log_context` reads `current_context()` on
# every log event, mirroring structlog's own contextvars merge.
