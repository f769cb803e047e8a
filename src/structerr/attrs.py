"""
structerr.attrs

Attribute primitives shared by the normalizer, the propagation context and errors.

Responsibilities:
- Define the `Attr` name/value pair and the `GroupValue` nested group.
- Define the optional `LogValuer` self-rendering capability.
- Render attributes into plain, JSON-friendly Python values for log sinks.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from structerr.exceptions import LogValuerContractError

BAD_KEY = "!BADKEY"

# LogValuer chains longer than this are treated as resolved (guards self-referencing valuers).
_MAX_RESOLVE_DEPTH = 100


@runtime_checkable
class LogValuer(Protocol):
    """
    Any value that knows how to render itself for logging.

    Errors and context-like objects return a `GroupValue`; other values may return
    anything renderable.
    """

    def log_value(self) -> Any: ...


@dataclass(frozen=True, slots=True)
class GroupValue:
    attrs: tuple[Attr, ...] = ()

    def __len__(self) -> int:
        return len(self.attrs)

    def __iter__(self):
        return iter(self.attrs)

    def __str__(self) -> str:
        return "[" + " ".join(str(a) for a in self.attrs) + "]"


@dataclass(frozen=True, slots=True)
class Attr:
    key: str
    value: Any

    def is_group(self) -> bool:
        return isinstance(self.value, GroupValue)

    def is_empty_group(self) -> bool:
        return isinstance(self.value, GroupValue) and len(self.value) == 0

    def __str__(self) -> str:
        return f"{self.key}={resolve(self.value)}"


def group(key: str, /, *attrs: Attr, **fields: Any) -> Attr:
    """
    Build a named group attribute, e.g. `group("db", query="SELECT ...")`.
    """

    members = [*attrs, *(Attr(k, v) for k, v in fields.items())]
    return Attr(key, GroupValue(tuple(members)))


def resolve(value: Any) -> Any:
    # Unwrap deferred renderings until a concrete value appears.
    for _ in range(_MAX_RESOLVE_DEPTH):
        if not isinstance(value, LogValuer):
            break
        value = value.log_value()
    return value


def sorted_attrs(attrs: Mapping[str, Attr] | Iterable[Attr]) -> list[Attr]:
    values = attrs.values() if isinstance(attrs, Mapping) else attrs
    return sorted(values, key=lambda a: a.key)


def render_value(value: Any) -> Any:
    """
    Convert an attribute value into plain data (groups become dicts).
    """

    value = resolve(value)
    if isinstance(value, GroupValue):
        return render_attrs(value.attrs)
    if isinstance(value, Attr):
        return render_attrs([value])
    return value


def render_attrs(attrs: Iterable[Attr]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for a in attrs:
        value = resolve(a.value)
        if isinstance(value, GroupValue):
            if len(value) == 0:
                continue
            if a.key == "":
                # Unnamed groups are inlined into the enclosing level.
                out.update(render_attrs(value.attrs))
                continue
        if a.key == "":
            raise LogValuerContractError(f"invalid attr, non-group value without a key: {value!r}")
        out[a.key] = render_value(value)
    return out


# --- Module Notes -----------------------------------------------------------
# Attribute storage is a plain dict keyed by name; anything that renders output must
# go through `sorted_attrs` so the result never depends on insertion order.
