"""
structerr.normalize

Argument normalizer: turns loosely typed variadic log arguments into one attribute set.

Responsibilities:
- Apply the key/value, context, error, attribute and fallback rules left to right.
- Merge the produced attributes with last-write-wins semantics.
- Provide `attr`/`fields` helpers for handing normalized attributes to a logger.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any

from structerr.attrs import BAD_KEY, Attr, GroupValue, LogValuer, render_attrs, sorted_attrs
from structerr.context import LogContext, flatten
from structerr.exceptions import LogValuerContractError


def parse_log_args(
    args: Sequence[Any],
    fields: dict[str, Any] | None = None,
    *,
    exclude: Callable[[str], bool] | None = None,
) -> dict[str, Attr]:
    """
    Normalize `args` (then keyword `fields`) into a name-keyed attribute set.

    Later items override earlier ones on name collision. `exclude` drops attributes
    by name after expansion (used to strip reserved names).
    """

    out: dict[str, Attr] = {}
    keyword = [Attr(k, v) for k, v in (fields or {}).items()]

    for a in [*_expand(list(args)), *keyword]:
        if a.is_empty_group():
            continue
        if a.key == "":
            if not a.is_group():
                raise LogValuerContractError(
                    f"invalid attr, non-group value without a key: {a.value!r}"
                )
            members: tuple[Attr, ...] = a.value.attrs
        else:
            members = (a,)
        for m in members:
            if exclude is not None and exclude(m.key):
                continue
            out[m.key] = m
    return out


def _expand(items: list[Any]) -> Iterator[Attr]:
    i = 0
    while i < len(items):
        x = items[i]
        i += 1
        if isinstance(x, str):
            if i == len(items):
                # Dangling key: keep it visible instead of failing the call.
                yield Attr(BAD_KEY, x)
            else:
                yield Attr(x, items[i])
                i += 1
        elif isinstance(x, LogContext):
            yield from flatten(x)
        elif isinstance(x, BaseException):
            yield from attrs_from_error(x)
        elif isinstance(x, Attr):
            yield x
        else:
            yield Attr(BAD_KEY, x)


def attrs_from_error(err: BaseException) -> tuple[Attr, ...]:
    if not isinstance(err, LogValuer):
        return ()
    value = err.log_value()
    if not isinstance(value, GroupValue):
        raise LogValuerContractError(f"non-group value in error: {value!r}")
    return value.attrs


def attr(*args: Any, **fields: Any) -> Attr:
    """
    Collapse log arguments into a single attribute.

    Returns the attribute itself when there is exactly one, otherwise an unnamed group
    that the normalizer (and `render_attrs`) inline into the enclosing level.
    """

    attrs = sorted_attrs(parse_log_args(args, fields))
    if not attrs:
        return Attr("", GroupValue())
    if len(attrs) == 1:
        return attrs[0]
    return Attr("", GroupValue(tuple(attrs)))


def fields(*args: Any, **kwargs: Any) -> dict[str, Any]:
    """
    Normalize log arguments into plain keyword fields for a structlog call.

        log.error("lookup failed", **fields(current_context(), err))
    """

    return render_attrs(sorted_attrs(parse_log_args(args, kwargs)))


# --- Module Notes -----------------------------------------------------------
# The normalizer never reports failure for malformed input; only a broken LogValuer
# (non-group rendering where a group is required) escalates.
