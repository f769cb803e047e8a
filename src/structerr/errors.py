"""
structerr.errors

Structured errors: exceptions that carry log attributes, an origin and a wrap stack.

Responsibilities:
- Build plain or structured errors (`new`) and wrap existing ones (`wrap`).
- Render an error as a log attribute group (`log_value`) and as verbose text.
- Expose chain traversal helpers (`chain`, `unwrap`, `is_`, `as_`).

Stack variant: the rendered error group carries the full wrap stack (space-joined
`file:line` entries, oldest first) under `stack`, and the verbose text ends with the
same value as `stack=...`. The first entry of the stack is always `origin`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Protocol, TypeVar, runtime_checkable

from structerr.attrs import Attr, GroupValue, sorted_attrs
from structerr.normalize import parse_log_args
from structerr.origin import Origin, Stack, capture_origin

ERROR_KEY = "error"
MSG_KEY = "msg"
STACK_KEY = "stack"

E = TypeVar("E", bound=BaseException)


@runtime_checkable
class SupportsStructuredError(Protocol):
    def structured_error(self) -> str: ...


class Error(Exception):
    """
    Plain chain link: a message plus an optional cause.

    Compares by value so that two independently built `new("m")` errors are equal.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self._cause = cause
        self.__cause__ = cause

    def unwrap(self) -> BaseException | None:
        return self._cause

    def __str__(self) -> str:
        if self._cause is None:
            return self.message
        return f"{self.message}: {self._cause}"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.message == other.message and self._cause == other._cause

    def __hash__(self) -> int:
        return hash((type(self), self.message))


class StructuredError(Exception):
    """
    Wraps an underlying chain link with attributes, an origin and a stack.

    Immutable after construction; identity (not attribute content) decides equality.
    """

    def __init__(
        self,
        err: BaseException,
        attrs: Mapping[str, Attr],
        origin: Origin,
        stack: Stack,
    ) -> None:
        super().__init__(str(err))
        self.err = err
        self.attrs: Mapping[str, Attr] = MappingProxyType(dict(attrs))
        self.origin = origin
        self.stack = stack
        self.__cause__ = err

    def unwrap(self) -> BaseException:
        return self.err

    def log_value(self) -> GroupValue:
        err_group = [Attr(MSG_KEY, str(self.err))]
        if not self.origin.empty():
            err_group.append(Attr(STACK_KEY, str(self.stack)))
        attrs = sorted_attrs([*self.attrs.values(), Attr(ERROR_KEY, GroupValue(tuple(err_group)))])
        return GroupValue(tuple(attrs))

    def structured_error(self) -> str:
        parts = [
            str(a)
            for a in sorted_attrs(self.attrs)
            if a.key not in (ERROR_KEY, MSG_KEY)
        ]
        if not parts:
            return str(self.err)
        if not self.origin.empty():
            parts.append(f"{STACK_KEY}={self.stack}")
        return f"{self.err}: {' '.join(parts)}"

    def __str__(self) -> str:
        return str(self.err)

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("+", "#"):
            return self.structured_error()
        return format(str(self), format_spec)


def _strip_reserved(key: str) -> bool:
    return key == ERROR_KEY


def new(message: str, /, *args: Any, **fields: Any) -> Error | StructuredError:
    """
    Return an error with `message` and optional log attributes.

    Without attributes the result is a plain `Error`, indistinguishable from any other
    `new(message)` under `is_`.
    """

    attrs = parse_log_args(args, fields, exclude=_strip_reserved)
    if not attrs:
        return Error(message)

    origin = capture_origin(1)
    return StructuredError(Error(message), attrs, origin, Stack((origin,)))


def wrap(
    err: BaseException | None, message: str, /, *args: Any, **fields: Any
) -> BaseException | None:
    """
    Wrap `err` with `message`, carrying over its attributes and adding new ones.

    Wrapping `None` is `None`. Re-wrapping a structured error keeps its origin and
    appends this call site to its stack.
    """

    if err is None:
        return None

    attrs = parse_log_args((err, *args), fields, exclude=_strip_reserved)
    link = Error(message, cause=err)
    if not attrs:
        return link

    inner = as_(err, StructuredError)
    if inner is not None:
        origin = inner.origin
        stack = inner.stack.push(capture_origin(1))
    else:
        origin = capture_origin(1)
        stack = Stack((origin,))

    return StructuredError(link, attrs, origin, stack)


def _next(err: BaseException) -> BaseException | None:
    if isinstance(err, (Error, StructuredError)):
        return err.unwrap()
    return err.__cause__


def chain(err: BaseException | None) -> Iterator[BaseException]:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = _next(err)


def unwrap(err: BaseException | None) -> BaseException | None:
    """
    Follow the cause chain to its end and return the root error.
    """

    root = err
    for root in chain(err):
        pass
    return root


def is_(err: BaseException | None, target: BaseException | None) -> bool:
    # Reports whether any error in err's chain matches target.
    if err is None or target is None:
        return err is target
    return any(e is target or e == target for e in chain(err))


def as_(err: BaseException | None, cls: type[E]) -> E | None:
    # Returns the first error in err's chain that is an instance of cls.
    for e in chain(err):
        if isinstance(e, cls):
            return e
    return None


def origin_of(err: BaseException | None) -> Origin:
    inner = as_(err, StructuredError)
    if inner is None:
        return Origin()
    return inner.origin


def structured_error(err: BaseException | None) -> str:
    if err is None:
        return ""
    if isinstance(err, SupportsStructuredError):
        return err.structured_error()
    return str(err)


# --- Module Notes -----------------------------------------------------------
# Attributes never change `str(err)`; only `structured_error()` and `log_value()` show
# them. Sinks obtain the attributes through the normalizer (rule: errors expand).
