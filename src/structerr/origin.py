"""
structerr.origin

Construction-site tracking for structured errors.

Responsibilities:
- Capture the source location (file, line) of a `new`/`wrap` call.
- Represent the ordered sequence of such locations accumulated across re-wraps.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Origin:
    file: str = ""
    line: int = 0

    def empty(self) -> bool:
        # An empty file name is the "could not be determined" sentinel.
        return self.file == ""

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


class Stack(tuple[Origin, ...]):
    """
    Append-only sequence of origins, oldest first.
    """

    __slots__ = ()

    def push(self, origin: Origin) -> Stack:
        return Stack((*self, origin))

    def __str__(self) -> str:
        return " ".join(str(o) for o in self)


def capture_origin(skip: int = 0) -> Origin:
    """
    Return the location of the frame `skip` levels above the caller.

    `capture_origin()` is the line that called it; `capture_origin(1)` is that
    function's caller, and so on.
    """

    try:
        frame = sys._getframe(skip + 1)
    except ValueError:
        # Call stack is shallower than requested.
        return Origin()
    return Origin(file=frame.f_code.co_filename, line=frame.f_lineno)


# --- Module Notes -----------------------------------------------------------
# `sys._getframe` is bounded-cost; avoid `inspect.stack()`, which reads source files.
