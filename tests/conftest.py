"""
tests.conftest

Shared fixtures and LogValuer test doubles.

Responsibilities:
- Provide LogValuer implementations mirroring typical application objects.
- Capture structured log output and restore global logging state afterwards.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from dataclasses import dataclass

import pytest
import structlog

from structerr.attrs import Attr, GroupValue, group
from structerr.observability.logging import configure_logging


@dataclass(frozen=True)
class AppVersion:
    major: int
    minor: int
    patch: int

    def log_value(self) -> GroupValue:
        return GroupValue(
            (Attr("major", self.major), Attr("minor", self.minor), Attr("patch", self.patch))
        )


@dataclass(frozen=True)
class Application:
    name: str
    version: AppVersion
    build: str

    def log_value(self) -> GroupValue:
        return GroupValue(
            (
                Attr("name", self.name),
                Attr("version", self.version),
                group("build", hash=self.build),
            )
        )


@pytest.fixture
def app() -> Application:
    return Application(name="vovan", version=AppVersion(1, 7, 2), build="20b8c3f")


@pytest.fixture
def log_output() -> Iterator[io.StringIO]:
    buf = io.StringIO()
    configure_logging(level="INFO", output=buf)
    try:
        yield buf
    finally:
        structlog.reset_defaults()
        root = logging.getLogger()
        for handler in list(root.handlers):
            if getattr(handler, "stream", None) is buf:
                root.removeHandler(handler)


# --- Module Notes -----------------------------------------------------------
# LogValuers here are plain classes; the capability is duck-typed via `log_value()`.
