"""
structerr

Structured log attributes carried by an ambient context and by errors.

Responsibilities:
- Expose package version metadata.
- Re-export the attribute, context and error API.
"""

from structerr.attrs import BAD_KEY, Attr, GroupValue, LogValuer, group
from structerr.context import LogContext, bind_context, current_context, flatten, with_attrs
from structerr.errors import (
    Error,
    StructuredError,
    as_,
    chain,
    is_,
    new,
    origin_of,
    structured_error,
    unwrap,
    wrap,
)
from structerr.exceptions import LogValuerContractError, StructErrError
from structerr.normalize import attr, fields, parse_log_args
from structerr.origin import Origin, Stack

__all__ = [
    "__version__",
    # attributes
    "Attr",
    "BAD_KEY",
    "GroupValue",
    "LogValuer",
    "group",
    "attr",
    "fields",
    "parse_log_args",
    # context
    "LogContext",
    "bind_context",
    "current_context",
    "flatten",
    "with_attrs",
    # errors
    "Error",
    "StructuredError",
    "Origin",
    "Stack",
    "new",
    "wrap",
    "chain",
    "unwrap",
    "is_",
    "as_",
    "origin_of",
    "structured_error",
    "StructErrError",
    "LogValuerContractError",
]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Importing this package has no side effects; logging is configured explicitly via
# `structerr.observability.logging.configure_logging`.
