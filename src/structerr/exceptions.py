"""
structerr.exceptions

Failures raised by the library itself.

Responsibilities:
- Signal collaborator contract violations that must not be silently absorbed.
"""

from __future__ import annotations


class StructErrError(Exception):
    pass


class LogValuerContractError(StructErrError):
    """
    Raised when a LogValuer renders a non-group value where a group is required,
    or when an unnamed attribute is not a group.
    """


# --- Module Notes -----------------------------------------------------------
# These are programming errors in a collaborator, not runtime conditions; nothing in
# this package catches them.
