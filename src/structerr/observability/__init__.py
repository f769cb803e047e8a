"""
structerr.observability

Log sink integration.

Responsibilities:
- Structured logging configuration (structlog JSON lines).
- Rendering of attributes, contexts and structured errors inside log events.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The core modules never import from here; this package is the consumer side.
