r"""Utility functions shared by the retry engine.

This package provides parameter validation helpers, the conversion of
duration arguments to milliseconds, and opt-in structured logging.
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_session_id",
    "get_session_id",
    "log_structured",
    "session_scope",
    "set_session_id",
    "to_millis",
    "validate_exception_types",
    "validate_non_negative",
    "validate_not_none",
    "validate_positive",
]

from retryer.utils.duration import to_millis
from retryer.utils.structured_logging import (
    StructuredFormatter,
    clear_session_id,
    get_session_id,
    log_structured,
    session_scope,
    set_session_id,
)
from retryer.utils.validation import (
    validate_exception_types,
    validate_non_negative,
    validate_not_none,
    validate_positive,
)
