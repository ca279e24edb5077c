r"""JSON logging for retry sessions.

Every call of ``Retryer.call`` or ``AsyncRetryer.call`` runs inside a
session scope: the records logged while the session runs, by the loop,
by listeners or by the work itself, carry the same ``session_id``. The
loop also attaches ``attempt_number``, ``elapsed_ms`` and ``sleep_time``
to its records. These fields only show up when a formatter renders them,
such as ``StructuredFormatter``.

Structured output is opt-in:

```python
import logging
from retryer.utils.structured_logging import StructuredFormatter

handler = logging.StreamHandler()
handler.setFormatter(StructuredFormatter())

logger = logging.getLogger("retryer")
logger.addHandler(handler)
logger.setLevel(logging.DEBUG)
```

A session reuses the id already set in the current context, so a job id
can be propagated to every session started by the job:

```python
from retryer.utils.structured_logging import session_scope

with session_scope("sync-orders-42"):
    retryer.call(sync_orders)
    retryer.call(sync_invoices)
```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_session_id",
    "get_session_id",
    "log_structured",
    "session_scope",
    "set_session_id",
]

import contextvars
import json
import logging
import time
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "retryer_session_id", default=None
)

# Attributes every LogRecord has; anything else came through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def new_session_id() -> str:
    """Return a short random id for a retry session."""
    return uuid.uuid4().hex[:12]


def get_session_id() -> str | None:
    """Get the session id of the current context.

    Returns:
        The current session id, or None if not set.

    Example:
        ```pycon
        >>> from retryer.utils.structured_logging import get_session_id, set_session_id
        >>> set_session_id("job-123")
        >>> get_session_id()
        'job-123'

        ```
    """
    return _session_id.get()


def set_session_id(session_id: str) -> None:
    """Set the session id for the current context.

    Callers that run work on an executor copy the context into the
    worker, so records logged by the work carry the same id.
    """
    _session_id.set(session_id)


def clear_session_id() -> None:
    _session_id.set(None)


@contextmanager
def session_scope(session_id: str | None = None) -> Iterator[str]:
    """Run the block with a session id, then restore the previous one.

    Args:
        session_id: The id to use. If ``None``, the id of the current
            context is kept, or a new one is generated when there is
            none.

    Yields:
        The session id active inside the block.

    Example:
        ```pycon
        >>> from retryer.utils.structured_logging import get_session_id, session_scope
        >>> with session_scope("job-42") as session_id:
        ...     session_id, get_session_id()
        ...
        ('job-42', 'job-42')
        >>> get_session_id() is None
        True
        >>> with session_scope("outer"), session_scope() as session_id:
        ...     session_id
        ...
        'outer'

        ```
    """
    if session_id is None:
        session_id = _session_id.get() or new_session_id()
    token = _session_id.set(session_id)
    try:
        yield session_id
    finally:
        _session_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    The object holds ``timestamp`` (ISO 8601, UTC, milliseconds),
    ``level``, ``logger``, ``message``, ``session_id`` when a session is
    active, ``exception`` when the record carries one, the location
    fields ``module``, ``function`` and ``line``, and every field passed
    through ``extra``. Values that are not JSON serializable are rendered
    with ``repr``.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from retryer.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("Attempt failed", extra={"attempt_number": 2})
        >>> '"attempt_number": 2' in stream.getvalue()
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        session_id = get_session_id()
        if session_id is not None:
            log_data["session_id"] = session_id
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        log_data.update(
            module=record.module,
            function=record.funcName,
            line=record.lineno,
            thread=record.threadName,
            process=record.process,
        )
        log_data.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )
        return json.dumps(log_data, default=repr)

    def formatTime(  # noqa: N802
        self, record: logging.LogRecord, datefmt: str | None = None  # noqa: ARG002
    ) -> str:
        seconds = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{seconds}.{int(record.msecs):03d}Z"


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log ``message`` with ``extra`` as structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **extra: Fields rendered by ``StructuredFormatter``.
    """
    logger.log(level, message, extra=extra)
