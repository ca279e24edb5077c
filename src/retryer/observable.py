r"""Fan-out notification of attempts to registered listeners.

Every attempt of a session, successful or not, is published to the
retryer's observable right after the work returns and before the retry
decision is made. Listeners are plain callables taking the attempt; they
are meant for telemetry and logging and cannot influence the decision.

By default a listener that raises does not abort the retry session: the
error is logged and the remaining listeners are still notified. Pass
``propagate_errors=True`` to let listener errors escape instead.

Example:
    ```pycon
    >>> from retryer.attempt import Attempt
    >>> from retryer.observable import RetryObservable
    >>> seen = []
    >>> observable = RetryObservable()
    >>> observable.subscribe(lambda attempt: seen.append(attempt.attempt_number))
    >>> observable.publish(Attempt.from_result("ok", attempt_number=1, elapsed_ms=0))
    >>> seen
    [1]

    ```
"""

from __future__ import annotations

__all__ = ["LoggingListener", "RetryListener", "RetryObservable"]

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable

from retryer.utils.structured_logging import log_structured
from retryer.utils.validation import validate_not_none

if TYPE_CHECKING:
    from retryer.attempt import Attempt

RetryListener = Callable[["Attempt[Any]"], None]

logger: logging.Logger = logging.getLogger(__name__)


class RetryObservable:
    """Registry of listeners notified of every attempt.

    Registration is synchronized; publishing iterates over a snapshot of
    the listeners taken under the lock and calls them without holding it,
    so listeners may subscribe or unsubscribe while being notified.
    Listeners are notified in registration order, and registering the
    same listener twice has no effect.

    Args:
        propagate_errors: If ``True``, an exception raised by a listener
            stops the publication and propagates to the retry loop.
            Defaults to ``False``: the error is logged at WARNING level
            and the next listener is notified.
    """

    def __init__(self, propagate_errors: bool = False) -> None:
        self.propagate_errors = propagate_errors
        self._listeners: list[RetryListener] = []
        self._lock = threading.Lock()

    @property
    def listeners(self) -> tuple[RetryListener, ...]:
        with self._lock:
            return tuple(self._listeners)

    def subscribe(self, listener: RetryListener) -> None:
        """Register a listener.

        Raises:
            ConfigurationError: If ``listener`` is ``None``.
        """
        validate_not_none(listener, "listener")
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: RetryListener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, attempt: Attempt[Any]) -> None:
        """Notify every registered listener of ``attempt``."""
        with self._lock:
            listeners = tuple(self._listeners)
        for listener in listeners:
            try:
                listener(attempt)
            except Exception:
                if self.propagate_errors:
                    raise
                logger.warning(
                    f"Listener {listener!r} failed on attempt {attempt.attempt_number}",
                    exc_info=True,
                )

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(listeners={len(self)}, "
            f"propagate_errors={self.propagate_errors})"
        )


class LoggingListener:
    """Listener logging every attempt with structured fields.

    Each record carries ``attempt_number``, ``elapsed_ms`` and
    ``outcome`` (``"result"`` or the failure's type name) as extra
    fields, which ``StructuredFormatter`` renders as JSON keys.

    Args:
        logger: The logger to write to. Defaults to this module's logger.
        level: The level of the records (default: DEBUG).
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.level = level

    def __call__(self, attempt: Attempt[Any]) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        if attempt.has_failure():
            outcome = type(attempt.cause).__name__
            message = f"Attempt {attempt.attempt_number} failed with {outcome}: {attempt.cause}"
        else:
            outcome = "result"
            message = f"Attempt {attempt.attempt_number} returned {attempt.value!r}"
        log_structured(
            self.logger,
            self.level,
            message,
            attempt_number=attempt.attempt_number,
            elapsed_ms=attempt.elapsed_ms,
            outcome=outcome,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(logger={self.logger.name!r}, level={self.level})"
