r"""Exception types raised by the retry engine.

All errors raised by the package derive from ``RetryerError`` so callers
can catch them in one place. Failures raised by the unit of work itself
are never wrapped in these types while a session is running; they are
captured into failure attempts and only surface through
``RetryExhaustedError.cause`` or by being re-raised as-is.
"""

from __future__ import annotations

__all__ = [
    "AttemptStateError",
    "AttemptTimeoutError",
    "BlockInterruptedError",
    "ConfigurationError",
    "RetryExhaustedError",
    "RetryerError",
]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from retryer.attempt import Attempt


class RetryerError(Exception):
    """Base class for all errors raised by the retry engine."""


class AttemptStateError(RetryerError, RuntimeError):
    """Raised when the wrong side of an attempt is queried.

    Reading ``value`` on a failure attempt or ``cause`` on a result
    attempt is a programming error and is never retried.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> Attempt.from_failure(ValueError("boom"), attempt_number=1, elapsed_ms=0).value
        Traceback (most recent call last):
            ...
        retryer.exceptions.AttemptStateError: attempt 1 has a failure, not a result

        ```
    """


class AttemptTimeoutError(RetryerError, TimeoutError):
    """Raised by a time-limited caller when the work exceeds its budget.

    Inside the retry loop it becomes a failure attempt, so rules and
    strategies can react to it like any other failure.

    Args:
        timeout_ms: The time budget in milliseconds that was exceeded.
    """

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"attempt did not complete within {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class BlockInterruptedError(RetryerError):
    """Raised by a block strategy when its suspension is interrupted."""


class ConfigurationError(RetryerError, ValueError):
    """Raised when a retryer is misconfigured.

    Missing callers, duplicate single-valued strategies and ``None``
    arguments fail fast, before any work is invoked.
    """


class RetryExhaustedError(RetryerError):
    """Terminal error of a retry session.

    Raised when the stop strategy fires or when the suspension between
    two attempts is interrupted. The last attempt is attached so callers
    can inspect the final result or cause, the attempt count and the
    elapsed time.

    Args:
        last_attempt: The attempt evaluated when the session ended.
        message: Optional message overriding the default one.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.exceptions import RetryExhaustedError
        >>> error = RetryExhaustedError(Attempt.from_result(5, attempt_number=2, elapsed_ms=10))
        >>> error.attempt_number
        2
        >>> str(error)
        'Retrying failed to complete successfully after 2 attempts.'

        ```
    """

    def __init__(self, last_attempt: Attempt[Any], message: str | None = None) -> None:
        if message is None:
            message = (
                "Retrying failed to complete successfully after "
                f"{last_attempt.attempt_number} attempts."
            )
        super().__init__(message)
        self.last_attempt = last_attempt

    @property
    def attempt_number(self) -> int:
        """The number of attempts made before the session ended."""
        return self.last_attempt.attempt_number

    @property
    def elapsed_ms(self) -> int:
        """Milliseconds elapsed between the first and the last attempt."""
        return self.last_attempt.elapsed_ms

    @property
    def cause(self) -> BaseException | None:
        """The failure of the last attempt, or ``None`` if it had a result."""
        if self.last_attempt.has_failure():
            return self.last_attempt.cause
        return None
