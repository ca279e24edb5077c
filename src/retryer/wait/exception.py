r"""Wait strategy conditioned on the type of the failure."""

from __future__ import annotations

__all__ = ["ExceptionWait"]

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from retryer.utils.duration import to_millis
from retryer.utils.validation import validate_exception_types, validate_not_none
from retryer.wait.base import BaseWaitStrategy

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import timedelta

    from retryer.attempt import Attempt

E = TypeVar("E", bound=BaseException)


class ExceptionWait(BaseWaitStrategy, Generic[E]):
    """Wait strategy computed from the failure of the attempt.

    When the attempt failed with an instance of ``exception_type``, the
    delay is ``function(cause)``. Any other attempt contributes 0, which
    makes this strategy useful inside a ``CompositeWait``.

    Args:
        exception_type: The exception type that activates the strategy.
        function: Computes the delay in milliseconds (or a ``timedelta``)
            from the matching exception. Negative values are floored at 0.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.wait import ExceptionWait
        >>> wait = ExceptionWait(TimeoutError, lambda exc: 250)
        >>> wait.compute_sleep_time(
        ...     Attempt.from_failure(TimeoutError(), attempt_number=1, elapsed_ms=0)
        ... )
        250
        >>> wait.compute_sleep_time(Attempt.from_failure(KeyError(), attempt_number=1, elapsed_ms=0))
        0

        ```
    """

    def __init__(
        self, exception_type: type[E], function: Callable[[E], float | timedelta]
    ) -> None:
        validate_exception_types(exception_type, "exception_type")
        validate_not_none(function, "function")

        self.exception_type = exception_type
        self.function = function

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        if attempt.has_failure() and isinstance(attempt.cause, self.exception_type):
            return max(to_millis(self.function(attempt.cause)), 0)
        return 0

    def __repr__(self) -> str:
        name = getattr(self.exception_type, "__name__", repr(self.exception_type))
        return f"{self.__class__.__name__}(exception_type={name})"
