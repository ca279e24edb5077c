r"""Incrementing wait strategy."""

from __future__ import annotations

__all__ = ["IncrementingWait"]

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryer.utils.duration import to_millis
from retryer.utils.validation import validate_non_negative
from retryer.wait.base import BaseWaitStrategy

if TYPE_CHECKING:
    from retryer.attempt import Attempt


class IncrementingWait(BaseWaitStrategy):
    """Incrementing wait strategy.

    Calculates delay as: initial + increment * (attempt_number - 1),
    floored at 0. The increment may be negative, in which case the delay
    shrinks until it reaches 0.

    Args:
        initial: The delay after the first attempt, in milliseconds.
        increment: The amount added for every further attempt, in
            milliseconds. May be negative.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.wait import IncrementingWait
        >>> wait = IncrementingWait(initial=100, increment=50)
        >>> [
        ...     wait.compute_sleep_time(Attempt.from_result(None, attempt_number=n, elapsed_ms=0))
        ...     for n in (1, 2, 3)
        ... ]
        [100, 150, 200]
        >>> wait = IncrementingWait(initial=100, increment=-60)
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=3, elapsed_ms=0))
        0

        ```
    """

    def __init__(self, initial: float | timedelta, increment: float | timedelta) -> None:
        initial = to_millis(initial)
        validate_non_negative(initial, "initial")

        self.initial = initial
        self.increment = to_millis(increment)

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        result = self.initial + self.increment * (attempt.attempt_number - 1)
        return max(result, 0)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(initial={self.initial}, increment={self.increment})"
