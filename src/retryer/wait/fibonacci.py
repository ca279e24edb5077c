r"""Fibonacci wait strategy."""

from __future__ import annotations

__all__ = ["FibonacciWait"]

import math
import sys
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryer.utils.duration import to_millis
from retryer.wait.base import BaseWaitStrategy

if TYPE_CHECKING:
    from retryer.attempt import Attempt


class FibonacciWait(BaseWaitStrategy):
    """Fibonacci wait strategy.

    Calculates delay as: multiplier * fibonacci(attempt_number), capped at
    max_wait, where fibonacci(0) = 0 and fibonacci(1) = 1.

    The Fibonacci sequence (1, 1, 2, 3, 5, 8, 13, ...) grows more gently
    than powers of two, which makes this strategy a middle ground between
    incrementing and exponential waits.

    Args:
        multiplier: The factor applied to the Fibonacci number (default: 1).
        max_wait: Optional maximum delay in milliseconds, or a
            ``timedelta``. Without it the delay is only bounded by
            ``sys.maxsize``.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.wait import FibonacciWait
        >>> wait = FibonacciWait(multiplier=1, max_wait=1000)
        >>> [
        ...     wait.compute_sleep_time(Attempt.from_result(None, attempt_number=n, elapsed_ms=0))
        ...     for n in range(1, 7)
        ... ]
        [1, 1, 2, 3, 5, 8]
        >>> # fib(20) = 6765, capped
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=20, elapsed_ms=0))
        1000

        ```
    """

    def __init__(self, multiplier: float = 1, max_wait: float | timedelta | None = None) -> None:
        if multiplier <= 0:
            msg = f"multiplier must be > 0, got {multiplier}"
            raise ValueError(msg)
        if max_wait is not None:
            max_wait = to_millis(max_wait)
            if max_wait < 0:
                msg = f"max_wait must be >= 0, got {max_wait}"
                raise ValueError(msg)
            if multiplier >= max_wait:
                msg = f"multiplier must be < max_wait, got multiplier={multiplier} and max_wait={max_wait}"
                raise ValueError(msg)

        self.multiplier = multiplier
        self.max_wait = max_wait
        self._cap = sys.maxsize if max_wait is None else max_wait

    @staticmethod
    def _fibonacci(n: int) -> int:
        """Calculate the nth Fibonacci number.

        Args:
            n: The position in the sequence, with fibonacci(0) = 0.

        Returns:
            The nth Fibonacci number.
        """
        if n <= 0:
            return 0
        # Iterative approach, the recursive one is exponential
        a, b = 0, 1
        for _ in range(n - 1):
            a, b = b, a + b
        return b

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        try:
            result = math.floor(self.multiplier * self._fibonacci(attempt.attempt_number) + 0.5)
        except OverflowError:
            return self._cap
        if result > self._cap or result < 0:
            return self._cap
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(multiplier={self.multiplier}, max_wait={self.max_wait})"
