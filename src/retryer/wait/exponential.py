r"""Exponential wait strategy."""

from __future__ import annotations

__all__ = ["ExponentialWait"]

import math
import sys
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryer.utils.duration import to_millis
from retryer.wait.base import BaseWaitStrategy

if TYPE_CHECKING:
    from retryer.attempt import Attempt


class ExponentialWait(BaseWaitStrategy):
    """Exponential wait strategy.

    Calculates delay as: round(multiplier * 2 ** attempt_number), capped at
    max_wait. Values too large to represent are clamped to the cap.

    Args:
        multiplier: The factor applied to the power of two (default: 1).
        max_wait: Optional maximum delay in milliseconds, or a
            ``timedelta``. Without it the delay is only bounded by
            ``sys.maxsize``.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.wait import ExponentialWait
        >>> wait = ExponentialWait(multiplier=1, max_wait=100)
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=1, elapsed_ms=0))
        2
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=3, elapsed_ms=0))
        8
        >>> # Would be 1024, but capped
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=10, elapsed_ms=0))
        100

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

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        try:
            result = math.floor(self.multiplier * 2**attempt.attempt_number + 0.5)
        except OverflowError:
            return self._cap
        return min(result, self._cap)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(multiplier={self.multiplier}, max_wait={self.max_wait})"
