r"""Fixed and no-wait strategies."""

from __future__ import annotations

__all__ = ["NO_WAIT", "FixedWait", "NoWait"]

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryer.utils.duration import to_millis
from retryer.utils.validation import validate_non_negative
from retryer.wait.base import BaseWaitStrategy

if TYPE_CHECKING:
    from retryer.attempt import Attempt


class FixedWait(BaseWaitStrategy):
    """Fixed wait strategy.

    Returns the same delay for every attempt, regardless of the attempt
    number.

    Args:
        sleep_time: The delay in milliseconds, or a ``timedelta``.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.wait import FixedWait
        >>> wait = FixedWait(5000)
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=1, elapsed_ms=0))
        5000
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=9, elapsed_ms=0))
        5000

        ```
    """

    def __init__(self, sleep_time: float | timedelta) -> None:
        sleep_time = to_millis(sleep_time)
        validate_non_negative(sleep_time, "sleep_time")
        self.sleep_time = sleep_time

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:  # noqa: ARG002
        return self.sleep_time

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(sleep_time={self.sleep_time})"


class NoWait(FixedWait):
    """Wait strategy that never waits; the default of every retryer."""

    def __init__(self) -> None:
        super().__init__(0)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


NO_WAIT = NoWait()
