r"""Stop strategies deciding when a retry session gives up.

A stop strategy is consulted only after the retry predicate rejected an
attempt. When it returns ``True`` the session ends with a
``RetryExhaustedError`` carrying the last attempt.
"""

from __future__ import annotations

__all__ = [
    "NEVER_STOP",
    "BaseStopStrategy",
    "NeverStop",
    "StopAfterAny",
    "StopAfterAttempt",
    "StopAfterDelay",
]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from retryer.utils.duration import to_millis
from retryer.utils.validation import validate_non_negative

if TYPE_CHECKING:
    from datetime import timedelta

    from retryer.attempt import Attempt


class BaseStopStrategy(ABC):
    """Abstract base class for stop strategies."""

    @abstractmethod
    def should_stop(self, attempt: Attempt[Any]) -> bool:
        """Decide whether the session must end after ``attempt``.

        Args:
            attempt: The attempt that was just rejected.

        Returns:
            ``True`` to stop retrying, ``False`` to continue.
        """


class NeverStop(BaseStopStrategy):
    """Stop strategy that never stops; the default of every retryer."""

    def should_stop(self, attempt: Attempt[Any]) -> bool:  # noqa: ARG002
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class StopAfterAttempt(BaseStopStrategy):
    """Stop once a number of attempts has been made.

    Args:
        max_attempt_number: The number of attempts after which to stop.
            Must be >= 1.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.stop import StopAfterAttempt
        >>> stop = StopAfterAttempt(3)
        >>> [
        ...     stop.should_stop(Attempt.from_result(None, attempt_number=n, elapsed_ms=0))
        ...     for n in (1, 2, 3, 4)
        ... ]
        [False, False, True, True]

        ```
    """

    def __init__(self, max_attempt_number: int) -> None:
        if max_attempt_number < 1:
            msg = f"max_attempt_number must be >= 1, got {max_attempt_number}"
            raise ValueError(msg)
        self.max_attempt_number = max_attempt_number

    def should_stop(self, attempt: Attempt[Any]) -> bool:
        return attempt.attempt_number >= self.max_attempt_number

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(max_attempt_number={self.max_attempt_number})"


class StopAfterDelay(BaseStopStrategy):
    """Stop once a time budget since the first attempt has been used.

    Args:
        max_delay: The budget in milliseconds, or a ``timedelta``.
            Must be >= 0.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from retryer.attempt import Attempt
        >>> from retryer.stop import StopAfterDelay
        >>> stop = StopAfterDelay(timedelta(seconds=1))
        >>> stop.should_stop(Attempt.from_result(None, attempt_number=4, elapsed_ms=999))
        False
        >>> stop.should_stop(Attempt.from_result(None, attempt_number=5, elapsed_ms=1000))
        True

        ```
    """

    def __init__(self, max_delay: float | timedelta) -> None:
        max_delay = to_millis(max_delay)
        validate_non_negative(max_delay, "max_delay")
        self.max_delay = max_delay

    def should_stop(self, attempt: Attempt[Any]) -> bool:
        return attempt.elapsed_ms >= self.max_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(max_delay={self.max_delay})"


class StopAfterAny(BaseStopStrategy):
    """Stop as soon as any of the given strategies says so.

    Args:
        *strategies: The strategies to combine. At least one is required.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.stop import StopAfterAny, StopAfterAttempt, StopAfterDelay
        >>> stop = StopAfterAny(StopAfterAttempt(5), StopAfterDelay(10_000))
        >>> stop.should_stop(Attempt.from_result(None, attempt_number=2, elapsed_ms=12_000))
        True

        ```
    """

    def __init__(self, *strategies: BaseStopStrategy) -> None:
        if not strategies:
            msg = "strategies must contain at least one stop strategy"
            raise ValueError(msg)
        if any(strategy is None for strategy in strategies):
            msg = "strategies cannot contain None"
            raise ValueError(msg)
        self.strategies = strategies

    def should_stop(self, attempt: Attempt[Any]) -> bool:
        return any(strategy.should_stop(attempt) for strategy in self.strategies)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}{self.strategies!r}"


NEVER_STOP = NeverStop()
