r"""Composite wait strategy that adds up other strategies."""

from __future__ import annotations

__all__ = ["CompositeWait", "join_waits"]

from typing import TYPE_CHECKING, Any

from retryer.wait.base import BaseWaitStrategy

if TYPE_CHECKING:
    from collections.abc import Iterable

    from retryer.attempt import Attempt


class CompositeWait(BaseWaitStrategy):
    """Wait strategy returning the sum of its sub-strategies.

    Args:
        strategies: The strategies to add up, evaluated in order.

    Raises:
        ValueError: If ``strategies`` is empty or contains ``None``.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.wait import CompositeWait, FixedWait, IncrementingWait
        >>> wait = CompositeWait([FixedWait(100), IncrementingWait(initial=0, increment=10)])
        >>> wait.compute_sleep_time(Attempt.from_result(None, attempt_number=3, elapsed_ms=0))
        120

        ```
    """

    def __init__(self, strategies: Iterable[BaseWaitStrategy]) -> None:
        strategies = tuple(strategies)
        if not strategies:
            msg = "strategies must contain at least one wait strategy"
            raise ValueError(msg)
        if any(strategy is None for strategy in strategies):
            msg = "strategies cannot contain None"
            raise ValueError(msg)

        self.strategies = strategies

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        return sum(strategy.compute_sleep_time(attempt) for strategy in self.strategies)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self.strategies)!r})"


def join_waits(*strategies: BaseWaitStrategy) -> CompositeWait:
    """Combine several wait strategies into one that sums their delays.

    Example:
        ```pycon
        >>> from retryer.wait import ExceptionWait, FixedWait, join_waits
        >>> join_waits(FixedWait(1000), ExceptionWait(TimeoutError, lambda exc: 500))
        CompositeWait([FixedWait(sleep_time=1000), ExceptionWait(exception_type=TimeoutError)])

        ```
    """
    return CompositeWait(strategies)
