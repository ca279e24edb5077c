r"""Random wait strategy."""

from __future__ import annotations

__all__ = ["RandomWait"]

import random
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryer.utils.duration import to_millis
from retryer.utils.validation import validate_non_negative
from retryer.wait.base import BaseWaitStrategy

if TYPE_CHECKING:
    from retryer.attempt import Attempt


class RandomWait(BaseWaitStrategy):
    """Random wait strategy.

    Returns a delay drawn uniformly from ``[minimum, maximum)``. Each
    instance owns its random generator, so a seeded strategy produces a
    reproducible sequence and no process-wide state is shared.

    Args:
        minimum: The smallest delay in milliseconds (inclusive).
        maximum: The largest delay in milliseconds (exclusive).
        seed: Optional seed for the strategy's own generator.
        rng: Optional generator to use instead of creating one. Cannot be
            combined with ``seed``.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> from retryer.wait import RandomWait
        >>> wait = RandomWait(100, 200, seed=7)
        >>> delay = wait.compute_sleep_time(Attempt.from_result(None, attempt_number=1, elapsed_ms=0))
        >>> 100 <= delay < 200
        True

        ```
    """

    def __init__(
        self,
        minimum: float | timedelta,
        maximum: float | timedelta,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        minimum = to_millis(minimum)
        maximum = to_millis(maximum)
        validate_non_negative(minimum, "minimum")
        if maximum <= minimum:
            msg = f"maximum must be > minimum, got maximum={maximum} and minimum={minimum}"
            raise ValueError(msg)
        if rng is not None and seed is not None:
            msg = "seed and rng cannot be combined"
            raise ValueError(msg)

        self.minimum = minimum
        self.maximum = maximum
        self._rng = rng if rng is not None else random.Random(seed)  # noqa: S311

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:  # noqa: ARG002
        return self._rng.randrange(self.minimum, self.maximum)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(minimum={self.minimum}, maximum={self.maximum})"
