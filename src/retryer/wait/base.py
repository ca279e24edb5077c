r"""Abstract base class for wait strategies."""

from __future__ import annotations

__all__ = ["BaseWaitStrategy"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from retryer.attempt import Attempt


class BaseWaitStrategy(ABC):
    """Abstract base class for wait strategies.

    A wait strategy determines how long to wait before the next attempt,
    based on the attempt that was just rejected. Implementations hold only
    their configured parameters, so one instance can serve any number of
    concurrent retry sessions.
    """

    @abstractmethod
    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        """Compute the delay before the next attempt.

        Args:
            attempt: The attempt that was just rejected. Its
                ``attempt_number`` is 1 for the first attempt.

        Returns:
            The delay in milliseconds. Always >= 0.
        """
