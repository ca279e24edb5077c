r"""Block strategies realizing the delay between two attempts.

The retry loop computes how long to wait and delegates the suspension to
a block strategy, so the mechanism can be swapped without touching the
loop: a plain ``time.sleep``, an event that another thread can set to
interrupt the wait, or a cooperative ``asyncio.sleep``.
"""

from __future__ import annotations

__all__ = [
    "AsyncSleepBlockStrategy",
    "BaseAsyncBlockStrategy",
    "BaseBlockStrategy",
    "EventBlockStrategy",
    "SleepBlockStrategy",
]

import asyncio
import logging
import threading
import time
from abc import ABC, abstractmethod

from retryer.exceptions import BlockInterruptedError
from retryer.utils.validation import validate_not_none

logger: logging.Logger = logging.getLogger(__name__)


def _to_seconds(sleep_time: int) -> float:
    """Convert a delay in milliseconds to the seconds accepted by
    ``time.sleep``, ``Event.wait`` and ``asyncio.sleep``.

    Delays longer than ``threading.TIMEOUT_MAX`` seconds are clamped to it.
    """
    if sleep_time > threading.TIMEOUT_MAX * 1000:
        logger.debug(
            f"Wait of {sleep_time} ms exceeds the platform limit, "
            f"blocking for {threading.TIMEOUT_MAX} s instead"
        )
        return threading.TIMEOUT_MAX
    return max(sleep_time, 0) / 1000


class BaseBlockStrategy(ABC):
    """Abstract base class for blocking suspension."""

    @abstractmethod
    def block(self, sleep_time: int) -> None:
        """Suspend the current thread for at least ``sleep_time`` ms.

        Args:
            sleep_time: The delay in milliseconds.

        Raises:
            BlockInterruptedError: If the suspension is interrupted.
        """


class BaseAsyncBlockStrategy(ABC):
    """Abstract base class for cooperative suspension."""

    @abstractmethod
    async def block(self, sleep_time: int) -> None:
        """Suspend the current task for at least ``sleep_time`` ms.

        Args:
            sleep_time: The delay in milliseconds.

        Raises:
            BlockInterruptedError: If the suspension is interrupted.
            asyncio.CancelledError: If the task is cancelled.
        """


class SleepBlockStrategy(BaseBlockStrategy):
    """Block with ``time.sleep``; the default of the synchronous loop."""

    def block(self, sleep_time: int) -> None:
        if sleep_time <= 0:
            return
        time.sleep(_to_seconds(sleep_time))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class EventBlockStrategy(BaseBlockStrategy):
    """Block on a ``threading.Event`` that can interrupt the wait.

    Setting the event from another thread wakes every session currently
    waiting through this strategy, and makes later waits fail
    immediately until the event is cleared.

    Args:
        event: The event signalling interruption.

    Example:
        ```pycon
        >>> import threading
        >>> from retryer.block import EventBlockStrategy
        >>> event = threading.Event()
        >>> strategy = EventBlockStrategy(event)
        >>> strategy.block(1)
        >>> event.set()
        >>> strategy.block(1000)
        Traceback (most recent call last):
            ...
        retryer.exceptions.BlockInterruptedError: wait of 1000 ms was interrupted

        ```
    """

    def __init__(self, event: threading.Event) -> None:
        validate_not_none(event, "event")
        self.event = event

    def block(self, sleep_time: int) -> None:
        if self.event.is_set() or self.event.wait(_to_seconds(sleep_time)):
            logger.debug(f"Wait of {sleep_time} ms interrupted by event")
            msg = f"wait of {sleep_time} ms was interrupted"
            raise BlockInterruptedError(msg)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(event={self.event!r})"


class AsyncSleepBlockStrategy(BaseAsyncBlockStrategy):
    """Suspend with ``asyncio.sleep``; the default of the async loop."""

    async def block(self, sleep_time: int) -> None:
        if sleep_time <= 0:
            return
        await asyncio.sleep(_to_seconds(sleep_time))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
