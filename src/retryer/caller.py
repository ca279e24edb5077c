r"""Callers invoking the unit of work for one attempt.

A caller runs the work once and returns its value, lets its exception
propagate unchanged, or raises ``AttemptTimeoutError`` when a time budget
is configured and exceeded. Callers that hand the work to an executor
copy the current ``contextvars`` context into the worker, so context
such as the structured logging session id follows the work.

Threads cannot be interrupted from the outside, so cancellation of
thread-based work is cooperative: work run by ``TimeLimitedCaller`` can
poll ``cancellation_requested()`` and return early once its attempt has
been abandoned.

Example:
    ```pycon
    >>> from concurrent.futures import ThreadPoolExecutor
    >>> from retryer.caller import TimeLimitedCaller
    >>> with ThreadPoolExecutor(max_workers=1) as executor:
    ...     caller = TimeLimitedCaller(executor, timeout=1000)
    ...     caller.call(lambda: 42)
    ...
    42

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncDirectCaller",
    "AsyncTimeLimitedCaller",
    "BaseAsyncCaller",
    "BaseCaller",
    "DirectCaller",
    "ExecutorCaller",
    "TimeLimitedCaller",
    "cancellation_requested",
]

import asyncio
import contextvars
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import wait
from typing import TYPE_CHECKING, TypeVar

from retryer.exceptions import AttemptTimeoutError
from retryer.utils.duration import to_millis
from retryer.utils.validation import validate_not_none, validate_positive

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from concurrent.futures import Executor, Future
    from datetime import timedelta

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)

# Set inside the worker context of every TimeLimitedCaller call
_cancel_event: contextvars.ContextVar[threading.Event | None] = contextvars.ContextVar(
    "retryer_cancel_event", default=None
)


def cancellation_requested() -> bool:
    """Tell whether the attempt running in this context was abandoned.

    Work executed through a ``TimeLimitedCaller`` can poll this function
    to stop early after a timeout or an interruption of the waiting
    thread. Outside such work it always returns ``False``.

    Returns:
        ``True`` if the caller gave up on the current attempt.
    """
    event = _cancel_event.get()
    return event is not None and event.is_set()


class BaseCaller(ABC):
    """Abstract base class for synchronous callers."""

    @abstractmethod
    def call(self, work: Callable[[], T]) -> T:
        """Run ``work`` once.

        Args:
            work: The zero-argument unit of work.

        Returns:
            The value returned by ``work``.

        Raises:
            AttemptTimeoutError: If the caller has a time budget and the
                work exceeds it.
            Exception: Whatever ``work`` raised, unchanged.
        """


class BaseAsyncCaller(ABC):
    """Abstract base class for asynchronous callers."""

    @abstractmethod
    async def call(self, work: Callable[[], Awaitable[T]]) -> T:
        """Await the coroutine produced by ``work`` once.

        Args:
            work: A zero-argument callable returning an awaitable, such
                as a coroutine function.

        Returns:
            The value the awaitable resolved to.
        """


class DirectCaller(BaseCaller):
    """Call the work in the current thread, without any time limit."""

    def call(self, work: Callable[[], T]) -> T:
        return work()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def _submit(executor: Executor, work: Callable[[], T]) -> Future[T]:
    return executor.submit(contextvars.copy_context().run, work)


class ExecutorCaller(BaseCaller):
    """Run the work on an executor and block until it completes.

    Args:
        executor: The executor running the work. Its lifecycle is owned by
            the caller of this class.
    """

    def __init__(self, executor: Executor) -> None:
        validate_not_none(executor, "executor")
        self.executor = executor

    def call(self, work: Callable[[], T]) -> T:
        future = _submit(self.executor, work)
        try:
            return future.result()
        finally:
            if not future.done():
                future.cancel()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(executor={self.executor!r})"


class TimeLimitedCaller(BaseCaller):
    """Run the work on an executor with a time budget.

    When the budget is exceeded, or the waiting thread is interrupted, the
    future is cancelled and the work's ``cancellation_requested()`` starts
    returning ``True``.

    Args:
        executor: The executor running the work.
        timeout: The time budget in milliseconds, or a ``timedelta``.
            Must be > 0.
    """

    def __init__(self, executor: Executor, timeout: float | timedelta) -> None:
        validate_not_none(executor, "executor")
        timeout = to_millis(timeout)
        validate_positive(timeout, "timeout")
        self.executor = executor
        self.timeout = timeout

    def call(self, work: Callable[[], T]) -> T:
        event = threading.Event()
        context = contextvars.copy_context()
        context.run(_cancel_event.set, event)
        future = self.executor.submit(context.run, work)
        try:
            done, _ = wait([future], timeout=self.timeout / 1000)
        finally:
            if not future.done():
                future.cancel()
                event.set()
        if not done:
            logger.debug(f"Attempt abandoned after exceeding {self.timeout} ms")
            raise AttemptTimeoutError(self.timeout)
        return future.result()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(executor={self.executor!r}, timeout={self.timeout})"


class AsyncDirectCaller(BaseAsyncCaller):
    """Await the work in the current task, without any time limit."""

    async def call(self, work: Callable[[], Awaitable[T]]) -> T:
        return await work()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class AsyncTimeLimitedCaller(BaseAsyncCaller):
    """Await the work in a separate task with a time budget.

    On timeout, or when the awaiting task is cancelled, the work's task is
    cancelled, which interrupts it at its next suspension point.

    Args:
        timeout: The time budget in milliseconds, or a ``timedelta``.
            Must be > 0.
    """

    def __init__(self, timeout: float | timedelta) -> None:
        timeout = to_millis(timeout)
        validate_positive(timeout, "timeout")
        self.timeout = timeout

    async def call(self, work: Callable[[], Awaitable[T]]) -> T:
        task = asyncio.ensure_future(work())
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout / 1000)
        finally:
            if not task.done():
                task.cancel()
        if not done:
            # Let the cancelled work unwind before reporting the timeout
            await asyncio.wait({task})
            logger.debug(f"Attempt cancelled after exceeding {self.timeout} ms")
            raise AttemptTimeoutError(self.timeout)
        return task.result()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self.timeout})"
