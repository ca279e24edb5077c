r"""Retry loops executing a unit of work until it succeeds or gives up.

A session runs the work through the configured caller, wraps the outcome
into an ``Attempt``, publishes it to the observable, and asks the
predicate whether the outcome is acceptable. Accepted attempts end the
session: the value is returned or the work's exception is re-raised
unchanged. Rejected attempts consult the stop strategy, then the wait
strategy, and the block strategy realizes the delay before the next
attempt.

``Retryer`` runs the loop in the calling thread; ``AsyncRetryer`` runs
the same loop in the calling task.
"""

from __future__ import annotations

__all__ = ["AsyncRetryer", "Retryer"]

import asyncio
import functools
import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar

from retryer.attempt import Attempt
from retryer.block import (
    AsyncSleepBlockStrategy,
    BaseAsyncBlockStrategy,
    BaseBlockStrategy,
    SleepBlockStrategy,
)
from retryer.caller import BaseAsyncCaller, BaseCaller
from retryer.exceptions import (
    BlockInterruptedError,
    ConfigurationError,
    RetryExhaustedError,
)
from retryer.utils.structured_logging import log_structured, session_scope
from retryer.utils.validation import validate_not_none

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from retryer.config import RetryerConfig

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


def _elapsed_ms(start_time: float) -> int:
    return int((time.monotonic() - start_time) * 1000)


def _uncancel_current_task() -> None:
    """Withdraw the cancellation request consumed by the loop.

    ``Task.uncancel`` only exists on Python 3.11+.
    """
    task = asyncio.current_task()
    if task is not None and hasattr(task, "uncancel"):
        task.uncancel()


class _BaseRetryer:
    """Decision logic shared by the synchronous and asynchronous loops."""

    def __init__(self, config: RetryerConfig) -> None:
        validate_not_none(config, "config")
        self.config = config

    def _is_accepted(self, attempt: Attempt[Any]) -> bool:
        self.config.observable.publish(attempt)
        if self.config.predicate(attempt):
            return False
        logger.debug(f"Attempt {attempt.attempt_number} accepted after {attempt.elapsed_ms} ms")
        return True

    def _compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        """Return the delay before the next attempt, or raise if the stop
        strategy fires."""
        if self.config.stop_strategy.should_stop(attempt):
            log_structured(
                logger,
                logging.DEBUG,
                f"Stopping after {attempt.attempt_number} attempts",
                attempt_number=attempt.attempt_number,
                elapsed_ms=attempt.elapsed_ms,
            )
            raise RetryExhaustedError(attempt) from (
                attempt.cause if attempt.has_failure() else None
            )
        sleep_time = self.config.wait_strategy.compute_sleep_time(attempt)
        log_structured(
            logger,
            logging.DEBUG,
            f"Attempt {attempt.attempt_number} rejected, retrying in {sleep_time} ms",
            attempt_number=attempt.attempt_number,
            elapsed_ms=attempt.elapsed_ms,
            sleep_time=sleep_time,
        )
        return sleep_time

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config={self.config!r})"


class Retryer(_BaseRetryer):
    """Synchronous retry loop.

    Args:
        config: The configuration of the loop. Its caller must be a
            ``BaseCaller`` and its block strategy, if any, a
            ``BaseBlockStrategy``; ``time.sleep`` is used otherwise.

    Raises:
        ConfigurationError: If the caller or the block strategy is
            asynchronous.

    Example:
        ```pycon
        >>> from retryer.caller import DirectCaller
        >>> from retryer.config import RetryerConfig
        >>> from retryer.predicate import FailureTypeRule, RetryPredicate
        >>> from retryer.retryer import Retryer
        >>> outcomes = iter([ValueError("not yet"), 42])
        >>> def work():
        ...     outcome = next(outcomes)
        ...     if isinstance(outcome, Exception):
        ...         raise outcome
        ...     return outcome
        ...
        >>> retryer = Retryer(
        ...     RetryerConfig(
        ...         caller=DirectCaller(), predicate=RetryPredicate([FailureTypeRule(ValueError)])
        ...     )
        ... )
        >>> retryer.call(work)
        42

        ```
    """

    def __init__(self, config: RetryerConfig) -> None:
        super().__init__(config)
        if not isinstance(config.caller, BaseCaller):
            msg = f"Retryer requires a synchronous caller, got {config.caller!r}"
            raise ConfigurationError(msg)
        block_strategy = config.block_strategy
        if block_strategy is None:
            block_strategy = SleepBlockStrategy()
        if not isinstance(block_strategy, BaseBlockStrategy):
            msg = f"Retryer requires a synchronous block strategy, got {block_strategy!r}"
            raise ConfigurationError(msg)
        self.block_strategy = block_strategy

    def call(self, work: Callable[[], T]) -> T:
        """Run ``work`` until an attempt is accepted.

        The session runs inside ``session_scope``, so the records logged
        by the loop, the listeners and the work share one session id.

        Args:
            work: The zero-argument unit of work.

        Returns:
            The value of the accepted attempt.

        Raises:
            RetryExhaustedError: If the stop strategy fires or the wait
                between two attempts is interrupted.
            Exception: The exception of the accepted attempt, unchanged.
        """
        with session_scope():
            return self._run(work)

    def _run(self, work: Callable[[], T]) -> T:
        start_time = time.monotonic()
        attempt_number = 0
        while True:
            attempt_number += 1
            attempt: Attempt[T]
            try:
                value = self.config.caller.call(work)
            except Exception as exc:
                attempt = Attempt.from_failure(exc, attempt_number, _elapsed_ms(start_time))
            else:
                attempt = Attempt.from_result(value, attempt_number, _elapsed_ms(start_time))

            if self._is_accepted(attempt):
                return attempt.unwrap()

            sleep_time = self._compute_sleep_time(attempt)
            if sleep_time <= 0:
                continue
            try:
                self.block_strategy.block(sleep_time)
            except BlockInterruptedError as exc:
                logger.debug(f"Wait after attempt {attempt_number} interrupted")
                raise RetryExhaustedError(attempt) from exc

    def wraps(self, func: Callable[..., T]) -> Callable[..., T]:
        """Wrap ``func`` so that every call of the wrapper is retried.

        Example:
            ```pycon
            >>> from retryer.builder import RetryerBuilder
            >>> from retryer.caller import DirectCaller
            >>> retryer = RetryerBuilder().with_caller(DirectCaller()).build()
            >>> @retryer.wraps
            ... def add(a, b):
            ...     return a + b
            ...
            >>> add(1, b=2)
            3

            ```
        """

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return self.call(lambda: func(*args, **kwargs))

        return wrapper


class AsyncRetryer(_BaseRetryer):
    """Asynchronous retry loop.

    Behaves like ``Retryer``, awaiting the work and the suspension. If the
    task running the loop is cancelled while waiting between two attempts,
    the session ends with ``RetryExhaustedError`` chained to the
    ``CancelledError``, and the cancellation request is withdrawn with
    ``Task.uncancel`` (Python 3.11+) so the task can keep awaiting. A
    cancellation raised while the work runs propagates unchanged.

    The same applies when the cancellation comes from ``asyncio.timeout``
    or ``asyncio.wait_for`` wrapping ``call``: if it lands during a wait,
    the caller sees ``RetryExhaustedError`` rather than ``TimeoutError``.
    Bound the session with ``StopAfterDelay`` to get a retry-aware
    deadline.

    Args:
        config: The configuration of the loop. Its caller must be a
            ``BaseAsyncCaller`` and its block strategy, if any, a
            ``BaseAsyncBlockStrategy``; ``asyncio.sleep`` is used
            otherwise.

    Raises:
        ConfigurationError: If the caller or the block strategy is
            synchronous.
    """

    def __init__(self, config: RetryerConfig) -> None:
        super().__init__(config)
        if not isinstance(config.caller, BaseAsyncCaller):
            msg = f"AsyncRetryer requires an asynchronous caller, got {config.caller!r}"
            raise ConfigurationError(msg)
        block_strategy = config.block_strategy
        if block_strategy is None:
            block_strategy = AsyncSleepBlockStrategy()
        if not isinstance(block_strategy, BaseAsyncBlockStrategy):
            msg = f"AsyncRetryer requires an asynchronous block strategy, got {block_strategy!r}"
            raise ConfigurationError(msg)
        self.block_strategy = block_strategy

    async def call(self, work: Callable[[], Awaitable[T]]) -> T:
        """Await ``work()`` until an attempt is accepted, inside its own
        ``session_scope``.

        Args:
            work: A zero-argument callable returning an awaitable, such
                as a coroutine function.

        Returns:
            The value of the accepted attempt.

        Raises:
            RetryExhaustedError: If the stop strategy fires or the wait
                between two attempts is interrupted or cancelled.
            Exception: The exception of the accepted attempt, unchanged.
        """
        with session_scope():
            return await self._run(work)

    async def _run(self, work: Callable[[], Awaitable[T]]) -> T:
        start_time = time.monotonic()
        attempt_number = 0
        while True:
            attempt_number += 1
            attempt: Attempt[T]
            try:
                value = await self.config.caller.call(work)
            except Exception as exc:
                attempt = Attempt.from_failure(exc, attempt_number, _elapsed_ms(start_time))
            else:
                attempt = Attempt.from_result(value, attempt_number, _elapsed_ms(start_time))

            if self._is_accepted(attempt):
                return attempt.unwrap()

            sleep_time = self._compute_sleep_time(attempt)
            if sleep_time <= 0:
                continue
            try:
                await self.block_strategy.block(sleep_time)
            except BlockInterruptedError as exc:
                logger.debug(f"Wait after attempt {attempt_number} interrupted")
                raise RetryExhaustedError(attempt) from exc
            except asyncio.CancelledError as exc:
                logger.debug(f"Wait after attempt {attempt_number} cancelled")
                _uncancel_current_task()
                raise RetryExhaustedError(attempt) from exc

    def wraps(self, func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        """Wrap the coroutine function ``func`` so that every call of the
        wrapper is retried."""

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await self.call(lambda: func(*args, **kwargs))

        return wrapper
