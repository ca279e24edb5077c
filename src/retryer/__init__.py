r"""retryer - Retry engine for arbitrary units of work.

This package runs a unit of work repeatedly until its outcome is
acceptable or a stop condition is reached. Every piece of the loop is a
pluggable strategy, assembled with a fluent builder.

Key Features:
    - Retry on exceptions by type or predicate, and on results by predicate
    - Stop after a number of attempts, a time budget, or any combination
    - Fixed, random, incrementing, exponential, Fibonacci,
      exception-conditioned and composite waits
    - Per-attempt time limits with cooperative cancellation
    - Interruptible waits, listeners notified of every attempt
    - Synchronous and asyncio retry loops
    - Optional ``httpx`` integration honouring ``Retry-After`` headers

Example:
    ```pycon
    >>> from retryer import RetryerBuilder, StopAfterAttempt
    >>> from retryer.caller import DirectCaller
    >>> from retryer.wait import ExponentialWait
    >>> retryer = (
    ...     RetryerBuilder()
    ...     .with_caller(DirectCaller())
    ...     .retry_if_exception_of_type(ConnectionError)
    ...     .retry_if_result(lambda value: value is None)
    ...     .with_stop_strategy(StopAfterAttempt(5))
    ...     .with_wait_strategy(ExponentialWait(multiplier=100, max_wait=10_000))
    ...     .build()
    ... )
    >>> retryer.call(lambda: "payload")
    'payload'

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryer",
    "Attempt",
    "AttemptStateError",
    "AttemptTimeoutError",
    "BlockInterruptedError",
    "ConfigurationError",
    "RetryExhaustedError",
    "RetryObservable",
    "RetryPredicate",
    "Retryer",
    "RetryerBuilder",
    "RetryerConfig",
    "RetryerError",
    "StopAfterAny",
    "StopAfterAttempt",
    "StopAfterDelay",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from retryer.attempt import Attempt
from retryer.builder import RetryerBuilder
from retryer.config import RetryerConfig
from retryer.exceptions import (
    AttemptStateError,
    AttemptTimeoutError,
    BlockInterruptedError,
    ConfigurationError,
    RetryerError,
    RetryExhaustedError,
)
from retryer.observable import RetryObservable
from retryer.predicate import RetryPredicate
from retryer.retryer import AsyncRetryer, Retryer
from retryer.stop import StopAfterAny, StopAfterAttempt, StopAfterDelay

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
