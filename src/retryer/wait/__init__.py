r"""Wait strategies computing the delay between two attempts.

This package provides the strategies that turn a rejected attempt into a
delay in milliseconds: fixed, random, incrementing, exponential,
Fibonacci, exception-conditioned and composite waits.
"""

from __future__ import annotations

__all__ = [
    "NO_WAIT",
    "BaseWaitStrategy",
    "CompositeWait",
    "ExceptionWait",
    "ExponentialWait",
    "FibonacciWait",
    "FixedWait",
    "IncrementingWait",
    "NoWait",
    "RandomWait",
    "join_waits",
]

from retryer.wait.base import BaseWaitStrategy
from retryer.wait.composite import CompositeWait, join_waits
from retryer.wait.exception import ExceptionWait
from retryer.wait.exponential import ExponentialWait
from retryer.wait.fibonacci import FibonacciWait
from retryer.wait.fixed import NO_WAIT, FixedWait, NoWait
from retryer.wait.incrementing import IncrementingWait
from retryer.wait.randomized import RandomWait
