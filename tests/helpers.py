r"""Helpers shared by the unit tests."""

from __future__ import annotations

__all__ = ["failure", "result", "scripted"]

from collections.abc import Callable, Iterable
from typing import Any

from retryer.attempt import Attempt


def result(value: Any = None, attempt_number: int = 1, elapsed_ms: int = 0) -> Attempt[Any]:
    """Create a result attempt with short defaults."""
    return Attempt.from_result(value, attempt_number=attempt_number, elapsed_ms=elapsed_ms)


def failure(
    cause: BaseException | None = None, attempt_number: int = 1, elapsed_ms: int = 0
) -> Attempt[Any]:
    """Create a failure attempt with short defaults."""
    if cause is None:
        cause = RuntimeError("boom")
    return Attempt.from_failure(cause, attempt_number=attempt_number, elapsed_ms=elapsed_ms)


def scripted(outcomes: Iterable[Any]) -> Callable[[], Any]:
    """Create a unit of work replaying ``outcomes`` in order.

    Exceptions (instances) are raised, any other value is returned.
    """
    iterator = iter(outcomes)

    def work() -> Any:
        outcome = next(iterator)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return work
