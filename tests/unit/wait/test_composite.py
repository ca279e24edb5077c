r"""Unit tests for CompositeWait and join_waits."""

from __future__ import annotations

import pytest

from retryer.wait import (
    CompositeWait,
    ExceptionWait,
    FixedWait,
    IncrementingWait,
    join_waits,
)
from tests.helpers import failure, result


def test_composite_wait_sums_strategies() -> None:
    """Test that the delay is the sum of the sub-strategies."""
    wait = CompositeWait([FixedWait(100), IncrementingWait(initial=10, increment=10)])
    assert wait.compute_sleep_time(result(attempt_number=1)) == 110
    assert wait.compute_sleep_time(result(attempt_number=3)) == 130


def test_composite_wait_with_exception_wait() -> None:
    """Test the extra delay added only for a given exception type."""
    wait = join_waits(FixedWait(100), ExceptionWait(TimeoutError, lambda exc: 900))
    assert wait.compute_sleep_time(failure(TimeoutError())) == 1000
    assert wait.compute_sleep_time(failure(KeyError())) == 100


def test_composite_wait_single_strategy() -> None:
    assert CompositeWait([FixedWait(5)]).compute_sleep_time(result()) == 5


def test_composite_wait_empty() -> None:
    with pytest.raises(ValueError, match=r"strategies must contain at least one wait strategy"):
        CompositeWait([])


def test_composite_wait_contains_none() -> None:
    with pytest.raises(ValueError, match=r"strategies cannot contain None"):
        CompositeWait([FixedWait(1), None])  # type: ignore[list-item]


def test_join_waits() -> None:
    wait = join_waits(FixedWait(1), FixedWait(2))
    assert isinstance(wait, CompositeWait)
    assert repr(wait) == "CompositeWait([FixedWait(sleep_time=1), FixedWait(sleep_time=2)])"
