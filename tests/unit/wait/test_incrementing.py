r"""Unit tests for IncrementingWait."""

from __future__ import annotations

from datetime import timedelta

import pytest

from retryer.wait import IncrementingWait
from tests.helpers import result


def test_incrementing_wait_sequence() -> None:
    """Test the linear growth of the delay."""
    wait = IncrementingWait(initial=500, increment=100)
    assert [wait.compute_sleep_time(result(attempt_number=n)) for n in range(1, 5)] == [
        500,
        600,
        700,
        800,
    ]


def test_incrementing_wait_negative_increment_floors_at_zero() -> None:
    """Test that a decreasing delay never goes below zero."""
    wait = IncrementingWait(initial=100, increment=-40)
    assert [wait.compute_sleep_time(result(attempt_number=n)) for n in range(1, 6)] == [
        100,
        60,
        20,
        0,
        0,
    ]


def test_incrementing_wait_timedelta() -> None:
    wait = IncrementingWait(initial=timedelta(seconds=1), increment=timedelta(milliseconds=250))
    assert wait.compute_sleep_time(result(attempt_number=3)) == 1500


def test_incrementing_wait_negative_initial() -> None:
    with pytest.raises(ValueError, match=r"initial must be >= 0"):
        IncrementingWait(initial=-1, increment=10)


def test_incrementing_wait_repr() -> None:
    assert repr(IncrementingWait(1, 2)) == "IncrementingWait(initial=1, increment=2)"
