r"""Unit tests for the Attempt record."""

from __future__ import annotations

import pytest

from retryer.attempt import Attempt
from retryer.exceptions import AttemptStateError

##################################
#     Tests for construction     #
##################################


def test_attempt_from_result() -> None:
    """Test that a result attempt exposes its value and metadata."""
    attempt = Attempt.from_result("ok", attempt_number=2, elapsed_ms=15)
    assert attempt.attempt_number == 2
    assert attempt.elapsed_ms == 15
    assert attempt.has_result()
    assert not attempt.has_failure()
    assert attempt.value == "ok"


def test_attempt_from_result_none_value() -> None:
    """Test that None is a valid result."""
    attempt = Attempt.from_result(None, attempt_number=1, elapsed_ms=0)
    assert attempt.has_result()
    assert attempt.value is None


def test_attempt_from_failure() -> None:
    """Test that a failure attempt exposes its cause."""
    error = ValueError("boom")
    attempt = Attempt.from_failure(error, attempt_number=3, elapsed_ms=40)
    assert attempt.has_failure()
    assert not attempt.has_result()
    assert attempt.cause is error


def test_attempt_from_failure_none_cause() -> None:
    """Test that a failure attempt requires a cause."""
    with pytest.raises(ValueError, match=r"cause must not be None"):
        Attempt.from_failure(None, attempt_number=1, elapsed_ms=0)  # type: ignore[arg-type]


@pytest.mark.parametrize("attempt_number", [0, -1])
def test_attempt_invalid_attempt_number(attempt_number: int) -> None:
    """Test that attempt numbers start at 1."""
    with pytest.raises(ValueError, match=r"attempt_number must be >= 1"):
        Attempt.from_result(None, attempt_number=attempt_number, elapsed_ms=0)


def test_attempt_invalid_elapsed_ms() -> None:
    """Test that the elapsed time cannot be negative."""
    with pytest.raises(ValueError, match=r"elapsed_ms must be >= 0"):
        Attempt.from_result(None, attempt_number=1, elapsed_ms=-1)


def test_attempt_requires_exactly_one_side() -> None:
    """Test that an attempt without result nor failure is rejected."""
    with pytest.raises(ValueError, match=r"exactly one of a result or a failure"):
        Attempt(attempt_number=1, elapsed_ms=0)


def test_attempt_is_frozen() -> None:
    """Test that attempts are immutable."""
    attempt = Attempt.from_result(1, attempt_number=1, elapsed_ms=0)
    with pytest.raises(AttributeError):
        attempt.attempt_number = 2  # type: ignore[misc]


##############################
#     Tests for accessors    #
##############################


def test_attempt_value_on_failure() -> None:
    """Test that reading the value of a failure is a state error."""
    attempt = Attempt.from_failure(KeyError("k"), attempt_number=4, elapsed_ms=0)
    with pytest.raises(AttemptStateError, match=r"attempt 4 has a failure, not a result"):
        _ = attempt.value


def test_attempt_cause_on_result() -> None:
    """Test that reading the cause of a result is a state error."""
    attempt = Attempt.from_result(1, attempt_number=2, elapsed_ms=0)
    with pytest.raises(AttemptStateError, match=r"attempt 2 has a result, not a failure"):
        _ = attempt.cause


def test_attempt_state_error_is_runtime_error() -> None:
    """Test that the state error can be caught as a RuntimeError."""
    attempt = Attempt.from_result(1, attempt_number=1, elapsed_ms=0)
    with pytest.raises(RuntimeError):
        _ = attempt.cause


def test_attempt_unwrap_result() -> None:
    """Test that unwrap returns the value of a result attempt."""
    assert Attempt.from_result([1, 2], attempt_number=1, elapsed_ms=0).unwrap() == [1, 2]


def test_attempt_unwrap_failure_reraises_same_object() -> None:
    """Test that unwrap re-raises the original exception object."""
    error = ConnectionError("down")
    attempt = Attempt.from_failure(error, attempt_number=1, elapsed_ms=0)
    with pytest.raises(ConnectionError) as exc_info:
        attempt.unwrap()
    assert exc_info.value is error


def test_attempt_repr_result() -> None:
    """Test the representation of a result attempt."""
    assert repr(Attempt.from_result(5, attempt_number=2, elapsed_ms=10)) == (
        "Attempt(attempt_number=2, elapsed_ms=10, value=5)"
    )


def test_attempt_repr_failure() -> None:
    """Test the representation of a failure attempt."""
    assert repr(Attempt.from_failure(KeyError("k"), attempt_number=1, elapsed_ms=0)) == (
        "Attempt(attempt_number=1, elapsed_ms=0, cause=KeyError('k'))"
    )
