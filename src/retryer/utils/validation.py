r"""Argument validation utilities shared by strategies and builders.

This module provides small validation helpers so that every strategy
reports bad parameters with the same message format.
"""

from __future__ import annotations

__all__ = [
    "validate_exception_types",
    "validate_non_negative",
    "validate_not_none",
    "validate_positive",
]

from typing import Any

from retryer.exceptions import ConfigurationError


def validate_non_negative(value: float, name: str) -> None:
    """Validate that a numeric parameter is >= 0.

    Args:
        value: The value to check.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If ``value`` is negative.

    Example:
        ```pycon
        >>> from retryer.utils.validation import validate_non_negative
        >>> validate_non_negative(0, "sleep_time")
        >>> validate_non_negative(-1, "sleep_time")
        Traceback (most recent call last):
            ...
        ValueError: sleep_time must be >= 0, got -1

        ```
    """
    if value < 0:
        msg = f"{name} must be >= 0, got {value}"
        raise ValueError(msg)


def validate_positive(value: float, name: str) -> None:
    """Validate that a numeric parameter is > 0.

    Args:
        value: The value to check.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If ``value`` is zero or negative.
    """
    if value <= 0:
        msg = f"{name} must be > 0, got {value}"
        raise ValueError(msg)


def validate_not_none(value: Any, name: str) -> None:
    """Reject ``None`` for a required configuration argument.

    Args:
        value: The value to check.
        name: The argument name used in the error message.

    Raises:
        ConfigurationError: If ``value`` is ``None``.
    """
    if value is None:
        msg = f"{name} must not be None"
        raise ConfigurationError(msg)


def validate_exception_types(value: Any, name: str) -> None:
    """Validate an exception type or a non-empty tuple of exception
    types, as accepted by ``isinstance``.

    Args:
        value: The value to check.
        name: The argument name used in the error message.

    Raises:
        ConfigurationError: If ``value`` is ``None``, an empty tuple, or
            holds anything other than ``BaseException`` subclasses.

    Example:
        ```pycon
        >>> from retryer.utils.validation import validate_exception_types
        >>> validate_exception_types((ConnectionError, TimeoutError), "exception_type")
        >>> validate_exception_types("ValueError", "exception_type")
        Traceback (most recent call last):
            ...
        retryer.exceptions.ConfigurationError: exception_type must be an exception type or a non-empty tuple of exception types, got 'ValueError'

        ```
    """
    validate_not_none(value, name)
    types = value if isinstance(value, tuple) else (value,)
    if not types or not all(isinstance(t, type) and issubclass(t, BaseException) for t in types):
        msg = (
            f"{name} must be an exception type or a non-empty tuple of exception types, "
            f"got {value!r}"
        )
        raise ConfigurationError(msg)
