r"""Immutable record of one invocation of the unit of work."""

from __future__ import annotations

__all__ = ["Attempt"]

from dataclasses import dataclass
from typing import Generic, TypeVar

from retryer.exceptions import AttemptStateError

T = TypeVar("T")

_MISSING = object()


@dataclass(frozen=True)
class Attempt(Generic[T]):
    """Outcome of one invocation plus its position in the session.

    An attempt holds either a result or a failure, never both. Use
    ``from_result`` and ``from_failure`` to build one.

    Attributes:
        attempt_number: The 1-based index of the attempt in its session.
        elapsed_ms: Milliseconds elapsed since the first attempt started.

    Example:
        ```pycon
        >>> from retryer.attempt import Attempt
        >>> attempt = Attempt.from_result(42, attempt_number=1, elapsed_ms=3)
        >>> attempt.has_result()
        True
        >>> attempt.value
        42
        >>> attempt.unwrap()
        42
        >>> failed = Attempt.from_failure(KeyError("k"), attempt_number=2, elapsed_ms=8)
        >>> failed.has_failure()
        True
        >>> failed.cause
        KeyError('k')

        ```
    """

    attempt_number: int
    elapsed_ms: int
    _value: object = _MISSING
    _cause: BaseException | None = None

    def __post_init__(self) -> None:
        if self.attempt_number < 1:
            msg = f"attempt_number must be >= 1, got {self.attempt_number}"
            raise ValueError(msg)
        if self.elapsed_ms < 0:
            msg = f"elapsed_ms must be >= 0, got {self.elapsed_ms}"
            raise ValueError(msg)
        if (self._value is _MISSING) == (self._cause is None):
            msg = "an attempt must hold exactly one of a result or a failure"
            raise ValueError(msg)

    @classmethod
    def from_result(cls, value: T, attempt_number: int, elapsed_ms: int) -> Attempt[T]:
        """Create an attempt that produced ``value``."""
        return cls(attempt_number=attempt_number, elapsed_ms=elapsed_ms, _value=value)

    @classmethod
    def from_failure(
        cls, cause: BaseException, attempt_number: int, elapsed_ms: int
    ) -> Attempt[T]:
        """Create an attempt that failed with ``cause``."""
        if cause is None:
            msg = "cause must not be None"
            raise ValueError(msg)
        return cls(attempt_number=attempt_number, elapsed_ms=elapsed_ms, _cause=cause)

    def has_result(self) -> bool:
        return self._cause is None

    def has_failure(self) -> bool:
        return self._cause is not None

    @property
    def value(self) -> T:
        """The result of the attempt.

        Raises:
            AttemptStateError: If the attempt failed.
        """
        if self._cause is not None:
            msg = f"attempt {self.attempt_number} has a failure, not a result"
            raise AttemptStateError(msg)
        return self._value  # type: ignore[return-value]

    @property
    def cause(self) -> BaseException:
        """The failure of the attempt.

        Raises:
            AttemptStateError: If the attempt produced a result.
        """
        if self._cause is None:
            msg = f"attempt {self.attempt_number} has a result, not a failure"
            raise AttemptStateError(msg)
        return self._cause

    def unwrap(self) -> T:
        """Return the result, or re-raise the original failure.

        The stored exception object is raised as-is, so its type and
        traceback are preserved for the caller.
        """
        if self._cause is not None:
            raise self._cause
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        outcome = f"cause={self._cause!r}" if self._cause is not None else f"value={self._value!r}"
        return (
            f"{self.__class__.__name__}(attempt_number={self.attempt_number}, "
            f"elapsed_ms={self.elapsed_ms}, {outcome})"
        )
