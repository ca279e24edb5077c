r"""Rejection rules deciding whether an attempt should be retried.

A rule is any callable taking an ``Attempt`` and returning ``True`` when
the outcome is unsatisfactory. ``RetryPredicate`` combines rules with a
short-circuit OR: the attempt is retried as soon as one rule rejects it.
A rule only looks at the side of the attempt it understands; a failure
rule given a successful attempt returns ``False`` instead of raising.

Example:
    ```pycon
    >>> from retryer.attempt import Attempt
    >>> from retryer.predicate import FailureTypeRule, ResultMatchingRule, RetryPredicate
    >>> predicate = RetryPredicate(
    ...     [FailureTypeRule(ConnectionError), ResultMatchingRule(lambda value: value is None)]
    ... )
    >>> predicate(Attempt.from_result(None, attempt_number=1, elapsed_ms=0))
    True
    >>> predicate(Attempt.from_result("ok", attempt_number=1, elapsed_ms=0))
    False
    >>> predicate(Attempt.from_failure(ConnectionError(), attempt_number=1, elapsed_ms=0))
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "FailureMatchingRule",
    "FailureTypeRule",
    "ResultMatchingRule",
    "RetryPredicate",
    "RetryRule",
]

from typing import TYPE_CHECKING, Any, Callable, Union

from retryer.utils.validation import validate_exception_types, validate_not_none

if TYPE_CHECKING:
    from collections.abc import Iterable

    from retryer.attempt import Attempt

RetryRule = Callable[["Attempt[Any]"], bool]

ExceptionTypes = Union[type[BaseException], tuple[type[BaseException], ...]]


class FailureTypeRule:
    """Retry when the attempt failed with an instance of the given types.

    Args:
        exception_type: An exception type or a tuple of them. Subclasses
            match too.

    Raises:
        ConfigurationError: If ``exception_type`` is not an exception type
            or a non-empty tuple of them.
    """

    def __init__(self, exception_type: ExceptionTypes) -> None:
        validate_exception_types(exception_type, "exception_type")
        self.exception_type = exception_type

    def __call__(self, attempt: Attempt[Any]) -> bool:
        return attempt.has_failure() and isinstance(attempt.cause, self.exception_type)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(exception_type={self.exception_type!r})"


class FailureMatchingRule:
    """Retry when the failure of the attempt satisfies a predicate.

    Args:
        predicate: Called with the exception of a failed attempt.
    """

    def __init__(self, predicate: Callable[[BaseException], bool]) -> None:
        validate_not_none(predicate, "predicate")
        self.predicate = predicate

    def __call__(self, attempt: Attempt[Any]) -> bool:
        return attempt.has_failure() and bool(self.predicate(attempt.cause))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(predicate={self.predicate!r})"


class ResultMatchingRule:
    """Retry when the result of the attempt satisfies a predicate.

    Args:
        predicate: Called with the value of a successful attempt.
    """

    def __init__(self, predicate: Callable[[Any], bool]) -> None:
        validate_not_none(predicate, "predicate")
        self.predicate = predicate

    def __call__(self, attempt: Attempt[Any]) -> bool:
        return attempt.has_result() and bool(self.predicate(attempt.value))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(predicate={self.predicate!r})"


class RetryPredicate:
    """Ordered set of rejection rules combined by logical OR.

    An empty predicate never retries, so a retryer without rules returns
    or raises right after the first attempt.

    Args:
        rules: The initial rules, evaluated in order.
    """

    def __init__(self, rules: Iterable[RetryRule] = ()) -> None:
        self._rules: list[RetryRule] = []
        for rule in rules:
            self.add(rule)

    @property
    def rules(self) -> tuple[RetryRule, ...]:
        return tuple(self._rules)

    def add(self, rule: RetryRule) -> RetryPredicate:
        """Append a rule and return the predicate.

        Raises:
            ConfigurationError: If ``rule`` is ``None``.
        """
        validate_not_none(rule, "rule")
        self._rules.append(rule)
        return self

    def should_retry(self, attempt: Attempt[Any]) -> bool:
        return any(rule(attempt) for rule in self._rules)

    __call__ = should_retry

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._rules!r})"
