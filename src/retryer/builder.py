r"""Fluent builder assembling retryers.

Example:
    ```pycon
    >>> from retryer.builder import RetryerBuilder
    >>> from retryer.caller import DirectCaller
    >>> from retryer.stop import StopAfterAttempt
    >>> from retryer.wait import FixedWait
    >>> retryer = (
    ...     RetryerBuilder()
    ...     .with_caller(DirectCaller())
    ...     .retry_if_exception_of_type(ConnectionError)
    ...     .with_stop_strategy(StopAfterAttempt(3))
    ...     .with_wait_strategy(FixedWait(0))
    ...     .build()
    ... )
    >>> retryer.call(lambda: "done")
    'done'

    ```
"""

from __future__ import annotations

__all__ = ["RetryerBuilder"]

from typing import TYPE_CHECKING, Any, Callable

from retryer.config import RetryerConfig
from retryer.exceptions import ConfigurationError
from retryer.observable import RetryObservable
from retryer.predicate import (
    FailureMatchingRule,
    FailureTypeRule,
    ResultMatchingRule,
    RetryPredicate,
)
from retryer.retryer import AsyncRetryer, Retryer
from retryer.utils.validation import validate_not_none

if TYPE_CHECKING:
    from retryer.block import BaseAsyncBlockStrategy, BaseBlockStrategy
    from retryer.caller import BaseAsyncCaller, BaseCaller
    from retryer.observable import RetryListener
    from retryer.predicate import ExceptionTypes, RetryRule
    from retryer.stop import BaseStopStrategy
    from retryer.wait import BaseWaitStrategy


class RetryerBuilder:
    """Accumulate the pieces of a retryer, then build it.

    Every ``with_*`` and ``retry_if_*`` method returns the builder. The
    single-valued pieces (caller, stop, wait and block strategies, and the
    observable) can only be set once; rules and listeners accumulate in
    the order they are added. Unset strategies fall back to the defaults
    of ``RetryerConfig``.

    All misuse raises ``ConfigurationError`` before any work is invoked.
    """

    def __init__(self) -> None:
        self._caller: BaseCaller | BaseAsyncCaller | None = None
        self._rules: list[RetryRule] = []
        self._stop_strategy: BaseStopStrategy | None = None
        self._wait_strategy: BaseWaitStrategy | None = None
        self._block_strategy: BaseBlockStrategy | BaseAsyncBlockStrategy | None = None
        self._observable: RetryObservable | None = None
        self._listeners: list[RetryListener] = []

    def _check_unset(self, name: str, value: Any) -> None:
        validate_not_none(value, name)
        if getattr(self, f"_{name}") is not None:
            msg = f"{name} has already been set to {getattr(self, f'_{name}')!r}"
            raise ConfigurationError(msg)

    def with_caller(self, caller: BaseCaller | BaseAsyncCaller) -> RetryerBuilder:
        self._check_unset("caller", caller)
        self._caller = caller
        return self

    def retry_if_exception(self) -> RetryerBuilder:
        """Retry on any ``Exception`` raised by the work."""
        return self.with_rule(FailureTypeRule(Exception))

    def retry_if_exception_of_type(self, exception_type: ExceptionTypes) -> RetryerBuilder:
        """Retry when the work raises an instance of ``exception_type``."""
        validate_not_none(exception_type, "exception_type")
        return self.with_rule(FailureTypeRule(exception_type))

    def retry_if_exception_matching(
        self, predicate: Callable[[BaseException], bool]
    ) -> RetryerBuilder:
        """Retry when the work raises an exception accepted by ``predicate``."""
        validate_not_none(predicate, "predicate")
        return self.with_rule(FailureMatchingRule(predicate))

    def retry_if_result(self, predicate: Callable[[Any], bool]) -> RetryerBuilder:
        """Retry when the work returns a value accepted by ``predicate``."""
        validate_not_none(predicate, "predicate")
        return self.with_rule(ResultMatchingRule(predicate))

    def with_rule(self, rule: RetryRule) -> RetryerBuilder:
        """Add a custom rule taking an ``Attempt`` and returning ``True`` to
        retry."""
        validate_not_none(rule, "rule")
        self._rules.append(rule)
        return self

    def with_stop_strategy(self, stop_strategy: BaseStopStrategy) -> RetryerBuilder:
        self._check_unset("stop_strategy", stop_strategy)
        self._stop_strategy = stop_strategy
        return self

    def with_wait_strategy(self, wait_strategy: BaseWaitStrategy) -> RetryerBuilder:
        self._check_unset("wait_strategy", wait_strategy)
        self._wait_strategy = wait_strategy
        return self

    def with_block_strategy(
        self, block_strategy: BaseBlockStrategy | BaseAsyncBlockStrategy
    ) -> RetryerBuilder:
        self._check_unset("block_strategy", block_strategy)
        self._block_strategy = block_strategy
        return self

    def with_listener(self, listener: RetryListener) -> RetryerBuilder:
        """Notify ``listener`` of every attempt of the built retryer."""
        validate_not_none(listener, "listener")
        self._listeners.append(listener)
        return self

    def with_observable(self, observable: RetryObservable) -> RetryerBuilder:
        """Use ``observable`` instead of a fresh one.

        Listeners added with ``with_listener`` are subscribed to it at
        build time.
        """
        self._check_unset("observable", observable)
        self._observable = observable
        return self

    def build_config(self) -> RetryerConfig:
        """Create the configuration described by the builder.

        Raises:
            ConfigurationError: If no caller was set.
        """
        if self._caller is None:
            msg = "caller must be set before building a retryer"
            raise ConfigurationError(msg)
        observable = self._observable if self._observable is not None else RetryObservable()
        for listener in self._listeners:
            observable.subscribe(listener)
        config = RetryerConfig(
            caller=self._caller,
            predicate=RetryPredicate(self._rules),
            observable=observable,
        )
        return config.merge(
            stop_strategy=self._stop_strategy,
            wait_strategy=self._wait_strategy,
            block_strategy=self._block_strategy,
        )

    def build(self) -> Retryer:
        """Build a synchronous retryer.

        Raises:
            ConfigurationError: If no caller was set, or if the caller or
                the block strategy is asynchronous.
        """
        return Retryer(self.build_config())

    def build_async(self) -> AsyncRetryer:
        """Build an asynchronous retryer.

        Raises:
            ConfigurationError: If no caller was set, or if the caller or
                the block strategy is synchronous.
        """
        return AsyncRetryer(self.build_config())
