r"""Configuration dataclass and defaults for retryers.

This module provides the default strategies and a dataclass-based
configuration object consumed by ``Retryer`` and ``AsyncRetryer``. The
fluent ``RetryerBuilder`` produces such a configuration; it can also be
built directly.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_STOP_STRATEGY",
    "DEFAULT_WAIT_STRATEGY",
    "RetryerConfig",
]

from dataclasses import dataclass, field, replace
from typing import Any, Union

from retryer.block import BaseAsyncBlockStrategy, BaseBlockStrategy
from retryer.caller import BaseAsyncCaller, BaseCaller
from retryer.exceptions import ConfigurationError
from retryer.observable import RetryObservable
from retryer.predicate import RetryPredicate
from retryer.stop import NEVER_STOP, BaseStopStrategy
from retryer.utils.validation import validate_not_none
from retryer.wait import NO_WAIT, BaseWaitStrategy

# Keep retrying until the predicate accepts an attempt
DEFAULT_STOP_STRATEGY = NEVER_STOP

# Retry immediately
DEFAULT_WAIT_STRATEGY = NO_WAIT

AnyCaller = Union[BaseCaller, BaseAsyncCaller]
AnyBlockStrategy = Union[BaseBlockStrategy, BaseAsyncBlockStrategy]


@dataclass
class RetryerConfig:
    """Configuration of a retry loop.

    Args:
        caller: The caller invoking the unit of work. Required.
        predicate: The rejection rules. An empty predicate never retries.
        stop_strategy: Decides when to give up (default: never).
        wait_strategy: Computes the delay between attempts (default: none).
        block_strategy: Realizes the delay. ``None`` selects the loop's
            default, ``time.sleep`` or ``asyncio.sleep``.
        observable: Notifies listeners of every attempt.

    Raises:
        ConfigurationError: If the caller is missing or an argument has the
            wrong type.

    Example:
        ```pycon
        >>> from retryer.caller import DirectCaller
        >>> from retryer.config import RetryerConfig
        >>> from retryer.stop import StopAfterAttempt
        >>> config = RetryerConfig(caller=DirectCaller())
        >>> config.stop_strategy
        NeverStop()
        >>> merged = config.merge(stop_strategy=StopAfterAttempt(3))
        >>> merged.stop_strategy
        StopAfterAttempt(max_attempt_number=3)
        >>> config.stop_strategy  # Original unchanged
        NeverStop()

        ```
    """

    caller: AnyCaller
    predicate: RetryPredicate = field(default_factory=RetryPredicate)
    stop_strategy: BaseStopStrategy = DEFAULT_STOP_STRATEGY
    wait_strategy: BaseWaitStrategy = DEFAULT_WAIT_STRATEGY
    block_strategy: AnyBlockStrategy | None = None
    observable: RetryObservable = field(default_factory=RetryObservable)

    def __post_init__(self) -> None:
        for name, expected in (
            ("caller", (BaseCaller, BaseAsyncCaller)),
            ("predicate", RetryPredicate),
            ("stop_strategy", BaseStopStrategy),
            ("wait_strategy", BaseWaitStrategy),
            ("observable", RetryObservable),
        ):
            value = getattr(self, name)
            validate_not_none(value, name)
            if not isinstance(value, expected):
                msg = f"{name} has an unsupported type: {type(value).__name__}"
                raise ConfigurationError(msg)
        if self.block_strategy is not None and not isinstance(
            self.block_strategy, (BaseBlockStrategy, BaseAsyncBlockStrategy)
        ):
            msg = f"block_strategy has an unsupported type: {type(self.block_strategy).__name__}"
            raise ConfigurationError(msg)

    @property
    def is_async(self) -> bool:
        """Whether the caller of this configuration is asynchronous."""
        return isinstance(self.caller, BaseAsyncCaller)

    def merge(self, **overrides: Any) -> RetryerConfig:
        """Create a new config with the non-``None`` overrides applied.

        Args:
            **overrides: Fields to replace.

        Returns:
            A new, validated ``RetryerConfig``.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
