r"""Rules and wait strategy for retrying HTTP calls made with ``httpx``.

This module requires the ``http`` extra (``pip install retryer[http]``).
The unit of work may either return an ``httpx.Response`` or raise, for
example through ``Response.raise_for_status()``; the rules below look at
both sides of the attempt.

Example:
    ```python
    import httpx

    from retryer import RetryerBuilder, StopAfterAttempt
    from retryer.caller import DirectCaller
    from retryer.http import RetryAfterWait, StatusCodeRule, TransportErrorRule
    from retryer.wait import ExponentialWait

    retryer = (
        RetryerBuilder()
        .with_caller(DirectCaller())
        .with_rule(StatusCodeRule())
        .with_rule(TransportErrorRule())
        .with_stop_strategy(StopAfterAttempt(5))
        .with_wait_strategy(RetryAfterWait(fallback=ExponentialWait(100, 10_000)))
        .build()
    )
    with httpx.Client() as client:
        response = retryer.call(lambda: client.get("https://api.example.com/data"))
    ```
"""

from __future__ import annotations

__all__ = [
    "RETRY_STATUS_CODES",
    "RetryAfterWait",
    "StatusCodeRule",
    "TransportErrorRule",
    "parse_retry_after",
]

import logging
import math
import sys
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any

import httpx

from retryer.utils.duration import to_millis
from retryer.utils.validation import validate_non_negative, validate_not_none
from retryer.wait import NO_WAIT, BaseWaitStrategy

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import timedelta

    from retryer.attempt import Attempt

logger: logging.Logger = logging.getLogger(__name__)

# HTTP status codes that are typically transient and worth retrying
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


def _find_response(attempt: Attempt[Any]) -> httpx.Response | None:
    if attempt.has_result():
        return attempt.value if isinstance(attempt.value, httpx.Response) else None
    if isinstance(attempt.cause, httpx.HTTPStatusError):
        return attempt.cause.response
    return None


def parse_retry_after(retry_after_header: str | None) -> float | None:
    """Parse the value of a ``Retry-After`` header.

    The header can be specified in two formats according to RFC 7231:
    a number of seconds (e.g. ``"120"``) or an HTTP-date (e.g.
    ``"Wed, 21 Oct 2015 07:28:00 GMT"``).

    Args:
        retry_after_header: The header value, or ``None`` if the header
            is absent.

    Returns:
        The number of seconds to wait, or ``None`` if the header is absent
        or cannot be parsed. Dates in the past are clamped to ``0.0``.

    Example:
        ```pycon
        >>> from retryer.http import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("invalid") is None
        True

        ```
    """
    if retry_after_header is None:
        return None

    with suppress(ValueError):
        seconds = float(retry_after_header)
        if not math.isfinite(seconds):
            logger.debug(f"Ignoring non-finite Retry-After header: {retry_after_header!r}")
            return None
        return max(0.0, seconds)

    try:
        retry_date: datetime = parsedate_to_datetime(retry_after_header)
        delta_seconds = (retry_date - datetime.now(timezone.utc)).total_seconds()
        return max(0.0, delta_seconds)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return None


class StatusCodeRule:
    """Retry when the response of the attempt has a listed status code.

    The response is either the value of a successful attempt or the
    ``response`` of an ``httpx.HTTPStatusError`` failure.

    Args:
        status_codes: The status codes to retry on.
    """

    def __init__(self, status_codes: Iterable[int] = RETRY_STATUS_CODES) -> None:
        validate_not_none(status_codes, "status_codes")
        self.status_codes = frozenset(status_codes)

    def __call__(self, attempt: Attempt[Any]) -> bool:
        response = _find_response(attempt)
        return response is not None and response.status_code in self.status_codes

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status_codes={sorted(self.status_codes)})"


class TransportErrorRule:
    """Retry when the attempt failed with an ``httpx.TransportError``.

    Transport errors cover timeouts, connection failures and protocol
    errors, i.e. failures where no response was received.
    """

    def __call__(self, attempt: Attempt[Any]) -> bool:
        return attempt.has_failure() and isinstance(attempt.cause, httpx.TransportError)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class RetryAfterWait(BaseWaitStrategy):
    """Wait as long as the server asks through its ``Retry-After`` header.

    Args:
        fallback: The strategy used when the attempt carries no response
            or the response has no parsable ``Retry-After`` header.
        max_wait: Optional cap on the delay requested by the server, in
            milliseconds or as a ``timedelta``. Without it the delay is
            only bounded by ``sys.maxsize``.

    Example:
        ```pycon
        >>> import httpx
        >>> from retryer.attempt import Attempt
        >>> from retryer.http import RetryAfterWait
        >>> from retryer.wait import FixedWait
        >>> strategy = RetryAfterWait(fallback=FixedWait(100), max_wait=5000)
        >>> response = httpx.Response(503, headers={"Retry-After": "2"})
        >>> strategy.compute_sleep_time(Attempt.from_result(response, attempt_number=1, elapsed_ms=0))
        2000
        >>> strategy.compute_sleep_time(
        ...     Attempt.from_result(httpx.Response(503), attempt_number=1, elapsed_ms=0)
        ... )
        100

        ```
    """

    def __init__(
        self,
        fallback: BaseWaitStrategy = NO_WAIT,
        max_wait: float | timedelta | None = None,
    ) -> None:
        validate_not_none(fallback, "fallback")
        if max_wait is not None:
            max_wait = to_millis(max_wait)
            validate_non_negative(max_wait, "max_wait")
        self.fallback = fallback
        self.max_wait = max_wait
        self._cap = sys.maxsize if max_wait is None else max_wait

    def compute_sleep_time(self, attempt: Attempt[Any]) -> int:
        response = _find_response(attempt)
        if response is not None:
            seconds = parse_retry_after(response.headers.get("Retry-After"))
            if seconds is not None:
                sleep_time = int(min(seconds * 1000, self._cap))
                logger.debug(f"Using Retry-After header: {sleep_time} ms")
                return sleep_time
        return self.fallback.compute_sleep_time(attempt)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(fallback={self.fallback!r}, max_wait={self.max_wait})"
