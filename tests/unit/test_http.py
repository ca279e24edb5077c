r"""Unit tests for the httpx integration."""

from __future__ import annotations

import sys
import threading
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from unittest.mock import Mock, call

import httpx
import pytest

from retryer.builder import RetryerBuilder
from retryer.caller import DirectCaller
from retryer.exceptions import RetryExhaustedError
from retryer.http import (
    RETRY_STATUS_CODES,
    RetryAfterWait,
    StatusCodeRule,
    TransportErrorRule,
    parse_retry_after,
)
from retryer.stop import StopAfterAttempt
from retryer.wait import FixedWait
from tests.helpers import failure, result

REQUEST = httpx.Request("GET", "https://example.com/data")


def make_response(status_code: int, retry_after: str | None = None) -> httpx.Response:
    headers = {} if retry_after is None else {"Retry-After": retry_after}
    return httpx.Response(status_code, headers=headers, request=REQUEST)


def make_status_error(status_code: int, retry_after: str | None = None) -> httpx.HTTPStatusError:
    response = make_response(status_code, retry_after)
    return httpx.HTTPStatusError(f"status {status_code}", request=REQUEST, response=response)


def test_retry_status_codes() -> None:
    assert RETRY_STATUS_CODES == (429, 500, 502, 503, 504)


#######################################
#     Tests for parse_retry_after     #
#######################################


@pytest.mark.parametrize(
    ("header", "expected"),
    [("120", 120.0), ("0", 0.0), ("1.5", 1.5), ("-3", 0.0)],
)
def test_parse_retry_after_seconds(header: str, expected: float) -> None:
    assert parse_retry_after(header) == expected


@pytest.mark.parametrize("header", [None, "invalid", "", "inf", "nan"])
def test_parse_retry_after_unparsable(header: str | None) -> None:
    assert parse_retry_after(header) is None


def test_parse_retry_after_http_date() -> None:
    future = datetime.now(timezone.utc) + timedelta(seconds=30)
    seconds = parse_retry_after(format_datetime(future, usegmt=True))
    assert seconds is not None
    assert 25 <= seconds <= 30


def test_parse_retry_after_past_http_date() -> None:
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0


####################################
#     Tests for StatusCodeRule     #
####################################


@pytest.mark.parametrize("status_code", RETRY_STATUS_CODES)
def test_status_code_rule_retryable_response(status_code: int) -> None:
    assert StatusCodeRule()(result(make_response(status_code)))


@pytest.mark.parametrize("status_code", [200, 201, 400, 404])
def test_status_code_rule_non_retryable_response(status_code: int) -> None:
    assert not StatusCodeRule()(result(make_response(status_code)))


def test_status_code_rule_status_error() -> None:
    assert StatusCodeRule()(failure(make_status_error(503)))
    assert not StatusCodeRule()(failure(make_status_error(404)))


def test_status_code_rule_custom_codes() -> None:
    rule = StatusCodeRule(status_codes=[404])
    assert rule(result(make_response(404)))
    assert not rule(result(make_response(503)))


def test_status_code_rule_ignores_other_outcomes() -> None:
    assert not StatusCodeRule()(result("not a response"))
    assert not StatusCodeRule()(failure(ValueError()))


########################################
#     Tests for TransportErrorRule     #
########################################


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("refused", request=REQUEST),
        httpx.ReadTimeout("slow", request=REQUEST),
        httpx.RemoteProtocolError("eof", request=REQUEST),
    ],
)
def test_transport_error_rule_matches(error: httpx.TransportError) -> None:
    assert TransportErrorRule()(failure(error))


def test_transport_error_rule_ignores_other_outcomes() -> None:
    assert not TransportErrorRule()(failure(make_status_error(503)))
    assert not TransportErrorRule()(result(make_response(503)))


####################################
#     Tests for RetryAfterWait     #
####################################


def test_retry_after_wait_uses_header() -> None:
    wait = RetryAfterWait(fallback=FixedWait(100))
    assert wait.compute_sleep_time(result(make_response(429, retry_after="3"))) == 3000


def test_retry_after_wait_from_status_error() -> None:
    wait = RetryAfterWait(fallback=FixedWait(100))
    assert wait.compute_sleep_time(failure(make_status_error(503, retry_after="1"))) == 1000


def test_retry_after_wait_capped() -> None:
    wait = RetryAfterWait(max_wait=timedelta(seconds=10))
    assert wait.compute_sleep_time(result(make_response(503, retry_after="3600"))) == 10_000


@pytest.mark.parametrize(
    "attempt",
    [
        result(make_response(503)),
        result(make_response(503, retry_after="soon")),
        failure(httpx.ConnectError("refused")),
        result("no response"),
    ],
)
def test_retry_after_wait_fallback(attempt: object) -> None:
    assert RetryAfterWait(fallback=FixedWait(250)).compute_sleep_time(attempt) == 250


def test_retry_after_wait_default_fallback() -> None:
    assert RetryAfterWait().compute_sleep_time(result(make_response(503))) == 0


@pytest.mark.parametrize("retry_after", ["1e300", "1e308"])
def test_retry_after_wait_huge_header_without_cap(retry_after: str) -> None:
    """Test that a huge server delay is bounded by sys.maxsize."""
    wait = RetryAfterWait()
    assert wait.compute_sleep_time(result(make_response(503, retry_after))) == sys.maxsize


def test_retry_after_wait_negative_max_wait() -> None:
    with pytest.raises(ValueError, match=r"max_wait must be >= 0"):
        RetryAfterWait(max_wait=-1)


#####################################
#     Tests for the retry loop      #
#####################################


def test_http_retryer_retries_server_errors(mock_sleep: Mock) -> None:
    """Test a retryer for HTTP calls with a mocked transport."""
    responses = iter(
        [
            httpx.Response(503, headers={"Retry-After": "2"}),
            httpx.Response(502),
            httpx.Response(200, json={"ok": True}),
        ]
    )
    transport = httpx.MockTransport(lambda request: next(responses))
    retryer = (
        RetryerBuilder()
        .with_caller(DirectCaller())
        .with_rule(StatusCodeRule())
        .with_rule(TransportErrorRule())
        .with_stop_strategy(StopAfterAttempt(5))
        .with_wait_strategy(RetryAfterWait(fallback=FixedWait(100)))
        .build()
    )

    with httpx.Client(transport=transport) as client:
        response = retryer.call(lambda: client.get("https://example.com/data"))

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert [args[0] for args, _ in mock_sleep.call_args_list] == [2.0, 0.1]


def test_http_retryer_raise_for_status_exhausted(mock_sleep: Mock) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    retryer = (
        RetryerBuilder()
        .with_caller(DirectCaller())
        .with_rule(StatusCodeRule())
        .with_stop_strategy(StopAfterAttempt(2))
        .build()
    )

    with httpx.Client(transport=transport) as client, pytest.raises(RetryExhaustedError) as exc_info:
        retryer.call(lambda: client.get("https://example.com/").raise_for_status())

    assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)
    assert exc_info.value.cause.response.status_code == 500
    mock_sleep.assert_not_called()


def test_http_retryer_huge_retry_after(mock_sleep: Mock) -> None:
    """Test that a huge Retry-After header waits as long as the platform
    allows instead of crashing the loop."""
    retryer = (
        RetryerBuilder()
        .with_caller(DirectCaller())
        .with_rule(StatusCodeRule())
        .with_stop_strategy(StopAfterAttempt(3))
        .with_wait_strategy(RetryAfterWait())
        .build()
    )

    with pytest.raises(RetryExhaustedError) as exc_info:
        retryer.call(lambda: make_response(503, retry_after="1e300"))

    assert exc_info.value.attempt_number == 3
    assert mock_sleep.call_args_list == [call(threading.TIMEOUT_MAX)] * 2
