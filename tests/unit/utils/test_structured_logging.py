from __future__ import annotations

import json
import logging
from io import StringIO
from typing import TYPE_CHECKING, Any

import pytest

from retryer.utils.structured_logging import (
    StructuredFormatter,
    clear_session_id,
    get_session_id,
    log_structured,
    session_scope,
    set_session_id,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def stream() -> StringIO:
    return StringIO()


@pytest.fixture
def structured_logger(stream: StringIO) -> Generator[logging.Logger, None, None]:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("tests.structured")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger
    logger.removeHandler(handler)
    logger.propagate = True


def read_records(stream: StringIO) -> list[dict[str, Any]]:
    return [json.loads(line) for line in stream.getvalue().strip().split("\n") if line]


#########################################
#     Tests for session id handling     #
#########################################


def test_get_session_id_initially_none() -> None:
    """Test that no session id is set by default."""
    assert get_session_id() is None


def test_set_and_clear_session_id() -> None:
    """Test setting, overriding and clearing the session id."""
    set_session_id("job-1")
    assert get_session_id() == "job-1"
    set_session_id("job-2")
    assert get_session_id() == "job-2"
    clear_session_id()
    assert get_session_id() is None


###################################
#     Tests for session_scope     #
###################################


def test_session_scope_explicit_id() -> None:
    with session_scope("job-9") as session_id:
        assert session_id == "job-9"
        assert get_session_id() == "job-9"
    assert get_session_id() is None


def test_session_scope_generates_id() -> None:
    """Test that a fresh id is generated when none is active."""
    with session_scope() as first:
        assert get_session_id() == first
    with session_scope() as second:
        pass
    assert len(first) == 12
    assert first != second


def test_session_scope_reuses_active_id() -> None:
    set_session_id("nightly-sync")
    with session_scope() as session_id:
        assert session_id == "nightly-sync"
    assert get_session_id() == "nightly-sync"


def test_session_scope_restores_previous_id_on_error() -> None:
    set_session_id("outer")
    with pytest.raises(RuntimeError), session_scope("inner"):
        raise RuntimeError
    assert get_session_id() == "outer"


##########################################
#     Tests for StructuredFormatter      #
##########################################


def test_structured_formatter_standard_fields(
    structured_logger: logging.Logger, stream: StringIO
) -> None:
    """Test that each record is one JSON object with the standard fields."""
    structured_logger.info("Attempt accepted")

    (record,) = read_records(stream)
    assert record["message"] == "Attempt accepted"
    assert record["level"] == "INFO"
    assert record["logger"] == "tests.structured"
    for key in ("timestamp", "module", "function", "line", "thread", "process"):
        assert key in record


def test_structured_formatter_session_id(
    structured_logger: logging.Logger, stream: StringIO
) -> None:
    """Test that the session id is attached when set."""
    set_session_id("sync-orders")
    structured_logger.info("with session")
    clear_session_id()
    structured_logger.info("without session")

    first, second = read_records(stream)
    assert first["session_id"] == "sync-orders"
    assert "session_id" not in second


def test_structured_formatter_extra_fields(
    structured_logger: logging.Logger, stream: StringIO
) -> None:
    """Test that extra fields become JSON keys."""
    structured_logger.debug("Attempt rejected", extra={"attempt_number": 2, "sleep_time": 400})

    (record,) = read_records(stream)
    assert record["attempt_number"] == 2
    assert record["sleep_time"] == 400


def test_structured_formatter_non_serializable_extra(
    structured_logger: logging.Logger, stream: StringIO
) -> None:
    """Test that values JSON cannot encode are rendered with repr."""
    structured_logger.info("cause", extra={"cause": KeyError("k")})

    (record,) = read_records(stream)
    assert record["cause"] == "KeyError('k')"


def test_structured_formatter_exception(
    structured_logger: logging.Logger, stream: StringIO
) -> None:
    """Test that the traceback is included for exception records."""
    try:
        raise ValueError("listener failed")
    except ValueError:
        structured_logger.warning("Listener failed", exc_info=True)

    (record,) = read_records(stream)
    assert "ValueError: listener failed" in record["exception"]


def test_structured_formatter_timestamp_format(
    structured_logger: logging.Logger, stream: StringIO
) -> None:
    """Test the ISO 8601 timestamp with millisecond precision."""
    structured_logger.info("timestamp")

    timestamp = read_records(stream)[0]["timestamp"]
    # Format: YYYY-MM-DDTHH:MM:SS.MMMZ
    assert len(timestamp) == 24
    assert timestamp[10] == "T"
    assert timestamp.endswith("Z")


####################################
#     Tests for log_structured     #
####################################


def test_log_structured_extra_fields(structured_logger: logging.Logger, stream: StringIO) -> None:
    """Test that keyword arguments are logged as fields."""
    log_structured(
        structured_logger, logging.DEBUG, "Stopping", attempt_number=3, elapsed_ms=1200
    )

    (record,) = read_records(stream)
    assert record["message"] == "Stopping"
    assert record["level"] == "DEBUG"
    assert record["attempt_number"] == 3
    assert record["elapsed_ms"] == 1200


def test_log_structured_respects_level(
    structured_logger: logging.Logger, stream: StringIO
) -> None:
    """Test that records below the logger level are dropped."""
    structured_logger.setLevel(logging.WARNING)
    log_structured(structured_logger, logging.DEBUG, "dropped")
    log_structured(structured_logger, logging.WARNING, "kept")

    assert [record["message"] for record in read_records(stream)] == ["kept"]
