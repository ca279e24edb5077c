from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from retryer.utils.structured_logging import clear_session_id

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_listener() -> Mock:
    """Create a mock listener recording the published attempts."""
    return Mock(return_value=None)


@pytest.fixture(autouse=True)
def _clean_session_id() -> Generator[None, None, None]:
    """Make sure no session id leaks from one test to another."""
    clear_session_id()
    yield
    clear_session_id()


@pytest.fixture
def retryer_logger() -> Generator[logging.Logger, None, None]:
    """Return the package logger with DEBUG enabled for the test."""
    logger = logging.getLogger("retryer")
    level = logger.level
    logger.setLevel(logging.DEBUG)
    yield logger
    logger.setLevel(level)
