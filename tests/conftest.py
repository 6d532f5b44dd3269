from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from expbackoff import CancelToken, Delay, DelayConfig

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
def delay() -> Delay:
    """Create a Delay with max=100 and factor=2."""
    return Delay(DelayConfig(max=100, factor=2))


@pytest.fixture
def uninitialized_delay() -> Delay:
    """Create a Delay that bypassed the constructor."""
    return Delay.__new__(Delay)


@pytest.fixture
def cancelled_token() -> CancelToken:
    """Create a token that is already cancelled."""
    token = CancelToken()
    token.cancel()
    return token
