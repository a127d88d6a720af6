import logging
import os

# The API refuses requests without a configured key.
os.environ.setdefault("API_KEY", "test-api-key")

import pytest

from tests.factories import REFERENCE_TIME, BookingFactory, UserFactory, local_ms


@pytest.fixture
def booking_factory() -> BookingFactory:
    return BookingFactory()


@pytest.fixture
def user_factory() -> UserFactory:
    return UserFactory()


@pytest.fixture
def now() -> float:
    """Fixed 'current time' in ms for time-window tests."""
    return local_ms(REFERENCE_TIME)


@pytest.fixture
def auth_headers():
    """Pre-configured API key headers for authenticated requests."""
    return {"X-API-Key": "test-api-key"}


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces root handlers; put the originals back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
