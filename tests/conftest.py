import os

# Settings are read once and cached; pin the test environment before any
# catering module is imported.
os.environ["ENV_MODE"] = "development"
os.environ["MOCK_NOTIFICATION_FAILURE_RATE"] = "0"
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest

from catering.core.config import get_settings
from catering.services.booking_api import InMemoryBookingAPI, reset_booking_api
from catering.services.notifications import MockNotificationService, reset_notification_service
from tests.factories import make_booking


@pytest.fixture(autouse=True)
def _reset_service_caches():
    yield
    reset_booking_api()
    reset_notification_service()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def booking():
    return make_booking()


@pytest.fixture
def memory_api():
    """Empty in-memory booking service without latency or failures."""
    return InMemoryBookingAPI(min_latency=0, max_latency=0)


@pytest.fixture
def notifier():
    return MockNotificationService(failure_rate=0.0, latency=0)
