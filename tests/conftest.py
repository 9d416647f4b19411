"""Pytest fixtures for quoting, intake and training tests."""

import pytest

from src.database.redis import RedisCache
from src.integrations.clients.mocks.quote_requests import MockQuoteRequestClient
from src.integrations.clients.mocks.training_progress import MockTrainingProgressClient
from src.quoting.rate_calculator import RateInput
from src.utils.config_loader import QuoteConfig


@pytest.fixture
def cache():
    """In-memory RedisCache stub for tests."""
    return RedisCache()


@pytest.fixture
def quote_client():
    return MockQuoteRequestClient()


@pytest.fixture
def training_client():
    return MockTrainingProgressClient()


@pytest.fixture
def config():
    return QuoteConfig()


@pytest.fixture
def applicant():
    """35-year-old male non-smoker in good health, $500k over 20 years."""
    return RateInput(coverage=500000, term_years=20, age=35, gender="male", smoker=False, health_rating="good")


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
