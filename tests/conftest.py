import pytest

from relay_service.config import Settings
from tests.fakes import API_KEY, INTERNAL_TOKEN


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key=API_KEY,
        internal_token=INTERNAL_TOKEN,
        api_base_url="https://commerce.test/v1",
    )


@pytest.fixture
def delays() -> list[float]:
    return []
