"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("AMLAK_API_BASE_URL", "https://api.test")
os.environ.setdefault("AMLAK_API_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from amlak.models.user import Session, User
from amlak.services.api_client import ApiClient
from amlak.services.auth_service import AuthService
from amlak.services.property_service import PropertyService
from amlak.services.session_store import MemoryStorage, SessionStore
from amlak.utils.config import ApiConfig, reset_api_config
from tests.utils.factories import create_property_data
from tests.utils.helpers import FakeBackend


@pytest.fixture
def api_config():
    """Config pointing at the fake backend host."""
    return ApiConfig(base_url="https://api.test", api_key="test-key")


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def session_store(memory_storage):
    return SessionStore(memory_storage)


@pytest.fixture
def sample_user():
    return User(id="1", email="a@b.com", role="admin", is_active=True)


@pytest.fixture
def signed_in_store(session_store, sample_user):
    """Session store holding a signed-in admin."""
    session_store.store(Session(access_token="AT", refresh_token="RT", user=sample_user))
    return session_store


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def api_client(session_store, api_config, fake_backend):
    return ApiClient(session_store, api_config, transport=fake_backend.transport)


@pytest.fixture
def auth_service(api_client, session_store):
    return AuthService(api_client, session_store)


@pytest.fixture
def property_service(api_client):
    return PropertyService(api_client)


@pytest.fixture
def sample_property_data():
    return create_property_data(property_id="42")


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Drop the cached ApiConfig around every test."""
    reset_api_config()
    yield
    reset_api_config()
