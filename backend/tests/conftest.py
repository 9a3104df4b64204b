"""
Pytest configuration for MediQueue tests
"""

import httpx
import pytest

from mediqueue.services.api_client import QueueApiClient
from mediqueue.token_store import StaticTokenProvider, TokenStore

from .helpers import BASE_URL, FakeBackend


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api_client(backend):
    return QueueApiClient(
        StaticTokenProvider("patient-token"),
        base_url=BASE_URL,
        timeout=5,
        transport=httpx.MockTransport(backend.handler)
    )


@pytest.fixture
def token_store(tmp_path):
    return TokenStore(str(tmp_path / "storage.json"))
