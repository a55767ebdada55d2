"""
Pytest configuration and shared fixtures for Project Registry tests.
"""

from typing import Callable

import pytest
import requests
from arango import ArangoClient
from arango.exceptions import ArangoError

from src.registry.service import RegistryService
from src.registry.store import InMemoryProjectStore
from src.shared.config import ARANGODB_DB, ARANGODB_USER, get_arango_password, get_memory_url


@pytest.fixture
def identity() -> Callable[[int], str]:
    """Factory for deterministic 32-byte identities in canonical hex form.

    Example:
        ```python
        def test_something(identity):
            owner = identity(1)   # "000...001"
        ```
    """
    def _identity(n: int) -> str:
        return f"{n:064x}"
    return _identity


@pytest.fixture
def owner(identity) -> str:
    return identity(0xA11CE)


@pytest.fixture
def outsider(identity) -> str:
    return identity(0xBAD)


@pytest.fixture
def memory_store() -> InMemoryProjectStore:
    return InMemoryProjectStore()


@pytest.fixture
def registry_service(memory_store) -> RegistryService:
    """RegistryService over a fresh in-memory store."""
    return RegistryService(memory_store)


@pytest.fixture
def real_arango():
    """Connected ArangoDB database for tests marked @pytest.mark.integration.

    Connection settings come from the same environment variables the server
    reads. Skips when no password is configured or the server cannot be reached.
    """
    password = get_arango_password()
    if not password:
        pytest.skip("ArangoDB password not configured (set ARANGODB_PASSWORD or ARANGO_ROOT_PASSWORD)")

    try:
        db = ArangoClient(hosts=get_memory_url()).db(ARANGODB_DB, username=ARANGODB_USER, password=password)
        db.version()
    except (ArangoError, requests.RequestException) as e:
        pytest.skip(f"ArangoDB not available: {e}")

    yield db
