"""
Unit test firewall: no database or network IO from anything under src/tests/unit/.

Patches are applied at the source library (``arango.ArangoClient``,
``requests.*``), never at a consumer such as ``src.registry.server``.
Tests that need specific responses override a verb with monkeypatch.
"""

from unittest.mock import MagicMock, Mock

import pytest


def _fake_collection(name: str) -> MagicMock:
    collection = MagicMock(name=f"collection:{name}")
    collection.get.return_value = None
    collection.insert.return_value = {"_key": "firewalled", "_id": f"{name}/firewalled", "_rev": "1"}
    collection.replace.return_value = {"_key": "firewalled", "_rev": "2"}
    collection.add_index.return_value = None
    return collection


@pytest.fixture(autouse=True)
def mock_arango_firewall(monkeypatch):
    """Replace arango.ArangoClient with a factory for an empty fake database.

    Yields the fake database so a test can inspect or program it.
    """
    fake_db = Mock(name="arango-db")
    fake_db.version.return_value = "3.11.0"
    fake_db.has_collection.return_value = True
    fake_db.collection.side_effect = _fake_collection
    fake_db.create_collection.side_effect = _fake_collection
    fake_db.aql.execute.return_value = iter([])

    def fake_client(hosts: str, **kwargs):
        client = Mock(name="arango-client")
        client.db.return_value = fake_db
        return client

    monkeypatch.setattr("arango.ArangoClient", fake_client)
    yield fake_db


@pytest.fixture(autouse=True)
def mock_requests_firewall(monkeypatch):
    """Answer every outgoing HTTP call with an empty 200 JSON response.

    Yields the list of (method, url) pairs that reached the firewall.
    """
    seen = []

    def respond(method: str, url: str) -> MagicMock:
        seen.append((method, url))
        response = MagicMock(name=f"response:{method}")
        response.status_code = 200
        response.ok = True
        response.headers = {}
        response.json.return_value = {}
        return response

    monkeypatch.setattr("requests.api.request", lambda method, url, **kwargs: respond(method.upper(), url))
    for verb in ("get", "post", "delete"):
        monkeypatch.setattr(f"requests.{verb}", lambda url, _verb=verb, **kwargs: respond(_verb.upper(), url))

    yield seen
