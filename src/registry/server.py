"""
HTTP server for the Project Registry.

Builds the Flask app, registers the registry blueprint and lazily connects
the RegistryService to its configured store.
"""

from typing import Optional

from arango import ArangoClient
from flask import Flask, jsonify

from ..shared.config import (
    ARANGODB_DB,
    ARANGODB_USER,
    REGISTRY_STORE,
    TIMEOUT_MATRIX,
    get_arango_password,
    get_memory_url,
)
from ..shared.logger import get_logger
from .api import registry_bp, set_service_provider
from .codec import PROJECT_ACCOUNT_SIZE
from .service import RegistryService
from .store import ArangoProjectStore, InMemoryProjectStore
from .types import MAX_MEMBERS

logger = get_logger("registry-api", __name__)

_registry_service: Optional[RegistryService] = None


def _init_registry_service() -> Optional[RegistryService]:
    """Initialize RegistryService with the configured store.

    Returns:
        RegistryService instance if the store is reachable, None otherwise.
    """
    if REGISTRY_STORE == "memory":
        logger.info("RegistryService using in-memory store")
        return RegistryService(InMemoryProjectStore())

    try:
        client = ArangoClient(hosts=get_memory_url(), request_timeout=TIMEOUT_MATRIX["ARANGO_QUERY"])
        db = client.db(ARANGODB_DB, username=ARANGODB_USER, password=get_arango_password())

        store = ArangoProjectStore(db)
        store.ensure_schema()
        logger.info("RegistryService initialized successfully")
        return RegistryService(store)

    except Exception as e:
        logger.error(f"Failed to initialize RegistryService: {e}", exc_info=True)
        return None


def get_registry_service() -> Optional[RegistryService]:
    """Get or initialize RegistryService (lazy initialization).

    Returns:
        RegistryService instance if available, None if storage unavailable.
    """
    global _registry_service
    if _registry_service is None:
        _registry_service = _init_registry_service()
    return _registry_service


def reset_registry_service(service: Optional[RegistryService] = None) -> None:
    """Replace the cached service (None forces re-initialization)."""
    global _registry_service
    _registry_service = service


app = Flask(__name__)
app.register_blueprint(registry_bp)
set_service_provider(get_registry_service)


@app.route("/health", methods=["GET"])
def health():
    """Report whether the registry store is reachable."""
    service = get_registry_service()
    body = {
        "status": "ok" if service is not None else "degraded",
        "store": REGISTRY_STORE,
        "max_members": MAX_MEMBERS,
        "account_size": PROJECT_ACCOUNT_SIZE,
    }
    return jsonify(body), 200 if service is not None else 503
