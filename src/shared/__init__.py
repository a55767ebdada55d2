"""Shared configuration and logging for the Project Registry."""

from .config import (
    MEMORY_URL,
    ARANGODB_DB,
    ARANGODB_USER,
    ARANGODB_PASSWORD,
    REGISTRY_STORE,
    REGISTRY_NAMESPACE,
    REGISTRY_PROGRAM_ID,
    REGISTRY_MAX_WRITE_RETRIES,
    REGISTRY_API_URL,
    TIMEOUT_MATRIX,
    get_memory_url,
    get_arango_password,
    get_registry_api_url,
)
from .logger import get_logger, log_fields

__all__ = [
    "MEMORY_URL",
    "ARANGODB_DB",
    "ARANGODB_USER",
    "ARANGODB_PASSWORD",
    "REGISTRY_STORE",
    "REGISTRY_NAMESPACE",
    "REGISTRY_PROGRAM_ID",
    "REGISTRY_MAX_WRITE_RETRIES",
    "REGISTRY_API_URL",
    "TIMEOUT_MATRIX",
    "get_memory_url",
    "get_arango_password",
    "get_registry_api_url",
    "get_logger",
    "log_fields",
]
