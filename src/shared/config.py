"""
Shared configuration for the Project Registry.

Centralizes storage connection settings and registry policies using
environment variables. All services should use these constants instead of
hardcoded values.
"""

import hashlib
import os
from typing import Optional

# ============================================
# Storage (ArangoDB)
# ============================================

MEMORY_URL: str = os.getenv("MEMORY_URL", "http://registry-memory:8529")

ARANGODB_DB: str = os.getenv("ARANGODB_DB", "project_registry")
ARANGODB_USER: str = os.getenv("ARANGODB_USER", "root")
ARANGODB_PASSWORD: str = os.getenv("ARANGODB_PASSWORD", "")

# Backend used by the HTTP server: "arango" or "memory"
REGISTRY_STORE: str = os.getenv("REGISTRY_STORE", "arango").lower()

# ============================================
# Registry Policies
# ============================================

# Namespace seed mixed into every project address
REGISTRY_NAMESPACE: str = os.getenv("REGISTRY_NAMESPACE", "project")
# 32-byte program identity (hex) that scopes derived addresses
REGISTRY_PROGRAM_ID: str = os.getenv(
    "REGISTRY_PROGRAM_ID",
    hashlib.sha256(b"permission_program").hexdigest(),
)
# Re-read/re-apply attempts when a concurrent writer wins the revision race
REGISTRY_MAX_WRITE_RETRIES: int = int(os.getenv("REGISTRY_MAX_WRITE_RETRIES", "3"))

# ============================================
# HTTP
# ============================================

REGISTRY_API_URL: str = os.getenv("REGISTRY_API_URL", "http://registry-api:8000")

# ============================================
# Timeout Matrix (seconds)
# ============================================
TIMEOUT_MATRIX = {
    "ARANGO_QUERY": int(os.getenv("TIMEOUT_ARANGO_QUERY", "15")),
    "REGISTRY_HTTP": int(os.getenv("TIMEOUT_REGISTRY_HTTP", "10")),
}

# ============================================
# Environment Variable Names (for reference)
# ============================================
# These can be set in docker-compose.yml or .env files:
#
# MEMORY_URL=http://registry-memory:8529
# ARANGODB_DB=project_registry
# ARANGODB_USER=root
# ARANGODB_PASSWORD=
# REGISTRY_STORE=arango
# REGISTRY_NAMESPACE=project
# REGISTRY_MAX_WRITE_RETRIES=3
# LOG_FORMAT=text
# LOG_LEVEL=INFO

# ============================================
# Helper Functions
# ============================================

def get_memory_url() -> str:
    """Get Memory (ArangoDB) service URL from environment or default."""
    return MEMORY_URL


def get_arango_password() -> str:
    """Centralized ArangoDB password lookup with ARANGO_ROOT_PASSWORD override."""
    return os.getenv("ARANGO_ROOT_PASSWORD") or ARANGODB_PASSWORD


def get_registry_api_url(override: Optional[str] = None) -> str:
    """Get the registry HTTP API base URL without a trailing slash."""
    return (override or REGISTRY_API_URL).rstrip("/")
