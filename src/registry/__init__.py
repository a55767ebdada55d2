"""Project Registry: owner-controlled membership records.

Pure transitions live in ``core``; ``service`` hosts them over a store.
"""

from .errors import RegistryErrorCode
from .types import MAX_MEMBERS, OperationResult, Project, ProjectSummary, normalize_identity
from .service import RegistryService
from .store import ArangoProjectStore, InMemoryProjectStore

__all__ = [
    "MAX_MEMBERS",
    "RegistryErrorCode",
    "OperationResult",
    "Project",
    "ProjectSummary",
    "normalize_identity",
    "RegistryService",
    "ArangoProjectStore",
    "InMemoryProjectStore",
]
