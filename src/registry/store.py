"""
Project record storage.

ArangoDB is the system of record: one document per project, keyed by its
derived address, holding the fixed-layout account bytes plus queryable
projections (owner, members). Writes are conditional on the document
revision so that concurrent transitions on the same record serialize.

An in-memory store with the same interface serves development and tests.
"""

import threading
from typing import Dict, List, Optional, Tuple

from arango.database import StandardDatabase
from arango.exceptions import ArangoError, DocumentInsertError, DocumentRevisionError

from ..shared.logger import get_logger
from ..shared.utils import utc_now_iso
from .codec import decode_project, encode_project
from .errors import ProjectAlreadyInitializedError, ProjectNotFoundError, RevisionConflictError
from .types import Project, ProjectSummary

logger = get_logger("registry", __name__)

# ArangoDB error numbers
ERROR_UNIQUE_CONSTRAINT_VIOLATED = 1210
ERROR_DOCUMENT_NOT_FOUND = 1202


def _to_document(address: str, project: Project) -> Dict:
    return {
        "_key": address,
        "owner": project.owner,
        "members": list(project.members),
        "member_count": len(project.members),
        "address_tag": project.address_tag,
        "data": encode_project(project).hex(),
        "updated_at": utc_now_iso(),
    }


def _from_document(doc: Dict) -> Project:
    return decode_project(bytes.fromhex(doc["data"]))


class ArangoProjectStore:
    """Project records in an ArangoDB collection."""

    COLLECTION_NAME = "projects"

    def __init__(self, db: StandardDatabase) -> None:
        """
        Initialize the store.

        Args:
            db: ArangoDB StandardDatabase instance (must be connected).

        Raises:
            ValueError: If db is None.
        """
        if db is None:
            raise ValueError("Database instance is required")
        self.db = db

    def ensure_schema(self) -> None:
        """Ensure the collection exists with a unique index on owner.

        Raises:
            RuntimeError: If schema setup fails.
        """
        try:
            if not self.db.has_collection(self.COLLECTION_NAME):
                self.db.create_collection(self.COLLECTION_NAME)
                logger.info(f"Created collection '{self.COLLECTION_NAME}'")

            collection = self.db.collection(self.COLLECTION_NAME)
            collection.add_index({
                "type": "persistent",
                "fields": ["owner"],
                "unique": True,
                "name": "idx_owner",
            })
            logger.debug(f"Ensured index on 'owner' in '{self.COLLECTION_NAME}'")

        except ArangoError as e:
            logger.error(f"Failed to ensure schema for '{self.COLLECTION_NAME}': {e}", exc_info=True)
            raise RuntimeError(f"Schema setup failed: {e}") from e

    def insert(self, address: str, project: Project) -> str:
        """Store a new record at ``address`` and return its revision.

        Raises:
            ProjectAlreadyInitializedError: If a record already exists.
            RuntimeError: If the database operation fails.
        """
        doc = _to_document(address, project)
        doc["created_at"] = doc["updated_at"]
        try:
            meta = self.db.collection(self.COLLECTION_NAME).insert(doc)
            return meta["_rev"]
        except DocumentInsertError as e:
            if e.error_code == ERROR_UNIQUE_CONSTRAINT_VIOLATED:
                raise ProjectAlreadyInitializedError(
                    f"Project already initialized for owner: {project.owner}"
                ) from e
            logger.error(f"Failed to insert project {address}: {e}", exc_info=True)
            raise RuntimeError(f"Failed to insert project: {e}") from e
        except ArangoError as e:
            logger.error(f"Failed to insert project {address}: {e}", exc_info=True)
            raise RuntimeError(f"Failed to insert project: {e}") from e

    def get(self, address: str) -> Tuple[Project, str]:
        """Fetch the record at ``address`` with its current revision.

        Raises:
            ProjectNotFoundError: If no record exists.
            RuntimeError: If the database operation fails.
        """
        try:
            doc = self.db.collection(self.COLLECTION_NAME).get(address)
        except ArangoError as e:
            logger.error(f"Failed to fetch project {address}: {e}", exc_info=True)
            raise RuntimeError(f"Failed to fetch project: {e}") from e

        if doc is None:
            raise ProjectNotFoundError(f"Project not found: {address}")
        return _from_document(doc), doc["_rev"]

    def replace(self, address: str, project: Project, revision: str) -> str:
        """Overwrite the record if it is still at ``revision``.

        Raises:
            RevisionConflictError: If another writer committed first.
            ProjectNotFoundError: If the record disappeared.
            RuntimeError: If the database operation fails.
        """
        doc = _to_document(address, project)
        doc["_rev"] = revision
        try:
            meta = self.db.collection(self.COLLECTION_NAME).replace(doc, check_rev=True)
            return meta["_rev"]
        except DocumentRevisionError as e:
            raise RevisionConflictError(f"Revision conflict on project {address}") from e
        except ArangoError as e:
            if getattr(e, "error_code", None) == ERROR_DOCUMENT_NOT_FOUND:
                raise ProjectNotFoundError(f"Project not found: {address}") from e
            logger.error(f"Failed to replace project {address}: {e}", exc_info=True)
            raise RuntimeError(f"Failed to replace project: {e}") from e

    def find_by_owner(self, owner: str) -> Optional[str]:
        """Return the address of the project owned by ``owner``, if any."""
        query = """
        FOR p IN @@col
        FILTER p.owner == @owner
        LIMIT 1
        RETURN p._key
        """
        try:
            cursor = self.db.aql.execute(
                query,
                bind_vars={"@col": self.COLLECTION_NAME, "owner": owner},
            )
            results = list(cursor)
        except ArangoError as e:
            logger.error(f"Failed to look up project for owner {owner}: {e}", exc_info=True)
            raise RuntimeError(f"Failed to look up project: {e}") from e
        return results[0] if results else None

    def list_projects(self) -> List[ProjectSummary]:
        """List all projects, most recently written first."""
        query = """
        FOR p IN @@col
        SORT p.updated_at DESC
        RETURN { address: p._key, owner: p.owner, member_count: p.member_count, updated_at: p.updated_at }
        """
        try:
            cursor = self.db.aql.execute(query, bind_vars={"@col": self.COLLECTION_NAME})
            summaries = [ProjectSummary(**doc) for doc in cursor]
        except ArangoError as e:
            logger.error(f"Failed to list projects: {e}", exc_info=True)
            raise RuntimeError(f"Failed to list projects: {e}") from e

        logger.info(f"Listed {len(summaries)} projects")
        return summaries


class InMemoryProjectStore:
    """Process-local store keyed by address. Thread-safe."""

    def __init__(self) -> None:
        self._docs: Dict[str, Dict] = {}
        self._lock = threading.Lock()
        self._revision = 0

    def _next_revision(self) -> str:
        self._revision += 1
        return str(self._revision)

    def ensure_schema(self) -> None:
        return None

    def insert(self, address: str, project: Project) -> str:
        with self._lock:
            if address in self._docs:
                raise ProjectAlreadyInitializedError(
                    f"Project already initialized for owner: {project.owner}"
                )
            doc = _to_document(address, project)
            doc["created_at"] = doc["updated_at"]
            doc["_rev"] = self._next_revision()
            self._docs[address] = doc
            return doc["_rev"]

    def get(self, address: str) -> Tuple[Project, str]:
        with self._lock:
            doc = self._docs.get(address)
            if doc is None:
                raise ProjectNotFoundError(f"Project not found: {address}")
            return _from_document(doc), doc["_rev"]

    def replace(self, address: str, project: Project, revision: str) -> str:
        with self._lock:
            current = self._docs.get(address)
            if current is None:
                raise ProjectNotFoundError(f"Project not found: {address}")
            if current["_rev"] != revision:
                raise RevisionConflictError(f"Revision conflict on project {address}")
            doc = _to_document(address, project)
            doc["created_at"] = current.get("created_at")
            doc["_rev"] = self._next_revision()
            self._docs[address] = doc
            return doc["_rev"]

    def find_by_owner(self, owner: str) -> Optional[str]:
        with self._lock:
            for address, doc in self._docs.items():
                if doc["owner"] == owner:
                    return address
        return None

    def list_projects(self) -> List[ProjectSummary]:
        with self._lock:
            docs = sorted(self._docs.values(), key=lambda d: d["updated_at"], reverse=True)
            return [
                ProjectSummary(
                    address=d["_key"],
                    owner=d["owner"],
                    member_count=d["member_count"],
                    updated_at=d["updated_at"],
                )
                for d in docs
            ]
