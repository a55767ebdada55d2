"""
Registry Service: dispatches one registry operation per call.

Resolves the record's address, loads the current state from the store,
runs the pure transition and commits the result with a revision-checked
write. A lost revision race re-reads and re-runs the transition against
the latest state.
"""

from typing import Callable, List, Optional, Tuple

from ..shared.config import REGISTRY_MAX_WRITE_RETRIES
from ..shared.logger import get_logger, log_fields
from . import core
from .addressing import find_project_address, is_project_address, verify_project_address
from .errors import (
    AddressMismatchError,
    ConcurrentModificationError,
    ProjectNotFoundError,
    RevisionConflictError,
)
from .types import OperationResult, Project, ProjectSummary, normalize_identity

logger = get_logger("registry", __name__)

Transition = Callable[[Project], OperationResult]


class RegistryService:
    """Hosts the registry transitions over a project store."""

    def __init__(
        self,
        store,
        program_id: Optional[str] = None,
        namespace: Optional[str] = None,
        max_retries: Optional[int] = None,
    ) -> None:
        """
        Initialize the Registry Service.

        Args:
            store: ArangoProjectStore or InMemoryProjectStore.
            program_id: Program identity scoping derived addresses. Defaults to config.
            namespace: Address namespace seed. Defaults to config.
            max_retries: Extra attempts after a revision conflict. Defaults to config.

        Raises:
            ValueError: If store is None.
        """
        if store is None:
            raise ValueError("Project store is required")
        self.store = store
        self.program_id = program_id
        self.namespace = namespace
        self.max_retries = REGISTRY_MAX_WRITE_RETRIES if max_retries is None else max_retries

    def _load(self, address: str) -> Tuple[Project, str]:
        if not is_project_address(address):
            raise ProjectNotFoundError(f"Project not found: {address}")
        address = address.lower()
        project, revision = self.store.get(address)
        if not verify_project_address(address, project.owner, project.address_tag, self.namespace, self.program_id):
            logger.error(
                f"Stored project does not derive to address {address}",
                extra=log_fields(address=address, owner=project.owner),
            )
            raise AddressMismatchError(f"Project at {address} does not match its owner seeds")
        return project, revision

    def _commit(self, address: str, operation: str, transition: Transition) -> OperationResult:
        address = address.lower()
        for attempt in range(self.max_retries + 1):
            project, revision = self._load(address)
            result = transition(project)
            if not result.ok:
                logger.info(
                    f"{operation} rejected: {result.error.value}",
                    extra=log_fields(operation=operation, address=address, error=result.error.value),
                )
                return result.with_address(address)
            try:
                self.store.replace(address, result.project, revision)
            except RevisionConflictError:
                logger.warning(
                    f"{operation} lost revision race on {address} (attempt {attempt + 1})",
                    extra=log_fields(operation=operation, address=address),
                )
                continue
            return result.with_address(address)

        raise ConcurrentModificationError(
            f"{operation} on {address} did not commit after {self.max_retries + 1} attempts"
        )

    def initialize_project(self, caller: str) -> OperationResult:
        """Create the project record owned by ``caller``.

        Raises:
            ProjectAlreadyInitializedError: If the owner already has a project.
            InvalidIdentityError: If ``caller`` is malformed.
        """
        owner = normalize_identity(caller)
        address, address_tag = find_project_address(owner, self.namespace, self.program_id)
        result = core.initialize_project(owner, address_tag)
        self.store.insert(address, result.project)
        return result.with_address(address)

    def add_member(self, address: str, caller: str, candidate: str) -> OperationResult:
        caller = normalize_identity(caller)
        candidate = normalize_identity(candidate)
        return self._commit(
            address,
            "add_member",
            lambda project: core.add_member(project, caller, candidate),
        )

    def remove_member(self, address: str, caller: str, target: str) -> OperationResult:
        caller = normalize_identity(caller)
        target = normalize_identity(target)
        return self._commit(
            address,
            "remove_member",
            lambda project: core.remove_member(project, caller, target),
        )

    def check_membership(self, address: str, target: str, expected_owner: str) -> OperationResult:
        """Read-only membership check; never writes."""
        target = normalize_identity(target)
        expected_owner = normalize_identity(expected_owner)
        project, _ = self._load(address)
        return core.check_membership(project, target, expected_owner).with_address(address.lower())

    def get_project(self, address: str) -> Project:
        project, _ = self._load(address)
        return project

    def find_project(self, owner: str) -> Tuple[str, Project]:
        """Resolve the project owned by ``owner``.

        Raises:
            ProjectNotFoundError: If the owner has no project.
        """
        owner = normalize_identity(owner)
        address = self.store.find_by_owner(owner)
        if address is None:
            raise ProjectNotFoundError(f"No project for owner: {owner}")
        return address, self.get_project(address)

    def list_projects(self) -> List[ProjectSummary]:
        return self.store.list_projects()
