"""
State transitions for the Project Registry.

Each function takes the current record and returns an OperationResult.
Inputs are never mutated: a successful transition returns a new Project,
a failed one returns a typed failure and the caller keeps its original
record. Identities are expected in canonical form (see normalize_identity).
"""

from ..shared.logger import get_logger, log_fields
from .errors import RegistryErrorCode
from .types import MAX_MEMBERS, OperationResult, Project

logger = get_logger("registry", __name__)


def initialize_project(caller: str, address_tag: int) -> OperationResult:
    """Populate a fresh record for ``caller``.

    The caller becomes the owner and the member list starts empty. The
    storage layer guarantees no record exists yet for this owner.
    """
    project = Project(owner=caller, members=[], address_tag=address_tag)
    logger.info(
        f"Project initialized for owner: {project.owner}",
        extra=log_fields(operation="initialize", owner=project.owner),
    )
    return OperationResult.success(project)


def add_member(project: Project, caller: str, candidate: str) -> OperationResult:
    """Append ``candidate`` to the member list.

    Checks run in a fixed order: authorization, duplicate, capacity. An
    unauthorized caller therefore cannot probe the member list.
    """
    if caller != project.owner:
        return OperationResult.failure(RegistryErrorCode.UNAUTHORIZED)

    if candidate in project.members:
        return OperationResult.failure(RegistryErrorCode.MEMBER_ALREADY_EXISTS)

    if len(project.members) >= MAX_MEMBERS:
        return OperationResult.failure(RegistryErrorCode.MAX_MEMBERS_REACHED)

    updated = project.model_copy(update={"members": [*project.members, candidate]})
    logger.info(
        f"Member {candidate} added to the project by owner {project.owner}",
        extra=log_fields(operation="add_member", owner=project.owner, member=candidate),
    )
    return OperationResult.success(updated)


def remove_member(project: Project, caller: str, target: str) -> OperationResult:
    """Remove ``target`` from the member list, keeping the order of the rest."""
    if caller != project.owner:
        return OperationResult.failure(RegistryErrorCode.UNAUTHORIZED)

    if target not in project.members:
        logger.info(
            f"Member {target} not found in project owned by {project.owner}",
            extra=log_fields(operation="remove_member", owner=project.owner, member=target),
        )
        return OperationResult.failure(RegistryErrorCode.MEMBER_NOT_FOUND)

    index = project.members.index(target)
    remaining = project.members[:index] + project.members[index + 1:]
    updated = project.model_copy(update={"members": remaining})
    logger.info(
        f"Member {target} removed from the project by owner {project.owner}",
        extra=log_fields(operation="remove_member", owner=project.owner, member=target),
    )
    return OperationResult.success(updated)


def check_membership(project: Project, target: str, expected_owner: str) -> OperationResult:
    """Verify that ``target`` is a member of ``project``.

    ``expected_owner`` guards against reading a record under the wrong
    assumed owner; a mismatch is Unauthorized regardless of membership.
    Read-only: the result carries no record, only success or failure.
    """
    if project.owner != expected_owner:
        return OperationResult.failure(RegistryErrorCode.UNAUTHORIZED)

    if target not in project.members:
        logger.info(
            f"Member {target} not found in project owned by {project.owner}.",
            extra=log_fields(operation="check_membership", owner=project.owner, member=target),
        )
        return OperationResult.failure(RegistryErrorCode.MEMBER_NOT_FOUND)

    logger.info(
        f"Member {target} is verified for project owned by {project.owner}.",
        extra=log_fields(operation="check_membership", owner=project.owner, member=target),
    )
    return OperationResult(ok=True)
