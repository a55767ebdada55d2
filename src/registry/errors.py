"""
Error taxonomy for the Project Registry.

Core transition failures are values (RegistryErrorCode carried on an
OperationResult). Hosting-layer failures (storage, addressing, input
parsing) are exceptions split along ValueError / RuntimeError lines.
"""

from enum import Enum


class RegistryErrorCode(str, Enum):
    """Typed failure kinds returned by registry transitions."""
    UNAUTHORIZED = "Unauthorized"
    MEMBER_ALREADY_EXISTS = "MemberAlreadyExists"
    MEMBER_NOT_FOUND = "MemberNotFound"
    MAX_MEMBERS_REACHED = "MaxMembersReached"

    @property
    def number(self) -> int:
        return ERROR_NUMBERS[self]

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


# Custom error numbers start at 6000 in the on-chain convention
ERROR_NUMBERS = {
    RegistryErrorCode.UNAUTHORIZED: 6000,
    RegistryErrorCode.MEMBER_ALREADY_EXISTS: 6001,
    RegistryErrorCode.MEMBER_NOT_FOUND: 6002,
    RegistryErrorCode.MAX_MEMBERS_REACHED: 6003,
}

ERROR_MESSAGES = {
    RegistryErrorCode.UNAUTHORIZED: "The user is not authorized to perform this action.",
    RegistryErrorCode.MEMBER_ALREADY_EXISTS: "The member is already part of the project.",
    RegistryErrorCode.MEMBER_NOT_FOUND: "The member was not found in the project.",
    RegistryErrorCode.MAX_MEMBERS_REACHED: "Maximum number of members reached.",
}


class InvalidIdentityError(ValueError):
    """Raised when an identity is not 32 bytes of hex."""


class ProjectNotFoundError(ValueError):
    """Raised when no project record exists at an address."""


class ProjectAlreadyInitializedError(ValueError):
    """Raised when Initialize targets an address that already holds a record."""


class RevisionConflictError(RuntimeError):
    """Raised by a store when a conditional write loses to another writer."""


class ConcurrentModificationError(RuntimeError):
    """Raised when a transition cannot be committed within the retry budget."""


class AddressMismatchError(RuntimeError):
    """Raised when a stored record does not re-derive to its own address."""
