"""
Project Registry Domain Models.

Defines Pydantic models for the project record, its list summary, and the
typed result returned by every registry operation.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import InvalidIdentityError, RegistryErrorCode

MAX_MEMBERS = 10
IDENTITY_SIZE = 32

# HTTP header carrying the (upstream-authenticated) caller identity
CALLER_HEADER = "X-Caller-Identity"


def normalize_identity(value: Union[str, bytes]) -> str:
    """Return the canonical lowercase hex form of a 32-byte identity.

    Accepts raw bytes or hex text (any case, optional ``0x`` prefix).

    Raises:
        InvalidIdentityError: If the value does not decode to exactly 32 bytes.
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        text = value.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        try:
            raw = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidIdentityError(f"Identity is not valid hex: {value!r}") from e
    else:
        raise InvalidIdentityError(f"Unsupported identity type: {type(value).__name__}")

    if len(raw) != IDENTITY_SIZE:
        raise InvalidIdentityError(
            f"Identity must be {IDENTITY_SIZE} bytes, got {len(raw)}"
        )
    return raw.hex()


class Project(BaseModel):
    """The persisted registry record: an owner and its bounded member list."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "owner": "7a" * 32,
                "members": ["01" * 32, "02" * 32],
                "address_tag": 255,
            }
        }
    )

    owner: str = Field(..., description="Controlling identity (64 hex chars)")
    members: List[str] = Field(default_factory=list, description="Member identities in insertion order")
    address_tag: int = Field(0, ge=0, le=255, description="Opaque storage-derivation byte")

    @field_validator("owner", mode="before")
    @classmethod
    def _normalize_owner(cls, value):
        return normalize_identity(value)

    @field_validator("members", mode="before")
    @classmethod
    def _normalize_members(cls, value):
        if value is None:
            return []
        return [normalize_identity(m) for m in value]

    @model_validator(mode="after")
    def _check_invariants(self) -> "Project":
        if len(self.members) > MAX_MEMBERS:
            raise ValueError(f"Project cannot hold more than {MAX_MEMBERS} members")
        if len(set(self.members)) != len(self.members):
            raise ValueError("Project members must be unique")
        return self


class ProjectSummary(BaseModel):
    """Lightweight project summary for list views."""

    address: str = Field(..., description="Derived storage address (hex)")
    owner: str = Field(..., description="Controlling identity")
    member_count: int = Field(0, ge=0, le=MAX_MEMBERS)
    updated_at: Optional[str] = Field(None, description="Last write timestamp (ISO format)")


class OperationResult(BaseModel):
    """Outcome of a single registry operation.

    On success ``project`` holds the resulting record; on failure ``error``
    names the failure kind and ``project`` is None.
    """

    ok: bool
    project: Optional[Project] = None
    address: Optional[str] = None
    error: Optional[RegistryErrorCode] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, project: Project, address: Optional[str] = None) -> "OperationResult":
        return cls(ok=True, project=project, address=address)

    @classmethod
    def failure(cls, error: RegistryErrorCode, address: Optional[str] = None) -> "OperationResult":
        return cls(ok=False, error=error, message=error.message, address=address)

    def with_address(self, address: str) -> "OperationResult":
        return self.model_copy(update={"address": address})

    @property
    def error_number(self) -> Optional[int]:
        return self.error.number if self.error is not None else None


class MemberRequest(BaseModel):
    """Payload for adding a member over HTTP."""

    member: str = Field(..., description="Identity to add (64 hex chars)")

    @field_validator("member", mode="before")
    @classmethod
    def _normalize_member(cls, value):
        return normalize_identity(value)
