"""
Deterministic project addresses.

A project's storage key is a pure function of its owner, a namespace seed
and the program identity. The one-byte tag mixed into the hash is what the
record carries as ``address_tag`` so the address can be re-derived later.
"""

import hashlib
import re
from typing import Optional, Tuple

from ..shared.config import REGISTRY_NAMESPACE, REGISTRY_PROGRAM_ID
from .types import normalize_identity

PDA_MARKER = b"ProgramDerivedAddress"
CANONICAL_TAG = 255

_ADDRESS_RE = re.compile(r"[0-9a-fA-F]{64}")


def is_project_address(address) -> bool:
    """True if ``address`` has the shape of a derived address (64 hex chars)."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def create_project_address(
    owner: str,
    address_tag: int,
    namespace: Optional[str] = None,
    program_id: Optional[str] = None,
) -> str:
    """Derive the hex address for ``owner`` under a specific tag."""
    if not 0 <= address_tag <= 255:
        raise ValueError(f"Address tag out of range: {address_tag}")

    seed = (namespace or REGISTRY_NAMESPACE).encode("utf-8")
    program = bytes.fromhex(normalize_identity(program_id or REGISTRY_PROGRAM_ID))

    digest = hashlib.sha256()
    digest.update(seed)
    digest.update(bytes.fromhex(normalize_identity(owner)))
    digest.update(bytes([address_tag]))
    digest.update(program)
    digest.update(PDA_MARKER)
    return digest.hexdigest()


def find_project_address(
    owner: str,
    namespace: Optional[str] = None,
    program_id: Optional[str] = None,
) -> Tuple[str, int]:
    """Return ``(address, address_tag)`` for a new project owned by ``owner``."""
    address = create_project_address(owner, CANONICAL_TAG, namespace, program_id)
    return address, CANONICAL_TAG


def verify_project_address(
    address: str,
    owner: str,
    address_tag: int,
    namespace: Optional[str] = None,
    program_id: Optional[str] = None,
) -> bool:
    """Check that ``address`` re-derives from ``owner`` and ``address_tag``."""
    try:
        expected = create_project_address(owner, address_tag, namespace, program_id)
    except ValueError:
        return False
    return expected == address.lower()
