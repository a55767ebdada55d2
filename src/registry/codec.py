"""
Fixed-layout binary encoding of Project records.

Layout (little-endian):
    discriminator   8 bytes   sha256(b"account:Project")[:8]
    owner          32 bytes
    member count    4 bytes   u32
    members        count * 32 bytes
    address tag     1 byte
    zero padding up to PROJECT_ACCOUNT_SIZE

Storage is always allocated at maximum capacity, so every encoded record
is exactly PROJECT_ACCOUNT_SIZE bytes.
"""

import hashlib
import struct

from .types import IDENTITY_SIZE, MAX_MEMBERS, Project

DISCRIMINATOR_SIZE = 8
PROJECT_DISCRIMINATOR = hashlib.sha256(b"account:Project").digest()[:DISCRIMINATOR_SIZE]
PROJECT_ACCOUNT_SIZE = DISCRIMINATOR_SIZE + IDENTITY_SIZE + 4 + (MAX_MEMBERS * IDENTITY_SIZE) + 1

_COUNT = struct.Struct("<I")
_TAG = struct.Struct("<B")


def encode_project(project: Project) -> bytes:
    """Serialize a project into its fixed-size account layout."""
    parts = [
        PROJECT_DISCRIMINATOR,
        bytes.fromhex(project.owner),
        _COUNT.pack(len(project.members)),
    ]
    parts.extend(bytes.fromhex(member) for member in project.members)
    parts.append(_TAG.pack(project.address_tag))

    data = b"".join(parts)
    return data + b"\x00" * (PROJECT_ACCOUNT_SIZE - len(data))


def decode_project(data: bytes) -> Project:
    """Parse an account buffer back into a Project.

    Raises:
        ValueError: If the buffer is truncated, carries the wrong
            discriminator, or violates the record invariants.
    """
    data = bytes(data)
    header_size = DISCRIMINATOR_SIZE + IDENTITY_SIZE + _COUNT.size
    if len(data) < header_size:
        raise ValueError(f"Account data too short: {len(data)} bytes")

    if data[:DISCRIMINATOR_SIZE] != PROJECT_DISCRIMINATOR:
        raise ValueError("Invalid account discriminator")

    offset = DISCRIMINATOR_SIZE
    owner = data[offset:offset + IDENTITY_SIZE]
    offset += IDENTITY_SIZE

    (count,) = _COUNT.unpack_from(data, offset)
    offset += _COUNT.size
    if count > MAX_MEMBERS:
        raise ValueError(f"Member count {count} exceeds capacity {MAX_MEMBERS}")

    end = offset + count * IDENTITY_SIZE + _TAG.size
    if len(data) < end:
        raise ValueError(f"Account data too short for {count} members")

    members = [
        data[offset + i * IDENTITY_SIZE:offset + (i + 1) * IDENTITY_SIZE]
        for i in range(count)
    ]
    offset += count * IDENTITY_SIZE
    (address_tag,) = _TAG.unpack_from(data, offset)

    # Model validation rejects duplicate members
    return Project(owner=owner, members=members, address_tag=address_tag)
