"""
Unit tests for the fixed-layout account codec (src/registry/codec.py).
"""

import struct

import pytest

from src.registry.codec import (
    PROJECT_ACCOUNT_SIZE,
    PROJECT_DISCRIMINATOR,
    decode_project,
    encode_project,
)
from src.registry.types import MAX_MEMBERS, Project


def test_account_size_matches_layout():
    assert PROJECT_ACCOUNT_SIZE == 8 + 32 + 4 + MAX_MEMBERS * 32 + 1 == 365


def test_encode_layout_fields(owner, identity):
    project = Project(owner=owner, members=[identity(1), identity(2)], address_tag=253)

    data = encode_project(project)

    assert len(data) == PROJECT_ACCOUNT_SIZE
    assert data[:8] == PROJECT_DISCRIMINATOR
    assert data[8:40] == bytes.fromhex(owner)
    assert struct.unpack("<I", data[40:44])[0] == 2
    assert data[44:76] == bytes.fromhex(identity(1))
    assert data[76:108] == bytes.fromhex(identity(2))
    assert data[108] == 253
    assert data[109:] == b"\x00" * (PROJECT_ACCOUNT_SIZE - 109)


def test_empty_and_full_records_have_same_size(owner, identity):
    empty = Project(owner=owner)
    full = Project(owner=owner, members=[identity(n) for n in range(1, MAX_MEMBERS + 1)], address_tag=255)

    assert len(encode_project(empty)) == len(encode_project(full)) == PROJECT_ACCOUNT_SIZE
    assert encode_project(full)[-1] == 255


def test_decode_restores_project(owner, identity):
    project = Project(owner=owner, members=[identity(3), identity(1)], address_tag=7)

    assert decode_project(encode_project(project)) == project


def test_decode_accepts_unpadded_buffer(owner, identity):
    project = Project(owner=owner, members=[identity(1)], address_tag=9)
    trimmed = encode_project(project)[:8 + 32 + 4 + 32 + 1]

    assert decode_project(trimmed) == project


def test_decode_rejects_wrong_discriminator(owner):
    data = bytearray(encode_project(Project(owner=owner)))
    data[0] ^= 0xFF

    with pytest.raises(ValueError, match="discriminator"):
        decode_project(bytes(data))


def test_decode_rejects_truncated_header():
    with pytest.raises(ValueError, match="too short"):
        decode_project(PROJECT_DISCRIMINATOR + b"\x00" * 10)


def test_decode_rejects_count_above_capacity(owner):
    data = bytearray(encode_project(Project(owner=owner)))
    data[40:44] = struct.pack("<I", MAX_MEMBERS + 1)

    with pytest.raises(ValueError, match="exceeds capacity"):
        decode_project(bytes(data))


def test_decode_rejects_missing_members(owner, identity):
    data = encode_project(Project(owner=owner, members=[identity(1), identity(2)]))

    with pytest.raises(ValueError, match="too short"):
        decode_project(data[:8 + 32 + 4 + 32])


def test_decode_rejects_duplicate_members(owner, identity):
    data = bytearray(encode_project(Project(owner=owner, members=[identity(1), identity(2)])))
    data[76:108] = bytes.fromhex(identity(1))

    with pytest.raises(ValueError):
        decode_project(bytes(data))
