"""
Unit tests for deterministic project addresses (src/registry/addressing.py).
"""

import pytest

from src.registry.addressing import (
    CANONICAL_TAG,
    create_project_address,
    find_project_address,
    is_project_address,
    verify_project_address,
)


def test_find_is_deterministic(owner):
    first = find_project_address(owner)
    second = find_project_address(owner.upper())

    assert first == second
    assert first[1] == CANONICAL_TAG
    assert len(first[0]) == 64


def test_addresses_differ_per_owner(owner, outsider):
    assert find_project_address(owner)[0] != find_project_address(outsider)[0]


def test_namespace_and_program_scope_the_address(owner, identity):
    base, _ = find_project_address(owner)

    assert find_project_address(owner, namespace="team")[0] != base
    assert find_project_address(owner, program_id=identity(7))[0] != base


def test_verify_accepts_derived_address(owner):
    address, tag = find_project_address(owner)

    assert verify_project_address(address, owner, tag)
    assert verify_project_address(address.upper(), owner, tag)


def test_verify_rejects_other_owner_or_tag(owner, outsider):
    address, tag = find_project_address(owner)

    assert not verify_project_address(address, outsider, tag)
    assert not verify_project_address(address, owner, tag - 1)
    assert not verify_project_address(address, owner, 300)


def test_create_rejects_out_of_range_tag(owner):
    with pytest.raises(ValueError, match="out of range"):
        create_project_address(owner, 256)


def test_is_project_address(owner):
    address, _ = find_project_address(owner)

    assert is_project_address(address)
    assert is_project_address(address.upper())
    assert not is_project_address(address[:-1])
    assert not is_project_address(address + "0")
    assert not is_project_address("g" * 64)
    assert not is_project_address(None)
