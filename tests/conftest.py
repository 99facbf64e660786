"""Shared fixtures: a small hierarchy with one top-level group and a few users."""

from __future__ import annotations

import pytest

from forgeaccess import ForgeConfig, Group, Hierarchy, User


@pytest.fixture
def hierarchy() -> Hierarchy:
    return Hierarchy(ForgeConfig(server_url="https://forge.example.com"))


@pytest.fixture
def acme(hierarchy: Hierarchy) -> Group:
    return hierarchy.create_group("Acme")


@pytest.fixture
def alice(hierarchy: Hierarchy) -> User:
    return hierarchy.create_user("alice")


@pytest.fixture
def bob(hierarchy: Hierarchy) -> User:
    return hierarchy.create_user("bob")


@pytest.fixture
def admin(hierarchy: Hierarchy) -> User:
    return hierarchy.create_user("root", is_admin=True)
