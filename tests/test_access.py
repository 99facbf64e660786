"""Tests for access-gate predicates."""

from __future__ import annotations

import pytest

from forgeaccess import (
    AccessLevel,
    Grant,
    PermissionDeniedError,
    Project,
    Visibility,
    can_contribute,
    can_delete,
    can_edit,
    can_view,
    is_member,
    is_owner,
    require,
)


@pytest.fixture
def project(acme) -> Project:
    return acme.projects.add(Project("app"))


class TestCanView:
    """Tests for can_view visibility rules."""

    def test_public_visible_to_anonymous(self, project) -> None:
        project.visibility = Visibility.PUBLIC
        assert can_view(project, None) is True

    def test_internal_hidden_from_anonymous(self, project, bob) -> None:
        """Internal project without grants: anonymous denied, any user allowed."""
        project.visibility = Visibility.INTERNAL
        assert can_view(project, None) is False
        assert can_view(project, bob) is True

    def test_private_hidden_from_anonymous(self, project) -> None:
        assert can_view(project, None) is False

    def test_private_requires_membership(self, project, alice, bob) -> None:
        project.grants.add(Grant.for_user(alice, AccessLevel.GUEST))
        assert can_view(project, alice) is True
        assert can_view(project, bob) is False

    def test_private_visible_to_admin(self, project, admin) -> None:
        assert can_view(project, admin) is True

    def test_inherited_membership(self, acme, project, alice) -> None:
        acme.grants.add(Grant.for_user(alice, AccessLevel.GUEST))
        assert can_view(project, alice) is True


class TestLevelThresholds:
    """Tests for can_edit / can_contribute / can_delete / is_owner / is_member."""

    def test_maintainer(self, project, alice) -> None:
        """Maintainer edits but neither deletes nor owns."""
        project.grants.add(Grant.for_user(alice, AccessLevel.MAINTAINER))
        assert can_edit(project, alice) is True
        assert can_contribute(project, alice) is True
        assert can_delete(project, alice) is False
        assert is_owner(project, alice) is False
        assert is_member(project, alice) is True

    def test_developer(self, project, alice) -> None:
        project.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        assert can_contribute(project, alice) is True
        assert can_edit(project, alice) is False

    def test_reporter(self, project, alice) -> None:
        project.grants.add(Grant.for_user(alice, AccessLevel.REPORTER))
        assert can_contribute(project, alice) is False
        assert is_member(project, alice) is True

    def test_owner(self, project, alice) -> None:
        project.grants.add(Grant.for_user(alice, AccessLevel.OWNER))
        assert is_owner(project, alice) is True
        assert can_delete(project, alice) is True
        assert can_edit(project, alice) is True

    def test_owner_inherited_from_group(self, acme, project, alice) -> None:
        acme.grants.add(Grant.for_user(alice, AccessLevel.OWNER))
        assert is_owner(project, alice) is True

    def test_non_member(self, project, bob) -> None:
        assert is_member(project, bob) is False
        assert can_edit(project, bob) is False
        assert can_contribute(project, bob) is False
        assert can_delete(project, bob) is False


class TestAdminBypass:
    """Administrators pass edit/contribute/delete without grants."""

    def test_admin_without_grants(self, project, admin) -> None:
        assert can_delete(project, admin) is True
        assert can_edit(project, admin) is True
        assert can_contribute(project, admin) is True

    def test_admin_is_not_owner_or_member(self, project, admin) -> None:
        """is_owner and is_member look only at resolved levels."""
        assert is_owner(project, admin) is False
        assert is_member(project, admin) is False


class TestAnonymous:
    """None stands for an unauthenticated user."""

    def test_all_predicates_deny(self, project) -> None:
        project.visibility = Visibility.PRIVATE
        for predicate in (can_view, can_edit, can_contribute, can_delete, is_owner, is_member):
            assert predicate(project, None) is False

    def test_public_still_denies_writes(self, project) -> None:
        project.visibility = Visibility.PUBLIC
        assert can_view(project, None) is True
        assert can_edit(project, None) is False
        assert can_delete(project, None) is False


class TestProjectMethods:
    """Project exposes the same predicates as methods."""

    def test_methods_match_functions(self, project, alice) -> None:
        project.grants.add(Grant.for_user(alice, AccessLevel.MAINTAINER))
        assert project.can_user_view_project(alice) is True
        assert project.can_user_edit_project(alice) is True
        assert project.can_user_contribute_to_project(alice) is True
        assert project.can_user_delete_project(alice) is False
        assert project.is_user_owner(alice) is False
        assert project.is_user_member(alice) is True

    def test_delete_with_no_user(self, project) -> None:
        assert project.can_user_delete_project(None) is False


class TestRequire:
    """Tests for require()."""

    def test_allows(self, project, alice) -> None:
        project.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        require(can_contribute, project, alice)

    def test_denies(self, project, bob) -> None:
        with pytest.raises(PermissionDeniedError) as exc_info:
            require(can_edit, project, bob)
        assert exc_info.value.code == "PERMISSION_DENIED"
        assert exc_info.value.details["user_id"] == bob.id
        assert "can_edit" in exc_info.value.message

    def test_denies_anonymous(self, project) -> None:
        with pytest.raises(PermissionDeniedError):
            require(can_view, project, None)
