"""Tests for grants and effective-permission resolution."""

from __future__ import annotations

import pytest

from forgeaccess import (
    AccessLevel,
    Grant,
    GroupTarget,
    HierarchyCycleError,
    HierarchyError,
    InvalidArgumentError,
    NotFoundError,
    Project,
    UserTarget,
    resolve,
)


class TestAccessLevel:
    """Tests for AccessLevel ordering."""

    def test_total_order(self) -> None:
        """Levels are strictly increasing from Guest to Owner."""
        ordered = [
            AccessLevel.GUEST,
            AccessLevel.REPORTER,
            AccessLevel.DEVELOPER,
            AccessLevel.MAINTAINER,
            AccessLevel.OWNER,
        ]
        assert ordered == sorted(ordered)
        assert len(set(ordered)) == len(ordered)

    def test_wire_values(self) -> None:
        assert int(AccessLevel.DEVELOPER) == 30
        assert int(AccessLevel.OWNER) == 50


class TestGrant:
    """Tests for Grant construction."""

    def test_for_user(self, alice) -> None:
        grant = Grant.for_user(alice, AccessLevel.DEVELOPER)
        assert grant.target == UserTarget(alice.id)
        assert grant.access_level is AccessLevel.DEVELOPER

    def test_for_group(self, acme) -> None:
        grant = Grant.for_group(acme, AccessLevel.REPORTER)
        assert grant.target == GroupTarget(acme.id)

    def test_raw_level_is_normalized(self) -> None:
        """Integer levels are converted to AccessLevel."""
        grant = Grant(UserTarget(1), 40)  # type: ignore[arg-type]
        assert grant.access_level is AccessLevel.MAINTAINER

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Unknown access level"):
            Grant(UserTarget(1), 35)  # type: ignore[arg-type]

    def test_target_must_be_variant(self) -> None:
        """A grant cannot be built without a UserTarget or GroupTarget."""
        with pytest.raises(InvalidArgumentError):
            Grant(None, AccessLevel.GUEST)  # type: ignore[arg-type]

    def test_collection_add_remove(self, acme, alice) -> None:
        grant = acme.grants.add(Grant.for_user(alice, AccessLevel.GUEST))
        assert grant in acme.grants
        assert len(acme.grants) == 1
        assert acme.grants.remove(grant) is True
        assert acme.grants.remove(grant) is False
        assert len(acme.grants) == 0


class TestResolve:
    """Tests for resolve()."""

    def test_empty(self, acme) -> None:
        project = acme.projects.add(Project("empty"))
        assert len(resolve(project)) == 0

    def test_local_user_grant(self, acme, alice) -> None:
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_user(alice, AccessLevel.REPORTER))
        assert resolve(project).get_access_level(alice) == AccessLevel.REPORTER

    def test_unknown_user_has_no_level(self, acme, alice, bob) -> None:
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_user(alice, AccessLevel.REPORTER))
        assert resolve(project).get_access_level(bob) is None
        assert resolve(project).get_access_level(None) is None

    def test_max_wins_regardless_of_order(self, acme, alice) -> None:
        """Two grants for one user resolve to the higher level in either order."""
        first = acme.projects.add(Project("first"))
        first.grants.add(Grant.for_user(alice, AccessLevel.GUEST))
        first.grants.add(Grant.for_user(alice, AccessLevel.MAINTAINER))

        second = acme.projects.add(Project("second"))
        second.grants.add(Grant.for_user(alice, AccessLevel.MAINTAINER))
        second.grants.add(Grant.for_user(alice, AccessLevel.GUEST))

        assert resolve(first).get_access_level(alice) == AccessLevel.MAINTAINER
        assert resolve(second).get_access_level(alice) == AccessLevel.MAINTAINER

    def test_resolved_at_least_granted(self, acme, alice) -> None:
        """A local grant is a lower bound on the resolved level."""
        acme.grants.add(Grant.for_user(alice, AccessLevel.MAINTAINER))
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_user(alice, AccessLevel.GUEST))
        assert resolve(project).get_access_level(alice) >= AccessLevel.GUEST
        assert resolve(project).get_access_level(alice) == AccessLevel.MAINTAINER

    def test_local_owner_overrides_group_developer(self, acme, alice) -> None:
        """Group grants Developer, project grants Owner directly: Owner."""
        acme.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_user(alice, AccessLevel.OWNER))
        assert resolve(project).get_access_level(alice) == AccessLevel.OWNER

    def test_inherited_through_nested_groups(self, hierarchy, acme, alice) -> None:
        """A grant on an ancestor reaches every descendant project."""
        acme.grants.add(Grant.for_user(alice, AccessLevel.REPORTER))
        backend = hierarchy.create_group("Backend", parent=acme)
        services = hierarchy.create_group("Services", parent=backend)
        api = services.projects.add(Project("api"))
        tools = backend.projects.add(Project("tools"))

        assert resolve(api).get_access_level(alice) == AccessLevel.REPORTER
        assert resolve(tools).get_access_level(alice) == AccessLevel.REPORTER
        assert resolve(services).get_access_level(alice) == AccessLevel.REPORTER

    def test_group_grant_merges_group_members(self, hierarchy, acme, alice, bob) -> None:
        """Sharing a project with a group brings in that group's resolved members."""
        team = hierarchy.create_group("Team")
        team.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        team.grants.add(Grant.for_user(bob, AccessLevel.GUEST))
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_group(team, AccessLevel.REPORTER))

        effective = resolve(project)
        assert effective.get_access_level(alice) == AccessLevel.DEVELOPER
        assert effective.get_access_level(bob) == AccessLevel.GUEST

    def test_group_grant_includes_group_ancestors(self, hierarchy, acme, alice) -> None:
        parent = hierarchy.create_group("Platform")
        parent.grants.add(Grant.for_user(alice, AccessLevel.MAINTAINER))
        team = hierarchy.create_group("Team", parent=parent)
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_group(team, AccessLevel.GUEST))
        assert resolve(project).get_access_level(alice) == AccessLevel.MAINTAINER

    def test_diamond_is_not_a_cycle(self, hierarchy, acme, alice) -> None:
        """Two shared groups with a common parent resolve without error."""
        base = hierarchy.create_group("Base")
        base.grants.add(Grant.for_user(alice, AccessLevel.REPORTER))
        left = hierarchy.create_group("Left", parent=base)
        right = hierarchy.create_group("Right", parent=base)
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_group(left, AccessLevel.GUEST))
        project.grants.add(Grant.for_group(right, AccessLevel.GUEST))
        assert resolve(project).get_access_level(alice) == AccessLevel.REPORTER

    def test_reflects_current_state(self, acme, alice) -> None:
        """Snapshots are not cached: later grants show up on the next call."""
        project = acme.projects.add(Project("app"))
        before = resolve(project)
        project.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        assert before.get_access_level(alice) is None
        assert resolve(project).get_access_level(alice) == AccessLevel.DEVELOPER

    def test_snapshot_accessors(self, acme, alice, bob) -> None:
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        project.grants.add(Grant.for_user(bob, AccessLevel.GUEST))
        effective = project.get_effective_permissions()

        assert alice in effective
        assert alice.id in effective
        assert effective.get_access_level(alice.id) == AccessLevel.DEVELOPER
        assert effective.as_dict() == {alice.id: AccessLevel.DEVELOPER, bob.id: AccessLevel.GUEST}
        assert {p.user_id for p in effective.permissions} == {alice.id, bob.id}

    def test_user_owns_personal_namespace(self, alice) -> None:
        assert resolve(alice.namespace).get_access_level(alice) == AccessLevel.OWNER


class TestResolveErrors:
    """Tests for structural failures during resolution."""

    def test_parent_cycle(self, hierarchy) -> None:
        a = hierarchy.create_group("A")
        b = hierarchy.create_group("B", parent=a)
        a.parent = b
        project = a.projects.add(Project("app"))
        with pytest.raises(HierarchyCycleError):
            resolve(project)

    def test_group_grant_cycle(self, hierarchy, acme) -> None:
        a = hierarchy.create_group("A")
        b = hierarchy.create_group("B")
        a.grants.add(Grant.for_group(b, AccessLevel.GUEST))
        b.grants.add(Grant.for_group(a, AccessLevel.GUEST))
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant.for_group(a, AccessLevel.GUEST))
        with pytest.raises(HierarchyCycleError) as exc_info:
            resolve(project)
        assert exc_info.value.code == "HIERARCHY_CYCLE"

    def test_group_granting_itself(self, acme) -> None:
        acme.grants.add(Grant.for_group(acme, AccessLevel.GUEST))
        with pytest.raises(HierarchyCycleError):
            resolve(acme)

    def test_cycle_is_a_hierarchy_error(self, hierarchy) -> None:
        a = hierarchy.create_group("A")
        a.parent = a
        with pytest.raises(HierarchyError):
            resolve(a)

    def test_unknown_group_id(self, acme) -> None:
        project = acme.projects.add(Project("app"))
        project.grants.add(Grant(GroupTarget(999), AccessLevel.GUEST))
        with pytest.raises(NotFoundError):
            resolve(project)

    def test_group_grant_on_detached_project(self, acme) -> None:
        project = Project("loose")
        project.grants.add(Grant.for_group(acme, AccessLevel.GUEST))
        with pytest.raises(HierarchyError, match="detached"):
            resolve(project)

    def test_detached_project_user_grants(self, alice) -> None:
        """A detached project still resolves its direct user grants."""
        project = Project("loose")
        project.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        assert resolve(project).get_access_level(alice) == AccessLevel.DEVELOPER
