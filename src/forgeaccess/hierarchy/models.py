"""Users, groups and projects, and the arena that owns them.

A :class:`Hierarchy` hands out stable integer ids and owns every user, group
and attached project. Grants refer to users and groups by id; parent links
and the fork back-reference are plain attributes.

Provides:
- ``Hierarchy`` — arena and factory for users and groups.
- ``User`` — identity with an admin flag and a personal namespace group.
- ``Group`` — hierarchy node with optional parent, projects and grants.
- ``Project`` — leaf node with grants, repository, merge requests, runners.
- ``ProjectCollection`` — ordered projects of one group.
"""

from __future__ import annotations

import itertools
import logging
import uuid
from datetime import timedelta
from typing import Iterator, Optional

from ..config import ForgeConfig
from ..exceptions import InvalidArgumentError, NotFoundError
from ..merge_requests import MergeRequest, MergeRequestCollection, open_merge_request
from ..permissions import (
    AccessLevel,
    EffectivePermissions,
    Grant,
    GrantCollection,
    Visibility,
    can_contribute,
    can_delete,
    can_edit,
    can_view,
    is_member,
    is_owner,
    resolve,
)
from ..repository import Repository
from ..runners import Runner, RunnerCollection, RunnerRef, register_runner
from ..transport import ClientProject, to_client_project
from . import paths

logger = logging.getLogger(__name__)


def _require_name(name: Optional[str], what: str) -> str:
    if name is not None and not isinstance(name, str):
        raise InvalidArgumentError(f"{what} name must be a string, got {type(name).__name__}")
    if name is None or not name.strip():
        raise InvalidArgumentError(f"{what} name must not be empty")
    return name


class User:
    """An identity. Created through :meth:`Hierarchy.create_user`."""

    def __init__(self, user_id: int, username: str, *, is_admin: bool = False) -> None:
        self.id = user_id
        self.username = _require_name(username, "User")
        self.is_admin = is_admin
        self.namespace: Optional[Group] = None

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username!r}, is_admin={self.is_admin})"


class Group:
    """A group node. Created through :meth:`Hierarchy.create_group`."""

    kind = "group"

    def __init__(
        self,
        hierarchy: Hierarchy,
        group_id: int,
        name: str,
        *,
        parent: Optional[Group] = None,
        is_user_namespace: bool = False,
    ) -> None:
        self._hierarchy = hierarchy
        self.id = group_id
        self._name = _require_name(name, "Group")
        self._parent: Optional[Group] = None
        self.is_user_namespace = is_user_namespace
        self.grants = GrantCollection(self)
        self.projects = ProjectCollection(self)
        self.parent = parent

    @property
    def hierarchy(self) -> Hierarchy:
        return self._hierarchy

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = _require_name(value, "Group")

    @property
    def parent(self) -> Optional[Group]:
        return self._parent

    @parent.setter
    def parent(self, value: Optional[Group]) -> None:
        if value is not None and value.hierarchy is not self._hierarchy:
            raise InvalidArgumentError("Parent group belongs to a different hierarchy")
        self._parent = value

    @property
    def subgroups(self) -> tuple[Group, ...]:
        return tuple(g for g in self._hierarchy.groups if g.parent is self)

    @property
    def path(self) -> str:
        return paths.slugify(self._name)

    @property
    def path_with_namespace(self) -> str:
        return paths.path_with_namespace(self)

    @property
    def full_name(self) -> str:
        return paths.full_name(self)

    def get_effective_permissions(self) -> EffectivePermissions:
        return resolve(self)

    def __repr__(self) -> str:
        return f"Group(id={self.id}, name={self._name!r})"


class ProjectCollection:
    """Ordered projects owned by one group.

    Adding a project attaches it: the hierarchy assigns its id and the
    project's ``group`` points here. A project already owned by another
    group must be removed from it first, and can only be re-added within
    the hierarchy that assigned its id.
    """

    def __init__(self, group: Group) -> None:
        self._group = group
        self._projects: list[Project] = []

    def add(self, project: Project) -> Project:
        if project.group is self._group:
            return project
        if project.group is not None:
            raise InvalidArgumentError(
                f"Project {project.name!r} already belongs to {project.group.path_with_namespace}",
                project_id=project.id,
            )
        if project._issuer is not None and project._issuer is not self._group.hierarchy:
            raise InvalidArgumentError(
                f"Project {project.name!r} belongs to a different hierarchy",
                project_id=project.id,
            )
        self._group.hierarchy._attach_project(project)
        project._group = self._group
        self._projects.append(project)
        logger.debug("Attached project %d to group %d", project.id, self._group.id)
        return project

    def remove(self, project: Project) -> bool:
        """Detach ``project``. Returns False if this group does not own it."""
        if project not in self._projects:
            return False
        self._projects.remove(project)
        project._group = None
        self._group.hierarchy._detach_project(project)
        logger.debug("Detached project %s from group %d", project.id, self._group.id)
        return True

    def find(self, project_id: int) -> Optional[Project]:
        return next((p for p in self._projects if p.id == project_id), None)

    def __iter__(self) -> Iterator[Project]:
        return iter(list(self._projects))

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, project: object) -> bool:
        return any(p is project for p in self._projects)


class Project:
    """A project node.

    Construct detached, then attach with ``group.projects.add(project)``::

        project = Project("My Repo!", visibility=Visibility.INTERNAL)
        group.projects.add(project)
        project.path                  # "my-repo"
        project.path_with_namespace   # "acme/my-repo"

    ``forked_from`` is fixed at construction and is a non-owning reference:
    the source may be removed later without affecting the fork.
    """

    kind = "project"

    def __init__(
        self,
        name: str,
        *,
        description: Optional[str] = None,
        visibility: Visibility = Visibility.PRIVATE,
        default_branch: Optional[str] = None,
        forked_from: Optional[Project] = None,
        import_status: Optional[str] = None,
        build_timeout: Optional[timedelta] = None,
    ) -> None:
        self._name = _require_name(name, "Project")
        self.id: Optional[int] = None
        # Hierarchy that issued ``id``; a project never moves between hierarchies.
        self._issuer: Optional[Hierarchy] = None
        self.description = description
        self.visibility = Visibility(visibility)
        self._default_branch = default_branch
        self._forked_from = forked_from
        self.import_status = import_status
        self.build_timeout = build_timeout
        self._group: Optional[Group] = None

        self.grants = GrantCollection(self)
        self.repository = Repository(self)
        self.merge_requests = MergeRequestCollection(self)
        self.registered_runners = RunnerCollection(self)
        self.enabled_runners: list[RunnerRef] = []

    @classmethod
    def with_generated_name(cls, **kwargs) -> Project:
        """Project named with a random 32-character hex string."""
        return cls(uuid.uuid4().hex, **kwargs)

    # ── Hierarchy ───────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = _require_name(value, "Project")

    @property
    def group(self) -> Optional[Group]:
        return self._group

    @property
    def parent(self) -> Optional[Group]:
        return self._group

    @property
    def hierarchy(self) -> Optional[Hierarchy]:
        return self._group.hierarchy if self._group is not None else None

    @property
    def forked_from(self) -> Optional[Project]:
        return self._forked_from

    @property
    def default_branch(self) -> str:
        if self._default_branch:
            return self._default_branch
        hierarchy = self.hierarchy
        return hierarchy.config.default_branch if hierarchy is not None else "master"

    @default_branch.setter
    def default_branch(self, value: str) -> None:
        self._default_branch = _require_name(value, "Branch")

    def remove(self) -> None:
        """Detach the project from its owning group."""
        if self._group is None:
            raise NotFoundError(f"Project {self._name!r} is not attached to a group")
        self._group.projects.remove(self)

    # ── Paths ───────────────────────────────────────────

    @property
    def path(self) -> str:
        return paths.slugify(self._name)

    @property
    def path_with_namespace(self) -> str:
        return paths.path_with_namespace(self)

    @property
    def full_name(self) -> str:
        return paths.full_name(self)

    @property
    def web_url(self) -> Optional[str]:
        hierarchy = self.hierarchy
        if hierarchy is None:
            return None
        return hierarchy.make_url(self.path_with_namespace)

    # ── Permissions ─────────────────────────────────────

    def get_effective_permissions(self) -> EffectivePermissions:
        return resolve(self)

    def can_user_view_project(self, user: Optional[User]) -> bool:
        return can_view(self, user)

    def can_user_edit_project(self, user: Optional[User]) -> bool:
        return can_edit(self, user)

    def can_user_delete_project(self, user: Optional[User]) -> bool:
        return can_delete(self, user)

    def can_user_contribute_to_project(self, user: Optional[User]) -> bool:
        return can_contribute(self, user)

    def is_user_owner(self, user: Optional[User]) -> bool:
        return is_owner(self, user)

    def is_user_member(self, user: Optional[User]) -> bool:
        return is_member(self, user)

    # ── Operations ──────────────────────────────────────

    def create_merge_request(
        self,
        user: User,
        branch_name: str,
        target_branch: str,
        title: str,
        description: Optional[str] = None,
    ) -> MergeRequest:
        return open_merge_request(self, user, branch_name, target_branch, title, description)

    def add_runner(
        self,
        name: str,
        description: str,
        active: bool,
        locked: bool,
        is_shared: bool,
    ) -> Runner:
        return register_runner(self, name, description, active, locked, is_shared)

    def fork(self, user: User, group: Optional[Group] = None, name: Optional[str] = None) -> Project:
        """Fork into ``group`` (default: the user's namespace) as ``name`` (default: this name)."""
        from ..fork import fork_project

        if user is None:
            raise InvalidArgumentError("Forking requires a user")
        target = group if group is not None else user.namespace
        return fork_project(self, target, user, name if name is not None else self._name)

    def to_client_project(self) -> ClientProject:
        return to_client_project(self)

    def __repr__(self) -> str:
        return f"Project(id={self.id}, name={self._name!r})"


class Hierarchy:
    """Arena owning every user, group and attached project.

    Example::

        hierarchy = Hierarchy()
        alice = hierarchy.create_user("alice")
        acme = hierarchy.create_group("Acme")
        backend = hierarchy.create_group("Backend", parent=acme)
        backend.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
    """

    def __init__(self, config: Optional[ForgeConfig] = None) -> None:
        self.config = config or ForgeConfig()
        self._users: dict[int, User] = {}
        self._groups: dict[int, Group] = {}
        self._projects: dict[int, Project] = {}
        self._user_ids = itertools.count(1)
        self._group_ids = itertools.count(1)
        self._project_ids = itertools.count(1)

    @property
    def users(self) -> tuple[User, ...]:
        return tuple(self._users.values())

    @property
    def groups(self) -> tuple[Group, ...]:
        return tuple(self._groups.values())

    @property
    def projects(self) -> tuple[Project, ...]:
        return tuple(self._projects.values())

    def create_user(self, username: str, *, is_admin: bool = False) -> User:
        """Create a user and their personal namespace, where they are Owner."""
        user = User(next(self._user_ids), username, is_admin=is_admin)
        namespace = self.create_group(username, is_user_namespace=True)
        namespace.grants.add(Grant.for_user(user, AccessLevel.OWNER))
        user.namespace = namespace
        self._users[user.id] = user
        logger.debug("Created user %d (%s) admin=%s", user.id, username, is_admin)
        return user

    def create_group(
        self,
        name: str,
        *,
        parent: Optional[Group] = None,
        is_user_namespace: bool = False,
    ) -> Group:
        group = Group(
            self,
            next(self._group_ids),
            name,
            parent=parent,
            is_user_namespace=is_user_namespace,
        )
        self._groups[group.id] = group
        return group

    def get_user(self, user_id: int) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise NotFoundError(f"User {user_id} not found", user_id=user_id)

    def get_group(self, group_id: int) -> Group:
        try:
            return self._groups[group_id]
        except KeyError:
            raise NotFoundError(f"Group {group_id} not found", group_id=group_id)

    def get_project(self, project_id: int) -> Project:
        try:
            return self._projects[project_id]
        except KeyError:
            raise NotFoundError(f"Project {project_id} not found", project_id=project_id)

    def find_project(self, path_with_namespace: str) -> Optional[Project]:
        """Look up an attached project by its full path (case-insensitive)."""
        wanted = path_with_namespace.strip("/").lower()
        return next(
            (p for p in self._projects.values() if p.path_with_namespace.lower() == wanted),
            None,
        )

    def make_url(self, path: str) -> str:
        return f"{self.config.server_url}/{path}"

    def _attach_project(self, project: Project) -> None:
        if project.id is None:
            project.id = next(self._project_ids)
            project._issuer = self
        self._projects[project.id] = project

    def _detach_project(self, project: Project) -> None:
        self._projects.pop(project.id, None)


__all__ = [
    "Group",
    "Hierarchy",
    "Project",
    "ProjectCollection",
    "User",
]
