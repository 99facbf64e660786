"""Effective-permission resolution over the group/project hierarchy.

``resolve(node)`` walks the node's ancestor chain and every group referenced
by a group grant, keeping the highest access level seen per user. Results are
snapshots: nothing is cached, every call walks the current state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping, Optional, Union

from ..exceptions import HierarchyCycleError, HierarchyError
from .constants import AccessLevel
from .grants import UserTarget

if TYPE_CHECKING:
    from ..hierarchy.models import Group, Project, User

    Node = Union[Group, Project]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveUserPermission:
    """One resolved (user, level) entry."""

    user_id: int
    access_level: AccessLevel


class EffectivePermissions:
    """Immutable mapping of user id to the highest resolved access level."""

    __slots__ = ("_levels",)

    def __init__(self, levels: Mapping[int, AccessLevel]) -> None:
        self._levels = MappingProxyType(dict(levels))

    def get_access_level(self, user: Optional[User | int]) -> Optional[AccessLevel]:
        """Return the user's resolved level, or None if they hold none.

        Accepts a User, a user id, or None (anonymous, always None).
        """
        if user is None:
            return None
        user_id = user if isinstance(user, int) else user.id
        return self._levels.get(user_id)

    @property
    def permissions(self) -> tuple[EffectiveUserPermission, ...]:
        return tuple(EffectiveUserPermission(uid, level) for uid, level in self._levels.items())

    def as_dict(self) -> dict[int, AccessLevel]:
        return dict(self._levels)

    def __iter__(self) -> Iterator[EffectiveUserPermission]:
        return iter(self.permissions)

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, user: object) -> bool:
        if isinstance(user, int):
            return user in self._levels
        return getattr(user, "id", None) in self._levels

    def __repr__(self) -> str:
        entries = ", ".join(f"{uid}: {level.name}" for uid, level in self._levels.items())
        return f"EffectivePermissions({{{entries}}})"


def resolve(node: Node) -> EffectivePermissions:
    """Compute the effective permissions on a group or project.

    Algorithm:
    1. Seed with the resolved permissions of the parent group (if any).
    2. For each local grant: a user grant merges (user, level); a group
       grant merges every entry of that group's own resolution.
    3. Merging keeps ``max(existing, new)`` per user.

    Raises:
        HierarchyCycleError: A parent link or group grant re-enters a group
            that is still being resolved.
        HierarchyError: A group grant sits on a node that is not attached
            to a hierarchy.
        NotFoundError: A group grant references an unknown group id.
    """
    levels: dict[int, AccessLevel] = {}
    _collect(node, levels, set())
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Resolved %d effective permission(s) on %s %s",
            len(levels),
            node.kind,
            node.path_with_namespace,
        )
    return EffectivePermissions(levels)


def _collect(node: Node, levels: dict[int, AccessLevel], resolving: set[tuple[str, Optional[int]]]) -> None:
    key = (node.kind, node.id)
    if key in resolving:
        raise HierarchyCycleError(
            f"Cycle detected while resolving permissions at {node.kind} {node.id}",
            node_kind=node.kind,
            node_id=node.id,
        )
    resolving.add(key)
    try:
        parent = node.parent
        if parent is not None:
            _collect(parent, levels, resolving)

        for grant in node.grants:
            target = grant.target
            if isinstance(target, UserTarget):
                _merge(levels, target.user_id, grant.access_level)
                continue
            if node.hierarchy is None:
                raise HierarchyError(
                    f"Group grant on detached {node.kind} {node.name!r} cannot be resolved",
                    group_id=target.group_id,
                )
            _collect(node.hierarchy.get_group(target.group_id), levels, resolving)
    finally:
        resolving.discard(key)


def _merge(levels: dict[int, AccessLevel], user_id: int, level: AccessLevel) -> None:
    existing = levels.get(user_id)
    if existing is None or level > existing:
        levels[user_id] = level


__all__ = [
    "EffectivePermissions",
    "EffectiveUserPermission",
    "resolve",
]
