"""Explicit grants attached to groups and projects.

A grant pairs a target with an access level. The target is a tagged
variant, either :class:`UserTarget` or :class:`GroupTarget`, so a grant
always has exactly one target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Union

from ..exceptions import InvalidArgumentError
from .constants import AccessLevel

if TYPE_CHECKING:
    from ..hierarchy.models import Group, User


@dataclass(frozen=True)
class UserTarget:
    """Grant target: a single user, by id."""

    user_id: int


@dataclass(frozen=True)
class GroupTarget:
    """Grant target: every member of a group, by id."""

    group_id: int


GrantTarget = Union[UserTarget, GroupTarget]


@dataclass(frozen=True)
class Grant:
    """An explicit (target, access level) pair on a hierarchy node.

    Example::

        project.grants.add(Grant.for_user(alice, AccessLevel.DEVELOPER))
        project.grants.add(Grant.for_group(backend, AccessLevel.REPORTER))
    """

    target: GrantTarget
    access_level: AccessLevel

    def __post_init__(self) -> None:
        if not isinstance(self.target, (UserTarget, GroupTarget)):
            raise InvalidArgumentError(
                f"Grant target must be UserTarget or GroupTarget, got {type(self.target).__name__}",
            )
        # Accept raw ints (e.g. 40) and normalize to the enum.
        try:
            level = AccessLevel(self.access_level)
        except ValueError:
            raise InvalidArgumentError(f"Unknown access level: {self.access_level!r}")
        object.__setattr__(self, "access_level", level)

    @classmethod
    def for_user(cls, user: User, access_level: AccessLevel) -> Grant:
        return cls(UserTarget(user.id), access_level)

    @classmethod
    def for_group(cls, group: Group, access_level: AccessLevel) -> Grant:
        return cls(GroupTarget(group.id), access_level)


class GrantCollection:
    """Ordered collection of grants owned by one group or project."""

    def __init__(self, owner: object) -> None:
        self._owner = owner
        self._grants: list[Grant] = []

    @property
    def owner(self) -> object:
        return self._owner

    def add(self, grant: Grant) -> Grant:
        if not isinstance(grant, Grant):
            raise InvalidArgumentError(f"Expected Grant, got {type(grant).__name__}")
        self._grants.append(grant)
        return grant

    def remove(self, grant: Grant) -> bool:
        """Remove one occurrence of ``grant``. Returns False if it was not present."""
        try:
            self._grants.remove(grant)
        except ValueError:
            return False
        return True

    def clear(self) -> None:
        self._grants.clear()

    def __iter__(self) -> Iterator[Grant]:
        return iter(list(self._grants))

    def __len__(self) -> int:
        return len(self._grants)

    def __contains__(self, grant: object) -> bool:
        return grant in self._grants

    def __repr__(self) -> str:
        return f"GrantCollection({self._grants!r})"


__all__ = [
    "Grant",
    "GrantCollection",
    "GrantTarget",
    "GroupTarget",
    "UserTarget",
]
