"""Access levels, grants, permission resolution and access gates.

Defines:
- AccessLevel / Visibility: ordered ranks and project visibility
- Grant / GrantCollection: explicit (user-or-group, level) pairs on a node
- resolve(): effective permissions from ancestors plus local grants
- can_view() ... is_member(): boolean access gates
"""

from .access import (
    can_contribute,
    can_delete,
    can_edit,
    can_view,
    is_member,
    is_owner,
    require,
)
from .constants import AccessLevel, Visibility
from .grants import Grant, GrantCollection, GrantTarget, GroupTarget, UserTarget
from .resolver import EffectivePermissions, EffectiveUserPermission, resolve

__all__ = [
    "AccessLevel",
    "EffectivePermissions",
    "EffectiveUserPermission",
    "Grant",
    "GrantCollection",
    "GrantTarget",
    "GroupTarget",
    "UserTarget",
    "Visibility",
    "can_contribute",
    "can_delete",
    "can_edit",
    "can_view",
    "is_member",
    "is_owner",
    "require",
    "resolve",
]
