"""Access-gate predicates for projects.

Provides boolean checks answering "may this user do X on this project?".
Each predicate re-runs :func:`resolve`; nothing is cached between calls.
``None`` stands for an anonymous (unauthenticated) user throughout.
Used by emulated API handlers to decide allow/deny outcomes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from ..exceptions import PermissionDeniedError
from .constants import AccessLevel, Visibility
from .resolver import resolve

if TYPE_CHECKING:
    from ..hierarchy.models import Project, User

logger = logging.getLogger(__name__)


def _access_level(project: Project, user: User) -> Optional[AccessLevel]:
    return resolve(project).get_access_level(user)


def can_view(project: Project, user: Optional[User]) -> bool:
    """Check if a user may view a project.

    Checks in order:
    1. ``public`` visibility — everyone, including anonymous
    2. ``internal`` visibility — any authenticated user
    3. anonymous — denied
    4. administrator — allowed
    5. any resolved access level — allowed

    Example::

        project.visibility = Visibility.INTERNAL
        can_view(project, None)   # False
        can_view(project, alice)  # True, no grant needed
    """
    if project.visibility == Visibility.PUBLIC:
        return True
    if project.visibility == Visibility.INTERNAL and user is not None:
        return True
    if user is None:
        return False
    if user.is_admin:
        return True
    return _access_level(project, user) is not None


def can_edit(project: Project, user: Optional[User]) -> bool:
    """Check if a user may change project settings (Maintainer or admin)."""
    if user is None:
        return False
    if user.is_admin:
        return True
    level = _access_level(project, user)
    return level is not None and level >= AccessLevel.MAINTAINER


def can_contribute(project: Project, user: Optional[User]) -> bool:
    """Check if a user may push and open merge requests (Developer or admin)."""
    if user is None:
        return False
    if user.is_admin:
        return True
    level = _access_level(project, user)
    return level is not None and level >= AccessLevel.DEVELOPER


def can_delete(project: Project, user: Optional[User]) -> bool:
    """Check if a user may delete a project (Owner or admin).

    Anonymous users are neither admin nor owner, so they are denied.
    """
    if user is None:
        return False
    if user.is_admin:
        return True
    return is_owner(project, user)


def is_owner(project: Project, user: Optional[User]) -> bool:
    """Exact Owner level. No admin bypass."""
    if user is None:
        return False
    return _access_level(project, user) == AccessLevel.OWNER


def is_member(project: Project, user: Optional[User]) -> bool:
    """Any resolved level, inherited or local. No admin bypass."""
    if user is None:
        return False
    return _access_level(project, user) is not None


def require(
    predicate: Callable[[Project, Optional[User]], bool],
    project: Project,
    user: Optional[User],
) -> None:
    """Raise :class:`PermissionDeniedError` unless ``predicate`` allows the user.

    Example::

        require(can_contribute, project, user)
        project.create_merge_request(user, "feature", "master", "Title", "")
    """
    if predicate(project, user):
        return
    user_id = user.id if user is not None else None
    logger.info(
        "Denied %s for user %s on %s",
        predicate.__name__,
        user_id,
        project.path_with_namespace,
    )
    raise PermissionDeniedError(
        f"{predicate.__name__} denied on {project.path_with_namespace}",
        user_id=user_id,
        project_id=project.id,
    )


__all__ = [
    "can_contribute",
    "can_delete",
    "can_edit",
    "can_view",
    "is_member",
    "is_owner",
    "require",
]
