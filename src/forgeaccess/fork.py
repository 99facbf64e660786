"""Fork engine.

A fork is a new project seeded from the source's metadata, placed in the
target group, with the requesting user as Owner. By default the source's
visibility to the user is not checked; ``ForgeConfig.fork_requires_view``
turns that check on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .exceptions import InvalidArgumentError, PermissionDeniedError
from .hierarchy.models import Project
from .logging import get_forge_logger
from .permissions import AccessLevel, Grant, can_view

if TYPE_CHECKING:
    from .hierarchy.models import Group, User

logger = get_forge_logger(__name__)

IMPORT_FINISHED = "finished"


def fork_project(
    source: Project,
    target_group: Group,
    user: User,
    name: Optional[str] = None,
) -> Project:
    """Fork ``source`` into ``target_group`` on behalf of ``user``.

    Args:
        source: Project to fork.
        target_group: Group receiving the new project.
        user: Requesting user; receives an Owner grant on the fork.
        name: Name of the fork. Defaults to the source's name.

    Returns:
        The new project, already attached to ``target_group``.

    Raises:
        InvalidArgumentError: No requesting user.
        PermissionDeniedError: ``fork_requires_view`` is enabled and the user
            cannot view ``source``.
    """
    if user is None:
        raise InvalidArgumentError("Forking requires a user")

    if target_group.hierarchy.config.fork_requires_view and not can_view(source, user):
        raise PermissionDeniedError(
            f"User {user.id} cannot view {source.path_with_namespace}",
            user_id=user.id,
            project_id=source.id,
        )

    fork = Project(
        name if name is not None else source.name,
        description=source.description,
        forked_from=source,
        import_status=IMPORT_FINISHED,
    )
    fork.grants.add(Grant.for_user(user, AccessLevel.OWNER))
    target_group.projects.add(fork)

    logger.info(
        "Forked %s into %s",
        source.path_with_namespace,
        fork.path_with_namespace,
        user_id=user.id,
        node=fork.path_with_namespace,
    )
    return fork


__all__ = [
    "IMPORT_FINISHED",
    "fork_project",
]
