"""Merge-request records and the branch/merge-request bridge.

``open_merge_request`` drives the repository collaborator (initial commit,
branch, edit commit) and then records the merge request. It does not check
permissions: callers gate with ``can_contribute`` / ``can_edit`` first.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterator, Optional

from .exceptions import InvalidArgumentError
from .logging import get_forge_logger

if TYPE_CHECKING:
    from .hierarchy.models import Project, User

logger = get_forge_logger(__name__)


@dataclass
class MergeRequest:
    """A merge request within one project. ``iid`` is project-local."""

    iid: int
    source_branch: str
    target_branch: str
    title: str
    author: User
    description: str = ""
    state: str = "opened"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MergeRequestCollection:
    """Merge requests of a project, numbered from 1."""

    def __init__(self, project: Project) -> None:
        self._project = project
        self._items: list[MergeRequest] = []
        self._iids = itertools.count(1)

    def add(self, source_branch: str, target_branch: str, title: str, user: User) -> MergeRequest:
        if not title:
            raise InvalidArgumentError("Merge request title must not be empty")
        merge_request = MergeRequest(
            iid=next(self._iids),
            source_branch=source_branch,
            target_branch=target_branch,
            title=title,
            author=user,
        )
        self._items.append(merge_request)
        return merge_request

    def get(self, iid: int) -> Optional[MergeRequest]:
        return next((mr for mr in self._items if mr.iid == iid), None)

    def __iter__(self) -> Iterator[MergeRequest]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)


def open_merge_request(
    project: Project,
    user: User,
    source_branch: str,
    target_branch: str,
    title: str,
    description: Optional[str],
) -> MergeRequest:
    """Push a change on ``source_branch`` and open a merge request into ``target_branch``.

    Steps:
    1. If ``source_branch`` has no tip, commit "initial commit" on HEAD.
    2. Create and check out ``source_branch``, then commit "edit".
    3. Record the merge request and set its description.

    Arguments are checked before the repository is touched, so a rejected
    call leaves no commits or branches behind.
    """
    if not title:
        raise InvalidArgumentError("Merge request title must not be empty")
    if not source_branch:
        raise InvalidArgumentError("Branch name must not be empty")

    repository = project.repository
    if repository.get_branch_tip_commit(source_branch) is None:
        repository.commit(user, "initial commit")
    repository.create_and_checkout_branch(source_branch)
    repository.commit(user, "edit")

    merge_request = project.merge_requests.add(
        source_branch=source_branch,
        target_branch=target_branch,
        title=title,
        user=user,
    )
    merge_request.description = description or ""

    logger.info(
        "Opened merge request !%d %s -> %s on %s",
        merge_request.iid,
        source_branch,
        target_branch,
        project.path_with_namespace,
        user_id=user.id,
        node=project.path_with_namespace,
    )
    return merge_request


__all__ = [
    "MergeRequest",
    "MergeRequestCollection",
    "open_merge_request",
]
