"""In-memory repository collaborator.

Only what the merge-request bridge consumes: branch tips, commits on the
checked-out branch, and branch creation. Content and diffs are not modeled.
"""

from __future__ import annotations

import hashlib
import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from .exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from .hierarchy.models import Project, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Commit:
    """A single commit. ``parent_sha`` is None for a root commit."""

    sha: str
    message: str
    author_id: Optional[int]
    parent_sha: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Repository:
    """Branches and commits of one project."""

    def __init__(self, project: Project) -> None:
        self._project = project
        self._tips: dict[str, Commit] = {}
        self._commits: dict[str, Commit] = {}
        self._head: Optional[str] = None
        self._seq = itertools.count(1)

    @property
    def head(self) -> str:
        """Checked-out branch; the project's default branch until a checkout happens."""
        return self._head or self._project.default_branch

    @property
    def branches(self) -> tuple[str, ...]:
        return tuple(self._tips)

    @property
    def full_path(self) -> str:
        hierarchy = self._project.hierarchy
        repo_path = f"{self._project.path_with_namespace}.git"
        if hierarchy is None:
            return repo_path
        return hierarchy.make_url(repo_path)

    def get_branch_tip_commit(self, branch: str) -> Optional[Commit]:
        return self._tips.get(branch)

    def get_commit(self, sha: str) -> Optional[Commit]:
        return self._commits.get(sha)

    def commit(self, user: Optional[User], message: str) -> Commit:
        """Record a commit on the checked-out branch and advance its tip."""
        branch = self.head
        parent = self._tips.get(branch)
        author_id = user.id if user is not None else None
        seed = f"{self._project.name}\n{parent.sha if parent else ''}\n{author_id}\n{message}\n{next(self._seq)}"
        commit = Commit(
            sha=hashlib.sha1(seed.encode("utf-8")).hexdigest(),
            message=message,
            author_id=author_id,
            parent_sha=parent.sha if parent else None,
        )
        self._commits[commit.sha] = commit
        self._tips[branch] = commit
        logger.debug("Committed %s on %s: %s", commit.sha[:8], branch, message)
        return commit

    def create_and_checkout_branch(self, branch: str) -> None:
        """Create ``branch`` at the current HEAD tip (if missing) and check it out.

        Raises:
            InvalidArgumentError: Empty branch name, or the branch is new and
                HEAD has no commit to start it from.
        """
        if not branch:
            raise InvalidArgumentError("Branch name must not be empty")
        if branch not in self._tips:
            start = self._tips.get(self.head)
            if start is None:
                raise InvalidArgumentError(
                    f"Cannot create branch {branch!r}: {self.head!r} has no commits",
                    branch=branch,
                )
            self._tips[branch] = start
        self._head = branch

    def checkout(self, branch: str) -> None:
        if branch not in self._tips:
            raise InvalidArgumentError(f"Unknown branch {branch!r}", branch=branch)
        self._head = branch


__all__ = [
    "Commit",
    "Repository",
]
