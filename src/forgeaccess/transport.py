"""Wire projection of projects.

These are Pydantic models whose field names match the platform's project
API, so ``to_client_project(p).model_dump(mode="json")`` is wire-shaped.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel

from .permissions.constants import Visibility

if TYPE_CHECKING:
    from .hierarchy.models import Project


class ClientNamespace(BaseModel):
    """Namespace descriptor embedded in a project."""

    id: Optional[int] = None
    name: str
    path: str
    kind: Literal["user", "group"]
    full_path: str


class ClientProject(BaseModel):
    """Project as returned by the projects API."""

    id: Optional[int] = None
    name: str
    path: str
    path_with_namespace: str
    forked_from_project: Optional[ClientProject] = None
    import_status: Optional[str] = None
    ssh_url_to_repo: str
    http_url_to_repo: str
    default_branch: str
    visibility: Visibility
    namespace: Optional[ClientNamespace] = None
    web_url: Optional[str] = None
    build_timeout: Optional[int] = None


ClientProject.model_rebuild()


def timeout_minutes(timeout: Optional[timedelta]) -> Optional[int]:
    """Whole minutes of a build timeout, truncated toward zero."""
    if timeout is None:
        return None
    return int(timeout.total_seconds() / 60)


def to_client_project(project: Project) -> ClientProject:
    """Project the internal state of ``project`` onto the wire model.

    A detached project (or a removed fork source) has no namespace or web URL.
    """
    group = project.group
    namespace = None
    if group is not None:
        namespace = ClientNamespace(
            id=group.id,
            name=group.name,
            path=group.path,
            kind="user" if group.is_user_namespace else "group",
            full_path=group.path_with_namespace,
        )

    forked_from = project.forked_from
    repo_url = project.repository.full_path

    return ClientProject(
        id=project.id,
        name=project.name,
        path=project.path,
        path_with_namespace=project.path_with_namespace,
        forked_from_project=to_client_project(forked_from) if forked_from is not None else None,
        import_status=project.import_status,
        ssh_url_to_repo=repo_url,
        http_url_to_repo=repo_url,
        default_branch=project.default_branch,
        visibility=project.visibility,
        namespace=namespace,
        web_url=project.web_url,
        build_timeout=timeout_minutes(project.build_timeout),
    )


__all__ = [
    "ClientNamespace",
    "ClientProject",
    "timeout_minutes",
    "to_client_project",
]
