"""Path derivation for groups and projects.

All functions are pure over the current hierarchy state: nothing is stored,
so a rename or reparent is reflected on the next call.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Union

from ..exceptions import HierarchyCycleError

if TYPE_CHECKING:
    from .models import Group, Project

    Node = Union[Group, Project]

_NON_SLUG = re.compile(r"[^a-z0-9_.]+")


def slugify(name: str) -> str:
    """Turn a display name into a URL path segment.

    Lowercases, collapses every run of characters outside ``[a-z0-9_.]``
    into a single ``-`` and trims ``-`` from both ends::

        slugify("My Repo!")        # "my-repo"
        slugify("  Back End  ")    # "back-end"
        slugify("v1.2_final")      # "v1.2_final"
    """
    return _NON_SLUG.sub("-", name.lower()).strip("-")


def ancestors(node: Node) -> list[Group]:
    """Parent groups of ``node``, root first.

    Raises:
        HierarchyCycleError: The parent chain loops.
    """
    chain: list[Group] = []
    seen: set[int] = set()
    parent = node.parent
    while parent is not None:
        if parent.id in seen:
            raise HierarchyCycleError(
                f"Parent chain of {node.kind} {node.name!r} loops at group {parent.id}",
                group_id=parent.id,
            )
        seen.add(parent.id)
        chain.append(parent)
        parent = parent.parent
    chain.reverse()
    return chain


def path_with_namespace(node: Node) -> str:
    """``/``-joined slugs of every ancestor group plus the node's own slug."""
    return "/".join([*(g.path for g in ancestors(node)), node.path])


def full_name(node: Node) -> str:
    """``/``-joined names of every ancestor group plus the node's own name."""
    return "/".join([*(g.name for g in ancestors(node)), node.name])


__all__ = [
    "ancestors",
    "full_name",
    "path_with_namespace",
    "slugify",
]
