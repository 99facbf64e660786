"""Group/project hierarchy and path derivation."""

from .models import Group, Hierarchy, Project, ProjectCollection, User
from .paths import ancestors, full_name, path_with_namespace, slugify

__all__ = [
    "Group",
    "Hierarchy",
    "Project",
    "ProjectCollection",
    "User",
    "ancestors",
    "full_name",
    "path_with_namespace",
    "slugify",
]
