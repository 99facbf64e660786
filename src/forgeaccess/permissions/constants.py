"""Access levels and visibility for forgeaccess.

Provides:
- ``AccessLevel`` — totally ordered membership rank.
- ``Visibility`` — baseline view access of a project.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class AccessLevel(IntEnum):
    """Membership rank on a group or project.

    Values match the platform's wire values, so ``int(level)`` can be sent
    as-is. Ordering is the authorization order::

        AccessLevel.GUEST < AccessLevel.REPORTER < AccessLevel.DEVELOPER
            < AccessLevel.MAINTAINER < AccessLevel.OWNER
    """

    GUEST = 10
    REPORTER = 20
    DEVELOPER = 30
    MAINTAINER = 40
    OWNER = 50


class Visibility(str, Enum):
    """Baseline view access for anonymous and authenticated users."""

    PRIVATE = "private"  # Members only
    INTERNAL = "internal"  # Any authenticated user
    PUBLIC = "public"  # Everyone, including anonymous


__all__ = [
    "AccessLevel",
    "Visibility",
]
