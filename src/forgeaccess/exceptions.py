"""Unified exception hierarchy for forgeaccess.

All errors raised by the package inherit from ForgeAccessError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping
- HTTP status mapping for API emulation layers

Usage:
    from forgeaccess.exceptions import (
        ForgeAccessError,
        HierarchyCycleError,
        PermissionDeniedError,
    )
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "ForgeAccessError",
    "ConfigurationError",
    "InvalidArgumentError",
    "NotFoundError",
    "PermissionDeniedError",
    "HierarchyError",
    "HierarchyCycleError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # Protocol helpers
    "get_http_status",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class ForgeAccessError(Exception):
    """Base exception for forgeaccess.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "PERMISSION_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(ForgeAccessError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class InvalidArgumentError(ForgeAccessError):
    """A constructor or operation received an unusable argument."""

    code: str = "INVALID_ARGUMENT"


class NotFoundError(ForgeAccessError):
    """A referenced user, group or project is not in the hierarchy."""

    code: str = "NOT_FOUND"


class PermissionDeniedError(ForgeAccessError):
    """An access-gate predicate rejected the requesting user."""

    code: str = "PERMISSION_DENIED"


class HierarchyError(ForgeAccessError):
    """The group/project hierarchy is structurally unusable."""

    code: str = "HIERARCHY_ERROR"


class HierarchyCycleError(HierarchyError):
    """A parent link or group grant loops back onto a group being traversed."""

    code: str = "HIERARCHY_CYCLE"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[ForgeAccessError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[ForgeAccessError]] = {}

    def register(self, code: str, error_cls: type[ForgeAccessError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[ForgeAccessError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[ForgeAccessError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(ForgeAccessError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", ForgeAccessError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("INVALID_ARGUMENT", InvalidArgumentError)
error_registry.register("NOT_FOUND", NotFoundError)
error_registry.register("PERMISSION_DENIED", PermissionDeniedError)
error_registry.register("HIERARCHY_ERROR", HierarchyError)
error_registry.register("HIERARCHY_CYCLE", HierarchyCycleError)


# ---- HTTP Status Mapping -----------------------------------------------------


_HTTP_STATUS: dict[str, int] = {
    "CONFIGURATION_ERROR": 500,
    "INVALID_ARGUMENT": 400,
    "NOT_FOUND": 404,
    "PERMISSION_DENIED": 403,
    "HIERARCHY_ERROR": 409,
    "HIERARCHY_CYCLE": 409,
}


def get_http_status(error: ForgeAccessError) -> int:
    """Map a ForgeAccessError to the HTTP status an emulated API handler returns.

    Unknown codes map to 500.
    """
    status = _HTTP_STATUS.get(error.code, 500)
    if status >= 500:
        logger.error("Unmapped or internal error surfaced to API: [%s] %s", error.code, error.message)
    return status
