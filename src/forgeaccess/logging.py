"""Centralized logging utilities for forgeaccess.

This module provides:
- Logging configuration from ForgeConfig
- Safe preview utility for logged values
- Structured logging with user/node context
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import ForgeConfig, LogLevel

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "user_id", "node",
})


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a length-bounded, single-line preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class ForgeFormatter(logging.Formatter):
    """Formatter that includes user/node context and optional JSON output.

    This formatter:
    - Extracts ``user_id`` and ``node`` from log records (if available)
    - Formats logs as JSON or plain text
    - Includes safe previews of extra fields
    """

    def __init__(
        self,
        include_context: bool = True,
        json_format: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_context = include_context
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        user_id = getattr(record, "user_id", None)
        node = getattr(record, "node", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            if user_id is not None:
                log_data["user_id"] = user_id
            if node:
                log_data["node"] = node

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if self.include_context and user_id is not None:
            parts.append(f"user_id={user_id}")
        if self.include_context and node:
            parts.append(f"node={node}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class ForgeLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds ``user_id`` and ``node`` to log records.

    Usage:
        logger = get_forge_logger(__name__)
        logger.info("Forked project", user_id=user.id, node=project.path_with_namespace)
    """

    def __init__(
        self,
        logger: logging.Logger,
        user_id: Optional[int] = None,
        node: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.user_id = user_id
        self.node = node

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        user_id = kwargs.pop("user_id", self.user_id)
        node = kwargs.pop("node", self.node)

        extra = kwargs.get("extra", {})
        if user_id is not None:
            extra["user_id"] = user_id
        if node:
            extra["node"] = node
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[ForgeConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure the root logger for a process using forgeaccess.

    This function:
    - Sets up logging level from ForgeConfig
    - Installs a single console handler with ForgeFormatter

    Args:
        config: ForgeConfig instance (if None, loads from environment)
        json_format: Override for ``config.log_json``
    """
    if config is None:
        from .config import load_config_from_env
        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        ForgeFormatter(
            include_context=True,
            json_format=config.log_json if json_format is None else json_format,
        )
    )
    root_logger.addHandler(console_handler)


def get_forge_logger(
    name: str,
    user_id: Optional[int] = None,
    node: Optional[str] = None,
) -> ForgeLoggerAdapter:
    """Get a logger adapter carrying user/node context.

    Args:
        name: Logger name (typically __name__)
        user_id: Optional user id to include in all logs
        node: Optional hierarchy path to include in all logs

    Returns:
        ForgeLoggerAdapter instance
    """
    logger = logging.getLogger(name)
    return ForgeLoggerAdapter(logger, user_id=user_id, node=node)


__all__ = [
    "safe_preview",
    "ForgeFormatter",
    "ForgeLoggerAdapter",
    "setup_logging",
    "get_forge_logger",
]
