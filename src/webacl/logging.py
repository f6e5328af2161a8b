"""Centralized logging utilities for webacl.

This module provides:
- Logging configuration from AclConfig
- Safe preview utilities for logged values
- Redaction of e-mail addresses (mailto aliases are personal data)
- A logger adapter that tags records with the resource and agent of an
  access decision
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import AclConfig, LogLevel

EMAIL_PATTERN = re.compile(r"(?:mailto:)?[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

# Attributes of a LogRecord that are not user-supplied extras
_RECORD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
    "resource_url", "agent_id",
}


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a single-line, length-bounded preview of a value for logging.

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


def redact_mailto(text: str, replacement: str = "[REDACTED]") -> str:
    """Replace e-mail addresses (with or without ``mailto:``) in text."""
    if not isinstance(text, str):
        return text
    return EMAIL_PATTERN.sub(replacement, text)


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview a value and optionally redact e-mail addresses from it."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_mailto(preview)
    return preview


class AclFormatter(logging.Formatter):
    """Formatter that surfaces the resource and agent of a record.

    Outputs JSON (default) or plain text; e-mail addresses are redacted
    unless disabled.
    """

    def __init__(
        self,
        json_format: bool = True,
        redact: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact = redact

    def format(self, record: logging.LogRecord) -> str:
        resource_url = getattr(record, "resource_url", None)
        agent_id = getattr(record, "agent_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if resource_url:
            log_data["resource_url"] = resource_url
        if agent_id:
            log_data["agent_id"] = safe_log_value(agent_id, redact=self.redact)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact)

        if self.redact:
            log_data["message"] = redact_mailto(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            log_data["level"],
            log_data["logger"],
        ]
        if resource_url:
            parts.append(f"resource={resource_url}")
        if agent_id:
            parts.append(f"agent={log_data['agent_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class AclLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds resource_url and agent_id to log records.

    Usage:
        log = AclLoggerAdapter(logger, resource_url=url, agent_id=web_id)
        log.debug("Public access allowed")
    """

    def __init__(
        self,
        logger: logging.Logger,
        resource_url: Optional[str] = None,
        agent_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.resource_url = resource_url
        self.agent_id = agent_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        resource_url = kwargs.pop("resource_url", self.resource_url)
        agent_id = kwargs.pop("agent_id", self.agent_id)

        extra = kwargs.get("extra", {})
        if resource_url:
            extra["resource_url"] = resource_url
        if agent_id:
            extra["agent_id"] = agent_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(config: Optional[AclConfig] = None, redact: bool = True) -> None:
    """Configure the root logger from AclConfig.

    Args:
        config: AclConfig instance (if None, loads from environment)
        redact: Whether to redact e-mail addresses (default: True)
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

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(AclFormatter(json_format=config.log_json, redact=redact))
    root_logger.addHandler(console_handler)


def get_acl_logger(
    name: str,
    resource_url: Optional[str] = None,
    agent_id: Optional[str] = None,
) -> AclLoggerAdapter:
    """Get a logger adapter bound to a resource and agent.

    Example:
        log = get_acl_logger(__name__, resource_url=url)
        log.info("Saved ACL")
    """
    return AclLoggerAdapter(logging.getLogger(name), resource_url=resource_url, agent_id=agent_id)


__all__ = [
    "AclFormatter",
    "AclLoggerAdapter",
    "get_acl_logger",
    "redact_mailto",
    "safe_log_value",
    "safe_preview",
    "setup_logging",
]
