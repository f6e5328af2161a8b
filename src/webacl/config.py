"""Configuration contract for webacl.

Pydantic-validated settings shared by every PermissionSet in a process.
Per-request values (the request host and its Origin header) are passed to
PermissionSet directly and are not part of this model.

Direct os.environ/os.getenv usage is confined to load_config_from_env().
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

DEFAULT_ACL_SUFFIX = ".acl"
DEFAULT_CONTENT_TYPE = "text/turtle"


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AclConfig(BaseModel):
    """Settings for permission resolution and ACL serialization."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # ACL resources
    acl_suffix: str = Field(
        default=DEFAULT_ACL_SUFFIX,
        description="Suffix appended to a resource URL to derive its ACL URL",
    )
    default_content_type: str = Field(
        default=DEFAULT_CONTENT_TYPE,
        description="Content type used by serialize() and save() when none is given",
    )

    # Origin enforcement
    strict_origin: bool = Field(
        default=False,
        description="Require cross-origin requests to match an acl:origin of the permission",
    )

    @field_validator("acl_suffix")
    @classmethod
    def validate_acl_suffix(cls, v: str) -> str:
        """ACL suffix must look like a file extension."""
        if not v or not v.startswith("."):
            raise ValueError("ACL suffix must be non-empty and start with '.'")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_config_from_env() -> AclConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - ACL_SUFFIX: Suffix for derived ACL URLs (default: .acl)
    - ACL_CONTENT_TYPE: Serialization content type (default: text/turtle)
    - ACL_STRICT_ORIGIN: Enforce acl:origin checks (true/false)

    Returns:
        AclConfig instance with values from environment or defaults.
    """
    import os

    return AclConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        acl_suffix=os.getenv("ACL_SUFFIX", DEFAULT_ACL_SUFFIX),
        default_content_type=os.getenv("ACL_CONTENT_TYPE", DEFAULT_CONTENT_TYPE),
        strict_origin=os.getenv("ACL_STRICT_ORIGIN", "false").lower() in ("true", "1", "yes", "on"),
    )


__all__ = [
    "DEFAULT_ACL_SUFFIX",
    "DEFAULT_CONTENT_TYPE",
    "AclConfig",
    "LogLevel",
    "load_config_from_env",
]
