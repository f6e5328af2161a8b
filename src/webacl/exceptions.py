"""Unified exception hierarchy for webacl.

All errors raised by the library inherit from WebAclError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to exception classes

Usage:
    from webacl.exceptions import (
        WebAclError,
        ConfigurationError,
        InvalidStateError,
    )

Hosting applications may define thin subclasses for their own errors:
    @register_error("POD_ERROR")
    class PodError(WebAclError):
        code = "POD_ERROR"
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "WebAclError",
    "ConfigurationError",
    "InvalidStateError",
    "SerializationError",
    "PersistenceError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class WebAclError(Exception):
    """Base exception for webacl.

    Attributes:
        code: Stable error code string (e.g. "CONFIGURATION_ERROR").
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


class ConfigurationError(WebAclError):
    """Missing collaborator or required identifier."""

    code: str = "CONFIGURATION_ERROR"


class InvalidStateError(WebAclError):
    """A mutation would break a Permission invariant."""

    code: str = "INVALID_STATE"


class SerializationError(WebAclError):
    """The serializer collaborator failed or returned nothing."""

    code: str = "SERIALIZATION_ERROR"


class PersistenceError(WebAclError):
    """The web client failed to store or delete an ACL resource."""

    code: str = "PERSISTENCE_ERROR"


# ---- Error Registry ---------------------------------------------------------

_E = TypeVar("_E", bound=type[WebAclError])


class ErrorRegistry:
    """Registry for mapping stable error codes to exception classes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[WebAclError]] = {}

    def register(self, code: str, error_cls: type[WebAclError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[WebAclError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[WebAclError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(WebAclError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", WebAclError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("INVALID_STATE", InvalidStateError)
error_registry.register("SERIALIZATION_ERROR", SerializationError)
error_registry.register("PERSISTENCE_ERROR", PersistenceError)
