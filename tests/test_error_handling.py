"""Tests for the exception hierarchy and error registry."""

from __future__ import annotations

import pytest

from webacl import (
    ConfigurationError,
    InvalidStateError,
    PersistenceError,
    SerializationError,
    WebAclError,
    error_registry,
    register_error,
)
from webacl.exceptions import ErrorRegistry


class TestErrorHierarchy:
    """Tests for WebAclError and its subclasses."""

    def test_default_code_and_message(self) -> None:
        """Test class-level defaults."""
        err = WebAclError()
        assert err.code == "INTERNAL_ERROR"
        assert err.message == "An internal error occurred"
        assert err.details == {}

    def test_details_from_kwargs(self) -> None:
        """Test keyword arguments become details."""
        err = PersistenceError("Cannot save", url="https://alice.example.com/.acl")
        assert str(err) == "Cannot save"
        assert err.details == {"url": "https://alice.example.com/.acl"}

    def test_code_override(self) -> None:
        """Test an explicit code replaces the class code."""
        assert ConfigurationError("x", code="NO_FETCHER").code == "NO_FETCHER"

    @pytest.mark.parametrize(
        ("error_cls", "code"),
        [
            (ConfigurationError, "CONFIGURATION_ERROR"),
            (InvalidStateError, "INVALID_STATE"),
            (SerializationError, "SERIALIZATION_ERROR"),
            (PersistenceError, "PERSISTENCE_ERROR"),
        ],
    )
    def test_subclass_codes(self, error_cls: type[WebAclError], code: str) -> None:
        """Test each subclass carries its code and is a WebAclError."""
        err = error_cls("failed")
        assert err.code == code
        assert isinstance(err, WebAclError)


class TestErrorRegistry:
    """Tests for ErrorRegistry."""

    def test_base_errors_registered(self) -> None:
        """Test built-in codes resolve to their classes."""
        assert error_registry.get("INTERNAL_ERROR") is WebAclError
        assert error_registry.get("INVALID_STATE") is InvalidStateError
        assert error_registry.get("PERSISTENCE_ERROR") is PersistenceError
        assert error_registry.get("UNKNOWN") is None

    def test_all_returns_copy(self) -> None:
        registry = ErrorRegistry()
        registry.register("A", WebAclError)
        errors = registry.all()
        errors.clear()
        assert registry.get("A") is WebAclError

    def test_register_error_decorator(self) -> None:
        """Test custom errors can be registered."""

        @register_error("POD_QUOTA_EXCEEDED")
        class PodQuotaError(WebAclError):
            code = "POD_QUOTA_EXCEEDED"

        assert error_registry.get("POD_QUOTA_EXCEEDED") is PodQuotaError
        assert PodQuotaError().code == "POD_QUOTA_EXCEEDED"
