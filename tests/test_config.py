"""Tests for AclConfig."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from webacl import AclConfig, LogLevel, load_config_from_env


class TestAclConfig:
    """Tests for AclConfig model."""

    def test_create_default_config(self) -> None:
        """Test creating an AclConfig with defaults."""
        config = AclConfig()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.acl_suffix == ".acl"
        assert config.default_content_type == "text/turtle"
        assert config.strict_origin is False

    def test_create_custom_config(self) -> None:
        """Test creating an AclConfig with custom values."""
        config = AclConfig(
            log_level=LogLevel.DEBUG,
            log_json=True,
            acl_suffix=".meta",
            default_content_type="application/ld+json",
            strict_origin=True,
        )
        assert config.log_level == LogLevel.DEBUG
        assert config.log_json is True
        assert config.acl_suffix == ".meta"
        assert config.default_content_type == "application/ld+json"
        assert config.strict_origin is True

    def test_log_level_from_string(self) -> None:
        """Test creating config with log level as string."""
        config = AclConfig(log_level="debug")
        assert config.log_level == LogLevel.DEBUG

    def test_log_level_invalid(self) -> None:
        """Test creating config with invalid log level."""
        with pytest.raises(ValueError, match="Invalid log level"):
            AclConfig(log_level="INVALID")

    def test_acl_suffix_invalid(self) -> None:
        """Test ACL suffixes must start with a dot."""
        for suffix in ("", "acl", ",acl"):
            with pytest.raises(ValueError, match="ACL suffix"):
                AclConfig(acl_suffix=suffix)

    def test_extra_fields_forbidden(self) -> None:
        """Test that extra fields are forbidden."""
        with pytest.raises(Exception):  # Pydantic validation error
            AclConfig(cache_url="memory://")  # type: ignore[call-arg]


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    @patch.dict(os.environ, {}, clear=True)
    def test_load_defaults(self) -> None:
        """Test loading config with no environment variables."""
        config = load_config_from_env()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.acl_suffix == ".acl"
        assert config.strict_origin is False

    @patch.dict(
        os.environ,
        {
            "LOG_LEVEL": "WARNING",
            "LOG_JSON": "true",
            "ACL_SUFFIX": ".access",
            "ACL_CONTENT_TYPE": "application/n-triples",
            "ACL_STRICT_ORIGIN": "yes",
        },
        clear=True,
    )
    def test_load_from_env(self) -> None:
        """Test loading config from environment variables."""
        config = load_config_from_env()
        assert config.log_level == LogLevel.WARNING
        assert config.log_json is True
        assert config.acl_suffix == ".access"
        assert config.default_content_type == "application/n-triples"
        assert config.strict_origin is True

    def test_strict_origin_variants(self) -> None:
        """Test ACL_STRICT_ORIGIN accepts various true values."""
        for value in ("true", "1", "yes", "on"):
            with patch.dict(os.environ, {"ACL_STRICT_ORIGIN": value}, clear=True):
                assert load_config_from_env().strict_origin is True

    @patch.dict(os.environ, {"ACL_STRICT_ORIGIN": "false", "LOG_JSON": "no"}, clear=True)
    def test_false_values(self) -> None:
        """Test false boolean values."""
        config = load_config_from_env()
        assert config.strict_origin is False
        assert config.log_json is False
