"""Tests for webacl.logging module."""

from __future__ import annotations

import json
import logging

import pytest

from webacl import (
    AclConfig,
    AclFormatter,
    LogLevel,
    get_acl_logger,
    redact_mailto,
    safe_log_value,
    safe_preview,
    setup_logging,
)

RESOURCE_URL = "https://alice.example.com/docs/file1"
ALICE = "https://alice.example.com/#me"


def _record(msg: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSafePreview:
    """Tests for safe_preview function."""

    def test_none_value(self) -> None:
        """Test that None returns empty string."""
        assert safe_preview(None) == ""

    def test_string_with_whitespace(self) -> None:
        """Test that whitespace is normalized."""
        assert safe_preview("hello\n\tworld  test") == "hello world test"

    def test_string_truncation(self) -> None:
        """Test that long strings are truncated."""
        result = safe_preview("a" * 300, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_dict_value(self) -> None:
        """Test that dicts are converted to JSON."""
        result = safe_preview({"mode": "Read", "count": 2})
        assert '"mode": "Read"' in result


class TestRedactMailto:
    """Tests for redact_mailto function."""

    def test_mailto_uri(self) -> None:
        """Test mailto: links are redacted."""
        result = redact_mailto("agent mailto:alice@example.com denied")
        assert result == "agent [REDACTED] denied"

    def test_bare_address(self) -> None:
        """Test bare addresses are redacted."""
        assert "alice@example.com" not in redact_mailto("alias alice@example.com")

    def test_web_id_untouched(self) -> None:
        """Test WebIDs are not modified."""
        assert redact_mailto(ALICE) == ALICE

    def test_custom_replacement(self) -> None:
        """Test custom replacement string."""
        assert redact_mailto("bob@example.com", replacement="[HIDDEN]") == "[HIDDEN]"


class TestSafeLogValue:
    """Tests for safe_log_value function."""

    def test_with_redaction(self) -> None:
        assert safe_log_value("mailto:alice@example.com") == "[REDACTED]"

    def test_without_redaction(self) -> None:
        assert safe_log_value("mailto:alice@example.com", redact=False) == "mailto:alice@example.com"

    def test_truncation(self) -> None:
        assert len(safe_log_value("a" * 500, limit=100)) <= 100


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root_logger = logging.getLogger()
        handlers, level = root_logger.handlers[:], root_logger.level
        yield
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)

    def test_setup_with_config(self) -> None:
        """Test logging setup with AclConfig."""
        setup_logging(config=AclConfig(log_level=LogLevel.DEBUG))
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_with_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test logging setup loading from environment."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_json_format(self, capsys: pytest.CaptureFixture) -> None:
        """Test JSON format output."""
        setup_logging(config=AclConfig(log_level=LogLevel.INFO, log_json=True))
        logging.getLogger("test").info("Test message")

        stderr_output = capsys.readouterr().err.strip()
        data = json.loads(stderr_output)
        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "test"

    def test_plain_format(self, capsys: pytest.CaptureFixture) -> None:
        """Test plain text format output."""
        setup_logging(config=AclConfig(log_level=LogLevel.INFO))
        logging.getLogger("test").info("Test message")

        stderr_output = capsys.readouterr().err.strip()
        assert "INFO" in stderr_output
        assert "Test message" in stderr_output
        assert not stderr_output.startswith("{")


class TestAclLogger:
    """Tests for the access decision logger adapter."""

    def test_adapter_adds_context(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test resource and agent are attached to records."""
        log = get_acl_logger("test", resource_url=RESOURCE_URL, agent_id=ALICE)
        with caplog.at_level(logging.INFO):
            log.info("Access granted")

        record = caplog.records[-1]
        assert record.resource_url == RESOURCE_URL
        assert record.agent_id == ALICE

    def test_per_call_override(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test context passed per call wins."""
        log = get_acl_logger("test", resource_url=RESOURCE_URL)
        with caplog.at_level(logging.INFO):
            log.info("Access denied", agent_id="https://bob.example.com/#me")
        assert caplog.records[-1].agent_id == "https://bob.example.com/#me"

    def test_without_context(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test adapter without resource or agent."""
        with caplog.at_level(logging.INFO):
            get_acl_logger("test").info("Test message")
        assert not hasattr(caplog.records[-1], "resource_url")

    def test_check_access_logs_decision(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test access decisions are logged with their resource."""
        import asyncio

        from webacl import AccessMode, PermissionSet

        ps = PermissionSet(RESOURCE_URL).add_agent_permission(ALICE, AccessMode.READ)
        with caplog.at_level(logging.DEBUG, logger="webacl"):
            assert asyncio.run(ps.check_access(RESOURCE_URL, ALICE, AccessMode.READ))
        decisions = [r for r in caplog.records if getattr(r, "resource_url", None) == RESOURCE_URL]
        assert decisions
        assert decisions[-1].agent_id == ALICE


class TestAclFormatter:
    """Tests for AclFormatter."""

    def test_json_format(self) -> None:
        """Test JSON formatter."""
        formatter = AclFormatter(json_format=True)
        data = json.loads(formatter.format(_record(resource_url=RESOURCE_URL, agent_id=ALICE)))
        assert data["level"] == "INFO"
        assert data["resource_url"] == RESOURCE_URL
        assert data["agent_id"] == ALICE

    def test_json_extras_redacted(self) -> None:
        """Test extra fields and messages are redacted."""
        formatter = AclFormatter(json_format=True)
        record = _record("alias mailto:alice@example.com", alias="alice@example.com")
        data = json.loads(formatter.format(record))
        assert data["message"] == "alias [REDACTED]"
        assert data["alias"] == "[REDACTED]"

    def test_redaction_disabled(self) -> None:
        """Test redaction can be turned off."""
        formatter = AclFormatter(json_format=True, redact=False)
        data = json.loads(formatter.format(_record("alias alice@example.com")))
        assert data["message"] == "alias alice@example.com"

    def test_plain_format(self) -> None:
        """Test plain text formatter."""
        formatter = AclFormatter(json_format=False)
        result = formatter.format(_record(resource_url=RESOURCE_URL, agent_id=ALICE))
        assert f"resource={RESOURCE_URL}" in result
        assert f"agent={ALICE}" in result
        assert result.endswith(": Test message")
