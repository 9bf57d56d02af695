"""Tests for logging utilities."""

import json
import logging
import sys

from conftest import make_action
from scenario_assist.utils.logging import (
    JSONFormatter,
    RedactingFilter,
    redact_dict,
    redact_text,
    summarize_action_types,
)


def _record(msg, *args, **extra):
    record = logging.LogRecord("scenario_assist.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRedactingFilter:
    """Tests for RedactingFilter."""

    def test_redacts_bearer_token(self):
        """Should redact Bearer tokens."""
        result = redact_text("Authorization: Bearer abc123xyz789")
        assert "abc123xyz789" not in result
        assert "[REDACTED]" in result

    def test_redacts_password_in_key_value(self):
        """Should redact typed passwords."""
        result = redact_text("step value password=hunter2")
        assert "hunter2" not in result
        assert "[REDACTED]" in result

    def test_redacts_otp(self):
        """One-time codes typed into forms are secrets too."""
        result = redact_text("otp: 482913")
        assert "482913" not in result

    def test_redacts_api_key(self):
        """Should redact API keys."""
        result = redact_text("api_key: sk-12345abcdef")
        assert "sk-12345" not in result

    def test_preserves_non_sensitive_data(self):
        """Should preserve non-sensitive data."""
        result = redact_text("username=qa_user, steps=4")
        assert "qa_user" in result
        assert "steps=4" in result

    def test_filter_redacts_string_args(self):
        """Formatting args are redacted as well as the message."""
        record = _record("login with %s", "token=abc.def")
        assert RedactingFilter().filter(record) is True
        assert "abc.def" not in record.getMessage()


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_structured_output(self):
        """Records become JSON with extras and redaction."""
        record = _record("readiness computed secret=s3cr3t", scenario_id="sc-1")
        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "scenario_assist.test"
        assert payload["scenario_id"] == "sc-1"
        assert "s3cr3t" not in payload["message"]
        assert payload["timestamp"].endswith("Z")

    def test_only_extras_beyond_core_fields(self):
        """Standard record attributes stay out of the payload."""
        payload = json.loads(JSONFormatter().format(_record("plain")))
        assert set(payload) == {"timestamp", "level", "logger", "message"}

    def test_exception_included(self):
        """Tracebacks are rendered under 'exception'."""
        try:
            raise ValueError("bad step")
        except ValueError:
            record = logging.LogRecord("scenario_assist.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad step" in payload["exception"]


class TestRedactDict:
    """Tests for redact_dict function."""

    def test_redacts_password_key(self):
        """Should redact password key."""
        result = redact_dict({"username": "test", "password": "secret123"})
        assert result["username"] == "test"
        assert result["password"] == "[REDACTED]"

    def test_redacts_nested_and_list_items(self):
        """Nested mappings and mappings in lists are redacted."""
        data = {
            "device": {"name": "Pixel 7", "auth_token": "abc"},
            "fields": [{"otp_code": "123456"}, "plain"],
        }
        result = redact_dict(data)
        assert result["device"]["name"] == "Pixel 7"
        assert result["device"]["auth_token"] == "[REDACTED]"
        assert result["fields"] == [{"otp_code": "[REDACTED]"}, "plain"]

    def test_custom_keys(self):
        """Callers may choose which keys to hide."""
        assert redact_dict({"value": "x", "id": "1"}, ["value"]) == {"value": "[REDACTED]", "id": "1"}


class TestSummarizeActionTypes:
    """Tests for summarize_action_types."""

    def test_counts_by_type(self, login_actions):
        """Types are counted, values never appear."""
        summary = summarize_action_types(login_actions)
        assert summary == {"openApp": 1, "input": 2, "tap": 1}
        assert "hunter2" not in str(summary)

    def test_empty(self):
        """No actions, no counts."""
        assert summarize_action_types([]) == {}

    def test_single_wait(self):
        """Works on any iterable of actions."""
        assert summarize_action_types(iter([make_action("wait", value="1")])) == {"wait": 1}
