"""Tests for JSON log output.

A log pipeline that expects JSON silently drops plain text, so the
format is pinned here.
"""

from __future__ import annotations

import json
import logging
import sys

from app.core.logging import _ContainerFormatter, _JsonFormatter


def test_json_formatter_produces_valid_json() -> None:
    record = logging.LogRecord(
        name="app.api.callback",
        level=logging.INFO,
        pathname="callback.py",
        lineno=42,
        msg="token response ← %d",
        args=(200,),
        exc_info=None,
    )
    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "app.api.callback"
    assert parsed["message"] == "token response ← 200"
    assert "timestamp" in parsed


def test_json_formatter_includes_context_fields() -> None:
    record = logging.LogRecord(
        name="test",
        level=logging.WARNING,
        pathname="token_exchange.py",
        lineno=1,
        msg="token endpoint rejected the exchange",
        args=(),
        exc_info=None,
    )
    record.request_id = "abc-123"  # type: ignore[attr-defined]
    record.path = "/callback"  # type: ignore[attr-defined]
    record.upstream_status = 400  # type: ignore[attr-defined]
    record.outcome = "upstream_error"  # type: ignore[attr-defined]

    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["request_id"] == "abc-123"
    assert parsed["path"] == "/callback"
    assert parsed["upstream_status"] == 400
    assert parsed["outcome"] == "upstream_error"
    assert "duration_ms" not in parsed


def test_json_formatter_includes_exception_info() -> None:
    formatter = _JsonFormatter()
    try:
        raise ConnectionRefusedError("connection refused")
    except ConnectionRefusedError:
        record = logging.LogRecord(
            name="test",
            level=logging.ERROR,
            pathname="callback.py",
            lineno=1,
            msg="token exchange failed",
            args=(),
            exc_info=sys.exc_info(),
        )
        output = formatter.format(record)

    parsed = json.loads(output)
    assert "ConnectionRefusedError: connection refused" in parsed["exception"]


def test_container_formatter_is_not_json() -> None:
    record = logging.LogRecord(
        name="app.main",
        level=logging.INFO,
        pathname="main.py",
        lineno=10,
        msg="oidc-client listening",
        args=(),
        exc_info=None,
    )
    output = _ContainerFormatter().format(record)
    assert "INFO" in output
    assert "app.main" in output
    try:
        json.loads(output)
        raise AssertionError("Container format should not be valid JSON")
    except json.JSONDecodeError:
        pass
