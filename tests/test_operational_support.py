from __future__ import annotations

import logging

from infra.logging_config import setup_logging
from infra.operational_support import (
    REDACTED,
    REDACTED_EMAIL,
    TraceIdLogFilter,
    bind_trace_id,
    create_trace_id,
    current_trace_id,
    redact_text,
)


def test_bind_trace_id_is_scoped():
    assert current_trace_id() is None
    with bind_trace_id("recalc-test-1") as trace_id:
        assert trace_id == "recalc-test-1"
        assert current_trace_id() == "recalc-test-1"
    assert current_trace_id() is None


def test_bind_trace_id_generates_one_when_blank():
    with bind_trace_id("   ") as trace_id:
        assert trace_id.startswith("run-")
    assert create_trace_id("recalc").startswith("recalc-")


def test_redact_text_scrubs_secrets_and_emails():
    text = redact_text("api_key=abc123 token: xyz alice@example.com Bearer s3cr3t")

    assert "abc123" not in text
    assert "xyz" not in text
    assert "s3cr3t" not in text
    assert REDACTED in text
    assert REDACTED_EMAIL in text


def test_trace_filter_stamps_records():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    TraceIdLogFilter().filter(record)
    assert record.trace_id == "-"

    with bind_trace_id("inc-42"):
        TraceIdLogFilter().filter(record)
    assert record.trace_id == "inc-42"


def test_setup_logging_writes_trace_ids_to_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        with bind_trace_id("startup-abc"):
            logging.getLogger("todo.test").info("hello from test")
        for handler in root.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "trace=startup-abc" in content
        assert "hello from test" in content
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
