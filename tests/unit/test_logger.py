"""
Unit tests for src/common/logger.py
"""

import json
import logging
import sys

from src.common.logger import JsonFormatter, get_logger


class TestStructuredLogger:
    """Context tags and child loggers."""

    def test_prefixes_context(self, caplog):
        log = get_logger("tests.logger", resume_id="r-1")
        with caplog.at_level(logging.INFO, logger="tests.logger"):
            log.info("Parsed resume")
        assert caplog.records[-1].getMessage() == "[resume_id:r-1] Parsed resume"

    def test_no_context_no_prefix(self, caplog):
        with caplog.at_level(logging.INFO, logger="tests.logger"):
            get_logger("tests.logger").info("plain")
        assert caplog.records[-1].getMessage() == "plain"

    def test_for_request_merges_context(self, caplog):
        log = get_logger("tests.logger", service="api").for_request("abc", "/api/jobs", "GET")
        with caplog.at_level(logging.WARNING, logger="tests.logger"):
            log.warning("slow", context={"ms": 900})
        record = caplog.records[-1]
        assert record.getMessage() == "[service:api] [request_id:abc] [path:/api/jobs] [method:GET] [ms:900] slow"
        assert record.context["ms"] == 900

    def test_child_does_not_mutate_parent(self):
        parent = get_logger("tests.logger", a=1)
        child = parent.child(b=2)
        assert parent.context == {"a": 1}
        assert child.context == {"a": 1, "b": 2}


class TestJsonFormatter:
    """One JSON object per record."""

    def test_includes_context_and_error(self):
        try:
            raise ValueError("bad input")
        except ValueError:
            record = logging.LogRecord("api", logging.ERROR, __file__, 1, "failed", None, None)
            record.exc_info = sys.exc_info()
        record.context = {"request_id": "abc"}

        entry = json.loads(JsonFormatter().format(record))

        assert entry["level"] == "error"
        assert entry["message"] == "failed"
        assert entry["context"] == {"request_id": "abc"}
        assert entry["error"] == {"name": "ValueError", "message": "bad input"}
