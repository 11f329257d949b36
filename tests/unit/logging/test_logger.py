# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — formatters and setup_logging."""

from __future__ import annotations

import json
import logging
import sys
from uuid import UUID

from playerbook.logging.context import clear_context, operation_context
from playerbook.logging.logger import JsonFormatter, TextFormatter, setup_logging

NOTCH = UUID("069a79f4-44e9-4726-a5be-fca90e38aaf5")


def _record(msg: str = "Hello", exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )
    record.__dict__.update(extra)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "operation" not in parsed
        assert "player" not in parsed

    def test_format_with_context(self):
        with operation_context("import_by_name", batch=True):
            parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["operation"] == "import_by_name"
        assert len(parsed["batch_id"]) == 8

    def test_format_with_player(self):
        parsed = json.loads(JsonFormatter().format(_record(player=NOTCH)))
        assert parsed["player"] == str(NOTCH)

    def test_format_exception(self):
        try:
            raise OSError("disk full")
        except OSError:
            record = _record("Failed", exc_info=sys.exc_info())
        parsed = json.loads(JsonFormatter().format(record))
        assert "disk full" in parsed["exception"]


class TestTextFormatter:
    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_operation(self):
        with operation_context("save"):
            output = TextFormatter().format(_record())
        assert "[save]" in output

    def test_format_with_player(self):
        output = TextFormatter().format(_record("Imported", player="Notch"))
        assert output.endswith("<Notch> - Imported")


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger("playerbook")
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
        root.setLevel(logging.NOTSET)

    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("playerbook")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text_with_file(self, tmp_path):
        setup_logging(level="INFO", log_format="text", log_file=str(tmp_path / "pb.log"))
        root = logging.getLogger("playerbook")
        assert root.level == logging.INFO
        assert len(root.handlers) == 2

    def test_reinit_replaces_handlers(self):
        setup_logging(level="INFO")
        setup_logging(level="WARNING", log_format="json")
        root = logging.getLogger("playerbook")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING


class TestStoreRecords:
    def test_import_names_player(self, store, caplog):
        with caplog.at_level("DEBUG", logger="playerbook"):
            store.import_by_name(["Notch", "nobody"])
        players = {getattr(r, "player", None) for r in caplog.records}
        assert NOTCH in players
        assert "nobody" in players
