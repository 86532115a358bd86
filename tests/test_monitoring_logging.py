"""Tests for logging setup."""

import json
import logging
import sys
from pathlib import Path

import pytest
from ats_cache.cache import BoundedTTLCache
from ats_cache.config import MonitoringConfig
from ats_cache.keys import invalidate_cache
from ats_cache.monitoring.logging import JSONFormatter, configure_logging, setup_structured_logging


def _record(msg: str, *args: object, level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestJSONFormatter:
    def test_formats_basic_message(self) -> None:
        data = json.loads(JSONFormatter().format(_record("hello %s", "world")))
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert "timestamp" in data

    def test_formats_exception(self) -> None:
        try:
            raise ValueError("test error")
        except ValueError:
            record = _record("boom", level=logging.ERROR, exc_info=sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError" in data["exception"]

    def test_includes_extra_data(self) -> None:
        record = _record("with data")
        record.extra_data = {"key": "dashboard_metrics"}  # type: ignore[attr-defined]
        data = json.loads(JSONFormatter().format(record))
        assert data["data"] == {"key": "dashboard_metrics"}

    def test_no_extra_data_key_when_absent(self) -> None:
        data = json.loads(JSONFormatter().format(_record("plain")))
        assert "data" not in data


class TestSetupStructuredLogging:
    def test_configures_root_logger(self) -> None:
        setup_structured_logging()
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_adds_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "nested" / "ats.log"
        setup_structured_logging(log_file=log_file)
        logging.getLogger("test_file_handler").info("file log test")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "file log test" in log_file.read_text()


class TestConfigureLogging:
    def test_structured_logging_uses_json(self, tmp_path: Path) -> None:
        configure_logging(
            MonitoringConfig(structured_logging=True, log_file=str(tmp_path / "ats.log"), log_level="debug")
        )
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert all(isinstance(h.formatter, JSONFormatter) for h in root.handlers)
        assert len(root.handlers) == 2

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(MonitoringConfig(structured_logging=True, log_level="chatty"))
        assert logging.getLogger().level == logging.INFO

    def test_invalidation_data_reaches_json_log(self, tmp_path: Path) -> None:
        log_file = tmp_path / "ats.log"
        setup_structured_logging(log_file=log_file)
        cache = BoundedTTLCache()
        cache.set("candidates_list", [])
        invalidate_cache(cache, "candidates")
        for handler in logging.getLogger().handlers:
            handler.flush()
        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["logger"] == "ats_cache.keys"
        assert entry["data"] == {"pattern": "candidates", "key": "candidates_list", "removed": ["candidates_list"]}
