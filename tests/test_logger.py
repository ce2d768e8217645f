"""Tests for logging infrastructure."""

import logging
from unittest.mock import patch

import scribefix.utils.logger as logger_module
from scribefix.utils.logger import get_log_dir, get_logger, shutdown_logging


class TestLoggerConfiguration:
    def test_get_logger_returns_logger(self):
        assert isinstance(get_logger("test"), logging.Logger)

    def test_root_logger_singleton(self):
        assert get_logger("scribefix") is get_logger("scribefix")

    def test_module_loggers_are_package_children(self):
        module_logger = get_logger("scribefix.core.settings.store")
        assert module_logger.name == "scribefix.core.settings.store"
        ancestors = []
        current = module_logger.parent
        while current is not None:
            ancestors.append(current.name)
            current = current.parent
        assert "scribefix" in ancestors

    def test_console_handler_optional(self, tmp_path):
        with (
            patch("scribefix.utils.logger.get_log_dir", return_value=tmp_path),
            patch("scribefix.core.settings.config.LOG_TO_CONSOLE", False),
        ):
            shutdown_logging()
            logger = get_logger("scribefix")
            assert [type(h).__name__ for h in logger.handlers] == ["RotatingFileHandler"]
            shutdown_logging()

    def test_log_directory_creation(self, tmp_path):
        with patch("scribefix.utils.logger.user_log_path", return_value=tmp_path):
            log_dir = get_log_dir()
        assert log_dir.exists()
        assert log_dir.is_dir()

    def test_logger_writes_to_file(self, tmp_path):
        with patch("scribefix.utils.logger.get_log_dir", return_value=tmp_path):
            shutdown_logging()
            logging.getLogger("scribefix").handlers.clear()
            logger = get_logger("scribefix")
            logger.info("Test message")

            for handler in logger.handlers:
                handler.flush()

        content = (tmp_path / "app.log").read_text()
        assert "Test message" in content
        assert "INFO" in content

        shutdown_logging()
        assert logger_module._logger_instance is None
        assert logging.getLogger("scribefix").handlers == []
