# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from src.config.logging_config import setup_logging
from src.config.settings import Settings


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Detach ecoshop handlers and log into a temp directory."""
        self.root_logger = logging.getLogger("ecoshop")
        self._detach_handlers()
        self._tmpdir = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self._tmpdir.name) / "logs"

    def tearDown(self) -> None:
        self._detach_handlers()
        self._tmpdir.cleanup()

    def _detach_handlers(self) -> None:
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()

    def _handlers_of(self, kind: type) -> list[logging.Handler]:
        return [
            h for h in self.root_logger.handlers
            if type(h) is kind
        ]

    def test_creates_log_file_in_given_dir(self) -> None:
        log_path = setup_logging(self.logs_dir)
        self.assertTrue(log_path.exists())
        self.assertEqual(log_path.parent, self.logs_dir)

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging(self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_handler_levels(self) -> None:
        """DEBUG to the file, WARNING to the console."""
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "WARNING"):
            setup_logging(self.logs_dir)
        file_handlers = self._handlers_of(logging.FileHandler)
        stream_handlers = self._handlers_of(logging.StreamHandler)
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)
        self.assertEqual(self.root_logger.level, logging.DEBUG)

    def test_console_level_from_settings(self) -> None:
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "ERROR"):
            setup_logging(self.logs_dir)
        stream_handlers = self._handlers_of(logging.StreamHandler)
        self.assertEqual(stream_handlers[0].level, logging.ERROR)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        setup_logging(self.logs_dir)
        count_before = len(self.root_logger.handlers)
        setup_logging(self.logs_dir)
        self.assertEqual(len(self.root_logger.handlers), count_before)

    def test_child_loggers_reach_file(self) -> None:
        """Component loggers propagate into the run log."""
        log_path = setup_logging(self.logs_dir)
        logging.getLogger("ecoshop.scoring").debug("scored widget-42")
        for handler in self.root_logger.handlers:
            handler.flush()
        content = log_path.read_text(encoding="utf-8")
        self.assertIn("scored widget-42", content)
        self.assertIn("ecoshop.scoring", content)


if __name__ == "__main__":
    unittest.main()
