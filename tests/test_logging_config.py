"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from kvlens.logging_config import LOGGER_NAME, get_logger, setup_logging


class TestSetupLogging:
    """Test handler and level selection."""

    def test_terminal_handler(self):
        logger = setup_logging()
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.WARNING
        assert any(isinstance(h, RichHandler) for h in logger.handlers)
        assert logger.propagate is False

    def test_levels(self):
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(quiet=True).level == logging.ERROR

    def test_file_only_while_ui_runs(self, tmp_path):
        log_file = tmp_path / "kvlens.log"
        logger = setup_logging(verbose=True, log_file=str(log_file), terminal=False)
        assert not any(isinstance(h, RichHandler) for h in logger.handlers)
        get_logger("tui").debug("frame painted")
        for handler in logger.handlers:
            handler.flush()
        assert "kvlens.tui - DEBUG - frame painted" in log_file.read_text()
        setup_logging()

    def test_no_handlers_gets_null_handler(self):
        logger = setup_logging(terminal=False)
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        setup_logging()

    def test_get_logger_prefixes_names(self):
        assert get_logger("completion").name == "kvlens.completion"
        assert get_logger("kvlens.views").name == "kvlens.views"
        assert get_logger().name == "kvlens"
