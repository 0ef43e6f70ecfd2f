"""Tests for logging configuration."""

import logging
import os

from RealtyMVP.logging_setup import setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_only(self) -> None:
        assert setup_logging("DEBUG") is None
        logger = logging.getLogger("RealtyMVP")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path) -> None:
        log_file = setup_logging("INFO", str(tmp_path / "logs"))
        logging.getLogger("RealtyMVP.tests").info("hello from the tests")

        assert os.path.dirname(log_file) == str(tmp_path / "logs")
        assert len(logging.getLogger("RealtyMVP").handlers) == 2
        for handler in logging.getLogger("RealtyMVP").handlers:
            handler.flush()
        with open(log_file, encoding="utf-8") as f:
            assert "hello from the tests" in f.read()

        # a second call replaces the handlers instead of stacking them
        setup_logging("INFO")
        assert len(logging.getLogger("RealtyMVP").handlers) == 1

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("chatty")
        assert logging.getLogger("RealtyMVP").level == logging.INFO
