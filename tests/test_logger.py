"""Tests for the central logger setup."""

import logging

import pytest

from farmzones.utils.logger import ROOT_LOGGER, setup_logger


class TestSetupLogger:
    def test_handlers_are_not_duplicated(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        cfg = {"level": "debug", "file": str(log_file)}
        logger = setup_logger(cfg, name="farmzones_test_a")
        again = setup_logger(cfg, name="farmzones_test_a")

        assert logger is again
        assert len(logger.handlers) == 2
        assert logger.level == logging.DEBUG
        assert not logger.propagate
        assert log_file.exists()

    def test_second_call_updates_level(self):
        logger = setup_logger({"level": "INFO"}, name="farmzones_test_c")
        setup_logger({"level": "ERROR"}, name="farmzones_test_c")

        assert logger.level == logging.ERROR
        assert all(h.level == logging.ERROR for h in logger.handlers)

    def test_child_logger_writes_to_file(self, tmp_path):
        log_file = tmp_path / "child.log"
        logger = setup_logger({"level": "INFO", "file": str(log_file)}, name="farmzones_test_b")
        logging.getLogger("farmzones_test_b.grid").info("cells ready")
        for handler in logger.handlers:
            handler.flush()
        assert "farmzones_test_b.grid - cells ready" in log_file.read_text()

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logger({"level": "chatty"}, name="farmzones_test_d")

    def test_package_logger_without_file(self):
        logger = setup_logger({"level": "WARNING"})
        assert logger.name == ROOT_LOGGER
        assert len(logger.handlers) == 1
        # Leave the package logger as the rest of the suite expects it
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
