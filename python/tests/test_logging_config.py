"""
Tests for file-based logging setup.
"""

import logging

import pytest

from rehome.logging_config import FlushingHandler, get_logger, setup_logging


@pytest.fixture
def rehome_logger():
    logger = logging.getLogger("rehome")
    saved = list(logger.handlers)
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved


class TestSetupLogging:
    def test_writes_to_daily_log_file(self, tmp_path, rehome_logger):
        logger = setup_logging(log_dir=tmp_path / "logs")
        get_logger("rehome.engine").info("Renaming com.foo.Bar → net.baz.Quux")

        (log_file,) = (tmp_path / "logs").glob("rehome-*.log")
        content = log_file.read_text(encoding="utf-8")
        assert logger is rehome_logger
        assert "logging initialized" in content
        assert "com.foo.Bar → net.baz.Quux" in content

    def test_repeated_setup_adds_handlers_once(self, tmp_path, rehome_logger):
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)

        assert sum(isinstance(h, FlushingHandler) for h in rehome_logger.handlers) == 1

    def test_console_handler_is_added_on_request(self, tmp_path, rehome_logger):
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path, console=True)
        setup_logging(log_dir=tmp_path, console=True)

        console = [h for h in rehome_logger.handlers if type(h) is logging.StreamHandler]
        assert len(console) == 1
