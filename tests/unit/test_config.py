"""Unit tests for vida_lib.config."""

import logging
import math

import pytest

from vida_lib import config


@pytest.fixture
def root_logger():
    """Root logger, restored to its previous handlers and level afterwards."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestConstants:

    def test_boxes(self):
        assert (config.CUBE_LOWER, config.CUBE_UPPER) == (0.0, 1.0)
        assert config.FLAT_BOUND == 20.0

    def test_spiral_anchor(self):
        assert config.SPIRAL_ANCHOR_ANGLE == pytest.approx(10 * math.pi)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_console_only(self, root_logger):
        config.configure_logging(level='debug')
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0], logging.StreamHandler)

    def test_unknown_level_falls_back_to_info(self, root_logger):
        config.configure_logging(level='chatty')
        assert root_logger.level == logging.INFO

    def test_log_file(self, root_logger, tmp_path):
        path = tmp_path / "vida.log"
        config.configure_logging(level='INFO', log_file=str(path))
        assert len(root_logger.handlers) == 2

        logging.getLogger('vida_lib.test').info("fit finished")
        for handler in root_logger.handlers:
            handler.flush()

        text = path.read_text()
        assert "Logging configured" in text
        assert "[vida_lib.test] fit finished" in text

    def test_repeated_calls_do_not_duplicate_handlers(self, root_logger):
        config.configure_logging()
        config.configure_logging()
        assert len(root_logger.handlers) == 1
