"""
Tests for logging_utils module.
"""

import logging
import sys
import os

import pytest

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logging_utils import (
    get_logger,
    configure_logging,
    parse_level,
    set_level,
    set_verbose,
)


class TestGetLogger:
    """Test get_logger function."""

    def test_returns_logger(self):
        logger = get_logger("test_module")
        assert isinstance(logger, logging.Logger)

    def test_logger_name_prefixed(self):
        logger = get_logger("mymodule")
        assert logger.name == "mecamaster.mymodule"

    def test_strips_src_prefix(self):
        logger = get_logger("src.tutor")
        assert logger.name == "mecamaster.tutor"

    def test_multiple_calls_same_logger(self):
        logger1 = get_logger("same_module")
        logger2 = get_logger("same_module")
        assert logger1 is logger2


class TestConfigureLogging:
    """Test configure_logging function."""

    def test_configures_once(self):
        # Multiple calls should not add multiple handlers
        root = logging.getLogger("mecamaster")
        initial_handlers = len(root.handlers)

        configure_logging()
        configure_logging("DEBUG")
        configure_logging()

        assert len(root.handlers) <= initial_handlers + 1


class TestParseLevel:
    """Test parse_level function."""

    def test_names(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level(" WARNING ") == logging.WARNING

    def test_numbers_pass_through(self):
        assert parse_level(logging.ERROR) == logging.ERROR

    def test_unknown_name_is_info(self):
        assert parse_level("chatty") == logging.INFO


class TestSetVerbose:
    """Test set_verbose function."""

    def test_verbose_true_sets_debug(self):
        set_verbose(True)
        assert logging.getLogger("mecamaster").level == logging.DEBUG

    def test_verbose_false_sets_info(self):
        set_verbose(False)
        assert logging.getLogger("mecamaster").level == logging.INFO


class TestSetLevel:
    """Test set_level function."""

    def test_applies_after_configuration(self):
        configure_logging()
        set_level("warning")
        assert logging.getLogger("mecamaster").level == logging.WARNING
        set_level(logging.INFO)
        assert logging.getLogger("mecamaster").level == logging.INFO


class TestLoggingOutput:
    """Module loggers propagate to the mecamaster root."""

    def test_store_logs_unknown_component(self, caplog):
        from state import ProjectStore

        with caplog.at_level(logging.WARNING, logger="mecamaster"):
            ProjectStore().toggle_component_selection("flux-capacitor")

        assert "flux-capacitor" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
