"""Tests for catalog_merge/common/log_config.py"""

import logging
import sys

from catalog_merge.common.log_config import LOGGER_NAME, setup_logging


class TestSetupLogging:
    def teardown_method(self):
        """Reset logger between tests."""
        logger = logging.getLogger(LOGGER_NAME)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)

    def test_default_level_is_info(self):
        setup_logging()
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.INFO

    def test_verbose_sets_debug(self):
        setup_logging(verbose=True)
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.DEBUG

    def test_quiet_sets_warning(self):
        setup_logging(quiet=True)
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_handler_outputs_to_stderr(self):
        setup_logging()
        logger = logging.getLogger(LOGGER_NAME)
        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert handler.stream is sys.stderr

    def test_repeated_calls_do_not_duplicate_handlers(self):
        setup_logging()
        setup_logging(verbose=True)
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1

    def test_module_loggers_are_children(self):
        setup_logging()
        child = logging.getLogger("catalog_merge.reconcile.grouping")
        assert child.getEffectiveLevel() == logging.INFO

    def test_verbose_format_includes_thread(self):
        logger = setup_logging(verbose=True)
        assert "%(threadName)s" in logger.handlers[0].formatter._fmt

    def test_returns_package_logger(self):
        assert setup_logging() is logging.getLogger(LOGGER_NAME)
