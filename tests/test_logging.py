import logging

from volcal.logging import ROOT_LOGGER_NAME, configure_logging, get_logger


def test_get_logger_adds_a_single_null_handler():
    logger = get_logger("volcal.tests.quiet")
    get_logger("volcal.tests.quiet")
    null_handlers = [h for h in logger.handlers if isinstance(h, logging.NullHandler)]
    assert len(null_handlers) == 1


def test_configure_logging_attaches_handlers():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    previous_level, previous_handlers = root.level, list(root.handlers)
    handler = logging.StreamHandler()
    try:
        logger = configure_logging(logging.DEBUG, handlers=[handler], format_string="%(message)s")
        assert logger is root
        assert logger.level == logging.DEBUG
        assert handler in logger.handlers
        assert handler.formatter._fmt == "%(message)s"
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
