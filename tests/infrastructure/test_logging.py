import logging

from iEdit.utils.logging import LOGGER_NAME, ensure_console_logger, get_logger


def test_get_logger_nests_under_package():
    assert get_logger().name == LOGGER_NAME
    assert get_logger("iEdit.io.placement").name == "iEdit.io.placement"
    assert get_logger("plugins").name == "iEdit.plugins"


def test_console_handler_is_installed_once_and_relevelled(capsys):
    logger = logging.getLogger("iEdit.tests.console")
    try:
        first = ensure_console_logger(logger, "test-console", level=logging.WARNING)
        second = ensure_console_logger(logger, "test-console", level=logging.DEBUG)

        assert first is second
        assert [h.get_name() for h in logger.handlers] == ["test-console"]
        assert logger.level == logging.DEBUG

        logger.debug("preview %s requested", 3)
        assert "preview 3 requested" in capsys.readouterr().err
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
