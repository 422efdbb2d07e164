import io
import logging

import pytest

from gpssim.core.log import TRACE, ColorFormatter, configure_logging, get_logger


@pytest.fixture
def package_logger():
    logger = get_logger()
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_child_loggers():
    assert get_logger().name == "gpssim"
    assert get_logger("telemetry").name == "gpssim.telemetry"
    assert get_logger("gpssim.core").name == "gpssim.core"


def test_configure_logging_replaces_handler(package_logger):
    first = io.StringIO()
    second = io.StringIO()
    configure_logging("DEBUG", color=False, stream=first)
    configure_logging("trace", color=False, stream=second)

    get_logger("telemetry").log(TRACE, "line detail")

    assert first.getvalue() == ""
    assert "[trace] gpssim.telemetry: line detail" in second.getvalue()
    assert package_logger.level == TRACE


def test_unknown_level(package_logger):
    with pytest.raises(ValueError):
        configure_logging("LOUD", stream=io.StringIO())


def test_color_formatter_keeps_record_level_name():
    record = logging.LogRecord("gpssim", logging.ERROR, __file__, 1, "bad %s", ("field",), None)
    text = ColorFormatter(color=True).format(record)

    assert "\u001b[31merror" in text
    assert "bad field" in text
    assert record.levelname == "ERROR"
