"""
Logging Utilities
=================

Package logger and console formatting.

Library code only asks for loggers; handlers are installed by
``configure_logging`` (used by the command-line tool) or by the host
application.
"""

import logging
import sys
from typing import Optional, Union


LOGGER_NAME = 'gpssim'

# Per-line parse detail, below DEBUG
TRACE = 5
logging.addLevelName(TRACE, 'TRACE')


class ColorFormatter(logging.Formatter):
    """
    A formatter to add colors to log levels.
    """

    def __init__(self, color: bool = True):
        logging.Formatter.__init__(
            self,
            fmt="[%(asctime)s.%(msecs)03d] [%(levelname)s] %(name)s: %(message)s",
            datefmt='%Y-%m-%d %H:%M:%S',
        )

        # ansi escape colors
        B = "\u001b[34m"    # blue
        M = "\u001b[35m"    # magenta
        C = "\u001b[36m"    # cyan
        G = "\u001b[32m"    # green
        Y = "\u001b[33m"    # yellow
        R = "\u001b[31m"    # red
        BOLD = "\u001b[1m"
        RESET = "\u001b[0m"

        if not color:
            B = M = C = G = Y = R = BOLD = RESET = ""

        self.levels = {
            TRACE            : f"{B}trace{RESET}",
            logging.DEBUG    : f"{C}debug{RESET}",
            logging.INFO     : f"{G}info{RESET}",
            logging.WARNING  : f"{Y}warning{RESET}",
            logging.ERROR    : f"{R}error{RESET}",
            logging.CRITICAL : f"{BOLD}{M}critical{RESET}",
        }

    def format(self, record):
        # Work on a copy so other handlers see the original level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = self.levels.get(record.levelno, record.levelname)
        return logging.Formatter.format(self, record)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get the package logger or one of its children.

    Args:
        name: Child name, e.g. 'telemetry' gives 'gpssim.telemetry'

    Returns:
        Logger instance
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(level: Union[int, str] = logging.INFO,
                      color: Optional[bool] = None,
                      stream=None) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Log level (number or name, 'TRACE' included)
        color: Use ANSI colors (default: only when the stream is a TTY)
        stream: Output stream (default: stderr)

    Returns:
        The configured package logger
    """
    stream = stream or sys.stderr
    if color is None:
        color = hasattr(stream, 'isatty') and stream.isatty()
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    logger = get_logger()
    for handler in list(logger.handlers):
        if getattr(handler, '_gpssim_console', False):
            logger.removeHandler(handler)

    console = logging.StreamHandler(stream)
    console.setFormatter(ColorFormatter(color=color))
    console._gpssim_console = True
    logger.addHandler(console)
    logger.setLevel(level)
    return logger
