# File : log_settings.py
# Author : loggerlink developers
# License : GPL
"""
Log utilities
Set log level, destination, etc...
"""
import logging
from enum import Enum


class LoggerAlias(Enum):
    """
    Name of the loggerlink loggers inside the logging module
    """

    ADAPTER = "loggerlink.adapter"
    SESSION = "loggerlink.session"
    CLI = "loggerlink.cli"


LOGGING_COLORS = {
    logging.DEBUG: "grey66",
    logging.INFO: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold purple",
}
