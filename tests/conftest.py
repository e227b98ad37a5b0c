import logging

import pytest

from fake_session import FakeSession

from loggerlink.tools.log import log_manager
from loggerlink.tools.log_settings import LoggerAlias


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def restore_log_manager():
    yield log_manager
    log_manager.set_log_file(None)
    log_manager.set_console_log(False)
    log_manager.set_logger_filter([])
    log_manager.set_log_level(log_manager.DEFAULT_LOG_LEVEL)
    for alias in LoggerAlias:
        logging.getLogger(alias.value).setLevel(logging.NOTSET)
