# File : errors.py
# Author : loggerlink developers
# License : GPL

from pathlib import Path

from loggerlink.tools.types import NumberLike

PACKAGE_PATH = Path(__file__).resolve().parent.parent


class LoggerLinkError(Exception):
    """Base class for all loggerlink errors"""


class SessionError(LoggerLinkError):
    """Error reported by the datalogger session"""


class SessionConfigurationError(SessionError):
    """Invalid session parameter (host, port, credentials)"""


class SessionUnavailableError(SessionError):
    """The vendor session object could not be created"""


class ActionCancelledError(LoggerLinkError):
    """The action was dropped before its outcome arrived"""


class ActionTimeoutError(LoggerLinkError):
    def __init__(self, timeout: NumberLike | None) -> None:
        self.timeout = timeout
        super().__init__(
            f"No outcome received from the datalogger session within {self.timeout} seconds"
        )


def make_error_description(e: BaseException) -> str:
    """
    Short description of an exception : type, message and the deepest
    location inside the package
    """
    tb = e.__traceback__
    if tb is None:
        return f"{type(e).__name__}: {e}"

    while tb.tb_next is not None:
        file = Path(tb.tb_next.tb_frame.f_code.co_filename).resolve()
        if not file.is_relative_to(PACKAGE_PATH):
            break
        tb = tb.tb_next

    filename = Path(tb.tb_frame.f_code.co_filename).name
    return f"{type(e).__name__}: {e} ({filename}:{tb.tb_lineno})"
