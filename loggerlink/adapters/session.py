# File : session.py
# Author : loggerlink developers
# License : GPL
#
# The session is the vendor object that talks to the LoggerNet server. Every
# action on it is non-blocking, outcomes are reported later through one of
# six event slots, on a thread owned by the vendor library

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from types import ModuleType
from typing import TYPE_CHECKING, Any, Protocol

from ..tools.errors import SessionUnavailableError
from ..tools.log_settings import LoggerAlias

# --- Typing-only imports so mypy knows pywin32 symbols without requiring it at runtime
if TYPE_CHECKING:
    import pythoncom  # type: ignore
    import win32com.client  # type: ignore

# --- Runtime optional import
try:
    import pythoncom as _pythoncom_runtime
    import win32com.client as _win32com_client_runtime
except ImportError:
    _pythoncom_runtime = None
    _win32com_client_runtime = None

pythoncom: ModuleType | None = _pythoncom_runtime  # type: ignore
win32com_client: ModuleType | None = _win32com_client_runtime  # type: ignore

DATALOGGER_PROG_ID = "CsiDatalogger.DataLogger"


class SessionEvent(Enum):
    SERVER_CONNECTED = "onServerConnectStarted"
    SERVER_CONNECT_FAILED = "onServerConnectFailure"
    LOGGER_CONNECTED = "onLoggerConnectStarted"
    LOGGER_CONNECT_FAILED = "onLoggerConnectFailure"
    PROGRAM_SEND_COMPLETE = "onProgramSendComplete"
    CLOCK_COMPLETE = "onClockComplete"


EventHandler = Callable[..., None]


class DataLoggerSession(Protocol):
    """
    Contract of the vendor session used by the ConnectionAdapter
    """

    server_name: str
    server_port: int
    server_logon_name: str
    server_logon_password: str
    logger_name: str

    @property
    def server_connected(self) -> bool: ...

    def server_connect(self) -> None: ...

    def server_disconnect(self) -> None: ...

    def program_send_start(self, path: str, options: str) -> None: ...

    def clock_set_start(self) -> None: ...

    def bind(self, event: SessionEvent, handler: EventHandler) -> None: ...

    def process_events(self) -> None: ...


class EventSlots:
    """
    Event slot table shared by session implementations, one handler per event
    """

    def __init__(self) -> None:
        self._handlers: dict[SessionEvent, EventHandler] = {}
        self._event_logger = logging.getLogger(LoggerAlias.SESSION.value)

    def bind(self, event: SessionEvent, handler: EventHandler) -> None:
        self._handlers[event] = handler

    def dispatch(self, event: SessionEvent, *args: Any) -> None:
        self._event_logger.debug(f"{event.name} {args}")
        handler = self._handlers.get(event)
        if handler is None:
            self._event_logger.debug(f"No handler bound to {event.name}")
            return
        handler(*args)

    def process_events(self) -> None:
        """
        Deliver pending events, nothing to do when the vendor library
        calls back from its own threads
        """


def event_method_name(event: SessionEvent) -> str:
    """
    Name of the handler method pywin32 looks for on the event class
    """
    name = event.value
    if name[:2] == "On":
        return name
    return "On" + name


def _make_event_class(slots: EventSlots) -> type:
    def forward(event: SessionEvent) -> Callable[..., None]:
        def handler(_self: Any, *args: Any) -> None:
            slots.dispatch(event, *args)

        return handler

    namespace = {event_method_name(event): forward(event) for event in SessionEvent}
    return type("DataLoggerEvents", (), namespace)


class ComDataLoggerSession(EventSlots):
    def __init__(self, prog_id: str = DATALOGGER_PROG_ID) -> None:
        """
        CSI DataLogger COM object (LoggerNet SDK), requires pywin32

        Parameters
        ----------
        prog_id : str
            COM ProgID of the DataLogger control
        """
        super().__init__()
        if pythoncom is None or win32com_client is None:
            raise ImportError(
                "Missing optional dependency 'pywin32'. Install with:\n"
                "  python -m pip install loggerlink[windows]"
            )

        pythoncom.CoInitialize()
        try:
            self._com = win32com_client.DispatchWithEvents(
                prog_id, _make_event_class(self)
            )
        except Exception as err:  # pywin32 raises com_error
            raise SessionUnavailableError(
                f"Could not create the DataLogger object '{prog_id}'"
            ) from err
        self._event_logger.info(f"DataLogger object '{prog_id}' created")

    @property
    def server_name(self) -> str:
        return str(self._com.serverName)

    @server_name.setter
    def server_name(self, value: str) -> None:
        self._com.serverName = value

    @property
    def server_port(self) -> int:
        return int(self._com.serverPort)

    @server_port.setter
    def server_port(self, value: int) -> None:
        self._com.serverPort = value

    @property
    def server_logon_name(self) -> str:
        return str(self._com.serverLogonName)

    @server_logon_name.setter
    def server_logon_name(self, value: str) -> None:
        self._com.serverLogonName = value

    @property
    def server_logon_password(self) -> str:
        return str(self._com.serverLogonPassword)

    @server_logon_password.setter
    def server_logon_password(self, value: str) -> None:
        self._com.serverLogonPassword = value

    @property
    def logger_name(self) -> str:
        return str(self._com.loggerName)

    @logger_name.setter
    def logger_name(self, value: str) -> None:
        self._com.loggerName = value

    @property
    def server_connected(self) -> bool:
        return bool(self._com.serverConnected)

    def server_connect(self) -> None:
        self._com.serverConnect()

    def server_disconnect(self) -> None:
        self._com.serverDisconnect()

    def program_send_start(self, path: str, options: str) -> None:
        self._com.programSendStart(path, options)

    def clock_set_start(self) -> None:
        self._com.clockSetStart()

    def process_events(self) -> None:
        # COM events are delivered through the apartment message queue
        pythoncom.PumpWaitingMessages()  # type: ignore[union-attr]
