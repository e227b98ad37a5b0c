from types import SimpleNamespace

import pytest

from loggerlink.adapters import session as session_module
from loggerlink.adapters.connection import ConnectionAdapter
from loggerlink.adapters.session import (
    ComDataLoggerSession,
    EventSlots,
    SessionEvent,
    event_method_name,
)
from loggerlink.tools.errors import SessionUnavailableError


class FakeComObject:
    """
    Attributes and methods of the DataLogger control used by the session
    """

    def __init__(self) -> None:
        self.serverName = ""
        self.serverPort = 0
        self.serverLogonName = ""
        self.serverLogonPassword = ""
        self.loggerName = ""
        self.serverConnected = False
        self.calls: list[tuple] = []

    def serverConnect(self) -> None:
        self.calls.append(("serverConnect",))
        self.serverConnected = True

    def serverDisconnect(self) -> None:
        self.calls.append(("serverDisconnect",))
        self.serverConnected = False

    def programSendStart(self, path: str, options: str) -> None:
        self.calls.append(("programSendStart", path, options))

    def clockSetStart(self) -> None:
        self.calls.append(("clockSetStart",))


@pytest.fixture
def pywin32(monkeypatch):
    state = SimpleNamespace(co_initialize=0, pumped=0, prog_ids=[], objects=[])

    def dispatch_with_events(prog_id, user_event_class):
        state.prog_ids.append(prog_id)
        com = type("Combined", (FakeComObject, user_event_class), {})()
        state.objects.append(com)
        return com

    def co_initialize():
        state.co_initialize += 1

    def pump():
        state.pumped += 1

    monkeypatch.setattr(
        session_module,
        "pythoncom",
        SimpleNamespace(CoInitialize=co_initialize, PumpWaitingMessages=pump),
    )
    monkeypatch.setattr(
        session_module,
        "win32com_client",
        SimpleNamespace(DispatchWithEvents=dispatch_with_events),
    )
    return state


def test_event_method_names():
    assert event_method_name(SessionEvent.CLOCK_COMPLETE) == "OnonClockComplete"
    assert event_method_name(SessionEvent.SERVER_CONNECTED) == "OnonServerConnectStarted"


def test_event_slots_without_handler():
    slots = EventSlots()
    # Nothing bound, nothing happens
    slots.dispatch(SessionEvent.CLOCK_COMPLETE, True, 0, "now")
    received = []
    slots.bind(SessionEvent.CLOCK_COMPLETE, lambda *args: received.append(args))
    slots.dispatch(SessionEvent.CLOCK_COMPLETE, True, 0, "now")
    assert received == [(True, 0, "now")]


def test_missing_pywin32(monkeypatch):
    monkeypatch.setattr(session_module, "pythoncom", None)
    monkeypatch.setattr(session_module, "win32com_client", None)
    with pytest.raises(ImportError, match="pywin32"):
        ComDataLoggerSession()


def test_com_object_creation_failure(monkeypatch, pywin32):
    def fail(prog_id, user_event_class):
        raise OSError("Invalid class string")

    monkeypatch.setattr(session_module, "win32com_client", SimpleNamespace(DispatchWithEvents=fail))
    with pytest.raises(SessionUnavailableError):
        ComDataLoggerSession()


def test_com_session_forwards_calls(pywin32):
    session = ComDataLoggerSession(prog_id="Test.DataLogger")
    assert pywin32.prog_ids == ["Test.DataLogger"]
    assert pywin32.co_initialize == 1
    com = pywin32.objects[0]

    session.server_name = "loggernet.local"
    session.server_port = 6789
    session.server_logon_name = "admin"
    session.server_logon_password = "secret"
    session.logger_name = "CR1000"
    assert (com.serverName, com.serverPort, com.loggerName) == ("loggernet.local", 6789, "CR1000")
    assert session.server_logon_name == "admin"

    session.server_connect()
    assert session.server_connected
    session.program_send_start("station.cr1", "")
    session.clock_set_start()
    session.server_disconnect()
    assert not session.server_connected
    assert com.calls == [
        ("serverConnect",),
        ("programSendStart", "station.cr1", ""),
        ("clockSetStart",),
        ("serverDisconnect",),
    ]

    session.process_events()
    assert pywin32.pumped == 1


def test_com_events_reach_adapter(pywin32):
    adapter = ConnectionAdapter("loggernet.local", 6789)
    com = pywin32.objects[0]
    com.OnonServerConnectStarted()
    assert adapter.operation_result() == "+ connected to server loggernet.local"
    com.OnonProgramSendComplete(False, 4, "compile failed")
    assert adapter.operation_result() == "- send failed, code 4, compile compile failed"
    com.OnonServerConnectFailure(2)
    assert adapter.operation_result() == "- server connect failed, code 2"
