import io

import pytest
from rich.console import Console

from fake_session import FakeSession

from loggerlink.cli.loggerlink import (
    EXIT_FAILURE,
    EXIT_OK,
    EXIT_TIMEOUT,
    PASSWORD_ENVIRONMENT_VARIABLE,
    make_parser,
    run,
)


def run_cli(argv, session):
    output = io.StringIO()
    console = Console(file=output, color_system=None, width=200)
    code = run(make_parser().parse_args(argv), console, session=session)
    return code, output.getvalue()


def test_send():
    session = FakeSession(connected=True, send_outcome=(True, 0, ""))
    code, output = run_cli(["--host", "loggernet.local", "send", "CR1000", "station.cr1"], session)
    assert code == EXIT_OK
    assert "+ sent" in output
    assert session.sent == [("station.cr1", "")]
    assert session.logger_name == "CR1000"


def test_send_failure():
    session = FakeSession(connect=False)
    code, output = run_cli(["send", "CR1000", "station.cr1"], session)
    assert code == EXIT_FAILURE
    assert "- could not connect to server localhost" in output


def test_sync_clock():
    session = FakeSession(clock_outcome=(True, 0, "2026-10-17 12:00:00"))
    code, output = run_cli(["--port", "6790", "sync-clock", "CR1000"], session)
    assert code == EXIT_OK
    assert "+ connected to server localhost" in output
    assert "+ synced to 2026-10-17 12:00:00" in output
    assert session.server_port == 6790


def test_sync_clock_timeout():
    session = FakeSession()
    code, output = run_cli(["-t", "0.05", "sync-clock", "CR1000"], session)
    assert code == EXIT_TIMEOUT
    assert "0.05 seconds" in output


def test_shutdown():
    session = FakeSession(connected=True)
    code, output = run_cli(["shutdown", "CR1000"], session)
    assert code == EXIT_OK
    assert "+ logger session CR1000 shut down" in output
    assert not session.connected


def test_password_from_environment(monkeypatch):
    monkeypatch.setenv(PASSWORD_ENVIRONMENT_VARIABLE, "from-env")
    session = FakeSession(clock_outcome=(True, 0, "now"))
    run_cli(["-u", "admin", "sync-clock", "CR1000"], session)
    assert session.server_logon_name == "admin"
    assert session.server_logon_password == "from-env"


def test_password_argument_wins(monkeypatch):
    monkeypatch.setenv(PASSWORD_ENVIRONMENT_VARIABLE, "from-env")
    session = FakeSession(clock_outcome=(True, 0, "now"))
    run_cli(["-p", "from-cli", "sync-clock", "CR1000"], session)
    assert session.server_logon_password == "from-cli"


def test_missing_command():
    with pytest.raises(SystemExit):
        make_parser().parse_args([])


def test_sync_clock_malformed_port():
    session = FakeSession()
    code, output = run_cli(["--port", "abc", "-t", "1", "sync-clock", "CR1000"], session)
    assert code == EXIT_FAILURE
    assert "- connection error" in output
    assert session.calls == []
