# File : fake_session.py
# Author : loggerlink developers
# License : GPL
#
# In-memory stand-in for the vendor DataLogger session. Events are emitted
# right away, or queued until process_events() when deferred=True (like COM
# events waiting for the message pump)

from collections import deque
from collections.abc import Callable
from typing import Any

from loggerlink.adapters.session import EventSlots, SessionEvent

Outcome = tuple[bool, Any, Any]


class FakeSession(EventSlots):
    def __init__(
        self,
        connect: bool = True,
        connected: bool = False,
        deferred: bool = False,
        connect_failure_code: Any = None,
        send_outcome: Outcome | None = None,
        clock_outcome: Outcome | None = None,
    ) -> None:
        super().__init__()
        self.server_name = ""
        self.server_port = 0
        self.server_logon_name = ""
        self.server_logon_password = ""
        self.logger_name = ""
        self.connected = connected
        self.connect_succeeds = connect
        self.connect_failure_code = connect_failure_code
        self.deferred = deferred
        self.send_outcome = send_outcome
        self.clock_outcome = clock_outcome
        self.calls: list[str] = []
        self.sent: list[tuple[str, str]] = []
        self.fail_on: dict[str, Exception] = {}
        self._queue: deque[Callable[[], None]] = deque()

    @property
    def server_connected(self) -> bool:
        return self.connected

    def bound_events(self) -> set[SessionEvent]:
        return set(self._handlers)

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def _emit(self, action: Callable[[], None]) -> None:
        if self.deferred:
            self._queue.append(action)
        else:
            action()

    def _connected_event(self) -> None:
        self.connected = True
        self.dispatch(SessionEvent.SERVER_CONNECTED)

    def server_connect(self) -> None:
        self._call("server_connect")
        if self.connect_succeeds:
            self._emit(self._connected_event)
        elif self.connect_failure_code is not None:
            code = self.connect_failure_code
            self._emit(lambda: self.dispatch(SessionEvent.SERVER_CONNECT_FAILED, code))

    def server_disconnect(self) -> None:
        self._call("server_disconnect")
        self.connected = False

    def program_send_start(self, path: str, options: str) -> None:
        self._call("program_send_start")
        self.sent.append((path, options))
        if self.send_outcome is not None:
            outcome = self.send_outcome
            self._emit(lambda: self.dispatch(SessionEvent.PROGRAM_SEND_COMPLETE, *outcome))

    def clock_set_start(self) -> None:
        self._call("clock_set_start")
        if self.clock_outcome is not None:
            outcome = self.clock_outcome
            self._emit(lambda: self.dispatch(SessionEvent.CLOCK_COMPLETE, *outcome))

    def process_events(self) -> None:
        while self._queue:
            self._queue.popleft()()

