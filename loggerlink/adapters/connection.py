# File : connection.py
# Author : loggerlink developers
# License : GPL
#
# The ConnectionAdapter drives a single datalogger session through
# connect -> action -> disconnect. Actions return immediately, their outcome
# is delivered later by the vendor callbacks. Each outcome is appended to the
# response log and resolves the ActionResult returned by the action
#
# Vendor callbacks carry no request token, pending actions are matched with
# their outcome in arrival order for each kind of action

import concurrent.futures
import itertools
import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from enum import Enum
from types import EllipsisType
from typing import Any

from ..tools.errors import (
    ActionCancelledError,
    ActionTimeoutError,
    make_error_description,
)
from ..tools.log_settings import LoggerAlias
from ..tools.types import NumberLike
from .descriptors import DEFAULT_HOST, DEFAULT_PORT, Credentials
from .response_log import LogEntry, ResponseLog
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy
from .session import ComDataLoggerSession, DataLoggerSession, SessionEvent
from .timeout import Timeout, TimeoutAction, any_to_timeout

DEFAULT_TIMEOUT = Timeout(response=30, action="error")

# Interval at which vendor events are pumped while waiting
POLL_INTERVAL = 0.05

NO_PROGRAM = "please specify a program"


class SessionState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class ActionKind(Enum):
    SEND_PROGRAM = "send_program"
    SYNC_CLOCKS = "sync_clocks"
    SHUT_DOWN = "shut_down"


class SyncDisconnect(Enum):
    """
    When sync_clocks releases the server connection

    IMMEDIATE disconnects right after the clock request is issued, the
    disconnect may overtake the request still in flight. ON_COMPLETION
    disconnects once the clock outcome has been reported
    """

    IMMEDIATE = "immediate"
    ON_COMPLETION = "on_completion"


class ActionResult:
    def __init__(
        self,
        kind: ActionKind,
        correlation_id: int,
        process_events: Callable[[], None] | None = None,
    ) -> None:
        """
        Outcome of a single adapter action

        Parameters
        ----------
        kind : ActionKind
        correlation_id : int
            Identifier shared with the log entries of this action
        process_events : callable
            Called periodically while waiting so that the session can deliver
            its events
        """
        self.kind = kind
        self.correlation_id = correlation_id
        self._future: concurrent.futures.Future[LogEntry] = concurrent.futures.Future()
        self._process_events = process_events

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def entry(self) -> LogEntry | None:
        """
        Outcome entry, None if the outcome hasn't arrived (or never will)
        """
        if not self._future.done() or self._future.cancelled():
            return None
        return self._future.result()

    @property
    def ok(self) -> bool:
        entry = self.entry()
        return entry is not None and entry.ok

    def wait(
        self, timeout: Timeout | NumberLike | None | EllipsisType = ...
    ) -> LogEntry | None:
        """
        Wait for the outcome of the action

        Parameters
        ----------
        timeout : Timeout, float or None
            None waits forever, defaults to DEFAULT_TIMEOUT

        Returns
        -------
        entry : LogEntry or None
            None if the timeout action is 'return_empty' and no outcome arrived
        """
        if timeout is ...:
            _timeout = DEFAULT_TIMEOUT
        else:
            _timeout = any_to_timeout(timeout)
            _timeout.set_default(DEFAULT_TIMEOUT)
        response = _timeout.response()
        deadline = None if response is None else time.time() + response

        while True:
            if self._process_events is not None:
                self._process_events()
            if deadline is None:
                poll = POLL_INTERVAL
            else:
                poll = max(0.0, min(POLL_INTERVAL, deadline - time.time()))
            try:
                return self._future.result(timeout=poll)
            except concurrent.futures.CancelledError as err:
                raise ActionCancelledError(
                    f"{self.kind.value} #{self.correlation_id} was cancelled"
                ) from err
            except concurrent.futures.TimeoutError:
                if deadline is not None and time.time() >= deadline:
                    match _timeout.action:
                        case TimeoutAction.RETURN_EMPTY:
                            return None
                        case TimeoutAction.ERROR:
                            raise ActionTimeoutError(response) from None
                        case _:
                            raise NotImplementedError()

    def _resolve(self, entry: LogEntry) -> None:
        if not self._future.done():
            self._future.set_result(entry)

    def _cancel(self) -> None:
        self._future.cancel()

    def __str__(self) -> str:
        if self.cancelled():
            status = "cancelled"
        elif self.done():
            status = str(self.entry())
        else:
            status = "pending"
        return f"{self.kind.value} #{self.correlation_id} : {status}"

    def __repr__(self) -> str:
        return self.__str__()


class ConnectionAdapter:
    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: str | int = DEFAULT_PORT,
        username: str = "",
        password: str = "",
        session: DataLoggerSession | None = None,
        retry_policy: RetryPolicy | None = None,
        sync_disconnect: SyncDisconnect | str = SyncDisconnect.ON_COMPLETION,
        response_log: ResponseLog | None = None,
    ) -> None:
        """
        Synchronous front of a LoggerNet datalogger session

        No network activity happens here, the session is only created and
        its events bound

        Parameters
        ----------
        host : str
            LoggerNet server address
        port : str or int
            LoggerNet server port, checked when connecting
        username : str
        password : str
        session : DataLoggerSession
            Vendor session, a ComDataLoggerSession is created if None
        retry_policy : RetryPolicy
            Connect-and-retry rounds for send_program_file, one by default
        sync_disconnect : SyncDisconnect or str
            When sync_clocks disconnects, see SyncDisconnect
        response_log : ResponseLog
            Log receiving the entries, an unbounded one is created if None
        """
        self._logger = logging.getLogger(LoggerAlias.ADAPTER.value)
        self.credentials = Credentials(host, port, username, password)
        self.retry_policy = DEFAULT_RETRY_POLICY if retry_policy is None else retry_policy
        self.sync_disconnect = SyncDisconnect(sync_disconnect)
        self._responses = ResponseLog() if response_log is None else response_log

        # Serializes actions
        self._action_lock = threading.RLock()
        # Protects state and pending actions, never held while calling the session
        self._state_lock = threading.Lock()
        self._state = SessionState.IDLE
        self._pending: dict[ActionKind, deque[ActionResult]] = {
            kind: deque() for kind in ActionKind
        }
        self._ids = itertools.count(1)
        self._connect_id: int | None = None

        if session is None:
            session = ComDataLoggerSession()
        self._session = session
        self._bind_events()

    # ┌──────────────┐
    # │ Public API   │
    # └──────────────┘

    @property
    def host(self) -> str:
        return self.credentials.host

    @property
    def state(self) -> SessionState:
        with self._state_lock:
            return self._state

    @property
    def session(self) -> DataLoggerSession:
        return self._session

    @property
    def response_log(self) -> ResponseLog:
        return self._responses

    def operation_result(self) -> str:
        """
        Return the last logged response
        """
        return self._responses.last_text()

    def sync_clocks(self, datalogger_name: str) -> ActionResult:
        """
        Synchronize the datalogger clock with the LoggerNet server clock.
        The outcome is reported by the clock complete event

        Parameters
        ----------
        datalogger_name : str

        Returns
        -------
        result : ActionResult
        """
        with self._action_lock:
            result = self._new_result(ActionKind.SYNC_CLOCKS)
            if not self._select_logger(datalogger_name, result):
                return result
            error = self._connect(result.correlation_id)
            if error is not None:
                # No clock request when the connection request itself failed
                result._resolve(error)
                return result

            self._add_pending(result)
            try:
                self._session.clock_set_start()
            except Exception as e:
                self._remove_pending(result)
                self._finish(
                    result, f"- clock sync error: {make_error_description(e)}"
                )
                self._disconnect()
                return result

            if self.sync_disconnect is SyncDisconnect.IMMEDIATE:
                self._disconnect()
            return result

    def send_program_file(
        self, datalogger_name: str, program_path: str, retried: bool = False
    ) -> ActionResult:
        """
        Send a program file to the datalogger, it is compiled once received.
        The outcome is reported by the program send complete event

        If the session isn't connected, a connection is requested and the
        send is retried according to the retry policy

        Parameters
        ----------
        datalogger_name : str
        program_path : str
            Path of the program, forwarded as is to the session
        retried : bool
            The send is already a retry, no further connection is attempted

        Returns
        -------
        result : ActionResult
        """
        with self._action_lock:
            result = self._new_result(ActionKind.SEND_PROGRAM)
            if not program_path:
                self._finish(result, NO_PROGRAM)
                return result
            if not self._select_logger(datalogger_name, result):
                return result

            attempts = self.retry_policy.max_attempts
            attempt = attempts if retried else 0
            while True:
                if self._session.server_connected:
                    self._start_send(result, program_path)
                    return result
                if attempt >= attempts:
                    break
                attempt += 1
                self._logger.debug(
                    f"Session disconnected, connect attempt {attempt}/{attempts}"
                )
                self._connect(result.correlation_id)
                self._pause(self.retry_policy.delay(attempt))

            self._finish(
                result,
                f"- could not connect to server {self.host}, program {program_path} not sent",
            )
            return result

    def shut_down_logger(self, datalogger_name: str = "") -> ActionResult:
        """
        Release the server connection and drop the actions still waiting for
        their outcome

        Parameters
        ----------
        datalogger_name : str

        Returns
        -------
        result : ActionResult
        """
        with self._action_lock:
            result = self._new_result(ActionKind.SHUT_DOWN)
            with self._state_lock:
                dropped = [r for pending in self._pending.values() for r in pending]
                for pending in self._pending.values():
                    pending.clear()
            for r in dropped:
                r._cancel()
            if dropped:
                self._logger.info(f"Dropped {len(dropped)} pending action(s)")

            try:
                self._disconnect()
            except Exception as e:
                self._finish(result, f"- shut down error: {make_error_description(e)}")
                return result

            target = f" {datalogger_name}" if datalogger_name else ""
            self._finish(result, f"+ logger session{target} shut down")
            return result

    def pending(self, kind: ActionKind | None = None) -> int:
        """
        Number of actions waiting for their outcome
        """
        with self._state_lock:
            if kind is None:
                return sum(len(p) for p in self._pending.values())
            return len(self._pending[kind])

    def __str__(self) -> str:
        return f"ConnectionAdapter({self.credentials})"

    def __repr__(self) -> str:
        return self.__str__()

    # ┌──────────────────┐
    # │ Session actions  │
    # └──────────────────┘

    def _connect(self, correlation_id: int | None = None) -> LogEntry | None:
        """
        Apply the credentials to the session and request a connection.
        Returning doesn't mean the session is connected, the server connect
        events report the outcome

        Returns
        -------
        error : LogEntry or None
            Entry logged when the request could not be issued
        """
        with self._state_lock:
            self._state = SessionState.CONNECTING
            self._connect_id = correlation_id
        try:
            self._session.server_name = self.credentials.host
            self._session.server_port = self.credentials.port_number()
            self._session.server_logon_name = self.credentials.username
            self._session.server_logon_password = self.credentials.password
            self._logger.debug(f"Connecting to {self.credentials}")
            self._session.server_connect()
        except Exception as e:
            with self._state_lock:
                self._state = SessionState.FAILED
            return self._log(
                f"- connection error, could not connect : {make_error_description(e)}",
                correlation_id,
            )
        return None

    def _disconnect(self) -> None:
        if self._session.server_connected:
            self._logger.debug(f"Disconnecting from {self.credentials}")
            self._session.server_disconnect()
            with self._state_lock:
                self._state = SessionState.IDLE

    def _disconnect_when_idle(self) -> None:
        # Check and disconnect as one step, an action can't start in between
        with self._action_lock:
            if self.pending() == 0:
                self._disconnect()

    def _select_logger(self, datalogger_name: str, result: ActionResult) -> bool:
        if not datalogger_name:
            return True
        try:
            self._session.logger_name = datalogger_name
        except Exception as e:
            self._finish(
                result,
                f"- could not select data logger {datalogger_name} : {make_error_description(e)}",
            )
            return False
        return True

    def _start_send(self, result: ActionResult, program_path: str) -> None:
        self._add_pending(result)
        try:
            self._session.program_send_start(program_path, "")
        except Exception as e:
            self._remove_pending(result)
            self._finish(result, f"- send error : {make_error_description(e)}")
        else:
            self._logger.debug(f"Sending {program_path}")

    def _pause(self, delay: float) -> None:
        if delay <= 0:
            return
        end = time.time() + delay
        while True:
            self._session.process_events()
            remaining = end - time.time()
            if remaining <= 0:
                break
            time.sleep(min(POLL_INTERVAL, remaining))

    # ┌──────────────────┐
    # │ Session events   │
    # └──────────────────┘

    def _bind_events(self) -> None:
        handlers: dict[SessionEvent, Callable[..., None]] = {
            SessionEvent.SERVER_CONNECTED: self._on_server_connected,
            SessionEvent.SERVER_CONNECT_FAILED: self._on_server_connect_failed,
            SessionEvent.LOGGER_CONNECTED: self._on_logger_connected,
            SessionEvent.LOGGER_CONNECT_FAILED: self._on_logger_connect_failed,
            SessionEvent.PROGRAM_SEND_COMPLETE: self._on_program_send_complete,
            SessionEvent.CLOCK_COMPLETE: self._on_clock_complete,
        }
        for event, handler in handlers.items():
            self._session.bind(event, self._guarded(event, handler))

    def _guarded(
        self, event: SessionEvent, handler: Callable[..., None]
    ) -> Callable[..., None]:
        # An exception escaping to the vendor dispatcher can take the host process down
        def wrapper(*args: Any) -> None:
            try:
                handler(*args)
            except Exception as e:
                try:
                    self._log(f"- {event.value} handler error : {make_error_description(e)}")
                except Exception:
                    self._logger.exception(f"Failed to log {event.value} handler error")

        return wrapper

    def _on_server_connected(self) -> None:
        with self._state_lock:
            self._state = SessionState.CONNECTED
            correlation_id = self._connect_id
        self._log(f"+ connected to server {self.host}", correlation_id)

    def _on_server_connect_failed(self, code: Any) -> None:
        with self._state_lock:
            self._state = SessionState.FAILED
            correlation_id = self._connect_id
        entry = self._log(f"- server connect failed, code {code}", correlation_id)
        self._fail_pending(entry)

    def _on_logger_connected(self) -> None:
        with self._state_lock:
            correlation_id = self._connect_id
        self._log("+ connected to data logger", correlation_id)

    def _on_logger_connect_failed(self, code: Any) -> None:
        with self._state_lock:
            correlation_id = self._connect_id
        entry = self._log(f"- logger connect failed, code {code}", correlation_id)
        self._fail_pending(entry)

    def _on_program_send_complete(
        self, successful: bool, code: Any, compile_result: Any
    ) -> None:
        result = self._pop_pending(ActionKind.SEND_PROGRAM)
        if successful:
            text = "+ sent"
        else:
            text = f"- send failed, code {code}, compile {compile_result}"
        self._finish(result, text)

    def _on_clock_complete(self, successful: bool, code: Any, timestamp: Any) -> None:
        result = self._pop_pending(ActionKind.SYNC_CLOCKS)
        if successful:
            text = f"+ synced to {timestamp}"
        else:
            text = f"- clock sync failed, code {code}"
        self._finish(result, text)
        if self.sync_disconnect is SyncDisconnect.ON_COMPLETION:
            self._disconnect_when_idle()

    # ┌──────────────────┐
    # │ Bookkeeping      │
    # └──────────────────┘

    def _new_result(self, kind: ActionKind) -> ActionResult:
        return ActionResult(kind, next(self._ids), self._session.process_events)

    def _add_pending(self, result: ActionResult) -> None:
        with self._state_lock:
            self._pending[result.kind].append(result)

    def _remove_pending(self, result: ActionResult) -> None:
        with self._state_lock:
            try:
                self._pending[result.kind].remove(result)
            except ValueError:
                # Already matched with an outcome
                pass

    def _pop_pending(self, kind: ActionKind) -> ActionResult | None:
        with self._state_lock:
            if self._pending[kind]:
                return self._pending[kind].popleft()
        self._logger.debug(f"No pending {kind.value} action for this outcome")
        return None

    def _fail_pending(self, entry: LogEntry) -> None:
        with self._state_lock:
            failed = [r for pending in self._pending.values() for r in pending]
            for pending in self._pending.values():
                pending.clear()
        for result in failed:
            result._resolve(entry)

    def _log(self, text: str, correlation_id: int | None = None) -> LogEntry:
        return self._responses.append(text, correlation_id)

    def _finish(self, result: ActionResult | None, text: str) -> LogEntry:
        entry = self._log(text, None if result is None else result.correlation_id)
        if result is not None:
            result._resolve(entry)
        return entry
