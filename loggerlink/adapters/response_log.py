# File : response_log.py
# Author : loggerlink developers
# License : GPL
"""
Response log

Ordered list of the outcomes reported by a datalogger session. Entries are
appended by the adapter and by the vendor callbacks (from the vendor thread)
and read by the caller
"""

import logging
import threading
import time
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field

from ..tools.log_settings import LoggerAlias

NO_OPERATIONS = "no operations logged"

SUCCESS_PREFIX = "+"


@dataclass(frozen=True)
class LogEntry:
    """
    A single outcome line
    """

    text: str
    timestamp: float = field(default_factory=time.time)
    correlation_id: int | None = None

    @property
    def ok(self) -> bool:
        return self.text.startswith(SUCCESS_PREFIX)

    def __str__(self) -> str:
        return self.text


class ResponseLog:
    def __init__(self, maxlen: int | None = None) -> None:
        """
        Append-only log of response entries

        Parameters
        ----------
        maxlen : int or None
            Keep only the last maxlen entries, None keeps everything
        """
        if maxlen is not None and maxlen <= 0:
            raise ValueError(f"Invalid maxlen : {maxlen}")
        self._logger = logging.getLogger(LoggerAlias.ADAPTER.value)
        self._lock = threading.Lock()
        self._entries: deque[LogEntry] = deque(maxlen=maxlen)
        self.maxlen = maxlen

    def append(self, text: str, correlation_id: int | None = None) -> LogEntry:
        entry = LogEntry(text, correlation_id=correlation_id)
        with self._lock:
            self._entries.append(entry)
        if entry.ok:
            self._logger.info(text)
        else:
            self._logger.warning(text)
        return entry

    def last(self) -> LogEntry | None:
        with self._lock:
            if self._entries:
                return self._entries[-1]
        return None

    def last_text(self, default: str = NO_OPERATIONS) -> str:
        entry = self.last()
        return default if entry is None else entry.text

    def entries(self) -> list[LogEntry]:
        with self._lock:
            return list(self._entries)

    def since(self, index: int) -> list[LogEntry]:
        """
        Entries appended after the log had the given length
        """
        with self._lock:
            return list(self._entries)[index:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries())
