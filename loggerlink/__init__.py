from .adapters.connection import ActionResult, ConnectionAdapter, SessionState, SyncDisconnect
from .adapters.response_log import LogEntry, ResponseLog
from .adapters.retry import RetryPolicy
from .adapters.session import ComDataLoggerSession, SessionEvent
from .adapters.timeout import Timeout
from .tools.log import log
from .version import __version__

__all__ = [
    "ActionResult",
    "ConnectionAdapter",
    "SessionState",
    "SyncDisconnect",
    "LogEntry",
    "ResponseLog",
    "RetryPolicy",
    "ComDataLoggerSession",
    "SessionEvent",
    "Timeout",
    "log",
    "__version__",
]
