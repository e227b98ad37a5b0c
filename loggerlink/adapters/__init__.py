from .connection import ConnectionAdapter
from .session import ComDataLoggerSession

__all__ = ["ConnectionAdapter", "ComDataLoggerSession"]
