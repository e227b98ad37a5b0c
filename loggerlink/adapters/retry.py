# File : retry.py
# Author : loggerlink developers
# License : GPL

from dataclasses import dataclass

from ..tools.types import assert_number


@dataclass(frozen=True)
class RetryPolicy:
    """
    Number of connect-and-retry rounds allowed when an action finds the
    session disconnected, and the pause after each connect request

    The pause is what lets the asynchronous connect land before the
    session is checked again. With no pause the retry only succeeds if the
    vendor connects synchronously
    """

    max_attempts: int = 1
    backoff: float = 0.0
    backoff_factor: float = 1.0

    def __post_init__(self) -> None:
        if not isinstance(self.max_attempts, int) or self.max_attempts < 0:
            raise ValueError(f"Invalid max_attempts : {self.max_attempts}")
        assert_number(self.backoff, self.backoff_factor)
        if self.backoff < 0 or self.backoff_factor < 1:
            raise ValueError(
                f"Invalid backoff : {self.backoff} (factor {self.backoff_factor})"
            )

    def delay(self, attempt: int) -> float:
        """
        Pause after the given connect attempt (1-based)
        """
        if attempt < 1:
            raise ValueError(f"Invalid attempt : {attempt}")
        return float(self.backoff * self.backoff_factor ** (attempt - 1))


NO_RETRY = RetryPolicy(max_attempts=0)
DEFAULT_RETRY_POLICY = RetryPolicy()
