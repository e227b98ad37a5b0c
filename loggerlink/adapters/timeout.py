# File : timeout.py
# Author : loggerlink developers
# License : GPL

from enum import Enum
from types import EllipsisType
from typing import Any

from ..tools.types import NumberLike, is_number


class TimeoutAction(Enum):
    ERROR = "error"
    RETURN_EMPTY = "return_empty"


class Timeout:
    DEFAULT_ACTION = TimeoutAction.ERROR

    def __init__(
        self,
        response: NumberLike | None | EllipsisType = ...,
        action: str | EllipsisType | TimeoutAction = ...,
    ) -> None:
        """
        This class holds the time allowed for a datalogger action to report
        its outcome

        Parameters
        ----------
        response : float
            Time before the session reports the outcome, None waits forever
        action : str
            Action performed when a timeout occurs. 'error' -> raise an error, 'return_empty' -> return None
        """
        super().__init__()

        self._is_default_response = response is ...
        self._is_default_action = action is ...

        self.action: TimeoutAction
        if action is ...:
            self.action = self.DEFAULT_ACTION
        else:
            self.action = TimeoutAction(action)

        if response is not ... and response is not None and not is_number(response):
            raise ValueError(f"Invalid response time : {response}")
        self._response: EllipsisType | NumberLike | None = response

    def __str__(self) -> str:
        if self._response is ...:
            r = "..."
        elif self._response is None:
            r = "None"
        else:
            r = f"{self._response:.3f}"
        return f"Timeout({r}:{self.action.value})"

    def __repr__(self) -> str:
        return self.__str__()

    def set_default(self, default_timeout: "Timeout") -> None:
        if self._is_default_response:
            self._response = default_timeout.response()
        if self._is_default_action:
            self.action = default_timeout.action

    def response(self) -> NumberLike | None:
        if self._response is ...:
            return None
        return self._response

    def is_initialized(self) -> bool:
        return self._response is not Ellipsis


def any_to_timeout(value: Any) -> Timeout:
    if value is None:
        return Timeout(response=None)
    elif is_number(value):
        return Timeout(response=float(value))
    elif isinstance(value, Timeout):
        return value
    else:
        raise ValueError(f"Could not convert {value} to Timeout")
