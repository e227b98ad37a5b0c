# File : types.py
# Author : loggerlink developers
# License : GPL

from typing import Any, TypeGuard

NumberLike = int | float


def is_number(X: Any) -> TypeGuard[NumberLike]:
    """
    Check if the given X is an instance of int or float

    Parameters
    ----------
    X : any

    Returns
    -------
    result : bool
    """
    return isinstance(X, int | float) and not isinstance(X, bool)


def assert_number(*args: Any) -> None:
    """
    Checks if the given argument(s) is a number.
    A TypeError is raised if it isn't the case

    Parameters
    ----------
    args
    """
    for arg in args:
        if not is_number(arg):
            raise TypeError(f"Variable {arg} should be a number")
