"""
Exception taxonomy for sqlwrap.

Errors raised by the wrapper itself derive from SQLWrapError.
Errors raised by the underlying DB-API driver (sqlite3.Error,
psycopg2.Error, ...) are never wrapped: they reach the caller unchanged.
Each backend lists its driver exception classes in `driver_errors`.
"""

from __future__ import annotations

from typing import Any, Union


class SQLWrapError(Exception):
    """Base class for every error raised by sqlwrap."""


class DBConnectionError(SQLWrapError, ConnectionError):
    """
    The driver refused to open a connection (bad credentials,
    unreachable host, invalid path, unknown option).

    Also an instance of the builtin ConnectionError.
    """


class BindError(SQLWrapError, ValueError):
    """The argument collection cannot be turned into driver parameters."""


class BindTypeError(BindError, TypeError):
    """
    An argument value is not bindable (not null-like, numeric,
    boolean or string).

    Attributes
    ----------
    key:
        Positional index or placeholder name of the offending argument.
    type_name:
        Runtime type name of the offending value.
    """

    def __init__(self, key: Union[int, str], value: Any):
        self.key = key
        self.type_name = type(value).__name__
        super().__init__(
            f"Cannot bind value of type {self.type_name!r} to placeholder {key!r}"
        )


class HydrationError(SQLWrapError, ValueError):
    """Object hydration was requested without a usable factory."""


__all__ = [
    "SQLWrapError",
    "DBConnectionError",
    "BindError",
    "BindTypeError",
    "HydrationError",
]
