"""
Backend base interfaces for sqlwrap.

This module defines the minimal contract every database driver backend
(SQLite, Postgres, etc.) must satisfy. It is the "driver collaborator"
the Connector and QueryExecutor consume.

It is intentionally light-weight:

- It does NOT depend on any specific DB driver.
- It only encodes the structural requirements assumed by:
      * sqlwrap.db.connection.Connector
      * sqlwrap.executor.QueryExecutor
      * sqlwrap.core.DBWrapper

Backends must expose:

    backend.config              -> immutable connection record
    backend.driver_errors       -> tuple of the driver's exception classes
    backend.connect()           -> raw DB-API connection
    backend.execute(conn, sql, params) -> executed cursor
    backend.begin(conn)
    backend.commit(conn)
    backend.rollback(conn)
    backend.close(conn)

This file provides:
- DBBackend: abstract base class
- BackendLike: structural protocol
- ensure_backend: runtime validator
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol, Tuple, runtime_checkable

from . import helpers
from .helpers import Params


# ---------------------------------------------------------------------------
# Abstract Base Backend
# ---------------------------------------------------------------------------

class DBBackend(ABC):
    """
    Abstract base class for a sqlwrap backend.

    Concrete subclasses take their connection record as the only
    constructor argument (SQLiteBackend(SQLiteConfig), ...).

    Required interface:

        connect() -> raw DB-API connection
        begin(conn) -> None

    The remaining operations default to plain DB-API calls.
    """

    driver_errors: Tuple[type, ...] = ()

    def __init__(self, config: Any):
        self.config = config

    @abstractmethod
    def connect(self) -> Any:
        """
        Open and return a new raw DB-API 2.0 connection.

        Raises DBConnectionError if the driver rejects the attempt.
        """
        raise NotImplementedError

    @abstractmethod
    def begin(self, conn: Any) -> None:
        """Open an explicit transaction on `conn`."""
        raise NotImplementedError

    def execute(self, conn: Any, query: str, params: Params = None):
        """
        Execute `query` with `params` (list, dict or None) and return
        the cursor. `?` / `:name` placeholders are accepted; backends
        whose driver uses another paramstyle translate them here.
        """
        return helpers.execute_cursor(conn, query, params)

    def commit(self, conn: Any) -> None:
        conn.commit()

    def rollback(self, conn: Any) -> None:
        conn.rollback()

    def close(self, conn: Any) -> None:
        conn.close()


# ---------------------------------------------------------------------------
# Structural Protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class BackendLike(Protocol):
    """
    Structural protocol for objects usable as a sqlwrap backend.

    This lets the Connector and executor run against test doubles
    without knowing the concrete backend implementation.
    """

    config: Any
    driver_errors: Tuple[type, ...]

    def connect(self) -> Any:
        ...

    def execute(self, conn: Any, query: str, params: Params = None) -> Any:
        ...

    def begin(self, conn: Any) -> None:
        ...

    def commit(self, conn: Any) -> None:
        ...

    def rollback(self, conn: Any) -> None:
        ...

    def close(self, conn: Any) -> None:
        ...


# ---------------------------------------------------------------------------
# Runtime Guard
# ---------------------------------------------------------------------------

_REQUIRED = ("config", "connect", "execute", "begin", "commit", "rollback", "close")


def ensure_backend(backend: Any) -> BackendLike:
    """
    Validate that an object behaves like a sqlwrap backend.

    Raises:
        TypeError if required attributes are missing.
    """
    missing = [name for name in _REQUIRED if not hasattr(backend, name)]
    if missing:
        raise TypeError(
            f"Invalid sqlwrap backend {backend!r}: missing attributes {missing}"
        )
    return backend  # type: ignore[return-value]


__all__ = [
    "DBBackend",
    "BackendLike",
    "ensure_backend",
]
