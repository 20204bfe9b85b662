"""
sqlwrap.db

Driver layer for sqlwrap.

This package provides:

- Lazy connection ownership:
      * Connector

- Concrete database backend implementations:
      * SQLiteBackend   (single database file)
      * PostgresBackend (networked host/port/credentials)

- Backend contracts:
      * DBBackend
      * BackendLike
      * ensure_backend
"""

from .connection import Connector
from .sqlite_backend import SQLiteBackend
from .postgres_backend import PostgresBackend
from .backend_base import DBBackend, BackendLike, ensure_backend

__all__ = [
    # Connection
    "Connector",

    # Backends
    "SQLiteBackend",
    "PostgresBackend",
    "DBBackend",
    "BackendLike",
    "ensure_backend",
]
