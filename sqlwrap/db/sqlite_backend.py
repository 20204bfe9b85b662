"""
SQLite backend for sqlwrap.

Used for:
    - single-file databases
    - tests
    - CLI tools

Connections run in autocommit mode (isolation_level=None) so every
statement outside begin()/commit() is durable immediately.
"""

from __future__ import annotations

import logging
import sqlite3

from ..errors import DBConnectionError
from .backend_base import DBBackend

logger = logging.getLogger(__name__)


class SQLiteBackend(DBBackend):
    """
    Minimal SQLite backend.

    Parameters
    ----------
    config : SQLiteConfig
        Database path plus options; driver options are passed to
        sqlite3.connect().
    """

    driver_errors = (sqlite3.Error,)

    @property
    def path(self) -> str:
        return self.config.path

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """
        Open a SQLite3 connection in autocommit mode.

        Also ensures foreign keys are enforced.
        """
        kwargs = self.config.driver_options
        kwargs.setdefault("isolation_level", None)

        try:
            conn = sqlite3.connect(self.path, **kwargs)
        except (sqlite3.Error, TypeError) as e:
            raise DBConnectionError(
                f"Cannot open SQLite database {self.path!r}: {e}"
            ) from e

        try:
            conn.execute("PRAGMA foreign_keys = ON;")
        except sqlite3.Error as e:
            conn.close()
            raise DBConnectionError(
                f"Cannot configure SQLite database {self.path!r}: {e}"
            ) from e

        logger.debug("Opened SQLite database %s", self.path)
        return conn

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin(self, conn: sqlite3.Connection) -> None:
        """
        Start an explicit transaction.

        sqlite3 raises OperationalError if one is already active.
        """
        conn.execute("BEGIN")
