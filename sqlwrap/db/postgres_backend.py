"""
Postgres backend for sqlwrap.

This backend mirrors the interface expected by:
    - Connector
    - QueryExecutor
    - DBWrapper

It provides:
    - dsn            (libpq connection string from host/port/name/credentials)
    - connect()
    - execute()      (rewrites `?` / `:name` into psycopg2's pyformat style)
    - begin/commit/rollback
    - last_insert_id()

Connections run with autocommit enabled; begin() switches it off until
the next commit() or rollback().
"""

from __future__ import annotations

import logging
import re
from typing import Any

try:
    import psycopg2  # type: ignore
    import psycopg2.extensions  # type: ignore
except ImportError:
    psycopg2 = None

from ..errors import DBConnectionError
from . import helpers
from .backend_base import DBBackend
from .helpers import Params

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Placeholder translation
# ----------------------------------------------------------------------

_TOKEN = re.compile(
    r"""
      --[^\n]*                  # line comment
    | /\*.*?\*/                 # block comment
    | '(?:[^']|'')*'            # string literal
    | "(?:[^"]|"")*"            # quoted identifier
    | ::                        # type cast
    | (?<![\w:]):([A-Za-z_]\w*) # named placeholder
    | \?                        # positional placeholder
    | %                         # literal percent
    """,
    re.VERBOSE | re.DOTALL,
)


def _translate(match: "re.Match[str]") -> str:
    token = match.group(0)
    if match.group(1):
        return f"%({match.group(1)})s"
    if token == "?":
        return "%s"
    if token == "%":
        return "%%"
    if token.startswith(("--", "/*")):
        return token
    if token[0] in "'\"":
        # psycopg2 interpolates the whole string, literals included
        return token.replace("%", "%%")
    return token


def to_pyformat(query: str) -> str:
    """
    Rewrite qmark (`?`) and named (`:name`) placeholders into psycopg2's
    `%s` / `%(name)s` and escape literal `%` signs.

    Comments, quoted literals and `::` casts are left alone.
    """
    return _TOKEN.sub(_translate, query)


# ----------------------------------------------------------------------
# Backend implementation
# ----------------------------------------------------------------------

class PostgresBackend(DBBackend):
    """
    Minimal Postgres backend implementation.

    Parameters
    ----------
    config : PostgresConfig
        Host, database name, credentials, optional port and options.
        Driver options (connect_timeout, sslmode, ...) are passed to
        psycopg2.connect().
    """

    driver_errors = (psycopg2.Error,) if psycopg2 is not None else ()

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    @property
    def dsn(self) -> str:
        """
        libpq key/value connection string, e.g.
        "host=db.local port=5432 dbname=app user=svc password=..."

        The port is omitted when not configured.
        """
        _require_driver()
        cfg = self.config
        return psycopg2.extensions.make_dsn(
            host=cfg.host,
            port=cfg.port,
            dbname=cfg.name,
            user=cfg.user,
            password=cfg.password,
        )

    def connect(self) -> Any:
        """
        Create a psycopg2 connection in autocommit mode.
        """
        _require_driver()
        cfg = self.config
        try:
            conn = psycopg2.connect(self.dsn, **cfg.driver_options)
        except psycopg2.Error as e:
            raise DBConnectionError(
                f"Cannot connect to PostgreSQL database {cfg.name!r} "
                f"on {cfg.host}:{cfg.port or 'default'}: {e}"
            ) from e

        conn.autocommit = True
        logger.debug("Connected to PostgreSQL %s/%s", cfg.host, cfg.name)
        return conn

    def execute(self, conn: Any, query: str, params: Params = None):
        if params is not None:
            query = to_pyformat(query)
        return helpers.execute_cursor(conn, query, params)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin(self, conn: Any) -> None:
        conn.autocommit = False

    def commit(self, conn: Any) -> None:
        conn.commit()
        conn.autocommit = True

    def rollback(self, conn: Any) -> None:
        conn.rollback()
        conn.autocommit = True

    # ------------------------------------------------------------------
    # Sequences
    # ------------------------------------------------------------------

    def last_insert_id(self, conn: Any) -> str:
        """
        Value most recently produced by a sequence in this session.

        The driver raises if no sequence has been used yet.
        """
        cur = conn.cursor()
        cur.execute("SELECT lastval()")
        return str(cur.fetchone()[0])


def _require_driver() -> None:
    if psycopg2 is None:
        raise DBConnectionError("psycopg2 is not installed")
