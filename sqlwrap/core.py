"""
Public façade for sqlwrap.

DBWrapper is the single, high-level entrypoint. It composes:

    - Connector      (lazy driver handle)
    - QueryExecutor  (argument binding + execution)
    - ResultShaper   (row / rows / column / group / object results)

and forwards transaction control to the backend.

Concrete wrappers:
    SQLiteWrapper(path, options)
    PostgresWrapper(host, name, user, password, port, options)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .config import (
    FETCH_STYLE,
    LoadedConfig,
    PostgresConfig,
    SQLiteConfig,
    load_config,
)
from .db import Connector, PostgresBackend, SQLiteBackend
from .db.backend_base import BackendLike
from .errors import DBConnectionError
from .executor import QueryExecutor
from .shaper import FetchStyle, ResultShaper, StyleLike

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DBWrapper façade
# ---------------------------------------------------------------------------

class DBWrapper:
    """
    Convenience layer over one lazily-opened database connection.

    Not thread-safe: use one wrapper per thread, or serialize access.

    Attributes
    ----------
    connector:
        Connector owning the raw driver handle.

    executor:
        QueryExecutor that binds and runs statements on that handle.

    shaper:
        ResultShaper rendering executed cursors.
    """

    def __init__(self, backend: BackendLike):
        self.connector = Connector(backend)
        config = backend.config
        self.executor = QueryExecutor(
            self.connector,
            null_empty_values=config.null_empty_values,
        )
        self.shaper = ResultShaper(self.executor, default_style=config.fetch_style)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "DBWrapper":
        """Construct a wrapper using environment variables."""
        return create_wrapper(load_config())

    @property
    def config(self) -> Union[SQLiteConfig, PostgresConfig]:
        return self.connector.config

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def connect(self) -> None:
        self.connector.connect()

    def disconnect(self) -> None:
        self.connector.disconnect()

    def get_handle(self) -> Any:
        """The live raw DB-API connection (connects first)."""
        return self.connector.get_handle()

    def set_attribute(self, name: str, value: Any) -> bool:
        """
        Change a connection attribute.

        "fetch_style" changes the default style of fetch()/fetch_all().
        Any other name is set on the raw driver connection
        (e.g. "isolation_level", "autocommit") if it has that attribute.

        Returns False when the attribute is unknown.
        """
        if name == FETCH_STYLE:
            if not isinstance(value, FetchStyle):
                return False
            self.shaper.default_style = value
            return True

        handle = self.get_handle()
        if not hasattr(handle, name):
            return False
        setattr(handle, name, value)
        return True

    def __enter__(self) -> "DBWrapper":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()
        return False

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin_transaction(self) -> None:
        self.connector.backend.begin(self.get_handle())

    def commit(self) -> None:
        self.connector.backend.commit(self.get_handle())

    def rollback(self) -> None:
        self.connector.backend.rollback(self.get_handle())

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, query: str, args: Any = None):
        """Bind and execute `query`; returns the DB-API cursor."""
        return self.executor.run(query, args)

    def transact(self, query: str, args: Any = None) -> int:
        """Bind and execute a mutating statement; returns affected rows."""
        return self.executor.transact(query, args)

    def query(self, statement: str):
        """Execute `statement` without arguments; returns the cursor."""
        return self.executor.query(statement)

    # ------------------------------------------------------------------
    # Result shaping
    # ------------------------------------------------------------------

    def fetch(self, query: str, args: Any = None, style: Optional[FetchStyle] = None) -> Any:
        return self.shaper.fetch(query, args, style)

    def fetch_all(self, query: str, args: Any = None, style: Optional[StyleLike] = None) -> Any:
        return self.shaper.fetch_all(query, args, style)

    def fetch_col(self, query: str, args: Any = None) -> Any:
        return self.shaper.fetch_col(query, args)

    def fetch_group(
        self,
        query: str,
        args: Any = None,
        style: FetchStyle = FetchStyle.COLUMN,
    ) -> Dict[Any, List[Any]]:
        return self.shaper.fetch_group(query, args, style)

    def fetch_object(
        self,
        query: str,
        values: Any = None,
        factory: Optional[Callable[..., Any]] = None,
        args: Union[Sequence[Any], Mapping[Any, Any]] = (),
        args_overwrite: bool = False,
    ) -> Any:
        return self.shaper.fetch_object(query, values, factory, args, args_overwrite)

    def fetch_objects(
        self,
        query: str,
        values: Any = None,
        factory: Optional[Callable[..., Any]] = None,
        args: Union[Sequence[Any], Mapping[Any, Any]] = (),
        args_overwrite: bool = False,
    ) -> List[Any]:
        return self.shaper.fetch_objects(query, values, factory, args, args_overwrite)


# ---------------------------------------------------------------------------
# Concrete wrappers
# ---------------------------------------------------------------------------

class SQLiteWrapper(DBWrapper):
    """
    Wrapper over a single SQLite database file.

    Parameters
    ----------
    path:
        Database file (created on first connect), or ":memory:".
    options:
        Option map; see sqlwrap.config.DEFAULT_OPTIONS.
    """

    def __init__(self, path: str, options: Optional[Mapping[str, Any]] = None):
        super().__init__(SQLiteBackend(SQLiteConfig(path, options or {})))


class PostgresWrapper(DBWrapper):
    """
    Wrapper over a networked PostgreSQL database.
    """

    def __init__(
        self,
        host: str,
        name: str,
        user: str,
        password: str,
        port: Optional[int] = None,
        options: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(
            PostgresBackend(
                PostgresConfig(host, name, user, password, port, options or {})
            )
        )

    def last_insert_id(self) -> str:
        """
        Last sequence value generated in this session.

        Only meaningful after an INSERT on the open connection.
        """
        if not self.connector.is_connected:
            raise DBConnectionError("last_insert_id() needs an open connection")
        return self.connector.backend.last_insert_id(self.get_handle())


# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------

def create_wrapper(
    config: Optional[Union[LoadedConfig, SQLiteConfig, PostgresConfig]] = None,
) -> DBWrapper:
    """
    Instantiate the appropriate wrapper for a configuration.

    With no argument the configuration is read from the environment
    (see sqlwrap.config.load_config).
    """
    cfg = config or load_config()

    if isinstance(cfg, LoadedConfig):
        if cfg.enable_logging:
            logging.basicConfig(level=logging.INFO)
            logger.info("Initializing sqlwrap with config: %s", cfg.connection)
        cfg = cfg.connection

    if isinstance(cfg, SQLiteConfig):
        return SQLiteWrapper(cfg.path, cfg.options)
    if isinstance(cfg, PostgresConfig):
        return PostgresWrapper(cfg.host, cfg.name, cfg.user, cfg.password, cfg.port, cfg.options)

    raise ValueError(f"Unsupported sqlwrap configuration: {cfg!r}")


__all__ = [
    "DBWrapper",
    "SQLiteWrapper",
    "PostgresWrapper",
    "create_wrapper",
]
