"""
Connection configuration for sqlwrap.

This module centralizes:

    - the immutable connection records used by each connector
          * SQLiteConfig   (single database file)
          * PostgresConfig (networked host/port/credentials)
    - the recognized option keys and their defaults
    - loading a configuration from environment variables

It provides:
    SQLiteConfig, PostgresConfig  – frozen connection records
    load_config()                 – load from environment variables or defaults
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .shaper import FetchStyle


# ----------------------------------------------------------------------
# Options
# ----------------------------------------------------------------------

#: Option keys consumed by sqlwrap itself. Everything else in an option
#: map is forwarded to the driver's connect() call.
FETCH_STYLE = "fetch_style"
ERROR_MODE = "error_mode"
NULL_EMPTY_VALUES = "null_empty_values"

DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType({
    FETCH_STYLE: FetchStyle.ASSOC,
    ERROR_MODE: "exception",
    NULL_EMPTY_VALUES: True,
})

WRAPPER_OPTIONS = frozenset(DEFAULT_OPTIONS)


def _merge_options(options: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """
    Merge caller options over the defaults and freeze the result.

    Raises
    ------
    ValueError
        If `error_mode` is anything other than "exception", or
        `fetch_style` is not a FetchStyle.
    """
    merged: Dict[str, Any] = dict(DEFAULT_OPTIONS)
    merged.update(options or {})

    if merged[ERROR_MODE] != "exception":
        raise ValueError(
            f"Unsupported error_mode {merged[ERROR_MODE]!r}: only 'exception' is available"
        )
    if not isinstance(merged[FETCH_STYLE], FetchStyle):
        raise ValueError(f"fetch_style must be a FetchStyle, got {merged[FETCH_STYLE]!r}")

    return MappingProxyType(merged)


class _OptionsMixin:
    """Accessors shared by both connection records."""

    options: Mapping[str, Any]

    @property
    def fetch_style(self) -> FetchStyle:
        return self.options[FETCH_STYLE]

    @property
    def null_empty_values(self) -> bool:
        return bool(self.options[NULL_EMPTY_VALUES])

    @property
    def driver_options(self) -> Dict[str, Any]:
        """Options forwarded verbatim to the driver's connect()."""
        return {k: v for k, v in self.options.items() if k not in WRAPPER_OPTIONS}


# ----------------------------------------------------------------------
# Connection records
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class SQLiteConfig(_OptionsMixin):
    """
    Connection record for a single-file SQLite database.

    Attributes
    ----------
    path:
        Path to the database file, or ":memory:".
        Note that an in-memory database does not survive disconnect().

    options:
        Option map; see DEFAULT_OPTIONS for the keys sqlwrap consumes.
        Other keys (timeout, detect_types, ...) go to sqlite3.connect().
    """

    path: str
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "path", str(self.path))
        object.__setattr__(self, "options", _merge_options(self.options))


@dataclass(frozen=True)
class PostgresConfig(_OptionsMixin):
    """
    Connection record for a networked PostgreSQL database.

    Attributes
    ----------
    host, name, user, password:
        Server host, database name and credentials.

    port:
        Optional TCP port; libpq's default applies when None.

    options:
        Option map; keys not consumed by sqlwrap (connect_timeout,
        sslmode, application_name, ...) go to psycopg2.connect().
    """

    host: str
    name: str
    user: str
    password: str = field(repr=False)
    port: Optional[int] = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "options", _merge_options(self.options))


ConnectionConfig = Union[SQLiteConfig, PostgresConfig]


# ----------------------------------------------------------------------
# Environment loader
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class LoadedConfig:
    """
    Result of load_config(): the connection record plus process-level flags.
    """

    connection: ConnectionConfig
    enable_logging: bool = False


def load_config() -> LoadedConfig:
    """
    Load a connection configuration from environment variables,
    falling back to defaults.

    Recognized variables:
        SQLWRAP_DRIVER          (sqlite|postgres)
        SQLWRAP_PATH            (SQLite database file)
        SQLWRAP_HOST            (PostgreSQL host)
        SQLWRAP_PORT            (PostgreSQL port, optional)
        SQLWRAP_NAME            (PostgreSQL database name)
        SQLWRAP_USER            (PostgreSQL user)
        SQLWRAP_PASSWORD        (PostgreSQL password)
        SQLWRAP_ENABLE_LOGGING  ("true" / "false" / "1" / "0")

    Returns
    -------
    LoadedConfig

    Raises
    ------
    ValueError
        Unknown driver name or non-integer port.
    """

    def _env_flag(name: str, default: bool) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in ("1", "true", "yes", "on")

    driver = os.getenv("SQLWRAP_DRIVER", "sqlite").strip().lower()

    if driver == "sqlite":
        connection: ConnectionConfig = SQLiteConfig(
            path=os.getenv("SQLWRAP_PATH", "sqlwrap.db"),
        )
    elif driver in ("postgres", "postgresql", "psql"):
        port = os.getenv("SQLWRAP_PORT")
        try:
            port_num = int(port) if port else None
        except ValueError:
            raise ValueError(f"SQLWRAP_PORT must be an integer, got {port!r}") from None

        connection = PostgresConfig(
            host=os.getenv("SQLWRAP_HOST", "localhost"),
            name=os.getenv("SQLWRAP_NAME", ""),
            user=os.getenv("SQLWRAP_USER", ""),
            password=os.getenv("SQLWRAP_PASSWORD", ""),
            port=port_num,
        )
    else:
        raise ValueError(f"Unsupported sqlwrap driver: {driver!r}")

    return LoadedConfig(
        connection=connection,
        enable_logging=_env_flag("SQLWRAP_ENABLE_LOGGING", default=False),
    )


__all__ = [
    "DEFAULT_OPTIONS",
    "SQLiteConfig",
    "PostgresConfig",
    "ConnectionConfig",
    "LoadedConfig",
    "load_config",
]
