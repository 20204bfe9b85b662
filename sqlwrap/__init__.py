"""
sqlwrap

Thin convenience layer over DB-API drivers: lazy connections,
parameter binding and result-shaping helpers.

Submodules include:
    - db/        (backends + lazy Connector)
    - executor   (argument binding + execution)
    - shaper     (fetch styles + result shaping)
    - core       (public wrappers)
    - config
    - errors
"""

from .config import PostgresConfig, SQLiteConfig, load_config
from .core import DBWrapper, PostgresWrapper, SQLiteWrapper, create_wrapper
from .errors import (
    BindError,
    BindTypeError,
    DBConnectionError,
    HydrationError,
    SQLWrapError,
)
from .executor import ParamType
from .shaper import FetchStyle, GroupedStyle

__all__ = [
    "DBWrapper",
    "SQLiteWrapper",
    "PostgresWrapper",
    "create_wrapper",
    "SQLiteConfig",
    "PostgresConfig",
    "load_config",
    "FetchStyle",
    "GroupedStyle",
    "ParamType",
    "SQLWrapError",
    "DBConnectionError",
    "BindError",
    "BindTypeError",
    "HydrationError",
]
