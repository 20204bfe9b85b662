"""
Query execution and parameter binding for sqlwrap.

QueryExecutor.run() takes SQL text plus a loosely-typed argument
collection and:

    1. converts booleans to integers (recursively),
    2. decides whether the SQL contains placeholders worth binding,
    3. classifies every argument into a ParamType and binds it,
    4. executes and returns the live DB-API cursor.

Argument collections are either a sequence (positional) or a mapping.
Mapping keys that are ints or all-digit strings are positional; any
other key names a `:placeholder` (a leading ':' is optional).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from .db.helpers import Params
from .errors import BindError, BindTypeError

logger = logging.getLogger(__name__)

Key = Union[int, str]


class ParamType(Enum):
    NULL = "null"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"


@dataclass(frozen=True)
class BoundArgument:
    key: Key
    value: Any
    param_type: ParamType


# ----------------------------------------------------------------------
# Argument inspection
# ----------------------------------------------------------------------

_NAMED_PLACEHOLDER = re.compile(r"(?<![\w:]):[A-Za-z_]\w*")
_POSITIONAL_PLACEHOLDER = re.compile(r"[(=<>,]\s*\?")
_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def has_placeholders(query: str) -> bool:
    """
    True if `query` looks like it contains a `:name` placeholder or a
    `?` placeholder following one of ( = < > , .
    """
    return bool(
        _NAMED_PLACEHOLDER.search(query) or _POSITIONAL_PLACEHOLDER.search(query)
    )


def normalize_bools(args: Any) -> Any:
    """
    Return a copy of `args` with every bool replaced by 0/1, descending
    into lists, tuples (named tuples included) and dicts.

    Some drivers reject native booleans for integer-ish columns.
    """
    if isinstance(args, bool):
        return int(args)
    if isinstance(args, dict):
        return {k: normalize_bools(v) for k, v in args.items()}
    if isinstance(args, tuple) and hasattr(args, "_make"):
        return args._make(normalize_bools(v) for v in args)
    if isinstance(args, (list, tuple)):
        return type(args)(normalize_bools(v) for v in args)
    return args


def is_empty(value: Any) -> bool:
    """
    Loose emptiness: None, False, 0, 0.0, "", "0" and empty containers.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (int, float, Decimal, bytes, bytearray, list, tuple, dict, set, frozenset)):
        return not value
    return False


def is_numeric(value: Any) -> bool:
    """Finite int / float / Decimal, or a string holding a number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return math.isfinite(value)
    if isinstance(value, str):
        return bool(_NUMERIC_STRING.match(value))
    return False


def to_integer(value: Any) -> int:
    """Truncate a numeric value (see is_numeric) to int."""
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            return int(float(value))
    return int(value)


def classify_argument(key: Key, value: Any, null_empty: bool = True) -> BoundArgument:
    """
    Decide how one argument is bound.

    empty    -> NULL     (None when null_empty is False)
    bool     -> BOOLEAN
    numeric  -> INTEGER  (truncated)
    str      -> STRING   (bytes too)

    Raises
    ------
    BindTypeError
        For any other type, and for numeric strings out of float range.
    """
    key = normalize_key(key)

    if value is None or (null_empty and is_empty(value)):
        return BoundArgument(key, None, ParamType.NULL)
    if isinstance(value, bool):
        return BoundArgument(key, value, ParamType.BOOLEAN)
    if is_numeric(value):
        if isinstance(value, str) and not math.isfinite(float(value)):
            # e.g. "1e400"
            raise BindTypeError(key, value)
        return BoundArgument(key, to_integer(value), ParamType.INTEGER)
    if isinstance(value, (str, bytes, bytearray)):
        return BoundArgument(key, value, ParamType.STRING)
    raise BindTypeError(key, value)


def normalize_key(key: Key) -> Key:
    """
    Positional keys become ints; named keys lose any leading ':'.
    """
    if isinstance(key, int):
        return key
    name = str(key).lstrip(":")
    return int(name) if name.isdigit() else name


def argument_items(args: Any) -> List[Tuple[Key, Any]]:
    """(key, value) pairs of a sequence or mapping argument collection."""
    if isinstance(args, Mapping):
        return list(args.items())
    if isinstance(args, Sequence) and not isinstance(args, (str, bytes, bytearray)):
        return list(enumerate(args))
    raise BindError(
        f"Arguments must be a sequence or a mapping, got {type(args).__name__}"
    )


def collect_params(items: Iterable[Tuple[Key, Any]]) -> Params:
    """
    Turn (key, value) pairs into a driver parameter list (positional
    keys, in key order) or dict (named keys).

    Raises
    ------
    BindError
        When positional and named keys are mixed.
    """
    positional: Dict[int, Any] = {}
    named: Dict[str, Any] = {}
    for key, value in items:
        key = normalize_key(key)
        if isinstance(key, int):
            positional[key] = value
        else:
            named[key] = value

    if positional and named:
        raise BindError("Cannot mix positional and named arguments in one query")
    if named:
        return named
    return [positional[k] for k in sorted(positional)]


def args_to_params(args: Any) -> Params:
    """Raw argument collection -> driver parameters, or None when empty."""
    if args is None or (hasattr(args, "__len__") and len(args) == 0):
        return None
    return collect_params(argument_items(args))


# ----------------------------------------------------------------------
# Prepared statement
# ----------------------------------------------------------------------

class PreparedStatement:
    """
    A query plus the values bound to it, executed through the backend.
    """

    def __init__(self, backend: Any, conn: Any, query: str):
        self.backend = backend
        self.conn = conn
        self.query = query
        self.bound: List[BoundArgument] = []
        self.cursor: Any = None

    def bind_value(self, key: Key, value: Any, param_type: ParamType) -> None:
        self.bound.append(BoundArgument(normalize_key(key), value, param_type))

    def execute(self, args: Any = None):
        """
        Execute with `args` when given, otherwise with the bound values.

        DB-API binding is untyped: only each value reaches the driver,
        already converted for its param_type.
        """
        if args is not None:
            params = args_to_params(args)
        elif self.bound:
            params = collect_params((b.key, b.value) for b in self.bound)
        else:
            params = None

        self.cursor = self.backend.execute(self.conn, self.query, params)
        return self.cursor


# ----------------------------------------------------------------------
# Executor
# ----------------------------------------------------------------------

class QueryExecutor:
    """
    Binds and executes queries on a Connector's handle.

    Parameters
    ----------
    connector:
        Connector providing the backend and the lazily-opened handle.
    null_empty_values:
        Bind loosely-empty values (0, "", "0", ...) as NULL.
    """

    def __init__(self, connector, null_empty_values: bool = True):
        self.connector = connector
        self.null_empty_values = null_empty_values

    def prepare(self, query: str) -> PreparedStatement:
        conn = self.connector.get_handle()
        return PreparedStatement(self.connector.backend, conn, query)

    def bind_values(self, stmt: PreparedStatement, query: str, args: Any) -> bool:
        """
        Bind every argument to `stmt` if `query` has placeholders.

        All arguments are classified before the first bind, so a
        BindTypeError leaves `stmt` untouched.

        Returns True if values were bound.
        """
        if not args or not has_placeholders(query):
            return False

        bound = [
            classify_argument(key, value, self.null_empty_values)
            for key, value in argument_items(args)
        ]
        for arg in bound:
            stmt.bind_value(arg.key, arg.value, arg.param_type)
        return True

    def run(self, query: str, args: Any = None):
        """
        Bind and execute `query`, returning the executed cursor.
        """
        args = normalize_bools(args)
        stmt = self.prepare(query)

        if self.bind_values(stmt, query, args):
            logger.debug(
                "Executing with bound argument(s): %s",
                ", ".join(f"{b.key}={b.param_type.value}" for b in stmt.bound),
            )
            return stmt.execute()

        logger.debug("Executing without binding")
        return stmt.execute(args or None)

    def transact(self, query: str, args: Any = None) -> int:
        """Execute a mutating statement and return the affected-row count."""
        return self.run(query, args).rowcount

    def query(self, statement: str):
        """Execute `statement` as-is, without arguments."""
        return self.prepare(statement).execute()


__all__ = [
    "ParamType",
    "BoundArgument",
    "PreparedStatement",
    "QueryExecutor",
    "has_placeholders",
    "normalize_bools",
    "classify_argument",
]
