"""
Result shaping for sqlwrap.

Turns an executed DB-API cursor into one of the caller-facing shapes:

    - a single row                (fetch)
    - every row                   (fetch_all)
    - a single column value       (fetch_col)
    - rows grouped by column one  (fetch_group)
    - hydrated objects            (fetch_object / fetch_objects)

Rows are shaped from plain tuples plus cursor.description, so the same
code serves every backend regardless of its row factory.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .db.helpers import column_names
from .errors import HydrationError


class FetchStyle(Enum):
    """Row shapes understood by the Result Shaper."""

    ASSOC = "assoc"    # {column: value}
    NUM = "num"        # [value, ...]
    BOTH = "both"      # {column: value, index: value, ...}
    COLUMN = "column"  # value of the first column

    def grouped(self) -> "GroupedStyle":
        """Group rows by their first column, shaping the rest with this style."""
        return GroupedStyle(self)


@dataclass(frozen=True)
class GroupedStyle:
    inner: FetchStyle


StyleLike = Union[FetchStyle, GroupedStyle]


# ----------------------------------------------------------------------
# Row shaping
# ----------------------------------------------------------------------

def shape_row(columns: Sequence[str], values: Sequence[Any], style: FetchStyle) -> Any:
    """
    Render one raw row in the requested style.

    Raises
    ------
    ValueError
        COLUMN style on a row without columns.
    """
    if style is FetchStyle.ASSOC:
        return dict(zip(columns, values))
    if style is FetchStyle.NUM:
        return list(values)
    if style is FetchStyle.BOTH:
        row: Dict[Any, Any] = {}
        for index, (name, value) in enumerate(zip(columns, values)):
            row[name] = value
            row[index] = value
        return row
    if style is FetchStyle.COLUMN:
        if not values:
            raise ValueError("COLUMN style needs at least one column")
        return values[0]
    raise ValueError(f"Unknown fetch style: {style!r}")


def empty_row(style: FetchStyle) -> Any:
    """The value fetch() returns when no row matched."""
    if style is FetchStyle.COLUMN:
        return None
    if style is FetchStyle.NUM:
        return []
    return {}


def group_rows(
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    inner: FetchStyle,
) -> Dict[Any, List[Any]]:
    """
    Group rows under the distinct values of their first column.

    Rows sharing a key accumulate in query order; keys keep the order
    in which they were first seen.
    """
    if len(columns) < 2:
        raise ValueError("Grouping needs at least two result columns")

    rest = columns[1:]
    grouped: Dict[Any, List[Any]] = {}
    for values in rows:
        grouped.setdefault(values[0], []).append(shape_row(rest, values[1:], inner))
    return grouped


def merge_constructor_args(
    row: Mapping[str, Any],
    args: Union[Sequence[Any], Mapping[Any, Any]],
    args_overwrite: bool,
) -> List[Any]:
    """
    Build the positional arguments used to hydrate one row.

    args_overwrite=True   -> only `args`
    args_overwrite=False  -> row values in column order, then `args`.

    A mapping `args` merges like an associative array: string keys that
    name a column replace that column's value in place, every other
    entry is appended.
    """
    if isinstance(args, Mapping):
        if args_overwrite:
            return list(args.values())
        merged: Dict[Any, Any] = dict(row)
        appended: List[Any] = []
        for key, value in args.items():
            if isinstance(key, str):
                merged[key] = value
            else:
                appended.append(value)
        return list(merged.values()) + appended

    if args_overwrite:
        return list(args)
    return list(row.values()) + list(args)


# ----------------------------------------------------------------------
# Shaper
# ----------------------------------------------------------------------

class ResultShaper:
    """
    Runs queries through a QueryExecutor and shapes their results.

    Parameters
    ----------
    executor:
        QueryExecutor used to bind and execute every query.
    default_style:
        Style used by fetch() / fetch_all() when none is given.
    """

    def __init__(self, executor, default_style: FetchStyle = FetchStyle.ASSOC):
        self.executor = executor
        self.default_style = default_style

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def fetch(self, query: str, args: Any = None, style: Optional[FetchStyle] = None) -> Any:
        """
        Return the first row of `query`.

        With no matching row: None for COLUMN style, otherwise an empty
        container ({} or []).
        """
        style = style or self.default_style
        if isinstance(style, GroupedStyle):
            raise ValueError("Grouped styles apply to fetch_all() only")

        cur = self.executor.run(query, args)
        row = cur.fetchone() if cur.description else None
        if row is None:
            return empty_row(style)
        return shape_row(column_names(cur), tuple(row), style)

    def fetch_all(self, query: str, args: Any = None, style: Optional[StyleLike] = None) -> Any:
        """
        Return every row of `query`.

        With no matching rows: [] ({} for grouped styles).
        """
        style = style or self.default_style
        cur = self.executor.run(query, args)
        rows = [tuple(r) for r in cur.fetchall()] if cur.description else []
        columns = column_names(cur)

        if isinstance(style, GroupedStyle):
            if not rows:
                return {}
            return group_rows(columns, rows, style.inner)
        return [shape_row(columns, r, style) for r in rows]

    def fetch_col(self, query: str, args: Any = None) -> Any:
        """Return the first column of the first row, or None."""
        return self.fetch(query, args, FetchStyle.COLUMN)

    def fetch_group(
        self,
        query: str,
        args: Any = None,
        style: FetchStyle = FetchStyle.COLUMN,
    ) -> Dict[Any, List[Any]]:
        """
        Group result rows by the first selected column.

        e.g. rows (1, 'a'), (1, 'b'), (2, 'c') -> {1: ['a', 'b'], 2: ['c']}
        """
        return self.fetch_all(query, args, style.grouped())

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    def fetch_object(
        self,
        query: str,
        values: Any = None,
        factory: Optional[Callable[..., Any]] = None,
        args: Union[Sequence[Any], Mapping[Any, Any]] = (),
        args_overwrite: bool = False,
    ) -> Any:
        """
        Hydrate the first row of `query` with `factory`.

        Returns None when no row matched.
        """
        _check_factory(factory)

        row = self.fetch(query, values, FetchStyle.ASSOC)
        if not row:
            return None
        return factory(*merge_constructor_args(row, args, args_overwrite))

    def fetch_objects(
        self,
        query: str,
        values: Any = None,
        factory: Optional[Callable[..., Any]] = None,
        args: Union[Sequence[Any], Mapping[Any, Any]] = (),
        args_overwrite: bool = False,
    ) -> List[Any]:
        """
        Hydrate every row of `query` with `factory`.

        Returns [] when no row matched.
        """
        _check_factory(factory)

        rows = self.fetch_all(query, values, FetchStyle.ASSOC)
        return [
            factory(*merge_constructor_args(row, args, args_overwrite))
            for row in rows
            if row
        ]


def _check_factory(factory: Any) -> None:
    if not factory:
        raise HydrationError("Object factory cannot be empty")
    if not callable(factory):
        raise HydrationError(f"Object factory {factory!r} is not callable")


__all__ = [
    "FetchStyle",
    "GroupedStyle",
    "StyleLike",
    "ResultShaper",
    "shape_row",
    "group_rows",
    "merge_constructor_args",
]
