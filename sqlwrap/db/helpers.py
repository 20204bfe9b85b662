"""
Shared DB-API helper utilities.

These wrappers ensure:
    - consistent cursor execution across backends
    - predictable column naming from cursor.description

Backends import this module as `.helpers`
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence, Union

Params = Optional[Union[Sequence[Any], dict]]


# ----------------------------------------------------------------------
# Execution helpers
# ----------------------------------------------------------------------

def execute_cursor(conn: Any, query: str, params: Params = None):
    """
    Execute a single SQL statement on a fresh cursor.
    Returns the cursor.

    Parameters
    ----------
    conn:
        DB-API compatible connection object (sqlite3, psycopg2, etc.).
    query:
        SQL string, already in the driver's placeholder style.
    params:
        Parameter list or dict; None executes without parameters.

    Driver errors propagate unchanged.
    """
    cur = conn.cursor()
    if params is None:
        cur.execute(query)
    else:
        cur.execute(query, params)
    return cur


# ----------------------------------------------------------------------
# Row mapping
# ----------------------------------------------------------------------

def column_names(cursor: Any) -> List[str]:
    """
    Column names of the current result set, in select order.

    Returns [] for statements that produce no result set.
    """
    if not cursor.description:
        return []
    return [d[0] for d in cursor.description]


__all__ = [
    "execute_cursor",
    "column_names",
]
