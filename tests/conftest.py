"""
Pytest configuration and shared fixtures.

Makes the repository root importable so `import sqlwrap` works without
installing the package, and provides a seeded SQLite wrapper.
"""

import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_sys_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_repo_root_on_sys_path()

from sqlwrap import SQLiteWrapper  # noqa: E402


SCHEMA = """
CREATE TABLE users (
    id     INTEGER PRIMARY KEY,
    team   INTEGER,
    name   TEXT NOT NULL,
    score  INTEGER
)
"""

SEED = [
    (1, "ann", 10),
    (1, "bob", 20),
    (2, "cid", 30),
]


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "sqlwrap_test.db")


@pytest.fixture
def db(db_path):
    """SQLiteWrapper over a fresh file holding three users."""
    wrapper = SQLiteWrapper(db_path)
    wrapper.query(SCHEMA)
    for team, name, score in SEED:
        wrapper.transact(
            "INSERT INTO users (team, name, score) VALUES (?, ?, ?)",
            [team, name, score],
        )
    yield wrapper
    wrapper.disconnect()
