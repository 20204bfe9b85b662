"""
Query Executor tests: placeholder detection, argument classification
and the bind-or-pass-through decision.

Run with: pytest tests/test_executor.py -v
"""

import logging
from collections import namedtuple
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from sqlwrap.errors import BindError, BindTypeError
from sqlwrap.executor import (
    ParamType,
    QueryExecutor,
    args_to_params,
    classify_argument,
    collect_params,
    has_placeholders,
    normalize_bools,
)


class TestHasPlaceholders:
    """Placeholder-presence heuristic."""

    @pytest.mark.parametrize(
        "query",
        [
            "SELECT * FROM users WHERE id = :id",
            "SELECT * FROM users WHERE id = ?",
            "SELECT * FROM users WHERE id IN (?, ?)",
            "SELECT * FROM users WHERE score >?",
            "INSERT INTO users (name) VALUES (:name)",
        ],
    )
    def test_detects_placeholders(self, query):
        assert has_placeholders(query)

    @pytest.mark.parametrize(
        "query",
        [
            "SELECT * FROM users",
            "SELECT id::text FROM users",
            "SELECT '10:30' AS t",
            "SELECT * FROM users LIMIT ?",
        ],
    )
    def test_ignores_non_placeholders(self, query):
        assert not has_placeholders(query)


class TestNormalizeBools:
    def test_nested_containers(self):
        args = {"a": True, "b": [False, (True, "x")], "c": None}
        assert normalize_bools(args) == {"a": 1, "b": [0, (1, "x")], "c": None}

    def test_keeps_container_types(self):
        assert isinstance(normalize_bools((True,)), tuple)

    def test_named_tuples_rebuilt(self):
        Pair = namedtuple("Pair", "flag label")
        result = normalize_bools(Pair(True, "x"))
        assert result == Pair(1, "x")
        assert type(result) is Pair
        assert normalize_bools([True, 2]) == [1, 2]


class TestClassifyArgument:
    """Bound-type inference."""

    @pytest.mark.parametrize("value", [0, "", False, None, "0", 0.0, Decimal(0), [], {}])
    def test_empty_values_bind_null(self, value):
        arg = classify_argument(0, value)
        assert arg.param_type is ParamType.NULL
        assert arg.value is None

    @pytest.mark.parametrize(
        "value, expected",
        [
            (42, 42),
            ("17", 17),
            (" 12 ", 12),
            (3.9, 3),
            ("2.5", 2),
            ("1e3", 1000),
            (Decimal("7.8"), 7),
        ],
    )
    def test_numeric_values_bind_truncated_integers(self, value, expected):
        arg = classify_argument("n", value)
        assert arg.param_type is ParamType.INTEGER
        assert arg.value == expected

    def test_strings_bind_as_string(self):
        arg = classify_argument(":name", "ann")
        assert arg == classify_argument("name", "ann")
        assert arg.key == "name"
        assert arg.param_type is ParamType.STRING

    def test_bytes_bind_as_string(self):
        assert classify_argument(0, b"\x00\x01").param_type is ParamType.STRING

    def test_true_binds_as_boolean(self):
        arg = classify_argument(0, True)
        assert arg.param_type is ParamType.BOOLEAN
        assert arg.value is True

    def test_non_scalar_raises(self):
        with pytest.raises(BindTypeError) as excinfo:
            classify_argument("ids", [1, 2])
        assert excinfo.value.key == "ids"
        assert excinfo.value.type_name == "list"
        assert "'list'" in str(excinfo.value)
        assert "'ids'" in str(excinfo.value)

    @pytest.mark.parametrize("value", [float("inf"), float("nan"), "1e400", "-1e400"])
    def test_non_finite_numbers_raise(self, value):
        with pytest.raises(BindTypeError):
            classify_argument(0, value)

    def test_literal_empties_kept_when_policy_disabled(self):
        assert classify_argument(0, 0, null_empty=False).param_type is ParamType.INTEGER
        assert classify_argument(0, 0, null_empty=False).value == 0
        assert classify_argument(0, "", null_empty=False).param_type is ParamType.STRING
        assert classify_argument(0, None, null_empty=False).param_type is ParamType.NULL


class TestCollectParams:
    def test_positional_keys_in_key_order(self):
        assert collect_params([(1, "b"), (0, "a"), ("2", "c")]) == ["a", "b", "c"]

    def test_named_keys_lose_colon(self):
        assert collect_params([(":id", 1), ("name", "x")]) == {"id": 1, "name": "x"}

    def test_mixed_keys_raise(self):
        with pytest.raises(BindError):
            collect_params([(0, "a"), ("name", "x")])

    def test_empty_args_become_none(self):
        assert args_to_params(None) is None
        assert args_to_params([]) is None
        assert args_to_params({}) is None

    def test_scalar_args_rejected(self):
        with pytest.raises(BindError):
            args_to_params("not a collection")


@pytest.fixture
def connector():
    conn = MagicMock()
    conn.get_handle.return_value = "HANDLE"
    conn.backend.execute.return_value.rowcount = 3
    return conn


class TestQueryExecutor:
    """Bind-or-pass-through decisions, observed at the backend."""

    def test_no_placeholders_passes_args_through(self, connector):
        executor = QueryExecutor(connector)
        executor.run("SELECT * FROM users LIMIT ?", [0, "x"])

        connector.backend.execute.assert_called_once_with(
            "HANDLE", "SELECT * FROM users LIMIT ?", [0, "x"]
        )

    def test_no_args_executes_without_params(self, connector):
        QueryExecutor(connector).run("SELECT * FROM users WHERE id = ?")
        connector.backend.execute.assert_called_once_with(
            "HANDLE", "SELECT * FROM users WHERE id = ?", None
        )

    def test_placeholders_bind_every_argument(self, connector):
        sql = "UPDATE users SET name = :name, score = :score WHERE id = :id"
        QueryExecutor(connector).run(sql, {":id": "5", "name": "ann", "score": 0})

        connector.backend.execute.assert_called_once_with(
            "HANDLE", sql, {"id": 5, "name": "ann", "score": None}
        )

    def test_positional_binding_builds_list(self, connector):
        sql = "SELECT * FROM users WHERE team = ? AND name = ?"
        QueryExecutor(connector).run(sql, (2, "cid"))

        connector.backend.execute.assert_called_once_with("HANDLE", sql, [2, "cid"])

    def test_booleans_become_integers(self, connector):
        sql = "SELECT * FROM users WHERE active = ? OR admin = ?"
        QueryExecutor(connector).run(sql, [True, False])

        # False -> 0 -> empty -> NULL
        connector.backend.execute.assert_called_once_with("HANDLE", sql, [1, None])

    def test_bind_type_error_stops_before_execute(self, connector):
        executor = QueryExecutor(connector)
        with pytest.raises(BindTypeError):
            executor.run("SELECT * FROM users WHERE id = ? AND name = ?", [1, object()])

        connector.backend.execute.assert_not_called()

    def test_null_policy_can_be_disabled(self, connector):
        sql = "SELECT * FROM users WHERE score = ?"
        QueryExecutor(connector, null_empty_values=False).run(sql, [0])

        connector.backend.execute.assert_called_once_with("HANDLE", sql, [0])

    def test_transact_returns_rowcount(self, connector):
        count = QueryExecutor(connector).transact("DELETE FROM users WHERE id = ?", [1])
        assert count == 3

    def test_query_skips_binding(self, connector):
        QueryExecutor(connector).query("SELECT :not_bound")
        connector.backend.execute.assert_called_once_with("HANDLE", "SELECT :not_bound", None)

    def test_named_tuple_args_bind_positionally(self, connector):
        Row = namedtuple("Row", "active name")
        sql = "SELECT * FROM users WHERE active = ? AND name = ?"
        QueryExecutor(connector).run(sql, Row(True, "ann"))

        connector.backend.execute.assert_called_once_with("HANDLE", sql, [1, "ann"])

    def test_bound_types_are_logged(self, connector, caplog):
        sql = "UPDATE users SET score = :score WHERE id = :id AND name = :name"
        with caplog.at_level(logging.DEBUG, logger="sqlwrap.executor"):
            QueryExecutor(connector).run(sql, {"id": "5", "score": 0, "name": "ann"})

        assert "id=integer" in caplog.text
        assert "score=null" in caplog.text
        assert "name=string" in caplog.text
