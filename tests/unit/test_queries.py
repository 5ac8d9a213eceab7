"""Unit tests for the statement operations."""

from __future__ import annotations

import pytest

from simpledb.adapters.outbound import InMemoryTableStore
from simpledb.application import CreateQuery, InsertQuery, SelectQuery, Storage
from simpledb.domain.errors import (
    ArityMismatchError,
    ColumnNotFoundError,
    TableAlreadyExistsError,
    TableNotFoundError,
)
from simpledb.domain.value_objects import Value
from simpledb.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def mem_storage(metrics_registry: MetricsRegistry) -> Storage:
    """Create a storage holding a populated users table."""
    storage = Storage.open("mem", store=InMemoryTableStore(), metrics=metrics_registry)
    CreateQuery(storage).create_table("users", ["id", "name", "age"])
    insert = InsertQuery(storage)
    insert.insert_into("users", [Value.int(1), Value.str("Alice"), Value.bool(True)])
    insert.insert_into("users", [Value.int(2), Value.str("Bob"), Value.bool(False)])
    insert.insert_into("users", [Value.int(3), Value.str("Carol"), Value.bool(True)])
    return storage


@pytest.mark.unit
class TestCreateAndInsert:
    """Tests for CreateQuery and InsertQuery."""

    def test_create_twice(self, mem_storage: Storage) -> None:
        """A second CREATE of the same name fails."""
        with pytest.raises(TableAlreadyExistsError):
            CreateQuery(mem_storage).create_table("users", ["x"])

    def test_insert_unknown_table(self, mem_storage: Storage) -> None:
        """Inserting into a missing table fails."""
        with pytest.raises(TableNotFoundError):
            InsertQuery(mem_storage).insert_into("ghost", [Value.int(1)])

    def test_insert_wrong_arity(self, mem_storage: Storage) -> None:
        """Rows must match the column count."""
        with pytest.raises(ArityMismatchError):
            InsertQuery(mem_storage).insert_into("users", [Value.int(4)])
        assert mem_storage.get_table("users").row_count() == 3


@pytest.mark.unit
class TestSelect:
    """Tests for SelectQuery."""

    @pytest.fixture
    def select(self, mem_storage: Storage) -> SelectQuery:
        """Create a select operation over the populated storage."""
        return SelectQuery(mem_storage)

    def test_select_all(self, select: SelectQuery) -> None:
        """select_all returns a view of the whole table."""
        view = select.select_all("users")
        assert view.row_count() == 3
        assert view.column_names() == ["id", "name", "age"]

    def test_select_columns_order(self, select: SelectQuery) -> None:
        """Keys follow the requested order; values follow row order."""
        result = select.select_columns("users", ["name", "id"])

        assert list(result) == ["name", "id"]
        assert [v.as_str() for v in result["name"]] == ["Alice", "Bob", "Carol"]
        assert [v.as_int() for v in result["id"]] == [1, 2, 3]

    def test_select_columns_star(self, select: SelectQuery) -> None:
        """'*' expands to every column."""
        result = select.select_columns("users", ["*"])
        assert list(result) == ["id", "name", "age"]

    def test_select_unknown_column(self, select: SelectQuery) -> None:
        """An unknown column fails the whole projection."""
        with pytest.raises(ColumnNotFoundError):
            select.select_columns("users", ["name", "email"])

    def test_select_where(self, select: SelectQuery) -> None:
        """Only matching rows are projected."""
        result = select.select_where("users", ["name"], Value.bool(True), "age")
        assert result == {"name": [Value.str("Alice"), Value.str("Carol")]}

    def test_select_where_no_match(self, select: SelectQuery) -> None:
        """No match yields empty lists, not an error."""
        result = select.select_where("users", ["name", "id"], Value.str("nobody"), "name")
        assert result == {"name": [], "id": []}

    def test_select_where_is_tag_sensitive(self, select: SelectQuery) -> None:
        """Int 1 does not match bool true."""
        result = select.select_where("users", ["name"], Value.int(1), "age")
        assert result == {"name": []}

    def test_select_where_unknown_condition_column(self, select: SelectQuery) -> None:
        """The condition column must exist."""
        with pytest.raises(ColumnNotFoundError):
            select.select_where("users", ["name"], Value.int(1), "email")

    def test_select_unknown_table(self, select: SelectQuery) -> None:
        """Selecting from a missing table fails."""
        with pytest.raises(TableNotFoundError):
            select.select_columns("ghost", ["*"])

    def test_select_rows_keeps_repeated_columns(self, select: SelectQuery) -> None:
        """The row-major form keeps a column requested twice."""
        columns, rows = select.select_rows("users", ["id", "id"], ("name", Value.str("Bob")))

        assert columns == ["id", "id"]
        assert rows == [[Value.int(2), Value.int(2)]]

    def test_select_does_not_mutate(self, select: SelectQuery, mem_storage: Storage) -> None:
        """Reads leave the table unchanged."""
        select.select_where("users", ["*"], Value.bool(False), "age")
        assert mem_storage.get_table("users").row_count() == 3
