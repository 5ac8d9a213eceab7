"""Statement operations: thin adapters from statements to Storage/Table calls.

Each operation holds only a reference to Storage and keeps no state of its
own between calls.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from simpledb.application.storage import Storage
from simpledb.domain.entities import Row, TableView
from simpledb.domain.value_objects import Value, ValueKind

ALL_COLUMNS = "*"


class CreateQuery:
    """Creates tables."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def create_table(
        self,
        name: str,
        columns: Sequence[str],
        types: Sequence[ValueKind] | None = None,
    ) -> None:
        """Register a new table.

        Raises:
            TableAlreadyExistsError: If the name is taken.
            SchemaError: If the schema is invalid.
        """
        self._storage.create_table(name, columns, types)


class InsertQuery:
    """Appends rows to tables."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def insert_into(self, name: str, values: Sequence[Value]) -> None:
        """Append one row to a table.

        Raises:
            TableNotFoundError: If the table does not exist.
            ArityMismatchError: If the value count differs from the column count.
            TypeMismatchError: If a value conflicts with a declared column type.
        """
        self._storage.get_table(name).insert_row(values)


class SelectQuery:
    """Reads rows and projections from tables.

    Projections are returned as a mapping from column name to the column's
    values, with keys in the requested order and values in row order.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def select_all(self, name: str) -> TableView:
        """Return a read-only view of the whole table.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        return self._storage.get_table_const(name)

    def select_columns(self, name: str, columns: Sequence[str]) -> dict[str, list[Value]]:
        """Project the requested columns over every row.

        Every column is resolved before any output is built, so an unknown
        column produces no partial result.

        Args:
            name: Table to read.
            columns: Column names in output order; ``["*"]`` means all.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnNotFoundError: If any requested column does not exist.
        """
        table = self._storage.get_table_const(name)
        positions = self._resolve(table, columns)
        return self._project(table, positions, None)

    def select_where(
        self,
        name: str,
        columns: Sequence[str],
        value: Value,
        condition_column: str,
    ) -> dict[str, list[Value]]:
        """Project the requested columns over rows where ``condition_column == value``.

        Matching uses tag-sensitive Value equality. A value that matches no
        row yields an empty list for every requested column.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnNotFoundError: If a requested or condition column does not exist.
        """
        table = self._storage.get_table_const(name)
        positions = self._resolve(table, columns)
        condition = (table.index_of(condition_column), value)
        return self._project(table, positions, condition)

    def select_rows(
        self,
        name: str,
        columns: Sequence[str],
        condition: tuple[str, Value] | None = None,
    ) -> tuple[list[str], list[list[Value]]]:
        """Return output column names and row-major values for a projection.

        Unlike the mapping form, repeated column names are kept as separate
        output columns.

        Args:
            name: Table to read.
            columns: Column names in output order; ``["*"]`` means all.
            condition: Optional ``(column, value)`` equality filter.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnNotFoundError: If a requested or condition column does not exist.
        """
        table = self._storage.get_table_const(name)
        positions = self._resolve(table, columns)
        resolved = None
        if condition is not None:
            resolved = (table.index_of(condition[0]), condition[1])
        rows = [
            [row[position] for _, position in positions]
            for row in self._matching(table, resolved)
        ]
        return [column for column, _ in positions], rows

    @staticmethod
    def _resolve(table: TableView, columns: Sequence[str]) -> list[tuple[str, int]]:
        if list(columns) == [ALL_COLUMNS]:
            columns = table.column_names()
        return [(column, table.index_of(column)) for column in columns]

    @staticmethod
    def _project(
        table: TableView,
        positions: list[tuple[str, int]],
        condition: tuple[int, Value] | None,
    ) -> dict[str, list[Value]]:
        result: dict[str, list[Value]] = {column: [] for column, _ in positions}
        for row in SelectQuery._matching(table, condition):
            for column, position in positions:
                result[column].append(row[position])
        return result

    @staticmethod
    def _matching(table: TableView, condition: tuple[int, Value] | None) -> Iterator[Row]:
        for row in table.rows():
            if condition is None or row[condition[0]] == condition[1]:
                yield row
