"""Table entity: a named column schema plus an append-only row list.

A table owns no I/O. Its schema is fixed at construction, except that a
column may be appended later with a default value back-filled into every
existing row.

Invariants:
    - Column names are unique.
    - Every row has exactly one value per column.
    - If column types are declared, every value's kind matches its column.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from simpledb.domain.errors import (
    ArityMismatchError,
    ColumnNotFoundError,
    DuplicateColumnError,
    IndexOutOfRangeError,
    SchemaError,
    TypeMismatchError,
)
from simpledb.domain.value_objects import Value, ValueKind

Row = tuple[Value, ...]


class Table:
    """A named, schema-fixed collection of rows.

    Example:
        >>> table = Table("users", ["id", "name"])
        >>> table.insert_row([Value.int(1), Value.str("Alice")])
        >>> table.get_value(0, "name")
        Value.str('Alice')
    """

    def __init__(
        self,
        name: str,
        columns: Sequence[str],
        column_types: Sequence[ValueKind] | None = None,
    ) -> None:
        """Initialize an empty table.

        Args:
            name: Table name (immutable).
            columns: Ordered, distinct column names.
            column_types: Optional declared kind for each column.

        Raises:
            SchemaError: If a column name repeats or the type list length
                differs from the column list.
        """
        self._name = name
        self._columns: list[str] = list(columns)
        self._index_of: dict[str, int] = {}
        for i, col in enumerate(self._columns):
            if col in self._index_of:
                raise SchemaError(
                    f"Duplicate column '{col}' in table '{name}'", table=name, column=col
                )
            self._index_of[col] = i

        self._column_types: list[ValueKind] | None = None
        if column_types is not None:
            if len(column_types) != len(self._columns):
                raise SchemaError(
                    f"Table '{name}' declares {len(self._columns)} columns "
                    f"but {len(column_types)} column types",
                    table=name,
                )
            self._column_types = list(column_types)

        self._rows: list[Row] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_typed(self) -> bool:
        """True if the table declares a kind for every column."""
        return self._column_types is not None

    def column_names(self) -> list[str]:
        return list(self._columns)

    def column_types(self) -> list[ValueKind] | None:
        return list(self._column_types) if self._column_types is not None else None

    def column_index_map(self) -> dict[str, int]:
        return dict(self._index_of)

    def column_count(self) -> int:
        return len(self._columns)

    def row_count(self) -> int:
        return len(self._rows)

    def rows(self) -> Iterator[Row]:
        """Iterate rows in insertion order."""
        return iter(self._rows)

    def index_of(self, column: str) -> int:
        """Return the position of a column.

        Raises:
            ColumnNotFoundError: If the column does not exist.
        """
        try:
            return self._index_of[column]
        except KeyError:
            raise ColumnNotFoundError(column, self._name) from None

    def has_column(self, column: str) -> bool:
        return column in self._index_of

    def insert_row(self, values: Sequence[Value]) -> None:
        """Append a row.

        The row is validated in full before the table changes, so a failed
        insert leaves the table untouched.

        Args:
            values: One value per column, in schema order.

        Raises:
            ArityMismatchError: If the value count differs from the column count.
            TypeMismatchError: If a value's kind differs from its declared type.
        """
        if len(values) != len(self._columns):
            raise ArityMismatchError(
                f"Table '{self._name}' has {len(self._columns)} columns "
                f"but {len(values)} values were given",
                table=self._name,
            )
        for i, value in enumerate(values):
            self._check_type(i, value)
        self._rows.append(tuple(values))

    def get_row(self, index: int) -> Row:
        """Return the row at ``index``.

        Raises:
            IndexOutOfRangeError: If the index is outside the table.
        """
        self._check_row_index(index)
        return self._rows[index]

    def get_value(self, row_index: int, column: str) -> Value:
        """Return one cell.

        Raises:
            IndexOutOfRangeError: If the row does not exist.
            ColumnNotFoundError: If the column does not exist.
        """
        self._check_row_index(row_index)
        return self._rows[row_index][self.index_of(column)]

    def set_value(self, row_index: int, column: str, value: Value) -> None:
        """Overwrite one cell, enforcing the column type on typed tables.

        Raises:
            IndexOutOfRangeError: If the row does not exist.
            ColumnNotFoundError: If the column does not exist.
            TypeMismatchError: If the value conflicts with the declared type.
        """
        self._check_row_index(row_index)
        col = self.index_of(column)
        self._check_type(col, value)
        row = list(self._rows[row_index])
        row[col] = value
        self._rows[row_index] = tuple(row)

    def add_column(
        self,
        column: str,
        default: Value,
        kind: ValueKind | None = None,
    ) -> None:
        """Append a column, back-filling ``default`` into every existing row.

        On a typed table the new column is declared as ``kind``, or as the
        default's kind when no kind is given.

        Raises:
            DuplicateColumnError: If the column already exists.
            TypeMismatchError: If ``kind`` disagrees with the default's kind.
        """
        if column in self._index_of:
            raise DuplicateColumnError(column, self._name)
        if kind is not None and default.kind != kind:
            raise TypeMismatchError(
                f"Default for column '{column}' is {default.kind.label}, "
                f"expected {kind.label}",
                table=self._name,
                column=column,
            )

        self._columns.append(column)
        self._index_of[column] = len(self._columns) - 1
        if self._column_types is not None:
            self._column_types.append(kind or default.kind)
        self._rows = [row + (default,) for row in self._rows]

    def clear_rows(self) -> None:
        """Remove all rows, keeping the schema."""
        self._rows.clear()

    def _check_row_index(self, index: int) -> None:
        if index < 0 or index >= len(self._rows):
            raise IndexOutOfRangeError(
                f"Row index {index} out of range for table '{self._name}' "
                f"with {len(self._rows)} rows",
                table=self._name,
            )

    def _check_type(self, position: int, value: Value) -> None:
        if self._column_types is None:
            return
        expected = self._column_types[position]
        if value.kind != expected:
            column = self._columns[position]
            raise TypeMismatchError(
                f"Column '{column}' expects {expected.label}, got {value.kind.label}",
                table=self._name,
                column=column,
            )

    def __repr__(self) -> str:
        return f"Table(name={self._name!r}, columns={self._columns!r}, rows={len(self._rows)})"


class TableView:
    """Read-only view over a Table, handed out for read-only statements."""

    def __init__(self, table: Table) -> None:
        self._table = table

    @property
    def name(self) -> str:
        return self._table.name

    @property
    def is_typed(self) -> bool:
        return self._table.is_typed

    def column_names(self) -> list[str]:
        return self._table.column_names()

    def column_types(self) -> list[ValueKind] | None:
        return self._table.column_types()

    def column_index_map(self) -> dict[str, int]:
        return self._table.column_index_map()

    def column_count(self) -> int:
        return self._table.column_count()

    def row_count(self) -> int:
        return self._table.row_count()

    def rows(self) -> Iterator[Row]:
        return self._table.rows()

    def index_of(self, column: str) -> int:
        return self._table.index_of(column)

    def has_column(self, column: str) -> bool:
        return self._table.has_column(column)

    def get_row(self, index: int) -> Row:
        return self._table.get_row(index)

    def get_value(self, row_index: int, column: str) -> Value:
        return self._table.get_value(row_index, column)

    def __repr__(self) -> str:
        return f"TableView({self._table!r})"
