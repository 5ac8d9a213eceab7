"""Error hierarchy for SimpleDB.

Every failure raised by the core is a SimpleDBError carrying an ErrorKind
plus the table/column it concerns, so callers branch on ``kind`` instead of
matching message text.

Error kinds:
    - TABLE_ALREADY_EXISTS / TABLE_NOT_FOUND: registry lookups
    - COLUMN_NOT_FOUND / DUPLICATE_COLUMN / SCHEMA_ERROR: schema problems
    - ARITY_MISMATCH: row length differs from the column count
    - TYPE_MISMATCH: wrong accessor, or value kind conflicts with a column type
    - INDEX_OUT_OF_RANGE: row index past the end of the table
    - IO_FAILURE / MALFORMED_PERSISTED_DATA: persistence failures
    - PARSE_ERROR: command text the interpreter cannot parse
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Machine-readable error categories."""

    TABLE_ALREADY_EXISTS = "table_already_exists"
    TABLE_NOT_FOUND = "table_not_found"
    COLUMN_NOT_FOUND = "column_not_found"
    DUPLICATE_COLUMN = "duplicate_column"
    SCHEMA_ERROR = "schema_error"
    ARITY_MISMATCH = "arity_mismatch"
    TYPE_MISMATCH = "type_mismatch"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    IO_FAILURE = "io_failure"
    MALFORMED_PERSISTED_DATA = "malformed_persisted_data"
    PARSE_ERROR = "parse_error"


class SimpleDBError(Exception):
    """Base class for all SimpleDB errors.

    Attributes:
        kind: The error category.
        message: Human-readable description.
        table: Table the error concerns, if any.
        column: Column the error concerns, if any.
    """

    kind: ErrorKind = ErrorKind.SCHEMA_ERROR

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        column: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.table = table
        self.column = column

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON responses."""
        return {
            "error_kind": self.kind.value,
            "message": self.message,
            "table": self.table,
            "column": self.column,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(kind={self.kind.value}, "
            f"message={self.message!r}, table={self.table!r}, column={self.column!r})"
        )


class TableAlreadyExistsError(SimpleDBError):
    """Raised when creating a table whose name is already registered."""

    kind = ErrorKind.TABLE_ALREADY_EXISTS

    def __init__(self, table: str) -> None:
        super().__init__(f"Table '{table}' already exists", table=table)


class TableNotFoundError(SimpleDBError):
    """Raised when a table name is not registered."""

    kind = ErrorKind.TABLE_NOT_FOUND

    def __init__(self, table: str) -> None:
        super().__init__(f"Table '{table}' not found", table=table)


class ColumnNotFoundError(SimpleDBError):
    """Raised when a column name is not part of a table's schema."""

    kind = ErrorKind.COLUMN_NOT_FOUND

    def __init__(self, column: str, table: str | None = None) -> None:
        where = f" in table '{table}'" if table else ""
        super().__init__(f"Column '{column}' not found{where}", table=table, column=column)


class DuplicateColumnError(SimpleDBError):
    """Raised when adding a column that already exists."""

    kind = ErrorKind.DUPLICATE_COLUMN

    def __init__(self, column: str, table: str | None = None) -> None:
        super().__init__(f"Column '{column}' already exists", table=table, column=column)


class SchemaError(SimpleDBError):
    """Raised when a table schema is inconsistent."""

    kind = ErrorKind.SCHEMA_ERROR


class ArityMismatchError(SimpleDBError):
    """Raised when a row's length differs from the column count."""

    kind = ErrorKind.ARITY_MISMATCH


class TypeMismatchError(SimpleDBError):
    """Raised on a wrong accessor or a value/column type conflict."""

    kind = ErrorKind.TYPE_MISMATCH


class IndexOutOfRangeError(SimpleDBError):
    """Raised when a row index is outside the table."""

    kind = ErrorKind.INDEX_OUT_OF_RANGE


class IOFailureError(SimpleDBError):
    """Raised when a table file cannot be opened, read or written."""

    kind = ErrorKind.IO_FAILURE


class MalformedPersistedDataError(IOFailureError):
    """Raised when a table file exists but its content is corrupt."""

    kind = ErrorKind.MALFORMED_PERSISTED_DATA


class ParseError(SimpleDBError):
    """Raised when command text does not match the grammar."""

    kind = ErrorKind.PARSE_ERROR
