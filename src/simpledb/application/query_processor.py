"""QueryProcessor - entry point for executing commands.

The processor parses one command string, dispatches it to the matching
statement operation and returns a QueryResult.

Usage:
    from simpledb.application import QueryProcessor, Storage

    storage = Storage.open("shop")
    processor = QueryProcessor(storage)

    processor.execute("CREATE TABLE users id, name, age")
    processor.execute('INSERT INTO users VALUES 1, "Alice", true')
    result = processor.execute("SELECT name FROM users WHERE age = true")
    result.as_columns()  # {"name": [Value.str("Alice")]}

Failures raise SimpleDBError subclasses and leave no partial effects: a
failed SELECT never mutates state, and a failed INSERT is never persisted.
INSERT is write-through; the table file is rewritten after every
successful insert.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from simpledb.adapters.inbound.command_parser import (
    CommandParser,
    CreateTableStatement,
    InsertStatement,
    SelectStatement,
    Statement,
    StatementType,
)
from simpledb.application.queries import CreateQuery, InsertQuery, SelectQuery
from simpledb.application.storage import Storage
from simpledb.domain.errors import SimpleDBError
from simpledb.domain.value_objects import Value
from simpledb.infrastructure.logging import get_logger
from simpledb.infrastructure.metrics import MetricsRegistry, get_metrics
from simpledb.infrastructure.tracing import statement_span

logger = get_logger(__name__)


@dataclass
class QueryResult:
    """Result of executing one statement.

    Row order is insertion order (filtered, never re-sorted); column order
    is the requested order.
    """

    statement_type: StatementType
    table_name: str
    columns: list[str] = field(default_factory=list)
    rows: list[list[Value]] = field(default_factory=list)
    message: str = ""
    affected_rows: int = 0

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def as_columns(self) -> dict[str, list[Value]]:
        """Return the result as column name -> values in row order."""
        result: dict[str, list[Value]] = {column: [] for column in self.columns}
        for row in self.rows:
            for column, value in zip(self.columns, row):
                result[column].append(value)
        return result

    def to_python_rows(self) -> list[list[Any]]:
        """Return rows with native Python payloads."""
        return [[value.to_python() for value in row] for row in self.rows]


class QueryProcessor:
    """Parses and executes SimpleDB commands against a Storage.

    The processor is single-threaded: each command runs to completion
    before the next one is accepted.
    """

    def __init__(
        self,
        storage: Storage,
        parser: CommandParser | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            storage: The database to operate on.
            parser: Command parser (a default one if None).
            metrics: Metrics registry (global registry if None).
        """
        self._storage = storage
        self._parser = parser or CommandParser()
        self._metrics = metrics or get_metrics()
        self._create = CreateQuery(storage)
        self._insert = InsertQuery(storage)
        self._select = SelectQuery(storage)

    @property
    def storage(self) -> Storage:
        return self._storage

    def parse(self, text: str) -> Statement:
        """Parse a command without executing it.

        Raises:
            ParseError: If the command does not match the grammar.
        """
        return self._parser.parse(text)

    def execute(self, text: str) -> QueryResult:
        """Parse and execute one command.

        Args:
            text: One complete command line.

        Returns:
            The statement's result.

        Raises:
            ParseError: If the command does not match the grammar.
            SimpleDBError: If the statement fails (unknown table or column,
                arity or type conflict, persistence failure).
        """
        try:
            statement = self._parser.parse(text)
        except SimpleDBError as e:
            self._metrics.statements_total.labels(statement_type="unknown", status="error").inc()
            logger.info("statement_rejected", error_kind=e.kind.value, error=e.message)
            raise

        statement_type = statement.statement_type.value
        start = time.perf_counter()
        with statement_span(statement_type, statement.table_name) as span:
            try:
                result = self.execute_statement(statement)
                span.set_attribute("db.response.rows", result.row_count or result.affected_rows)
            except SimpleDBError as e:
                self._metrics.statements_total.labels(
                    statement_type=statement_type, status="error"
                ).inc()
                logger.info(
                    "statement_failed",
                    statement=statement_type,
                    table=statement.table_name,
                    error_kind=e.kind.value,
                    error=e.message,
                )
                raise
            finally:
                self._metrics.statement_latency_seconds.labels(
                    statement_type=statement_type
                ).observe(time.perf_counter() - start)

        self._metrics.statements_total.labels(
            statement_type=statement_type, status="success"
        ).inc()
        return result

    def execute_statement(self, statement: Statement) -> QueryResult:
        """Execute an already parsed statement."""
        if isinstance(statement, CreateTableStatement):
            return self._execute_create(statement)
        if isinstance(statement, InsertStatement):
            return self._execute_insert(statement)
        if isinstance(statement, SelectStatement):
            return self._execute_select(statement)
        raise TypeError(f"Unsupported statement type: {type(statement).__name__}")

    def _execute_create(self, statement: CreateTableStatement) -> QueryResult:
        self._create.create_table(
            statement.table_name, statement.columns, statement.column_types
        )
        return QueryResult(
            statement_type=statement.statement_type,
            table_name=statement.table_name,
            columns=list(statement.columns),
            message=(
                f"Table {statement.table_name} created with columns: "
                f"{', '.join(statement.columns)}"
            ),
        )

    def _execute_insert(self, statement: InsertStatement) -> QueryResult:
        self._insert.insert_into(statement.table_name, statement.values)
        self._metrics.rows_inserted_total.inc()
        self._storage.persist_table(statement.table_name)
        return QueryResult(
            statement_type=statement.statement_type,
            table_name=statement.table_name,
            message=f"Inserted 1 row into {statement.table_name}",
            affected_rows=1,
        )

    def _execute_select(self, statement: SelectStatement) -> QueryResult:
        condition = None
        if statement.where is not None:
            condition = (statement.where.column, statement.where.value)
        columns, rows = self._select.select_rows(
            statement.table_name, statement.columns, condition
        )
        return QueryResult(
            statement_type=statement.statement_type,
            table_name=statement.table_name,
            columns=columns,
            rows=rows,
            message=f"{len(rows)} row(s)",
        )
