"""Storage - registry of the tables of one database.

Storage maps table names to Table instances and owns their persistence.
Tables are serialized with the table codec and written through a
TableStore, so the registry itself never touches the filesystem.

Usage:
    from simpledb.application import Storage

    storage = Storage.open("shop", root_path="/tmp/simpledb")
    storage.create_table("users", ["id", "name"])
    storage.get_table("users").insert_row([Value.int(1), Value.str("Alice")])
    storage.persist_table("users")

Loading is tolerant of individual failures: load_all_tables() logs and
records each table that cannot be loaded and keeps going, so one corrupt
file never blocks access to the rest of the database.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from simpledb.adapters.outbound import FileTableStore, resolve_root
from simpledb.domain.entities import Table, TableView
from simpledb.domain.errors import (
    ErrorKind,
    SimpleDBError,
    TableAlreadyExistsError,
    TableNotFoundError,
)
from simpledb.domain.services import decode_table, encode_table
from simpledb.domain.value_objects import ValueKind
from simpledb.infrastructure.logging import get_logger
from simpledb.infrastructure.metrics import MetricsRegistry, get_metrics
from simpledb.ports.outbound import TableStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadFailure:
    """Diagnostic recorded for a table that could not be loaded."""

    table_name: str
    kind: ErrorKind
    message: str


class Storage:
    """Registry mapping table names to tables, plus their persistence.

    Construct with Storage.open() to prepare the backing location and load
    persisted tables. The constructor itself performs no I/O.

    Invariant:
        Every registered table satisfies ``table.name == key``.
    """

    def __init__(
        self,
        database_name: str,
        store: TableStore,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            database_name: Name of the database.
            store: Backing medium for table files.
            metrics: Metrics registry (global registry if None).
        """
        self._database_name = database_name
        self._store = store
        self._metrics = metrics or get_metrics()
        self._tables: dict[str, Table] = {}
        self._load_failures: list[LoadFailure] = []

    @classmethod
    def open(
        cls,
        database_name: str,
        root_path: str | Path | None = None,
        store: TableStore | None = None,
        metrics: MetricsRegistry | None = None,
        encoding: str = "utf-8",
    ) -> Storage:
        """Open a database: prepare its location and load every persisted table.

        Args:
            database_name: Name of the database.
            root_path: Directory holding all databases. Resolved to
                ``~/.simpledb`` (or ``./.simpledb``) when None.
            store: Explicit backing store; overrides root_path.
            metrics: Metrics registry (global registry if None).
            encoding: Text encoding of table files. Ignored with an
                explicit store.

        Returns:
            The opened Storage.

        Raises:
            IOFailureError: If the location cannot be prepared or listed.
        """
        if store is None:
            store = FileTableStore(resolve_root(root_path), database_name, encoding=encoding)
        storage = cls(database_name, store, metrics)
        store.prepare()
        storage.load_all_tables()
        logger.info(
            "database_opened",
            database=database_name,
            location=store.location,
            tables=len(storage._tables),
            failures=len(storage._load_failures),
        )
        return storage

    @property
    def database_name(self) -> str:
        return self._database_name

    @property
    def store(self) -> TableStore:
        return self._store

    @property
    def load_failures(self) -> list[LoadFailure]:
        """Diagnostics from the last load_all_tables() call."""
        return list(self._load_failures)

    def create_table(
        self,
        name: str,
        columns: Sequence[str],
        types: Sequence[ValueKind] | None = None,
    ) -> Table:
        """Register a new, empty table.

        Raises:
            TableAlreadyExistsError: If the name is already registered.
            SchemaError: If the schema is invalid.
        """
        if name in self._tables:
            raise TableAlreadyExistsError(name)
        table = Table(name, columns, types)
        self._tables[name] = table
        self._metrics.tables_loaded.set(len(self._tables))
        logger.info("table_created", table=name, columns=list(columns), typed=types is not None)
        return table

    def get_table(self, name: str) -> Table:
        """Return a table for mutation.

        Raises:
            TableNotFoundError: If the table is not registered.
        """
        try:
            return self._tables[name]
        except KeyError:
            raise TableNotFoundError(name) from None

    def get_table_const(self, name: str) -> TableView:
        """Return a read-only view of a table.

        Raises:
            TableNotFoundError: If the table is not registered.
        """
        return TableView(self.get_table(name))

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def table_names(self) -> list[str]:
        return list(self._tables)

    def get_all_tables(self) -> list[Table]:
        """Return every registered table, in registration order."""
        return list(self._tables.values())

    def persist_table(self, name: str) -> None:
        """Rewrite a table's file with its full schema and rows.

        The previous content is replaced, not appended to.

        Raises:
            TableNotFoundError: If the table is not registered.
            IOFailureError: If the file cannot be written.
        """
        table = self.get_table(name)
        content = encode_table(table)
        try:
            self._store.write(name, content)
        except SimpleDBError:
            self._metrics.table_persists_total.labels(status="error").inc()
            logger.error("table_persist_failed", table=name, location=self._store.location)
            raise
        self._metrics.table_persists_total.labels(status="success").inc()
        logger.debug("table_persisted", table=name, rows=table.row_count())

    def persist_all(self) -> None:
        """Persist every registered table.

        Raises:
            IOFailureError: On the first table that cannot be written.
        """
        for name in self._tables:
            self.persist_table(name)

    def load_table(self, name: str) -> Table:
        """Load a table from its file, replacing any in-memory entry.

        Raises:
            IOFailureError: If the file is missing or unreadable.
            MalformedPersistedDataError: If the file content is corrupt.
        """
        content = self._store.read(name)
        table = decode_table(name, content)
        self._tables[name] = table
        self._metrics.tables_loaded.set(len(self._tables))
        logger.debug("table_loaded", table=name, rows=table.row_count())
        return table

    def load_all_tables(self) -> list[LoadFailure]:
        """Load every persisted table, continuing past individual failures.

        Returns:
            One diagnostic per table that failed to load.

        Raises:
            IOFailureError: If the table list itself cannot be read.
        """
        self._load_failures = []
        for name in self._store.list_tables():
            try:
                self.load_table(name)
            except SimpleDBError as e:
                failure = LoadFailure(table_name=name, kind=e.kind, message=e.message)
                self._load_failures.append(failure)
                self._metrics.table_load_failures_total.inc()
                logger.warning(
                    "table_load_failed",
                    table=name,
                    error_kind=e.kind.value,
                    error=e.message,
                )
        return list(self._load_failures)

    def __repr__(self) -> str:
        return (
            f"Storage(database_name={self._database_name!r}, "
            f"tables={list(self._tables)!r}, store={self._store!r})"
        )
