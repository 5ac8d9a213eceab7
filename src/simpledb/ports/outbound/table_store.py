"""Table Store port for persisting serialized tables.

This outbound port defines the contract for the medium that holds one
database's table files. Storage serializes tables with the table codec and
hands the text to a TableStore; it never touches the filesystem directly,
so tests can swap in an in-memory backend.

The table store is responsible for:
- Preparing the backing location (e.g. creating the database directory)
- Enumerating persisted tables
- Reading and overwriting one table's serialized content
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class TableStore(Protocol):
    """Protocol for whole-table persistence.

    Writes replace the previous content entirely. Implementations are not
    required to make writes atomic: an interrupted write may leave a
    truncated table behind.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable description of where tables are kept."""
        ...

    @abstractmethod
    def prepare(self) -> None:
        """Create the backing location if it does not exist.

        Raises:
            IOFailureError: If the location cannot be created.
        """
        ...

    @abstractmethod
    def list_tables(self) -> list[str]:
        """Return the names of all persisted tables, sorted.

        Raises:
            IOFailureError: If the location cannot be listed.
        """
        ...

    @abstractmethod
    def read(self, table_name: str) -> str:
        """Return the serialized content of a table.

        Raises:
            IOFailureError: If the table is missing or cannot be read.
        """
        ...

    @abstractmethod
    def write(self, table_name: str, content: str) -> None:
        """Overwrite the serialized content of a table.

        Raises:
            IOFailureError: If the table cannot be opened for writing.
        """
        ...
