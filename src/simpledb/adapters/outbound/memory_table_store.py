"""In-memory Table Store implementation.

Keeps serialized tables in a dict. Used to embed SimpleDB without touching
the filesystem, and by tests that exercise Storage in isolation.
"""

from __future__ import annotations

from simpledb.domain.errors import IOFailureError


class InMemoryTableStore:
    """Dict-backed implementation of the TableStore protocol."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._files: dict[str, str] = dict(initial or {})
        self.prepared = False

    @property
    def location(self) -> str:
        return "<memory>"

    def prepare(self) -> None:
        self.prepared = True

    def list_tables(self) -> list[str]:
        return sorted(self._files)

    def read(self, table_name: str) -> str:
        try:
            return self._files[table_name]
        except KeyError:
            raise IOFailureError(
                f"Table file not found: {table_name}", table=table_name
            ) from None

    def write(self, table_name: str, content: str) -> None:
        self._files[table_name] = content

    def __contains__(self, table_name: str) -> bool:
        return table_name in self._files
