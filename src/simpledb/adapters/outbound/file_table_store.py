"""File-based Table Store implementation.

Each table lives in its own text file under the database directory:

    <root>/<database_name>/<table_name>.tbl

Writes open the file in truncating mode and rewrite it in full. There is no
write-to-temp-then-rename step, so a crash mid-write can leave a truncated
file; loading such a file fails with MalformedPersistedDataError.
"""

from __future__ import annotations

from pathlib import Path

from simpledb.domain.errors import IOFailureError

TABLE_SUFFIX = ".tbl"
DEFAULT_DIR_NAME = ".simpledb"


def resolve_root(root_path: str | Path | None = None) -> Path:
    """Resolve the directory holding all databases.

    Args:
        root_path: Explicit root. Used as-is when given.

    Returns:
        The explicit root, else ``~/.simpledb`` when the home directory
        resolves, else ``./.simpledb`` in the current working directory.
    """
    if root_path is not None:
        return Path(root_path)
    try:
        home = Path.home()
    except (KeyError, RuntimeError):
        return Path.cwd() / DEFAULT_DIR_NAME
    return home / DEFAULT_DIR_NAME


class FileTableStore:
    """File-based implementation of the TableStore protocol.

    Attributes:
        directory: Directory holding this database's table files.
    """

    def __init__(self, root: str | Path, database_name: str, encoding: str = "utf-8") -> None:
        """Initialize the store.

        No filesystem access happens here; call prepare() first.

        Args:
            root: Directory holding all databases.
            database_name: Subdirectory for this database.
            encoding: Text encoding of table files.
        """
        self._directory = Path(root) / database_name
        self._encoding = encoding

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def location(self) -> str:
        return str(self._directory)

    def path_for(self, table_name: str) -> Path:
        """Return the file path of a table."""
        return self._directory / f"{table_name}{TABLE_SUFFIX}"

    def prepare(self) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailureError(
                f"Cannot create database directory {self._directory}: {e}"
            ) from e

    def list_tables(self) -> list[str]:
        try:
            entries = list(self._directory.iterdir())
        except OSError as e:
            raise IOFailureError(
                f"Cannot list database directory {self._directory}: {e}"
            ) from e
        return sorted(
            entry.stem
            for entry in entries
            if entry.suffix == TABLE_SUFFIX and entry.is_file()
        )

    def read(self, table_name: str) -> str:
        path = self.path_for(table_name)
        try:
            with open(path, "r", encoding=self._encoding) as f:
                return f.read()
        except FileNotFoundError as e:
            raise IOFailureError(
                f"Table file not found: {path}", table=table_name
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailureError(
                f"Failed to read table file {path}: {e}", table=table_name
            ) from e

    def write(self, table_name: str, content: str) -> None:
        path = self.path_for(table_name)
        try:
            with open(path, "w", encoding=self._encoding) as f:
                f.write(content)
        except OSError as e:
            raise IOFailureError(
                f"Failed to open table file {path} for writing: {e}", table=table_name
            ) from e

    def __repr__(self) -> str:
        return f"FileTableStore(directory={str(self._directory)!r})"
