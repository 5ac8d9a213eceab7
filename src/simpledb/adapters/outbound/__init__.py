"""Outbound adapters - implementations of outbound ports.

These adapters implement the TableStore port on top of the filesystem
or plain memory.
"""

from simpledb.adapters.outbound.file_table_store import FileTableStore, resolve_root
from simpledb.adapters.outbound.memory_table_store import InMemoryTableStore

__all__ = [
    "FileTableStore",
    "InMemoryTableStore",
    "resolve_root",
]
