"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (command parser, REPL, REST)
- Outbound adapters: Implement external dependencies (table files)
"""

from simpledb.adapters.outbound import (
    FileTableStore,
    InMemoryTableStore,
    resolve_root,
)

__all__ = [
    # Outbound adapters
    "FileTableStore",
    "InMemoryTableStore",
    "resolve_root",
]
