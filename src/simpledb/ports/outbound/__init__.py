"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
database depends on, such as the medium holding table files.
"""

from simpledb.ports.outbound.table_store import TableStore

__all__ = [
    "TableStore",
]
