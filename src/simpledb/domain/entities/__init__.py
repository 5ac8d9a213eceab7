"""Domain entities for SimpleDB.

Exports:
    - Table: Named column schema plus append-only rows
    - TableView: Read-only view over a Table
    - Row: Tuple of values, one per column
"""

from simpledb.domain.entities.table import Row, Table, TableView

__all__ = [
    "Row",
    "Table",
    "TableView",
]
