"""Application layer for SimpleDB.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    Storage:
        - Storage: Registry of one database's tables and their persistence
        - LoadFailure: Diagnostic for a table that failed to load
    Statement operations:
        - CreateQuery, InsertQuery, SelectQuery
    Query processor:
        - QueryProcessor: Parses and executes commands
        - QueryResult: Result of one command
"""

from simpledb.application.queries import CreateQuery, InsertQuery, SelectQuery
from simpledb.application.query_processor import QueryProcessor, QueryResult
from simpledb.application.storage import LoadFailure, Storage

__all__ = [
    "Storage",
    "LoadFailure",
    "CreateQuery",
    "InsertQuery",
    "SelectQuery",
    "QueryProcessor",
    "QueryResult",
]
