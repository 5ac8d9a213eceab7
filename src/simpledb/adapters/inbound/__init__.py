"""Inbound adapters for SimpleDB.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    Command Parser:
        - CommandParser: Parser that converts command lines to statements
        - Statement and its subclasses
        - tokenize / parse_literal helpers

The REPL (simpledb.adapters.inbound.repl) and the REST API
(simpledb.adapters.inbound.rest_api) depend on the application layer and
are imported from their own modules.
"""

from simpledb.adapters.inbound.command_parser import (
    CommandParser,
    CreateTableStatement,
    InsertStatement,
    SelectStatement,
    Statement,
    StatementType,
    Token,
    WhereClause,
    parse_literal,
    tokenize,
)

__all__ = [
    "CommandParser",
    "Statement",
    "StatementType",
    "CreateTableStatement",
    "InsertStatement",
    "SelectStatement",
    "WhereClause",
    "Token",
    "parse_literal",
    "tokenize",
]
