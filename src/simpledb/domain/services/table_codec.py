"""Text codec for persisted table files.

File format (UTF-8, one item per line):

    <column_count>
    <column_name>[ <type_id>]      one line per column
    <row_count>
    <type_id> <literal> ...        one line per row, one pair per column

Type ids follow ValueKind (INT=0, STRING=1, BOOL=2, NULL=3). Integers are
decimal, strings are double-quoted with JSON escapes, booleans are
``true``/``false`` and null is ``null``. Column lines carry a type id only
when the table declares column types, in which case every column does.

Example:
    >>> table = Table("users", ["id", "name"])
    >>> table.insert_row([Value.int(1), Value.str("Alice")])
    >>> print(encode_table(table), end="")
    2
    id
    name
    1
    0 1 1 "Alice"
"""

from __future__ import annotations

import json
import re

from simpledb.domain.entities import Table
from simpledb.domain.errors import MalformedPersistedDataError, SchemaError, SimpleDBError
from simpledb.domain.value_objects import Value, ValueKind

_INT_RE = re.compile(r"[+-]?[0-9]+")
_COUNT_RE = re.compile(r"[0-9]+")
_JSON = json.JSONDecoder()


def encode_value(value: Value) -> str:
    """Encode a single value as ``<type_id> <literal>``."""
    kind = value.kind
    if kind == ValueKind.INT:
        literal = str(value.as_int())
    elif kind == ValueKind.STRING:
        literal = json.dumps(value.as_str(), ensure_ascii=False)
    elif kind == ValueKind.BOOL:
        literal = "true" if value.as_bool() else "false"
    else:
        literal = "null"
    return f"{kind.value} {literal}"


def encode_table(table: Table) -> str:
    """Serialize the full schema and row set of a table.

    Raises:
        SchemaError: If a column name cannot be represented in the format.
    """
    columns = table.column_names()
    types = table.column_types()

    lines = [str(len(columns))]
    for i, column in enumerate(columns):
        if not column or any(ch.isspace() for ch in column):
            raise SchemaError(
                f"Column name {column!r} cannot be persisted", table=table.name, column=column
            )
        lines.append(column if types is None else f"{column} {types[i].value}")

    lines.append(str(table.row_count()))
    for row in table.rows():
        lines.append(" ".join(encode_value(value) for value in row))

    return "\n".join(lines) + "\n"


def decode_table(name: str, text: str) -> Table:
    """Parse a table file's content.

    Args:
        name: Name to give the decoded table.
        text: Full file content.

    Returns:
        The reconstructed table.

    Raises:
        MalformedPersistedDataError: If the content does not match the format.
    """
    lines = text.split("\n")
    cursor = 0

    def next_line(what: str) -> str:
        nonlocal cursor
        if cursor >= len(lines):
            raise MalformedPersistedDataError(
                f"Unexpected end of file while reading {what}", table=name
            )
        line = lines[cursor]
        cursor += 1
        return line

    column_count = _parse_count(name, next_line("column count"), "column count")

    columns: list[str] = []
    types: list[ValueKind] = []
    for i in range(column_count):
        parts = next_line(f"column {i + 1}").split()
        if len(parts) == 1:
            columns.append(parts[0])
        elif len(parts) == 2:
            columns.append(parts[0])
            types.append(_parse_kind(name, parts[1]))
        else:
            raise MalformedPersistedDataError(
                f"Invalid column definition on line {cursor}", table=name
            )

    if types and len(types) != len(columns):
        raise MalformedPersistedDataError(
            "Column types must be declared for every column or none", table=name
        )

    try:
        table = Table(name, columns, types or None)
    except SchemaError as e:
        raise MalformedPersistedDataError(e.message, table=name) from e

    row_count = _parse_count(name, next_line("row count"), "row count")
    for i in range(row_count):
        values = decode_row(name, next_line(f"row {i + 1}"))
        try:
            table.insert_row(values)
        except SimpleDBError as e:
            raise MalformedPersistedDataError(f"Row {i + 1}: {e.message}", table=name) from e

    if any(line.strip() for line in lines[cursor:]):
        raise MalformedPersistedDataError(
            f"Found data after the declared {row_count} rows", table=name
        )

    return table


def decode_row(name: str, line: str) -> list[Value]:
    """Parse one row line into values.

    Raises:
        MalformedPersistedDataError: If a type id or literal is invalid.
    """
    values: list[Value] = []
    pos = 0
    end = len(line)

    while pos < end:
        if line[pos] == " ":
            pos += 1
            continue

        sep = line.find(" ", pos)
        if sep == -1:
            raise MalformedPersistedDataError(
                f"Missing literal after type id at column {pos}", table=name
            )
        kind = _parse_kind(name, line[pos:sep])
        pos = sep + 1

        if kind == ValueKind.STRING:
            if pos >= end or line[pos] != '"':
                raise MalformedPersistedDataError(
                    f"Expected quoted string at column {pos}", table=name
                )
            try:
                text, pos = _JSON.raw_decode(line, pos)
            except json.JSONDecodeError as e:
                raise MalformedPersistedDataError(
                    f"Invalid string literal at column {pos}: {e.msg}", table=name
                ) from e
            values.append(Value.str(text))
        else:
            stop = line.find(" ", pos)
            if stop == -1:
                stop = end
            values.append(_parse_literal(name, kind, line[pos:stop]))
            pos = stop

        if pos < end and line[pos] != " ":
            raise MalformedPersistedDataError(
                f"Expected separator at column {pos}", table=name
            )

    return values


def _parse_literal(name: str, kind: ValueKind, token: str) -> Value:
    if kind == ValueKind.INT and _INT_RE.fullmatch(token):
        return Value.int(_to_int(name, token, f"{kind.label} literal"))
    if kind == ValueKind.BOOL and token in ("true", "false"):
        return Value.bool(token == "true")
    if kind == ValueKind.NULL and token == "null":
        return Value.null()
    raise MalformedPersistedDataError(
        f"Invalid {kind.label} literal {token!r}", table=name
    )


def _parse_kind(name: str, token: str) -> ValueKind:
    try:
        return ValueKind(int(token) if _COUNT_RE.fullmatch(token) else -1)
    except ValueError:
        raise MalformedPersistedDataError(f"Invalid type id {token!r}", table=name) from None


def _parse_count(name: str, line: str, what: str) -> int:
    token = line.strip()
    if not _COUNT_RE.fullmatch(token):
        raise MalformedPersistedDataError(f"Invalid {what} {line!r}", table=name)
    return _to_int(name, token, what)


def _to_int(name: str, token: str, what: str) -> int:
    # int() refuses digit runs past the interpreter's conversion limit
    try:
        return int(token)
    except ValueError:
        raise MalformedPersistedDataError(
            f"Invalid {what}: {len(token)}-digit number is too long", table=name
        ) from None
