"""Command parser for the SimpleDB statement language.

This module turns one line of command text into a statement object that
the QueryProcessor dispatches. Parsing is a single pass over tokens; it
checks grammar only; table and column names are resolved at execution.

Grammar:
    statement := create | insert | select
    create    := CREATE TABLE <name> <coldef> ("," <coldef>)*
    coldef    := <col> [":" <type>]            type: INT | STRING | BOOL | NULL
    insert    := INSERT INTO <name> VALUES <literal> ("," <literal>)*
    select    := SELECT ("*" | <col> ("," <col>)*) FROM <name> [where]
    where     := WHERE <col> "=" <literal>
    literal   := quoted-string | true | false | integer | bare-word

Tokens are separated by whitespace and commas, so ``1,"Alice",true`` and
``1, "Alice", true`` tokenize alike. In SELECT, ``=`` is a token of its own
(``age=true`` is three tokens); elsewhere it is an ordinary character, so
``VALUES a=b`` inserts the string ``"a=b"``. Parentheses are treated as
separators, which makes ``VALUES (1, "Alice")`` equivalent to ``VALUES 1, "Alice"``.
Keywords are case-insensitive.

Literal classification (first match wins):
    1. ``"..."``          -> string, quotes stripped
    2. ``true``/``false`` -> bool
    3. signed integer     -> int (digit runs too long to convert stay strings)
    4. anything else      -> string holding the raw token
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from simpledb.domain.errors import ParseError
from simpledb.domain.value_objects import Value, ValueKind

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_SEPARATORS = frozenset(",()")
_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}


class StatementType(Enum):
    """Types of statements."""

    CREATE_TABLE = "create_table"
    INSERT = "insert"
    SELECT = "select"


@dataclass(frozen=True)
class Token:
    """A lexical token.

    Attributes:
        text: Token text, with quotes removed for quoted strings.
        quoted: True if the token was a double-quoted string.
        position: Offset of the token in the source line.
    """

    text: str
    quoted: bool = False
    position: int = 0

    def is_keyword(self, keyword: str) -> bool:
        return not self.quoted and self.text.upper() == keyword


@dataclass
class Statement:
    """Base class for parsed statements."""

    table_name: str

    @property
    def statement_type(self) -> StatementType:
        raise NotImplementedError


@dataclass
class CreateTableStatement(Statement):
    """CREATE TABLE <name> <col>[:<type>], ..."""

    columns: list[str] = field(default_factory=list)
    column_types: list[ValueKind] | None = None

    @property
    def statement_type(self) -> StatementType:
        return StatementType.CREATE_TABLE

    def __str__(self) -> str:
        if self.column_types is None:
            cols = ", ".join(self.columns)
        else:
            cols = ", ".join(
                f"{c}:{t.name}" for c, t in zip(self.columns, self.column_types)
            )
        return f"CreateTable({self.table_name}, [{cols}])"


@dataclass
class InsertStatement(Statement):
    """INSERT INTO <name> VALUES <literal>, ..."""

    values: list[Value] = field(default_factory=list)

    @property
    def statement_type(self) -> StatementType:
        return StatementType.INSERT

    def __str__(self) -> str:
        return f"Insert({self.table_name}, values={len(self.values)})"


@dataclass(frozen=True)
class WhereClause:
    """Equality filter on a single column."""

    column: str
    value: Value

    def __str__(self) -> str:
        return f"{self.column} = {self.value!r}"


@dataclass
class SelectStatement(Statement):
    """SELECT <cols> FROM <name> [WHERE <col> = <literal>]"""

    columns: list[str] = field(default_factory=list)
    where: WhereClause | None = None

    @property
    def statement_type(self) -> StatementType:
        return StatementType.SELECT

    @property
    def is_select_all(self) -> bool:
        return self.columns == ["*"]

    def __str__(self) -> str:
        where = f" WHERE {self.where}" if self.where else ""
        return f"Select({', '.join(self.columns)} FROM {self.table_name}{where})"


def tokenize(text: str, split_equals: bool = True) -> list[Token]:
    """Split command text into tokens.

    Whitespace, commas and parentheses separate tokens. With
    ``split_equals``, ``=`` is always a token of its own; otherwise it is
    part of the surrounding bare word. Double-quoted strings are kept whole
    and support the escapes ``\\"``, ``\\\\``, ``\\n`` and ``\\t``.

    Raises:
        ParseError: If a quoted string is not terminated.
    """
    tokens: list[Token] = []
    pos = 0
    end = len(text)

    while pos < end:
        ch = text[pos]
        if ch.isspace() or ch in _SEPARATORS:
            pos += 1
            continue

        if ch == "=" and split_equals:
            tokens.append(Token("=", position=pos))
            pos += 1
            continue

        if ch == '"':
            start = pos
            pos += 1
            chars: list[str] = []
            while True:
                if pos >= end:
                    raise ParseError(f"Unterminated string starting at position {start}")
                ch = text[pos]
                if ch == '"':
                    pos += 1
                    break
                if ch == "\\" and pos + 1 < end and text[pos + 1] in _ESCAPES:
                    chars.append(_ESCAPES[text[pos + 1]])
                    pos += 2
                    continue
                chars.append(ch)
                pos += 1
            tokens.append(Token("".join(chars), quoted=True, position=start))
            continue

        start = pos
        while pos < end:
            ch = text[pos]
            if ch.isspace() or ch in _SEPARATORS or ch == '"' or (ch == "=" and split_equals):
                break
            pos += 1
        tokens.append(Token(text[start:pos], position=start))

    return tokens


def parse_literal(token: Token) -> Value:
    """Classify a literal token into a Value. Never fails."""
    if token.quoted:
        return Value.str(token.text)
    if token.text in ("true", "false"):
        return Value.bool(token.text == "true")
    if _INTEGER_RE.fullmatch(token.text):
        try:
            return Value.int(int(token.text))
        except ValueError:
            # Exceeds the interpreter's int conversion digit limit
            return Value.str(token.text)
    return Value.str(token.text)


class CommandParser:
    """Parser for single-line SimpleDB commands.

    Example:
        >>> parser = CommandParser()
        >>> stmt = parser.parse('SELECT name FROM users WHERE age = true')
        >>> print(stmt)
        Select(name FROM users WHERE age = Value.bool(True))
    """

    def parse(self, text: str) -> Statement:
        """Parse a command into a statement.

        Args:
            text: One complete command line.

        Returns:
            The parsed statement.

        Raises:
            ParseError: If the command does not match the grammar.
        """
        tokens = tokenize(text, split_equals=False)
        if not tokens:
            raise ParseError("Empty command")

        head = tokens[0]
        if head.is_keyword("SELECT"):
            return self._parse_select(tokenize(text))
        if head.is_keyword("CREATE"):
            return self._parse_create(tokens)
        if head.is_keyword("INSERT"):
            return self._parse_insert(tokens)
        raise ParseError(f"Unknown command: {head.text}")

    def _parse_create(self, tokens: list[Token]) -> CreateTableStatement:
        stream = _TokenStream(tokens, start=1)
        stream.expect_keyword("TABLE")
        name = stream.expect_identifier("table name")

        columns: list[str] = []
        types: list[ValueKind] = []
        for token in stream.rest():
            column, sep, type_name = token.text.partition(":")
            columns.append(_identifier(Token(column, token.quoted, token.position), "column name"))
            if sep:
                try:
                    types.append(ValueKind.from_name(type_name))
                except ValueError:
                    raise ParseError(
                        f"Unknown column type '{type_name}' for column '{column}'"
                    ) from None

        if not columns:
            raise ParseError(f"CREATE TABLE {name} needs at least one column")
        if types and len(types) != len(columns):
            raise ParseError("Declare a type for every column or for none")

        return CreateTableStatement(
            table_name=name, columns=columns, column_types=types or None
        )

    def _parse_insert(self, tokens: list[Token]) -> InsertStatement:
        stream = _TokenStream(tokens, start=1)
        stream.expect_keyword("INTO")
        name = stream.expect_identifier("table name")
        stream.expect_keyword("VALUES")

        values = [parse_literal(token) for token in stream.rest()]
        if not values:
            raise ParseError(f"INSERT INTO {name} needs at least one value")
        return InsertStatement(table_name=name, values=values)

    def _parse_select(self, tokens: list[Token]) -> SelectStatement:
        stream = _TokenStream(tokens, start=1)

        columns: list[str] = []
        while True:
            token = stream.next("FROM")
            if token.is_keyword("FROM"):
                break
            if not token.quoted and token.text == "*":
                columns.append("*")
            else:
                columns.append(_identifier(token, "column name"))

        if not columns:
            raise ParseError("SELECT needs a column list or *")
        if "*" in columns and columns != ["*"]:
            raise ParseError("* cannot be combined with other columns")

        name = stream.expect_identifier("table name")

        where = None
        if not stream.at_end():
            stream.expect_keyword("WHERE")
            column = stream.expect_identifier("column name")
            operator = stream.next("=")
            if operator.quoted or operator.text != "=":
                raise ParseError(f"Expected '=' but found '{operator.text}'")
            where = WhereClause(column=column, value=parse_literal(stream.next("literal")))
            if not stream.at_end():
                raise ParseError(f"Unexpected token after WHERE clause: '{stream.peek().text}'")

        return SelectStatement(table_name=name, columns=columns, where=where)


class _TokenStream:
    """Cursor over a token list."""

    def __init__(self, tokens: list[Token], start: int = 0) -> None:
        self._tokens = tokens
        self._pos = start

    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> Token:
        return self._tokens[self._pos]

    def next(self, expected: str) -> Token:
        if self.at_end():
            raise ParseError(f"Expected {expected} but reached end of command")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def rest(self) -> list[Token]:
        remaining = self._tokens[self._pos:]
        self._pos = len(self._tokens)
        return remaining

    def expect_keyword(self, keyword: str) -> None:
        token = self.next(keyword)
        if not token.is_keyword(keyword):
            raise ParseError(f"Expected {keyword} but found '{token.text}'")

    def expect_identifier(self, what: str) -> str:
        return _identifier(self.next(what), what)


def _identifier(token: Token, what: str) -> str:
    if token.quoted or not _IDENTIFIER_RE.fullmatch(token.text):
        raise ParseError(f"Invalid {what}: '{token.text}'")
    return token.text
