"""Interactive read loop for SimpleDB.

Reads one command per line, executes it and renders the result with Rich.

Special commands:
    EXIT - persist every table and quit (end of input does the same)
    HELP - print the command grammar

Any other non-blank line is handed to QueryProcessor.execute(). Errors are
printed and the loop continues with the next line.
"""

from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.table import Table as RichTable
from rich.text import Text

from simpledb import __version__
from simpledb.adapters.inbound.command_parser import StatementType
from simpledb.application import QueryProcessor, QueryResult
from simpledb.domain.errors import SimpleDBError
from simpledb.infrastructure.logging import get_logger

logger = get_logger(__name__)

PROMPT = "simpledb> "

HELP_TEXT = """\
Supported commands:
  CREATE TABLE <table> <col>[:<type>], ...       types: INT, STRING, BOOL, NULL
  INSERT INTO <table> VALUES <value>, ...
  SELECT * FROM <table> [WHERE <col> = <value>]
  SELECT <col>, ... FROM <table> [WHERE <col> = <value>]
  HELP                                           show this help
  EXIT                                           save all tables and quit

Values: "quoted string", true, false, integers; other bare words are strings."""


def render_result(console: Console, result: QueryResult) -> None:
    """Print a statement result.

    SELECT results render as a table; other statements print their message.
    """
    if result.statement_type != StatementType.SELECT:
        console.print(Text(result.message))
        return

    table = RichTable(show_header=True, header_style="bold")
    for column in result.columns:
        table.add_column(column)
    for row in result.rows:
        table.add_row(*(Text(str(value)) for value in row))
    console.print(table)
    console.print(Text(result.message, style="dim"))


class Repl:
    """Read-eval-print loop over a QueryProcessor."""

    def __init__(
        self,
        processor: QueryProcessor,
        console: Console | None = None,
        read_line: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            processor: Processor that executes commands.
            console: Rich console for output (a new one if None).
            read_line: Function that shows a prompt and returns one line;
                raises EOFError at end of input. Defaults to console.input.
        """
        self._processor = processor
        self._console = console or Console()
        self._read_line = read_line or self._console.input

    def run(self) -> None:
        """Run until EXIT or end of input."""
        self._console.print(f"SimpleDB {__version__} - database '{self._processor.storage.database_name}'")
        self._console.print("Type 'EXIT' to quit, 'HELP' for commands")
        for failure in self._processor.storage.load_failures:
            self._console.print(
                Text(f"warning: table '{failure.table_name}' not loaded: {failure.message}", style="yellow")
            )

        while True:
            try:
                line = self._read_line(PROMPT)
            except EOFError:
                self._console.print()
                break
            except KeyboardInterrupt:
                self._console.print()
                continue

            if not self.handle_line(line):
                break

        self.shutdown()

    def handle_line(self, line: str) -> bool:
        """Process one input line.

        Returns:
            False if the loop should stop.
        """
        command = line.strip()
        if not command:
            return True
        if command.upper() == "EXIT":
            return False
        if command.upper() == "HELP":
            self._console.print(Text(HELP_TEXT))
            return True

        try:
            result = self._processor.execute(command)
        except SimpleDBError as e:
            self._console.print(Text(f"Error [{e.kind.value}]: {e.message}", style="red"))
            return True

        render_result(self._console, result)
        return True

    def shutdown(self) -> None:
        """Persist every table before leaving."""
        storage = self._processor.storage
        for table in storage.get_all_tables():
            try:
                storage.persist_table(table.name)
            except SimpleDBError as e:
                self._console.print(
                    Text(f"Error saving table '{table.name}': {e.message}", style="red")
                )
        logger.info("repl_exit", tables=len(storage.table_names()))
