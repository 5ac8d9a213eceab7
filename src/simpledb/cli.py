"""
CLI entry point for SimpleDB.

This module provides the Typer-based command-line interface.

Commands:
    (none)      Start the interactive shell on a database
    exec        Execute one command, save and exit
    tables      List the tables of a database
    serve       Serve the REST API

Options given before the command (--database, --root) select the database
for every command; unset options fall back to the SIMPLEDB_* environment
configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table as RichTable
from rich.text import Text

from simpledb import __version__
from simpledb.adapters.inbound.repl import Repl, render_result
from simpledb.application import QueryProcessor, Storage
from simpledb.domain.errors import SimpleDBError
from simpledb.infrastructure.config import Config, get_config
from simpledb.infrastructure.logging import bind_context, setup_logging
from simpledb.infrastructure.metrics import setup_metrics
from simpledb.infrastructure.tracing import setup_tracing

app = typer.Typer(
    name="simpledb",
    help="A minimal embedded table store with a line-oriented command language.",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Database selection shared by all commands."""

    config: Config
    database: str
    root: Path | None

    def open_storage(self) -> Storage:
        return Storage.open(
            self.database,
            root_path=self.root,
            encoding=self.config.storage.encoding,
        )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]simpledb[/bold] version {__version__}")
        raise typer.Exit()


def _open_or_exit(state: CliState) -> Storage:
    try:
        return state.open_storage()
    except SimpleDBError as e:
        err_console.print(Text(f"Error opening database '{state.database}': {e.message}", style="red"))
        raise typer.Exit(code=1) from None


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    database: Annotated[
        Optional[str],
        typer.Option(
            "--database",
            "-d",
            help="Database name. Defaults to SIMPLEDB_STORAGE__DATABASE_NAME or 'default'.",
        ),
    ] = None,
    root: Annotated[
        Optional[Path],
        typer.Option(
            "--root",
            "-r",
            help="Directory holding all databases. Defaults to ~/.simpledb.",
            file_okay=False,
            resolve_path=True,
        ),
    ] = None,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    SimpleDB - a minimal embedded table store.

    Without a command, starts the interactive shell.
    """
    config = get_config()
    setup_logging(
        level=config.observability.log_level,
        log_format=config.observability.log_format,
    )

    state = CliState(
        config=config,
        database=database or config.storage.database_name,
        root=root or config.storage.root_dir,
    )
    ctx.obj = state
    bind_context(database=state.database)

    if ctx.invoked_subcommand is None:
        storage = _open_or_exit(state)
        Repl(QueryProcessor(storage), console=console).run()


@app.command("exec")
def exec_command(
    ctx: typer.Context,
    command: Annotated[
        str,
        typer.Argument(help="Command to execute, e.g. 'SELECT * FROM users'."),
    ],
) -> None:
    """
    Execute one command, save every table and exit.

    Exits with code 1 if the command fails or a table cannot be saved.
    """
    state: CliState = ctx.obj
    storage = _open_or_exit(state)
    processor = QueryProcessor(storage)
    try:
        result = processor.execute(command)
        storage.persist_all()
    except SimpleDBError as e:
        err_console.print(Text(f"Error [{e.kind.value}]: {e.message}", style="red"))
        raise typer.Exit(code=1) from None
    render_result(console, result)


@app.command("tables")
def list_tables(ctx: typer.Context) -> None:
    """List the tables of the database with their columns and row counts."""
    state: CliState = ctx.obj
    storage = _open_or_exit(state)

    tables = storage.get_all_tables()
    if not tables:
        console.print(f"No tables in database '{storage.database_name}'.")
    else:
        table = RichTable(title=f"Tables in '{storage.database_name}'")
        table.add_column("Table", style="cyan")
        table.add_column("Columns")
        table.add_column("Rows", justify="right")
        for entry in tables:
            types = entry.column_types()
            if types is None:
                columns = ", ".join(entry.column_names())
            else:
                columns = ", ".join(
                    f"{name}:{kind.name}" for name, kind in zip(entry.column_names(), types)
                )
            table.add_row(entry.name, columns, str(entry.row_count()))
        console.print(table)

    for failure in storage.load_failures:
        err_console.print(
            Text(f"warning: table '{failure.table_name}' not loaded: {failure.message}", style="yellow")
        )


@app.command()
def serve(
    ctx: typer.Context,
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Host to bind to. Defaults to SIMPLEDB_SERVER__HOST."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to. Defaults to SIMPLEDB_SERVER__PORT."),
    ] = None,
) -> None:
    """Serve the REST API for the database."""
    from simpledb.adapters.inbound.rest_api import run_server

    state: CliState = ctx.obj
    observability = state.config.observability
    if observability.metrics_port is not None:
        setup_metrics(port=observability.metrics_port)
    if observability.otel_endpoint:
        setup_tracing(
            service_name=observability.otel_service_name,
            otlp_endpoint=observability.otel_endpoint,
        )

    storage = _open_or_exit(state)
    bind_host = host or state.config.server.host
    bind_port = port or state.config.server.port
    console.print(f"Serving database '{storage.database_name}' on http://{bind_host}:{bind_port}")
    run_server(QueryProcessor(storage), host=bind_host, port=bind_port)


if __name__ == "__main__":
    app()
