"""REST API adapter for SimpleDB.

This module provides a FastAPI-based REST API for executing commands
against one database. Every table is persisted when the application shuts
down, so tables created without a following INSERT survive a restart.

Endpoints:
    POST /execute - Execute a command
    GET /health - Health check
    GET /tables - Schema and row count of every table

Usage:
    from simpledb.adapters.inbound.rest_api import create_app
    from simpledb.application import QueryProcessor, Storage

    processor = QueryProcessor(Storage.open("shop"))
    app = create_app(processor)
    # Run with uvicorn: uvicorn app:app --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field

from simpledb import __version__
from simpledb.application import QueryProcessor, QueryResult
from simpledb.domain.errors import SimpleDBError
from simpledb.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CommandRequest(BaseModel):
    """Request model for command execution."""

    command: str = Field(..., description="Command to execute")


class CommandResponse(BaseModel):
    """Response model for command execution."""

    success: bool = Field(..., description="Whether the command succeeded")
    message: str = Field("", description="Status or error message")
    columns: list[str] = Field(default_factory=list, description="Column names")
    rows: list[list[Any]] = Field(default_factory=list, description="Result rows")
    affected_rows: int = Field(0, description="Number of affected rows")
    error_kind: str | None = Field(None, description="Error category on failure")


class TableInfo(BaseModel):
    """Schema summary of one table."""

    name: str
    columns: list[str]
    column_types: list[str] | None = None
    row_count: int


class TablesResponse(BaseModel):
    """Response model for the table listing."""

    database: str
    tables: list[TableInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    load_failures: int = Field(0, description="Tables that failed to load at startup")


def _result_to_response(result: QueryResult) -> CommandResponse:
    return CommandResponse(
        success=True,
        message=result.message,
        columns=result.columns,
        rows=result.to_python_rows(),
        affected_rows=result.affected_rows,
    )


def create_app(processor: QueryProcessor) -> FastAPI:
    """Create a FastAPI application for a query processor.

    Args:
        processor: The processor to execute commands with.

    Returns:
        A configured FastAPI application.
    """
    storage = processor.storage
    # Sync endpoints run on a thread pool; the core expects one command at a time
    lock = threading.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Persist every table on shutdown."""
        logger.info("api_started", database=storage.database_name)
        yield
        with lock:
            for table in storage.get_all_tables():
                try:
                    storage.persist_table(table.name)
                except SimpleDBError as e:
                    logger.error("table_save_failed", table=table.name, error=e.message)
        logger.info("api_stopped", tables=len(storage.table_names()))

    app = FastAPI(
        title="SimpleDB API",
        description="REST API for executing SimpleDB commands",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            load_failures=len(storage.load_failures),
        )

    @app.get("/tables", response_model=TablesResponse, tags=["Tables"])
    def list_tables() -> TablesResponse:
        """List every table with its schema and row count."""
        with lock:
            tables = []
            for table in storage.get_all_tables():
                types = table.column_types()
                tables.append(
                    TableInfo(
                        name=table.name,
                        columns=table.column_names(),
                        column_types=[t.name for t in types] if types is not None else None,
                        row_count=table.row_count(),
                    )
                )
        return TablesResponse(database=storage.database_name, tables=tables)

    @app.post("/execute", response_model=CommandResponse, tags=["Commands"])
    def execute_command(request: CommandRequest) -> CommandResponse:
        """Execute one command.

        Args:
            request: The request containing the command.

        Returns:
            The execution result, or the error on failure.
        """
        with lock:
            try:
                result = processor.execute(request.command)
            except SimpleDBError as e:
                return CommandResponse(
                    success=False,
                    message=e.message,
                    error_kind=e.kind.value,
                )
        return _result_to_response(result)

    return app


def run_server(
    processor: QueryProcessor,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Run the REST API server.

    Args:
        processor: The query processor.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(processor)
    uvicorn.run(app, host=host, port=port)
