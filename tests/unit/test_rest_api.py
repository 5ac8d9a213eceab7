"""Unit tests for the REST API adapter."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from simpledb import __version__
from simpledb.adapters.inbound.rest_api import create_app
from simpledb.application import QueryProcessor


@pytest.fixture
def client(processor: QueryProcessor) -> TestClient:
    """Create a test client over a fresh database."""
    return TestClient(create_app(processor))


@pytest.mark.unit
class TestRestApi:
    """Tests for the HTTP endpoints."""

    def test_health(self, client: TestClient) -> None:
        """Health reports status and version."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["load_failures"] == 0

    def test_execute_create_insert_select(self, client: TestClient) -> None:
        """Commands run in order and SELECT returns native values."""
        response = client.post("/execute", json={"command": "CREATE TABLE users id,name,age"})
        assert response.status_code == 200
        assert response.json()["success"] is True

        response = client.post("/execute", json={"command": 'INSERT INTO users VALUES 1,"Alice",true'})
        assert response.json()["affected_rows"] == 1

        response = client.post("/execute", json={"command": "SELECT name, age FROM users WHERE age = true"})
        body = response.json()
        assert body["success"] is True
        assert body["columns"] == ["name", "age"]
        assert body["rows"] == [["Alice", True]]

    def test_execute_error(self, client: TestClient) -> None:
        """Failures are reported with their error kind."""
        response = client.post("/execute", json={"command": "SELECT * FROM ghost"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == "table_not_found"
        assert "ghost" in body["message"]

    def test_execute_parse_error(self, client: TestClient) -> None:
        """Syntax errors are reported as parse errors."""
        body = client.post("/execute", json={"command": "UPDATE users"}).json()
        assert body["success"] is False
        assert body["error_kind"] == "parse_error"

    def test_execute_missing_command(self, client: TestClient) -> None:
        """The request body must contain a command."""
        response = client.post("/execute", json={})
        assert response.status_code == 422

    def test_tables(self, client: TestClient) -> None:
        """The table listing shows schema and row counts."""
        client.post("/execute", json={"command": "CREATE TABLE plain a, b"})
        client.post("/execute", json={"command": "CREATE TABLE typed id:INT"})
        client.post("/execute", json={"command": "INSERT INTO typed VALUES 7"})

        body = client.get("/tables").json()

        assert body["database"] == "testdb"
        tables = {t["name"]: t for t in body["tables"]}
        assert tables["plain"]["columns"] == ["a", "b"]
        assert tables["plain"]["column_types"] is None
        assert tables["typed"]["column_types"] == ["INT"]
        assert tables["typed"]["row_count"] == 1

    def test_shutdown_persists_created_tables(self, processor: QueryProcessor) -> None:
        """Tables created over HTTP are written when the app stops."""
        storage = processor.storage
        with TestClient(create_app(processor)) as running:
            running.post("/execute", json={"command": "CREATE TABLE empty a, b"})
            assert "empty" not in storage.store.list_tables()

        assert "empty" in storage.store.list_tables()
        assert storage.store.read("empty") == "2\na\nb\n0\n"
