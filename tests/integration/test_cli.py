"""Integration tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from simpledb import __version__
from simpledb.cli import app
from simpledb.infrastructure.config import get_config

runner = CliRunner()


def _invoke(root: Path, *args: str, stdin: str | None = None):
    return runner.invoke(app, ["--root", str(root), "--database", "clidb", *args], input=stdin)


@pytest.mark.integration
class TestCli:
    """Tests for the simpledb command."""

    def test_version(self) -> None:
        """--version prints the version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_exec_round_trip(self, temp_dir: Path) -> None:
        """Commands run through exec persist between invocations."""
        assert _invoke(temp_dir, "exec", "CREATE TABLE users id,name,age").exit_code == 0
        assert _invoke(temp_dir, "exec", 'INSERT INTO users VALUES 1,"Alice",true').exit_code == 0

        result = _invoke(temp_dir, "exec", "SELECT name FROM users WHERE age = true")

        assert result.exit_code == 0
        assert "Alice" in result.stdout
        assert (temp_dir / "clidb" / "users.tbl").is_file()

    def test_exec_create_persists_schema(self, temp_dir: Path) -> None:
        """A table created by exec is visible to the next invocation."""
        assert _invoke(temp_dir, "exec", "CREATE TABLE empty a, b").exit_code == 0

        assert (temp_dir / "clidb" / "empty.tbl").read_text(encoding="utf-8") == "2\na\nb\n0\n"
        result = _invoke(temp_dir, "exec", "SELECT * FROM empty")
        assert result.exit_code == 0

    def test_exec_uses_configured_encoding(
        self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """SIMPLEDB_STORAGE__ENCODING sets the encoding of table files."""
        monkeypatch.setenv("SIMPLEDB_STORAGE__ENCODING", "latin-1")
        get_config.cache_clear()
        try:
            _invoke(temp_dir, "exec", "CREATE TABLE t v")
            assert _invoke(temp_dir, "exec", 'INSERT INTO t VALUES "é"').exit_code == 0
        finally:
            get_config.cache_clear()

        content = (temp_dir / "clidb" / "t.tbl").read_bytes()
        assert content == '1\nv\n1\n1 "é"\n'.encode("latin-1")

    def test_exec_error_exit_code(self, temp_dir: Path) -> None:
        """A failing command exits with code 1."""
        result = _invoke(temp_dir, "exec", "SELECT * FROM ghost")

        assert result.exit_code == 1
        assert "table_not_found" in result.output

    def test_tables(self, temp_dir: Path) -> None:
        """tables lists schemas and row counts."""
        _invoke(temp_dir, "exec", "CREATE TABLE items sku:STRING, qty:INT")
        _invoke(temp_dir, "exec", 'INSERT INTO items VALUES "A-1", 5')

        result = _invoke(temp_dir, "tables")

        assert result.exit_code == 0
        assert "items" in result.stdout
        assert "qty:INT" in result.stdout

    def test_tables_empty(self, temp_dir: Path) -> None:
        """An empty database says so."""
        result = _invoke(temp_dir, "tables")

        assert result.exit_code == 0
        assert "No tables" in result.stdout

    def test_shell_reads_stdin(self, temp_dir: Path) -> None:
        """Without a command, the interactive shell runs until EXIT."""
        result = _invoke(
            temp_dir,
            stdin="CREATE TABLE t a\nINSERT INTO t VALUES hello\nSELECT * FROM t\nEXIT\n",
        )

        assert result.exit_code == 0
        assert "hello" in result.stdout
        assert (temp_dir / "clidb" / "t.tbl").read_text(encoding="utf-8") == '1\na\n1\n1 "hello"\n'
