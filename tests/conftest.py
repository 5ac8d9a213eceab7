"""Pytest configuration and fixtures for SimpleDB tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from simpledb.application import QueryProcessor, Storage
from simpledb.infrastructure.config import Config, StorageConfig
from simpledb.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration rooted in a temporary directory."""
    return Config(
        storage=StorageConfig(
            root_dir=temp_dir,
            database_name="testdb",
        ),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def storage(test_config: Config, metrics_registry: MetricsRegistry) -> Storage:
    """Provide a freshly opened, empty database."""
    return Storage.open(
        test_config.storage.database_name,
        root_path=test_config.storage.root_dir,
        metrics=metrics_registry,
        encoding=test_config.storage.encoding,
    )


@pytest.fixture
def processor(storage: Storage, metrics_registry: MetricsRegistry) -> QueryProcessor:
    """Provide a query processor over the test database."""
    return QueryProcessor(storage, metrics=metrics_registry)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
