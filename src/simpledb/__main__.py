"""Allow running SimpleDB with ``python -m simpledb``."""

from simpledb.cli import app

app()
