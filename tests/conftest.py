"""Shared test fixtures and configuration."""
import os

# Settings are read lazily, but anything that touches the database layer
# needs a valid DATABASE_URL
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest


@pytest.fixture
def anyio_backend():
    # The code under test is asyncio-only (SQLAlchemy asyncio, asyncio.gather)
    return "asyncio"
