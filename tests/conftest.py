"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
import pytest_asyncio

# Keep test runs off any developer database
os.environ.setdefault("USERS_API_DATABASE_URL", "sqlite:///:memory:")

TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db() -> AsyncGenerator[None, None]:
    """Point the shared connection pool at a fresh in-memory database with all tables."""
    from users_api.database.connection import (
        create_tables,
        dispose_database,
        init_database,
        reset_database,
    )

    reset_database()
    init_database(TEST_DATABASE_URL, force_reinit=True)
    await create_tables()

    yield

    await dispose_database()


@pytest_asyncio.fixture(scope="function")
async def db_session(db: None) -> AsyncGenerator[Any, None]:
    """Provide an async SQLAlchemy session bound to the test database."""
    from users_api.database.connection import get_async_session

    async with get_async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def execute(db: None):
    """Run a GraphQL document against the schema and return the ExecutionResult."""
    from users_api.graphql.schema import schema

    async def _execute(query: str, **variables: Any):
        return await schema.execute(
            query,
            variable_values=variables or None,
            context_value={"request": None},
        )

    return _execute


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "requires_db: mark test as requiring database connection")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
