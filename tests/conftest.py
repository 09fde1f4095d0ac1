"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest
import structlog
from sqlalchemy import Column
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import String
from sqlalchemy import Table
from sqlalchemy import create_engine

from omega.database.connection import Connection


@pytest.fixture
def connection() -> MagicMock:
    """Connection stand-in for tests that only inspect generated SQL and binds."""
    mock = MagicMock(spec=Connection)
    mock.database_name = 'omega'
    mock.row_count.return_value = 1
    mock.result_set.return_value = []
    mock.single.return_value = None
    return mock


@pytest.fixture
def metadata() -> MetaData:
    """Create test metadata with simple schema."""
    metadata = MetaData()

    Table(
        'users',
        metadata,
        Column('id', Integer, primary_key=True, autoincrement=True),
        Column('name', String(100), nullable=False),
        Column('email', String(100), nullable=False),
        Column('status', String(20), nullable=False, server_default='active'),
    )

    return metadata


@pytest.fixture
def sqlite_connection(metadata: MetaData):  # noqa: ANN201
    """Connection to an in-memory SQLite database with a seeded users table."""
    engine = create_engine('sqlite://')
    metadata.create_all(engine)

    with engine.begin() as conn:
        conn.execute(
            metadata.tables['users'].insert(),
            [
                {'name': 'Alice', 'email': 'alice@example.com', 'status': 'active'},
                {'name': 'Bob', 'email': 'bob@example.com', 'status': 'inactive'},
            ],
        )

    connection = Connection.from_engine(engine)

    yield connection

    connection.close()


@pytest.fixture(autouse=True)
def reset_structlog():  # noqa: ANN201
    """Restore the default structlog configuration after each test."""
    yield
    structlog.reset_defaults()
