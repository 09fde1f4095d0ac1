"""Database access: connection, configuration and query builders."""

from omega.database.config import DatabaseSettings
from omega.database.connection import Connection
from omega.database.exceptions import DatabaseConnectionError
from omega.database.exceptions import DatabaseError
from omega.database.logging_config import configure_logging
from omega.database.query import Query
from omega.database.query import Select
from omega.database.query import Table
from omega.database.query import Where

__all__ = [
    'Connection',
    'DatabaseConnectionError',
    'DatabaseError',
    'DatabaseSettings',
    'Query',
    'Select',
    'Table',
    'Where',
    'configure_logging',
]
