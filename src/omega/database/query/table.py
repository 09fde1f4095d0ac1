"""Entry points that bind builders to a table and a connection."""

from collections.abc import Sequence
from typing import TYPE_CHECKING
from typing import Any

from omega.database.query.constants import ORDER_ASC
from omega.database.query.constants import ORDER_DESC
from omega.database.query.delete import Delete
from omega.database.query.inner_query import InnerQuery
from omega.database.query.insert import Insert
from omega.database.query.insert import Replace
from omega.database.query.select import Select
from omega.database.query.update import Update

if TYPE_CHECKING:
    from omega.database.connection import Connection

TABLE_INFO_SQL = """
SELECT
    COLUMN_NAME,
    COLUMN_TYPE,
    CHARACTER_SET_NAME,
    COLLATION_NAME,
    IS_NULLABLE,
    ORDINAL_POSITION,
    COLUMN_KEY
FROM
    INFORMATION_SCHEMA.COLUMNS
WHERE
    TABLE_SCHEMA = :dbs AND TABLE_NAME = :table
"""


class Table:
    """Builder factory for one table."""

    def __init__(self, table: str | InnerQuery, connection: 'Connection') -> None:
        self._table = table
        self._connection = connection

    @property
    def name(self) -> str:
        return self._table.alias if isinstance(self._table, InnerQuery) else self._table

    def select(self, columns: Sequence[str] = ('*',)) -> Select:
        return Select(self._table, columns, self._connection)

    def insert(self) -> Insert:
        return Insert(self.name, self._connection)

    def replace(self) -> Replace:
        return Replace(self.name, self._connection)

    def update(self) -> Update:
        return Update(self.name, self._connection)

    def delete(self) -> Delete:
        return Delete(self.name, self._connection)

    def info(self) -> list[dict[str, Any]]:
        """
        Column definitions of the table (MySQL ``INFORMATION_SCHEMA``).

        Returns:
            One dictionary per column, empty when the table is unknown
        """
        self._connection.query(TABLE_INFO_SQL)
        self._connection.bind(':table', self.name)
        self._connection.bind(':dbs', self._connection.database_name)
        return self._connection.result_set()


class Query:
    """Static entry point: ``Query.from_('users', conn).select()``."""

    ORDER_ASC = ORDER_ASC
    ORDER_DESC = ORDER_DESC

    @staticmethod
    def from_(table: str | InnerQuery, connection: 'Connection') -> Table:
        return Table(table, connection)
