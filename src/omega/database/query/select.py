"""SELECT builder."""

from collections.abc import Sequence
from typing import TYPE_CHECKING
from typing import Any
from typing import Self

from omega.database.query.base import AbstractFetch
from omega.database.query.conditions import ConditionMixin
from omega.database.query.conditions import SubQueryMixin
from omega.database.query.constants import ORDER_ASC
from omega.database.query.constants import OrderDirection
from omega.database.query.inner_query import InnerQuery
from omega.database.query.join import AbstractJoin

if TYPE_CHECKING:
    from omega.database.connection import Connection


class Select(ConditionMixin, SubQueryMixin, AbstractFetch):
    """
    SELECT statement over a table or a derived table.

    Clause order is fixed: joins, WHERE, GROUP BY, ORDER BY, LIMIT.
    """

    def __init__(
        self,
        table: str | InnerQuery,
        columns: Sequence[str],
        connection: 'Connection',
        options: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            table: Table name or ``InnerQuery``; a sub query hands its binds
                over to this builder
            columns: Selected columns
            connection: Connection used by the fetch methods
            options: Extra options; ``query`` overrides the SQL prefix
                reported before the first ``builder()`` call
        """
        super().__init__(connection)
        self._sub_query = table if isinstance(table, InnerQuery) else InnerQuery(table=table)
        self._columns = list(columns)

        if isinstance(table, InnerQuery):
            self._binds = table.get_bind()

        options = options or {}
        self._query = options.get('query', f'SELECT {", ".join(self._columns)} FROM {self._sub_query}')

    @classmethod
    def from_(cls, table: str | InnerQuery, columns: Sequence[str], connection: 'Connection') -> 'Select':
        return cls(table, columns, connection)

    def reset(self) -> Self:
        """Drop every clause; binds of a derived table are taken over again."""
        super().reset()
        self._binds = self._sub_query.get_bind()
        return self

    def join(self, join: AbstractJoin) -> Self:
        """Attach a JOIN against this query's table (or alias)."""
        self._add_join(join, self._where_table())
        return self

    def limit(self, limit_start: int, limit_end: int) -> Self:
        return self.limit_start(limit_start).limit_end(limit_end)

    def limit_start(self, value: int) -> Self:
        self._limit_start = max(value, 0)
        return self

    def limit_end(self, value: int) -> Self:
        self._limit_end = max(value, 0)
        return self

    def offset(self, value: int) -> Self:
        self._offset = max(value, 0)
        return self

    def limit_offset(self, limit: int, offset: int) -> Self:
        """Switch to the ``LIMIT n OFFSET m`` form."""
        return self.limit_start(limit).limit_end(0).offset(offset)

    def order(self, column_name: str, order_using: int = ORDER_ASC, belong_to: str | None = None) -> Self:
        """
        Add an ORDER BY entry.

        Args:
            column_name: Column (or expression) to sort by
            order_using: ``ORDER_ASC`` or ``ORDER_DESC``
            belong_to: Table qualifier, defaults to this query's table

        Returns:
            Self for chaining
        """
        direction = OrderDirection.ASC if order_using == ORDER_ASC else OrderDirection.DESC
        belong_to = belong_to or self._where_table()
        self._sort_order[f'{belong_to}.{column_name}'] = direction.value
        return self

    def order_if_not_null(self, column_name: str, order_using: int = ORDER_ASC, belong_to: str | None = None) -> Self:
        return self.order(f'{column_name} IS NOT NULL', order_using, belong_to)

    def order_if_null(self, column_name: str, order_using: int = ORDER_ASC, belong_to: str | None = None) -> Self:
        return self.order(f'{column_name} IS NULL', order_using, belong_to)

    def group_by(self, *groups: str) -> Self:
        self._group_by = list(groups)
        return self

    def sort_order_ref(self, limit_start: int, limit_end: int, offset: int, sort_order: dict[str, str]) -> None:
        """Copy paging and ordering from another query."""
        self._limit_start = limit_start
        self._limit_end = limit_end
        self._offset = offset
        self._sort_order = dict(sort_order)

    def _get_limit(self) -> str:
        limit = f'LIMIT {self._limit_end}' if self._limit_end > 0 else ''
        if self._limit_start == 0:
            return limit
        if self._limit_end == 0 and self._offset > 0:
            return f'LIMIT {self._limit_start} OFFSET {self._offset}'
        return f'LIMIT {self._limit_start}, {self._limit_end}'

    def _get_group_by(self) -> str:
        if not self._group_by:
            return ''
        return f'GROUP BY {", ".join(self._group_by)}'

    def _get_order_by(self) -> str:
        if not self._sort_order:
            return ''
        orders = ', '.join(f'{column} {order}' for column, order in self._sort_order.items())
        return f'ORDER BY {orders}'

    def builder(self) -> str:
        self._query = self._assemble(
            f'SELECT {", ".join(self._columns)} FROM {self._sub_query}',
            self._join_builder(),
            self.get_where(),
            self._get_group_by(),
            self._get_order_by(),
            self._get_limit(),
        )
        return self._query
