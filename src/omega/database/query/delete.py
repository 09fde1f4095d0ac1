"""DELETE builder."""

from typing import TYPE_CHECKING
from typing import Self

from omega.database.query.base import AbstractExecute
from omega.database.query.conditions import ConditionMixin
from omega.database.query.conditions import SubQueryMixin
from omega.database.query.join import AbstractJoin

if TYPE_CHECKING:
    from omega.database.connection import Connection


class Delete(ConditionMixin, SubQueryMixin, AbstractExecute):
    """DELETE statement, optionally through a table alias."""

    def __init__(self, table: str, connection: 'Connection') -> None:
        super().__init__(connection)
        self._table = table
        self._alias: str | None = None

    def alias(self, alias: str) -> Self:
        """Delete through ``alias`` (``DELETE a FROM t AS a``); filters and joins reference the alias."""
        self._alias = alias
        return self

    def _where_table(self) -> str:
        return self._alias or self._table

    _condition_table = _where_table

    def join(self, join: AbstractJoin) -> Self:
        self._add_join(join, self._where_table())
        return self

    def builder(self) -> str:
        if self._alias is None:
            head = f'DELETE FROM {self._table}'
        else:
            head = f'DELETE {self._alias} FROM {self._table} AS {self._alias}'
        self._query = self._assemble(head, self._join_builder(), self.get_where())
        return self._query
