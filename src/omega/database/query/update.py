"""UPDATE builder."""

from collections.abc import Mapping
from typing import TYPE_CHECKING
from typing import Any
from typing import Self

from omega.database.query.base import AbstractExecute
from omega.database.query.bind import Bind
from omega.database.query.conditions import ConditionMixin
from omega.database.query.conditions import SubQueryMixin
from omega.database.query.insert import VALUE_PREFIX
from omega.database.query.join import AbstractJoin

if TYPE_CHECKING:
    from omega.database.connection import Connection


class Update(ConditionMixin, SubQueryMixin, AbstractExecute):
    """
    UPDATE statement.

    Assigned values use ``:bind_<column>`` placeholders, filters use
    ``:<column>``, so a column can be both set and filtered on.
    """

    def __init__(self, table: str, connection: 'Connection') -> None:
        super().__init__(connection)
        self._table = table

    def value(self, column: str, value: Any) -> Self:  # noqa: ANN401
        self._binds.append(Bind.set(column, value, column).prefix_bind(VALUE_PREFIX))
        return self

    def values(self, values: Mapping[str, Any]) -> Self:
        for column, value in values.items():
            self.value(column, value)
        return self

    def join(self, join: AbstractJoin) -> Self:
        self._add_join(join, self._table)
        return self

    def builder(self) -> str:
        setter = ', '.join(f'{bind.column_name} = {bind.placeholder}' for bind in self._binds if bind.is_column)
        self._query = self._assemble(
            f'UPDATE {self._table}',
            self._join_builder(),
            f'SET {setter}',
            self.get_where(),
        )
        return self._query
