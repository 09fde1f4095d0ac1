"""INSERT and REPLACE builders."""

from collections.abc import Iterable
from collections.abc import Mapping
from typing import TYPE_CHECKING
from typing import Any
from typing import Self

from omega.database.query.base import AbstractExecute
from omega.database.query.bind import Bind

if TYPE_CHECKING:
    from omega.database.connection import Connection

VALUE_PREFIX = ':bind_'


def _chunks(items: list[str], size: int) -> list[list[str]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


class Insert(AbstractExecute):
    """
    INSERT statement, single or multi-row.

    ``value()``/``values()`` fill one row with ``:bind_<column>``
    placeholders; ``rows()`` uses ``:bind_<row>_<column>`` so several rows
    can share one statement. Every row must list the same columns in the
    same order.
    """

    def __init__(self, table: str, connection: 'Connection') -> None:
        super().__init__(connection)
        self._table = table
        self._duplicate_key: dict[str, str] = {}

    def reset(self) -> Self:
        super().reset()
        self._duplicate_key = {}
        return self

    def value(self, column: str, value: Any) -> Self:  # noqa: ANN401
        self._binds.append(Bind.set(column, value, column).prefix_bind(VALUE_PREFIX))
        return self

    def values(self, values: Mapping[str, Any]) -> Self:
        for column, value in values.items():
            self.value(column, value)
        return self

    def rows(self, rows: Iterable[Mapping[str, Any]]) -> Self:
        """
        Add several rows.

        Args:
            rows: Column-to-value mappings, one per row

        Returns:
            Self for chaining
        """
        for index, row in enumerate(rows):
            for column, value in row.items():
                self._binds.append(Bind.set(column, value, column).prefix_bind(f'{VALUE_PREFIX}{index}_'))
        return self

    def on(self, column: str, value: str | None = None) -> Self:
        """
        Add an ``ON DUPLICATE KEY UPDATE`` assignment.

        Args:
            column: Column to update on a key conflict
            value: SQL expression, defaults to ``VALUES(column)``

        Returns:
            Self for chaining
        """
        self._duplicate_key[column] = value if value is not None else f'VALUES({column})'
        return self

    def _values_clause(self) -> tuple[str, str]:
        names, _, columns = self.binds_destructor()
        tuples = ', '.join(f'({", ".join(group)})' for group in _chunks(names, len(columns) or 1))
        return f'({", ".join(columns)})', tuples

    def _get_duplicate_key_update(self) -> str:
        if not self._duplicate_key:
            return ''
        keys = ', '.join(f'{key} = {value}' for key, value in self._duplicate_key.items())
        return f'ON DUPLICATE KEY UPDATE {keys}'

    def builder(self) -> str:
        columns, tuples = self._values_clause()
        self._query = self._assemble(
            f'INSERT INTO {self._table}',
            columns,
            'VALUES',
            tuples,
            self._get_duplicate_key_update(),
        )
        return self._query


class Replace(Insert):
    """REPLACE statement; ``on()`` entries are ignored."""

    def builder(self) -> str:
        columns, tuples = self._values_clause()
        self._query = self._assemble(f'REPLACE INTO {self._table}', columns, 'VALUES', tuples)
        return self._query
