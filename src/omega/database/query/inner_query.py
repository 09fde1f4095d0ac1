"""Table reference: a plain table name or an aliased sub query."""

from typing import TYPE_CHECKING

from omega.database.query.bind import Bind

if TYPE_CHECKING:
    from omega.database.query.select import Select


class InnerQuery:
    """
    Either a table name or ``(SELECT ...) AS alias``.

    With a ``select`` the instance is a derived table and ``table`` is its
    alias; without one, ``table`` is the plain table name.
    """

    __slots__ = ('_select', '_table')

    def __init__(self, select: 'Select | None' = None, table: str = '') -> None:
        self._select = select
        self._table = table

    @property
    def is_sub_query(self) -> bool:
        return self._select is not None

    @property
    def alias(self) -> str:
        return self._table

    @property
    def select(self) -> 'Select | None':
        return self._select

    def get_bind(self) -> list[Bind]:
        """Copies of the sub query's binds (empty for a plain table)."""
        if self._select is None:
            return []
        return [bind.copy() for bind in self._select.get_binds()]

    def __str__(self) -> str:
        if self._select is None:
            return self._table
        return f'({str(self._select).strip()}) AS {self._table}'

    def __repr__(self) -> str:
        return f'InnerQuery({self!s})'
