"""Standalone, reusable condition container."""

from typing import Any

from omega.database.query.bind import Bind
from omega.database.query.conditions import ConditionMixin
from omega.database.query.conditions import SubQueryMixin
from omega.database.query.filters import Filter
from omega.database.query.filters import FilterGroup


class Where(ConditionMixin, SubQueryMixin):
    """
    Conditions built apart from any statement.

    Import into a builder with ``where_ref()``::

        where = Where('users').equal('status', 'active').in_('role', ['admin', 'owner'])
        Select.from_('users', ['*'], conn).where_ref(where)
    """

    def __init__(self, table: str) -> None:
        self._table = table
        self._sub_query = None
        self.flush()

    def get(self) -> dict[str, Any]:
        """
        Snapshot of the collected conditions.

        Returns:
            Dictionary with 'binds', 'where', 'filters', 'group_filters' and
            'is_strict' keys
        """
        return {
            'binds': self._binds,
            'where': self._where,
            'filters': self._filters,
            'group_filters': self._group_filters,
            'is_strict': self._strict_mode,
        }

    def flush(self) -> None:
        self._binds: list[Bind] = []
        self._where: list[str] = []
        self._filters: dict[str, Filter] = {}
        self._group_filters: list[FilterGroup] = []
        self._strict_mode = True

    def is_empty(self) -> bool:
        """
        True only when nothing was added and strict mode is still on.

        A container whose only change is ``strict_mode(False)`` is not empty.
        """
        return (
            not self._binds
            and not self._where
            and not self._filters
            and not self._group_filters
            and self._strict_mode
        )
