"""Shared state and SQL assembly for the query builders."""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING
from typing import Any
from typing import Self

import sqlparse

from omega.database.query.bind import Bind
from omega.database.query.constants import Connective
from omega.database.query.filters import Filter
from omega.database.query.filters import FilterGroup

if TYPE_CHECKING:
    from omega.database.connection import Connection
    from omega.database.query.inner_query import InnerQuery
    from omega.database.query.join import AbstractJoin
    from omega.database.query.where import Where

logger = logging.getLogger(__name__)


def render_literal(value: Any) -> str:  # noqa: ANN401
    """
    Render a bind value as an SQL literal for debug output.

    Args:
        value: Bind value

    Returns:
        Quoted string, ``true``/``false``, ``NULL`` or the plain number
    """
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'NULL'
    return str(value)


@dataclass(slots=True)
class FetchResult:
    """Rows returned by ``AbstractFetch.get()``."""

    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)

    def first(self) -> dict[str, Any] | None:
        return self.rows[0] if self.rows else None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with 'columns' and 'rows' keys
        """
        return {
            'columns': self.columns,
            'rows': self.rows,
        }

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


class AbstractQuery:
    """
    Base of every statement builder.

    Holds the table reference, the bind list and the WHERE sources (explicit
    filter groups, the current ungrouped filters and raw fragments), and
    renders them into SQL. Instances are mutable and not thread safe: build
    one per statement.
    """

    def __init__(self, connection: 'Connection') -> None:
        self._connection = connection
        self._table = ''
        self._sub_query: 'InnerQuery | None' = None
        self._query = ''
        self._reset_state()

    def _reset_state(self) -> None:
        self._columns: list[str] = ['*']
        self._binds: list[Bind] = []
        self._limit_start = 0
        self._limit_end = 0
        self._offset = 0
        self._sort_order: dict[str, str] = {}
        self._where: list[str] = []
        self._group_by: list[str] = []
        self._group_filters: list[FilterGroup] = []
        self._filters: dict[str, Filter] = {}
        self._strict_mode = True
        self._join: list[str] = []

    def reset(self) -> Self:
        """
        Drop every clause, bind and filter.

        The table reference and the connection are kept.

        Returns:
            Self for chaining
        """
        self._reset_state()
        self._query = ''
        return self

    def _merge_filters(self) -> list[FilterGroup]:
        groups = list(self._group_filters)
        if self._filters:
            groups.append(FilterGroup(self._filters, self._strict_mode))
        return groups

    def _where_table(self) -> str:
        return self._table if self._sub_query is None else self._sub_query.alias

    def _split_filters(self, group: FilterGroup) -> str:
        table = self._where_table()
        conditions = [f.render(table) for f in group.filters.values() if not f.is_optional]
        return Connective.of(group.strict).value.join(conditions)

    def _split_groups_filters(self, groups: list[FilterGroup]) -> str:
        rendered = (self._split_filters(group) for group in groups)
        # groups whose filters are all optional leave no trace
        return Connective.AND.value.join(f'( {conditions} )' for conditions in rendered if conditions)

    def get_where(self) -> str:
        """
        Render the WHERE clause.

        Explicit groups come first, the current filters form a trailing
        group. Groups are always joined by AND; raw fragments are joined
        among themselves, and to the groups, by the strict-mode connective.

        Returns:
            ``WHERE ...`` or an empty string when there are no conditions
        """
        groups = self._split_groups_filters(self._merge_filters())
        glue = Connective.of(self._strict_mode).value
        raw = glue.join(self._where)

        if groups and raw:
            return f'WHERE {groups}{glue}{raw}'
        if raw:
            return f'WHERE {raw}'
        if groups:
            return f'WHERE {groups}'
        return ''

    def binds_destructor(self) -> tuple[list[str], list[Any], list[str]]:
        """
        Split the binds into placeholders, values and distinct column names.

        Returns:
            Tuple of (placeholders, values, columns), all in insertion order
        """
        names: list[str] = []
        values: list[Any] = []
        columns: list[str] = []
        for bind in self._binds:
            names.append(bind.placeholder)
            values.append(bind.value)
            if bind.column_name not in columns:
                columns.append(bind.column_name)
        return names, values, columns

    def get_binds(self) -> list[Bind]:
        return self._binds

    def where_ref(self, where: 'Where | None') -> Self:
        """
        Import conditions from a standalone ``Where``.

        Binds, raw fragments, filters and groups are copied; the strict mode
        is overwritten. Nothing happens when ``where`` is None or empty.

        Args:
            where: Condition container to import

        Returns:
            Self for chaining
        """
        if where is None or where.is_empty():
            return self

        condition = where.get()
        self._binds.extend(bind.copy() for bind in condition['binds'])
        self._where.extend(condition['where'])
        for name, entry in condition['filters'].items():
            self._filters[name] = Filter(entry.field_name, entry.value, entry.comparison, entry.bind_name)
        self._group_filters.extend(group.copy() for group in condition['group_filters'])
        self._strict_mode = condition['is_strict']
        return self

    def _add_join(self, join: 'AbstractJoin', main_table: str) -> None:
        join.table(main_table)
        self._join.append(join.string_join())
        if join.sub_query is not None:
            self._binds.extend(join.sub_query.get_bind())

    def _join_builder(self) -> str:
        return ' '.join(self._join)

    @staticmethod
    def _assemble(*parts: str) -> str:
        """Join the non-empty SQL parts with single spaces."""
        return ' '.join(part for part in parts if part)

    def builder(self) -> str:
        """Assemble the final SQL."""
        return ''

    def __str__(self) -> str:
        return self.builder()

    def query_bind(self) -> str:
        """
        Return the SQL with every placeholder replaced by its literal value.

        Longer placeholders are matched first, so ``:id`` never eats the
        start of ``:id_2``. A placeholder bound twice shows the later value,
        which is the one the connection receives. Meant for logging and
        debugging only.

        Returns:
            Interpolated SQL
        """
        names, values, _ = self.binds_destructor()
        literals: dict[str, str] = {}
        for bind, name, value in zip(self._binds, names, values):
            if not bind.is_unbound:
                literals[name] = render_literal(value)

        sql = self.builder()
        if not literals:
            return sql

        pattern = re.compile(
            '(?:' + '|'.join(re.escape(name) for name in sorted(literals, key=len, reverse=True)) + r')(?!\w)',
        )
        return pattern.sub(lambda match: literals[match.group(0)], sql)

    def debug_sql(self) -> str:
        """Interpolated SQL formatted for reading."""
        return sqlparse.format(self.query_bind(), reindent=True, keyword_case='upper')

    def _prepare(self) -> str:
        """Send the SQL and every bound bind to the connection."""
        sql = self.builder()
        logger.debug(f'Prepared SQL: {sql}')
        self._connection.query(sql)
        for bind in self._binds:
            if not bind.is_unbound:
                self._connection.bind(bind.placeholder, bind.value)
        return sql


class AbstractFetch(AbstractQuery):
    """Builder whose statement returns rows."""

    def single(self) -> dict[str, Any] | None:
        """First row, or None when nothing matched."""
        self._prepare()
        return self._connection.single()

    def all(self) -> list[dict[str, Any]]:
        """All rows as dictionaries."""
        self._prepare()
        return self._connection.result_set()

    def get(self) -> FetchResult:
        """
        All rows wrapped in a ``FetchResult``.

        Returns:
            Result with column names taken from the first row
        """
        rows = self.all()
        columns = list(rows[0].keys()) if rows else []
        return FetchResult(columns=columns, rows=rows)


class AbstractExecute(AbstractQuery):
    """Builder whose statement modifies data."""

    def execute(self) -> bool:
        """
        Run the statement.

        Returns:
            True if at least one row was affected; a statement that ran
            without touching any row also returns False
        """
        sql = self._prepare()
        if not sql:
            return False
        self._connection.execute()
        return self._connection.row_count() > 0
