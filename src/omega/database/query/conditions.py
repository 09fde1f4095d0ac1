"""Condition composition shared by query builders and ``Where``."""

from collections.abc import Iterable
from collections.abc import Mapping
from typing import TYPE_CHECKING
from typing import Any
from typing import Self

from omega.database.query.bind import Bind
from omega.database.query.constants import Operator
from omega.database.query.constants import token
from omega.database.query.filters import Filter
from omega.database.query.filters import FilterGroup
from omega.database.query.filters import FilterGroupBuilder
from omega.database.query.filters import bind_name_for

if TYPE_CHECKING:
    from omega.database.query.inner_query import InnerQuery
    from omega.database.query.select import Select

# (placeholder, value) pair accepted by where()
RawBind = Bind | tuple[str, Any]
GroupConditions = Mapping[str, Any] | Iterable[tuple[str, str | Operator, Any]]


class ConditionMixin:
    """
    Filter, raw-fragment and group registration.

    Hosts must provide ``_table``, ``_sub_query``, ``_binds``, ``_where``,
    ``_filters``, ``_group_filters`` and ``_strict_mode``.
    """

    _table: str
    _sub_query: 'InnerQuery | None'
    _binds: list[Bind]
    _where: list[str]
    _filters: dict[str, Filter]
    _group_filters: list[FilterGroup]
    _strict_mode: bool

    def _condition_table(self) -> str:
        """Table (or sub query alias) used to qualify bare column names."""
        return self._table if self._sub_query is None else self._sub_query.alias

    def _add_filter_bind(self, name: str, value: Any) -> None:  # noqa: ANN401
        self._binds.append(Bind(name, value))

    def compare(
        self,
        field_name: str,
        comparison: str | Operator,
        value: Any,  # noqa: ANN401
        bind_name: str | None = None,
    ) -> Self:
        """
        Add a filter to the current (ungrouped) filter set.

        An empty-string value keeps the filter registered but leaves it out
        of the rendered WHERE clause. Adding the same field again replaces
        its filter.

        Args:
            field_name: Column, optionally qualified (``table.column``)
            comparison: Comparison operator, any string is accepted
            value: Value to compare with
            bind_name: Bind name override (defaults to the field name with
                dots replaced by double underscores)

        Returns:
            Self for chaining
        """
        name = bind_name or bind_name_for(field_name)
        self._add_filter_bind(name, value)
        self._filters[field_name] = Filter(field_name, value, token(comparison), name)
        return self

    def equal(self, field_name: str, value: Any, bind_name: str | None = None) -> Self:  # noqa: ANN401
        return self.compare(field_name, Operator.EQ, value, bind_name)

    def like(self, field_name: str, value: Any, bind_name: str | None = None) -> Self:  # noqa: ANN401
        return self.compare(field_name, Operator.LIKE, value, bind_name)

    def where(self, condition: str, binds: Iterable[RawBind] = ()) -> Self:
        """
        Add a raw WHERE fragment.

        Args:
            condition: SQL boolean expression, used verbatim
            binds: ``Bind`` objects or ``(placeholder, value)`` pairs; pairs
                keep the placeholder exactly as written

        Returns:
            Self for chaining
        """
        self._where.append(condition)
        for bind in binds:
            if isinstance(bind, Bind):
                self._binds.append(bind)
                continue
            placeholder, value = bind
            self._binds.append(Bind.set(placeholder, value).prefix_bind(''))
        return self

    def _free_placeholder(self, placeholder: str) -> str:
        """``placeholder``, or ``placeholder_<n>`` when a bind already uses it."""
        taken = {bind.placeholder for bind in self._binds}
        candidate, suffix = placeholder, 0
        while candidate in taken:
            suffix += 1
            candidate = f'{placeholder}_{suffix}'
        return candidate

    def between(self, column_name: str, start: Any, end: Any) -> Self:  # noqa: ANN401
        table = self._condition_table()
        start_name = self._free_placeholder(':b_start')
        end_name = self._free_placeholder(':b_end')
        return self.where(
            f'({table}.{column_name} BETWEEN {start_name} AND {end_name})',
            [(start_name, start), (end_name, end)],
        )

    def in_(self, column_name: str, values: Iterable[Any]) -> Self:
        taken = {bind.placeholder for bind in self._binds}
        binder = []
        index = 0
        for value in values:
            while f':in_{index}' in taken:
                index += 1
            binder.append((f':in_{index}', value))
            index += 1
        placeholders = ', '.join(placeholder for placeholder, _ in binder)
        table = self._condition_table()
        return self.where(f'({table}.{column_name} IN ({placeholders}))', binder)

    def strict_mode(self, strict: bool) -> Self:
        """Select AND (True) or OR (False) for ungrouped filters and raw fragments."""
        self._strict_mode = strict
        return self

    def group(self, strict: bool = True) -> FilterGroupBuilder:
        """Open a filter group; close it with ``end()`` or a ``with`` block."""
        return FilterGroupBuilder(self, strict)

    def _conditions_group(self, conditions: GroupConditions, strict: bool) -> Self:
        builder = self.group(strict)
        if isinstance(conditions, Mapping):
            for field_name, value in conditions.items():
                builder.equal(field_name, value)
        else:
            for field_name, comparison, value in conditions:
                builder.compare(field_name, comparison, value)
        return builder.end()

    def and_group(self, conditions: GroupConditions) -> Self:
        """Add a group whose conditions are joined by AND."""
        return self._conditions_group(conditions, strict=True)

    def or_group(self, conditions: GroupConditions) -> Self:
        """Add a group whose conditions are joined by OR."""
        return self._conditions_group(conditions, strict=False)


class SubQueryMixin:
    """Raw WHERE fragments built around a nested SELECT."""

    _binds: list[Bind]
    _where: list[str]

    def where_clause(self, clause: str, select: 'Select') -> Self:
        """
        Add ``<clause> ( <select> )`` and take over the sub query's binds.

        Args:
            clause: Leading SQL, e.g. ``EXISTS`` or ``id IN``
            select: Nested query

        Returns:
            Self for chaining
        """
        self._where.append(' '.join([clause, '(', str(select), ')']))
        self._binds.extend(bind.copy() for bind in select.get_binds())
        return self

    def where_compare(self, column_name: str, operator: str | Operator, select: 'Select') -> Self:
        return self.where_clause(f'{column_name} {token(operator)}', select)

    def where_exist(self, select: 'Select') -> Self:
        return self.where_clause('EXISTS', select)

    def where_not_exist(self, select: 'Select') -> Self:
        return self.where_clause('NOT EXISTS', select)

    def where_equal(self, column_name: str, select: 'Select') -> Self:
        return self.where_compare(column_name, Operator.EQ, select)

    def where_like(self, column_name: str, select: 'Select') -> Self:
        return self.where_compare(column_name, Operator.LIKE, select)

    def where_in(self, column_name: str, select: 'Select') -> Self:
        return self.where_compare(column_name, Operator.IN, select)
