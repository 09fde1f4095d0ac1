"""JOIN clauses."""

from typing import Self

from omega.database.query.constants import JoinType
from omega.database.query.inner_query import InnerQuery


class AbstractJoin:
    """
    One JOIN against a table or a derived table.

    The main table is filled in by the builder the join is attached to::

        Select.from_('orders', ['*'], conn).join(InnerJoin.ref('users', 'user_id', 'id'))
    """

    join_type: JoinType

    def __init__(self) -> None:
        self._main_table = ''
        self._table_name = ''
        self._compare_columns: list[tuple[str, str]] = []
        self._sub_query: InnerQuery | None = None

    def __call__(self, main_table: str) -> Self:
        return self.table(main_table)

    def __str__(self) -> str:
        return self.string_join()

    @classmethod
    def ref(cls, ref_table: str | InnerQuery, id: str, ref_id: str | None = None) -> Self:  # noqa: A002
        """
        Create a join on ``main.id = ref_table.ref_id``.

        Args:
            ref_table: Joined table name or derived table
            id: Column of the main table
            ref_id: Column of the joined table (defaults to ``id``)

        Returns:
            New join instance
        """
        instance = cls()
        if isinstance(ref_table, InnerQuery):
            return instance.clause(ref_table).compare(id, ref_id)
        return instance.table_ref(ref_table).compare(id, ref_id)

    @property
    def sub_query(self) -> InnerQuery | None:
        """Derived table joined by this clause, if any."""
        return self._sub_query

    def table(self, main_table: str) -> Self:
        self._main_table = main_table
        return self

    def clause(self, select: InnerQuery) -> Self:
        self._sub_query = select
        self._table_name = select.alias
        return self

    def table_ref(self, ref_table: str) -> Self:
        self._table_name = ref_table
        return self

    def table_relation(self, main_table: str, ref_table: str) -> Self:
        self._main_table = main_table
        self._table_name = ref_table
        return self

    def compare(self, main_column: str, compare_column: str | None = None) -> Self:
        """Add an ``ON`` column pair; several pairs are joined by AND."""
        self._compare_columns.append((main_column, compare_column or main_column))
        return self

    def string_join(self) -> str:
        return self._join_builder()

    def _join_builder(self) -> str:
        return f'{self.join_type.value} {self._get_alias()} ON {self._split_join()}'

    def _split_join(self) -> str:
        return ' AND '.join(
            f'{self._main_table}.{main_column} = {self._table_name}.{compare_column}'
            for main_column, compare_column in self._compare_columns
        )

    def _get_alias(self) -> str:
        return self._table_name if self._sub_query is None else str(self._sub_query)


class InnerJoin(AbstractJoin):
    join_type = JoinType.INNER


class LeftJoin(AbstractJoin):
    join_type = JoinType.LEFT


class RightJoin(AbstractJoin):
    join_type = JoinType.RIGHT


class FullJoin(AbstractJoin):
    join_type = JoinType.FULL


class CrossJoin(AbstractJoin):
    join_type = JoinType.CROSS

    def _join_builder(self) -> str:
        return f'{self.join_type.value} {self._get_alias()}'
