"""Fluent SQL statement builders."""

from omega.database.query.base import AbstractExecute
from omega.database.query.base import AbstractFetch
from omega.database.query.base import AbstractQuery
from omega.database.query.base import FetchResult
from omega.database.query.bind import Bind
from omega.database.query.bind import ColumnBind
from omega.database.query.constants import ORDER_ASC
from omega.database.query.constants import ORDER_DESC
from omega.database.query.constants import JoinType
from omega.database.query.constants import Operator
from omega.database.query.constants import OrderDirection
from omega.database.query.delete import Delete
from omega.database.query.filters import Filter
from omega.database.query.filters import FilterGroup
from omega.database.query.filters import FilterGroupBuilder
from omega.database.query.inner_query import InnerQuery
from omega.database.query.insert import Insert
from omega.database.query.insert import Replace
from omega.database.query.join import AbstractJoin
from omega.database.query.join import CrossJoin
from omega.database.query.join import FullJoin
from omega.database.query.join import InnerJoin
from omega.database.query.join import LeftJoin
from omega.database.query.join import RightJoin
from omega.database.query.select import Select
from omega.database.query.table import Query
from omega.database.query.table import Table
from omega.database.query.update import Update
from omega.database.query.where import Where

__all__ = [
    'ORDER_ASC',
    'ORDER_DESC',
    'AbstractExecute',
    'AbstractFetch',
    'AbstractJoin',
    'AbstractQuery',
    'Bind',
    'ColumnBind',
    'CrossJoin',
    'Delete',
    'FetchResult',
    'Filter',
    'FilterGroup',
    'FilterGroupBuilder',
    'FullJoin',
    'InnerJoin',
    'InnerQuery',
    'Insert',
    'JoinType',
    'LeftJoin',
    'Operator',
    'OrderDirection',
    'Query',
    'Replace',
    'RightJoin',
    'Select',
    'Table',
    'Update',
    'Where',
]
