"""Filter entries and filter groups used to compose WHERE clauses."""

from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from typing import TYPE_CHECKING
from typing import Any

from omega.database.query.constants import Operator
from omega.database.query.constants import token

if TYPE_CHECKING:
    from omega.database.query.conditions import ConditionMixin

# Filter value meaning "leave this condition out"
OPTIONAL = ''


def bind_name_for(field_name: str) -> str:
    """Default bind name of a field (``table.col`` becomes ``table__col``)."""
    return field_name.replace('.', '__')


def is_optional_value(value: Any) -> bool:  # noqa: ANN401
    return isinstance(value, str) and value == OPTIONAL


@dataclass(slots=True)
class Filter:
    """Single ``column <comparison> :bind`` condition."""

    field_name: str
    value: Any
    comparison: str
    bind_name: str

    @property
    def is_optional(self) -> bool:
        return is_optional_value(self.value)

    def render(self, table: str) -> str:
        """
        Render the condition.

        Args:
            table: Table (or alias) used to qualify unqualified field names

        Returns:
            Parenthesized condition
        """
        column = self.field_name if '.' in self.field_name else f'{table}.{self.field_name}'
        return f'({column} {self.comparison} :{self.bind_name})'


@dataclass(slots=True)
class FilterGroup:
    """Filters joined by AND (strict) or OR."""

    filters: dict[str, Filter] = field(default_factory=dict)
    strict: bool = True

    def copy(self) -> 'FilterGroup':
        return replace(self, filters={name: replace(f) for name, f in self.filters.items()})


class FilterGroupBuilder:
    """
    Collects filters for one group of a query.

    Returned by ``group()``. ``end()`` appends the group to the owning
    query and hands the query back for further chaining::

        query.group(strict=False).equal('a', 1).equal('b', 2).end().limit(0, 10)

    Also usable as a context manager, which appends the group on a clean
    exit.
    """

    def __init__(self, owner: 'ConditionMixin', strict: bool = True) -> None:
        self._owner = owner
        self._group = FilterGroup(strict=strict)
        self._closed = False

    def compare(
        self,
        field_name: str,
        comparison: str | Operator,
        value: Any,  # noqa: ANN401
        bind_name: str | None = None,
    ) -> 'FilterGroupBuilder':
        name = bind_name or bind_name_for(field_name)
        self._owner._add_filter_bind(name, value)
        self._group.filters[field_name] = Filter(field_name, value, token(comparison), name)
        return self

    def equal(self, field_name: str, value: Any, bind_name: str | None = None) -> 'FilterGroupBuilder':  # noqa: ANN401
        return self.compare(field_name, Operator.EQ, value, bind_name)

    def like(self, field_name: str, value: Any, bind_name: str | None = None) -> 'FilterGroupBuilder':  # noqa: ANN401
        return self.compare(field_name, Operator.LIKE, value, bind_name)

    def end(self) -> 'ConditionMixin':
        """Append the group to the owning query and return the query."""
        if not self._closed:
            self._owner._group_filters.append(self._group)
            self._closed = True
        return self._owner

    def __enter__(self) -> 'FilterGroupBuilder':
        return self

    def __exit__(self, exc_type: type[BaseException] | None, *exc_info: object) -> None:
        if exc_type is None:
            self.end()
