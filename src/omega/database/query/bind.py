"""Named statement parameters."""

from dataclasses import dataclass
from dataclasses import replace
from typing import Any

DEFAULT_PREFIX = ':'


@dataclass(slots=True)
class Bind:
    """
    Named parameter of a statement.

    The placeholder sent to the connection is ``prefix + name``; a bind with
    an empty name is unbound and never sent.
    """

    name: str
    value: Any
    prefix: str = DEFAULT_PREFIX

    @classmethod
    def set(cls, name: str, value: Any, column_name: str = '') -> 'Bind':  # noqa: ANN401
        """
        Create a bind, or a column bind when ``column_name`` is given.

        Args:
            name: Bind name without prefix
            value: Parameter value
            column_name: Column assigned by this bind (INSERT/UPDATE)

        Returns:
            Bind or ColumnBind instance
        """
        if column_name:
            return ColumnBind(name, value, column_name=column_name)
        return cls(name, value)

    @property
    def placeholder(self) -> str:
        return f'{self.prefix}{self.name}'

    @property
    def column_name(self) -> str:
        return ''

    @property
    def is_column(self) -> bool:
        return False

    @property
    def is_unbound(self) -> bool:
        return self.name == ''

    def prefix_bind(self, prefix: str) -> 'Bind':
        self.prefix = prefix
        return self

    def set_bind(self, name: str) -> 'Bind':
        self.name = name
        return self

    def set_value(self, value: Any) -> 'Bind':  # noqa: ANN401
        self.value = value
        return self

    def mark_as_column(self) -> 'ColumnBind':
        """Turn this bind into a column assignment for a column of the same name."""
        return ColumnBind(self.name, self.value, self.prefix, column_name=self.name)

    def copy(self) -> 'Bind':
        return replace(self)


@dataclass(slots=True)
class ColumnBind(Bind):
    """Bind that also assigns a column (``column = :placeholder``)."""

    column_name: str = ''

    @property
    def is_column(self) -> bool:
        return self.column_name != ''
