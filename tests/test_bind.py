from omega.database.query import Bind
from omega.database.query import ColumnBind


def test_placeholder_uses_default_prefix() -> None:
    assert Bind('id', 1).placeholder == ':id'


def test_prefix_bind() -> None:
    bind = Bind('name', 'x').prefix_bind(':bind_')

    assert bind.placeholder == ':bind_name'


def test_empty_name_is_unbound() -> None:
    assert Bind('', 1).is_unbound
    assert not Bind('id', 1).is_unbound


def test_plain_bind_is_not_a_column() -> None:
    bind = Bind.set('id', 1)

    assert type(bind) is Bind
    assert not bind.is_column
    assert bind.column_name == ''


def test_set_with_column_name() -> None:
    bind = Bind.set('id', 1, 'id')

    assert isinstance(bind, ColumnBind)
    assert bind.is_column
    assert bind.column_name == 'id'


def test_mark_as_column_keeps_prefix_and_value() -> None:
    bind = Bind('status', 'active').prefix_bind(':bind_').mark_as_column()

    assert bind.is_column
    assert bind.column_name == 'status'
    assert bind.placeholder == ':bind_status'
    assert bind.value == 'active'


def test_setters_chain() -> None:
    bind = Bind('a', 1).set_bind('b').set_value(2)

    assert bind.placeholder == ':b'
    assert bind.value == 2


def test_copy_is_independent() -> None:
    original = Bind.set('a', 1, 'a')
    duplicate = original.copy()

    duplicate.set_value(5)

    assert original.value == 1
    assert isinstance(duplicate, ColumnBind)
    assert duplicate.column_name == 'a'
