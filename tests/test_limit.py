"""Tests for LIMIT / OFFSET rendering."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from omega.database.query import Select


@pytest.mark.parametrize(
    ('configure', 'expected'),
    [
        (lambda s: s.limit(0, 10), 'SELECT * FROM test LIMIT 10'),
        (lambda s: s.limit_start(5).offset(20), 'SELECT * FROM test LIMIT 5 OFFSET 20'),
        (lambda s: s.limit(5, 10), 'SELECT * FROM test LIMIT 5, 10'),
        (lambda s: s.limit(5, 10).offset(20), 'SELECT * FROM test LIMIT 5, 10'),
        (lambda s: s.limit(2, -1), 'SELECT * FROM test LIMIT 2, 0'),
        (lambda s: s.limit(-1, 2), 'SELECT * FROM test LIMIT 2'),
        (lambda s: s.limit(-1, -1), 'SELECT * FROM test'),
        (lambda s: s.limit_start(1).offset(10), 'SELECT * FROM test LIMIT 1 OFFSET 10'),
        (lambda s: s.limit_offset(5, 20), 'SELECT * FROM test LIMIT 5 OFFSET 20'),
        (lambda s: s.limit(3, 9).limit_offset(5, -4), 'SELECT * FROM test LIMIT 5, 0'),
        (lambda s: s.offset(20), 'SELECT * FROM test'),
    ],
    ids=[
        'end_only',
        'start_offset',
        'start_end',
        'start_end_wins_over_offset',
        'negative_end',
        'negative_start',
        'both_negative',
        'offset_form',
        'limit_offset',
        'limit_offset_negative_offset',
        'offset_without_limit',
    ],
)
def test_limit_modes(configure: Callable[[Select], Select], expected: str, connection: MagicMock) -> None:
    select = configure(Select('test', ['*'], connection))

    assert str(select) == expected
