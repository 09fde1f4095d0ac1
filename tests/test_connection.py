"""Tests for the SQLAlchemy-backed connection, against in-memory SQLite."""

from pathlib import Path

import pytest
from sqlalchemy import Boolean
from sqlalchemy import Integer
from sqlalchemy import String
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.sqltypes import NullType
from structlog.testing import capture_logs

from omega.database import Connection
from omega.database import DatabaseConnectionError
from omega.database import DatabaseError
from omega.database import DatabaseSettings
from omega.database.connection import infer_bind_type


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        (True, Boolean),
        (7, Integer),
        (None, NullType),
        ('text', String),
        (1.5, String),
    ],
    ids=['bool', 'int', 'none', 'str', 'other'],
)
def test_infer_bind_type(value: object, expected: type) -> None:
    assert isinstance(infer_bind_type(value), expected)


class TestQueries:
    """Prepare / bind / run sequence."""

    def test_single(self, sqlite_connection: Connection) -> None:
        row = sqlite_connection.query('SELECT name FROM users WHERE id = :id').bind(':id', 1).single()

        assert row == {'name': 'Alice'}

    def test_single_without_rows(self, sqlite_connection: Connection) -> None:
        assert sqlite_connection.query('SELECT name FROM users WHERE id = :id').bind('id', 99).single() is None

    def test_result_set(self, sqlite_connection: Connection) -> None:
        rows = sqlite_connection.query('SELECT id, name FROM users ORDER BY id').result_set()

        assert rows == [{'id': 1, 'name': 'Alice'}, {'id': 2, 'name': 'Bob'}]

    def test_insert_sets_last_insert_id_and_row_count(self, sqlite_connection: Connection) -> None:
        sqlite_connection.query('INSERT INTO users (name, email) VALUES (:name, :email)')
        sqlite_connection.bind(':name', 'Carol').bind(':email', 'carol@example.com')

        assert sqlite_connection.execute() is True
        assert sqlite_connection.last_insert_id() == 3
        assert sqlite_connection.row_count() == 1

    def test_changes_are_committed(self, sqlite_connection: Connection) -> None:
        sqlite_connection.query("UPDATE users SET status = 'gone' WHERE id = :id").bind(':id', 2).execute()

        row = sqlite_connection.query('SELECT status FROM users WHERE id = 2').single()

        assert row == {'status': 'gone'}

    def test_query_clears_previous_binds(self, sqlite_connection: Connection) -> None:
        sqlite_connection.query('SELECT name FROM users WHERE id = :id').bind(':id', 2)

        rows = sqlite_connection.query('SELECT COUNT(*) AS total FROM users').result_set()

        assert rows == [{'total': 2}]

    def test_unused_bind_is_ignored(self, sqlite_connection: Connection) -> None:
        with capture_logs() as logs:
            row = (
                sqlite_connection.query('SELECT name FROM users WHERE id = :id')
                .bind(':id', 2)
                .bind(':extra', 'x')
                .single()
            )

        assert row == {'name': 'Bob'}
        ignored = [entry for entry in logs if entry['event'] == 'binds_ignored']
        assert ignored[0]['names'] == ['extra']

    def test_explicit_bind_type(self, sqlite_connection: Connection) -> None:
        row = sqlite_connection.query('SELECT name FROM users WHERE id = :id').bind(':id', 1, Integer()).single()

        assert row == {'name': 'Alice'}

    def test_driver_error_propagates(self, sqlite_connection: Connection) -> None:
        with capture_logs() as logs, pytest.raises(OperationalError):
            sqlite_connection.query('SELECT * FROM missing_table').execute()

        assert logs[-1]['event'] == 'query_failed'
        assert logs[-1]['log_level'] == 'error'

    def test_connection_usable_after_error(self, sqlite_connection: Connection) -> None:
        with pytest.raises(OperationalError):
            sqlite_connection.query('SELECT * FROM missing_table').execute()

        assert sqlite_connection.query('SELECT COUNT(*) AS total FROM users').single() == {'total': 2}


class TestLogs:
    """Executed statement log."""

    def test_logs_record_queries(self, sqlite_connection: Connection) -> None:
        sqlite_connection.query('SELECT 1').execute()
        sqlite_connection.query('SELECT 2').execute()

        logs = sqlite_connection.get_logs()

        assert [entry['query'] for entry in logs] == ['SELECT 1', 'SELECT 2']
        assert all(entry['time'] >= 0 for entry in logs)

    def test_flush_logs(self, sqlite_connection: Connection) -> None:
        sqlite_connection.query('SELECT 1').execute()

        sqlite_connection.flush_logs()

        assert sqlite_connection.get_logs() == []

    def test_query_executed_event(self, sqlite_connection: Connection) -> None:
        with capture_logs() as logs:
            sqlite_connection.query('SELECT 1').execute()

        assert logs[-1]['event'] == 'query_executed'
        assert logs[-1]['sql'] == 'SELECT 1'


class TestTransactions:
    """Explicit transactions."""

    @staticmethod
    def _count(connection: Connection) -> int:
        return connection.query('SELECT COUNT(*) AS total FROM users').single()['total']

    @staticmethod
    def _insert(connection: Connection, name: str) -> None:
        connection.query('INSERT INTO users (name, email) VALUES (:name, :email)')
        connection.bind(':name', name).bind(':email', f'{name}@example.com').execute()

    def test_commit(self, sqlite_connection: Connection) -> None:
        result = sqlite_connection.transaction(lambda: self._insert(sqlite_connection, 'carol'))

        assert result is True
        assert self._count(sqlite_connection) == 3

    def test_rollback_when_callback_returns_false(self, sqlite_connection: Connection) -> None:
        def callback() -> bool:
            self._insert(sqlite_connection, 'carol')
            return False

        assert sqlite_connection.transaction(callback) is False
        assert self._count(sqlite_connection) == 2

    def test_rollback_and_reraise_on_exception(self, sqlite_connection: Connection) -> None:
        def callback() -> None:
            self._insert(sqlite_connection, 'carol')
            msg = 'boom'
            raise RuntimeError(msg)

        with pytest.raises(RuntimeError, match='boom'):
            sqlite_connection.transaction(callback)

        assert self._count(sqlite_connection) == 2

    def test_manual_transaction(self, sqlite_connection: Connection) -> None:
        assert sqlite_connection.begin_transaction() is True
        self._insert(sqlite_connection, 'carol')

        assert sqlite_connection.rollback() is True
        assert self._count(sqlite_connection) == 2

    def test_begin_twice(self, sqlite_connection: Connection) -> None:
        assert sqlite_connection.begin_transaction() is True
        assert sqlite_connection.begin_transaction() is False
        assert sqlite_connection.commit() is True

    def test_nested_transaction_call_is_refused(self, sqlite_connection: Connection) -> None:
        sqlite_connection.begin_transaction()

        assert sqlite_connection.transaction(lambda: None) is False

        sqlite_connection.rollback()

    def test_commit_and_rollback_without_transaction(self, sqlite_connection: Connection) -> None:
        assert sqlite_connection.commit() is False
        assert sqlite_connection.rollback() is False


class TestConfiguration:
    """Settings resolution and connect failures."""

    def test_database_url_wins(self) -> None:
        settings = DatabaseSettings(database_url='sqlite://', host='ignored')

        assert settings.url() == 'sqlite://'

    def test_url_from_parts(self) -> None:
        settings = DatabaseSettings(user='u', password='p', host='db', port=3306, database_name='omega')

        assert settings.url().render_as_string(hide_password=False) == 'mysql+pymysql://u:p@db:3306/omega'

    def test_settings_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('OMEGA_DB_HOST', 'env-host')
        monkeypatch.setenv('OMEGA_DB_DATABASE_NAME', 'shop')
        monkeypatch.setenv('OMEGA_DB_PORT', '3307')

        settings = DatabaseSettings()

        assert settings.host == 'env-host'
        assert settings.database_name == 'shop'
        assert settings.port == 3307

    def test_conn_from_mapping(self) -> None:
        with Connection.conn({'database_url': 'sqlite://', 'database_name': 'main'}) as connection:
            assert connection.database_name == 'main'
            assert connection.get_config().database_url == 'sqlite://'
            assert connection.query('SELECT 1 AS one').single() == {'one': 1}

    def test_conn_from_url_string(self) -> None:
        with Connection.conn('sqlite://') as connection:
            assert connection.database_name == ''
            assert connection.engine.dialect.name == 'sqlite'

    def test_unreachable_database(self, tmp_path: Path) -> None:
        url = f'sqlite:///{tmp_path / "missing" / "db.sqlite"}'

        with pytest.raises(DatabaseConnectionError) as exc_info:
            Connection(url)

        assert isinstance(exc_info.value, DatabaseError)
        assert exc_info.value.original_error is not None
        assert exc_info.value.__cause__ is exc_info.value.original_error
        assert str(exc_info.value).startswith('Could not connect to database: ')

    def test_invalid_url(self) -> None:
        with pytest.raises(DatabaseConnectionError, match='Could not connect'):
            Connection('not a database url')

    def test_statement_errors_are_not_wrapped(self, sqlite_connection: Connection) -> None:
        with pytest.raises(OperationalError) as exc_info:
            sqlite_connection.query('SELECT * FROM missing_table').execute()

        assert not isinstance(exc_info.value, DatabaseError)
