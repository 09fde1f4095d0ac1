"""Single-connection database wrapper built on SQLAlchemy."""

import re
import time
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import URL
from sqlalchemy import Boolean
from sqlalchemy import Engine
from sqlalchemy import Integer
from sqlalchemy import String
from sqlalchemy import bindparam
from sqlalchemy import create_engine
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.sqltypes import NullType
from sqlalchemy.types import TypeEngine

from omega.database.config import DatabaseSettings
from omega.database.exceptions import DatabaseConnectionError

logger = structlog.get_logger(__name__)

# Same shape SQLAlchemy's text() uses to find ``:name`` parameters
_PLACEHOLDER_PATTERN = re.compile(r'(?<![:\w\x5c]):(\w+)(?!:)')


def infer_bind_type(value: Any) -> TypeEngine:  # noqa: ANN401
    """
    Pick the SQL type for a bind value.

    ``bool`` is checked before ``int`` because it is a subclass of it.

    Args:
        value: Bind value

    Returns:
        SQLAlchemy type instance
    """
    if isinstance(value, bool):
        return Boolean()
    if isinstance(value, int):
        return Integer()
    if value is None:
        return NullType()
    return String()


class Connection:
    """
    Synchronous, single-connection database handle.

    Usage follows a prepare / bind / run sequence::

        conn.query('SELECT * FROM users WHERE id = :id')
        conn.bind(':id', 1)
        row = conn.single()

    One instance wraps one checked-out SQLAlchemy connection. It is not
    safe for concurrent use.
    """

    def __init__(
        self,
        config: DatabaseSettings | Mapping[str, Any] | str | URL | None = None,
        engine: Engine | None = None,
    ) -> None:
        """
        Create the engine (unless given) and connect.

        Args:
            config: Settings object, legacy config mapping, or database URL
            engine: Pre-built engine; ``config`` is then only informational

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        self._settings = self._resolve_settings(config)
        try:
            self._engine = engine or create_engine(self._settings.url(), echo=self._settings.echo)
            self._connection = self._engine.connect()
        except SQLAlchemyError as e:
            msg = f'Could not connect to database: {e}'
            raise DatabaseConnectionError(msg, original_error=e) from e

        self._query = ''
        self._params: dict[str, Any] = {}
        self._types: dict[str, TypeEngine] = {}
        self._rows: list[dict[str, Any]] = []
        self._row_count = 0
        self._last_insert_id: int | None = None
        self._transaction = None
        self._logs: list[dict[str, Any]] = []

    @classmethod
    def conn(cls, config: DatabaseSettings | Mapping[str, Any] | str | URL) -> 'Connection':
        """Create a connection from configuration."""
        return cls(config)

    @classmethod
    def from_engine(cls, engine: Engine) -> 'Connection':
        """
        Wrap an existing SQLAlchemy engine.

        Args:
            engine: SQLAlchemy engine

        Returns:
            Connected instance
        """
        return cls(DatabaseSettings(database_url=engine.url.render_as_string(hide_password=False)), engine=engine)

    @staticmethod
    def _resolve_settings(config: DatabaseSettings | Mapping[str, Any] | str | URL | None) -> DatabaseSettings:
        if config is None:
            return DatabaseSettings()
        if isinstance(config, DatabaseSettings):
            return config
        if isinstance(config, URL):
            return DatabaseSettings(database_url=config.render_as_string(hide_password=False))
        if isinstance(config, str):
            return DatabaseSettings(database_url=config)
        return DatabaseSettings(**dict(config))

    @property
    def engine(self) -> Engine:
        """Underlying SQLAlchemy engine."""
        return self._engine

    @property
    def database_name(self) -> str:
        """Name of the connected database (schema)."""
        return self._settings.database_name or self._engine.url.database or ''

    def get_config(self) -> DatabaseSettings:
        """Return the settings this connection was created with."""
        return self._settings

    def query(self, query: str) -> 'Connection':
        """
        Prepare a statement for the following bind/execute calls.

        Args:
            query: SQL with ``:name`` placeholders

        Returns:
            Self for chaining
        """
        self._query = query
        self._params = {}
        self._types = {}
        return self

    def bind(self, param: str, value: Any, type_: TypeEngine | None = None) -> 'Connection':  # noqa: ANN401
        """
        Bind one parameter of the prepared statement.

        Args:
            param: Placeholder name, with or without the leading colon
            value: Parameter value
            type_: Explicit SQL type (inferred from the value when omitted)

        Returns:
            Self for chaining
        """
        name = param.lstrip(':')
        self._params[name] = value
        self._types[name] = type_ if type_ is not None else infer_bind_type(value)
        return self

    def _statement(self) -> Any:  # noqa: ANN401
        used = set(_PLACEHOLDER_PATTERN.findall(self._query))
        unused = [name for name in self._params if name not in used]
        if unused:
            logger.debug('binds_ignored', names=unused)

        params = [
            bindparam(name, self._params[name], type_=self._types[name])
            for name in self._params
            if name in used
        ]
        return text(self._query).bindparams(*params)

    def execute(self) -> bool:
        """
        Run the prepared statement.

        Rows are buffered so they survive the implicit commit.

        Returns:
            True once the statement ran

        Raises:
            SQLAlchemyError: Driver errors propagate unchanged
        """
        start = time.perf_counter()
        try:
            result = self._connection.execute(self._statement())
            self._rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
            self._row_count = result.rowcount
            self._last_insert_id = getattr(result, 'lastrowid', None)
            if self._transaction is None:
                self._connection.commit()
        except SQLAlchemyError as e:
            logger.error('query_failed', sql=self._query, error=str(e))
            if self._transaction is None:
                self._connection.rollback()
            raise

        elapsed = round((time.perf_counter() - start) * 1000, 2)
        self._add_log(self._query, elapsed)
        logger.debug('query_executed', sql=self._query, elapsed_ms=elapsed, row_count=self._row_count)
        return True

    def result_set(self) -> list[dict[str, Any]]:
        """Execute and return all rows as dictionaries."""
        self.execute()
        return list(self._rows)

    def single(self) -> dict[str, Any] | None:
        """Execute and return the first row, or None."""
        self.execute()
        return self._rows[0] if self._rows else None

    def row_count(self) -> int:
        """Affected (or selected) row count of the last statement."""
        return self._row_count

    def last_insert_id(self) -> int | None:
        """Auto-increment id generated by the last INSERT."""
        return self._last_insert_id

    def transaction(self, callback: Callable[[], Any]) -> bool:
        """
        Run ``callback`` inside a transaction.

        The transaction is committed unless the callback returns ``False``.
        An exception rolls the transaction back and is re-raised.

        Args:
            callback: Callable executed between begin and commit

        Returns:
            Result of commit, or False when rolled back
        """
        if not self.begin_transaction():
            return False

        try:
            outcome = callback()
        except Exception:
            self.rollback()
            raise

        if outcome is False:
            self.rollback()
            return False

        return self.commit()

    def begin_transaction(self) -> bool:
        """Open an explicit transaction; False if one is already open."""
        if self._transaction is not None or self._connection.in_transaction():
            return False
        self._transaction = self._connection.begin()
        return True

    def commit(self) -> bool:
        """Commit the explicit transaction; False if none is open."""
        if self._transaction is None:
            return False
        self._transaction.commit()
        self._transaction = None
        return True

    def rollback(self) -> bool:
        """Roll back the explicit transaction; False if none is open."""
        if self._transaction is None:
            return False
        self._transaction.rollback()
        self._transaction = None
        return True

    def _add_log(self, query: str, elapsed_time: float) -> None:
        self._logs.append({
            'query': query,
            'time': elapsed_time,
        })

    def get_logs(self) -> list[dict[str, Any]]:
        """Executed statements with their run time in milliseconds."""
        return self._logs

    def flush_logs(self) -> None:
        """Clear the statement log."""
        self._logs = []

    def close(self) -> None:
        """Close the connection and dispose the engine."""
        self._connection.close()
        self._engine.dispose()

    def __enter__(self) -> 'Connection':
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
