"""
Database client: statement builders bound to a backend and a dialect.

A `Database` pairs the backend's `execute` operation with the dialect it
speaks. It is built once by `set_backend()` and only read afterwards, so
several instances (for example one per test) can coexist.

The statement builders assemble SQL text with the escaper and the clause
encoders, consult the dialect for gated syntax, and hand the text to the
backend:
- query(sql, *args) - Run SQL text, interpolating args when given
- select(fragment, *args) - Run `SELECT <fragment>`
- insert(table, values, *returning) - Run `INSERT INTO ... VALUES ...`
- update(table, values, condition, *args) - Run `UPDATE ... SET ...`
- delete(table, condition, *args) - Run `DELETE FROM ...`
- truncate(*tables) - Run `TRUNCATE ...`
"""
import logging
from collections.abc import Callable, Mapping
from typing import Any

from sqlfrag.backends import Backend, get_backend_class
from sqlfrag.dialects import Dialect, get_dialect
from sqlfrag.exceptions import EscapeError, UnsupportedFeatureError
from sqlfrag.sql import encode_assigns, encode_clause, encode_values
from sqlfrag.sql import escape_identifier, interpolate
from sqlfrag.utils import format_date

__all__ = ['Database', 'set_backend', 'TIMESTAMP_DIRECTIVE']

logger = logging.getLogger(__name__)

# Key in a column mapping asking for created_at/updated_at defaults
TIMESTAMP_DIRECTIVE = '_timestamp'

SqlLogger = Callable[[str], Any]


def _apply_timestamps(values: Mapping[Any, Any], columns: tuple[str, ...]) -> dict[Any, Any]:
    """Return a copy of values with the timestamp directive resolved.

    When the directive is set, each of `columns` missing from values is set
    to the current UTC time. The directive key itself is always removed.
    """
    values = dict(values)
    if values.pop(TIMESTAMP_DIRECTIVE, None):
        now = format_date()
        for column in columns:
            values.setdefault(column, now)
    return values


class Database:
    """Statement builders bound to a backend and its dialect.

    Attributes
        backend: Object exposing `execute(sql)`
        dialect: Capabilities consulted before emitting gated syntax
        sql_logger: Optional callable receiving every outgoing SQL text
    """

    def __init__(self, backend: Backend, dialect: Dialect | str | None = None,
                 sql_logger: SqlLogger | None = None) -> None:
        self.backend = backend
        self.dialect = get_dialect(dialect if dialect is not None else backend.dialect_name)
        self.sql_logger = sql_logger

    def __repr__(self) -> str:
        return f'Database(backend={type(self.backend).__name__}, dialect={self.dialect.name})'

    def set_logger(self, sql_logger: SqlLogger | None) -> None:
        """Install a callable invoked with every SQL text before execution.

        Pass None to remove it.
        """
        self.sql_logger = sql_logger

    def execute(self, sql: str) -> Any:
        """Send finished SQL text to the backend.
        """
        if self.sql_logger is not None:
            self.sql_logger(sql)
        logger.debug(f'Executing on {self.dialect.name}: {sql[:60]}...')
        return self.backend.execute(sql)

    def _where(self, sql: list[str], condition: Mapping[Any, Any] | str | None,
               args: tuple[Any, ...]) -> None:
        """Append a WHERE clause from a condition mapping or template string."""
        if condition is None:
            return
        if isinstance(condition, Mapping) and not condition:
            raise EscapeError('Cannot build a WHERE clause from an empty condition')
        sql.append(' WHERE ')
        if isinstance(condition, Mapping):
            encode_clause(condition, sql)
        else:
            sql.append(interpolate(condition, *args))

    def query(self, sql: str, *args: Any) -> Any:
        """Execute SQL text, substituting `?` placeholders when args are given.

        Without args the text is sent unchanged.
        """
        if args:
            sql = interpolate(sql, *args)
        return self.execute(sql)

    def select(self, fragment: str, *args: Any) -> Any:
        """Execute `SELECT` followed by the interpolated fragment.

        >>> db.select('* FROM users WHERE id = ?', 1)  # doctest: +SKIP
        """
        return self.execute('SELECT ' + interpolate(fragment, *args))

    def insert(self, table: str, values: Mapping[Any, Any], *returning: str) -> Any:
        """Insert one row.

        Args:
            table: Table name
            values: Column to value mapping; a truthy `_timestamp` entry fills
                missing `created_at` and `updated_at` with the current UTC time
            returning: Columns to return, requires a dialect with RETURNING

        Raises
            UnsupportedFeatureError: If returning columns are requested and
                the dialect lacks RETURNING
        """
        if returning and not self.dialect.returning:
            raise UnsupportedFeatureError(f'{self.dialect.name} does not support RETURNING')

        values = _apply_timestamps(values, ('created_at', 'updated_at'))
        sql = ['INSERT INTO ', escape_identifier(table), ' ']
        encode_values(values, sql)
        if returning:
            sql.extend((' RETURNING ', ', '.join(escape_identifier(col) for col in returning)))
        return self.execute(''.join(sql))

    def update(self, table: str, values: Mapping[Any, Any],
               condition: Mapping[Any, Any] | str | None = None, *args: Any) -> Any:
        """Update rows of a table.

        The condition is either a column to value mapping or a template
        string interpolated with args. A truthy `_timestamp` entry in values
        fills a missing `updated_at`.

        Raises
            EscapeError: If there is no column to assign
        """
        values = _apply_timestamps(values, ('updated_at',))
        if not values:
            raise EscapeError('Cannot build a SET clause from empty values')
        sql = ['UPDATE ', escape_identifier(table), ' SET ']
        encode_assigns(values, sql)
        self._where(sql, condition, args)
        return self.execute(''.join(sql))

    def delete(self, table: str, condition: Mapping[Any, Any] | str | None = None,
               *args: Any) -> Any:
        """Delete rows of a table, all of them without a condition.
        """
        sql = ['DELETE FROM ', escape_identifier(table)]
        self._where(sql, condition, args)
        return self.execute(''.join(sql))

    def truncate(self, *tables: str) -> Any:
        """Truncate tables, restarting identities where the dialect can.
        """
        sql = 'TRUNCATE ' + ', '.join(escape_identifier(table) for table in tables)
        return self.execute(sql + self.dialect.restart_identity)

    def entity_exists(self, name: str) -> bool:
        """Check if a table or other relation exists.
        """
        result = self.execute(interpolate(self.dialect.entity_exists_query, name))
        if not result:
            return False
        row = result[0]
        if isinstance(row, Mapping) and 'c' in row:
            return int(row['c']) > 0
        return True


def set_backend(name: str, *args: Any, **kwargs: Any) -> Database:
    """Select a backend adapter and its dialect.

    Positional and keyword arguments are passed to the adapter:

        db = set_backend('raw', print, dialect='mysql')
        db = set_backend('postgresql', hostname='localhost', username=...)
        db = set_backend('postgresql', 'postgresql', config=config)

    Raises
        ConfigError: If the backend is unknown or its configuration invalid
    """
    backend = get_backend_class(name)(*args, **kwargs)
    db = Database(backend)
    logger.debug(f'Selected {name} backend with {db.dialect.name} dialect')
    return db
