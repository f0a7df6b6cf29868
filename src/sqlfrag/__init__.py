"""
Dialect-aware SQL fragment builder with support for PostgreSQL and MySQL.

All statement operations can be called either as:
- Module functions: sqlfrag.select(db, fragment, *args)
- Database methods: db.select(fragment, *args)

where `db` is the object returned by `set_backend()`.
"""
__version__ = '0.1.0'

from typing import Any

from sqlfrag.backends import get_available_backends, register_backend
from sqlfrag.clause import Clause, parse_clause
from sqlfrag.client import Database, set_backend
from sqlfrag.dialects import MYSQL, POSTGRESQL, Dialect, get_dialect
from sqlfrag.exceptions import BackendError, ConfigError, EscapeError
from sqlfrag.exceptions import SqlFragError, UnsupportedFeatureError
from sqlfrag.options import BackendOptions
from sqlfrag.sql import encode_assigns, encode_clause, encode_values
from sqlfrag.sql import escape_identifier, escape_literal, interpolate
from sqlfrag.utils import format_date
from sqlfrag.values import FALSE, NULL, TRUE, Raw, is_raw, raw, sql_list


def query(db: Database, sql: str, *args: Any) -> Any:
    """Execute SQL text, interpolating args when given.
    """
    return db.query(sql, *args)


def select(db: Database, fragment: str, *args: Any) -> Any:
    """Execute `SELECT` followed by the interpolated fragment.
    """
    return db.select(fragment, *args)


def insert(db: Database, table: str, values: dict[Any, Any], *returning: str) -> Any:
    """Insert a row, optionally returning columns.
    """
    return db.insert(table, values, *returning)


def update(db: Database, table: str, values: dict[Any, Any],
           condition: dict[Any, Any] | str | None = None, *args: Any) -> Any:
    """Update rows matching a condition mapping or template.
    """
    return db.update(table, values, condition, *args)


def delete(db: Database, table: str, condition: dict[Any, Any] | str | None = None,
           *args: Any) -> Any:
    """Delete rows matching a condition mapping or template.
    """
    return db.delete(table, condition, *args)


def truncate(db: Database, *tables: str) -> Any:
    """Truncate tables.
    """
    return db.truncate(*tables)


def entity_exists(db: Database, name: str) -> bool:
    """Check if a relation exists.
    """
    return db.entity_exists(name)


def set_logger(db: Database, sql_logger: Any) -> None:
    """Install a callable invoked with every outgoing SQL text.
    """
    db.set_logger(sql_logger)


__all__ = [
    'set_backend',
    'set_logger',
    'Database',
    'query',
    'select',
    'insert',
    'update',
    'delete',
    'truncate',
    'entity_exists',
    'escape_literal',
    'escape_identifier',
    'interpolate',
    'encode_values',
    'encode_assigns',
    'encode_clause',
    'parse_clause',
    'Clause',
    'format_date',
    'raw',
    'is_raw',
    'sql_list',
    'Raw',
    'NULL',
    'TRUE',
    'FALSE',
    'Dialect',
    'POSTGRESQL',
    'MYSQL',
    'get_dialect',
    'BackendOptions',
    'register_backend',
    'get_available_backends',
    'SqlFragError',
    'EscapeError',
    'UnsupportedFeatureError',
    'ConfigError',
    'BackendError',
]
