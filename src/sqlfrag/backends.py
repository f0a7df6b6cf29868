"""
Backend adapters that send finished SQL text to a database.

Each adapter exposes a single operation, `execute(sql)`, returning a list of
rows for statements that produce rows or the affected row count otherwise.
Any failure is raised as `BackendError` carrying the SQL text.

Registered adapters:
- `raw` - wraps a caller supplied `execute(sql)` callable
- `postgresql` - SQLAlchemy engine over psycopg
- `mysql` - SQLAlchemy engine over PyMySQL

Engines are cached per options in a thread-safe registry and disposed at
interpreter exit.
"""
import atexit
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from sqlfrag.dialects import get_dialect
from sqlfrag.exceptions import BackendError, ConfigError, DriverError
from sqlfrag.options import BackendOptions, load_backend_options

from libb import attrdict

__all__ = [
    'Backend',
    'RawBackend',
    'EngineBackend',
    'PostgresBackend',
    'MySQLBackend',
    'register_backend',
    'get_backend_class',
    'get_available_backends',
    'create_url_from_options',
    'get_engine_for_options',
    'dispose_all_engines',
]

logger = logging.getLogger(__name__)

# Registry of backend name -> backend class
_BACKEND_REGISTRY: dict[str, type['Backend']] = {}

_engine_registry: dict[str, Engine] = {}
_engine_registry_lock = threading.RLock()

_DRIVERS = {
    'postgresql': 'postgresql+psycopg',
    'mysql': 'mysql+pymysql',
}

# Backslashes are ordinary characters in string literals and double quotes
# delimit identifiers under these modes
SQL_MODE_COMMAND = "SET SESSION sql_mode = CONCAT(@@SESSION.sql_mode, ',NO_BACKSLASH_ESCAPES,ANSI_QUOTES')"


def register_backend(name: str):
    """Decorator to register a backend class under a name.

    Usage:
        @register_backend('postgresql')
        class PostgresBackend(EngineBackend):
            ...
    """
    def decorator(cls: type['Backend']) -> type['Backend']:
        _BACKEND_REGISTRY[name] = cls
        return cls
    return decorator


def get_backend_class(name: str) -> type['Backend']:
    """Get the backend class registered under a name."""
    if name not in _BACKEND_REGISTRY:
        available = list(_BACKEND_REGISTRY.keys())
        raise ConfigError(f'Unsupported backend: {name}. Available: {available}')
    return _BACKEND_REGISTRY[name]


def get_available_backends() -> list[str]:
    """Return list of registered backend names."""
    return list(_BACKEND_REGISTRY.keys())


def _error_message(err: BaseException) -> str:
    """Extract the driver message from a possibly wrapped exception."""
    if isinstance(err, sa.exc.DBAPIError) and err.orig is not None:
        err = err.orig
    return str(err).strip() or type(err).__name__


class Backend(ABC):
    """Base class for backend adapters.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the name of the dialect this backend speaks."""

    @abstractmethod
    def execute(self, sql: str) -> list[attrdict] | int:
        """Execute SQL text.

        Args:
            sql: Complete SQL statement

        Returns
            List of rows for row-returning statements, else affected row count

        Raises
            BackendError: If the statement fails
        """


@register_backend('raw')
class RawBackend(Backend):
    """Backend delegating to a caller supplied callable.

    The callable receives the SQL text and returns whatever the caller
    considers a result. Any exception it raises becomes a BackendError.
    """

    def __init__(self, execute: Callable[[str], Any], dialect: str = 'postgresql') -> None:
        if not callable(execute):
            raise ConfigError(f'raw backend needs a callable, got {type(execute).__name__}')
        self._execute = execute
        self._dialect_name = get_dialect(dialect).name

    @property
    def dialect_name(self) -> str:
        return self._dialect_name

    def execute(self, sql: str) -> Any:
        try:
            return self._execute(sql)
        except BackendError:
            raise
        except Exception as err:
            raise BackendError(_error_message(err), sql) from err


def create_url_from_options(options: BackendOptions,
                            url_creator: Callable[..., sa.URL] = sa.URL.create) -> sa.URL:
    """Convert BackendOptions to SQLAlchemy URL.
    """
    if options.drivername not in _DRIVERS:
        raise ConfigError(f'Unsupported database type: {options.drivername}')

    query = {}
    if options.timeout:
        query['connect_timeout'] = str(options.timeout)
    if options.drivername == 'postgresql' and options.appname:
        query['application_name'] = options.appname

    return url_creator(
        drivername=_DRIVERS[options.drivername],
        username=options.username,
        password=options.password,
        host=options.hostname,
        port=options.port,
        database=options.database,
        query=query
    )


def get_engine_for_options(options: BackendOptions,
                           engine_factory: Callable[..., Engine] = sa.create_engine,
                           **kwargs: Any) -> Engine:
    """Get or create a SQLAlchemy engine for the given options.
    """
    key = str(options)

    with _engine_registry_lock:
        if key in _engine_registry:
            logger.debug(f'Using existing engine for {options.drivername}')
            return _engine_registry[key]

        url = create_url_from_options(options)

        engine_kwargs: dict[str, Any] = {'echo': False}
        if not options.use_pool:
            engine_kwargs['poolclass'] = NullPool
        else:
            engine_kwargs['pool_size'] = options.pool_max_connections
            engine_kwargs['pool_recycle'] = options.pool_max_idle_time
            engine_kwargs['pool_timeout'] = options.pool_wait_timeout
            engine_kwargs['pool_pre_ping'] = True
            engine_kwargs['pool_reset_on_return'] = 'rollback'
        engine_kwargs.update(kwargs)

        engine = engine_factory(url, **engine_kwargs)

        _engine_registry[key] = engine
        logger.debug(f'Created new engine for {options.drivername}')

        return engine


def dispose_all_engines() -> None:
    """Dispose all engines in the registry.
    """
    with _engine_registry_lock:
        for engine in _engine_registry.values():
            engine.dispose()
        _engine_registry.clear()
        logger.debug('All database engines disposed')


atexit.register(dispose_all_engines)


class EngineBackend(Backend):
    """Backend running SQL text through a SQLAlchemy engine.

    Each statement checks out a connection, runs in its own transaction and
    commits. The text is passed to the driver without parameters so `%`
    and `?` characters are never treated as placeholders.
    """
    drivername: str

    def __init__(self, options: BackendOptions | dict[str, Any] | str | None = None,
                 config: Any | None = None,
                 engine_factory: Callable[..., Engine] = sa.create_engine,
                 **kw: Any) -> None:
        if options is None or isinstance(options, dict):
            options = {'drivername': self.drivername, **(options or {})}
        self.options = load_backend_options(options, config, **kw)
        if self.options.drivername != self.drivername:
            raise ConfigError(f'{self.drivername} backend cannot use '
                              f'{self.options.drivername} options')
        self.engine = get_engine_for_options(self.options, engine_factory=engine_factory,
                                             **self.get_engine_kwargs())

    def get_engine_kwargs(self) -> dict[str, Any]:
        """Return extra SQLAlchemy create_engine kwargs for this driver."""
        return {}

    @property
    def dialect_name(self) -> str:
        return self.drivername

    def execute(self, sql: str) -> list[attrdict] | int:
        try:
            with self.engine.begin() as connection:
                result = connection.execution_options(no_parameters=True).exec_driver_sql(sql)
                if result.returns_rows:
                    rows = [attrdict(row) for row in result.mappings()]
                    logger.debug(f'Query returned {len(rows)} row(s)')
                    return rows
                logger.debug(f'Statement affected {result.rowcount} row(s)')
                return result.rowcount
        except DriverError as err:
            raise BackendError(_error_message(err), sql) from err


@register_backend('postgresql')
class PostgresBackend(EngineBackend):
    """PostgreSQL through psycopg.
    """
    drivername = 'postgresql'


@register_backend('mysql')
class MySQLBackend(EngineBackend):
    """MySQL through PyMySQL.

    Connections run with NO_BACKSLASH_ESCAPES so that doubling quotes is
    the only escaping string literals need, and with ANSI_QUOTES so that
    double-quoted names read as identifiers rather than strings.
    """
    drivername = 'mysql'

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {'connect_args': {'init_command': SQL_MODE_COMMAND}}
