"""
Dialect registry for database-specific SQL capabilities.
"""
from sqlfrag.dialects.base import _DIALECT_REGISTRY
from sqlfrag.dialects.base import Dialect as Dialect
from sqlfrag.dialects.base import register_dialect as register_dialect
from sqlfrag.dialects.mysql import MYSQL as MYSQL
from sqlfrag.dialects.postgres import POSTGRESQL as POSTGRESQL
from sqlfrag.exceptions import ConfigError


def get_dialect(name: str | Dialect) -> Dialect:
    """Get a registered dialect by name.

    A `Dialect` instance is returned unchanged.
    """
    if isinstance(name, Dialect):
        return name
    if name not in _DIALECT_REGISTRY:
        available = list(_DIALECT_REGISTRY.keys())
        raise ConfigError(f'Unsupported dialect: {name}. Available: {available}')
    return _DIALECT_REGISTRY[name]


def get_available_dialects() -> list[str]:
    """Return list of registered dialect names."""
    return list(_DIALECT_REGISTRY.keys())


def is_supported_dialect(name: str) -> bool:
    """Check if a dialect is supported."""
    return name in _DIALECT_REGISTRY
