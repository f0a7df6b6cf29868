from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlfrag.dialects import is_supported_dialect
from sqlfrag.exceptions import ConfigError

from libb import ConfigOptions, load_options, scriptname

__all__ = ['BackendOptions', 'REQUIRED_OPTIONS', 'load_backend_options']

# Required option fields per engine driver
REQUIRED_OPTIONS: dict[str, list[str]] = {
    'postgresql': ['hostname', 'username', 'password', 'database', 'port'],
    'mysql': ['hostname', 'username', 'password', 'database', 'port'],
}


@dataclass
class BackendOptions(ConfigOptions):
    """Options

    supported driver names: `postgresql`, `mysql`

    Connection pooling options (handled by SQLAlchemy):
    - use_pool: Whether to use connection pooling (default: False)
    - pool_max_connections: Maximum connections in pool (default: 5)
    - pool_max_idle_time: Maximum seconds a connection can be idle (default: 300)
    - pool_wait_timeout: Maximum seconds to wait for a connection (default: 30)
    """
    drivername: str = 'postgresql'
    hostname: str = None
    username: str = None
    password: str = None
    database: str = None
    port: int = 0
    timeout: int = 0
    appname: str = None
    use_pool: bool = False
    pool_max_connections: int = 5
    pool_max_idle_time: int = 300
    pool_wait_timeout: int = 30

    def __post_init__(self):
        if self.drivername not in REQUIRED_OPTIONS or not is_supported_dialect(self.drivername):
            raise ConfigError(f'drivername must be one of: {list(REQUIRED_OPTIONS)}')
        self.appname = self.appname or scriptname() or 'python_console'
        for field in REQUIRED_OPTIONS[self.drivername]:
            if not getattr(self, field):
                raise ConfigError(f'field {field} cannot be None or 0')


def load_backend_options(options: 'BackendOptions | Mapping[str, Any] | str',
                         config: Any | None = None, **kw: Any) -> BackendOptions:
    """Build BackendOptions from an options object, a dict, or a config name.

    Keyword arguments override entries of a dict. A string names a setting
    in the `config` module.
    """
    if isinstance(options, BackendOptions):
        return options
    if isinstance(options, Mapping):
        try:
            return BackendOptions(**{**options, **kw})
        except TypeError as err:
            raise ConfigError(f'Invalid backend options: {err}') from err
    if not isinstance(options, str) or config is None:
        raise ConfigError(f'Cannot load backend options from {options!r}')
    options_func = load_options(cls=BackendOptions)(lambda o, c: o)
    try:
        return options_func(options, config, **kw)
    except (AttributeError, TypeError) as err:
        raise ConfigError(f'Invalid backend options {options!r}: {err}') from err
