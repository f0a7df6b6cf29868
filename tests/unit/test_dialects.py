"""
Unit tests for the dialect registry.
"""
import dataclasses

import pytest
from sqlfrag import MYSQL, POSTGRESQL, ConfigError, Dialect, get_dialect
from sqlfrag.dialects import get_available_dialects, is_supported_dialect
from sqlfrag.dialects import register_dialect


def test_builtin_dialects_registered():
    """Test both built-in dialects are available by name"""
    assert get_dialect('postgresql') is POSTGRESQL
    assert get_dialect('mysql') is MYSQL
    assert {'postgresql', 'mysql'} <= set(get_available_dialects())
    assert is_supported_dialect('mysql')
    assert not is_supported_dialect('oracle')


def test_get_dialect_passes_instances_through():
    """Test a Dialect instance is returned unchanged"""
    assert get_dialect(MYSQL) is MYSQL


def test_unknown_dialect():
    """Test unknown names raise ConfigError listing the choices"""
    with pytest.raises(ConfigError, match='postgresql'):
        get_dialect('oracle')


@pytest.mark.parametrize(('field', 'postgres', 'mysql'), [
    ('drop_index_if_exists', True, False),
    ('explicit_time_zone', True, False),
    ('index_where', True, False),
    ('rename_column', True, False),
    ('restart_identity', ' RESTART IDENTITY', ''),
    ('returning', True, False),
])
def test_capabilities(field, postgres, mysql):
    """Test capability flags of the built-in dialects"""
    assert getattr(POSTGRESQL, field) == postgres
    assert getattr(MYSQL, field) == mysql


def test_probe_queries_have_one_placeholder():
    """Test each probe takes exactly the relation name"""
    for dialect in (POSTGRESQL, MYSQL):
        assert dialect.entity_exists_query.count('?') == 1


def test_dialect_is_immutable():
    """Test a selected dialect cannot be changed"""
    with pytest.raises(dataclasses.FrozenInstanceError):
        POSTGRESQL.returning = False


def test_dialect_requires_every_field():
    """Test a dialect cannot be built with capabilities missing"""
    with pytest.raises(TypeError):
        Dialect(name='partial', returning=True)


def test_register_dialect():
    """Test custom dialects become selectable"""
    custom = register_dialect(dataclasses.replace(MYSQL, name='mariadb', returning=True))
    assert get_dialect('mariadb') is custom
    assert custom.returning is True
    assert MYSQL.returning is False
