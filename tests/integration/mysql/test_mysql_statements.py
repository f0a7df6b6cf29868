import pytest
import sqlfrag
from sqlfrag import NULL, BackendError, UnsupportedFeatureError, sql_list

pytestmark = pytest.mark.integration


def test_select(mysql_backend):
    """Verify SELECT returns rows as dictionaries in query order."""
    result = sqlfrag.select(mysql_backend, 'name, value from test_table where value > ? order by value', 10)
    assert result == [{'name': 'Bob', 'value': 20}, {'name': 'Charlie', 'value': 30}]
    assert result[0].name == 'Bob'


def test_insert_quoted_identifiers(mysql_backend):
    """Verify double-quoted table and column names are read as identifiers."""
    assert sqlfrag.insert(mysql_backend, 'test_table', {'name': "O'Neil", 'value': 40}) == 1
    rows = sqlfrag.select(mysql_backend, 'id, value from test_table where name = ?', "O'Neil")
    assert rows == [{'id': 4, 'value': 40}]


def test_insert_returning_unsupported(mysql_backend):
    """Verify RETURNING is refused before anything reaches the server."""
    with pytest.raises(UnsupportedFeatureError):
        sqlfrag.insert(mysql_backend, 'test_table', {'name': 'Dana'}, 'id')
    assert sqlfrag.select(mysql_backend, 'count(*) as c from test_table')[0]['c'] == 3


def test_backslashes_are_literal(mysql_backend):
    """Verify backslashes survive quote doubling unchanged."""
    name = "C:\\temp\\'x'"
    sqlfrag.insert(mysql_backend, 'test_table', {'name': name})
    rows = sqlfrag.select(mysql_backend, 'name from test_table where name = ?', name)
    assert rows == [{'name': name}]


def test_insert_timestamp(mysql_backend):
    """Verify the timestamp directive fills both columns."""
    sqlfrag.insert(mysql_backend, 'test_table', {'name': 'Dana', '_timestamp': True})
    row = sqlfrag.select(mysql_backend, 'created_at, updated_at from test_table where name = ?', 'Dana')[0]
    assert row['created_at'] is not None
    assert row['created_at'] == row['updated_at']


def test_update_and_delete(mysql_backend):
    """Verify UPDATE and DELETE with mapping conditions hit the right rows."""
    assert sqlfrag.update(mysql_backend, 'test_table', {'value': NULL}, {'name': 'Alice'}) == 1
    assert sqlfrag.delete(mysql_backend, 'test_table', {'value': NULL}) == 1
    assert sqlfrag.delete(mysql_backend, 'test_table', {'name': sql_list('Bob', 'Charlie')}) == 2
    assert sqlfrag.select(mysql_backend, '* from test_table') == []


def test_update_template_condition(mysql_backend):
    """Verify UPDATE with a template condition."""
    assert sqlfrag.update(mysql_backend, 'test_table', {'value': 99}, 'value >= ?', 20) == 2
    rows = sqlfrag.select(mysql_backend, 'name from test_table where value = 99 order by id')
    assert [row.name for row in rows] == ['Bob', 'Charlie']


def test_truncate_resets_auto_increment(mysql_backend):
    """Verify TRUNCATE empties the table and restarts numbering."""
    sqlfrag.truncate(mysql_backend, 'test_table')
    assert sqlfrag.select(mysql_backend, 'count(*) as c from test_table')[0]['c'] == 0
    sqlfrag.insert(mysql_backend, 'test_table', {'name': 'First'})
    assert sqlfrag.select(mysql_backend, 'id from test_table') == [{'id': 1}]


def test_entity_exists(mysql_backend):
    """Verify the information_schema probe matches names exactly."""
    assert sqlfrag.entity_exists(mysql_backend, 'test_table') is True
    assert sqlfrag.entity_exists(mysql_backend, 'no_such_table') is False
    assert sqlfrag.entity_exists(mysql_backend, 'test%') is False
    assert sqlfrag.entity_exists(mysql_backend, 'test_tabl_') is False


def test_backend_error(mysql_backend):
    """Verify server errors carry the SQL text."""
    with pytest.raises(BackendError) as exc_info:
        sqlfrag.select(mysql_backend, '* from no_such_table')
    assert exc_info.value.sql == 'SELECT * from no_such_table'
    assert 'no_such_table' in exc_info.value.message
