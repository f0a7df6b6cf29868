"""
Mock backend utilities for sqlfrag tests.

Provides a recording backend that captures every SQL text instead of sending
it to a server, so statement builders can be tested byte for byte.

Usage:
    def test_truncate(pg_db, recorder):
        pg_db.truncate('a')
        assert recorder.statements == ['TRUNCATE "a" RESTART IDENTITY']
"""
import pytest
import sqlfrag


class Recorder:
    """Callable standing in for a backend execute operation.

    Records each SQL text and returns the next queued result, or an empty
    row list when none is queued.
    """

    def __init__(self):
        self.statements = []
        self.results = []

    def __call__(self, sql):
        self.statements.append(sql)
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return []

    @property
    def last(self):
        return self.statements[-1]


@pytest.fixture
def recorder():
    """Fresh recorder for each test."""
    return Recorder()


@pytest.fixture
def pg_db(recorder):
    """Database on the raw backend speaking the PostgreSQL dialect."""
    return sqlfrag.set_backend('raw', recorder, dialect='postgresql')


@pytest.fixture
def mysql_db(recorder):
    """Database on the raw backend speaking the MySQL dialect."""
    return sqlfrag.set_backend('raw', recorder, dialect='mysql')
