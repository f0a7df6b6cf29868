"""
SQL fragment builder exception classes.
"""
import psycopg
import pymysql
import sqlalchemy as sa


class SqlFragError(Exception):
    """Base class for all sqlfrag errors.
    """


class EscapeError(SqlFragError, TypeError):
    """A value of unsupported or missing type was passed where SQL text was required.
    """


class UnsupportedFeatureError(SqlFragError):
    """A dialect-gated feature was requested against a dialect that lacks it.
    """


class ConfigError(SqlFragError, ValueError):
    """Backend or dialect selection failed due to missing or invalid configuration.
    """


class BackendError(SqlFragError):
    """The backend failed to execute a statement.

    Carries the original message together with the SQL text that produced it.
    """

    def __init__(self, message: str, sql: str) -> None:
        self.message = message
        self.sql = sql
        super().__init__(f'{message}: {sql}')


DriverError = (
    sa.exc.SQLAlchemyError,    # Engine errors and wrapped DBAPI errors
    psycopg.Error,             # Postgres driver errors
    pymysql.MySQLError,        # MySQL driver errors
)
