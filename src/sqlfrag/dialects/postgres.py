"""
PostgreSQL dialect.
"""
from sqlfrag.dialects.base import Dialect, register_dialect

POSTGRESQL = register_dialect(Dialect(
    name='postgresql',
    drop_index_if_exists=True,
    explicit_time_zone=True,
    index_where=True,
    rename_column=True,
    restart_identity=' RESTART IDENTITY',
    returning=True,
    entity_exists_query='SELECT COUNT(*) AS c FROM pg_class WHERE relname = ?',
))
