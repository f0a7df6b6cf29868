"""
MySQL dialect.
"""
from sqlfrag.dialects.base import Dialect, register_dialect

MYSQL = register_dialect(Dialect(
    name='mysql',
    drop_index_if_exists=False,
    explicit_time_zone=False,
    index_where=False,
    rename_column=False,
    restart_identity='',
    returning=False,
    entity_exists_query=('SELECT COUNT(*) AS c FROM information_schema.tables '
                         'WHERE table_schema = DATABASE() AND table_name = ?'),
))
