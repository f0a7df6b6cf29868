"""
Dialect capability record and registry.

A dialect is a fixed set of SQL syntax capabilities. Statement builders read
it before emitting any syntax that differs between servers (RETURNING,
RESTART IDENTITY). Every field is required so that a dialect never gets a
capability by omission.
"""
from dataclasses import dataclass

# Registry of dialect name -> dialect
# Defined here to avoid circular imports (concrete dialects import from base)
_DIALECT_REGISTRY: dict[str, 'Dialect'] = {}


@dataclass(frozen=True, slots=True)
class Dialect:
    """SQL syntax capabilities of a database server.

    Attributes
        name: Registry name, e.g. 'postgresql'
        drop_index_if_exists: Supports `DROP INDEX IF EXISTS`
        explicit_time_zone: Supports time zone qualified timestamp types
        index_where: Supports partial indexes (`CREATE INDEX ... WHERE`)
        rename_column: Supports `ALTER TABLE ... RENAME COLUMN`
        restart_identity: Suffix appended to TRUNCATE, may be empty
        returning: Supports `INSERT ... RETURNING`
        entity_exists_query: Query with one `?` placeholder for a relation
            name, returning a count or a row when the relation exists
    """
    name: str
    drop_index_if_exists: bool
    explicit_time_zone: bool
    index_where: bool
    rename_column: bool
    restart_identity: str
    returning: bool
    entity_exists_query: str


def register_dialect(dialect: Dialect) -> Dialect:
    """Register a dialect under its name.

    Usage:
        MYDB = register_dialect(Dialect(name='mydb', ...))
    """
    _DIALECT_REGISTRY[dialect.name] = dialect
    return dialect
