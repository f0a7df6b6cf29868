"""
Value model shared by the escaper, the encoders and the statement builders.

A value is one of:
- the `NULL` sentinel (Python `None` is accepted in its place)
- a `Raw` fragment of pre-escaped SQL, built only through `raw()`
- a number (`int`, `float`, `Decimal`), a `str` or a `bool`
- a `SqlList` of values, built only through `sql_list()`
"""
from dataclasses import dataclass
from typing import Any

__all__ = [
    'Raw',
    'SqlList',
    'NULL',
    'TRUE',
    'FALSE',
    'raw',
    'is_raw',
    'is_null',
    'sql_list',
]


class _Null:
    """Singleton sentinel for SQL NULL."""

    _instance = None

    def __new__(cls) -> '_Null':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'NULL'

    def __bool__(self) -> bool:
        return False


NULL = _Null()


@dataclass(frozen=True, slots=True)
class Raw:
    """SQL text inserted verbatim, bypassing all escaping.
    """
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class SqlList:
    """Explicit list of values, escaped as a parenthesised list.
    """
    items: tuple[Any, ...]


TRUE = Raw('TRUE')
FALSE = Raw('FALSE')


def raw(text: str) -> Raw:
    """Wrap pre-escaped SQL text so it is emitted verbatim.

    >>> raw('NOW()')
    Raw(text='NOW()')
    """
    if isinstance(text, Raw):
        return text
    if not isinstance(text, str):
        raise TypeError(f'raw() expects str, got {type(text).__name__}')
    return Raw(text)


def is_raw(value: Any) -> bool:
    """Check if a value is a raw SQL fragment.

    >>> is_raw(raw('1 + 1'))
    True
    >>> is_raw('1 + 1')
    False
    """
    return isinstance(value, Raw)


def is_null(value: Any) -> bool:
    """Check if a value represents SQL NULL."""
    return value is None or value is NULL


def sql_list(*values: Any) -> SqlList:
    """Build a list value, e.g. for an `IN (...)` condition.

    A single iterable argument is unpacked:

    >>> sql_list(1, 2) == sql_list([1, 2])
    True
    """
    if len(values) == 1 and isinstance(values[0], (list, tuple)):
        values = tuple(values[0])
    return SqlList(tuple(values))
