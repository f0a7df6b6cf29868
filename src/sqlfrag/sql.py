"""
SQL text generation from structured values.

Three layers, each built on the previous one:

    Value → escape_literal / escape_identifier → interpolate
                                              → encode_values / encode_assigns / encode_clause

Main entry points:
- `escape_literal(value)` - Render a value as a SQL literal
- `escape_identifier(identifier)` - Quote a table or column name
- `interpolate(template, *args)` - Substitute `?` placeholders with escaped values
- `encode_values(values)` - `(cols) VALUES (vals)` for INSERT
- `encode_assigns(values)` - `col = val, ...` for UPDATE
- `encode_clause(conditions)` - `col = val AND ...` for WHERE

Mappings are emitted in their iteration order, so a `dict` produces its
columns in insertion order.
"""
import logging
import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sqlfrag.exceptions import EscapeError
from sqlfrag.values import Raw, SqlList, is_null

logger = logging.getLogger(__name__)

__all__ = [
    'escape_literal',
    'escape_identifier',
    'interpolate',
    'encode_values',
    'encode_assigns',
    'encode_clause',
]

_PLACEHOLDER = re.compile(r'\?')

_MISSING = object()


# =============================================================================
# Escaper
# =============================================================================

def escape_literal(value: Any) -> str:
    """Render a value as SQL literal text.

    >>> escape_literal("it's")
    "'it''s'"
    >>> escape_literal(None)
    'NULL'
    >>> escape_literal(True)
    'TRUE'

    Raises
        EscapeError: If the value has no SQL literal form
    """
    if isinstance(value, Raw):
        return value.text
    if is_null(value):
        return 'NULL'
    # bool before int, bool is an int subclass
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EscapeError(f'Cannot escape non-finite number: {value!r}')
        return repr(float(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise EscapeError(f'Cannot escape non-finite number: {value!r}')
        return str(value)
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    if isinstance(value, SqlList):
        if not value.items:
            raise EscapeError('Cannot escape an empty list')
        return '(' + ', '.join(escape_literal(item) for item in value.items) + ')'
    raise EscapeError(f'Cannot escape value of type {type(value).__name__}: {value!r}')


def escape_identifier(identifier: str | Raw) -> str:
    """Quote a table or column name, doubling embedded double quotes.

    >>> escape_identifier('user')
    '"user"'
    >>> escape_identifier('a"b')
    '"a""b"'
    """
    if isinstance(identifier, Raw):
        return identifier.text
    if not isinstance(identifier, str):
        raise EscapeError(f'Cannot escape identifier of type {type(identifier).__name__}: {identifier!r}')
    return '"' + identifier.replace('"', '""') + '"'


# =============================================================================
# Interpolator
# =============================================================================

def interpolate(template: str, *args: Any) -> str:
    """Replace each `?` in the template with the next escaped argument.

    Placeholders are consumed left to right. Escaped text is never rescanned,
    so a `?` inside an argument stays literal.

    >>> interpolate('a = ? and b = ?', 1, 'x')
    "a = 1 and b = 'x'"

    Raises
        EscapeError: If a placeholder has no corresponding argument
    """
    position = 0

    def replace(match: re.Match) -> str:
        nonlocal position
        value = args[position] if position < len(args) else _MISSING
        position += 1
        if value is _MISSING:
            raise EscapeError(f'Missing replacement {position} for interpolated query')
        return escape_literal(value)

    result = _PLACEHOLDER.sub(replace, template)
    if position < len(args):
        logger.debug(f'Ignored {len(args) - position} extra interpolation argument(s)')
    return result


# =============================================================================
# Clause Encoders
# =============================================================================

def _emit(pieces: list[str], buffer: list[str] | None) -> str | list[str]:
    if buffer is None:
        return ''.join(pieces)
    buffer.extend(pieces)
    return buffer


def encode_values(values: Mapping[Any, Any], buffer: list[str] | None = None) -> str | list[str]:
    """Encode a column mapping as the `(cols) VALUES (vals)` part of an INSERT.

    >>> encode_values({'id': 1, 'name': 'bob'})
    '("id", "name") VALUES (1, \\'bob\\')'
    >>> encode_values({})
    '() VALUES ()'

    When a buffer list is given the pieces are appended to it and the buffer
    is returned instead of a string.
    """
    columns = ', '.join(escape_identifier(col) for col in values)
    literals = ', '.join(escape_literal(val) for val in values.values())
    return _emit(['(', columns, ') VALUES (', literals, ')'], buffer)


def encode_assigns(values: Mapping[Any, Any], buffer: list[str] | None = None) -> str | list[str]:
    """Encode a column mapping as comma separated `col = val` assignments.

    >>> encode_assigns({'a': 1, 'b': None})
    '"a" = 1, "b" = NULL'
    """
    pieces = []
    for col, val in values.items():
        if pieces:
            pieces.append(', ')
        pieces.extend((escape_identifier(col), ' = ', escape_literal(val)))
    return _emit(pieces, buffer)


def encode_clause(conditions: Mapping[Any, Any], buffer: list[str] | None = None) -> str | list[str]:
    """Encode a condition mapping as `AND` joined comparisons.

    NULL values compare with `IS NULL` and list values with `IN (...)`.

    >>> encode_clause({'id': None, 'name': 'bob'})
    '"id" IS NULL AND "name" = \\'bob\\''
    """
    pieces = []
    for col, val in conditions.items():
        if pieces:
            pieces.append(' AND ')
        pieces.append(escape_identifier(col))
        if is_null(val):
            pieces.append(' IS NULL')
        elif isinstance(val, SqlList):
            pieces.extend((' IN ', escape_literal(val)))
        else:
            pieces.extend((' = ', escape_literal(val)))
    return _emit(pieces, buffer)
