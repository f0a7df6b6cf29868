"""
Parser for trailing SQL clause strings.

Splits text such as ``where x = 1 order by y limit 10`` into
``[('where', 'x = 1'), ('order', 'y'), ('limit', '10')]``.

The scanner recognises three kinds of token:
- a clause keyword (`where`, `group`, `having`, `order`, `limit`, `offset`),
  case-insensitive and bounded by non-word characters on both sides
- a quoted string (`'...'` or `"..."`, quote doubled to escape), kept opaque
  so keywords inside it are never matched
- any other single character

An unterminated quote ends the current clause just before the quote and the
rest of the input is dropped.

Only letters, digits and `_` count as word characters, so a keyword after a
dot still starts a clause: ``where t.order = 1`` gives
``[('where', 't.'), ('order', '= 1')]``. Quote such names (``t."order"``)
to keep them in the body.
"""
import logging
import re
from typing import NamedTuple

logger = logging.getLogger(__name__)

__all__ = ['KEYWORDS', 'Clause', 'parse_clause']

KEYWORDS = ('where', 'group', 'having', 'order', 'limit', 'offset')

_KEYWORD = re.compile(r'(?P<keyword>' + '|'.join(KEYWORDS) + r')(?!\w)', re.IGNORECASE)

_STRING = re.compile(r"""'(?:[^']|'')*'|"(?:[^"]|"")*\"""")

_WHITESPACE = re.compile(r'\s*')

_LEADING_BY = re.compile(r'^by(?:\s+|$)', re.IGNORECASE)

# Clauses whose body starts with a `by` to strip
_BY_CLAUSES = {'group', 'order'}


class Clause(NamedTuple):
    """A named clause and its body."""
    name: str
    body: str


def _match_keyword(text: str, pos: int) -> re.Match | None:
    """Match a keyword at `pos` if it starts on a word boundary."""
    if pos > 0 and (text[pos - 1].isalnum() or text[pos - 1] == '_'):
        return None
    return _KEYWORD.match(text, pos)


def _scan_body(text: str, pos: int) -> tuple[int, bool]:
    """Consume a clause body starting at `pos`.

    Returns
        Tuple of the end offset of the body and whether scanning stopped on an
        unterminated quote
    """
    length = len(text)
    while pos < length:
        char = text[pos]
        if char in {"'", '"'}:
            match = _STRING.match(text, pos)
            if match is None:
                return pos, True
            pos = match.end()
            continue
        if _match_keyword(text, pos):
            break
        pos += 1
    return pos, False


def parse_clause(text: str) -> list[Clause]:
    """Split a trailing clause string into `(keyword, body)` pairs.

    Pairs are returned in input order. Repeated keywords produce repeated
    pairs. Text that does not start with a keyword yields an empty list.

    >>> parse_clause('WHERE name = \\'order\\' ORDER BY id')[1]
    Clause(name='order', body='id')
    """
    clauses: list[Clause] = []
    pos = 0
    length = len(text)

    while pos < length:
        pos = _WHITESPACE.match(text, pos).end()
        match = _match_keyword(text, pos)
        if match is None:
            break

        name = match.group('keyword').lower()
        start = match.end()
        end, unterminated = _scan_body(text, start)

        body = text[start:end].strip()
        if name in _BY_CLAUSES:
            body = _LEADING_BY.sub('', body, count=1)
        clauses.append(Clause(name, body))

        if unterminated:
            logger.debug(f'Unterminated quote at offset {end}, dropping: {text[end:]!r}')
            break
        pos = end

    return clauses
