"""Packrat memoization of parsers per (parser, start offset).

A parser's result depends only on the input and where it starts, so the
first run at an offset can be replayed on every later run at that offset:
the memo entry keeps the result (failures included) and the cursor state
the run ended in. Replaying restores that state without touching the probe
counter.

The memo table lives on the cursor's ParseContext, so it never outlives a
parse. Cursors created without a table run the wrapped parser directly.
"""

from .cursor import Cursor, MemoEntry
from .tree import ParseResult, Parser

__all__ = ["packrat"]


def packrat(parser: Parser) -> Parser:
    """Memoize ``parser`` in the cursor's packrat table, when it has one."""

    def parse(cursor: Cursor) -> ParseResult:
        memo = cursor.context.memo
        if memo is None:
            return parser(cursor)
        key = (parse, cursor.pos)
        entry = memo.get(key)
        if entry is not None:
            cursor.reset(entry.end)
            return entry.result  # type: ignore[return-value]
        result = parser(cursor)
        memo[key] = MemoEntry(result, cursor.mark())
        return result

    return parse
