"""Combinator algebra: parsers built out of other parsers.

None of these inspect grammar semantics. They thread the cursor through
their operands, merge node lists with merge_nodes(), and decide success.

Backtracking:
    attempt() is the only combinator that restores the cursor after a
    failure. sequence(), first_of(), skip() and between() leave the cursor
    wherever the failing operand stopped; wrap them in attempt() (or use
    try_first_of()) when alternatives share a prefix.

Complexity:
    Alternation is strictly first-match with unlimited backtracking, so a
    grammar with overlapping alternatives is exponential in the worst case.
    Packrat memoization of registry-owned rules (see registry.py) bounds
    this for rules built through RuleRegistry.
"""

from .cursor import Cursor
from .primitives import empty, literal_char, whitespace
from .tree import EMPTY_SUCCESS, FAILURE, ParseResult, Parser, ParseTree, merge_nodes

__all__ = [
    "attempt",
    "between",
    "first_of",
    "optional",
    "parens",
    "repeat0",
    "repeat1",
    "sequence",
    "skip",
    "skip_char",
    "trim",
    "try_first_of",
    "whitespaces",
]


def attempt(parser: Parser) -> Parser:
    """Run ``parser``; on failure restore the cursor and propagate the failure.

    On success the cursor stays where ``parser`` left it. The probe counter
    is never rewound.
    """

    def parse(cursor: Cursor) -> ParseResult:
        snapshot = cursor.mark()
        result = parser(cursor)
        if not result.ok:
            cursor.reset(snapshot)
        return result

    return parse


def sequence(*parsers: Parser) -> Parser:
    """Run ``parsers`` in order, merging their node lists.

    Stops at the first failure and returns the nodes accumulated so far
    (including the failing operand's partial output) with ok=False.
    The cursor is left where the failure occurred.
    """

    def parse(cursor: Cursor) -> ParseResult:
        acc: list[ParseTree] = []
        for parser in parsers:
            result = parser(cursor)
            merge_nodes(acc, result.nodes)
            if not result.ok:
                return ParseResult(tuple(acc), False)
        return ParseResult(tuple(acc), True)

    return parse


def first_of(*parsers: Parser) -> Parser:
    """Return the first successful alternative, left to right.

    A failing alternative's partial consumption is NOT undone before the
    next one runs. Fails with no nodes when every alternative fails.
    """

    def parse(cursor: Cursor) -> ParseResult:
        for parser in parsers:
            result = parser(cursor)
            if result.ok:
                return result
        return FAILURE

    return parse


def try_first_of(*parsers: Parser) -> Parser:
    """first_of() with every alternative wrapped in attempt().

    Every alternative starts from the same position, and total failure
    leaves the cursor where it started.
    """
    return first_of(*(attempt(parser) for parser in parsers))


def _repeat(parser: Parser, minimum: int) -> Parser:
    trial = attempt(parser)

    def parse(cursor: Cursor) -> ParseResult:
        acc: list[ParseTree] = []
        count = 0
        while True:
            start = cursor.pos
            result = trial(cursor)
            if not result.ok:
                break
            merge_nodes(acc, result.nodes)
            count += 1
            # A success that consumed nothing would match forever
            if cursor.pos == start:
                break
        if count < minimum:
            return FAILURE
        return ParseResult(tuple(acc), True)

    return parse


def repeat0(parser: Parser) -> Parser:
    """Match ``parser`` zero or more times; always succeeds."""
    return _repeat(parser, 0)


def repeat1(parser: Parser) -> Parser:
    """Match ``parser`` one or more times.

    On failure (no match at all) the cursor is left where it started.
    """
    return _repeat(parser, 1)


def skip(parser: Parser) -> Parser:
    """Run ``parser`` and discard its nodes, keeping its success flag."""

    def parse(cursor: Cursor) -> ParseResult:
        return EMPTY_SUCCESS if parser(cursor).ok else FAILURE

    return parse


def skip_char(char: str) -> Parser:
    """Require ``char`` without emitting it."""
    return skip(literal_char(char))


def optional(parser: Parser) -> Parser:
    """Match ``parser`` or nothing; backtracks when ``parser`` fails."""
    return try_first_of(parser, empty())


def whitespaces() -> Parser:
    """Skip a (possibly empty) run of whitespace; always succeeds."""
    return skip(repeat0(whitespace()))


def between(left: Parser, parser: Parser, right: Parser) -> Parser:
    """Match ``left parser right`` and keep only ``parser``'s nodes.

    Fails as soon as any of the three fails. A failure of ``parser`` keeps
    its partial nodes; a failure of ``right`` keeps ``parser``'s nodes with
    ok=False.
    """

    def parse(cursor: Cursor) -> ParseResult:
        if not left(cursor).ok:
            return FAILURE
        result = parser(cursor)
        if not result.ok:
            return result
        if not right(cursor).ok:
            return ParseResult(result.nodes, False)
        return result

    return parse


def trim(parser: Parser) -> Parser:
    """Match ``parser`` surrounded by optional whitespace."""
    return between(whitespaces(), parser, whitespaces())


def parens(parser: Parser) -> Parser:
    """Match ``( parser )`` with optional inner whitespace."""
    return between(
        sequence(skip_char("("), whitespaces()),
        parser,
        sequence(whitespaces(), skip_char(")")),
    )
