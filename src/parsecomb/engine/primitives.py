"""Primitive matchers built directly on the cursor.

Each factory returns a Parser: a callable taking the cursor and returning a
ParseResult. Single-character matchers always consume one character when
input remains, even on mismatch; wrap them in attempt() (or use
try_first_of) to backtrack.

Discipline for exact_string():
    A failed exact_string() leaves the cursor after the characters that
    matched, and returns them as a raw leaf. This reports how far a literal
    got; callers that need atomic failure must write
    ``attempt(exact_string(...))``.
"""

from collections.abc import Callable

from .cursor import Cursor
from .tree import EMPTY_SUCCESS, FAILURE, Leaf, ParseResult, Parser, Span

__all__ = [
    "any_char_but",
    "char_class",
    "digit",
    "empty",
    "end_of_input",
    "exact_string",
    "letter",
    "literal_char",
    "whitespace",
]

# ASCII only, like the reference grammar's [a-zA-Z] and [0-9] classes.
# str.isalpha()/str.isdigit() would admit letters and digits from every script.
_ASCII_LETTERS: frozenset[str] = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
_ASCII_DIGITS: frozenset[str] = frozenset("0123456789")


def _single_char(char: str, start: int, start_line: int, cursor: Cursor) -> ParseResult:
    return ParseResult.success(Leaf(char, Span(start, cursor.pos, start_line, cursor.line)))


def literal_char(expected: str) -> Parser:
    """Match one specific character.

    Args:
        expected: The character to match (length 1)

    Returns:
        Parser emitting a one-character raw leaf

    Raises:
        ValueError: If expected is not exactly one character
    """
    if len(expected) != 1:
        msg = f"literal_char expects a single character, got {expected!r}"
        raise ValueError(msg)

    def parse(cursor: Cursor) -> ParseResult:
        start, start_line = cursor.pos, cursor.line
        char = cursor.advance()
        if char != expected:
            return FAILURE
        return _single_char(char, start, start_line, cursor)

    return parse


def char_class(predicate: Callable[[str], bool]) -> Parser:
    """Match one character satisfying ``predicate``.

    Example:
        >>> vowel = char_class(lambda c: c in "aeiou")
    """

    def parse(cursor: Cursor) -> ParseResult:
        start, start_line = cursor.pos, cursor.line
        char = cursor.advance()
        if char is None or not predicate(char):
            return FAILURE
        return _single_char(char, start, start_line, cursor)

    return parse


def letter() -> Parser:
    """Match one ASCII letter [a-zA-Z]."""
    return char_class(_ASCII_LETTERS.__contains__)


def digit() -> Parser:
    """Match one ASCII digit [0-9]."""
    return char_class(_ASCII_DIGITS.__contains__)


def whitespace() -> Parser:
    """Match one whitespace character (str.isspace)."""
    return char_class(str.isspace)


def any_char_but(excluded: str) -> Parser:
    """Match one character not in ``excluded``."""
    return char_class(lambda char: char not in excluded)


def exact_string(text: str) -> Parser:
    """Match ``text`` character by character.

    On failure the result is not ok, carries the matched prefix as a raw
    leaf (nothing when no character matched), and the cursor is NOT
    restored: it stays after the mismatching character.

    Args:
        text: Literal to match

    Returns:
        Parser emitting one raw leaf with the matched text
    """
    matchers = [literal_char(char) for char in text]

    def parse(cursor: Cursor) -> ParseResult:
        start, start_line = cursor.pos, cursor.line
        matched = 0
        for matcher in matchers:
            if not matcher(cursor).ok:
                if matched == 0:
                    return FAILURE
                prefix = text[:matched]
                span = Span(start, start + matched, start_line, start_line + prefix.count("\n"))
                return ParseResult.failure(Leaf(prefix, span))
            matched += 1
        if not text:
            return EMPTY_SUCCESS
        return ParseResult.success(Leaf(text, Span(start, cursor.pos, start_line, cursor.line)))

    return parse


def empty() -> Parser:
    """Consume nothing and succeed with no nodes."""

    def parse(cursor: Cursor) -> ParseResult:
        return EMPTY_SUCCESS

    return parse


def end_of_input() -> Parser:
    """Succeed, consuming nothing, only when no input remains."""

    def parse(cursor: Cursor) -> ParseResult:
        return EMPTY_SUCCESS if cursor.is_eof else FAILURE

    return parse
