"""Run driver: apply a top-level parser to a whole input.

This module provides the Engine class that turns the final cursor state of
a parse into a ParseOutcome: the produced nodes, the success flag, where
the cursor stopped, and a Diagnostic when the parse failed.

Architecture:
    Every parser mutates one Cursor created per run. The engine never
    interprets the grammar: a parser that succeeds on a prefix of the input
    is a success unless the caller asks for complete consumption.

Security:
    Includes configurable input size limit to prevent DoS attacks via
    unbounded memory allocation, and a nesting limit on recursive rules to
    prevent stack exhaustion on deeply nested input.

    The default limit admits about 15 levels of nesting; raise
    sys.setrecursionlimit() and pass a larger max_rule_depth for deeper input.

See Also:
    - :mod:`parsecomb.engine.cursor` - Cursor and ParseContext
    - :mod:`parsecomb.engine.registry` - Recursive and typed rules
"""

import logging
from dataclasses import dataclass

from parsecomb.constants import MAX_RULE_DEPTH, MAX_SOURCE_SIZE
from parsecomb.core.depth_guard import DepthLimitExceededError
from parsecomb.diagnostics import Diagnostic, ErrorTemplate, SourceSpan

from .cursor import Cursor, new_cursor
from .tree import Leaf, ParseTree, Parser

__all__ = ["Engine", "ParseOutcome", "run"]

logger = logging.getLogger(__name__)


def _trailing_raw_text(nodes: tuple[ParseTree, ...]) -> str | None:
    last = nodes[-1] if nodes else None
    if Leaf.guard(last) and last.is_raw:
        return last.text
    return None


@dataclass(frozen=True, slots=True)
class ParseOutcome:
    """Result of running a top-level parser over a whole input.

    Attributes:
        nodes: Nodes produced (whatever was built before a failure)
        ok: Success flag
        position: Character offset the cursor stopped at
        line: Line counter the cursor stopped at
        length: Input length in characters
        probe_count: Characters consumed including re-reads
        diagnostic: Why the parse failed (None on success)
    """

    nodes: tuple[ParseTree, ...]
    ok: bool
    position: int
    line: int
    length: int
    probe_count: int
    diagnostic: Diagnostic | None = None

    @property
    def is_complete(self) -> bool:
        """True when the parse succeeded and consumed the whole input."""
        return self.ok and self.position == self.length

    @property
    def remaining(self) -> int:
        """Number of characters left unconsumed."""
        return self.length - self.position

    @property
    def partial_literal(self) -> str | None:
        """Text of the trailing raw leaf of a failed parse, if any.

        An unwrapped exact_string() that fails part-way leaves its matched
        prefix here.
        """
        return None if self.ok else _trailing_raw_text(self.nodes)


class Engine:
    """Parser run driver with input limits.

    Security:
    - Configurable max_source_size prevents DoS via large inputs
    - Default limit: 10 MB
    - Configurable max_rule_depth prevents stack exhaustion via deeply
      nested input such as ((((...))))

    Attributes:
        max_source_size: Maximum allowed source size in characters
        max_rule_depth: Maximum nesting of recursive-rule activations
        memoize: Whether runs use packrat memoization

    Example:
        >>> from parsecomb.grammar import Grammar
        >>> grammar = Grammar()
        >>> outcome = Engine().run(grammar.program(), "x = 1", require_complete=True)
        >>> outcome.ok
        True
    """

    __slots__ = ("_max_rule_depth", "_max_source_size", "_memoize")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_rule_depth: int | None = None,
        memoize: bool = True,
    ) -> None:
        """Initialize the engine with optional limits.

        Args:
            max_source_size: Maximum source size in characters (default: 10 MB).
                            Set to 0 to disable the size limit (not recommended).
            max_rule_depth: Maximum nesting of recursive rules (default: 16,
                           clamped to the interpreter recursion limit).
            memoize: Enable packrat memoization of registry-owned rules.
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_rule_depth = (
            max_rule_depth if max_rule_depth is not None else MAX_RULE_DEPTH
        )
        self._memoize = memoize

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    @property
    def max_rule_depth(self) -> int:
        """Maximum nesting of recursive-rule activations."""
        return self._max_rule_depth

    @property
    def memoize(self) -> bool:
        """Whether runs use packrat memoization."""
        return self._memoize

    def cursor(self, source: str | bytes) -> Cursor:
        """Create a cursor configured with this engine's limits.

        Raises:
            TypeError: If source is neither str nor bytes
            ValueError: If source exceeds max_source_size
        """
        cursor = new_cursor(
            source, max_rule_depth=self._max_rule_depth, memoize=self._memoize
        )
        if self._max_source_size > 0 and cursor.length > self._max_source_size:
            diagnostic = ErrorTemplate.source_too_large(cursor.length, self._max_source_size)
            msg = (
                f"{diagnostic.message}. "
                "Configure max_source_size in Engine constructor to increase limit."
            )
            raise ValueError(msg)
        return cursor

    def run(
        self,
        parser: Parser,
        source: str | bytes,
        *,
        require_complete: bool = False,
    ) -> ParseOutcome:
        """Run ``parser`` over ``source``.

        A parser that succeeds without consuming all input is a success
        (inspect ``position``/``is_complete``) unless ``require_complete``
        is set, in which case the outcome fails with INCOMPLETE_INPUT.

        Args:
            parser: Top-level parser
            source: Input text (bytes are decoded as UTF-8)
            require_complete: Treat trailing unconsumed input as failure

        Returns:
            ParseOutcome describing nodes, flag, and final cursor state

        Raises:
            TypeError: If source is neither str nor bytes
            ValueError: If source exceeds max_source_size
        """
        cursor = self.cursor(source)
        try:
            result = parser(cursor)
        except (DepthLimitExceededError, RecursionError) as exc:
            logger.warning(
                "Parse aborted at offset %d: nesting too deep (%s)",
                cursor.pos,
                type(exc).__name__,
            )
            max_depth = cursor.context.depth_guard.max_depth
            return self._outcome(
                cursor, (), ok=False, diagnostic=ErrorTemplate.nesting_depth_exceeded(max_depth)
            )

        diagnostic: Diagnostic | None = None
        ok = result.ok
        if not ok:
            diagnostic = ErrorTemplate.parse_failed(
                self._span(cursor), _trailing_raw_text(result.nodes)
            )
        elif require_complete and not cursor.is_eof:
            ok = False
            diagnostic = ErrorTemplate.incomplete_input(self._span(cursor), cursor.remaining)

        logger.debug(
            "Parsed %d/%d characters (%d probes): ok=%s",
            cursor.pos,
            cursor.length,
            cursor.probe_count,
            ok,
        )
        return self._outcome(cursor, result.nodes, ok=ok, diagnostic=diagnostic)

    @staticmethod
    def _span(cursor: Cursor) -> SourceSpan:
        line, column = cursor.compute_line_col()
        end = min(cursor.pos + 1, cursor.length) if not cursor.is_eof else cursor.pos
        return SourceSpan(start=cursor.pos, end=end, line=line, column=column)

    @staticmethod
    def _outcome(
        cursor: Cursor,
        nodes: tuple[ParseTree, ...],
        *,
        ok: bool,
        diagnostic: Diagnostic | None = None,
    ) -> ParseOutcome:
        return ParseOutcome(
            nodes=nodes,
            ok=ok,
            position=cursor.pos,
            line=cursor.line,
            length=cursor.length,
            probe_count=cursor.probe_count,
            diagnostic=diagnostic,
        )


def run(
    parser: Parser, source: str | bytes, *, require_complete: bool = False
) -> ParseOutcome:
    """Run ``parser`` over ``source`` with a default-configured Engine.

    Example:
        >>> from parsecomb.engine import exact_string
        >>> run(exact_string("hi"), "hi!").position
        2
    """
    return Engine().run(parser, source, require_complete=require_complete)
