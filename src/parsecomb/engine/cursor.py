"""Mutable scan cursor shared by every parser in one parse.

The cursor owns the input text and the scan state (offset, line counter,
probe counter). It contains no parsing logic: matchers read characters
through advance() and backtrack through mark()/reset().

Python 3.13+. Zero external dependencies.

Design Philosophy:
    - One cursor per parse in progress, mutated in place by every parser
    - EOF is a state (is_eof), advance() returns None there instead of raising
    - No peeking: lookahead is mark(), a trial match, then reset()
    - Line:column for diagnostics is computed on demand

Line Ending Support:
    - LF (Unix, \\n): Fully supported
    - CRLF (Windows, \\r\\n): Supported (\\n is the line delimiter)
    - CR-only (Classic Mac, \\r): NOT counted as a line break
"""

from dataclasses import dataclass, field

from parsecomb.constants import MAX_RULE_DEPTH
from parsecomb.core.depth_guard import DepthGuard

__all__ = ["Cursor", "MemoEntry", "ParseContext", "Snapshot", "new_cursor"]


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Atomic capture of the cursor's offset and line counter.

    Attributes:
        pos: Character offset at capture time
        line: Line counter at capture time (1-indexed)
    """

    pos: int
    line: int


@dataclass(frozen=True, slots=True)
class MemoEntry:
    """Memoized outcome of one parser at one start offset.

    Attributes:
        result: The ParseResult the parser returned
        end: Cursor state the parser left behind
    """

    result: object
    end: Snapshot


@dataclass(slots=True)
class ParseContext:
    """Explicit per-parse state carried by the cursor.

    Replaces ambient global state with explicit parameter passing:
    every parser already receives the cursor, so per-parse services
    travel with it.

    Attributes:
        depth_guard: Nesting guard entered by recursive-rule indirections
        memo: Packrat table keyed by (parser, offset); None disables memoization
    """

    depth_guard: DepthGuard = field(default_factory=DepthGuard)
    memo: dict[tuple[object, int], MemoEntry] | None = None


@dataclass(slots=True)
class Cursor:
    """Mutable source position tracker.

    Invariant: ``pos`` and ``line`` always describe the characters actually
    consumed from the start of ``source``; ``probe_count`` never decreases.

    Example:
        >>> cursor = new_cursor("a\\nb")
        >>> cursor.advance()
        'a'
        >>> snapshot = cursor.mark()
        >>> cursor.advance(), cursor.line
        ('\\n', 2)
        >>> cursor.reset(snapshot)
        >>> cursor.position, cursor.line, cursor.probe_count
        (1, 1, 2)

    Attributes:
        source: Input text, immutable once the cursor is created
        pos: Current character offset (0 <= pos <= len(source))
        line: Current line counter (starts at 1)
        probe_count: Characters physically consumed, including re-reads
            after backtracking (diagnostics only)
        context: Per-parse services (depth guard, packrat table)
    """

    source: str
    pos: int = 0
    line: int = 1
    probe_count: int = 0
    context: ParseContext = field(default_factory=ParseContext)

    def advance(self) -> str | None:
        """Consume the next character.

        Returns:
            The consumed character, or None at end of input (not an error:
            matchers and repetition use it to detect exhaustion)
        """
        if self.pos >= len(self.source):
            return None
        char = self.source[self.pos]
        self.pos += 1
        self.probe_count += 1
        if char == "\n":
            self.line += 1
        return char

    def mark(self) -> Snapshot:
        """Capture (offset, line) for a later reset()."""
        return Snapshot(self.pos, self.line)

    def reset(self, snapshot: Snapshot) -> None:
        """Restore (offset, line) captured by mark().

        The probe counter is left untouched.
        """
        self.pos = snapshot.pos
        self.line = snapshot.line

    @property
    def position(self) -> int:
        """Current character offset."""
        return self.pos

    @property
    def length(self) -> int:
        """Length of the input in characters."""
        return len(self.source)

    @property
    def remaining(self) -> int:
        """Number of characters not yet consumed."""
        return len(self.source) - self.pos

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    def compute_line_col(self, pos: int | None = None) -> tuple[int, int]:
        """Compute line and column for a position.

        Args:
            pos: Character offset (default: current position)

        Returns:
            (line, column) tuple (1-indexed, like text editors)

        Performance:
            O(n) where n = position. Only call for error reporting,
            not during normal parsing!

        Example:
            >>> cursor = new_cursor("line1\\nline2\\nline3")
            >>> cursor.compute_line_col(0)
            (1, 1)
            >>> cursor.compute_line_col(6)  # Start of line2
            (2, 1)
            >>> cursor.compute_line_col(8)  # Middle of line2
            (2, 3)
        """
        if pos is None:
            pos = self.pos
        line = self.source.count("\n", 0, pos) + 1
        last_newline = self.source.rfind("\n", 0, pos)
        col = pos - last_newline if last_newline >= 0 else pos + 1
        return (line, col)


def new_cursor(
    source: str | bytes,
    *,
    max_rule_depth: int | None = None,
    memoize: bool = False,
) -> Cursor:
    """Create a cursor positioned at the start of ``source``.

    Note:
        Memoization is off by default here but on by default in Engine.
        Without it, grammars with overlapping alternatives take exponential
        time in the nesting depth: the reference grammar retries every
        operator level inside each parenthesis, so ``((1))`` alone costs
        minutes. Pass ``memoize=True`` when applying such a grammar directly.

    Args:
        source: Input text; bytes are decoded as UTF-8 and offsets then
            refer to the decoded characters
        max_rule_depth: Maximum nesting of recursive-rule activations
            (default: MAX_RULE_DEPTH, clamped to the interpreter stack)
        memoize: Enable packrat memoization of registry-owned rules

    Returns:
        Fresh cursor at offset 0, line 1

    Raises:
        TypeError: If source is neither str nor bytes
        UnicodeDecodeError: If bytes are not valid UTF-8
    """
    match source:
        case str():
            text = source
        case bytes() | bytearray():
            text = bytes(source).decode("utf-8")
        case _:
            msg = f"Cursor source must be str or bytes, got {type(source).__name__}"
            raise TypeError(msg)
    guard = DepthGuard(max_depth=max_rule_depth if max_rule_depth is not None else MAX_RULE_DEPTH)
    context = ParseContext(depth_guard=guard, memo={} if memoize else None)
    return Cursor(text, context=context)
