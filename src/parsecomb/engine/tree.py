"""Parse tree nodes, parser results and the node-list merge rule.

All nodes are immutable frozen dataclasses. A parse tree is a tagged sum of
two shapes:

    Leaf  raw matched text (tag UNTYPED) or a token rule's text (typed tag)
    Node  a typed rule with an ordered tuple of children

Text belongs only to leaves and children only to nodes, so the tree
synthesizer's "token or subtree" decision is visible in the type.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TypeIs

from parsecomb.constants import UNTYPED

from .cursor import Cursor

__all__ = [
    "EMPTY_SUCCESS",
    "FAILURE",
    "Leaf",
    "Node",
    "ParseResult",
    "ParseTree",
    "Parser",
    "Span",
    "merge_nodes",
    "tag_name",
]


# ============================================================================
# SPANS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Span:
    """Source range of a node.

    Attributes:
        start: Starting character offset (inclusive)
        end: Ending character offset (exclusive)
        start_line: Line counter before the first character (1-indexed)
        end_line: Line counter after the last character (1-indexed)

    Example:
        Source: "x = 1"
        Assignment span: Span(start=0, end=5, start_line=1, end_line=1)
    """

    start: int
    end: int
    start_line: int = 1
    end_line: int = 1

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.end_line < self.start_line:
            msg = f"Span end_line ({self.end_line}) must be >= start_line ({self.start_line})"
            raise ValueError(msg)

    def cover(self, other: Span) -> Span:
        """Return the span from this span's start to ``other``'s end."""
        return Span(self.start, other.end, self.start_line, other.end_line)


# ============================================================================
# TREE NODES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Leaf:
    """Matched text.

    Primitive matchers produce raw leaves (tag UNTYPED); a typed rule whose
    parser yields exactly one raw leaf collapses into a typed leaf.
    """

    text: str
    span: Span
    tag: int = UNTYPED

    @property
    def is_raw(self) -> bool:
        """True for untyped text that the merge rule may splice."""
        return self.tag == UNTYPED

    @staticmethod
    def guard(tree: object) -> TypeIs[Leaf]:
        """Type guard for Leaf."""
        return isinstance(tree, Leaf)


@dataclass(frozen=True, slots=True)
class Node:
    """Typed rule with ordered children (left-to-right match order)."""

    tag: int
    children: tuple[ParseTree, ...]
    span: Span

    @property
    def is_raw(self) -> bool:
        """Always False: nodes are never spliced."""
        return False

    @staticmethod
    def guard(tree: object) -> TypeIs[Node]:
        """Type guard for Node."""
        return isinstance(tree, Node)

    def iter_tree(self) -> Iterator[ParseTree]:
        """Yield this node and all descendants in pre-order."""
        stack: list[ParseTree] = [self]
        while stack:
            tree = stack.pop()
            yield tree
            if isinstance(tree, Node):
                stack.extend(reversed(tree.children))

    def find_all(self, tag: int) -> tuple[ParseTree, ...]:
        """Return this node and its descendants carrying ``tag``, in pre-order."""
        return tuple(tree for tree in self.iter_tree() if tree.tag == tag)

    def first(self, tag: int) -> ParseTree | None:
        """Return the first node (pre-order) carrying ``tag``, or None."""
        return next((tree for tree in self.iter_tree() if tree.tag == tag), None)


type ParseTree = Leaf | Node


def tag_name(tag: int) -> str:
    """Render a tag for display: enum members by name, plain ints as digits.

    Example:
        >>> from parsecomb.grammar import NodeType
        >>> tag_name(NodeType.ASSIGNMENT)
        'ASSIGNMENT'
        >>> tag_name(0)
        'UNTYPED'
    """
    if isinstance(tag, Enum):
        return tag.name
    if tag == UNTYPED:
        return "UNTYPED"
    return str(tag)


# ============================================================================
# PARSER RESULTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Output of one parser run.

    Attributes:
        nodes: Ordered nodes produced (partial output on failure)
        ok: Success flag
    """

    nodes: tuple[ParseTree, ...]
    ok: bool

    @staticmethod
    def success(*nodes: ParseTree) -> ParseResult:
        """Build a successful result."""
        return ParseResult(nodes, True)

    @staticmethod
    def failure(*nodes: ParseTree) -> ParseResult:
        """Build a failed result carrying whatever was matched so far."""
        return ParseResult(nodes, False)


FAILURE = ParseResult((), False)
EMPTY_SUCCESS = ParseResult((), True)

type Parser = Callable[[Cursor], ParseResult]


# ============================================================================
# MERGE RULE
# ============================================================================


def merge_nodes(acc: list[ParseTree], incoming: tuple[ParseTree, ...]) -> None:
    """Append ``incoming`` to ``acc`` in place, splicing adjacent raw text.

    When both the last accumulated node and the next incoming node are raw
    leaves, their text is concatenated into one leaf spanning both.
    Anything else is appended as a new sibling. This is what turns the
    letters of an identifier into one leaf while a nested typed rule stays
    a distinct child.

    Args:
        acc: Accumulated node list (mutated)
        incoming: Nodes produced by the next parser
    """
    for tree in incoming:
        if acc and tree.is_raw and acc[-1].is_raw:
            last = acc[-1]
            # is_raw implies Leaf; the guard narrows for the type checker
            if Leaf.guard(last) and Leaf.guard(tree):
                acc[-1] = Leaf(last.text + tree.text, last.span.cover(tree.span))
                continue
        acc.append(tree)
