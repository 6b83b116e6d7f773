"""Parser-combinator engine.

Grammars are ordinary compositions of parser factories. A Parser is any
callable taking the Cursor and returning a ParseResult(nodes, ok).

Layers, leaves first:
    cursor        scan state (offset, line, probe count), mark/reset
    primitives    single-token matchers
    combinators   sequencing, alternation, repetition, backtracking
    synthesizer   typed-node construction (token vs. subtree)
    registry      memoized typed rules, lazily resolved recursive rules
    core          run driver producing ParseOutcome with diagnostics
    visitor       tree traversal

Python 3.13+.
"""

from .combinators import (
    attempt,
    between,
    first_of,
    optional,
    parens,
    repeat0,
    repeat1,
    sequence,
    skip,
    skip_char,
    trim,
    try_first_of,
    whitespaces,
)
from .core import Engine, ParseOutcome, run
from .cursor import Cursor, ParseContext, Snapshot, new_cursor
from .packrat import packrat
from .primitives import (
    any_char_but,
    char_class,
    digit,
    empty,
    end_of_input,
    exact_string,
    letter,
    literal_char,
    whitespace,
)
from .registry import RuleRegistry, RuleSlot
from .synthesizer import synthesize
from .tree import Leaf, Node, ParseResult, Parser, ParseTree, Span, merge_nodes, tag_name
from .visitor import TreeVisitor, walk

__all__ = [
    "Cursor",
    "Engine",
    "Leaf",
    "Node",
    "ParseContext",
    "ParseOutcome",
    "ParseResult",
    "ParseTree",
    "Parser",
    "RuleRegistry",
    "RuleSlot",
    "Snapshot",
    "Span",
    "TreeVisitor",
    "any_char_but",
    "attempt",
    "between",
    "char_class",
    "digit",
    "empty",
    "end_of_input",
    "exact_string",
    "first_of",
    "letter",
    "literal_char",
    "merge_nodes",
    "new_cursor",
    "optional",
    "packrat",
    "parens",
    "repeat0",
    "repeat1",
    "run",
    "sequence",
    "skip",
    "skip_char",
    "synthesize",
    "tag_name",
    "trim",
    "try_first_of",
    "walk",
    "whitespace",
    "whitespaces",
]
