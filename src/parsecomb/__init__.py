"""parsecomb - parser-combinator engine with typed parse trees.

Grammars are written as ordinary compositions of parser factories instead
of generated tables. The engine provides backtracking combinators, a tree
synthesizer that decides token-vs-subtree shape from a rule's output, and a
rule registry that makes self-referential grammar rules constructible.

Public API:
    Engine - Run driver with input limits, producing ParseOutcome
    RuleRegistry - Typed rules (specify) and recursive rules (recursive)
    new_cursor - Create a cursor for calling parsers directly
    Leaf, Node - The two parse tree shapes
    walk, TreeVisitor - Tree traversal
    Grammar, NodeType - The reference grammar client

Exceptions:
    ParsecombError - Base exception class
    GrammarDefinitionError - Grammar construction errors
    DepthLimitExceededError - Nesting limit exceeded

Submodules:
    parsecomb.engine - Cursor, primitives, combinators, registry, driver
    parsecomb.diagnostics - Diagnostic codes, templates, formatter
    parsecomb.grammar - Reference grammar for a small imperative language
"""

# Essential Public API - Minimal exports for clean namespace
from .core import DepthLimitExceededError
from .diagnostics import GrammarDefinitionError, ParsecombError
from .engine import (
    Engine,
    Leaf,
    Node,
    ParseOutcome,
    RuleRegistry,
    TreeVisitor,
    new_cursor,
    run,
    tag_name,
    walk,
)
from .grammar import Grammar, NodeType

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("parsecomb")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DepthLimitExceededError",
    "Engine",
    "Grammar",
    "GrammarDefinitionError",
    "Leaf",
    "Node",
    "NodeType",
    "ParseOutcome",
    "ParsecombError",
    "RuleRegistry",
    "TreeVisitor",
    "__version__",
    "new_cursor",
    "run",
    "tag_name",
    "walk",
]
