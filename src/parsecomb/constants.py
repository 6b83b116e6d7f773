"""Shared constants for parsecomb.

This module provides centralized configuration constants used across
the engine and grammar packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Tree tags: the reserved tag of raw (untyped) leaves
- Registry keys: prefixes namespacing the rule registry
- Depth limits: Recursion protection for recursive grammar rules
- Input limits: DoS prevention via size constraints

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Tree tags
    "UNTYPED",
    # Registry keys
    "SPEC_PREFIX",
    "REC_PREFIX",
    "RULE_PREFIX",
    # Depth limits
    "MAX_RULE_DEPTH",
    "FRAMES_PER_RULE_LEVEL",
    "RESERVED_FRAMES",
    "MAX_TREE_DEPTH",
    "FRAMES_PER_TREE_LEVEL",
    # Input limits
    "MAX_SOURCE_SIZE",
]

# ============================================================================
# TREE TAGS
# ============================================================================

# Tag carried by raw leaves produced by primitive matchers.
# Typed rule tags are any other integer (usually an IntEnum member).
UNTYPED: int = 0

# ============================================================================
# REGISTRY KEYS
# ============================================================================

# Typed-rule wrappers built by RuleRegistry.specify(), one per tag.
SPEC_PREFIX: str = "_SPEC_"

# Lazy indirections returned by RuleRegistry.recursive(), one per rule id.
# The concrete parser resolved on first run is stored under the bare id.
REC_PREFIX: str = "_REC_"

# Eagerly built named rules cached by RuleRegistry.rule().
RULE_PREFIX: str = "_RULE_"

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# Parsing is a plain recursive call tree: every combinator is one Python
# frame. Recursive grammar rules (expressions inside parentheses, blocks
# inside statements) nest those frames once per activation of a recursive
# rule. The interpreter recursion limit (1000 by default) therefore bounds
# how deeply input may nest.
#
# MAX_RULE_DEPTH counts nested activations of recursive-rule indirections,
# not frames. FRAMES_PER_RULE_LEVEL is a measured upper bound of frames
# spent between two nested activations in the reference grammar (the
# longest chain is Expression -> Value -> FunctionCall -> argument list ->
# Expression). The depth guard clamps the limit so that
#
#     MAX_RULE_DEPTH * FRAMES_PER_RULE_LEVEL + RESERVED_FRAMES
#
# stays below sys.getrecursionlimit(). Exceeding the limit ends the parse
# with a NESTING_DEPTH_EXCEEDED diagnostic instead of a RecursionError.
#
# With the defaults, input nests at most about 15 levels deep, since each
# level of parentheses or blocks takes one activation. Deeper input needs
# both limits raised, for example
#
#     sys.setrecursionlimit(10_000)
#     engine = Engine(max_rule_depth=64)
#
# ============================================================================

# Default maximum nesting of recursive-rule activations per parse.
MAX_RULE_DEPTH: int = 16

# Interpreter frames assumed per nested recursive-rule activation.
FRAMES_PER_RULE_LEVEL: int = 48

# Frames reserved for the caller (test runner, application stack).
RESERVED_FRAMES: int = 100

# Default maximum depth of parse trees walked by TreeVisitor.
MAX_TREE_DEPTH: int = 100

# Interpreter frames per tree level (visit, visit_<TAG>, generic_visit).
FRAMES_PER_TREE_LEVEL: int = 4

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum source size in characters (10 MB).
# Input is fully materialized before parsing; this bounds memory use.
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024
