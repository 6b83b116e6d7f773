"""Reference grammar client of the parsecomb engine.

Exports:
    Grammar: The reference grammar bound to a RuleRegistry
    NodeType: Rule tags emitted by the grammar
    RULE_NAMES: Production names accepted by Grammar.parse_rule()

Python 3.13+.
"""

from .nodetypes import NodeType
from .rules import RULE_NAMES, Grammar

__all__ = ["RULE_NAMES", "Grammar", "NodeType"]
