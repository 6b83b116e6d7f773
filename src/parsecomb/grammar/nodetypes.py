"""Node tags of the reference grammar.

Values follow declaration order starting at 1; 0 is the untyped tag of
raw leaves. EXPRESSION, LITERAL, MINUS, NOT, VALUE_ACCESS and EXPORT are
reserved: no rule of the reference grammar emits them.

Python 3.13+.
"""

from enum import IntEnum, auto

__all__ = ["NodeType"]


class NodeType(IntEnum):
    """Rule tags emitted by the reference grammar."""

    IDENTIFIER = auto()
    NUMBER_LITERAL = auto()
    STRING_LITERAL = auto()
    BOOL_LITERAL = auto()
    LITERAL = auto()
    ASSIGNMENT = auto()
    EXPRESSION = auto()
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    FOREACH = auto()
    FOR = auto()
    FOR_INIT = auto()
    FOR_CONDITION = auto()
    FOR_STEP = auto()
    BLOCK = auto()
    IFTHEN = auto()
    IFTHENELSE = auto()
    SWITCH = auto()
    CASE = auto()
    CASE_ELSE = auto()
    L_COMPARISON = auto()
    L_E_COMPARISON = auto()
    G_COMPARISON = auto()
    G_E_COMPARISON = auto()
    E_COMPARISON = auto()
    N_E_COMPARISON = auto()
    MINUS = auto()
    NOT = auto()
    BREAK = auto()
    CONTINUE = auto()
    RETURN = auto()
    OR_EXPRESSION = auto()
    AND_EXPRESSION = auto()
    FUNCTION_CALL = auto()
    FUNCTION_DEFINITION = auto()
    VALUE_ACCESS = auto()
    PROGRAM = auto()
    EXPORT = auto()
