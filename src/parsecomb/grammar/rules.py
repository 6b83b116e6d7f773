"""Reference grammar for a small imperative language.

Each method builds one production from engine combinators. Methods are
memoized per Grammar through its RuleRegistry, so a production is built
once however many other productions use it. Self-referential productions
(parenthesized expressions, nested blocks, control statements inside
blocks) go through RuleRegistry.recursive().

Grammar (informal EBNF; node tags in parentheses):

    Identifier   = Letter (Letter | Digit)*                       (IDENTIFIER)
    NumberLit    = Digit+                                         (NUMBER_LITERAL)
    StringLit    = '"' [^"]* '"'                                  (STRING_LITERAL)
    BoolLit      = "true" | "false"                               (BOOL_LITERAL)
    Assignment   = Identifier '=' Expression                      (ASSIGNMENT)
    Expression   = OrExpr
    OrExpr       = AndExpr ('||' AndExpr)?                        (OR_EXPRESSION)
    AndExpr      = Comparison ('&&' Comparison)?                  (AND_EXPRESSION)
    Comparison   = Sum (('=='|'!='|'<'|'<='|'>'|'>=') Sum)?       (*_COMPARISON)
    Sum          = Product (('+'|'-') Product)?                   (ADD/SUB)
    Product      = Value (('*'|'/') Value)?                       (MUL/DIV)
    Value        = FunctionCall | Literal | Identifier | '(' Expression ')'
    Statement    = FunctionDef | FunctionCall | ControlStatement | Assignment
    Control      = 'break' | 'continue' | Return | Loop | If | Switch
    Return       = 'return' ';' | 'return' Expression             (RETURN)
    Block        = '{' Statement* '}'                             (BLOCK)
    If           = 'if' Expression Block 'else' Block             (IFTHENELSE)
                 | 'if' Expression Block                          (IFTHEN)
    Loop         = 'for' Identifier 'in' Identifier Block         (FOREACH)
                 | 'for' AssignList ';' Expression ';' AssignList Block  (FOR)
    Switch       = 'switch' Expression '{' Case* CaseElse? '}'    (SWITCH)
    Case         = 'case' Expression ':' Block                    (CASE)
    CaseElse     = 'else' ':' Block                               (CASE_ELSE)
    FunctionDef  = 'func' Identifier '(' Identifier,* ')' Block   (FUNCTION_DEFINITION)
    FunctionCall = Identifier '(' Expression,* ')'                (FUNCTION_CALL)
    Program      = Statement*                                     (PROGRAM)

Expression itself is transparent: an assignment's right-hand side appears
directly as the ADD, MUL, IDENTIFIER, ... node it parsed to.

Python 3.13+.
"""

import functools
from collections.abc import Callable

from parsecomb.engine import (
    Engine,
    ParseOutcome,
    Parser,
    RuleRegistry,
    any_char_but,
    between,
    digit,
    exact_string,
    letter,
    literal_char,
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

from .nodetypes import NodeType

__all__ = ["Grammar", "RULE_NAMES"]

type RuleMethod = Callable[["Grammar"], Parser]

RULE_NAMES: set[str] = set()


def grammar_rule(method: RuleMethod) -> RuleMethod:
    """Memoize a production in the grammar's registry under its method name."""
    RULE_NAMES.add(method.__name__)

    @functools.wraps(method)
    def build(self: "Grammar") -> Parser:
        return self.registry.rule(method.__name__, lambda: method(self))

    return build


def keyword(text: str) -> Parser:
    """Require ``text`` without emitting it."""
    return skip(exact_string(text))


class Grammar:
    """The reference grammar bound to one rule registry.

    Example:
        >>> grammar = Grammar()
        >>> outcome = grammar.parse_rule("statement", "x = 1 + 2 * 3")
        >>> tag_name(outcome.nodes[0].tag)
        'ASSIGNMENT'
    """

    __slots__ = ("_registry",)

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        """Initialize the grammar.

        Args:
            registry: Registry to build rules in (default: a new private one).
                      Sharing a registry between two Grammar instances shares
                      their typed rules.
        """
        self._registry = registry if registry is not None else RuleRegistry()

    @property
    def registry(self) -> RuleRegistry:
        """Registry owning this grammar's rules."""
        return self._registry

    # ========================================================================
    # ENTRY POINTS
    # ========================================================================

    def parse_program(self, source: str | bytes, *, engine: Engine | None = None) -> ParseOutcome:
        """Parse a whole program, requiring the entire input to be consumed."""
        return (engine or Engine()).run(self.program(), source, require_complete=True)

    def parse_rule(
        self,
        name: str,
        source: str | bytes,
        *,
        engine: Engine | None = None,
        require_complete: bool = True,
    ) -> ParseOutcome:
        """Parse ``source`` with the production called ``name``.

        Args:
            name: Production name (see RULE_NAMES), e.g. "statement"
            source: Input text
            engine: Run driver (default: Engine())
            require_complete: Treat trailing unconsumed input as failure

        Raises:
            ValueError: If name is not a production of this grammar
        """
        if name not in RULE_NAMES:
            msg = f"Unknown grammar rule {name!r}; expected one of {sorted(RULE_NAMES)}"
            raise ValueError(msg)
        parser = getattr(self, name)()
        return (engine or Engine()).run(parser, source, require_complete=require_complete)

    # ========================================================================
    # LITERALS
    # ========================================================================

    @grammar_rule
    def identifier(self) -> Parser:
        return self.registry.specify(
            NodeType.IDENTIFIER,
            sequence(letter(), repeat0(try_first_of(letter(), digit()))),
        )

    @grammar_rule
    def number_literal(self) -> Parser:
        return self.registry.specify(NodeType.NUMBER_LITERAL, repeat1(digit()))

    @grammar_rule
    def string_literal(self) -> Parser:
        return self.registry.specify(
            NodeType.STRING_LITERAL,
            sequence(skip_char('"'), repeat0(any_char_but('"')), skip_char('"')),
        )

    @grammar_rule
    def bool_literal(self) -> Parser:
        return self.registry.specify(
            NodeType.BOOL_LITERAL,
            try_first_of(exact_string("true"), exact_string("false")),
        )

    @grammar_rule
    def literal(self) -> Parser:
        return try_first_of(self.number_literal(), self.string_literal(), self.bool_literal())

    # ========================================================================
    # EXPRESSIONS
    # ========================================================================

    @grammar_rule
    def expression(self) -> Parser:
        return trim(self.or_expression())

    def _binary(self, tag: NodeType, operator: str, operand: Parser) -> Parser:
        """``operand operator operand`` tagged ``tag``, else ``operand``."""
        ws = whitespaces()
        return try_first_of(
            self.registry.specify(
                tag, sequence(operand, ws, keyword(operator), ws, operand)
            ),
            operand,
        )

    @grammar_rule
    def or_expression(self) -> Parser:
        return self._binary(NodeType.OR_EXPRESSION, "||", self.and_expression())

    @grammar_rule
    def and_expression(self) -> Parser:
        return self._binary(NodeType.AND_EXPRESSION, "&&", self.comparison())

    def _comparison(self, tag: NodeType, operator: str) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            tag,
            sequence(self.sum_expression(), ws, keyword(operator), ws, self.sum_expression()),
        )

    @grammar_rule
    def comparison(self) -> Parser:
        # Equality first; '<' before '<=' is safe because alternatives backtrack.
        return try_first_of(
            self._comparison(NodeType.E_COMPARISON, "=="),
            self._comparison(NodeType.N_E_COMPARISON, "!="),
            self._comparison(NodeType.L_COMPARISON, "<"),
            self._comparison(NodeType.L_E_COMPARISON, "<="),
            self._comparison(NodeType.G_COMPARISON, ">"),
            self._comparison(NodeType.G_E_COMPARISON, ">="),
            self.sum_expression(),
        )

    def _arithmetic(self, tag: NodeType, operator: str, operand: Parser) -> Parser:
        return self.registry.specify(
            tag,
            sequence(operand, trim(sequence(skip_char(operator), whitespaces(), operand))),
        )

    @grammar_rule
    def sum_expression(self) -> Parser:
        product = self.product_expression()
        return try_first_of(
            self._arithmetic(NodeType.ADD, "+", product),
            self._arithmetic(NodeType.SUB, "-", product),
            trim(product),
        )

    @grammar_rule
    def product_expression(self) -> Parser:
        value = self.value()
        return try_first_of(
            self._arithmetic(NodeType.MUL, "*", value),
            self._arithmetic(NodeType.DIV, "/", value),
            trim(value),
        )

    @grammar_rule
    def value(self) -> Parser:
        return try_first_of(
            self.function_call(),
            self.literal(),
            self.identifier(),
            parens(self.registry.recursive("expression", self.expression)),
        )

    # ========================================================================
    # STATEMENTS
    # ========================================================================

    @grammar_rule
    def assignment(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.ASSIGNMENT,
            trim(sequence(self.identifier(), ws, skip_char("="), ws, self.expression())),
        )

    @grammar_rule
    def assignment_list(self) -> Parser:
        ws = whitespaces()
        assignment = self.assignment()
        return trim(
            optional(sequence(assignment, repeat0(sequence(ws, skip_char(","), ws, assignment))))
        )

    @grammar_rule
    def statement(self) -> Parser:
        return trim(
            try_first_of(
                self.function_definition(),
                self.function_call(),
                self.registry.recursive("control_statement", self.control_statement),
                self.assignment(),
            )
        )

    @grammar_rule
    def control_statement(self) -> Parser:
        return try_first_of(
            self.break_statement(),
            self.continue_statement(),
            self.return_statement(),
            self.loop(),
            self.if_statement(),
            self.switch(),
        )

    @grammar_rule
    def break_statement(self) -> Parser:
        return self.registry.specify(NodeType.BREAK, keyword("break"))

    @grammar_rule
    def continue_statement(self) -> Parser:
        return self.registry.specify(NodeType.CONTINUE, keyword("continue"))

    @grammar_rule
    def return_statement(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.RETURN,
            sequence(
                keyword("return"),
                try_first_of(sequence(ws, skip_char(";")), sequence(ws, self.expression())),
            ),
        )

    @grammar_rule
    def block(self) -> Parser:
        return self.registry.specify(
            NodeType.BLOCK,
            trim(between(literal_char("{"), trim(repeat0(self.statement())), literal_char("}"))),
        )

    # ------------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------------

    @grammar_rule
    def loop(self) -> Parser:
        return try_first_of(self.foreach(), self.for_loop())

    @grammar_rule
    def foreach(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.FOREACH,
            sequence(
                keyword("for"), ws, self.identifier(), ws,
                keyword("in"), ws, self.identifier(), ws,
                self.block(),
            ),
        )  # fmt: skip

    @grammar_rule
    def for_loop(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.FOR,
            sequence(
                keyword("for"), ws, self.for_init(), ws,
                skip_char(";"), ws, self.for_condition(), ws,
                skip_char(";"), ws, self.for_step(), ws,
                self.block(),
            ),
        )  # fmt: skip

    @grammar_rule
    def for_init(self) -> Parser:
        return self.registry.specify(NodeType.FOR_INIT, self.assignment_list())

    @grammar_rule
    def for_condition(self) -> Parser:
        return self.registry.specify(NodeType.FOR_CONDITION, self.expression())

    @grammar_rule
    def for_step(self) -> Parser:
        return self.registry.specify(NodeType.FOR_STEP, self.assignment_list())

    # ------------------------------------------------------------------------
    # Conditionals
    # ------------------------------------------------------------------------

    @grammar_rule
    def if_statement(self) -> Parser:
        # The longer production first: IfThen is a prefix of IfThenElse.
        return try_first_of(self.if_then_else(), self.if_then())

    @grammar_rule
    def if_then(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.IFTHEN,
            sequence(keyword("if"), ws, self.expression(), ws, self.block()),
        )

    @grammar_rule
    def if_then_else(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.IFTHENELSE,
            sequence(
                keyword("if"), ws, self.expression(), ws, self.block(), ws,
                keyword("else"), ws, self.block(),
            ),
        )  # fmt: skip

    @grammar_rule
    def switch(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.SWITCH,
            sequence(
                keyword("switch"), ws,
                self.registry.recursive("expression", self.expression), ws,
                self.switch_block(),
            ),
        )  # fmt: skip

    @grammar_rule
    def switch_block(self) -> Parser:
        return trim(
            between(
                literal_char("{"),
                trim(sequence(repeat0(self.case()), optional(self.case_else()))),
                literal_char("}"),
            )
        )

    @grammar_rule
    def case(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.CASE,
            trim(
                sequence(
                    keyword("case"), ws,
                    self.registry.recursive("expression", self.expression), ws,
                    skip_char(":"), ws,
                    self.registry.recursive("block", self.block),
                )
            ),
        )  # fmt: skip

    @grammar_rule
    def case_else(self) -> Parser:
        ws = whitespaces()
        return self.registry.specify(
            NodeType.CASE_ELSE,
            trim(
                sequence(
                    keyword("else"), ws, skip_char(":"), ws,
                    self.registry.recursive("block", self.block),
                )
            ),
        )  # fmt: skip

    # ========================================================================
    # FUNCTIONS
    # ========================================================================

    @grammar_rule
    def function_call(self) -> Parser:
        return self.registry.specify(
            NodeType.FUNCTION_CALL,
            sequence(self.identifier(), parens(self.params_list())),
        )

    @grammar_rule
    def params_list(self) -> Parser:
        ws = whitespaces()
        argument = self.registry.recursive("expression", self.expression)
        return trim(
            optional(sequence(argument, repeat0(sequence(ws, skip_char(","), ws, argument))))
        )

    @grammar_rule
    def function_definition(self) -> Parser:
        return self.registry.specify(
            NodeType.FUNCTION_DEFINITION,
            sequence(
                keyword("func"), whitespaces(), self.identifier(),
                parens(self.named_params_list()), whitespaces(),
                self.registry.recursive("block", self.block),
            ),
        )  # fmt: skip

    @grammar_rule
    def named_params_list(self) -> Parser:
        ws = whitespaces()
        identifier = self.identifier()
        return trim(
            optional(
                sequence(identifier, repeat0(sequence(ws, skip_char(","), ws, identifier)))
            )
        )

    # ========================================================================
    # PROGRAM
    # ========================================================================

    @grammar_rule
    def program(self) -> Parser:
        return self.registry.specify(NodeType.PROGRAM, repeat0(self.statement()))
