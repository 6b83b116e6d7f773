"""Quickstart example for parsecomb.

This example demonstrates the engine on its own (primitives, combinators,
typed and recursive rules) and then the bundled reference grammar.

Note: Examples print trees with a small walk() callback. In production,
inspect ParseOutcome.ok and ParseOutcome.diagnostic before using nodes.
"""

from parsecomb import Engine, Grammar, RuleRegistry, TreeVisitor, tag_name, walk
from parsecomb.diagnostics import DiagnosticFormatter, OutputFormat
from parsecomb.engine import (
    Leaf,
    Node,
    Parser,
    ParseTree,
    digit,
    letter,
    parens,
    repeat0,
    repeat1,
    sequence,
    skip_char,
    trim,
    try_first_of,
)


def show(tree: ParseTree) -> None:
    """Print a tree, one node per line, indented by depth."""

    def enter(node: ParseTree, level: int) -> None:
        text = f" {node.text!r}" if Leaf.guard(node) else ""
        print(f"{'  ' * level}{tag_name(node.tag)}{text}")

    walk(tree, enter)


# Example 1: Primitives and combinators
print("=" * 50)
print("Example 1: Primitives and Combinators")
print("=" * 50)

word = sequence(letter(), repeat0(try_first_of(letter(), digit())))
outcome = Engine().run(word, "abc123 rest")
print(outcome.ok, outcome.position, outcome.nodes[0].text)
# Output: True 6 abc123

# Example 2: Typed rules and recursion
print("\n" + "=" * 50)
print("Example 2: Typed and Recursive Rules")
print("=" * 50)

NUMBER, PAIR = 1, 2
registry = RuleRegistry()


def pair() -> Parser:
    element = try_first_of(
        registry.specify(NUMBER, repeat1(digit())),
        registry.recursive("pair", pair),
    )
    return registry.specify(
        PAIR, parens(sequence(element, trim(skip_char(",")), element))
    )


outcome = Engine().run(pair(), "(1, (2, 3))", require_complete=True)
show(outcome.nodes[0])
# Output:
# 2
#   1 '1'
#   2
#     1 '2'
#     1 '3'

# Example 3: Reference grammar
print("\n" + "=" * 50)
print("Example 3: Reference Grammar")
print("=" * 50)

grammar = Grammar()
outcome = grammar.parse_program("""
func area(w, h) { return w * h }
for i in sizes {
    if i > 10 { total = total + area(i, 2) } else { continue }
}
""")
show(outcome.nodes[0])


class CallCounter(TreeVisitor):
    """Counts function calls in a program."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def visit_FUNCTION_CALL(self, tree: ParseTree) -> ParseTree:
        if Node.guard(tree) and Leaf.guard(name := tree.children[0]):
            self.calls.append(name.text)
        return self.generic_visit(tree)


counter = CallCounter()
counter.visit(outcome.nodes[0])
print("Calls:", counter.calls)
# Output: Calls: ['area']

# Example 4: Diagnostics
print("\n" + "=" * 50)
print("Example 4: Diagnostics")
print("=" * 50)

outcome = grammar.parse_program("x = 1 + 2 + 3")
if outcome.diagnostic is not None:
    print(outcome.diagnostic.format_error())
    # Output:
    # error[INCOMPLETE_INPUT]: Unexpected input at line 1, column 11: 3 character(s) not consumed
    #   --> line 1, column 11
    #   = help: The grammar matched a prefix only; check the trailing text

    formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
    print(formatter.format(outcome.diagnostic))

print("\n" + "=" * 50)
print("All examples completed successfully!")
print("=" * 50)
