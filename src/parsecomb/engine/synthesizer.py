"""Tree synthesizer: tag a sub-parser's output as a named rule.

The single branch in synthesize() is the whole policy deciding whether a
rule is a token or a subtree. It depends only on the shape of the wrapped
parser's output, never on a per-rule declaration:

    exactly one raw leaf       -> Leaf(text, span, tag)        token rule
    anything else              -> Node(tag, children, span)    structural rule

Rules are normally created through RuleRegistry.specify(), which memoizes
the synthesized parser per tag.
"""

from parsecomb.constants import UNTYPED

from .cursor import Cursor
from .tree import Leaf, Node, ParseResult, Parser, Span

__all__ = ["synthesize"]


def synthesize(tag: int, parser: Parser) -> Parser:
    """Wrap ``parser`` as a rule producing one node tagged ``tag``.

    On failure the wrapped parser's result is returned untouched. On
    success the span runs from the cursor state before ``parser`` ran to
    the state after it.

    Args:
        tag: Non-zero rule tag (usually an IntEnum member)
        parser: Parser whose output becomes the node's text or children

    Returns:
        Parser emitting exactly one typed node on success

    Raises:
        ValueError: If tag is UNTYPED (reserved for raw leaves)
    """
    if tag == UNTYPED:
        msg = f"Rule tag must differ from the untyped tag ({UNTYPED})"
        raise ValueError(msg)

    def parse(cursor: Cursor) -> ParseResult:
        start = cursor.mark()
        result = parser(cursor)
        if not result.ok:
            return result
        span = Span(start.pos, cursor.pos, start.line, cursor.line)
        match result.nodes:
            case (Leaf(text=text, tag=leaf_tag),) if leaf_tag == UNTYPED:
                return ParseResult.success(Leaf(text, span, tag))
            case nodes:
                return ParseResult.success(Node(tag, nodes, span))

    return parse
