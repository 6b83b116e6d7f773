"""Parse tree traversal.

Two styles are provided:

- walk(): depth-first callbacks on entry and exit, where the entry callback
  can prune a subtree. Iterative, so tree depth is not limited by the
  interpreter stack.
- TreeVisitor: dispatching visitor in the style of ast.NodeVisitor.

NOTE: TreeVisitor dispatches on the tag NAME, so methods are named after the
tag enum members (visit_ASSIGNMENT, visit_IDENTIFIER) and raw leaves go to
visit_UNTYPED. Integer tags without an enum use visit_<number> via getattr.

Python 3.13+.
"""

from collections.abc import Callable
from typing import ClassVar

from parsecomb.constants import FRAMES_PER_TREE_LEVEL, MAX_TREE_DEPTH
from parsecomb.core.depth_guard import DepthGuard

from .tree import Node, ParseTree, tag_name

__all__ = ["TreeVisitor", "walk"]

type EnterCallback = Callable[[ParseTree, int], bool | None]
type LeaveCallback = Callable[[ParseTree, int], None]


def walk(
    tree: ParseTree,
    enter: EnterCallback,
    leave: LeaveCallback | None = None,
) -> None:
    """Walk ``tree`` depth-first.

    ``enter(tree, level)`` runs before a node's children; returning True
    prunes the node: its children are skipped and ``leave`` is not called
    for it. ``leave(tree, level)`` runs after all children.

    Args:
        tree: Root of the walk (level 0)
        enter: Pre-order callback
        leave: Post-order callback (optional)

    Example:
        >>> lines = []
        >>> walk(root, lambda t, level: lines.append("  " * level + tag_name(t.tag)))
    """
    # (tree, level, leaving)
    stack: list[tuple[ParseTree, int, bool]] = [(tree, 0, False)]
    while stack:
        current, level, leaving = stack.pop()
        if leaving:
            if leave is not None:
                leave(current, level)
            continue
        if enter(current, level):
            continue
        stack.append((current, level, True))
        if Node.guard(current):
            stack.extend((child, level + 1, False) for child in reversed(current.children))


class TreeVisitor[T = ParseTree]:
    """Base visitor for traversing parse trees.

    Follows stdlib ast.NodeVisitor convention: generic_visit() automatically
    traverses all children. Override visit_<TAGNAME> methods to add custom
    behavior.

    Uses class-level dispatch table built once per subclass via
    __init_subclass__.

    Example:
        >>> class CountAssignments(TreeVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.count = 0
        ...
        ...     def visit_ASSIGNMENT(self, tree):
        ...         self.count += 1
        ...         return self.generic_visit(tree)
        ...
        >>> visitor = CountAssignments()
        >>> for tree in outcome.nodes:
        ...     visitor.visit(tree)
    """

    __slots__ = ("_depth_guard",)

    # Class-level dispatch table: tag name -> method name
    _class_visit_methods: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Build class-level dispatch table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {
            name[6:]: name for name in dir(cls) if name.startswith("visit_")
        }

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize visitor with depth guard.

        Subclasses MUST call super().__init__() to ensure depth protection
        is properly initialized.

        Args:
            max_depth: Maximum traversal depth (default: MAX_TREE_DEPTH).
        """
        self._depth_guard = DepthGuard(
            max_depth=max_depth if max_depth is not None else MAX_TREE_DEPTH,
            frames_per_level=FRAMES_PER_TREE_LEVEL,
        )

    def visit(self, tree: ParseTree) -> T:
        """Dispatch to visit_<TAGNAME>, falling back to generic_visit."""
        method_name = self._class_visit_methods.get(tag_name(tree.tag))
        if method_name is None:
            return self.generic_visit(tree)
        return getattr(self, method_name)(tree)  # type: ignore[no-any-return]

    def generic_visit(self, tree: ParseTree) -> T:
        """Visit all children of a Node under depth protection.

        Returns:
            The tree itself (identity)

        Raises:
            DepthLimitExceededError: If traversal depth exceeds max_depth
        """
        if Node.guard(tree):
            with self._depth_guard:
                for child in tree.children:
                    self.visit(child)
        return tree  # type: ignore[return-value]
