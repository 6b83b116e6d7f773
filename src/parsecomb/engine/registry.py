"""Rule registry: memoized typed rules and lazily resolved recursive rules.

Grammars are naturally self-referential (an expression contains
parenthesized expressions, a block contains statements containing blocks).
Building such rules eagerly never terminates, so the registry hands out
indirections whose concrete parser is built the first time they RUN.

Slot lifecycle (one slot per registry key):

    UNREGISTERED --build starts--> REGISTERING --build returns--> READY
         ^                               |
         +---------build raises----------+

Registry keys:
    _SPEC_<tag>   typed rule from specify(), one per tag
    _REC_<id>     indirection from recursive(), one per rule id
    <id>          concrete parser a recursive indirection resolved to
    _RULE_<name>  eagerly built named rule from rule()

Architecture:
    - One registry per grammar, owned explicitly instead of process-wide
    - Thread-safe using threading.RLock (reentrant: builders call back in)
    - Registered parsers live as long as the registry (no eviction)

Python 3.13+.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from threading import RLock

from parsecomb.constants import REC_PREFIX, RULE_PREFIX, SPEC_PREFIX
from parsecomb.diagnostics import ErrorTemplate, GrammarDefinitionError
from parsecomb.enums import RuleState

from .cursor import Cursor
from .packrat import packrat
from .synthesizer import synthesize
from .tree import ParseResult, Parser, tag_name

__all__ = ["RuleRegistry", "RuleSlot"]

logger = logging.getLogger(__name__)

_RESERVED_PREFIXES: tuple[str, ...] = (SPEC_PREFIX, REC_PREFIX, RULE_PREFIX)


@dataclass(slots=True)
class RuleSlot:
    """One registry entry.

    Attributes:
        key: Registry key
        state: Lifecycle state
        parser: The registered parser (None until READY)
    """

    key: str
    state: RuleState = RuleState.UNREGISTERED
    parser: Parser | None = None


class RuleRegistry:
    """Explicitly owned table of grammar rules.

    Example:
        >>> registry = RuleRegistry()
        >>> def expression() -> Parser:
        ...     return try_first_of(
        ...         parens(registry.recursive("expression", expression)),
        ...         repeat1(digit()),
        ...     )
        >>> number = registry.specify(1, expression())
    """

    __slots__ = ("_lock", "_slots")

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._slots: dict[str, RuleSlot] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Slot access
    # ------------------------------------------------------------------

    def get(self, key: str) -> Parser | None:
        """Return the READY parser under ``key``, or None."""
        with self._lock:
            slot = self._slots.get(key)
            if slot is None or slot.state is not RuleState.READY:
                return None
            return slot.parser

    def set(self, key: str, parser: Parser) -> None:
        """Register ``parser`` under ``key`` as READY, replacing any entry."""
        with self._lock:
            self._slots[key] = RuleSlot(key, RuleState.READY, parser)

    def state(self, key: str) -> RuleState:
        """Return the lifecycle state of ``key``."""
        with self._lock:
            slot = self._slots.get(key)
            return RuleState.UNREGISTERED if slot is None else slot.state

    def keys(self) -> Iterator[str]:
        """Iterate over a snapshot of registered keys."""
        with self._lock:
            return iter(tuple(self._slots))

    def clear(self) -> None:
        """Forget every rule. Parsers handed out earlier keep working."""
        with self._lock:
            self._slots.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._slots

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    # ------------------------------------------------------------------
    # Rule construction
    # ------------------------------------------------------------------

    def specify(self, tag: int, parser: Parser) -> Parser:
        """Return the typed rule for ``tag``, building it on first request.

        The first call for a tag wraps ``parser`` with the tree synthesizer
        (and packrat memoization); every later call for the same tag returns
        that same parser and ignores its ``parser`` argument.

        Args:
            tag: Non-zero rule tag
            parser: Parser producing the rule's text or children

        Returns:
            Parser emitting one node tagged ``tag``
        """
        key = f"{SPEC_PREFIX}{int(tag)}"
        with self._lock:
            existing = self.get(key)
            if existing is not None:
                return existing
            typed = packrat(synthesize(tag, parser))
            self.set(key, typed)
        logger.debug("Registered typed rule %s under %r", tag_name(tag), key)
        return typed

    def recursive(self, rule_id: str, build: Callable[[], Parser]) -> Parser:
        """Return a lazy indirection to the rule ``rule_id``.

        Constructing the indirection never calls ``build``. The first time
        the indirection runs, ``build`` is called exactly once and its
        parser is cached under ``rule_id``; later runs delegate straight to
        it. ``build`` may therefore reference this rule (or other recursive
        rules) freely. Every run enters the cursor's depth guard.

        Args:
            rule_id: Rule identifier, unique within this registry
            build: Zero-argument factory of the concrete parser

        Returns:
            The same indirection for every call with ``rule_id``

        Raises:
            GrammarDefinitionError: If rule_id is empty or uses a reserved prefix
        """
        self._validate_id(rule_id)
        key = f"{REC_PREFIX}{rule_id}"
        with self._lock:
            existing = self.get(key)
            if existing is not None:
                return existing

            def indirection(cursor: Cursor) -> ParseResult:
                concrete = self.get(rule_id) or self._build(rule_id, build)
                with cursor.context.depth_guard:
                    return concrete(cursor)

            wrapped = packrat(indirection)
            self.set(key, wrapped)
        logger.debug("Registered recursive indirection %r", key)
        return wrapped

    def rule(self, name: str, build: Callable[[], Parser]) -> Parser:
        """Build the named rule once and return it on every later call.

        Unlike recursive(), ``build`` runs immediately, so a rule whose
        construction requests itself is a cycle.

        Args:
            name: Rule name, unique within this registry
            build: Zero-argument factory of the parser

        Returns:
            The parser built by the first call for ``name``

        Raises:
            GrammarDefinitionError: If construction re-enters the rule, the
                builder returns something that is not callable, or the name
                is invalid
        """
        self._validate_id(name)
        key = f"{RULE_PREFIX}{name}"
        return self.get(key) or self._build(key, build)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build(self, key: str, build: Callable[[], Parser]) -> Parser:
        """Drive ``key`` through REGISTERING to READY with ``build``'s parser."""
        with self._lock:
            slot = self._slots.setdefault(key, RuleSlot(key))
            match slot.state:
                case RuleState.READY if slot.parser is not None:
                    return slot.parser
                case RuleState.REGISTERING:
                    raise GrammarDefinitionError(ErrorTemplate.rule_cycle(key))
            slot.state = RuleState.REGISTERING
            try:
                parser = build()
            except BaseException:
                slot.state = RuleState.UNREGISTERED
                raise
            if not callable(parser):
                slot.state = RuleState.UNREGISTERED
                reason = f"builder returned {type(parser).__name__}"
                raise GrammarDefinitionError(ErrorTemplate.rule_build_failed(key, reason))
            slot.parser = parser
            slot.state = RuleState.READY
        logger.debug("Resolved rule %r", key)
        return parser

    @staticmethod
    def _validate_id(rule_id: str) -> None:
        if not rule_id or rule_id.startswith(_RESERVED_PREFIXES):
            raise GrammarDefinitionError(ErrorTemplate.invalid_rule_key(rule_id))
