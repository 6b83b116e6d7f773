"""Tests for the combinator algebra.

Covers backtracking, sequencing with the merge rule, alternation order,
repetition, and the bracketing helpers.
"""

from __future__ import annotations

from parsecomb.engine.combinators import (
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
from parsecomb.engine.cursor import new_cursor
from parsecomb.engine.primitives import digit, empty, exact_string, letter, literal_char
from parsecomb.engine.synthesizer import synthesize
from parsecomb.engine.tree import Leaf, Node, ParseTree

NUMBER = 7


def texts(nodes: tuple[ParseTree, ...]) -> list[str]:
    """Text of every leaf in a node tuple."""
    return [node.text for node in nodes if isinstance(node, Leaf)]


# ============================================================================
# ATTEMPT
# ============================================================================


class TestAttempt:
    """Test attempt()."""

    def test_failure_restores_position_and_line(self) -> None:
        """A failed attempt leaves the cursor where it started."""
        cursor = new_cursor("a\nb")
        cursor.advance()
        parser = attempt(exact_string("\nc"))

        result = parser(cursor)

        assert not result.ok
        assert (cursor.position, cursor.line) == (1, 1)

    def test_failure_propagates_partial_nodes(self) -> None:
        """attempt() restores state but returns the failing result as-is."""
        result = attempt(exact_string("abc"))(new_cursor("abx"))

        assert not result.ok
        assert texts(result.nodes) == ["ab"]

    def test_success_keeps_consumption(self) -> None:
        """A successful attempt passes state through."""
        cursor = new_cursor("abc")

        assert attempt(exact_string("ab"))(cursor).ok
        assert cursor.position == 2


# ============================================================================
# SEQUENCE
# ============================================================================


class TestSequence:
    """Test sequence() and the node-list merge rule."""

    def test_adjacent_raw_leaves_splice(self) -> None:
        """Consecutive raw leaves become one leaf."""
        result = sequence(letter(), letter(), digit())(new_cursor("ab1"))

        assert result.ok
        assert texts(result.nodes) == ["ab1"]
        assert result.nodes[0].span.start == 0
        assert result.nodes[0].span.end == 3

    def test_typed_node_stays_separate(self) -> None:
        """A typed node between raw leaves keeps three siblings."""
        number = synthesize(NUMBER, repeat1(digit()))

        result = sequence(letter(), number, letter())(new_cursor("a12b"))

        assert [type(node) for node in result.nodes] == [Leaf, Leaf, Leaf]
        assert [node.tag for node in result.nodes] == [0, NUMBER, 0]
        assert texts(result.nodes) == ["a", "12", "b"]

    def test_stops_at_first_failure_without_backtracking(self) -> None:
        """Failure leaves the cursor where the failing operand stopped."""
        cursor = new_cursor("ab!")

        result = sequence(letter(), letter(), letter())(cursor)

        assert not result.ok
        assert texts(result.nodes) == ["ab"]
        assert cursor.position == 3

    def test_later_operands_do_not_run_after_failure(self) -> None:
        """Operands after the failing one never run."""
        cursor = new_cursor("1ab")

        assert not sequence(letter(), letter())(cursor).ok
        assert cursor.position == 1

    def test_empty_sequence_succeeds(self) -> None:
        """sequence() with no operands matches nothing."""
        result = sequence()(new_cursor("x"))

        assert result.ok
        assert result.nodes == ()


# ============================================================================
# ALTERNATION
# ============================================================================


class TestFirstOf:
    """Test first_of() and try_first_of()."""

    def test_first_success_wins(self) -> None:
        """Alternation is left-biased even when later alternatives match longer."""
        parser = try_first_of(exact_string("a"), exact_string("ab"))
        cursor = new_cursor("ab")

        result = parser(cursor)

        assert texts(result.nodes) == ["a"]
        assert cursor.position == 1

    def test_first_of_does_not_backtrack_between_alternatives(self) -> None:
        """first_of() runs the next alternative from where the last one stopped."""
        cursor = new_cursor("ab")

        result = first_of(exact_string("ax"), exact_string("ab"))(cursor)

        assert not result.ok
        assert cursor.position == 2

    def test_try_first_of_handles_shared_prefix(self) -> None:
        """try_first_of() restores the cursor before each alternative."""
        cursor = new_cursor("ab")

        result = try_first_of(exact_string("ax"), exact_string("ab"))(cursor)

        assert result.ok
        assert texts(result.nodes) == ["ab"]

    def test_total_failure_restores_and_emits_nothing(self) -> None:
        """When every alternative fails, nothing is consumed or emitted."""
        cursor = new_cursor("zz")

        result = try_first_of(exact_string("za"), exact_string("zb"))(cursor)

        assert not result.ok
        assert result.nodes == ()
        assert cursor.position == 0


# ============================================================================
# REPETITION
# ============================================================================


class TestRepetition:
    """Test repeat0() and repeat1()."""

    def test_repeat0_accepts_zero_matches(self) -> None:
        """repeat0() succeeds without consuming when nothing matches."""
        cursor = new_cursor("!")

        result = repeat0(letter())(cursor)

        assert result.ok
        assert result.nodes == ()
        assert cursor.position == 0

    def test_repeat0_merges_matches(self) -> None:
        """Repeated raw leaves splice into one leaf; the failing try is undone."""
        cursor = new_cursor("abc1")

        result = repeat0(letter())(cursor)

        assert texts(result.nodes) == ["abc"]
        assert cursor.position == 3

    def test_repeat1_requires_one_match(self) -> None:
        """repeat1() fails without consuming when nothing matches."""
        cursor = new_cursor("x")

        assert not repeat1(digit())(cursor).ok
        assert cursor.position == 0

    def test_repeat1_collects_typed_siblings(self) -> None:
        """Typed results of each iteration stay separate."""
        number = synthesize(NUMBER, digit())

        result = repeat1(number)(new_cursor("123"))

        assert [node.tag for node in result.nodes] == [NUMBER, NUMBER, NUMBER]

    def test_repetition_of_empty_terminates(self) -> None:
        """A success that consumes nothing ends the loop."""
        assert repeat0(empty())(new_cursor("abc")).ok
        assert repeat1(empty())(new_cursor("abc")).ok

    def test_partial_iteration_is_undone(self) -> None:
        """An iteration that fails half-way is rolled back."""
        cursor = new_cursor("ababa")

        result = repeat0(exact_string("ab"))(cursor)

        assert texts(result.nodes) == ["abab"]
        assert cursor.position == 4


# ============================================================================
# SKIP / OPTIONAL
# ============================================================================


class TestSkipAndOptional:
    """Test skip(), skip_char() and optional()."""

    def test_skip_discards_nodes(self) -> None:
        """skip() keeps success but drops output."""
        result = skip(exact_string("if"))(new_cursor("if"))

        assert result.ok
        assert result.nodes == ()

    def test_skip_propagates_failure(self) -> None:
        """skip() still fails when its parser fails."""
        assert not skip(exact_string("if"))(new_cursor("of")).ok
        assert not skip_char(";")(new_cursor(",")).ok

    def test_optional_backtracks(self) -> None:
        """optional() succeeds with nothing and restores on failure."""
        cursor = new_cursor("ax")

        result = optional(exact_string("ab"))(cursor)

        assert result.ok
        assert result.nodes == ()
        assert cursor.position == 0


# ============================================================================
# BRACKETING
# ============================================================================


class TestBracketing:
    """Test whitespaces(), trim(), between() and parens()."""

    def test_whitespaces_skip_any_run(self) -> None:
        """whitespaces() consumes a run of whitespace and emits nothing."""
        cursor = new_cursor(" \t\n x")

        result = whitespaces()(cursor)

        assert result.ok
        assert result.nodes == ()
        assert cursor.position == 4
        assert cursor.line == 2

    def test_trim_keeps_inner_nodes_only(self) -> None:
        """trim() drops surrounding whitespace."""
        cursor = new_cursor("  ab  ")

        result = trim(repeat1(letter()))(cursor)

        assert texts(result.nodes) == ["ab"]
        assert cursor.is_eof

    def test_between_discards_delimiters(self) -> None:
        """between() keeps only the middle parser's nodes."""
        parser = between(literal_char("["), repeat1(digit()), literal_char("]"))

        result = parser(new_cursor("[42]"))

        assert result.ok
        assert texts(result.nodes) == ["42"]

    def test_between_fails_on_missing_right(self) -> None:
        """A missing right delimiter fails but keeps the middle's nodes."""
        parser = between(literal_char("["), repeat1(digit()), literal_char("]"))

        result = parser(new_cursor("[42"))

        assert not result.ok
        assert texts(result.nodes) == ["42"]

    def test_between_fails_on_missing_left(self) -> None:
        """A missing left delimiter fails with no nodes."""
        parser = between(literal_char("["), repeat1(digit()), literal_char("]"))

        result = parser(new_cursor("42]"))

        assert not result.ok
        assert result.nodes == ()

    def test_parens_allow_inner_whitespace(self) -> None:
        """parens() accepts whitespace inside the brackets."""
        cursor = new_cursor("(  7 )")

        result = parens(digit())(cursor)

        assert result.ok
        assert texts(result.nodes) == ["7"]
        assert cursor.is_eof

    def test_nested_structure_with_typed_children(self) -> None:
        """Combinators compose: typed children survive bracketing."""
        number = synthesize(NUMBER, repeat1(digit()))
        pair = synthesize(NUMBER + 1, parens(sequence(number, trim(skip_char(",")), number)))

        result = pair(new_cursor("(1, 23)"))

        (node,) = result.nodes
        assert isinstance(node, Node)
        assert texts(node.children) == ["1", "23"]
