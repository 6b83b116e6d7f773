"""Property-based tests for engine invariants.

Python 3.13+.
"""

from __future__ import annotations

from hypothesis import event, given
from hypothesis import strategies as st

from parsecomb.engine import (
    Leaf,
    any_char_but,
    attempt,
    exact_string,
    new_cursor,
    repeat0,
    repeat1,
    synthesize,
    try_first_of,
)

from tests.strategies import raw_sources

ANYTHING = any_char_but("")


class TestCursorInvariants:
    """The cursor's line counter always matches the consumed text."""

    @given(raw_sources(), st.lists(st.integers(min_value=0, max_value=3), max_size=40))
    def test_line_tracks_position(self, source: str, moves: list[int]) -> None:
        """Any mix of advance/mark/reset keeps line consistent with pos."""
        cursor = new_cursor(source)
        snapshots = [cursor.mark()]
        probes = 0

        for move in moves:
            if move == 0 and snapshots:
                cursor.reset(snapshots.pop())
            elif move == 1:
                snapshots.append(cursor.mark())
            else:
                cursor.advance()

            assert cursor.probe_count >= probes
            probes = cursor.probe_count
            assert cursor.line == source.count("\n", 0, cursor.pos) + 1
            assert 0 <= cursor.pos <= len(source)


class TestBacktracking:
    """attempt() restores the cursor exactly on failure."""

    @given(raw_sources(), st.text(min_size=1, max_size=5))
    def test_failed_attempt_is_pure(self, source: str, literal: str) -> None:
        """A failed attempt leaves pos and line unchanged."""
        cursor = new_cursor(source)
        cursor.advance()
        before = cursor.mark()

        result = attempt(exact_string(literal))(cursor)

        event(f"ok={result.ok}")
        if not result.ok:
            assert cursor.mark() == before
        else:
            assert cursor.pos == before.pos + len(literal)

    @given(raw_sources(), st.text(min_size=1, max_size=3), st.text(min_size=1, max_size=3))
    def test_alternation_is_left_biased(self, source: str, left: str, right: str) -> None:
        """When the left alternative matches, its result is the result."""
        alone = exact_string(left)(new_cursor(source))

        both = try_first_of(exact_string(left), exact_string(right))(new_cursor(source))

        event(f"left_ok={alone.ok}")
        if alone.ok:
            assert both == alone


class TestTreeShape:
    """Merge and collapse rules over arbitrary text."""

    @given(raw_sources())
    def test_raw_text_splices_to_one_leaf(self, source: str) -> None:
        """Any run of raw characters becomes a single leaf."""
        result = repeat0(ANYTHING)(new_cursor(source))

        assert result.ok
        if source:
            (leaf,) = result.nodes
            assert isinstance(leaf, Leaf)
            assert leaf.text == source
            assert (leaf.span.start, leaf.span.end) == (0, len(source))
        else:
            assert result.nodes == ()

    @given(raw_sources().filter(bool), st.integers(min_value=1, max_value=1000))
    def test_single_leaf_collapses(self, source: str, tag: int) -> None:
        """A typed rule over raw text is a typed leaf with the same text."""
        (leaf,) = synthesize(tag, repeat1(ANYTHING))(new_cursor(source)).nodes

        assert isinstance(leaf, Leaf)
        assert leaf.tag == tag
        assert leaf.text == source
