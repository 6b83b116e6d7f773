"""Hypothesis strategies for parsecomb property-based testing.

This package provides reusable strategies for generating test data
across multiple test modules:

- source: identifiers, raw text, and reference-grammar source fragments

Usage:
    from tests.strategies import identifiers, parenthesized_expressions

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - parenthesized_expressions (operator classes, nesting depth)
    - nested_parens (depth)
    - flat_programs (statement count)
"""

from .source import (
    BINARY_OPERATORS,
    GRAMMAR_KEYWORDS,
    digits_text,
    flat_programs,
    identifiers,
    nested_parens,
    parenthesized_expressions,
    plain_identifiers,
    raw_sources,
)

__all__ = [
    "BINARY_OPERATORS",
    "GRAMMAR_KEYWORDS",
    "digits_text",
    "flat_programs",
    "identifiers",
    "nested_parens",
    "parenthesized_expressions",
    "plain_identifiers",
    "raw_sources",
]
