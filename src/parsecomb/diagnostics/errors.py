"""Parsecomb exception hierarchy with structured diagnostics.

Integrates with diagnostic codes for Rust/Elm-inspired error messages.
Exceptions are reserved for programming-contract violations: ordinary parse
failures are reported through ParseResult/ParseOutcome, never raised.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "GrammarDefinitionError",
    "ParsecombError",
]


class ParsecombError(Exception):
    """Base exception for all parsecomb errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize ParsecombError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class GrammarDefinitionError(ParsecombError):
    """A grammar could not be constructed.

    Examples:
    - A named rule re-entered its own builder while it was being built
      (a construction cycle that should go through RuleRegistry.recursive)
    - A recursive rule's builder referenced its own rule eagerly
    - An empty rule identifier
    """
