"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps every diagnostic the engine can produce in one place, where it
    can be tested and documented.
    """

    # =========================================================================
    # PARSE OUTCOMES (1000-1999)
    # =========================================================================

    @staticmethod
    def parse_failed(span: SourceSpan, partial_literal: str | None = None) -> Diagnostic:
        """Top-level parser reported failure.

        Args:
            span: Location the cursor was left at
            partial_literal: Text matched by an unwrapped literal before it failed

        Returns:
            Diagnostic for PARSE_FAILED
        """
        msg = f"Parse failed at line {span.line}, column {span.column}"
        if partial_literal:
            msg = f"{msg} (matched {partial_literal!r} before failing)"
        return Diagnostic(
            code=DiagnosticCode.PARSE_FAILED,
            message=msg,
            span=span,
            hint="Check the input near the reported position",
            partial_literal=partial_literal,
        )

    @staticmethod
    def incomplete_input(span: SourceSpan, remaining: int) -> Diagnostic:
        """Parser succeeded but did not consume the whole input.

        Args:
            span: Location of the first unconsumed character
            remaining: Number of unconsumed characters

        Returns:
            Diagnostic for INCOMPLETE_INPUT
        """
        msg = (
            f"Unexpected input at line {span.line}, column {span.column}: "
            f"{remaining} character(s) not consumed"
        )
        return Diagnostic(
            code=DiagnosticCode.INCOMPLETE_INPUT,
            message=msg,
            span=span,
            hint="The grammar matched a prefix only; check the trailing text",
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int) -> Diagnostic:
        """Recursive rules nested deeper than the configured limit.

        Args:
            max_depth: Maximum allowed nesting of recursive-rule activations

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Maximum rule nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=None,
            hint="Reduce nesting in the input or raise max_rule_depth",
        )

    @staticmethod
    def source_too_large(size: int, limit: int) -> Diagnostic:
        """Input exceeds the configured size limit.

        Args:
            size: Size of the rejected input in characters
            limit: Configured maximum size

        Returns:
            Diagnostic for SOURCE_TOO_LARGE
        """
        msg = f"Source exceeds maximum size ({size:,} > {limit:,} characters)"
        return Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=msg,
            span=None,
            hint="Split the input or raise max_source_size",
        )

    # =========================================================================
    # GRAMMAR CONSTRUCTION (2000-2999)
    # =========================================================================

    @staticmethod
    def rule_cycle(rule_id: str) -> Diagnostic:
        """A rule was requested while its own builder was still running.

        Args:
            rule_id: Registry key of the rule being built

        Returns:
            Diagnostic for RULE_CYCLE
        """
        msg = f"Rule '{rule_id}' references itself during construction"
        return Diagnostic(
            code=DiagnosticCode.RULE_CYCLE,
            message=msg,
            span=None,
            hint="Reference self-recursive rules through RuleRegistry.recursive()",
            rule_id=rule_id,
        )

    @staticmethod
    def rule_build_failed(rule_id: str, reason: str) -> Diagnostic:
        """A rule builder did not produce a parser.

        Args:
            rule_id: Registry key of the rule being built
            reason: What the builder returned or raised

        Returns:
            Diagnostic for RULE_BUILD_FAILED
        """
        msg = f"Rule '{rule_id}' could not be built: {reason}"
        return Diagnostic(
            code=DiagnosticCode.RULE_BUILD_FAILED,
            message=msg,
            span=None,
            hint="A rule builder must return a callable parser",
            rule_id=rule_id,
        )

    @staticmethod
    def invalid_rule_key(rule_id: str) -> Diagnostic:
        """Rule identifier is empty or collides with a reserved prefix.

        Args:
            rule_id: The rejected identifier

        Returns:
            Diagnostic for INVALID_RULE_KEY
        """
        msg = f"Invalid rule identifier {rule_id!r}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_RULE_KEY,
            message=msg,
            span=None,
            hint="Use a non-empty identifier without a leading '_SPEC_', '_REC_' or '_RULE_'",
            rule_id=rule_id,
        )
