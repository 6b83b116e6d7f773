"""Unified depth limiting for recursion protection.

Provides reusable depth tracking to prevent stack overflow from:
- Deeply nested input reaching recursive grammar rules
- Deep parse trees walked by visitors
- Pathological grammars that recurse without consuming input

Thread-safe: uses explicit state, no thread-local storage.
Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from parsecomb.constants import FRAMES_PER_RULE_LEVEL, MAX_RULE_DEPTH, RESERVED_FRAMES
from parsecomb.diagnostics import ParsecombError
from parsecomb.diagnostics.templates import ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]

logger = logging.getLogger(__name__)


class DepthLimitExceededError(ParsecombError):
    """Raised when maximum nesting depth is exceeded.

    This error indicates either:
    - Adversarial input designed to cause stack overflow
    - A left-recursive grammar re-entering a rule without consuming input
    - Unintended deep nesting in the parsed text

    The run driver converts it into a failed outcome; it only escapes when
    parsers are called directly on a cursor.
    """


@dataclass(slots=True)
class DepthGuard:
    """Context manager for tracking and limiting recursion depth.

    Usage in recursive rules:
        guard = DepthGuard()
        with guard:
            result = concrete_parser(cursor)

    Usage in tree visitors:
        guard = DepthGuard(max_depth=200, frames_per_level=4)
        with guard:
            self.visit(child)

    Mutability Note:
        Intentionally mutable (not frozen=True) to enable stateful depth
        tracking via context manager protocol. The current_depth field is
        incremented/decremented on __enter__/__exit__.

    Thread Safety:
        Uses explicit instance state, fully reentrant.
        Each cursor owns its own DepthGuard instance.

    Attributes:
        max_depth: Maximum allowed depth (default: MAX_RULE_DEPTH)
        frames_per_level: Interpreter frames consumed per guarded level
        current_depth: Current recursion depth
    """

    max_depth: int = MAX_RULE_DEPTH
    frames_per_level: int = FRAMES_PER_RULE_LEVEL
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Clamp max_depth against Python recursion limit."""
        self.max_depth = depth_clamp(self.max_depth, self.frames_per_level)

    def __enter__(self) -> DepthGuard:
        """Enter guarded section, increment depth.

        Validates depth limit BEFORE incrementing to prevent state corruption
        if DepthLimitExceededError is raised. Since __exit__ is not called when
        __enter__ raises, incrementing first would leave current_depth permanently
        elevated, causing all subsequent operations to fail.
        """
        self.check()
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit guarded section, decrement depth."""
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Current depth (alias for current_depth)."""
        return self.current_depth

    def is_exceeded(self) -> bool:
        """Check if depth limit has been exceeded."""
        return self.current_depth >= self.max_depth

    def check(self) -> None:
        """Explicitly check depth and raise if exceeded.

        Raises:
            DepthLimitExceededError: If depth limit exceeded
        """
        if self.current_depth >= self.max_depth:
            raise DepthLimitExceededError(
                ErrorTemplate.nesting_depth_exceeded(self.max_depth)
            )

    def reset(self) -> None:
        """Reset depth to zero (useful for reuse across multiple parses)."""
        self.current_depth = 0


def depth_clamp(
    requested_depth: int,
    frames_per_level: int = FRAMES_PER_RULE_LEVEL,
    reserve_frames: int = RESERVED_FRAMES,
) -> int:
    """Clamp requested depth against Python recursion limit.

    Each guarded level costs several interpreter frames, so the safe depth
    is the recursion limit minus a reserve, divided by the per-level cost.
    Logs warning if clamping occurs.

    Args:
        requested_depth: Desired maximum depth
        frames_per_level: Frames consumed per guarded level
        reserve_frames: Stack frames to reserve for the caller

    Returns:
        Safe depth value (at least 1), clamped if necessary

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(1000)
        >>> depth_clamp(16)  # OK, 16 * 48 + 100 fits
        16
        >>> depth_clamp(100)  # Exceeds limit, clamped to (1000 - 100) // 48
        18
    """
    limit = sys.getrecursionlimit()
    max_safe_depth = max(1, (limit - reserve_frames) // max(1, frames_per_level))
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested depth %d exceeds Python recursion limit (%d). "
            "Clamping to %d to prevent RecursionError. "
            "Consider increasing sys.setrecursionlimit() if needed.",
            requested_depth,
            limit,
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
