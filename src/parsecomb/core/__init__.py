"""Core utilities shared across the engine and grammar layers.

This package provides foundational utilities that both the engine (cursor,
recursive rules, run driver) and tree consumers (visitors) depend on.
By isolating these utilities here, we maintain a clean dependency graph:

    core <- engine <- grammar

Exports:
    DepthGuard: Context manager for recursion depth limiting
    DepthLimitExceededError: Exception raised when depth limit exceeded
    depth_clamp: Clamp a requested depth against the interpreter stack

Python 3.13+.
"""

from .depth_guard import DepthGuard, DepthLimitExceededError, depth_clamp

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]
