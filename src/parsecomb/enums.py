"""Enumerations for parsecomb type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class RuleState(StrEnum):
    """Lifecycle of a rule registry slot.

    StrEnum provides automatic string conversion: str(RuleState.READY) == "ready"
    """

    UNREGISTERED = "unregistered"
    """No parser has been built for the slot yet."""

    REGISTERING = "registering"
    """The slot's builder is running; re-entering it is a construction cycle."""

    READY = "ready"
    """The slot holds its concrete parser for the rest of the registry lifetime."""


__all__ = [
    "RuleState",
]
