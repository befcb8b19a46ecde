"""
Errors raised by the hand engine.

Every error is raised before any state changes, so a rejected command
leaves the hand exactly as it was and the caller may simply retry with
corrected input.
"""


class HandError(Exception):
    """Base class for all hand engine errors."""
    pass


class IllegalActionError(HandError):
    """Action not allowed for this seat right now (turn, fold, chips)."""
    pass


class InvalidAmountError(HandError):
    """Action size is unusable (non-positive, nothing to call, no increase)."""
    pass


class PhaseMismatchError(HandError):
    """Preflop entry point used postflop, or the reverse."""
    pass


class StateError(HandError):
    """Operation not valid in the hand's current lifecycle state."""
    pass
