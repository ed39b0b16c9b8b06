"""Exceptions raised by the workout timer."""


class MultiClockError(Exception):
    """Base class for all MultiClock errors."""


class InvalidConfigError(MultiClockError, ValueError):
    """A workout configuration has a bad series count or duration."""


class InvalidStateTransitionError(MultiClockError, RuntimeError):
    """A timer command was issued in a state that cannot accept it.

    This is a programming error: callers should check ``state`` before
    calling ``start`` or delivering ticks.
    """
