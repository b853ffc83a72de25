"""Sequence generator exceptions."""

from enum import Enum


class SequenceError(Exception):
    """Base exception for sequence number issuance."""

    pass


class InvalidSequenceType(SequenceError, ValueError):
    """Requested sequence type is not one of the known SequenceType values."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown sequence type: {value!r}")


class SequenceOverflow(SequenceError):
    """Daily counter no longer fits the configured digit width for its type."""

    def __init__(self, sequence_type: Enum, counter: int, width: int):
        self.sequence_type = sequence_type
        self.counter = counter
        self.width = width
        super().__init__(
            f"Daily {sequence_type.value} counter reached {counter}, "
            f"which does not fit in {width} digits (max {10**width - 1})"
        )


class StorageError(SequenceError):
    """The atomic counter increment (or the commit around it) failed.

    The underlying SQLAlchemy/driver exception is chained as ``__cause__``.
    """

    pass
