"""Daily sequence number issuance (medical record and registration numbers)."""

from frontdesk.services.sequences.counter_store import get_counter, increment_counter
from frontdesk.services.sequences.exceptions import (
    InvalidSequenceType,
    SequenceError,
    SequenceOverflow,
    StorageError,
)
from frontdesk.services.sequences.sequence_service import (
    DEFAULT_SEQUENCE_WIDTHS,
    SequenceGenerator,
    format_code,
    parse_sequence_type,
)

__all__ = [
    "DEFAULT_SEQUENCE_WIDTHS",
    "InvalidSequenceType",
    "SequenceError",
    "SequenceGenerator",
    "SequenceOverflow",
    "StorageError",
    "format_code",
    "get_counter",
    "increment_counter",
    "parse_sequence_type",
]
