"""Code formatting, type parsing and generator configuration."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from frontdesk.models.enums import SequenceType
from frontdesk.services.sequences import (
    DEFAULT_SEQUENCE_WIDTHS,
    InvalidSequenceType,
    SequenceGenerator,
    SequenceOverflow,
    format_code,
    parse_sequence_type,
)

DEC_12 = date(2025, 12, 12)


@pytest.mark.parametrize(
    ("sequence_type", "counter", "width", "expected"),
    [
        (SequenceType.MEDICAL_RECORD, 1, 3, "251212001"),
        (SequenceType.MEDICAL_RECORD, 2, 3, "251212002"),
        (SequenceType.MEDICAL_RECORD, 999, 3, "251212999"),
        (SequenceType.REGISTRATION, 1, 6, "251212000001"),
        (SequenceType.REGISTRATION, 123456, 6, "251212123456"),
    ],
)
def test_format_code(sequence_type: SequenceType, counter: int, width: int, expected: str) -> None:
    assert format_code(sequence_type, DEC_12, counter, width) == expected


def test_format_code_pads_single_digit_month_and_day() -> None:
    assert format_code(SequenceType.MEDICAL_RECORD, date(2026, 1, 5), 7, 3) == "260105007"


def test_format_code_raises_instead_of_widening() -> None:
    with pytest.raises(SequenceOverflow) as exc_info:
        format_code(SequenceType.MEDICAL_RECORD, DEC_12, 1000, 3)

    assert exc_info.value.counter == 1000
    assert exc_info.value.width == 3
    assert exc_info.value.sequence_type is SequenceType.MEDICAL_RECORD


def test_format_code_rejects_non_positive_counter() -> None:
    with pytest.raises(ValueError):
        format_code(SequenceType.MEDICAL_RECORD, DEC_12, 0, 3)


def test_parse_sequence_type_accepts_members_and_values() -> None:
    assert parse_sequence_type(SequenceType.REGISTRATION) is SequenceType.REGISTRATION
    assert parse_sequence_type("RM") is SequenceType.MEDICAL_RECORD
    assert parse_sequence_type("REG") is SequenceType.REGISTRATION


@pytest.mark.parametrize("value", ["rm", "MRN", "", "registration"])
def test_parse_sequence_type_rejects_unknown_values(value: str) -> None:
    with pytest.raises(InvalidSequenceType):
        parse_sequence_type(value)


def test_invalid_sequence_type_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_sequence_type("XX")


def test_default_widths() -> None:
    assert DEFAULT_SEQUENCE_WIDTHS == {SequenceType.MEDICAL_RECORD: 3, SequenceType.REGISTRATION: 6}

    generator = SequenceGenerator(MagicMock())
    assert generator.width_for("RM") == 3
    assert generator.width_for(SequenceType.REGISTRATION) == 6


def test_widths_are_configurable_per_generator() -> None:
    generator = SequenceGenerator(
        MagicMock(),
        widths={SequenceType.MEDICAL_RECORD: 4, SequenceType.REGISTRATION: 8},
    )
    assert generator.width_for("RM") == 4
    assert generator.width_for("REG") == 8
    # Defaults untouched
    assert DEFAULT_SEQUENCE_WIDTHS[SequenceType.MEDICAL_RECORD] == 3


def test_every_type_needs_a_width() -> None:
    with pytest.raises(ValueError, match="REG"):
        SequenceGenerator(MagicMock(), widths={SequenceType.MEDICAL_RECORD: 3})


def test_widths_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SequenceGenerator(MagicMock(), widths={SequenceType.MEDICAL_RECORD: 0, SequenceType.REGISTRATION: 6})
