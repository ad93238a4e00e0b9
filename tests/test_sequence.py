"""Tests for sequence parsing."""

import pytest

from t4ed_locator import parse_sequence


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1", 1),
        ("42", 42),
        ("160", 160),
        ("0", 0),
        ("007", 7),
        ("+5", 5),
        ("0000", 0),
        ("99999", 99999),
    ],
)
def test_parse_sequence_accepts_decimal(raw: str, expected: int) -> None:
    assert parse_sequence(raw) == expected


@pytest.mark.parametrize(
    "malformed",
    [
        "",
        "abc",
        "-5",
        "-0",
        "3.5",
        " 5",
        "5 ",
        "5\n",
        "+",
        "++5",
        "0x10",
        "1e3",
        "1_000",
        "٥",  # Arabic-Indic digit five
        "²",
    ],
)
def test_parse_sequence_malformed_raises(malformed: str) -> None:
    with pytest.raises(ValueError):
        parse_sequence(malformed)


def test_parse_sequence_huge_number_overflows() -> None:
    with pytest.raises(OverflowError):
        parse_sequence("9" * 40)


def test_parse_sequence_leading_zeros_do_not_overflow() -> None:
    assert parse_sequence("0" * 40 + "12") == 12
