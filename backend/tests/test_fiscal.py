from datetime import date

import pytest

from temple_billing.services.fiscal import (
    fiscal_year_label,
    format_receipt_number,
    parse_serial,
    receipt_like_pattern,
)


@pytest.mark.parametrize(
    "day, label",
    [
        (date(2025, 4, 1), "25-26"),
        (date(2025, 3, 31), "24-25"),
        (date(2026, 1, 10), "25-26"),
        (date(2025, 12, 31), "25-26"),
        (date(2099, 4, 1), "99-00"),
        (date(2000, 1, 15), "99-00"),
        (date(2009, 5, 1), "09-10"),
    ],
)
def test_fiscal_year_label(day, label):
    assert fiscal_year_label(day) == label


def test_receipt_number_has_no_padding():
    assert format_receipt_number("25-26", 7) == "SRI/25-26/7"
    assert format_receipt_number("25-26", 1234) == "SRI/25-26/1234"


def test_like_pattern_is_scoped_to_fiscal_year():
    assert receipt_like_pattern("25-26") == "SRI/25-26/%"


@pytest.mark.parametrize(
    "receipt_no, expected",
    [
        ("SRI/25-26/41", 41),
        ("SRI/25-26/0", 0),
        ("SRI/25-26/abc", None),
        ("SRI/25-26/12a", None),
        ("SRI/25-26/-3", None),
        ("SRI/25-26/", None),
        ("SRI/24-25/41", None),
        ("", None),
    ],
)
def test_parse_serial(receipt_no, expected):
    assert parse_serial(receipt_no, "25-26") == expected
