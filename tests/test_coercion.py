"""Tests for the comparison normalization helpers."""

from __future__ import annotations

import datetime
import math
from decimal import Decimal

import pytest

from criteria_engine.coercion import (
    align_mixed,
    blank_missing,
    coerce_to_iso,
    dates_to_epoch,
    is_numbery,
    lower_strings,
    normalize_comparison,
    parse_iso_date,
    stringify,
    to_epoch_millis,
    to_iso_string,
    to_number,
)
from criteria_engine.operators_memory import compare

UTC = datetime.timezone.utc


# -- Numbers -----------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5, 5),
        ("5", 5),
        (" 5.5 ", 5.5),
        ("1e3", 1000),
        ("-12", -12),
        (Decimal("1.5"), Decimal("1.5")),
    ],
)
def test_to_number_parses_finite_numbers(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize(
    "value",
    ["", "   ", "abc", "1_000", "inf", "nan", True, False, None, [], float("inf")],
)
def test_to_number_rejects_non_numbers(value):
    assert to_number(value) is None


def test_zero_is_numbery():
    assert is_numbery(0) is True
    assert is_numbery("0") is True


def test_dates_are_not_numbery():
    assert is_numbery(datetime.date(2020, 1, 1)) is False


def test_stringify():
    assert stringify(True) == "true"
    assert stringify(False) == "false"
    assert stringify(3.0) == "3"
    assert stringify(2.5) == "2.5"
    assert stringify(None) == ""
    assert stringify([1, "a", None]) == "1,a,"


# -- Dates -------------------------------------------------------------------


def test_to_iso_string_uses_millisecond_precision():
    dt = datetime.datetime(2020, 1, 2, 3, 4, 5, 678901, tzinfo=UTC)
    assert to_iso_string(dt) == "2020-01-02T03:04:05.678Z"


def test_to_iso_string_of_bare_date_is_utc_midnight():
    assert to_iso_string(datetime.date(2020, 1, 2)) == "2020-01-02T00:00:00.000Z"


def test_to_iso_string_converts_offsets_to_utc():
    tz = datetime.timezone(datetime.timedelta(hours=2))
    dt = datetime.datetime(2020, 1, 2, 1, 0, tzinfo=tz)
    assert to_iso_string(dt) == "2020-01-01T23:00:00.000Z"


def test_to_epoch_millis():
    assert to_epoch_millis(datetime.datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)) == 1000
    # Naive values are read as UTC.
    assert to_epoch_millis(datetime.datetime(1970, 1, 2)) == 86_400_000


def test_parse_iso_date():
    assert parse_iso_date("2020-01-02") == datetime.datetime(2020, 1, 2)
    parsed = parse_iso_date("2020-01-02t10:00:00z")
    assert parsed == datetime.datetime(2020, 1, 2, 10, tzinfo=UTC)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2020-01-01T00:00:00.5Z", datetime.datetime(2020, 1, 1, 0, 0, 0, 500000, UTC)),
        ("2020-01-01T00:00:00,25Z", datetime.datetime(2020, 1, 1, 0, 0, 0, 250000, UTC)),
        (
            "2020-01-01T00:00:00.123456789Z",
            datetime.datetime(2020, 1, 1, 0, 0, 0, 123456, UTC),
        ),
        ("2020-01-01T01:00:00+0100", datetime.datetime(2020, 1, 1, tzinfo=UTC)),
        ("2020-01-01T01:30-0030", datetime.datetime(2020, 1, 1, 2, tzinfo=UTC)),
        ("2020-01-01 10:00", datetime.datetime(2020, 1, 1, 10)),
    ],
)
def test_parse_iso_date_accepts_every_matched_form(text, expected):
    assert parse_iso_date(text) == expected


def test_fraction_lengths_compare_equal():
    assert compare("=", "2020-01-01T00:00:00.5Z", "2020-01-01T00:00:00.500Z") is True


@pytest.mark.parametrize("text", ["not a date", "2020-13-01", "2020", "10:00", ""])
def test_parse_iso_date_rejects_other_strings(text):
    assert parse_iso_date(text) is None


def test_coerce_to_iso():
    assert coerce_to_iso(0) == "1970-01-01T00:00:00.000Z"
    assert coerce_to_iso("2020-01-02T00:00:00+01:00") == "2020-01-01T23:00:00.000Z"
    assert coerce_to_iso(datetime.date(2020, 1, 2)) == "2020-01-02T00:00:00.000Z"
    assert coerce_to_iso("someday") is None
    assert coerce_to_iso({}) is None


# -- Pipeline steps ----------------------------------------------------------


def test_blank_missing():
    assert blank_missing(None, 1) == ("", 1)


def test_lower_strings_only_lowers_string_pairs():
    assert lower_strings("Foo", "BAR") == ("foo", "bar")
    assert lower_strings("Foo", 1) == ("Foo", 1)


def test_dates_to_epoch_requires_two_dates():
    a = datetime.date(1970, 1, 2)
    assert dates_to_epoch(a, a) == (86_400_000, 86_400_000)
    assert dates_to_epoch(a, "1970-01-02") is None


def test_align_mixed_reads_strings_as_numbers():
    assert align_mixed(5, "5") == (5, 5)
    assert align_mixed("", 3) == (0, 3)
    left, right = align_mixed(5, "abc")
    assert left == 5
    assert math.isnan(right)


# -- Full pipeline -----------------------------------------------------------


def test_normalize_comparison_is_case_insensitive():
    assert normalize_comparison("Kermit", "KERMIT") == ("kermit", "kermit")


def test_normalize_comparison_blanks_none():
    assert normalize_comparison(None, None) == ("", "")


def test_normalize_comparison_date_against_iso_string():
    left, right = normalize_comparison(
        datetime.datetime(2020, 1, 2, tzinfo=UTC), "2020-01-02T00:00:00.000Z"
    )
    assert left == right


def test_normalize_comparison_stringifies_booleans():
    assert normalize_comparison(True, "true") == ("true", "true")
