from datetime import timedelta

import pytest

from flagtree.flags.coercion import (
    coerce_bool,
    coerce_datetime,
    coerce_duration,
    coerce_int,
    coerce_size,
    format_duration,
    format_size,
    split_items,
)


def test_coerce_bool_is_strict():
    assert coerce_bool("TRUE") is True
    assert coerce_bool("off") is False
    assert coerce_bool("") is True
    with pytest.raises(ValueError):
        coerce_bool("2")


def test_coerce_int_range():
    assert coerce_int("10", 0, 10) == 10
    with pytest.raises(ValueError, match="out of range"):
        coerce_int("11", 0, 10)


def test_duration_allows_signs_and_micro_sign():
    assert coerce_duration("+1s") == timedelta(seconds=1)
    assert coerce_duration("-0") == timedelta(0)
    assert coerce_duration("3µs") == timedelta(microseconds=3)
    assert coerce_duration(".5h") == timedelta(minutes=30)


@pytest.mark.parametrize(
    "value, expected",
    [
        (timedelta(0), "0s"),
        (timedelta(hours=1, minutes=30), "1h30m"),
        (timedelta(seconds=45), "45s"),
        (timedelta(milliseconds=250), "250ms"),
        (timedelta(minutes=-2), "-2m"),
        (timedelta(hours=26), "26h"),
    ],
)
def test_format_duration(value, expected):
    assert format_duration(value) == expected


def test_size_units_are_case_insensitive():
    assert coerce_size("1kib") == coerce_size("1KiB") == 1024
    assert coerce_size("1Kb") == 1000
    assert coerce_size(".5k") == 512


def test_size_keeps_large_byte_counts_exact():
    assert coerce_size("9007199254740993") == 9007199254740993
    assert coerce_size("9007199254740993B") == 9007199254740993
    assert coerce_size("0.1KiB") == 102


def test_format_size():
    assert format_size(0) == "0B"
    assert format_size(1000) == "1000B"
    assert format_size(1024) == "1KiB"
    assert format_size(3 * 1024**3) == "3GiB"


def test_coerce_datetime_wraps_parser_errors():
    with pytest.raises(ValueError, match="invalid time"):
        coerce_datetime("definitely not a date")


def test_split_items():
    assert split_items(" a ,, b ,") == ["a", "b"]
    assert split_items("") == []
    assert split_items("x|y", "|") == ["x", "y"]
