from formatting import format_int, format_one_decimal, format_timestamp, format_year, round_half_up


def test_format_one_decimal():
    assert format_one_decimal(None) == "0"
    assert format_one_decimal(0) == "0"
    assert format_one_decimal(float("nan")) == "0"
    assert format_one_decimal(2) == "2.0"
    assert format_one_decimal(1.66) == "1.7"
    assert format_one_decimal(2.25) == "2.3"
    assert format_one_decimal(0.05) == "0.1"


def test_round_half_up():
    assert round_half_up(2.25) == 2.3
    assert round_half_up(2.35) == 2.4
    assert round_half_up(2.24) == 2.2
    assert round_half_up(1.005, 2) == 1.01


def test_format_int_and_year():
    assert format_int(None) == ""
    assert format_int("3") == "3"
    assert format_int(3.0) == "3"
    assert format_int("abc") == "abc"
    assert format_year(2) == "Year 2"
    assert format_year(None) == ""


def test_format_timestamp():
    assert format_timestamp("2024-01-15T09:05:00") == "2024-01-15 09:05"
    assert format_timestamp("2024-01-15T09:05:00.123456") == "2024-01-15 09:05"
    assert format_timestamp("") == ""
    assert format_timestamp(None) == ""
    assert format_timestamp("not a date") == ""
