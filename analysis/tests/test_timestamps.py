import pytest

from analysis.timestamps import format_timestamp, parse_timestamp


def test_parse_minutes_seconds():
    span = parse_timestamp("1:30")
    assert span.start == 90
    assert span.end is None
    assert not span.fallback


def test_parse_hours_minutes_seconds():
    assert parse_timestamp("1:02:03").start == 3723


def test_parse_range():
    span = parse_timestamp("0:12-0:18")
    assert span.start == 12
    assert span.end == 18


def test_parse_range_with_spaces_and_hours():
    span = parse_timestamp("0:59 - 1:00:05")
    assert span.start == 59
    assert span.end == 3605


def test_parse_fractional_seconds():
    assert parse_timestamp("1:02.5").start == pytest.approx(62.5)


@pytest.mark.parametrize("text", ["", "   ", "abc", "42", "1:2:3:4", "1:", "a:10"])
def test_unparseable_text_falls_back_to_zero(text):
    span = parse_timestamp(text)
    assert span.start == 0
    assert span.start_fallback
    assert span.fallback


def test_unparseable_range_end_is_marked():
    span = parse_timestamp("0:12-oops")
    assert span.start == 12
    assert span.end == 0
    assert span.end_fallback
    assert not span.start_fallback
    assert span.end_or(15.0) == 15.0


def test_end_or_prefers_explicit_end():
    assert parse_timestamp("0:12-0:18").end_or(99.0) == 18
    assert parse_timestamp("0:12").end_or(15.0) == 15.0


def test_format_timestamp():
    assert format_timestamp(0) == "0:00"
    assert format_timestamp(62.9) == "1:02"
    assert format_timestamp(3723) == "62:03"
    assert format_timestamp(-4) == "0:00"


@pytest.mark.parametrize("seconds", [0, 7, 90, 3723])
def test_format_then_parse_keeps_whole_seconds(seconds):
    assert parse_timestamp(format_timestamp(seconds)).start == seconds


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
def test_format_timestamp_non_finite_reads_as_zero(value):
    assert format_timestamp(value) == "0:00"
