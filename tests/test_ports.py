import pytest

from portscanner.ports import parse_port_range, port_span


@pytest.mark.parametrize("text, expected", [
    ("1-1024", (1, 1024)),
    ("80-80", (80, 80)),
    ("20-443", (20, 443)),
    ("1-65535", (1, 65535)),
])
def test_valid_ranges_are_returned_as_is(text, expected):
    assert parse_port_range(text) == expected


@pytest.mark.parametrize("text", [
    "abc", "", "-", "x-y", "70000-80000",
    " 22 - 25 ", " 80 - 90 ", "1_000-2_000", "\u0668\u0660-\u0669\u0660",
])
def test_malformed_range_falls_back_to_full_space(text):
    assert parse_port_range(text) == (1, 65535)


def test_each_segment_defaults_on_its_own():
    assert parse_port_range("8000") == (8000, 65535)
    assert parse_port_range("-100") == (1, 100)
    assert parse_port_range("abc-100") == (1, 100)
    assert parse_port_range("100-abc") == (100, 65535)
    assert parse_port_range("10-20-30") == (10, 20)


def test_none_does_not_raise():
    assert parse_port_range(None) == (1, 65535)


def test_inverted_range_is_kept_and_spans_nothing():
    start, end = parse_port_range("100-10")
    assert (start, end) == (100, 10)
    assert list(port_span(start, end)) == []


def test_span_is_inclusive():
    assert list(port_span(5, 8)) == [5, 6, 7, 8]


def test_plus_sign_and_leading_zeros_are_plain_numbers():
    assert parse_port_range("+80-0443") == (80, 443)


def test_whitespace_inside_one_segment_only_defaults_that_segment():
    assert parse_port_range("80- 90") == (80, 65535)
    assert parse_port_range("80 -90") == (1, 90)
