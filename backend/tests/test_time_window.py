"""
Tests for timestamp parsing and time-window checks
"""
import pytest

from errors import AppError, ErrCode
from time_window import assert_valid_window, is_in_range, parse_timestamp


class TestParseTimestamp:

    def test_zulu_and_offset_are_the_same_instant(self):
        assert parse_timestamp("2024-03-01T10:00:00Z") == parse_timestamp("2024-03-01T12:00:00+02:00")

    def test_naive_timestamp_is_utc(self):
        assert parse_timestamp("2024-03-01T10:00:00") == parse_timestamp("2024-03-01T10:00:00Z")

    @pytest.mark.parametrize("value", ["not-a-date", "", None, "2024-13-01T00:00:00Z"])
    def test_unparsable_returns_none(self, value):
        assert parse_timestamp(value) is None


class TestIsInRange:
    """Closed window [from, to]"""

    def test_inclusive_at_both_bounds(self):
        """Readings exactly at from or to are included"""
        assert is_in_range("2024-03-01T00:00:00Z", "2024-03-01T00:00:00Z", "2024-03-01T23:59:59Z")
        assert is_in_range("2024-03-01T23:59:59Z", "2024-03-01T00:00:00Z", "2024-03-01T23:59:59Z")

    def test_outside_window(self):
        assert not is_in_range("2024-02-29T23:59:59Z", "2024-03-01T00:00:00Z", "2024-03-01T23:59:59Z")
        assert not is_in_range("2024-03-02T00:00:00Z", "2024-03-01T00:00:00Z", "2024-03-01T23:59:59Z")

    def test_open_bounds(self):
        """Missing bounds do not restrict"""
        assert is_in_range("1999-01-01T00:00:00Z")
        assert is_in_range("1999-01-01T00:00:00Z", to="2024-01-01T00:00:00Z")
        assert not is_in_range("1999-01-01T00:00:00Z", from_="2024-01-01T00:00:00Z")

    def test_unparsable_timestamp_is_excluded(self):
        assert not is_in_range("not-a-date")
        assert not is_in_range("not-a-date", "2024-03-01T00:00:00Z", "2024-03-01T23:59:59Z")


class TestAssertValidWindow:

    def test_missing_bound_is_noop(self):
        assert_valid_window(None, "2024-03-01T00:00:00Z")
        assert_valid_window("garbage", None)

    def test_equal_bounds_are_valid(self):
        assert_valid_window("2024-03-01T10:00:00Z", "2024-03-01T10:00:00Z")

    def test_inverted_window_raises(self):
        with pytest.raises(AppError) as excinfo:
            assert_valid_window("2024-03-02T00:00:00Z", "2024-03-01T00:00:00Z")
        assert excinfo.value.code == ErrCode.INVALID_TIME_WINDOW
        assert excinfo.value.status == 400
        assert excinfo.value.context == {"from": "2024-03-02T00:00:00Z", "to": "2024-03-01T00:00:00Z"}

    @pytest.mark.parametrize("from_, to", [
        ("yesterday", "2024-03-01T00:00:00Z"),
        ("2024-03-01T00:00:00Z", "tomorrow"),
    ])
    def test_malformed_bound_raises(self, from_, to):
        with pytest.raises(AppError) as excinfo:
            assert_valid_window(from_, to)
        assert excinfo.value.code == ErrCode.INVALID_TIME_WINDOW
