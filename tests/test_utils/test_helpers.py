from datetime import datetime, timedelta, timezone

import pytest

from responselog.utils.helpers import (
    format_rfc3339,
    merge_dicts,
    parse_rfc3339,
    strip_control_chars,
)


class TestTimestamps:
    """Test RFC 3339 parsing and formatting"""

    def test_parse_utc(self):
        assert parse_rfc3339("2024-02-14T15:48:31Z") == datetime(
            2024, 2, 14, 15, 48, 31, tzinfo=timezone.utc
        )

    def test_parse_offset(self):
        parsed = parse_rfc3339("2024-02-14T15:48:31-05:00")
        assert parsed.utcoffset() == timedelta(hours=-5)

    def test_parse_fraction_padding(self):
        assert parse_rfc3339("2024-02-14T15:48:31.5Z").microsecond == 500000
        assert parse_rfc3339("2024-02-14T15:48:31.123456789Z").microsecond == 123456

    @pytest.mark.parametrize(
        "value",
        ["", "2024-02-14", "2024-02-14T15:48:31", "2024-02-14T15:48:31.Z", "not a time"],
    )
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            parse_rfc3339(value)

    def test_format_converts_to_utc(self):
        dt = datetime(2024, 2, 14, 17, 48, 31, 999999, tzinfo=timezone(timedelta(hours=2)))
        assert format_rfc3339(dt) == "2024-02-14T15:48:31Z"

    def test_format_naive_treated_as_utc(self):
        assert format_rfc3339(datetime(2024, 1, 1)) == "2024-01-01T00:00:00Z"


def test_merge_dicts_is_deep():
    merged = merge_dicts({"a": {"b": 1, "c": 2}, "d": 3}, {"a": {"b": 10}, "e": 4})
    assert merged == {"a": {"b": 10, "c": 2}, "d": 3, "e": 4}


def test_strip_control_chars():
    assert strip_control_chars("/a\n/b\t\x00c") == "/a/bc"
    assert strip_control_chars("/café") == "/café"
