"""Tests for timestamp normalization."""

import pytest
from datetime import date, datetime, timezone
from freezegun import freeze_time

from planner.utils.timestamps import (
    TimestampShape,
    classify_timestamp,
    local_day,
    parse_timestamp,
    to_datetime,
    to_epoch_millis,
)

JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
JAN_1_SECONDS = 1704067200


class SdkTimestamp:
    """Stands in for a client SDK timestamp that also exposes ``seconds``."""

    seconds = 0

    def to_datetime(self):
        return JAN_1


class ProtoTimestamp:
    def __init__(self, seconds, nanoseconds=0):
        self.seconds = seconds
        self.nanoseconds = nanoseconds


@pytest.mark.unit
@pytest.mark.parametrize("value, shape", [
    (None, TimestampShape.ABSENT),
    ("", TimestampShape.ABSENT),
    (JAN_1, TimestampShape.DATETIME),
    (date(2024, 1, 1), TimestampShape.DATE),
    (SdkTimestamp(), TimestampShape.CONVERTIBLE),
    ({"seconds": 1, "nanoseconds": 0}, TimestampShape.SECONDS),
    ({"_seconds": 1, "_nanoseconds": 0}, TimestampShape.UNDERSCORE_SECONDS),
    ("2024-01-01T00:00:00Z", TimestampShape.STRING),
    (1704067200000, TimestampShape.EPOCH_MILLIS),
    ({"foo": "bar"}, TimestampShape.UNKNOWN),
    (True, TimestampShape.UNKNOWN),
])
def test_classify_timestamp(value, shape):
    """Test every supported shape is recognized."""
    assert classify_timestamp(value) == shape


@pytest.mark.unit
def test_conversion_method_checked_before_seconds():
    """Test an SDK object with both a conversion method and seconds uses the method."""
    assert parse_timestamp(SdkTimestamp()) == JAN_1


@pytest.mark.unit
def test_seconds_checked_before_underscore_seconds():
    """Test a map carrying both conventions prefers ``seconds``."""
    value = {"seconds": JAN_1_SECONDS, "_seconds": 0}
    assert parse_timestamp(value) == JAN_1


@pytest.mark.unit
@pytest.mark.parametrize("value", [
    {"seconds": JAN_1_SECONDS, "nanoseconds": 0},
    {"_seconds": JAN_1_SECONDS, "_nanoseconds": 0},
    ProtoTimestamp(JAN_1_SECONDS),
    "2024-01-01T00:00:00Z",
    "2024-01-01T00:00:00+00:00",
    JAN_1_SECONDS * 1000,
    JAN_1,
])
def test_parse_timestamp_shapes_agree(value):
    """Test all shapes of the same instant convert to the same datetime."""
    assert parse_timestamp(value) == JAN_1


@pytest.mark.unit
def test_parse_timestamp_keeps_nanoseconds_as_microseconds():
    parsed = parse_timestamp({"seconds": JAN_1_SECONDS, "nanoseconds": 500_000_000})
    assert parsed == JAN_1.replace(microsecond=500_000)


@pytest.mark.unit
def test_naive_values_are_local_time():
    """Test naive inputs come back timezone-aware."""
    parsed = parse_timestamp(datetime(2024, 6, 15, 23, 59, 59))
    assert parsed.tzinfo is not None
    assert local_day(parsed) == date(2024, 6, 15)


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "not a date", {"foo": 1}, {"seconds": "abc"}, object()])
def test_parse_timestamp_never_raises(value):
    assert parse_timestamp(value) is None


@pytest.mark.unit
@freeze_time("2024-06-15 12:00:00")
def test_to_datetime_falls_back_to_now(caplog):
    """Test unparsable input yields now plus a warning."""
    with caplog.at_level("WARNING"):
        result = to_datetime("garbage")

    assert result == datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
    assert "falling back to now" in caplog.text


@pytest.mark.unit
def test_to_epoch_millis():
    assert to_epoch_millis({"_seconds": JAN_1_SECONDS}) == JAN_1_SECONDS * 1000
    assert to_epoch_millis("nope") == 0
    assert to_epoch_millis(None) == 0


@pytest.mark.unit
def test_local_day_for_date_only_string():
    assert local_day("2024-06-15") == date(2024, 6, 15)
    assert local_day(None) is None
