"""Tests for time encodings, URL helpers and wait_for."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from openstack_client_core.util import TimeFormat, format_time, normalize_url, parse_time, wait_for

MOMENT = datetime(2018, 1, 4, 10, 0, 12, tzinfo=UTC)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("fmt", "text"),
    [
        (TimeFormat.RFC3339, "2018-01-04T10:00:12Z"),
        (TimeFormat.RFC3339_MILLI, "2018-01-04T10:00:12.000000Z"),
        (TimeFormat.RFC3339_MILLI_NO_Z, "2018-01-04T10:00:12.000000"),
        (TimeFormat.RFC3339_NO_Z, "2018-01-04T10:00:12"),
        (TimeFormat.RFC3339_Z_NO_T, "2018-01-04 10:00:12+00:00"),
        (TimeFormat.RFC3339_Z_NO_T_NO_Z, "2018-01-04 10:00:12"),
        (TimeFormat.RFC1123, "Thu, 04 Jan 2018 10:00:12 GMT"),
        (TimeFormat.UNIX, "1515060012"),
    ],
)
def test_time_formats(fmt, text):
    assert format_time(MOMENT, fmt) == text
    assert parse_time(text, fmt) == MOMENT


@pytest.mark.unit
def test_parse_time_keeps_offset():
    parsed = parse_time("2018-01-04T12:00:12+02:00")

    assert parsed.utcoffset() == timedelta(hours=2)
    assert parsed == MOMENT


@pytest.mark.unit
def test_format_time_naive_is_utc():
    assert format_time(datetime(2018, 1, 4, 10, 0, 12)) == "2018-01-04T10:00:12Z"


@pytest.mark.unit
def test_format_time_other_zone():
    value = MOMENT.astimezone(timezone(timedelta(hours=-5)))

    assert format_time(value) == "2018-01-04T05:00:12-05:00"


@pytest.mark.unit
def test_parse_time_rejects_garbage():
    with pytest.raises(ValueError):
        parse_time("not a time")


@pytest.mark.unit
def test_normalize_url():
    assert normalize_url("http://example.com/v2.1") == "http://example.com/v2.1/"
    assert normalize_url("http://example.com/v2.1/") == "http://example.com/v2.1/"


@pytest.mark.unit
async def test_wait_for_sync_predicate():
    calls = 0

    def ready():
        nonlocal calls
        calls += 1
        return calls >= 3

    await wait_for(ready, interval=0)

    assert calls == 3


@pytest.mark.unit
async def test_wait_for_async_predicate():
    async def ready():
        return True

    await wait_for(ready, interval=0)


@pytest.mark.unit
async def test_wait_for_timeout():
    with pytest.raises(TimeoutError):
        await wait_for(lambda: False, interval=0.01, timeout=0.05)


@pytest.mark.unit
async def test_wait_for_propagates_predicate_errors():
    def broken():
        raise RuntimeError("status ERROR")

    with pytest.raises(RuntimeError, match="status ERROR"):
        await wait_for(broken, interval=0)
