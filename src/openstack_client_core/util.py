"""Small helpers shared by the marshaler, the results decoder and the client."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime
from enum import Enum

logger = logging.getLogger(__name__)


class TimeFormat(str, Enum):
    """Time encodings found in OpenStack request and response documents.

    | Format | Example |
    |--------|---------|
    | `RFC3339` | `2018-01-04T10:00:12Z` |
    | `RFC3339_MILLI` | `2018-01-04T10:00:12.123456Z` |
    | `RFC3339_MILLI_NO_Z` | `2018-01-04T10:00:12.123456` |
    | `RFC3339_NO_Z` | `2018-01-04T10:00:12` |
    | `RFC3339_Z_NO_T` | `2018-01-04 10:00:12+00:00` |
    | `RFC3339_Z_NO_T_NO_Z` | `2018-01-04 10:00:12` |
    | `RFC1123` | `Thu, 04 Jan 2018 10:00:12 GMT` |
    | `UNIX` | `1515060012` |

    Values without a zone are read as UTC.
    """

    RFC3339 = "rfc3339"
    RFC3339_MILLI = "rfc3339-milli"
    RFC3339_MILLI_NO_Z = "rfc3339-milli-no-z"
    RFC3339_NO_Z = "rfc3339-no-z"
    RFC3339_Z_NO_T = "rfc3339-z-no-t"
    RFC3339_Z_NO_T_NO_Z = "rfc3339-z-no-t-no-z"
    RFC1123 = "rfc1123"
    UNIX = "unix"


_STRFTIME = {
    TimeFormat.RFC3339_MILLI_NO_Z: "%Y-%m-%dT%H:%M:%S.%f",
    TimeFormat.RFC3339_NO_Z: "%Y-%m-%dT%H:%M:%S",
    TimeFormat.RFC3339_Z_NO_T_NO_Z: "%Y-%m-%d %H:%M:%S",
}


def parse_time(value: str | int | float, fmt: TimeFormat = TimeFormat.RFC3339) -> datetime:
    """Parse an OpenStack time value into an aware datetime.

    Raises:
        ValueError: if the value does not match the format
    """
    fmt = TimeFormat(fmt)
    if fmt is TimeFormat.UNIX:
        return datetime.fromtimestamp(float(value), tz=UTC)
    if not isinstance(value, str):
        raise ValueError(f"Expected a string time value, got {type(value).__name__}")
    if fmt is TimeFormat.RFC1123:
        return parsedate_to_datetime(value)

    # fromisoformat covers the T and space separated forms, with or without zone
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_time(value: datetime, fmt: TimeFormat = TimeFormat.RFC3339) -> str:
    """Format a datetime using one of the OpenStack time encodings."""
    fmt = TimeFormat(fmt)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)

    if fmt is TimeFormat.UNIX:
        return str(int(value.timestamp()))
    if fmt is TimeFormat.RFC1123:
        return format_datetime(value.astimezone(UTC), usegmt=True)
    if fmt in _STRFTIME:
        return value.astimezone(UTC).strftime(_STRFTIME[fmt])

    timespec = "microseconds" if fmt is TimeFormat.RFC3339_MILLI else "seconds"
    sep = " " if fmt is TimeFormat.RFC3339_Z_NO_T else "T"
    text = value.isoformat(sep=sep, timespec=timespec)
    if text.endswith("+00:00") and fmt is not TimeFormat.RFC3339_Z_NO_T:
        text = text[: -len("+00:00")] + "Z"
    return text


def normalize_url(url: str) -> str:
    """Ensure that the endpoint URL has a trailing slash."""
    if not url.endswith("/"):
        return url + "/"
    return url


async def wait_for(
    predicate: Callable[[], bool | Awaitable[bool]],
    *,
    interval: float = 1.0,
    timeout: float | None = None,
) -> None:
    """Poll ``predicate`` until it returns a truthy value.

    The predicate may be a plain function or a coroutine function. Exceptions
    raised by the predicate stop the wait and propagate.

    Args:
        predicate: Callable checked once per interval
        interval: Seconds between checks
        timeout: Give up after this many seconds (None waits forever)

    Raises:
        TimeoutError: if the predicate is still false after ``timeout``
    """
    async with asyncio.timeout(timeout):
        attempt = 0
        while True:
            attempt += 1
            result = predicate()
            if inspect.isawaitable(result):
                result = await result
            if result:
                return
            logger.debug(f"Condition not met after {attempt} check(s), sleeping {interval}s")
            await asyncio.sleep(interval)
