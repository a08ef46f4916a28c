"""Date, interval and duration parsing for GitLab issue queries."""

import calendar
import logging
import re
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

# Ordered calendar fields of a relative interval spec: Y/M/D h:m:s
_FIELD_NAMES = ("year", "month", "day", "hour", "minute", "second")

_FIELD_MINIMUM = {
    "year": 1,
    "month": 1,
    "day": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
}
_FIELD_MAXIMUM = {
    "year": 9999,
    "month": 12,
    "day": 31,
    "hour": 23,
    "minute": 59,
    "second": 59,
}

_TOKEN_RE = re.compile(r"^([+-]?)(\d+)$")

# Seconds per duration unit
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")


def parse_date_input(date_str: str) -> datetime:
    """Parse various date formats into datetime objects.

    Supports:
    - ISO dates: 2024-01-01, 2024-01-01T10:00:00Z
    - Common formats: January 1, 2024, Jan 1 2024

    Args:
        date_str: Date string to parse

    Returns:
        Parsed datetime object

    Raises:
        ValueError: If date format is not recognized
    """
    formats = [
        "%Y-%m-%d",  # 2024-01-01
        "%Y-%m-%dT%H:%M:%SZ",  # 2024-01-01T10:00:00Z
        "%Y-%m-%dT%H:%M:%S",  # 2024-01-01T10:00:00
        "%Y-%m-%d %H:%M:%S",  # 2024-01-01 10:00:00
        "%B %d, %Y",  # January 1, 2024
        "%b %d, %Y",  # Jan 1, 2024
        "%B %d %Y",  # January 1 2024
        "%b %d %Y",  # Jan 1 2024
        "%Y/%m/%d",  # 2024/01/01
        "%m/%d/%Y",  # 01/01/2024
    ]

    for fmt in formats:
        try:
            parsed = datetime.strptime(date_str.strip(), fmt)
        except ValueError:
            continue
        if fmt.endswith("Z"):
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    raise ValueError(
        f"Unable to parse date '{date_str}'. "
        f"Supported formats include: YYYY-MM-DD, YYYY-MM-DDTHH:MM:SSZ, "
        f"'January 1, 2024', 'Jan 1 2024', MM/DD/YYYY"
    )


def validate_date_range(start: datetime | None, end: datetime | None) -> None:
    """Validate date range logic.

    Args:
        start: Start date (optional)
        end: End date (optional)

    Raises:
        ValueError: If date range is invalid
    """
    if start is None and end is None:
        return

    if start is not None and end is not None:
        start, end = _align_timezones(start, end)

    if start is not None and end is not None and start >= end:
        raise ValueError(
            f"Start date ({start.strftime('%Y-%m-%d')}) must be before "
            f"end date ({end.strftime('%Y-%m-%d')})"
        )

    # Future dates are allowed, GitLab simply returns nothing for them
    now = datetime.now(timezone.utc if start is not None and start.tzinfo else None)
    if start is not None and start > now:
        logger.warning("Start date %s is in the future", start.strftime("%Y-%m-%d"))


def _align_timezones(first: datetime, second: datetime) -> tuple[datetime, datetime]:
    """Make a naive/aware pair comparable by reading the naive one as local time."""
    if first.tzinfo is None and second.tzinfo is not None:
        return first.astimezone(), second
    if first.tzinfo is not None and second.tzinfo is None:
        return first, second.astimezone()
    return first, second


def _parse_field_token(name: str, token: str) -> tuple[str, int] | None:
    """Parse one interval field into (mode, value).

    Mode is ``"abs"`` for a plain number and ``"rel"`` for a signed offset.
    An empty field returns None.
    """
    token = token.strip()
    if not token:
        return None
    match = _TOKEN_RE.match(token)
    if match is None:
        raise ValueError(f"Invalid {name} field '{token}' in interval")
    sign, digits = match.groups()
    if sign:
        return "rel", int(f"{sign}{digits}")
    value = int(digits)
    if not _FIELD_MINIMUM[name] <= value <= _FIELD_MAXIMUM[name]:
        raise ValueError(
            f"Invalid {name} {value} in interval, expected "
            f"{_FIELD_MINIMUM[name]}-{_FIELD_MAXIMUM[name]}"
        )
    return "abs", value


def _split_relative_spec(spec: str) -> list[tuple[str, int] | None]:
    parts = spec.strip().split(None, 1)
    date_part = parts[0] if parts else ""
    time_part = parts[1] if len(parts) > 1 else "::"

    date_fields = date_part.split("/")
    time_fields = time_part.split(":")
    if len(date_fields) != 3 or len(time_fields) != 3:
        raise ValueError(
            f"Invalid interval '{spec}'. Expected 'YYYY/MM/DD hh:mm:ss' where "
            f"each field is empty, a number or a signed offset (e.g. '/-1/ ::')"
        )
    tokens = date_fields + time_fields
    return [
        _parse_field_token(name, token)
        for name, token in zip(_FIELD_NAMES, tokens, strict=True)
    ]


def _resolve_relative_bound(
    fields: list[tuple[str, int] | None], now: datetime, end: bool
) -> datetime:
    """Resolve a relative interval spec to its first or last instant."""
    set_indexes = [i for i, field in enumerate(fields) if field is not None]
    last_set = set_indexes[-1] if set_indexes else 0

    def value_for(index: int, current: int, maximum: int) -> tuple[int, int]:
        """Return (base value, relative offset) for a field."""
        field = fields[index]
        if field is None:
            if index <= last_set:
                return current, 0
            return (maximum if end else _FIELD_MINIMUM[_FIELD_NAMES[index]]), 0
        mode, value = field
        if mode == "abs":
            return value, 0
        return current, value

    year, year_offset = value_for(0, now.year, now.year)
    year += year_offset

    month, month_offset = value_for(1, now.month, _FIELD_MAXIMUM["month"])
    months = year * 12 + (month - 1) + month_offset
    year, month = divmod(months, 12)
    month += 1

    days_in_month = calendar.monthrange(year, month)[1]
    day, day_offset = value_for(2, now.day, days_in_month)
    if day > days_in_month:
        if fields[2] is not None and fields[2][0] == "abs":
            raise ValueError(
                f"Invalid day {day} in interval, {year:04d}-{month:02d} "
                f"has {days_in_month} days"
            )
        day = days_in_month

    hour, hour_offset = value_for(3, now.hour, _FIELD_MAXIMUM["hour"])
    minute, minute_offset = value_for(4, now.minute, _FIELD_MAXIMUM["minute"])
    second, second_offset = value_for(5, now.second, _FIELD_MAXIMUM["second"])

    try:
        resolved = datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise ValueError(f"Invalid interval field value: {e}") from e

    return resolved + timedelta(
        days=day_offset,
        hours=hour_offset,
        minutes=minute_offset,
        seconds=second_offset,
    )


def _parse_absolute_interval(spec: str) -> tuple[datetime | None, datetime | None]:
    start_str, _, end_str = spec.partition("..")
    begin = None
    end = None

    if start_str.strip():
        try:
            begin = parse_date_input(start_str)
        except ValueError as e:
            raise ValueError(f"Invalid interval start: {e}") from e

    if end_str.strip():
        try:
            end = parse_date_input(end_str)
        except ValueError as e:
            raise ValueError(f"Invalid interval end: {e}") from e
        # A bare date as the end covers that whole day
        if end.time() == datetime.min.time() and ":" not in end_str:
            end = end + timedelta(days=1) - timedelta(seconds=1)

    if begin is None and end is None:
        raise ValueError(f"Invalid interval '{spec}': no start or end date given")

    validate_date_range(begin, end)
    return begin, end


def parse_interval(
    spec: str | None, now: datetime | None = None
) -> tuple[datetime | None, datetime | None]:
    """Parse an --interval value into a (begin, end) pair.

    Two syntaxes are accepted:

    - Relative calendar spec ``YYYY/MM/DD hh:mm:ss``. Every field is either
      empty, an absolute number or a signed offset from ``now``. Fields after
      the last one given are free: the begin takes their minimum and the end
      their maximum. ``/-1/ ::`` is the whole of last month, ``//-1`` is
      yesterday.
    - Absolute range ``START..END`` using any format of
      :func:`parse_date_input`. Either side may be omitted.

    Args:
        spec: Interval string, empty or None for no interval
        now: Reference time for relative specs (defaults to the current time)

    Returns:
        Tuple of (begin, end); both None when no interval was given

    Raises:
        ValueError: If the interval cannot be parsed
    """
    if spec is None or not spec.strip():
        return None, None

    if ".." in spec:
        return _parse_absolute_interval(spec)

    reference = (now or datetime.now()).replace(microsecond=0)
    fields = _split_relative_spec(spec)
    begin = _resolve_relative_bound(fields, reference, end=False)
    end = _resolve_relative_bound(fields, reference, end=True)
    logger.debug("Interval '%s' resolved to %s - %s", spec, begin, end)
    return begin, end


def parse_duration(value: str) -> timedelta:
    """Parse a Go-style duration string such as ``30s``, ``5m`` or ``1h30m``.

    A bare number is taken as seconds. A leading sign is honoured so that
    negative values reach validation instead of failing here.

    Raises:
        ValueError: If the value is not a valid duration
    """
    text = value.strip()
    if not text:
        raise ValueError("Duration must not be empty")

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    try:
        return sign * timedelta(seconds=float(text))
    except (ValueError, OverflowError):
        pass

    total_seconds = 0.0
    position = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != position:
            break
        amount, unit = match.groups()
        total_seconds += float(amount) * _DURATION_UNITS[unit]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(
            f"Invalid duration '{value}'. Use values like 300ms, 30s, 5m or 1h30m"
        )
    return sign * timedelta(seconds=total_seconds)


def format_duration(value: timedelta) -> str:
    """Format a timedelta compactly, e.g. ``2s`` or ``10m0s``."""
    seconds = value.total_seconds()
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    if seconds < 60:
        return f"{sign}{seconds:g}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{sign}{minutes}m{secs}s"


def format_datetime_for_gitlab(dt: datetime) -> str:
    """Format datetime as RFC 3339 for GitLab API query parameters.

    Naive datetimes are interpreted in the local timezone.

    Args:
        dt: Datetime to format

    Returns:
        RFC 3339 timestamp string, e.g. 2024-01-01T00:00:00+00:00
    """
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.isoformat(timespec="seconds")
