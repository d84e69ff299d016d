"""Parsing strings and unix timestamps into ``DateTime`` values."""

from __future__ import annotations

import datetime as _dt
import enum
import re
from typing import Optional

from lnxcore.value import DateTime, Value, ValueKind

_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)
_EPOCH_ORDINAL = _dt.date(1970, 1, 1).toordinal()

_RFC3339 = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})[Tt]"
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<zone>[Zz]|[+-]\d{2}:\d{2})$"
)

_RFC2822 = re.compile(
    r"^\s*(?:(?P<weekday>[A-Za-z]{3})\s*,\s*)?"
    r"(?P<day>\d{1,2})\s+(?P<month>[A-Za-z]{3})\s+(?P<year>\d{2,4})\s+"
    r"(?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?\s+"
    r"(?P<zone>[+-]\d{4}|[A-Za-z]{1,3})\s*$"
)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_NAMED_ZONES = {
    "UT": 0, "GMT": 0,
    "EST": -5, "EDT": -4,
    "CST": -6, "CDT": -5,
    "MST": -7, "MDT": -6,
    "PST": -8, "PDT": -7,
}


class CastError(ValueError):
    """A value could not be cast to the requested type."""


def _nanos_to_micros(nanos: int) -> int:
    micros = abs(nanos) // 1000
    return micros if nanos >= 0 else -micros


def _epoch_seconds(date: _dt.date, hour: int, minute: int, second: int,
                   offset_seconds: int) -> int:
    days = date.toordinal() - _EPOCH_ORDINAL
    return days * 86_400 + hour * 3_600 + minute * 60 + second - offset_seconds


def _check_clock(hour: int, minute: int, second: int) -> None:
    if hour > 23 or minute > 59 or second > 59:
        raise ValueError("time component out of range")


def _parse_rfc3339(s: str) -> DateTime:
    match = _RFC3339.match(s)
    if match is None:
        raise ValueError(f"{s!r} is not an RFC 3339 datetime")
    date = _dt.date(int(match["year"]), int(match["month"]), int(match["day"]))
    hour, minute, second = int(match["hour"]), int(match["minute"]), int(match["second"])
    _check_clock(hour, minute, second)

    zone = match["zone"]
    if zone in ("Z", "z"):
        offset = 0
    else:
        sign = -1 if zone[0] == "-" else 1
        off_h, off_m = int(zone[1:3]), int(zone[4:6])
        if off_h > 23 or off_m > 59:
            raise ValueError("offset out of range")
        offset = sign * (off_h * 3_600 + off_m * 60)

    fraction = (match["fraction"] or "")[:9].ljust(9, "0")
    seconds = _epoch_seconds(date, hour, minute, second, offset)
    return DateTime(_nanos_to_micros(seconds * 1_000_000_000 + int(fraction)))


def _rfc2822_year(text: str) -> int:
    year = int(text)
    if len(text) == 2:
        return year + (2000 if year < 50 else 1900)
    if len(text) == 3:
        return year + 1900
    if year < 1900:
        raise ValueError("RFC 2822 years must not be before 1900")
    return year


def _rfc2822_offset(zone: str) -> int:
    if zone[0] in "+-":
        off_h, off_m = int(zone[1:3]), int(zone[3:5])
        if off_h > 23 or off_m > 59:
            raise ValueError("offset out of range")
        sign = -1 if zone[0] == "-" else 1
        return sign * (off_h * 3_600 + off_m * 60)
    if zone in _NAMED_ZONES:
        return _NAMED_ZONES[zone] * 3_600
    if len(zone) == 1 and zone.isalpha() and zone not in "Jj":
        return 0
    raise ValueError(f"unknown zone {zone!r}")


def _parse_rfc2822(s: str) -> DateTime:
    match = _RFC2822.match(s)
    if match is None:
        raise ValueError(f"{s!r} is not an RFC 2822 datetime")
    if match["month"] not in _MONTHS:
        raise ValueError(f"unknown month {match['month']!r}")
    date = _dt.date(
        _rfc2822_year(match["year"]),
        _MONTHS.index(match["month"]) + 1,
        int(match["day"]),
    )
    weekday = match["weekday"]
    if weekday is not None and weekday != _WEEKDAYS[date.weekday()]:
        raise ValueError("weekday does not match the date")
    hour, minute = int(match["hour"]), int(match["minute"])
    second = int(match["second"] or 0)
    _check_clock(hour, minute, second)
    seconds = _epoch_seconds(date, hour, minute, second, _rfc2822_offset(match["zone"]))
    return DateTime(seconds * 1_000_000)


def _parse_custom(s: str, fmt: str) -> DateTime:
    parsed = _dt.datetime.strptime(s, fmt)
    if parsed.tzinfo is None:
        raise ValueError("the format does not provide a UTC offset")
    delta = parsed - _EPOCH
    return DateTime(
        (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    )


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class TimestampResolution(enum.Enum):
    """The unit that integer unix timestamps are given in."""

    SECONDS = "unix_seconds"
    MILLIS = "unix_millis"
    MICROS = "unix_micros"

    def __str__(self) -> str:
        return self.value

    def cast(self, ts: int) -> Optional[DateTime]:
        """Convert a timestamp in this unit, or ``None`` if out of range."""
        if self is TimestampResolution.SECONDS:
            return DateTime.from_secs(ts)
        if self is TimestampResolution.MILLIS:
            return DateTime.from_millis(ts)
        return DateTime.from_micros(ts)


class _FormatKind(enum.Enum):
    RFC2822 = "rfc2822"
    RFC3339 = "rfc3339"
    CUSTOM = "custom"


class DateTimeFormat:
    """A string format a datetime may be parsed from.

    Custom formats use ``strptime`` directives and must include a UTC offset.
    """

    def __init__(self, kind: _FormatKind, pattern: Optional[str] = None) -> None:
        self._kind = kind
        self._pattern = pattern

    @classmethod
    def rfc2822(cls) -> "DateTimeFormat":
        return cls(_FormatKind.RFC2822)

    @classmethod
    def rfc3339(cls) -> "DateTimeFormat":
        return cls(_FormatKind.RFC3339)

    @classmethod
    def custom(cls, fmt: str) -> "DateTimeFormat":
        return cls(_FormatKind.CUSTOM, fmt)

    def __str__(self) -> str:
        if self._kind is _FormatKind.CUSTOM:
            return f"custom<{_quoted(self._pattern)}>"
        return self._kind.value

    __repr__ = __str__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateTimeFormat):
            return NotImplemented
        return (self._kind, self._pattern) == (other._kind, other._pattern)

    def __hash__(self) -> int:
        return hash((self._kind, self._pattern))

    def parse(self, s: str) -> DateTime:
        """Parse ``s`` in this format; raises ``ValueError`` if it does not match."""
        if self._kind is _FormatKind.RFC2822:
            return _parse_rfc2822(s)
        if self._kind is _FormatKind.RFC3339:
            return _parse_rfc3339(s)
        return _parse_custom(s, self._pattern)


class DateTimeParser:
    """Parses strings and integer timestamps into datetimes."""

    def __init__(self) -> None:
        self.timestamp_resolution: Optional[TimestampResolution] = None
        self.string_formats: list[DateTimeFormat] = []

    def with_timestamp_resolution(self, resolution: TimestampResolution) -> "DateTimeParser":
        self.timestamp_resolution = resolution
        return self

    def with_format(self, fmt: DateTimeFormat) -> "DateTimeParser":
        self.string_formats.append(fmt)
        return self

    def add_format(self, fmt: DateTimeFormat) -> None:
        self.string_formats.append(fmt)

    def supported_formats(self) -> str:
        """A comma-separated description of every accepted input form."""
        elements = []
        if self.timestamp_resolution is not None:
            elements.append(str(self.timestamp_resolution))
        elements.extend(str(fmt) for fmt in self.string_formats)
        return ",".join(elements)

    def try_parse_value(self, value: Value) -> DateTime:
        """Parse a string or i64 value into a datetime."""
        if value.kind is ValueKind.STR:
            return self.try_parse_str(value.data)
        if value.kind is ValueKind.I64:
            return self.try_convert_timestamp(value.data)
        raise CastError(f"Cannot cast `{value.type_name()}` to `datetime`")

    def try_parse_str(self, s: str) -> DateTime:
        """Parse ``s`` with the first configured format that accepts it."""
        for fmt in self.string_formats:
            try:
                return fmt.parse(s)
            except ValueError:
                continue
        listed = ", ".join(str(fmt) for fmt in self.string_formats)
        raise CastError(
            "Cannot cast `string` to `datetime` as it does not match any "
            f"provided formats: [{listed}]"
        )

    def try_convert_timestamp(self, ts: int) -> DateTime:
        """Convert a unix timestamp using the configured resolution."""
        if self.timestamp_resolution is None:
            raise CastError(
                "Cannot cast timestamp to `datetime` as no timestamp resolution "
                "was provided by the schema"
            )
        dt = self.timestamp_resolution.cast(ts)
        if dt is None:
            raise CastError(
                "Cannot cast timestamp to `datetime` as it goes beyond the bounds "
                "of the supported `datetime` range"
            )
        return dt