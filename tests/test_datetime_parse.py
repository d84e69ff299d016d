import pytest

from lnxcore.datetime_parse import (
    CastError,
    DateTimeFormat,
    DateTimeParser,
    TimestampResolution,
)
from lnxcore.value import DateTime, Value, ValueKind

EXPECTED = DateTime.from_micros(1033570800000000)
I64_MAX = 2**63 - 1


def test_rfc3339_parse():
    parser = DateTimeParser().with_format(DateTimeFormat.rfc3339())
    assert parser.try_parse_str("2002-10-02T15:00:00Z") == EXPECTED


def test_second_format_used_when_first_fails():
    parser = (
        DateTimeParser()
        .with_format(DateTimeFormat.rfc2822())
        .with_format(DateTimeFormat.rfc3339())
    )
    assert parser.try_parse_str("2002-10-02T15:00:00Z") == EXPECTED


def test_no_matching_format_message():
    parser = DateTimeParser().with_format(DateTimeFormat.rfc3339())
    with pytest.raises(CastError) as info:
        parser.try_parse_str("hello, world!")
    assert str(info.value) == (
        "Cannot cast `string` to `datetime` as it does not match any provided formats: [rfc3339]"
    )


def test_rfc3339_offset_is_same_instant():
    fmt = DateTimeFormat.rfc3339()
    assert fmt.parse("2002-10-02T17:00:00+02:00") == fmt.parse("2002-10-02T15:00:00Z")


def test_rfc3339_fraction_adds_microseconds():
    fmt = DateTimeFormat.rfc3339()
    whole = fmt.parse("2002-10-02T15:00:00Z")
    frac = fmt.parse("2002-10-02T15:00:00.123456789Z")
    assert frac.micros - whole.micros == 123456


@pytest.mark.parametrize(
    "text", ["2002-13-02T15:00:00Z", "2002-10-02T25:00:00Z", "2002-10-02 15:00", ""]
)
def test_rfc3339_rejects_invalid(text):
    with pytest.raises(ValueError):
        DateTimeFormat.rfc3339().parse(text)


def test_rfc2822_matches_rfc3339():
    assert DateTimeFormat.rfc2822().parse("Wed, 02 Oct 2002 15:00:00 +0000") == EXPECTED
    assert DateTimeFormat.rfc2822().parse("02 Oct 2002 15:00:00 GMT") == EXPECTED


def test_rfc2822_rejects_wrong_weekday():
    with pytest.raises(ValueError):
        DateTimeFormat.rfc2822().parse("Mon, 02 Oct 2002 15:00:00 +0000")


def test_custom_format():
    fmt = DateTimeFormat.custom("%Y-%m-%d %H:%M:%S %z")
    assert fmt.parse("2002-10-02 15:00:00 +0000") == EXPECTED
    assert str(fmt) == 'custom<"%Y-%m-%d %H:%M:%S %z">'


def test_custom_format_requires_offset():
    with pytest.raises(ValueError):
        DateTimeFormat.custom("%Y-%m-%d").parse("2002-10-02")


def test_supported_formats():
    assert DateTimeParser().supported_formats() == ""
    parser = (
        DateTimeParser()
        .with_timestamp_resolution(TimestampResolution.MILLIS)
        .with_format(DateTimeFormat.rfc3339())
    )
    parser.add_format(DateTimeFormat.rfc2822())
    assert parser.supported_formats() == "unix_millis,rfc3339,rfc2822"


@pytest.mark.parametrize(
    "resolution, builder",
    [
        (TimestampResolution.SECONDS, DateTime.from_secs),
        (TimestampResolution.MILLIS, DateTime.from_millis),
        (TimestampResolution.MICROS, DateTime.from_micros),
    ],
)
def test_resolution_cast(resolution, builder):
    assert resolution.cast(2235) == builder(2235)


def test_convert_timestamp_without_resolution():
    with pytest.raises(CastError) as info:
        DateTimeParser().try_convert_timestamp(0)
    assert "no timestamp resolution was provided" in str(info.value)


def test_convert_timestamp_out_of_range():
    parser = DateTimeParser().with_timestamp_resolution(TimestampResolution.MILLIS)
    with pytest.raises(CastError) as info:
        parser.try_convert_timestamp(I64_MAX)
    assert str(info.value) == (
        "Cannot cast timestamp to `datetime` as it goes beyond the bounds of the supported `datetime` range"
    )


def test_try_parse_value():
    parser = (
        DateTimeParser()
        .with_timestamp_resolution(TimestampResolution.SECONDS)
        .with_format(DateTimeFormat.rfc3339())
    )
    assert parser.try_parse_value(Value(ValueKind.I64, 0)) == DateTime.from_secs(0)
    assert parser.try_parse_value(Value(ValueKind.STR, "2002-10-02T15:00:00Z")) == EXPECTED
    with pytest.raises(CastError) as info:
        parser.try_parse_value(Value(ValueKind.U64, 5))
    assert str(info.value) == "Cannot cast `u64` to `datetime`"