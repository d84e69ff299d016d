from ipaddress import IPv4Address, IPv6Address

import pytest

from lnxcore.value import DateTime, Facet, Value, ValueKind

I64_MAX = 2**63 - 1
I64_MIN = -(2**63)


def test_datetime_from_secs_renders_rfc3339():
    assert DateTime.from_secs(2452352325).format_rfc3339() == "2047-09-17T16:58:45Z"


def test_datetime_from_micros_renders_rfc3339():
    assert DateTime.from_micros(1033570800000000).format_rfc3339() == "2002-10-02T15:00:00Z"


def test_epoch_renders():
    assert DateTime.from_secs(0).format_rfc3339() == "1970-01-01T00:00:00Z"


def test_fraction_is_trimmed():
    assert DateTime.from_micros(1_500_000).format_rfc3339() == "1970-01-01T00:00:01.5Z"


@pytest.mark.parametrize("micros", [I64_MAX, I64_MIN])
def test_extreme_datetimes_cannot_be_formatted(micros):
    with pytest.raises(ValueError) as info:
        DateTime.from_micros(micros).format_rfc3339()
    assert str(info.value) == (
        "Cannot format datetime as is beyond what the format supports rendering"
    )


def test_resolutions_agree():
    assert DateTime.from_secs(2235) == DateTime.from_millis(2235 * 1000)
    assert DateTime.from_millis(2235) == DateTime.from_micros(2235 * 1000)


def test_out_of_range_timestamps_give_none():
    assert DateTime.from_millis(I64_MAX) is None
    assert DateTime.from_secs(I64_MIN) is None
    assert DateTime.from_micros(I64_MAX + 1) is None
    assert DateTime.from_micros(I64_MAX).micros == I64_MAX


def test_datetime_ordering():
    assert DateTime.from_secs(1) < DateTime.from_secs(2)


def test_facet_string_form():
    facet = Facet("/hello/world/foo")
    assert str(facet) == "/hello/world/foo"
    assert facet == Facet("/hello/world/foo")


@pytest.mark.parametrize(
    "kind, data, name",
    [
        (ValueKind.NULL, None, "null"),
        (ValueKind.STR, "x", "string"),
        (ValueKind.U64, 1, "u64"),
        (ValueKind.I64, -1, "i64"),
        (ValueKind.F64, 1.5, "f64"),
        (ValueKind.BOOL, True, "bool"),
        (ValueKind.FACET, Facet("/a"), "facet"),
        (ValueKind.DATETIME, DateTime(0), "datetime"),
        (ValueKind.IP, IPv6Address("::1"), "ip"),
        (ValueKind.BYTES, b"ab", "bytes"),
    ],
)
def test_type_names(kind, data, name):
    assert Value(kind, data).type_name() == name


def test_array_is_stored_as_tuple():
    elements = [Value(ValueKind.U64, 1), Value(ValueKind.U64, 2)]
    value = Value(ValueKind.ARRAY, elements)
    assert value.data == tuple(elements)
    assert value == Value(ValueKind.ARRAY, tuple(elements))


def test_object_from_mapping_keeps_order():
    inner = Value(ValueKind.STR, "world")
    value = Value(ValueKind.OBJECT, {"hello": inner, "n": Value(ValueKind.NULL)})
    assert [key for key, _ in value.data] == ["hello", "n"]
    assert value.data[0][1] == inner


def test_facet_accepts_plain_string():
    assert Value(ValueKind.FACET, "/a/b").data == Facet("/a/b")


def test_bytearray_normalised_to_bytes():
    assert Value(ValueKind.BYTES, bytearray(b"ab")) == Value(ValueKind.BYTES, b"ab")


@pytest.mark.parametrize(
    "kind, data",
    [
        (ValueKind.U64, -1),
        (ValueKind.U64, 2**64),
        (ValueKind.I64, I64_MAX + 1),
        (ValueKind.I64, I64_MIN - 1),
    ],
)
def test_out_of_range_integers_rejected(kind, data):
    with pytest.raises(ValueError):
        Value(kind, data)


@pytest.mark.parametrize(
    "kind, data",
    [
        (ValueKind.NULL, 1),
        (ValueKind.STR, 1),
        (ValueKind.U64, True),
        (ValueKind.BOOL, 1),
        (ValueKind.IP, IPv4Address("192.168.0.1")),
        (ValueKind.ARRAY, [1, 2]),
        (ValueKind.OBJECT, [("k", 1)]),
    ],
)
def test_wrong_data_types_rejected(kind, data):
    with pytest.raises(TypeError):
        Value(kind, data)