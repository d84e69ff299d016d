"""Dynamic document values and the scalar types they carry."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from ipaddress import IPv6Address
from typing import Any, Optional

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _checked_micros(value: int, factor: int) -> Optional[int]:
    micros = value * factor
    if _I64_MIN <= micros <= _I64_MAX:
        return micros
    return None


@dataclass(frozen=True, order=True)
class DateTime:
    """A UTC timestamp with microsecond precision over the signed 64-bit range."""

    micros: int

    def __post_init__(self) -> None:
        if isinstance(self.micros, bool) or not isinstance(self.micros, int):
            raise TypeError("micros must be an integer")
        if not _I64_MIN <= self.micros <= _I64_MAX:
            raise ValueError("micros must fit in a signed 64-bit integer")

    @classmethod
    def from_secs(cls, secs: int) -> Optional["DateTime"]:
        """Build from unix seconds, or ``None`` if out of range."""
        micros = _checked_micros(secs, 1_000_000)
        return None if micros is None else cls(micros)

    @classmethod
    def from_millis(cls, millis: int) -> Optional["DateTime"]:
        """Build from unix milliseconds, or ``None`` if out of range."""
        micros = _checked_micros(millis, 1_000)
        return None if micros is None else cls(micros)

    @classmethod
    def from_micros(cls, micros: int) -> Optional["DateTime"]:
        """Build from unix microseconds, or ``None`` if out of range."""
        checked = _checked_micros(micros, 1)
        return None if checked is None else cls(checked)

    def format_rfc3339(self) -> str:
        """Render as an RFC 3339 string in UTC."""
        try:
            dt = _EPOCH + timedelta(microseconds=self.micros)
        except OverflowError:
            raise ValueError(
                "Cannot format datetime as is beyond what the format supports rendering"
            ) from None
        fraction = ""
        if dt.microsecond:
            fraction = f".{dt.microsecond:06d}".rstrip("0")
        return (
            f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
            f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}{fraction}Z"
        )


@dataclass(frozen=True)
class Facet:
    """A hierarchical facet path such as ``/a/b/c``."""

    path: str

    def __init__(self, path: str) -> None:
        if not isinstance(path, str):
            raise TypeError("facet path must be a string")
        object.__setattr__(self, "path", path)

    def __str__(self) -> str:
        return self.path


class ValueKind(enum.Enum):
    """The kinds of dynamic value, each valued by its user-facing type name."""

    NULL = "null"
    STR = "string"
    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    BOOL = "bool"
    FACET = "facet"
    DATETIME = "datetime"
    IP = "ip"
    BYTES = "bytes"
    ARRAY = "array"
    OBJECT = "object"


def _is_int(data: Any) -> bool:
    return isinstance(data, int) and not isinstance(data, bool)


def _normalise(kind: ValueKind, data: Any) -> Any:
    if kind is ValueKind.NULL:
        if data is not None:
            raise TypeError("a null value carries no data")
        return None
    if kind is ValueKind.STR:
        if not isinstance(data, str):
            raise TypeError("a string value needs a str")
        return data
    if kind is ValueKind.U64:
        if not _is_int(data):
            raise TypeError("a u64 value needs an int")
        if not 0 <= data <= _U64_MAX:
            raise ValueError("value out of range for u64")
        return data
    if kind is ValueKind.I64:
        if not _is_int(data):
            raise TypeError("an i64 value needs an int")
        if not _I64_MIN <= data <= _I64_MAX:
            raise ValueError("value out of range for i64")
        return data
    if kind is ValueKind.F64:
        if not (isinstance(data, float) or _is_int(data)):
            raise TypeError("an f64 value needs a float")
        return float(data)
    if kind is ValueKind.BOOL:
        if not isinstance(data, bool):
            raise TypeError("a bool value needs a bool")
        return data
    if kind is ValueKind.FACET:
        if isinstance(data, str):
            return Facet(data)
        if not isinstance(data, Facet):
            raise TypeError("a facet value needs a Facet")
        return data
    if kind is ValueKind.DATETIME:
        if not isinstance(data, DateTime):
            raise TypeError("a datetime value needs a DateTime")
        return data
    if kind is ValueKind.IP:
        if not isinstance(data, IPv6Address):
            raise TypeError("an ip value needs an IPv6Address")
        return data
    if kind is ValueKind.BYTES:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("a bytes value needs bytes")
        return bytes(data)
    if kind is ValueKind.ARRAY:
        elements = tuple(data)
        if not all(isinstance(element, Value) for element in elements):
            raise TypeError("array elements must be values")
        return elements
    pairs = tuple(data.items()) if isinstance(data, Mapping) else tuple(data)
    normalised = []
    for pair in pairs:
        key, value = pair
        if not isinstance(key, str) or not isinstance(value, Value):
            raise TypeError("object entries must be (str, Value) pairs")
        normalised.append((key, value))
    return tuple(normalised)


@dataclass(frozen=True)
class Value:
    """A dynamic document value: a kind and the data that kind carries.

    Arrays are tuples of values; objects are ordered tuples of
    ``(key, value)`` pairs.
    """

    kind: ValueKind
    data: Any = None

    def __post_init__(self) -> None:
        kind = ValueKind(self.kind)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "data", _normalise(kind, self.data))

    def type_name(self) -> str:
        """The user-facing name of the value's type."""
        return self.kind.value