"""Casting dynamic values between the core value types."""

from __future__ import annotations

import base64
import binascii
import enum
import ipaddress
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from lnxcore.datetime_parse import CastError, DateTimeParser
from lnxcore.value import DateTime, Facet, Value, ValueKind

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1

_UNSIGNED = re.compile(r"\+?[0-9]+")
_SIGNED = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:e[+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_UNREPRESENTABLE = (
    "because the input value cannot be safely represented by the target type"
)


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _render_f64(v: float) -> str:
    """Render a float as the shortest round-tripping decimal, always with a point."""
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "inf" if v > 0 else "-inf"
    sign = "-" if math.copysign(1.0, v) < 0 else ""
    if v == 0:
        return f"{sign}0.0"
    _, digit_tuple, exponent = Decimal(repr(abs(v))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    length = len(digits)
    point = length + exponent
    if exponent >= 0 and point <= 16:
        body = digits + "0" * exponent + ".0"
    elif 0 < point <= 16:
        body = f"{digits[:point]}.{digits[point:]}"
    elif -5 < point <= 0:
        body = "0." + "0" * (-point) + digits
    elif length == 1:
        body = f"{digits}e{point - 1}"
    else:
        body = f"{digits[0]}.{digits[1:]}e{point - 1}"
    return sign + body


def _parse_ip(s: str) -> Optional[ipaddress.IPv6Address]:
    try:
        v4 = ipaddress.IPv4Address(s)
    except ValueError:
        pass
    else:
        return ipaddress.IPv6Address((0xFFFF << 32) | int(v4))
    if "%" in s:
        return None
    try:
        return ipaddress.IPv6Address(s)
    except ValueError:
        return None


def _decode_base64(s: str) -> Optional[bytes]:
    try:
        decoded = base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError):
        return None
    if base64.b64encode(decoded).decode("ascii") != s:
        return None
    return decoded


class CastKind(enum.Enum):
    """The core types a value can be cast to."""

    STRING = "string"
    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    BYTES = "bytes"
    BOOL = "bool"
    DATETIME = "datetime"
    IP = "ip"
    FACET = "facet"


@dataclass(frozen=True)
class TypeCast:
    """A target type for casts; datetime casts carry the parser they use."""

    kind: CastKind
    parser: Optional[DateTimeParser] = None

    def __post_init__(self) -> None:
        kind = CastKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is CastKind.DATETIME:
            if self.parser is None:
                object.__setattr__(self, "parser", DateTimeParser())
        elif self.parser is not None:
            raise ValueError("only datetime casts take a parser")

    def type_name(self) -> str:
        """The user-facing name of the target type."""
        if self.kind is CastKind.DATETIME:
            return f"datetime<{self.parser.supported_formats()}>"
        return self.kind.value

    def _bail(self, type_name: str) -> CastError:
        return CastError(f"Cannot cast `{type_name}` to `{self.type_name()}`")

    def _invalid(self, type_name: str, text: str) -> CastError:
        return CastError(
            f"Cannot cast `{type_name}` to `{self.type_name()}` due to an invalid "
            f"value being provided: {_quoted(text)}"
        )

    def _detail(self, type_name: str, reason: str) -> CastError:
        return CastError(f"Cannot cast `{type_name}` to `{self.type_name()}` {reason}")

    def try_cast_value(self, value: Value) -> Value:
        """Cast a dynamic value, element by element for arrays."""
        kind, data = value.kind, value.data
        if kind is ValueKind.NULL:
            return value
        if kind is ValueKind.STR:
            return self.try_cast_str(data)
        if kind is ValueKind.U64:
            return self.try_cast_u64(data)
        if kind is ValueKind.I64:
            return self.try_cast_i64(data)
        if kind is ValueKind.F64:
            return self.try_cast_f64(data)
        if kind is ValueKind.BOOL:
            return self.try_cast_bool(data)
        if kind is ValueKind.FACET:
            return self.try_cast_facet(data)
        if kind is ValueKind.DATETIME:
            return self.try_cast_datetime(data)
        if kind is ValueKind.IP:
            return self.try_cast_ip(data)
        if kind is ValueKind.BYTES:
            return self.try_cast_bytes(data)
        if kind is ValueKind.ARRAY:
            casted = []
            for element in data:
                if element.kind is ValueKind.OBJECT:
                    raise self._detail(
                        element.type_name(),
                        "due to field containing an array of arrays or array of objects",
                    )
                casted.append(self.try_cast_value(element))
            return Value(ValueKind.ARRAY, casted)
        raise self._bail(value.type_name())

    def try_cast_str(self, s: str) -> Value:
        """Cast a string to the target type."""
        kind = self.kind
        if kind is CastKind.STRING:
            return Value(ValueKind.STR, s)
        if kind is CastKind.U64:
            if _UNSIGNED.fullmatch(s) and int(s) <= _U64_MAX:
                return Value(ValueKind.U64, int(s))
            raise self._invalid("string", s)
        if kind is CastKind.I64:
            if _SIGNED.fullmatch(s) and _I64_MIN <= int(s) <= _I64_MAX:
                return Value(ValueKind.I64, int(s))
            raise self._invalid("string", s)
        if kind is CastKind.F64:
            if _FLOAT.fullmatch(s):
                return Value(ValueKind.F64, float(s))
            raise self._invalid("string", s)
        if kind is CastKind.BOOL:
            if s in ("true", "false"):
                return Value(ValueKind.BOOL, s == "true")
            raise self._invalid("string", s)
        if kind is CastKind.DATETIME:
            return Value(ValueKind.DATETIME, self.parser.try_parse_str(s))
        if kind is CastKind.IP:
            address = _parse_ip(s)
            if address is None:
                raise self._invalid("string", s)
            return Value(ValueKind.IP, address)
        if kind is CastKind.BYTES:
            decoded = _decode_base64(s)
            if decoded is None:
                raise self._invalid("string", s)
            return Value(ValueKind.BYTES, decoded)
        if s.startswith("/"):
            return Value(ValueKind.FACET, Facet(s))
        raise self._detail("string", "because the value is not in the form of a path")

    def try_cast_u64(self, v: int) -> Value:
        """Cast an unsigned integer to the target type."""
        kind = self.kind
        if kind is CastKind.U64:
            return Value(ValueKind.U64, v)
        if kind is CastKind.I64:
            if v > _I64_MAX:
                raise self._detail("u64", _UNREPRESENTABLE)
            return Value(ValueKind.I64, v)
        if kind is CastKind.STRING:
            return Value(ValueKind.STR, str(v))
        if kind is CastKind.DATETIME:
            if v > _I64_MAX:
                raise self._detail("u64", _UNREPRESENTABLE)
            return Value(ValueKind.DATETIME, self.parser.try_convert_timestamp(v))
        raise self._bail("u64")

    def try_cast_i64(self, v: int) -> Value:
        """Cast a signed integer to the target type."""
        kind = self.kind
        if kind is CastKind.I64:
            return Value(ValueKind.I64, v)
        if kind is CastKind.U64:
            if v < 0:
                raise self._detail("i64", _UNREPRESENTABLE)
            return Value(ValueKind.U64, v)
        if kind is CastKind.STRING:
            return Value(ValueKind.STR, str(v))
        if kind is CastKind.DATETIME:
            return Value(ValueKind.DATETIME, self.parser.try_convert_timestamp(v))
        raise self._bail("i64")

    def try_cast_f64(self, v: float) -> Value:
        """Cast a float to the target type."""
        if self.kind is CastKind.F64:
            return Value(ValueKind.F64, v)
        if self.kind is CastKind.STRING:
            return Value(ValueKind.STR, _render_f64(float(v)))
        raise self._bail("f64")

    def try_cast_bool(self, v: bool) -> Value:
        """Cast a boolean to the target type."""
        if self.kind is CastKind.BOOL:
            return Value(ValueKind.BOOL, v)
        if self.kind is CastKind.STRING:
            return Value(ValueKind.STR, "true" if v else "false")
        raise self._bail("bool")

    def try_cast_datetime(self, v: DateTime) -> Value:
        """Cast a datetime to the target type."""
        if self.kind is CastKind.DATETIME:
            return Value(ValueKind.DATETIME, v)
        if self.kind is CastKind.STRING:
            try:
                rendered = v.format_rfc3339()
            except ValueError as exc:
                raise CastError(str(exc)) from exc
            return Value(ValueKind.STR, rendered)
        raise self._bail("datetime")

    def try_cast_ip(self, v: ipaddress.IPv6Address) -> Value:
        """Cast an IP address to the target type."""
        if self.kind is CastKind.IP:
            return Value(ValueKind.IP, v)
        if self.kind is CastKind.STRING:
            mapped = v.ipv4_mapped
            return Value(ValueKind.STR, str(mapped) if mapped is not None else str(v))
        raise self._bail("ip")

    def try_cast_facet(self, v: Facet) -> Value:
        """Cast a facet to the target type."""
        if self.kind is CastKind.FACET:
            return Value(ValueKind.FACET, v)
        if self.kind is CastKind.STRING:
            return Value(ValueKind.STR, v.path)
        raise self._bail("facet")

    def try_cast_bytes(self, v: bytes) -> Value:
        """Cast bytes to the target type."""
        if self.kind is CastKind.BYTES:
            return Value(ValueKind.BYTES, v)
        raise self._bail("bytes")