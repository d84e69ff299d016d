"""Transform operations on dynamic values and per-key transform pipelines."""

from __future__ import annotations

import abc
from collections.abc import Iterable, Mapping
from ipaddress import IPv6Address
from typing import Union

from lnxcore.value import DateTime, Facet, Value, ValueKind

KeyValues = tuple[tuple[str, Value], ...]
KeyValuesInput = Union[Mapping[str, Value], Iterable[tuple[str, Value]]]


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _pairs(obj: KeyValuesInput) -> KeyValues:
    if isinstance(obj, Mapping):
        return tuple(obj.items())
    return tuple(obj)


class TransformError(Exception):
    """A transform failed; ``context_keys`` lists the keys it passed through, innermost first."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.context_keys: list[str] = []

    def with_context_key(self, key: str) -> "TransformError":
        """Record that the error passed through the field ``key``."""
        self.context_keys.append(key)
        return self

    def __str__(self) -> str:
        path = ", ".join(_quoted(key) for key in self.context_keys)
        return f"Transform Error originating from field path: [{path}]: {self.message}"


class Transform(abc.ABC):
    """A transform operation on a value.

    Each ``transform_*`` method raises the error from ``expecting`` unless a
    subclass overrides it; arrays are transformed element by element.
    """

    @abc.abstractmethod
    def expecting(self, type_name: str) -> TransformError:
        """The error to raise when a type cannot be transformed."""

    def transform(self, value: Value) -> Value:
        """Apply the transform to ``value``, returning the new value."""
        kind, data = value.kind, value.data
        if kind is ValueKind.NULL:
            return self.transform_null()
        if kind is ValueKind.STR:
            return self.transform_str(data)
        if kind is ValueKind.U64:
            return self.transform_u64(data)
        if kind is ValueKind.I64:
            return self.transform_i64(data)
        if kind is ValueKind.F64:
            return self.transform_f64(data)
        if kind is ValueKind.BOOL:
            return self.transform_bool(data)
        if kind is ValueKind.FACET:
            return self.transform_facet(data)
        if kind is ValueKind.DATETIME:
            return self.transform_datetime(data)
        if kind is ValueKind.IP:
            return self.transform_ip(data)
        if kind is ValueKind.BYTES:
            return self.transform_bytes(data)
        if kind is ValueKind.ARRAY:
            return self.transform_array(data)
        return self.transform_object(data)

    def transform_null(self) -> Value:
        raise self.expecting(ValueKind.NULL.value)

    def transform_str(self, value: str) -> Value:
        raise self.expecting(ValueKind.STR.value)

    def transform_u64(self, value: int) -> Value:
        raise self.expecting(ValueKind.U64.value)

    def transform_i64(self, value: int) -> Value:
        raise self.expecting(ValueKind.I64.value)

    def transform_f64(self, value: float) -> Value:
        raise self.expecting(ValueKind.F64.value)

    def transform_bool(self, value: bool) -> Value:
        raise self.expecting(ValueKind.BOOL.value)

    def transform_facet(self, value: Facet) -> Value:
        raise self.expecting(ValueKind.FACET.value)

    def transform_datetime(self, value: DateTime) -> Value:
        raise self.expecting(ValueKind.DATETIME.value)

    def transform_bytes(self, value: bytes) -> Value:
        raise self.expecting(ValueKind.BYTES.value)

    def transform_ip(self, value: IPv6Address) -> Value:
        raise self.expecting(ValueKind.IP.value)

    def transform_array(self, elements: Iterable[Value]) -> Value:
        return Value(ValueKind.ARRAY, [self.transform(element) for element in elements])

    def transform_object(self, obj: KeyValuesInput) -> Value:
        raise self.expecting(ValueKind.OBJECT.value)


class TransformPipeline(Transform):
    """Applies the stages registered for each key of an object, in order."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._stages: dict[str, list[Transform]] = {}

    def add_stage(self, key: str, transform: Transform) -> None:
        """Append a transform to the stages run for ``key``."""
        self._stages.setdefault(key, []).append(transform)

    def transform_doc(self, document: Mapping[str, Value]) -> dict[str, Value]:
        """Apply the pipeline to a document mapping field names to values."""
        return dict(self.transform_key_values(document))

    def transform_key_values(self, obj: KeyValuesInput) -> KeyValues:
        """Apply the pipeline to key-value pairs, keeping their order."""
        result = []
        for key, value in _pairs(obj):
            for stage in self._stages.get(key, ()):
                try:
                    value = stage.transform(value)
                except TransformError as err:
                    raise err.with_context_key(key)
            result.append((key, value))
        return tuple(result)

    def expecting(self, type_name: str) -> TransformError:
        return TransformError(
            f"Cannot transform `{type_name}` as it is not an object, "
            f"required by the {_quoted(self.name)} transform pipeline stage"
        )

    def transform_object(self, obj: KeyValuesInput) -> Value:
        return Value(ValueKind.OBJECT, self.transform_key_values(obj))