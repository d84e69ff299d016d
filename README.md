# lnxcore

Building blocks for a search indexer, in plain Python with no third-party
dependencies.

## Modules

- `lnxcore.hashers`: `city_hash64(data)`, `city_hash64_with_seed(data, seed)`
  and `consistent_hash(data)`. 64-bit CityHash values for `bytes`,
  `bytearray`, `memoryview` or `str` (hashed as UTF-8). `consistent_hash`
  uses a fixed seed, so its results are stable across runs and processes.
- `lnxcore.files`: `SyncOnFlushFile`, a wrapper around a binary file whose
  `flush()` flushes the file and then syncs its data to disk
  (`os.fdatasync` where available, otherwise `os.fsync`). It also offers
  `write`, `read`, `seek`, `close` and works as a context manager.
- `lnxcore.limiter`: `BufferLimiter(capacity)`, an asyncio limiter over a
  byte budget. `await limiter.allocate(size)` waits, first come first
  served, until `size` bytes are free and returns a
  `BufferAllocationPermit`; call `release()` on it or use it as a context
  manager. Asking for more than the whole capacity raises `ValueError`.
- `lnxcore.value`: the dynamic value model. `Value(kind, data)` with a
  `ValueKind` (`NULL`, `STR`, `U64`, `I64`, `F64`, `BOOL`, `FACET`,
  `DATETIME`, `IP`, `BYTES`, `ARRAY`, `OBJECT`); `DateTime`, a UTC timestamp
  in microseconds over the signed 64-bit range, with `from_secs`,
  `from_millis`, `from_micros` and `format_rfc3339`; and `Facet`, a path
  such as `/a/b/c`.
- `lnxcore.datetime_parse`: `DateTimeParser`, `DateTimeFormat`
  (`rfc2822()`, `rfc3339()`, `custom(strptime_format)`),
  `TimestampResolution` (`SECONDS`, `MILLIS`, `MICROS`) and `CastError`.
- `lnxcore.type_cast`: `TypeCast(kind, parser=None)` with a `CastKind`
  target; `try_cast_value` and the per-type `try_cast_*` methods convert
  values and raise `CastError` when a cast is not possible.
- `lnxcore.pipeline`: the abstract `Transform`, `TransformPipeline` (per-key
  stages applied to an object's entries) and `TransformError`, which records
  the keys an error passed through in `context_keys`.
- `lnxcore.keys`: `KeyBuilder`, which builds flattened dot-separated keys
  such as `payload.commits.sha` one part at a time, with byte offsets.

## Examples

Casting values:

```python
from lnxcore.datetime_parse import CastError
from lnxcore.type_cast import CastKind, TypeCast

cast = TypeCast(CastKind.U64)
print(cast.try_cast_str("124321"))   # Value(kind=<ValueKind.U64: 'u64'>, data=124321)

try:
    cast.try_cast_str("-124321")
except CastError as err:
    print(err)
    # Cannot cast `string` to `u64` due to an invalid value being provided: "-124321"
```

Parsing datetimes:

```python
from lnxcore.datetime_parse import DateTimeFormat, DateTimeParser, TimestampResolution

parser = (
    DateTimeParser()
    .with_timestamp_resolution(TimestampResolution.MILLIS)
    .with_format(DateTimeFormat.rfc3339())
)
print(parser.supported_formats())                       # unix_millis,rfc3339
print(parser.try_parse_str("2002-10-02T15:00:00Z"))     # DateTime(micros=1033570800000000)
print(parser.try_convert_timestamp(2235))               # DateTime(micros=2235000)
```

A transform pipeline:

```python
from lnxcore.pipeline import TransformPipeline
from lnxcore.type_cast import CastKind, TypeCast
from lnxcore.pipeline import Transform, TransformError
from lnxcore.value import Value, ValueKind


class ToU64(Transform):
    def __init__(self):
        self.cast = TypeCast(CastKind.U64)

    def expecting(self, type_name):
        return TransformError(f"Cannot cast `{type_name}` to `u64`")

    def transform_str(self, value):
        return self.cast.try_cast_str(value)


pipeline = TransformPipeline("ingest")
pipeline.add_stage("age", ToU64())
doc = pipeline.transform_doc({"age": Value(ValueKind.STR, "32")})
print(doc["age"])   # Value(kind=<ValueKind.U64: 'u64'>, data=32)
```

Building keys:

```python
from lnxcore.keys import KeyBuilder

keys = KeyBuilder()
keys.push_part("hello")
keys.push_part("world")
print(keys.as_str())   # hello.world
keys.pop_part()
print(keys.as_str())   # hello
```

## What this package does not do

It has no command-line program, no storage and no server. It provides
`KeyBuilder` for flattened keys, but no indexing schema and no pass that
walks a whole nested document into field entries; nor does it ship
ready-made `Transform` subclasses beyond `TransformPipeline`, a kill switch
or a task supervisor.

## Tests

The test suite uses pytest and pytest-asyncio, both listed in the `test`
extra.