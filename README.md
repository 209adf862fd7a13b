# protocanon

Canonical protobuf JSON for plain Python message classes.

`protocanon` reads and writes the JSON mapping that protobuf defines for its
messages: 64-bit integers are written as strings, bytes as standard base64,
floats accept `"NaN"`, `"Infinity"` and `"-Infinity"`, and enums are written
by name. Well-known types have their own mappings: `Timestamp` becomes an
RFC 3339 string ending in `Z`, `Duration` a string such as `"1.5s"`,
`FieldMask` a comma-separated list of lowerCamelCase paths, and `Struct`,
`Value` and `ListValue` plain JSON.

It has no dependencies outside the standard library.

## Installing

```
pip install protocanon
```

## Defining messages

A message is a subclass of `protocanon.message.Message`; the subclass is made
into a dataclass automatically. Each field is declared with `proto_field`,
which takes a codec and, optionally, the field's JSON name and proto name.
The JSON name defaults to the lowerCamelCase form of the attribute name and
the proto name to the attribute name itself.

```python
from protocanon.message import Message, proto_field
from protocanon.scalar import ScalarKind
from protocanon.wrappers import OptionalCodec
from protocanon.wkt import Timestamp


class Example(Message):
    name: str = proto_field(ScalarKind.STRING)
    count: int = proto_field(ScalarKind.INT64)
    payload: bytes = proto_field(ScalarKind.BYTES)
    created_at: Timestamp | None = proto_field(OptionalCodec(Timestamp))
```

Converting a message:

```python
message = Example(name="demo", count=42, payload=b"\x00\x01\x02\xff")
message.to_json()   # {"name": "demo", "count": "42", "payload": "AAEC/w=="}
text = message.dumps()
Example.loads(text) == message   # True
```

`to_json` and `from_json` work on parsed JSON values (dicts, lists, strings,
numbers); `dumps` and `loads` work on JSON text. `dumps` writes compact JSON
with keys in field declaration order.

### Reading and writing rules

- Fields holding their zero value (`0`, `""`, `b""`, `False`, empty list or
  dict, `None`) are left out when writing. A field declared with
  `OptionalCodec` is written whenever it is not `None`, even if it holds zero.
- A field can be read under its JSON name or its proto name. Giving the same
  field twice is an error.
- JSON `null` for a field that has no use for it is skipped, leaving the
  default.
- A missing field gets its protobuf zero value, or the value passed as
  `proto_field(..., default=...)` (copied for each new message).
- Keys that belong to no field are skipped, unless the class is declared with
  `deny_unknown_fields=True`, in which case they raise an error.

### Class options

```python
class Strict(Message, deny_unknown_fields=True):
    note: str = proto_field(ScalarKind.STRING)


class Count(Message, transparent=True):
    count: int = proto_field(ScalarKind.INT64)

Count(count=42).to_json()   # "42"
```

A `transparent` message has exactly one plain field and is written as that
field's value alone.

### Oneofs

```python
from protocanon.message import Choice, Oneof, Variant, oneof_field

CHOICE = Oneof(Variant("name", ScalarKind.STRING), Variant("count", ScalarKind.INT32))


class Holder(Message):
    choice: Choice | None = oneof_field(CHOICE)

Holder(choice=Choice("name", "demo")).to_json()   # {"name": "demo"}
```

A `Variant`'s JSON name defaults to the lowerCamelCase form of its name; both
names are accepted when reading. Setting two members of one oneof in the same
JSON object is an error.

### Flattened fields

`proto_field(SomeMessage, flatten=True)` (or with `OptionalCodec(SomeMessage)`)
merges the nested message's keys into the parent object. If keys collide,
reading prefers fields that are not flattened, then the first flattened field
in declaration order; `dumps` writes fields in declaration order, so colliding
keys appear twice in its output. A flattened field cannot have its own names,
cannot be combined with `deny_unknown_fields`, and cannot hold a message that
denies unknown fields or is transparent.

## Building blocks

- `protocanon.scalar.ScalarKind`: the protobuf scalar types, each with
  `encode` and `decode`. `SINT32`, `SFIXED32`, `FIXED32`, `SINT64`,
  `SFIXED64` and `FIXED64` share the encoding of `INT32`, `UINT32`, `INT64`
  and `UINT64`.
- `protocanon.wrappers`: `Codec`, which wraps anything with
  `encode`/`decode` or a class with `to_json`/`from_json`; `RepeatedCodec`
  for repeated fields (JSON `null` reads as an empty list); `OptionalCodec`
  for fields that may be absent.
- `protocanon.enums`: `ProtoEnum`, the base for protobuf enums, whose member
  names are the value names; `NullValue`, whose zero value is written as
  JSON `null`; and `EnumCodec`, which writes names (or the bare number when
  it names no member) and reads names or numbers. Values can be barred from
  writing or reading by listing their numbers in `__skip_serializing__` or
  `__skip_deserializing__` on the enum class.
- `protocanon.maps`: `MapCodec(key_kind, value)` for map fields with string,
  bool or integer keys, plus `parse_map_key` and `format_map_key`.
- `protocanon.number`: the number formatting and range-checked conversions
  the codecs are built on.
- `protocanon.wkt`: `Timestamp`, `Duration`, `FieldMask`, `Value`, `Struct`,
  `ListValue` and `Any`, each with `to_json` and `from_json`, and the
  `snake_to_lower_camel` / `lower_camel_to_snake` helpers.
- `protocanon.message`: `Message`, `MessageCodec`, `proto_field`, and
  `Oneof`, `Variant`, `Choice` and `oneof_field` for oneof groups.
- `protocanon.example`: sample messages (`Example`, `KitchenSink`, `Nested`,
  `Status`, `NameConflicts`) that show how each kind of field is declared.

## Errors

Any value that cannot be converted raises `protocanon.errors.CanonicalError`
(a subclass of `ValueError`), with a message that says what was wrong: an
out-of-range number, a timestamp in lower case, a `Duration` whose seconds
and nanos have different signs, an unknown field in a strict message, and so
on. Mistakes in declaring a message class, such as a flattened scalar field,
raise `TypeError` when the class is defined.

## What it does not do

- It handles JSON only: there is no protobuf binary encoding.
- Message classes are written by hand; nothing generates them from `.proto`
  files.
- `Any` cannot be converted in either direction; both `to_json` and
  `from_json` raise `CanonicalError`.

## Running the tests

```
pip install -e ".[test]"
pytest
```