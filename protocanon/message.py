"""Protobuf messages and oneofs with canonical JSON encoding.

A message is declared as a subclass of :class:`Message`; the subclass is turned
into a dataclass automatically. Every field is declared with
:func:`proto_field` or :func:`oneof_field`::

    class Nested(Message):
        id: int = proto_field(ScalarKind.INT32)
        note: str = proto_field(ScalarKind.STRING)

Class keywords select container options: ``deny_unknown_fields=True`` rejects
unknown JSON keys and ``transparent=True`` makes a single-field message encode
as its only field.
"""

from __future__ import annotations

import copy
import dataclasses
import functools
import json
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from .enums import EnumCodec, NullValue, ProtoEnum
from .errors import CanonicalError
from .maps import MapCodec
from .scalar import ScalarKind, _type_error
from .wkt import ListValue, Value, snake_to_lower_camel
from .wrappers import Codec, OptionalCodec, RepeatedCodec

_META = "protocanon"
_MISSING: Any = object()

_SCALAR_ZEROS: dict[str, Any] = {
    "bool": False,
    "int32": 0,
    "uint32": 0,
    "int64": 0,
    "uint64": 0,
    "float": 0.0,
    "double": 0.0,
    "string": "",
    "bytes": b"",
}

_ZERO_TYPES = (bool, int, float, str, bytes, bytearray, list, tuple, dict)


def _field_codec(target: Any) -> Codec:
    if isinstance(target, Codec):
        return target
    if isinstance(target, type) and issubclass(target, Message):
        return MessageCodec(target)
    if isinstance(target, type) and issubclass(target, ProtoEnum):
        return EnumCodec(target)
    return Codec(target)


def _zero_for(codec: Codec) -> Any:
    """Return the protobuf default value for a field of this codec."""
    if isinstance(codec, OptionalCodec):
        return None
    if isinstance(codec, RepeatedCodec):
        return []
    if isinstance(codec, MapCodec):
        return {}
    if isinstance(codec, EnumCodec):
        return 0
    target = getattr(codec, "target", None)
    if isinstance(target, ScalarKind):
        return _SCALAR_ZEROS[target.value]
    if isinstance(target, type):
        return target()
    return None


def _accepts_null(codec: Codec) -> bool:
    """Return whether JSON ``null`` carries meaning for this codec."""
    if isinstance(codec, (OptionalCodec, RepeatedCodec, MapCodec)):
        return True
    if isinstance(codec, EnumCodec):
        return codec.enum is NullValue
    if isinstance(codec, MessageCodec):
        return False
    return getattr(codec, "target", None) in (Value, ListValue)


def _message_of(codec: Codec) -> type[Message] | None:
    if isinstance(codec, OptionalCodec):
        codec = codec.inner
    target = getattr(codec, "target", None)
    if isinstance(target, type) and issubclass(target, Message):
        return target
    return None


def _omitted(codec: Codec, value: Any) -> bool:
    if value is None:
        return True
    if isinstance(codec, OptionalCodec):
        return False
    return isinstance(value, _ZERO_TYPES) and not value


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class _FieldOptions:
    codec: Codec
    json_name: str | None
    proto_name: str | None
    flatten: bool


def proto_field(
    codec: Any,
    *,
    json_name: str | None = None,
    proto_name: str | None = None,
    default: Any = _MISSING,
    flatten: bool = False,
) -> Any:
    """Declare a message field encoded with ``codec``.

    ``json_name`` defaults to the lowerCamelCase attribute name and
    ``proto_name`` to the attribute name; both are accepted when reading.
    ``default`` replaces the protobuf zero value for missing keys. A
    ``flatten`` field merges the keys of a nested message into this one.
    """
    resolved = _field_codec(codec)
    if flatten and (json_name is not None or proto_name is not None):
        raise TypeError("flatten cannot be combined with json_name or proto_name")
    if default is _MISSING:
        factory = functools.partial(_zero_for, resolved)
    else:
        factory = functools.partial(copy.deepcopy, default)
    options = _FieldOptions(resolved, json_name, proto_name, flatten)
    return dataclasses.field(default_factory=factory, metadata={_META: options})


def oneof_field(oneof: Oneof) -> Any:
    """Declare a field holding the set member of ``oneof`` as a :class:`Choice`."""
    if not isinstance(oneof, Oneof):
        raise TypeError(f"{oneof!r} is not a Oneof")
    return dataclasses.field(default=None, metadata={_META: oneof})


@dataclass
class Choice:
    """The set member of a oneof: the variant's proto name and its value."""

    variant: str
    value: Any


@dataclass(frozen=True)
class Variant:
    """One alternative of a oneof."""

    name: str
    codec: Any
    json_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "codec", _field_codec(self.codec))
        if self.json_name is None:
            object.__setattr__(self, "json_name", snake_to_lower_camel(self.name))


class Oneof:
    """A group of variants of which at most one is set."""

    def __init__(self, *variants: Variant) -> None:
        if not variants:
            raise TypeError("a oneof needs at least one variant")
        self.variants = variants
        self._by_name: dict[str, Variant] = {}
        self._by_key: dict[str, Variant] = {}
        for variant in variants:
            if variant.name in self._by_name:
                raise TypeError(f"duplicate oneof variant `{variant.name}`")
            self._by_name[variant.name] = variant
            for key in (variant.json_name, variant.name):
                claimed = self._by_key.setdefault(key, variant)
                if claimed is not variant:
                    raise TypeError(f"oneof field name `{key}` is used twice")

    def __repr__(self) -> str:
        return f"Oneof({', '.join(variant.name for variant in self.variants)})"

    def __iter__(self) -> Iterator[Variant]:
        return iter(self.variants)

    def encode(self, choice: Choice) -> tuple[str, Any]:
        """Return the JSON key and canonical value for the set variant."""
        if not isinstance(choice, Choice):
            raise CanonicalError("expected a Choice value")
        variant = self._by_name.get(choice.variant)
        if variant is None:
            raise CanonicalError(f"unknown oneof variant `{choice.variant}`")
        return variant.json_name, variant.codec.encode(choice.value)

    def match(self, key: str) -> Variant | None:
        """Return the variant named by the JSON key ``key``, or ``None``."""
        return self._by_key.get(key)


@dataclass(frozen=True)
class _FieldSpec:
    attr: str
    codec: Codec
    json_name: str
    proto_name: str
    flatten: bool
    accepts_null: bool
    message: type[Message] | None


@dataclass(frozen=True)
class _OneofSpec:
    attr: str
    oneof: Oneof


@dataclass
class _Schema:
    members: list[Union[_FieldSpec, _OneofSpec]]
    by_name: dict[str, _FieldSpec]
    oneofs: list[_OneofSpec]
    flattened: list[_FieldSpec]
    deny_unknown_fields: bool
    transparent: bool


def _build_schema(cls: type[Message], deny_unknown_fields: bool, transparent: bool) -> _Schema:
    members: list[Union[_FieldSpec, _OneofSpec]] = []
    by_name: dict[str, _FieldSpec] = {}
    oneofs: list[_OneofSpec] = []
    flattened: list[_FieldSpec] = []
    claimed: dict[str, str] = {}

    def claim(key: str, attr: str) -> None:
        owner = claimed.setdefault(key, attr)
        if owner != attr:
            raise TypeError(f"{cls.__name__}: field name `{key}` is used by `{owner}` and `{attr}`")

    for item in dataclasses.fields(cls):
        options = item.metadata.get(_META)
        if isinstance(options, Oneof):
            spec = _OneofSpec(item.name, options)
            for variant in options:
                claim(variant.json_name, item.name)
                claim(variant.name, item.name)
            oneofs.append(spec)
            members.append(spec)
            continue
        if not isinstance(options, _FieldOptions):
            raise TypeError(
                f"{cls.__name__}.{item.name} is not declared with proto_field or oneof_field"
            )
        message = _message_of(options.codec)
        if options.flatten:
            if message is None:
                raise TypeError(f"{cls.__name__}.{item.name}: flatten needs a message field")
            if message._protocanon_schema.deny_unknown_fields:
                raise TypeError(
                    f"{cls.__name__}.{item.name}: cannot flatten a message that denies unknown fields"
                )
            if message._protocanon_schema.transparent:
                raise TypeError(f"{cls.__name__}.{item.name}: cannot flatten a transparent message")
            if deny_unknown_fields:
                raise TypeError(f"{cls.__name__}: deny_unknown_fields cannot be used with flatten")
        spec = _FieldSpec(
            attr=item.name,
            codec=options.codec,
            json_name=options.json_name or snake_to_lower_camel(item.name),
            proto_name=options.proto_name or item.name,
            flatten=options.flatten,
            accepts_null=_accepts_null(options.codec),
            message=message,
        )
        if spec.flatten:
            flattened.append(spec)
        else:
            for key in (spec.json_name, spec.proto_name):
                claim(key, spec.attr)
                by_name[key] = spec
        members.append(spec)

    if transparent:
        if len(members) != 1:
            raise TypeError(f"{cls.__name__}: transparent needs exactly one field")
        only = members[0]
        if not isinstance(only, _FieldSpec) or only.flatten:
            raise TypeError(f"{cls.__name__}: transparent field must be a plain field")

    return _Schema(members, by_name, oneofs, flattened, deny_unknown_fields, transparent)


class Message:
    """Base class of protobuf messages with canonical JSON encoding."""

    _protocanon_schema: _Schema

    def __init_subclass__(
        cls, *, deny_unknown_fields: bool = False, transparent: bool = False, **kwargs: Any
    ) -> None:
        super().__init_subclass__(**kwargs)
        dataclasses.dataclass(cls)
        cls._protocanon_schema = _build_schema(cls, deny_unknown_fields, transparent)

    def _entries(self) -> Iterator[tuple[str, Any]]:
        for spec in self._protocanon_schema.members:
            value = getattr(self, spec.attr)
            if isinstance(spec, _OneofSpec):
                if value is not None:
                    yield spec.oneof.encode(value)
            elif spec.flatten:
                if value is not None:
                    if not isinstance(value, spec.message):
                        raise CanonicalError(f"expected a {spec.message.__name__} value")
                    yield from value._entries()
            elif not _omitted(spec.codec, value):
                yield spec.json_name, spec.codec.encode(value)

    @classmethod
    def _matches_field_name(cls, key: str) -> bool:
        schema = cls._protocanon_schema
        if key in schema.by_name:
            return True
        if any(spec.oneof.match(key) is not None for spec in schema.oneofs):
            return True
        return any(spec.message._matches_field_name(key) for spec in schema.flattened)

    def to_json(self) -> Any:
        """Return the canonical JSON value of this message."""
        schema = self._protocanon_schema
        if schema.transparent:
            spec = schema.members[0]
            return spec.codec.encode(getattr(self, spec.attr))
        return dict(self._entries())

    @classmethod
    def from_json(cls, data: Any) -> Message:
        """Build a message from a parsed canonical JSON value."""
        schema = cls._protocanon_schema
        if schema.transparent:
            spec = schema.members[0]
            if data is None and not spec.accepts_null:
                return cls()
            return cls(**{spec.attr: spec.codec.decode(data)})
        if not isinstance(data, dict):
            raise _type_error(data, f"struct {cls.__name__}")

        values: dict[str, Any] = {}
        seen: set[str] = set()
        collected: dict[str, dict[str, Any]] = {spec.attr: {} for spec in schema.flattened}
        for key, raw in data.items():
            spec = schema.by_name.get(key)
            if spec is not None:
                if spec.attr in seen:
                    raise CanonicalError(f"duplicate field `{key}`")
                seen.add(spec.attr)
                if raw is None and not spec.accepts_null:
                    continue
                values[spec.attr] = spec.codec.decode(raw)
                continue
            if cls._decode_oneof(key, raw, values, seen):
                continue
            target = next(
                (item for item in schema.flattened if item.message._matches_field_name(key)),
                None,
            )
            if target is not None:
                collected[target.attr][key] = raw
            elif schema.deny_unknown_fields:
                raise CanonicalError(f"unknown field `{key}`")

        for spec in schema.flattened:
            if collected[spec.attr]:
                values[spec.attr] = spec.codec.decode(collected[spec.attr])
        return cls(**values)

    @classmethod
    def _decode_oneof(cls, key: str, raw: Any, values: dict[str, Any], seen: set[str]) -> bool:
        for spec in cls._protocanon_schema.oneofs:
            variant = spec.oneof.match(key)
            if variant is None:
                continue
            if raw is None and not _accepts_null(variant.codec):
                return True
            if spec.attr in seen:
                raise CanonicalError(f"oneof field `{spec.attr}` is set more than once")
            seen.add(spec.attr)
            values[spec.attr] = Choice(variant.name, variant.codec.decode(raw))
            return True
        return False

    def dumps(self) -> str:
        """Return compact canonical JSON text, keeping keys in declaration order."""
        if self._protocanon_schema.transparent:
            return _dump(self.to_json())
        return "{" + ",".join(f"{_dump(key)}:{_dump(value)}" for key, value in self._entries()) + "}"

    @classmethod
    def loads(cls, text: str) -> Message:
        """Parse canonical JSON text into a message."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as error:
            raise CanonicalError(f"invalid JSON: {error.msg}") from None
        return cls.from_json(data)


class MessageCodec(Codec):
    """Encodes a message field as a JSON object."""

    def __init__(self, message: type[Message]) -> None:
        if not (isinstance(message, type) and issubclass(message, Message)):
            raise TypeError(f"{message!r} is not a Message subclass")
        self.message = message
        self.target = message

    def __repr__(self) -> str:
        return f"MessageCodec({self.message.__name__})"

    def encode(self, value: Any) -> Any:
        """Return the canonical JSON value of the message ``value``."""
        if not isinstance(value, self.message):
            raise CanonicalError(f"expected a {self.message.__name__} value")
        return value.to_json()

    def decode(self, data: Any) -> Message:
        """Build a message from the parsed JSON value ``data``."""
        return self.message.from_json(data)