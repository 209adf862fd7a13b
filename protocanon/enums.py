"""Protobuf enumerations and their canonical JSON encoding."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from .errors import CanonicalError
from .number import I32_MAX, I32_MIN
from .scalar import _type_error
from .wrappers import Codec


class ProtoEnum(IntEnum):
    """Base class for protobuf enumerations.

    Member names are the protobuf value names. Subclasses may override the
    methods below to rename values or accept aliases. Values are skipped by
    listing their numbers in the class attributes ``__skip_serializing__``
    and ``__skip_deserializing__``, or by overriding the skip methods.
    """

    def as_str_name(self) -> str:
        """Return the name written to JSON for this value."""
        return self.name

    @classmethod
    def from_str_name(cls, name: str) -> ProtoEnum | None:
        """Return the member whose JSON name is ``name``, or ``None``."""
        for member in cls:
            if member.as_str_name() == name:
                return member
        return None

    @classmethod
    def is_skipped_for_serialization(cls, number: int) -> bool:
        """Return whether the value ``number`` must not be written."""
        return int(number) in getattr(cls, "__skip_serializing__", ())

    @classmethod
    def is_skipped_for_deserialization(cls, number: int) -> bool:
        """Return whether the value ``number`` must not be read."""
        return int(number) in getattr(cls, "__skip_deserializing__", ())


class NullValue(ProtoEnum):
    """The ``google.protobuf.NullValue`` enumeration, written as JSON ``null``."""

    NULL_VALUE = 0


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class EnumCodec(Codec):
    """Encodes enum numbers as value names, falling back to the bare number."""

    def __init__(self, enum: type[ProtoEnum]) -> None:
        if not (isinstance(enum, type) and issubclass(enum, ProtoEnum)):
            raise TypeError(f"{enum!r} is not a ProtoEnum subclass")
        self.enum = enum

    def __repr__(self) -> str:
        return f"EnumCodec({self.enum.__name__})"

    def _member(self, number: int) -> ProtoEnum | None:
        try:
            return self.enum(number)
        except ValueError:
            return None

    def encode(self, value: Any) -> str | int | None:
        """Return the value name, or the number when it names no member."""
        if not _is_int(value):
            raise _type_error(value, "an enum number")
        number = int(value)
        if not I32_MIN <= number <= I32_MAX:
            raise CanonicalError("enum number out of range")
        # NullValue is the one enum whose zero value is written as JSON null.
        if self.enum is NullValue and number == 0:
            return None
        member = self._member(number)
        if member is None:
            return number
        if self.enum.is_skipped_for_serialization(number):
            raise CanonicalError("skipped enum variant cannot be serialized")
        return member.as_str_name()

    def decode(self, data: Any) -> int:
        """Return the enum number named or given by ``data``."""
        if data is None:
            if self.enum is NullValue:
                return NullValue.NULL_VALUE
            raise CanonicalError("invalid enum value")
        if isinstance(data, str):
            if self.enum is NullValue and data == "NULL_VALUE":
                return NullValue.NULL_VALUE
            member = self.enum.from_str_name(data)
            if member is None or self.enum.is_skipped_for_deserialization(int(member)):
                raise CanonicalError("invalid enum string")
            return member
        if _is_int(data):
            if not I32_MIN <= data <= I32_MAX:
                raise CanonicalError("enum number out of range")
            if self.enum.is_skipped_for_deserialization(data):
                raise CanonicalError("skipped enum variant cannot be deserialized")
            member = self._member(data)
            return data if member is None else member
        raise _type_error(data, "enum string or number")