"""Well-known protobuf types and their canonical JSON mappings."""

from __future__ import annotations

import math
import re
import string
from dataclasses import dataclass, field
from datetime import date
from typing import Any as AnyValue

from .enums import NullValue
from .errors import CanonicalError
from .number import I64_MAX, I64_MIN, f64_from_int
from .scalar import _type_error

# 0001-01-01T00:00:00Z and 9999-12-31T23:59:59Z.
MIN_TIMESTAMP_SECONDS = -62_135_596_800
MAX_TIMESTAMP_SECONDS = 253_402_300_799
MAX_DURATION_SECONDS = 315_576_000_000
NANOS_PER_SECOND = 1_000_000_000

_SECONDS_PER_DAY = 86_400
_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()

_TIMESTAMP = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?(Z|[+-][0-9]{2}:[0-9]{2})"
)
_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")


def snake_to_lower_camel(value: str) -> str:
    """Convert a snake_case name to lowerCamelCase."""
    first, *rest = value.split("_")
    result = first[:1].lower() + first[1:] if first[:1] in string.ascii_letters else first
    for part in rest:
        if not part:
            continue
        head = part[0]
        result += (head.upper() if head in string.ascii_letters else head) + part[1:]
    return result


def lower_camel_to_snake(value: str) -> str:
    """Convert a lowerCamelCase name to snake_case."""
    pieces = []
    for index, char in enumerate(value):
        if char in string.ascii_uppercase:
            if index > 0:
                pieces.append("_")
            pieces.append(char.lower())
        else:
            pieces.append(char)
    return "".join(pieces)


def _require_str(data: AnyValue) -> str:
    if not isinstance(data, str):
        raise _type_error(data, "a string")
    return data


def _strip_zeros(digits: str) -> str:
    return digits.rstrip("0")


@dataclass
class Timestamp:
    """A point in time as seconds and nanoseconds since the Unix epoch."""

    seconds: int = 0
    nanos: int = 0

    def to_json(self) -> str:
        """Return the RFC 3339 form with a ``Z`` suffix."""
        if not MIN_TIMESTAMP_SECONDS <= self.seconds <= MAX_TIMESTAMP_SECONDS:
            raise CanonicalError("timestamp seconds out of range")
        if not 0 <= self.nanos < NANOS_PER_SECOND:
            raise CanonicalError("timestamp nanos out of range")
        days, remainder = divmod(self.seconds, _SECONDS_PER_DAY)
        day = date.fromordinal(_EPOCH_ORDINAL + days)
        hour, remainder = divmod(remainder, 3600)
        minute, second = divmod(remainder, 60)
        text = (
            f"{day.year:04d}-{day.month:02d}-{day.day:02d}"
            f"T{hour:02d}:{minute:02d}:{second:02d}"
        )
        if self.nanos:
            text += "." + _strip_zeros(f"{self.nanos:09d}")
        return text + "Z"

    @classmethod
    def from_json(cls, data: AnyValue) -> Timestamp:
        """Parse an RFC 3339 timestamp string."""
        text = _require_str(data)
        if "t" in text:
            raise CanonicalError("timestamp must use 'T'")
        if "T" not in text:
            raise CanonicalError("timestamp must include 'T'")
        if "z" in text:
            raise CanonicalError("timestamp must use 'Z'")
        match = _TIMESTAMP.fullmatch(text)
        if match is None:
            raise CanonicalError("invalid timestamp")
        year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
        fraction, offset = match.group(7), match.group(8)
        if year == 0:
            raise CanonicalError("timestamp seconds out of range")
        try:
            ordinal = date(year, month, day).toordinal()
        except ValueError:
            raise CanonicalError("invalid timestamp") from None
        if hour > 23 or minute > 59 or second > 59:
            raise CanonicalError("invalid timestamp")
        offset_seconds = 0
        if offset != "Z":
            offset_hours, offset_minutes = int(offset[1:3]), int(offset[4:6])
            if offset_hours > 23 or offset_minutes > 59:
                raise CanonicalError("invalid timestamp")
            offset_seconds = offset_hours * 3600 + offset_minutes * 60
            if offset[0] == "-":
                offset_seconds = -offset_seconds
        seconds = (
            (ordinal - _EPOCH_ORDINAL) * _SECONDS_PER_DAY
            + hour * 3600
            + minute * 60
            + second
            - offset_seconds
        )
        if not MIN_TIMESTAMP_SECONDS <= seconds <= MAX_TIMESTAMP_SECONDS:
            raise CanonicalError("timestamp seconds out of range")
        nanos = int(fraction[:9].ljust(9, "0")) if fraction else 0
        return cls(seconds=seconds, nanos=nanos)


def _check_duration(seconds: int, nanos: int) -> None:
    if not -MAX_DURATION_SECONDS <= seconds <= MAX_DURATION_SECONDS:
        raise CanonicalError("duration seconds out of range")
    if not -NANOS_PER_SECOND < nanos < NANOS_PER_SECOND:
        raise CanonicalError("duration nanos out of range")
    if (seconds < 0 < nanos) or (nanos < 0 < seconds):
        raise CanonicalError("duration seconds and nanos must have same sign")


@dataclass
class Duration:
    """A signed span of time as seconds and nanoseconds of the same sign."""

    seconds: int = 0
    nanos: int = 0

    def to_json(self) -> str:
        """Return the decimal seconds form with an ``s`` suffix."""
        _check_duration(self.seconds, self.nanos)
        if self.seconds == 0 and self.nanos == 0:
            return "0s"
        sign = "-" if self.seconds < 0 or self.nanos < 0 else ""
        text = f"{sign}{abs(self.seconds)}"
        if self.nanos:
            text = _strip_zeros(f"{text}.{abs(self.nanos):09d}")
        return text + "s"

    @classmethod
    def from_json(cls, data: AnyValue) -> Duration:
        """Parse a duration string such as ``-1.5s``."""
        text = _require_str(data)
        if not text.endswith("s"):
            raise CanonicalError("duration must end with 's'")
        text = text[:-1]
        if not text:
            raise CanonicalError("duration is empty")
        negative = text.startswith("-")
        if negative:
            text = text[1:]
        seconds_part, dot, fraction = text.partition(".")
        if not _SIGNED.fullmatch(seconds_part):
            raise CanonicalError("invalid duration seconds")
        seconds = int(seconds_part)
        if not I64_MIN <= seconds <= I64_MAX:
            raise CanonicalError("invalid duration seconds")
        nanos = 0
        if dot:
            if len(fraction) > 9:
                raise CanonicalError("invalid duration fractional")
            if fraction:
                if not _UNSIGNED.fullmatch(fraction):
                    raise CanonicalError("invalid duration nanos")
                nanos = int(fraction) * 10 ** (9 - len(fraction))
        if negative:
            seconds, nanos = -seconds, -nanos
        _check_duration(seconds, nanos)
        return cls(seconds=seconds, nanos=nanos)


@dataclass
class FieldMask:
    """A set of snake_case field paths, written to JSON as lowerCamelCase."""

    paths: list[str] = field(default_factory=list)

    def to_json(self) -> str:
        """Return the comma-separated lowerCamelCase form of the paths."""
        parts = []
        for path in self.paths:
            if not path:
                raise CanonicalError("field mask path is empty")
            segments = []
            for segment in path.split("."):
                if not segment:
                    raise CanonicalError("field mask segment is empty")
                json_segment = snake_to_lower_camel(segment)
                if lower_camel_to_snake(json_segment) != segment:
                    raise CanonicalError("field mask segment does not round trip")
                segments.append(json_segment)
            parts.append(".".join(segments))
        return ",".join(parts)

    @classmethod
    def from_json(cls, data: AnyValue) -> FieldMask:
        """Parse a comma-separated lowerCamelCase path list."""
        text = _require_str(data)
        if not text:
            return cls(paths=[])
        paths = []
        for path in text.split(","):
            if not path:
                raise CanonicalError("field mask path is empty")
            segments = []
            for segment in path.split("."):
                if not segment:
                    raise CanonicalError("field mask segment is empty")
                if "_" in segment:
                    raise CanonicalError("field mask contains underscore")
                segments.append(lower_camel_to_snake(segment))
            paths.append(".".join(segments))
        return cls(paths=paths)


_VALUE_KINDS = frozenset(
    {"null_value", "number_value", "string_value", "bool_value", "struct_value", "list_value"}
)


@dataclass
class Value:
    """A dynamically typed JSON value.

    ``kind`` names the set member (``null_value``, ``number_value``,
    ``string_value``, ``bool_value``, ``struct_value`` or ``list_value``)
    and ``value`` holds its payload; ``kind`` is ``None`` when unset.
    """

    kind: str | None = None
    value: AnyValue = None

    def __post_init__(self) -> None:
        if self.kind is not None and self.kind not in _VALUE_KINDS:
            raise ValueError(f"unknown Value kind {self.kind!r}")

    def to_json(self) -> AnyValue:
        """Return the plain JSON value this value stands for."""
        if self.kind is None:
            raise CanonicalError("Value.kind is missing")
        if self.kind == "null_value":
            return None
        if self.kind == "number_value":
            number = float(self.value)
            if not math.isfinite(number):
                raise CanonicalError("Value.number_value must be finite")
            return number
        if self.kind == "string_value":
            return _require_str(self.value)
        if self.kind == "bool_value":
            if not isinstance(self.value, bool):
                raise _type_error(self.value, "a boolean")
            return self.value
        if self.kind == "struct_value":
            if not isinstance(self.value, Struct):
                raise CanonicalError("expected a Struct value")
            return self.value.to_json()
        if not isinstance(self.value, ListValue):
            raise CanonicalError("expected a ListValue value")
        return self.value.to_json()

    @classmethod
    def from_json(cls, data: AnyValue) -> Value:
        """Wrap any parsed JSON value."""
        if data is None:
            return cls("null_value", NullValue.NULL_VALUE)
        if isinstance(data, bool):
            return cls("bool_value", data)
        if isinstance(data, int):
            return cls("number_value", f64_from_int(data))
        if isinstance(data, float):
            return cls("number_value", data)
        if isinstance(data, str):
            return cls("string_value", data)
        if isinstance(data, (list, tuple)):
            return cls("list_value", ListValue([cls.from_json(item) for item in data]))
        if isinstance(data, dict):
            return cls("struct_value", Struct.from_json(data))
        raise _type_error(data, "json value")


@dataclass
class Struct:
    """A JSON object whose members are ``Value`` instances."""

    fields: dict[str, Value] = field(default_factory=dict)

    def to_json(self) -> dict[str, AnyValue]:
        """Return the JSON object, with keys in sorted order."""
        return {key: self.fields[key].to_json() for key in sorted(self.fields)}

    @classmethod
    def from_json(cls, data: AnyValue) -> Struct:
        """Parse a JSON object."""
        if not isinstance(data, dict):
            raise _type_error(data, "map")
        return cls({key: Value.from_json(data[key]) for key in sorted(data)})


@dataclass
class ListValue:
    """A JSON array whose elements are ``Value`` instances."""

    values: list[Value] = field(default_factory=list)

    def to_json(self) -> list[AnyValue]:
        """Return the JSON array."""
        return [value.to_json() for value in self.values]

    @classmethod
    def from_json(cls, data: AnyValue) -> ListValue:
        """Parse a JSON array; ``null`` gives an empty list."""
        if data is None:
            return cls([])
        if not isinstance(data, (list, tuple)):
            raise _type_error(data, "sequence")
        return cls([Value.from_json(item) for item in data])


def _unsupported_any(type_url: AnyValue) -> CanonicalError:
    """Build the error for a packed message of type ``type_url``."""
    if isinstance(type_url, str) and type_url:
        return CanonicalError(f"unsupported Any type: {type_url}")
    return CanonicalError("unsupported Any type")


@dataclass
class Any:
    """A packed message of arbitrary type; no packed type has a JSON mapping here."""

    type_url: str = ""
    value: bytes = b""

    def to_json(self) -> AnyValue:
        """Fail, naming the packed type: packed messages cannot be written."""
        raise _unsupported_any(self.type_url)

    @classmethod
    def from_json(cls, data: AnyValue) -> Any:
        """Fail, naming the ``@type`` given: packed messages cannot be read."""
        type_url = data.get("@type") if isinstance(data, dict) else None
        raise _unsupported_any(type_url)