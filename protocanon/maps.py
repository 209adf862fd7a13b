"""Canonical JSON encoding of protobuf map fields."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .errors import CanonicalError
from .number import I32_MAX, I32_MIN, I64_MAX, I64_MIN, U32_MAX, U64_MAX
from .scalar import ScalarKind, _type_error
from .wrappers import Codec, _as_codec

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")

_INTEGER_KEYS: dict[ScalarKind, tuple[re.Pattern[str], int, int, str]] = {
    ScalarKind.INT32: (_SIGNED, I32_MIN, I32_MAX, "i32"),
    ScalarKind.INT64: (_SIGNED, I64_MIN, I64_MAX, "i64"),
    ScalarKind.UINT32: (_UNSIGNED, 0, U32_MAX, "u32"),
    ScalarKind.UINT64: (_UNSIGNED, 0, U64_MAX, "u64"),
}

_KEY_KINDS = frozenset({ScalarKind.STRING, ScalarKind.BOOL, *_INTEGER_KEYS})


def parse_map_key(kind: ScalarKind, text: str) -> Any:
    """Parse a JSON object key into a map key of the given scalar kind."""
    if kind is ScalarKind.STRING:
        return text
    if kind is ScalarKind.BOOL:
        if text == "true":
            return True
        if text == "false":
            return False
        raise CanonicalError("invalid bool map key")
    try:
        pattern, low, high, name = _INTEGER_KEYS[kind]
    except KeyError:
        raise TypeError(f"{kind!r} cannot be a map key") from None
    if pattern.fullmatch(text):
        number = int(text)
        if low <= number <= high:
            return number
    raise CanonicalError(f"invalid {name} map key")


def format_map_key(key: Any) -> str:
    """Render a map key as a JSON object key."""
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, int):
        return str(int(key))
    if isinstance(key, str):
        return key
    raise TypeError(f"{type(key).__name__} cannot be a map key")


class MapCodec(Codec):
    """Encodes a map field as a JSON object with stringified keys."""

    def __init__(self, key_kind: ScalarKind, value: Any) -> None:
        if key_kind not in _KEY_KINDS:
            raise TypeError(f"{key_kind!r} cannot be a map key")
        self.key_kind = key_kind
        self.value = _as_codec(value)

    def __repr__(self) -> str:
        return f"MapCodec({self.key_kind!r}, {self.value!r})"

    def encode(self, values: Any) -> dict[str, Any]:
        """Return a JSON object holding each entry in canonical form."""
        if not isinstance(values, Mapping):
            raise _type_error(values, "map")
        encoded: dict[str, Any] = {}
        for key, value in values.items():
            text = format_map_key(key)
            parsed = parse_map_key(self.key_kind, text)
            if parsed != key or isinstance(parsed, bool) != isinstance(key, bool):
                raise CanonicalError("map key does not match key type")
            encoded[text] = self.value.encode(value)
        return encoded

    def decode(self, data: Any) -> dict[Any, Any]:
        """Return the decoded entries of a JSON object; ``null`` is empty."""
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise _type_error(data, "map")
        return {
            parse_map_key(self.key_kind, key): self.value.decode(value)
            for key, value in data.items()
        }