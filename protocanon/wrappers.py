"""Codecs that turn field values into canonical JSON values and back."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import CanonicalError
from .scalar import _type_error


class Codec:
    """Converts values of one protobuf type to and from canonical JSON.

    The target is either an object with ``encode``/``decode`` methods, such as a
    ``ScalarKind`` member or another codec, or a class that provides a
    ``to_json`` method and a ``from_json`` classmethod.
    """

    def __init__(self, target: Any) -> None:
        if isinstance(target, type):
            if not (hasattr(target, "to_json") and hasattr(target, "from_json")):
                raise TypeError(f"{target.__name__} has no canonical JSON mapping")
            self._model: type | None = target
        elif hasattr(target, "encode") and hasattr(target, "decode"):
            self._model = None
        else:
            raise TypeError(f"{target!r} has no canonical JSON mapping")
        self.target = target

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target!r})"

    def encode(self, value: Any) -> Any:
        """Return the canonical JSON value for ``value``."""
        if self._model is not None:
            if not isinstance(value, self._model):
                raise CanonicalError(f"expected a {self._model.__name__} value")
            return value.to_json()
        return self.target.encode(value)

    def decode(self, data: Any) -> Any:
        """Return the Python value for the parsed JSON value ``data``."""
        if self._model is not None:
            return self._model.from_json(data)
        return self.target.decode(data)


def _as_codec(target: Any) -> Codec:
    return target if isinstance(target, Codec) else Codec(target)


class RepeatedCodec(Codec):
    """Encodes a repeated field as a JSON array; ``null`` decodes as empty."""

    def __init__(self, element: Any) -> None:
        self.element = _as_codec(element)

    def __repr__(self) -> str:
        return f"RepeatedCodec({self.element!r})"

    def encode(self, values: Any) -> list[Any]:
        """Return a JSON array holding each element in canonical form."""
        if isinstance(values, (str, bytes, bytearray, Mapping)):
            raise _type_error(values, "sequence")
        return [self.element.encode(value) for value in values]

    def decode(self, data: Any) -> list[Any]:
        """Return the decoded elements of a JSON array."""
        if data is None:
            return []
        if not isinstance(data, (list, tuple)):
            raise _type_error(data, "sequence")
        return [self.element.decode(item) for item in data]


class OptionalCodec(Codec):
    """Encodes an optional value, where ``None`` and JSON ``null`` mean unset."""

    def __init__(self, inner: Any) -> None:
        self.inner = _as_codec(inner)

    def __repr__(self) -> str:
        return f"OptionalCodec({self.inner!r})"

    def encode(self, value: Any) -> Any:
        """Return ``None`` for an unset value, else the inner encoding."""
        if value is None:
            return None
        return self.inner.encode(value)

    def decode(self, data: Any) -> Any:
        """Return ``None`` for JSON ``null``, else the inner decoding."""
        if data is None:
            return None
        return self.inner.decode(data)