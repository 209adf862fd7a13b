"""Canonical protobuf JSON encoding and decoding for plain Python message classes."""

__version__ = "0.1.3"

__all__ = [
    "enums",
    "errors",
    "example",
    "maps",
    "message",
    "number",
    "scalar",
    "wkt",
    "wrappers",
]