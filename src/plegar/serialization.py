"""Serialization: JSON round trip for Plegar trees, tokens and results.

Converts syntax tree nodes, tokens, fold regions, advisory errors and whole
analysis results to/from JSON-compatible dicts. Useful for:
- Shipping analysis results from a worker to the editor process
- Snapshotting results in tests
- Debugging and inspection

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from plegar import analyze
    from plegar.serialization import to_json, from_json

    result = analyze("a {\\n  color: red;\\n}", "css")
    json_str = to_json(result)
    restored = from_json(json_str)
    assert restored == result

Thread Safety:
    All functions are pure, safe to call from any thread.

"""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from plegar.engine import AnalysisResult, LanguageKind, StructureResult
from plegar.errors import LexError, ParseError, SerializationError
from plegar.folding import FoldRegion
from plegar.nodes import NODE_TYPES, FoldKind
from plegar.tokens import Token, TokenType

# Registry of type names to classes for deserialization
_DATACLASS_TYPES: dict[str, type] = {
    **{cls.__name__: cls for cls in NODE_TYPES},
    "Token": Token,
    "FoldRegion": FoldRegion,
    "AnalysisResult": AnalysisResult,
    "StructureResult": StructureResult,
}

_ENUM_TYPES: dict[str, type[Enum]] = {
    "TokenType": TokenType,
    "FoldKind": FoldKind,
    "LanguageKind": LanguageKind,
}

_ERROR_TYPES: dict[str, type[ParseError]] = {
    "ParseError": ParseError,
    "LexError": LexError,
}

type Serializable = Any


def to_dict(value: Serializable) -> dict[str, Any]:
    """Convert a node, token, fold region, error or result to a dict.

    Includes a ``_type`` discriminator field for deserialization.
    Recursively serializes nested values.

    Raises:
        SerializationError: If ``value`` is not a serializable Plegar object
    """
    encoded = _serialize_value(value)
    if not isinstance(encoded, dict):
        msg = f"Cannot serialize {type(value).__name__} as an object"
        raise SerializationError(msg)
    return encoded


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Enum):
        return {"_type": type(value).__name__, "name": value.name}
    if isinstance(value, ParseError):
        return {
            "_type": type(value).__name__,
            "message": value.message,
            "start": value.start,
            "end": value.end,
            "lineno": value.lineno,
            "col_offset": value.col_offset,
        }
    if is_dataclass(value) and not isinstance(value, type):
        type_name = type(value).__name__
        if type_name not in _DATACLASS_TYPES:
            msg = f"Unknown type: {type_name!r}"
            raise SerializationError(msg)
        result: dict[str, Any] = {"_type": type_name}
        for f in fields(value):
            result[f.name] = _serialize_value(getattr(value, f.name))
        return result
    if isinstance(value, (tuple, list)):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, float, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Serializable:
    """Reconstruct a typed object from a dict.

    Uses the ``_type`` discriminator to determine the class.

    Raises:
        SerializationError: If ``_type`` is missing or unknown, or the fields
            do not fit the class.
    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized object"
        raise SerializationError(msg)

    enum_cls = _ENUM_TYPES.get(type_name)
    if enum_cls is not None:
        try:
            return enum_cls[data["name"]]
        except KeyError as exc:
            msg = f"Unknown {type_name} member: {data.get('name')!r}"
            raise SerializationError(msg) from exc

    error_cls = _ERROR_TYPES.get(type_name)
    if error_cls is not None:
        return error_cls(
            data.get("message", ""),
            data.get("start", 0),
            data.get("end"),
            lineno=data.get("lineno"),
            col_offset=data.get("col_offset"),
        )

    cls = _DATACLASS_TYPES.get(type_name)
    if cls is None:
        msg = f"Unknown type: {type_name!r}"
        raise SerializationError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = _deserialize_value(data[f.name])
    try:
        return cls(**kwargs)
    except TypeError as exc:
        msg = f"Malformed {type_name}: {exc}"
        raise SerializationError(msg) from exc


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        if "_type" in value:
            return from_dict(value)
        return value
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(value: Serializable, *, indent: int | None = None) -> str:
    """Serialize to a JSON string.

    Output is deterministic (sorted keys) for cache-key stability.

    Args:
        value: Node, token, fold region, error or result to serialize.
        indent: JSON indentation level (None for compact).

    """
    return json.dumps(to_dict(value), sort_keys=True, indent=indent)


def from_json(data: str) -> Serializable:
    """Deserialize from a JSON string produced by ``to_json``.

    Raises:
        SerializationError: If the JSON is invalid or names an unknown type.
    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON: {exc}"
        raise SerializationError(msg) from exc
    if not isinstance(raw, dict):
        msg = f"Expected a JSON object, got {type(raw).__name__}"
        raise SerializationError(msg)
    return from_dict(raw)


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
