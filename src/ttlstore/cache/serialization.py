"""
Value encoding for persisted cache entries.

Values are stored as orjson text. Representable values are None, bool, int
(64-bit), float, str, list/tuple, and dict with str keys, nested to any depth.
Datetimes, dataclasses and subclasses of builtins are passed through to the
(absent) default hook so they are rejected rather than silently reshaped.
NaN and infinities encode as null, as in orjson.
"""

from __future__ import annotations

from typing import Any

import orjson

from ttlstore.exceptions import CorruptEntry, SerializationError

_DUMPS_OPTIONS = (
    orjson.OPT_PASSTHROUGH_DATETIME
    | orjson.OPT_PASSTHROUGH_DATACLASS
    | orjson.OPT_PASSTHROUGH_SUBCLASS
)


def encode_value(key: str, value: Any) -> str:
    """Encode a value for storage.

    Args:
        key: Cache key, used for error context only.
        value: Value to encode.

    Returns:
        UTF-8 JSON text.

    Raises:
        SerializationError: If the value (or anything nested in it) cannot be
            encoded, including cyclic references and non-str mapping keys.
    """
    try:
        return orjson.dumps(value, option=_DUMPS_OPTIONS).decode("utf-8")
    except orjson.JSONEncodeError as e:
        raise SerializationError(
            "Value cannot be serialized",
            context={"key": key, "value_type": type(value).__name__, "error": str(e)},
        ) from e


def decode_value(key: str, raw: str | bytes | None) -> Any:
    """Decode a stored value.

    Raises:
        CorruptEntry: If the stored text is not valid JSON.
    """
    try:
        return orjson.loads(raw)  # type: ignore[arg-type]
    except (orjson.JSONDecodeError, TypeError) as e:
        raise CorruptEntry(
            "Stored value could not be decoded",
            context={"key": key, "error": str(e)},
        ) from e
