"""Conversion between native Python objects and RESP2 values.

Type mapping, Python → RESP2:

    None                        → null BulkString
    bytes / bytearray / memoryview / str
                                → BulkString (str as UTF-8)
    int                         → Integer
    float                       → BulkString of repr(), as Redis clients send it
    list / tuple                → Array
    RESP2 value                 → itself
    bool, anything else         → ERR_VALUE

and RESP2 → Python:

    SimpleString / BulkString   → bytes, or str when an encoding is given
    null BulkString / Array     → None
    Integer                     → int
    Array                       → list
    Error                       → ReplyError instance (returned, not raised)
"""

from __future__ import annotations

from typing import Any, List, Optional

from ._core import encode
from ._errors import ERR_VALUE, ReplyError, RespError
from ._values import (
    NULL_BULK_STRING,
    VALUE_TYPES,
    Array,
    BulkString,
    Error,
    Integer,
    SimpleString,
    Value,
)


def from_python(obj: Any) -> Value:
    """Build a RESP2 value from a native Python object."""
    if isinstance(obj, VALUE_TYPES):
        return obj

    if obj is None:
        return NULL_BULK_STRING

    # bool before int: True is an int to Python, but not to us.
    if isinstance(obj, bool):
        raise RespError(ERR_VALUE, "bool has no RESP2 representation")

    if isinstance(obj, int):
        return Integer(obj)

    if isinstance(obj, float):
        return BulkString(repr(obj))

    if isinstance(obj, (str, bytes, bytearray, memoryview)):
        return BulkString(obj)

    if isinstance(obj, (list, tuple)):
        return Array([from_python(item) for item in obj])

    raise RespError(ERR_VALUE, "unsupported type {}".format(type(obj).__name__))


def _text(data: bytes, encoding: Optional[str]) -> Any:
    if not encoding:
        return data
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise RespError(ERR_VALUE, "cannot decode {!r} as {}: {}".format(
            data[:32], encoding, e.reason)) from e


def to_python(value: Value, *, encoding: Optional[str] = None) -> Any:
    """Turn a RESP2 value into plain Python objects.

    With an encoding, text that does not decode raises RespError(ERR_VALUE).
    """
    if isinstance(value, SimpleString):
        return _text(value.text, encoding)

    if isinstance(value, Error):
        return ReplyError(value.kind, value.message)

    if isinstance(value, Integer):
        return value.value

    if isinstance(value, BulkString):
        if value.data is None:
            return None
        return _text(value.data, encoding)

    if isinstance(value, Array):
        if value.items is None:
            return None
        return [to_python(item, encoding=encoding) for item in value.items]

    raise RespError(ERR_VALUE, "not a RESP2 value: {}".format(type(value).__name__))


def _command_arg(arg: Any) -> BulkString:
    if isinstance(arg, bool):
        raise RespError(ERR_VALUE, "bool is not a valid command argument")
    if isinstance(arg, (int, float)):
        return BulkString(repr(arg))
    if isinstance(arg, (str, bytes, bytearray, memoryview)):
        return BulkString(arg)
    raise RespError(ERR_VALUE,
                    "unsupported command argument type {}".format(type(arg).__name__))


def pack_command(*args: Any) -> bytes:
    """Encode a command the way clients send it: an array of bulk strings.

        >>> pack_command("SET", "key", 42)
        b'*3\\r\\n$3\\r\\nSET\\r\\n$3\\r\\nkey\\r\\n$2\\r\\n42\\r\\n'
    """
    if not args:
        raise RespError(ERR_VALUE, "a command needs at least one argument")
    parts: List[Value] = [_command_arg(arg) for arg in args]
    return encode(Array(parts))
