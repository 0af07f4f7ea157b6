"""resp2 — RESP2 wire protocol codec.

Frame and unframe the values spoken by Redis-style key-value stores:
simple strings, errors, integers, bulk strings and (nested) arrays.

Quick start:
    >>> from resp2 import Array, BulkString, decode, encode
    >>> encode(Array([BulkString(b"PING")]))
    b'*1\\r\\n$4\\r\\nPING\\r\\n'
    >>> decode(b"+OK\\r\\n")
    Complete(value=SimpleString(text=b'OK'), consumed=5)

``decode`` never raises on bad input.  It returns Complete, Incomplete
(buffer more bytes and retry) or Invalid (give up on this stream).
"""

from __future__ import annotations

import logging
from typing import Any

from ._constants import MAX_ARRAY_LENGTH, MAX_BULK_LENGTH, MAX_DEPTH
from ._core import decode, encode
from ._errors import (
    ERR_FRAMING,
    ERR_INCOMPLETE,
    ERR_INTEGER,
    ERR_LENGTH,
    ERR_LIMIT_DEPTH,
    ERR_LIMIT_SIZE,
    ERR_LINE,
    ERR_TAG,
    ERR_VALUE,
    ReplyError,
    RespError,
)
from ._python_adapter import from_python, pack_command, to_python
from ._reader import Reader
from ._result import Complete, DecodeOutcome, Incomplete, Invalid
from ._values import (
    NULL_ARRAY,
    NULL_BULK_STRING,
    Array,
    BulkString,
    Error,
    Integer,
    SimpleString,
    Value,
)

__version__ = "1.0.0"

__all__ = [
    # Codec
    "decode",
    "encode",
    "parse",
    "Reader",
    # Values
    "Value",
    "SimpleString",
    "Error",
    "Integer",
    "BulkString",
    "Array",
    "NULL_BULK_STRING",
    "NULL_ARRAY",
    # Outcomes
    "DecodeOutcome",
    "Complete",
    "Incomplete",
    "Invalid",
    # Python objects
    "from_python",
    "to_python",
    "pack_command",
    # Exceptions
    "RespError",
    "ReplyError",
    # Error codes
    "ERR_TAG",
    "ERR_LINE",
    "ERR_INTEGER",
    "ERR_LENGTH",
    "ERR_FRAMING",
    "ERR_LIMIT_DEPTH",
    "ERR_LIMIT_SIZE",
    "ERR_VALUE",
    "ERR_INCOMPLETE",
    # Default limits
    "MAX_DEPTH",
    "MAX_BULK_LENGTH",
    "MAX_ARRAY_LENGTH",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())


def parse(data: bytes, **options: Any) -> Value:
    """Decode the first frame in data and return its value.

    Raises RespError: ERR_INCOMPLETE if the frame is cut short, otherwise
    the code of the Invalid outcome.  Accepts the same keyword options as
    decode().
    """
    value, _consumed = decode(data, **options).unwrap()
    return value
