"""RESP2 value model.

Five variants, each a frozen dataclass:

    SimpleString  (+)  — status text, no CR or LF
    Error         (-)  — error text, same shape as SimpleString
    Integer       (:)  — signed 64-bit
    BulkString    ($)  — binary-safe bytes, or None for the null bulk string
    Array         (*)  — tuple of values, or None for the null array

Values are immutable and compare structurally.  Every contract is checked
at construction time, so an instance that exists can always be encoded.
Nothing here knows about the wire format; that lives in _core.py.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from ._constants import CR, INT64_MAX, INT64_MIN, LF
from ._errors import ERR_VALUE, RespError

_BYTES_LIKE = (bytes, bytearray, memoryview)

# "ERR message", "WRONGTYPE message", or a bare "ERR".
_ERROR_KIND = re.compile(rb"([A-Z]+)(?: +|\Z)")


def _as_bytes(val: Any, what: str) -> bytes:
    if isinstance(val, str):
        return val.encode("utf-8")
    if isinstance(val, _BYTES_LIKE):
        return bytes(val)
    raise RespError(ERR_VALUE,
                    "{} must be str or bytes, not {}".format(what, type(val).__name__))


def _line_bytes(val: Any, what: str) -> bytes:
    raw = _as_bytes(val, what)
    if CR in raw or LF in raw:
        raise RespError(ERR_VALUE, "{} must not contain CR or LF".format(what))
    return raw


@dataclass(frozen=True)
class SimpleString:
    text: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", _line_bytes(self.text, "SimpleString text"))


@dataclass(frozen=True)
class Error:
    """An error reply.  ``kind`` and ``message`` split the conventional
    ``KIND message`` layout; ``kind`` is empty when the text has no
    upper-case prefix word."""

    text: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", _line_bytes(self.text, "Error text"))

    @property
    def kind(self) -> str:
        m = _ERROR_KIND.match(self.text)
        return m.group(1).decode("ascii") if m else ""

    @property
    def message(self) -> str:
        m = _ERROR_KIND.match(self.text)
        rest = self.text[m.end():] if m else self.text
        return rest.lstrip(b" ").decode("utf-8", errors="backslashreplace")


@dataclass(frozen=True)
class Integer:
    value: int

    def __post_init__(self) -> None:
        # bool is a subclass of int; True must not quietly become 1.
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise RespError(ERR_VALUE,
                            "Integer value must be int, not {}".format(type(self.value).__name__))
        if self.value < INT64_MIN or self.value > INT64_MAX:
            raise RespError(ERR_VALUE, "integer {} outside int64 range".format(self.value))


@dataclass(frozen=True)
class BulkString:
    data: Optional[bytes]

    def __post_init__(self) -> None:
        if self.data is not None:
            object.__setattr__(self, "data", _as_bytes(self.data, "BulkString data"))

    @property
    def is_null(self) -> bool:
        return self.data is None


@dataclass(frozen=True)
class Array:
    items: Optional[Tuple[Value, ...]]

    def __post_init__(self) -> None:
        if self.items is None:
            return
        if not isinstance(self.items, (list, tuple)):
            raise RespError(ERR_VALUE,
                            "Array items must be a list or tuple, not {}".format(
                                type(self.items).__name__))
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, VALUE_TYPES):
                raise RespError(ERR_VALUE,
                                "Array element must be a RESP value, not {}".format(
                                    type(item).__name__))
        object.__setattr__(self, "items", items)

    @property
    def is_null(self) -> bool:
        return self.items is None


Value = Union[SimpleString, Error, Integer, BulkString, Array]

VALUE_TYPES = (SimpleString, Error, Integer, BulkString, Array)

NULL_BULK_STRING = BulkString(None)
NULL_ARRAY = Array(None)
