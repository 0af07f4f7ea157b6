"""RESP2 core — frame decode and encode.

Wire layout of the five types:

    +<text>\\r\\n                      SimpleString
    -<text>\\r\\n                      Error
    :<decimal>\\r\\n                   Integer
    $<length>\\r\\n<payload>\\r\\n       BulkString  ($-1\\r\\n is null)
    *<count>\\r\\n<element>...         Array       (*-1\\r\\n is null)

Line fields are found by scanning for CR LF.  Bulk payloads are never
scanned: exactly <length> bytes are taken, whatever they contain.

The decoder walks the buffer with an explicit offset and a stack of open
arrays, the same way for every element of every array.  Internally it raises;
``decode`` turns that into one of the three outcomes in _result.py.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, List, NamedTuple, Optional, Tuple, Union

from ._constants import (
    CR,
    CRLF,
    INT64_MAX,
    INT64_MAX_DIGITS,
    INT64_MIN,
    LF,
    MAX_ARRAY_LENGTH,
    MAX_BULK_LENGTH,
    MAX_DEPTH,
    NULL_LENGTH,
    TAG_ARRAY,
    TAG_BULK_STRING,
    TAG_ERROR,
    TAG_INTEGER,
    TAG_SIMPLE_STRING,
)
from ._errors import (
    ERR_FRAMING,
    ERR_INTEGER,
    ERR_LENGTH,
    ERR_LIMIT_DEPTH,
    ERR_LIMIT_SIZE,
    ERR_LINE,
    ERR_TAG,
    ERR_VALUE,
    RespError,
)
from ._result import INCOMPLETE, Complete, DecodeOutcome, Invalid
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

_log = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


class _NeedMore(Exception):
    """Raised internally when the buffer ends inside a frame."""


class _Options(NamedTuple):
    max_depth: int
    max_bulk_length: Optional[int]
    max_array_length: Optional[int]
    canonical: bool


# ── Decimal fields ───────────────────────────────────────────
# Canonical: what encode() emits, so decode/encode round-trips byte-exactly.
# Lenient: also a leading "+" and leading zeros, which some peers send.
# Both are ASCII-only; [0-9] never matches other Unicode digits.
_CANONICAL_DECIMAL = re.compile(rb"0|-?[1-9][0-9]*")
_LENIENT_DECIMAL = re.compile(rb"[+-]?[0-9]+")


def _parse_decimal(body: bytes, what: str, canonical: bool) -> int:
    """Parse an int64 decimal field, rejecting anything else."""
    pattern = _CANONICAL_DECIMAL if canonical else _LENIENT_DECIMAL
    if pattern.fullmatch(body) is None:
        raise RespError(ERR_INTEGER, "malformed {}: {!r}".format(what, bytes(body[:32])))
    negative = body[:1] == b"-"
    digits = body.lstrip(b"+-").lstrip(b"0")
    # Reject before int() ever sees an unbounded digit run.
    if len(digits) > INT64_MAX_DIGITS:
        raise RespError(ERR_INTEGER, "{} outside int64 range".format(what))
    n = int(digits) if digits else 0
    if negative:
        n = -n
    if n < INT64_MIN or n > INT64_MAX:
        raise RespError(ERR_INTEGER, "{} outside int64 range".format(what))
    return n


# ── Lines ────────────────────────────────────────────────────

def _read_line(buf: Buffer, off: int) -> Tuple[bytes, int]:
    """Return the bytes up to the next CR LF and the offset just past it."""
    end = buf.find(CRLF, off)
    if end == -1:
        # A LF, or a CR that is not the last buffered byte, can no longer
        # become part of the delimiter.
        if buf.find(LF, off) != -1 or buf.find(CR, off, len(buf) - 1) != -1:
            raise RespError(ERR_LINE, "bare CR or LF in line")
        raise _NeedMore()
    line = buf[off:end]
    if CR in line or LF in line:
        raise RespError(ERR_LINE, "bare CR or LF in line")
    return line, end + 2


# ── Decode ───────────────────────────────────────────────────

def _decode_scalar(buf: Buffer, off: int, tag: int, opts: _Options) -> Tuple[Value, int]:
    """Decode a non-array value whose tag byte sits just before off."""
    if tag == TAG_SIMPLE_STRING:
        line, off = _read_line(buf, off)
        return SimpleString(bytes(line)), off

    if tag == TAG_ERROR:
        line, off = _read_line(buf, off)
        return Error(bytes(line)), off

    if tag == TAG_INTEGER:
        line, off = _read_line(buf, off)
        return Integer(_parse_decimal(line, "integer", opts.canonical)), off

    if tag == TAG_BULK_STRING:
        line, off = _read_line(buf, off)
        n = _parse_decimal(line, "bulk length", opts.canonical)
        if n == NULL_LENGTH:
            return NULL_BULK_STRING, off
        if n < NULL_LENGTH:
            raise RespError(ERR_LENGTH, "negative bulk length {}".format(n))
        if opts.max_bulk_length is not None and n > opts.max_bulk_length:
            raise RespError(ERR_LIMIT_SIZE,
                            "bulk length {} exceeds {}".format(n, opts.max_bulk_length))
        end = off + n
        # Whatever part of the trailer is already buffered must match CR LF.
        trailer = bytes(buf[end:end + 2])
        if not CRLF.startswith(trailer):
            raise RespError(ERR_FRAMING, "bulk payload not followed by CR LF")
        if len(trailer) < 2:
            raise _NeedMore()
        return BulkString(bytes(buf[off:end])), end + 2

    raise RespError(ERR_TAG, "unknown type byte 0x{:02x}".format(tag))


def _read_array_count(buf: Buffer, off: int, opts: _Options) -> Tuple[int, int]:
    line, off = _read_line(buf, off)
    count = _parse_decimal(line, "array count", opts.canonical)
    if count < NULL_LENGTH:
        raise RespError(ERR_LENGTH, "negative array count {}".format(count))
    if opts.max_array_length is not None and count > opts.max_array_length:
        raise RespError(ERR_LIMIT_SIZE,
                        "array count {} exceeds {}".format(count, opts.max_array_length))
    return count, off


def _decode_one(buf: Buffer, off: int, opts: _Options) -> Tuple[Value, int]:
    """Decode one value from buf at offset.  Returns (value, new offset).

    Arrays are tracked on an explicit stack of (items, count) frames, so
    nesting is bounded by max_depth alone and never by the interpreter's
    recursion limit.
    """
    # One frame per array still waiting for elements, outermost first.
    # Items are grown per element; the declared count is never trusted
    # for allocation.
    open_arrays: List[Tuple[List[Value], int]] = []
    while True:
        if off >= len(buf):
            raise _NeedMore()
        tag = buf[off]
        off += 1

        if tag == TAG_ARRAY:
            if len(open_arrays) + 1 > opts.max_depth:
                raise RespError(ERR_LIMIT_DEPTH,
                                "array nesting exceeds max_depth {}".format(opts.max_depth))
            count, off = _read_array_count(buf, off, opts)
            if count > 0:
                open_arrays.append(([], count))
                continue
            value: Value = NULL_ARRAY if count == NULL_LENGTH else Array(())
        else:
            value, off = _decode_scalar(buf, off, tag, opts)

        # Hand the finished value to its parent, closing every array it fills.
        while open_arrays:
            items, count = open_arrays[-1]
            items.append(value)
            if len(items) < count:
                break
            open_arrays.pop()
            value = Array(items)
        else:
            return value, off


def decode(data: Buffer, *,
           max_depth: int = MAX_DEPTH,
           max_bulk_length: Optional[int] = MAX_BULK_LENGTH,
           max_array_length: Optional[int] = MAX_ARRAY_LENGTH,
           canonical: bool = True) -> DecodeOutcome:
    """Decode the first frame in data.

    Returns Complete(value, consumed), Incomplete() or Invalid(code, reason).
    Bytes after the first frame are left alone; ``consumed`` says where the
    next frame starts.  Pass None for a length limit to disable it.
    """
    buf = data if isinstance(data, (bytes, bytearray)) else bytes(data)
    opts = _Options(max_depth, max_bulk_length, max_array_length, canonical)
    try:
        value, end = _decode_one(buf, 0, opts)
    except _NeedMore:
        return INCOMPLETE
    except RespError as e:
        _log.debug("rejected frame [%s]: %s", e.code, e)
        return Invalid(e.code, str(e))
    return Complete(value, end)


# ── Encode ───────────────────────────────────────────────────

_PREFIX_SIMPLE_STRING = bytes([TAG_SIMPLE_STRING])
_PREFIX_ERROR = bytes([TAG_ERROR])
_PREFIX_INTEGER = bytes([TAG_INTEGER])
_PREFIX_BULK_STRING = bytes([TAG_BULK_STRING])
_PREFIX_ARRAY = bytes([TAG_ARRAY])

_NULL_BULK_FRAME = _PREFIX_BULK_STRING + b"%d" % NULL_LENGTH + CRLF
_NULL_ARRAY_FRAME = _PREFIX_ARRAY + b"%d" % NULL_LENGTH + CRLF


def _encode_flat(val: Any, parts: List[bytes]) -> None:
    """Append the frame of a non-array value, or the header of an array."""
    if isinstance(val, SimpleString):
        parts += (_PREFIX_SIMPLE_STRING, val.text, CRLF)
        return

    if isinstance(val, Error):
        parts += (_PREFIX_ERROR, val.text, CRLF)
        return

    if isinstance(val, Integer):
        parts += (_PREFIX_INTEGER, b"%d" % val.value, CRLF)
        return

    if isinstance(val, BulkString):
        if val.data is None:
            parts.append(_NULL_BULK_FRAME)
            return
        parts += (_PREFIX_BULK_STRING, b"%d" % len(val.data), CRLF, val.data, CRLF)
        return

    if isinstance(val, Array):
        if val.items is None:
            parts.append(_NULL_ARRAY_FRAME)
            return
        parts += (_PREFIX_ARRAY, b"%d" % len(val.items), CRLF)
        return

    raise RespError(ERR_VALUE, "cannot encode {}".format(type(val).__name__))


def encode(value: Value) -> bytes:
    """Encode a value into its RESP2 frame.

    Elements are written depth-first from a stack of iterators, one per
    open array, so any nesting a Value can be built with also encodes.
    """
    parts: List[bytes] = []
    pending: List[Iterator[Any]] = [iter((value,))]
    while pending:
        for val in pending[-1]:
            _encode_flat(val, parts)
            if isinstance(val, Array) and val.items:
                pending.append(iter(val.items))
                break
        else:
            pending.pop()
    return b"".join(parts)
